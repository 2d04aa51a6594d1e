"""
Constants for groundwater categories, Indian geography and request limits.
"""

# Administrative levels, coarsest first
REGION_TYPES = ["state", "district", "block", "mandal", "taluk"]

# Stage of extraction categories
STAGES = ["Safe", "Semi-Critical", "Critical", "Over-Exploited"]
CRITICAL_STAGES = ["Critical", "Over-Exploited", "Semi-Critical"]
DEFAULT_CRITICAL_STAGES = ["Critical", "Over-Exploited"]

TRENDS = ["Increasing", "Stable", "Declining"]

PARAMETER_TYPES = ["recharge", "extraction", "water_level", "quality"]

# Field groups selectable in region comparison; provenance is always included
COMPARISON_PARAMETERS = {
    "recharge": ["annualRecharge", "extractableResources"],
    "extraction": ["totalExtraction", "extractionRatio"],
    "stage": ["stageOfExtraction"],
    "trend": ["trend"],
}
PROVENANCE_FIELDS = ["assessmentDate", "dataSource"]

# Pagination (default, ceiling)
ASSESSMENT_LIMITS = (10, 100)
HISTORICAL_LIMITS = (100, 1000)
CRITICAL_UNIT_LIMITS = (50, 200)
CHAT_HISTORICAL_RECORDS = 10

MIN_YEAR = 1900
# Export filters accept planning years a little past today
EXPORT_YEAR_HEADROOM = 10

EXPORT_FORMATS = ["csv", "json", "excel"]
EXPORT_DATA_TYPES = ["assessments", "historical", "regions", "critical"]
SIMPLE_EXPORT_FORMATS = ["json", "csv"]
SIMPLE_EXPORT_TYPES = ["assessments", "regions"]

# Free-text gazetteer: checked in list order, first substring match wins
REGION_GAZETTEER = [
    "andhra pradesh", "arunachal pradesh", "assam", "bihar", "chhattisgarh",
    "goa", "gujarat", "haryana", "himachal pradesh", "jharkhand", "karnataka",
    "kerala", "madhya pradesh", "maharashtra", "manipur", "meghalaya", "mizoram",
    "nagaland", "odisha", "punjab", "rajasthan", "sikkim", "tamil nadu",
    "telangana", "tripura", "uttar pradesh", "uttarakhand", "west bengal",
    "delhi", "mumbai", "bangalore", "chennai", "hyderabad", "kolkata", "pune",
]

# Intent keywords for the chat query classifier, highest priority first
STATUS_KEYWORDS = ["status", "assessment", "current"]
HISTORICAL_KEYWORDS = ["historical", "trend", "over time"]
CRITICAL_KEYWORDS = ["critical", "over-exploited", "safe"]

# Capability set per user role (roles are not stored by this service)
ROLE_CAPABILITIES = {
    "Public": {"current_assessment", "historical_data", "export_csv"},
    "Researcher": {
        "current_assessment", "historical_data", "critical_units",
        "export_csv", "export_json", "chat_query",
    },
    "Policymaker": {
        "current_assessment", "historical_data", "critical_units",
        "compare_regions", "export_csv", "export_json", "export_excel", "chat_query",
    },
    "Admin": {
        "current_assessment", "historical_data", "critical_units",
        "compare_regions", "export_csv", "export_json", "export_excel", "chat_query",
    },
}

# State centroids (approximate lat/lng)
STATE_CENTROIDS = {
    "Andhra Pradesh": {"lat": 15.9129, "lng": 79.7400},
    "Gujarat": {"lat": 22.2587, "lng": 71.1924},
    "Haryana": {"lat": 29.0588, "lng": 76.0856},
    "Karnataka": {"lat": 15.3173, "lng": 75.7139},
    "Madhya Pradesh": {"lat": 22.9734, "lng": 78.6569},
    "Maharashtra": {"lat": 19.7515, "lng": 75.7139},
    "Punjab": {"lat": 31.1471, "lng": 75.3412},
    "Rajasthan": {"lat": 27.0238, "lng": 74.2179},
    "Tamil Nadu": {"lat": 11.1271, "lng": 78.6569},
    "Telangana": {"lat": 18.1124, "lng": 79.0193},
    "Uttar Pradesh": {"lat": 26.8467, "lng": 80.9462},
    "West Bengal": {"lat": 22.9868, "lng": 87.8550},
}

# Sample district centroids used when seeding
DISTRICT_CENTROIDS = {
    "Jaipur": {"lat": 26.9124, "lng": 75.7873, "state": "Rajasthan"},
    "Jodhpur": {"lat": 26.2389, "lng": 73.0243, "state": "Rajasthan"},
    "Bikaner": {"lat": 28.0229, "lng": 73.3119, "state": "Rajasthan"},
    "Pune": {"lat": 18.5204, "lng": 73.8567, "state": "Maharashtra"},
    "Nagpur": {"lat": 21.1458, "lng": 79.0882, "state": "Maharashtra"},
    "Aurangabad": {"lat": 19.8762, "lng": 75.3433, "state": "Maharashtra"},
    "Bengaluru Urban": {"lat": 12.9716, "lng": 77.5946, "state": "Karnataka"},
    "Mysuru": {"lat": 12.2958, "lng": 76.6394, "state": "Karnataka"},
    "Tumakuru": {"lat": 13.3379, "lng": 77.1173, "state": "Karnataka"},
    "Chennai": {"lat": 13.0827, "lng": 80.2707, "state": "Tamil Nadu"},
    "Coimbatore": {"lat": 11.0168, "lng": 76.9558, "state": "Tamil Nadu"},
    "Ahmedabad": {"lat": 23.0225, "lng": 72.5714, "state": "Gujarat"},
    "Rajkot": {"lat": 22.3039, "lng": 70.8022, "state": "Gujarat"},
    "Hyderabad": {"lat": 17.3850, "lng": 78.4867, "state": "Telangana"},
    "Warangal": {"lat": 17.9784, "lng": 79.5941, "state": "Telangana"},
    "Ludhiana": {"lat": 30.9010, "lng": 75.8573, "state": "Punjab"},
    "Amritsar": {"lat": 31.6340, "lng": 74.8723, "state": "Punjab"},
    "Gurugram": {"lat": 28.4595, "lng": 77.0266, "state": "Haryana"},
    "Lucknow": {"lat": 26.8467, "lng": 80.9462, "state": "Uttar Pradesh"},
    "Agra": {"lat": 27.1767, "lng": 78.0081, "state": "Uttar Pradesh"},
    "Kolkata": {"lat": 22.5726, "lng": 88.3639, "state": "West Bengal"},
    "Kurnool": {"lat": 15.8281, "lng": 78.0373, "state": "Andhra Pradesh"},
}
