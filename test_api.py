"""
HTTP-level tests: status codes, error bodies and response shapes.
"""
import csv
import io

from ingres.exceptions import UpstreamError
from ingres.services.text_generation import PLACEHOLDER_STATS
from ingres.utils.constants import PARAMETER_TYPES, REGION_TYPES

GROUNDWATER = "/api/groundwater"


def assert_error(response, status, code):
    assert response.status_code == status
    body = response.json()
    assert body["code"] == code
    assert isinstance(body["error"], str) and body["error"]


# --- Metadata ---

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["chat_query"] == f"{GROUNDWATER}/chat-query"


def test_roles(client):
    roles = client.get("/api/roles").json()["roles"]
    assert "compare_regions" not in roles["Public"]
    assert roles["Researcher"] == sorted(roles["Researcher"])


def test_unknown_route(client):
    assert_error(client.get("/api/nowhere"), 404, "NOT_FOUND")


def test_query_descriptions_list_accepted_values(client):
    paths = client.get("/openapi.json").json()["paths"]

    def description(path, name):
        params = paths[f"{GROUNDWATER}/{path}"]["get"]["parameters"]
        return next(p["description"] for p in params if p["name"] == name)

    region_types = description("current-assessment", "region_type")
    assert all(t in region_types for t in REGION_TYPES)
    parameter_types = description("historical-data", "parameter_type")
    assert all(t in parameter_types for t in PARAMETER_TYPES)


# --- Current assessment ---

def test_current_assessment(client):
    response = client.get(f"{GROUNDWATER}/current-assessment", params={"region_type": "state"})
    assert response.status_code == 200
    body = response.json()
    assert [item["region"]["name"] for item in body] == ["Karnataka", "Punjab", "Rajasthan"]
    assert body[0]["assessment"]["stageOfExtraction"] == "Semi-Critical"


def test_current_assessment_errors(client):
    url = f"{GROUNDWATER}/current-assessment"
    assert_error(client.get(url, params={"region_type": "county"}), 400, "INVALID_REGION_TYPE")
    assert_error(client.get(url, params={"limit": "-1"}), 400, "INVALID_LIMIT")
    assert_error(client.get(url, params={"offset": "-1"}), 400, "INVALID_OFFSET")
    assert_error(client.get(url, params={"region_id": "one"}), 400, "INVALID_REGION_ID")


# --- Historical data ---

def test_historical_data(client):
    response = client.get(f"{GROUNDWATER}/historical-data", params={"region_id": "1", "view_mode": "yearly"})
    assert response.status_code == 200
    body = response.json()
    assert body["region"] == {"id": 1, "name": "Karnataka"}
    assert body["data"][0] == {
        "year": 2023, "month": None, "parameterType": "water_level",
        "value": 15.0, "unit": "meters", "readings": 2,
    }


def test_historical_data_errors(client):
    url = f"{GROUNDWATER}/historical-data"
    assert_error(client.get(url), 400, "MISSING_REGION_ID")
    assert_error(client.get(url, params={"region_id": "999"}), 404, "REGION_NOT_FOUND")
    assert_error(client.get(url, params={"region_id": "1", "start_year": "2023", "end_year": "2022"}),
                 400, "INVALID_YEAR_RANGE")
    assert_error(client.get(url, params={"region_id": "1", "parameter_type": "rain"}),
                 400, "INVALID_PARAMETER_TYPE")


# --- Comparison and critical units ---

def test_compare_regions(client):
    response = client.get(f"{GROUNDWATER}/compare-regions", params={"region_ids": "1,3"})
    assert response.status_code == 200
    body = response.json()
    assert body["comparisonYear"] == 2023
    assert body["missingRegions"] == [3]
    assert body["regions"][0]["region"]["code"] == "KA"


def test_compare_regions_errors(client):
    url = f"{GROUNDWATER}/compare-regions"
    assert_error(client.get(url), 400, "MISSING_REGION_IDS")
    response = client.get(url, params={"region_ids": "1,abc"})
    assert_error(response, 400, "INVALID_REGION_ID_FORMAT")
    assert response.json()["error"] == "Invalid region ID: abc"
    assert_error(client.get(url, params={"region_ids": "42"}), 404, "NO_DATA_FOUND")
    assert_error(client.get(url, params={"region_ids": "1", "year": "1990"}), 404, "NO_DATA_FOR_YEAR")
    assert_error(client.get(url, params={"region_ids": "1", "parameters": "rain"}), 400, "INVALID_PARAMETERS")


def test_critical_units(client):
    response = client.get(f"{GROUNDWATER}/critical-units", params={"state_id": "2"})
    assert response.status_code == 200
    body = response.json()
    assert [u["region"]["name"] for u in body["criticalUnits"]] == ["Ludhiana", "Punjab"]
    assert body["criticalUnits"][0]["region"]["state"] == "Punjab"
    assert body["summary"] == {"totalCritical": 0, "totalOverExploited": 2}


def test_critical_units_errors(client):
    url = f"{GROUNDWATER}/critical-units"
    assert_error(client.get(url, params={"stage": "Safe"}), 400, "INVALID_STAGE")
    assert_error(client.get(url, params={"state_id": "99"}), 404, "STATE_NOT_FOUND")
    assert_error(client.get(url, params={"state_id": "x"}), 400, "INVALID_STATE_ID")


# --- Export ---

def test_export_csv(client):
    response = client.get(f"{GROUNDWATER}/export", params={"format": "csv", "data_type": "assessments", "region_ids": "1"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="assessments_')
    assert disposition.endswith('.csv"')
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [row["assessmentYear"] for row in rows] == ["2023", "2022"]
    assert rows[0]["regionName"] == "Karnataka"


def test_export_json(client):
    response = client.get(f"{GROUNDWATER}/export", params={"format": "json", "data_type": "regions"})
    assert response.status_code == 200
    body = response.json()
    assert body["exportType"] == "regions"
    assert body["recordCount"] == 8
    assert "X-Export-Format" not in response.headers


def test_export_excel(client):
    response = client.get(f"{GROUNDWATER}/export", params={"format": "excel", "data_type": "critical"})
    assert response.status_code == 200
    assert response.headers["x-export-format"] == "excel-json"
    body = response.json()
    assert body["exportType"] == "critical_areas"
    assert body["recordCount"] == 9
    assert "note" in body


def test_export_errors(client):
    url = f"{GROUNDWATER}/export"
    assert_error(client.get(url, params={"data_type": "regions"}), 400, "MISSING_FORMAT")
    assert_error(client.get(url, params={"format": "xml", "data_type": "regions"}), 400, "INVALID_FORMAT")
    assert_error(client.get(url, params={"format": "csv", "data_type": "users"}), 400, "INVALID_DATA_TYPE")
    assert_error(client.get(url, params={"format": "csv", "data_type": "regions", "region_ids": "a"}),
                 400, "INVALID_REGION_IDS")


def test_simple_export(client):
    response = client.get(f"{GROUNDWATER}/simple-export", params={"format": "csv", "type": "regions"})
    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="regions_export.csv"'
    assert response.text.split("\n")[0] == "id,name,type,parentId,code,latitude,longitude,createdAt,updatedAt"

    listing = client.get(f"{GROUNDWATER}/simple-export", params={"format": "json", "type": "assessments"})
    assert isinstance(listing.json(), list)
    assert len(listing.json()) == 12

    assert_error(client.get(f"{GROUNDWATER}/simple-export", params={"format": "json", "type": "users"}),
                 400, "INVALID_TYPE")


# --- Chat query ---

def test_chat_query(client):
    response = client.post(f"{GROUNDWATER}/chat-query", json={"query": "What is the groundwater status in Karnataka?"})
    assert response.status_code == 200
    body = response.json()
    assert body["response"]["type"] == "assessment_data"
    assert body["response"]["summary"] == (
        "Karnataka has Semi-Critical groundwater extraction levels with 78% extraction ratio "
        "and increasing trend as of 2023."
    )


def test_chat_query_errors(client):
    url = f"{GROUNDWATER}/chat-query"
    assert_error(client.post(url, json={}), 400, "MISSING_REQUIRED_FIELD")
    assert_error(client.post(url, json={"query": 5}), 400, "MISSING_REQUIRED_FIELD")
    assert_error(client.post(url, json={"query": "  "}), 400, "INVALID_QUERY")
    assert_error(client.post(url, json={"query": "tell me something"}), 404, "REGION_NOT_IDENTIFIED")
    assert_error(client.post(url, json={"query": "status in atlantis"}), 404, "REGION_NOT_FOUND")
    assert_error(client.post(url, content="not json", headers={"content-type": "application/json"}),
                 400, "INVALID_REQUEST")


# --- Text generation ---

def test_gemini_passthrough(client, text_generator):
    response = client.post("/api/ai/gemini", json={"query": "Explain groundwater stages"})
    assert response.status_code == 200
    body = response.json()
    assert body["response"]["type"] == "text"
    assert body["response"]["summary"] == text_generator.text
    assert "User query: Explain groundwater stages" in text_generator.prompts[0]


def test_gemini_passthrough_upstream_failure(client, text_generator):
    text_generator.error = UpstreamError("Gemini API error: 503 Service Unavailable")
    assert_error(client.post("/api/ai/gemini", json={"query": "hi"}), 502, "UPSTREAM_ERROR")


def test_ai_chat_grounded(client, text_generator):
    response = client.post("/api/ai/chat", json={"query": "What is the groundwater status in Karnataka?"})
    assert response.status_code == 200
    body = response.json()
    assert body["insight"]["placeholder"] is False
    assert body["insight"]["chart"]["type"] == "line"
    assert body["insight"]["stats"][0]["value"] == 78
    assert body["grounding"]["type"] == "assessment_data"
    assert body["upstream"] is None
    assert "Database facts" in text_generator.prompts[0]


def test_ai_chat_without_region(client):
    body = client.post("/api/ai/chat", json={"query": "tell me something"}).json()
    assert body["grounding"] is None
    assert body["insight"]["placeholder"] is False


def test_ai_chat_degrades_on_upstream_failure(client, text_generator):
    text_generator.error = UpstreamError("GEMINI_API_KEY is not configured on the server",
                                         code="GENERATION_NOT_CONFIGURED")
    response = client.post("/api/ai/chat", json={"query": "Is Rajasthan critical?"})
    assert response.status_code == 200
    body = response.json()
    assert body["upstream"] == {
        "error": "GEMINI_API_KEY is not configured on the server",
        "code": "GENERATION_NOT_CONFIGURED",
        "status": 502,
    }
    assert body["insight"]["placeholder"] is True
    assert [s["label"] for s in body["insight"]["stats"]] == [s["label"] for s in PLACEHOLDER_STATS]
    assert body["grounding"]["type"] == "critical_status"
