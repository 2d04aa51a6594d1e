"""
Smoke test for the groundwater API endpoints.
Run this while the server is running in a separate terminal.
"""
import requests

BASE_URL = "http://localhost:8000/api"


def check_endpoint(name, url, params=None, json_body=None):
    """Call an endpoint and print a short summary of the result."""
    print(f"\n{'='*60}")
    print(f"Testing: {name}")
    print(f"URL: {url}")
    if params:
        print(f"Params: {params}")
    print("-" * 60)

    try:
        if json_body is not None:
            r = requests.post(url, json=json_body, timeout=30)
        else:
            r = requests.get(url, params=params, timeout=10)
    except requests.RequestException as e:
        print(f"❌ Request failed: {e}")
        return

    if r.status_code != 200:
        print(f"❌ Error {r.status_code}: {r.text[:200]}")
        return

    if r.headers.get("content-type", "").startswith("text/csv"):
        lines = r.text.splitlines()
        print(f"✅ Success! CSV with {len(lines)} lines, header: {lines[0] if lines else ''}")
        return

    data = r.json()
    if isinstance(data, dict):
        print(f"✅ Success! Keys: {list(data.keys())}")
        for key in list(data.keys())[:3]:
            val = data[key]
            if isinstance(val, list) and len(val) > 0:
                print(f"  - {key}: {len(val)} items, first: {val[0] if len(str(val[0])) < 100 else '...'}")
            elif isinstance(val, dict):
                print(f"  - {key}: {list(val.keys())[:5]}...")
            else:
                print(f"  - {key}: {val}")
    else:
        print(f"✅ Success! {len(data)} items")


def main():
    print("🧪 Testing INGRES Groundwater API Endpoints")
    print("=" * 60)

    groundwater = f"{BASE_URL}/groundwater"

    check_endpoint("Health", f"{BASE_URL}/health")
    check_endpoint("Current Assessment", f"{groundwater}/current-assessment", {"limit": 5})
    check_endpoint("Historical Data (yearly)", f"{groundwater}/historical-data",
                   {"region_id": 1, "view_mode": "yearly"})
    check_endpoint("Compare Regions", f"{groundwater}/compare-regions", {"region_ids": "1,2,3"})
    check_endpoint("Critical Units", f"{groundwater}/critical-units", {"stage": "Critical,Over-Exploited"})
    check_endpoint("Export (csv)", f"{groundwater}/export", {"format": "csv", "data_type": "assessments"})
    check_endpoint("Simple Export (json)", f"{groundwater}/simple-export",
                   {"format": "json", "type": "regions"})
    check_endpoint("Chat Query", f"{groundwater}/chat-query",
                   json_body={"query": "What is the groundwater status in Punjab?"})
    check_endpoint("AI Chat", f"{BASE_URL}/ai/chat",
                   json_body={"query": "Is Rajasthan critical?"})

    print("\n" + "=" * 60)
    print("🏁 Testing Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
