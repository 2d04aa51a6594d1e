"""
Tests for region resolution from ids and free text.
"""
import pytest

from ingres.exceptions import MalformedIdentifier, RegionNotFound, RegionNotIdentified
from ingres.services.region_resolver import RegionResolver, extract_region_phrase


def test_phrase_from_gazetteer():
    assert extract_region_phrase("what is the groundwater status in karnataka?") == "karnataka"


def test_gazetteer_uses_list_order_not_query_order():
    assert extract_region_phrase("compare punjab and andhra pradesh") == "andhra pradesh"


def test_phrase_from_preposition_pattern():
    assert extract_region_phrase("water levels in bengaluru urban?") == "bengaluru urban"
    assert extract_region_phrase("show the numbers for mysuru") == "mysuru"


def test_context_location_beats_region_and_text():
    context = {"location": "Punjab", "region": "Karnataka"}
    assert extract_region_phrase("status in rajasthan", context) == "Punjab"
    assert extract_region_phrase("status in rajasthan", {"region": "Karnataka"}) == "Karnataka"


def test_blank_context_values_are_ignored():
    assert extract_region_phrase("status in rajasthan", {"location": "  "}) == "rajasthan"


def test_short_phrase_is_not_a_region():
    with pytest.raises(RegionNotIdentified):
        extract_region_phrase("status for xy")


def test_nothing_region_like():
    with pytest.raises(RegionNotIdentified) as exc_info:
        extract_region_phrase("tell me something")
    assert exc_info.value.code == "REGION_NOT_IDENTIFIED"


def test_find_by_name_is_case_insensitive(db):
    assert RegionResolver(db).find_by_name("KARNATAKA").id == 1


def test_find_by_name_lowest_id_wins(db):
    # "an" is in both Rajasthan (3) and Bengaluru Urban (4)
    assert RegionResolver(db).find_by_name("an").id == 3


def test_find_by_name_escapes_wildcards(db):
    with pytest.raises(RegionNotFound) as exc_info:
        RegionResolver(db).find_by_name("%")
    assert exc_info.value.code == "REGION_NOT_FOUND"


def test_resolve_text_unknown_region(db):
    with pytest.raises(RegionNotFound) as exc_info:
        RegionResolver(db).resolve_text("status in atlantis")
    assert exc_info.value.message == "Region 'atlantis' not found in database"


def test_resolve_ids_keeps_order_and_reports_missing(db):
    result = RegionResolver(db).resolve_ids([3, 42, 1, 42])
    assert [r.name for r in result.regions] == ["Rajasthan", "Karnataka"]
    assert result.missing == [42]


def test_resolve_id_list_rejects_bad_token(db):
    with pytest.raises(MalformedIdentifier) as exc_info:
        RegionResolver(db).resolve_id_list("1, abc")
    assert exc_info.value.token == "abc"
    assert exc_info.value.message == "Invalid region ID: abc"


def test_get_region_missing(db):
    with pytest.raises(RegionNotFound):
        RegionResolver(db).get_region(999)


def test_list_regions_ordered_by_name(db):
    rows = RegionResolver(db).list_regions([2, 1])
    assert [r["name"] for r in rows] == ["Karnataka", "Punjab"]
    assert rows[0]["parentId"] is None
    assert list(rows[0].keys()) == [
        "id", "name", "type", "parentId", "code",
        "latitude", "longitude", "createdAt", "updatedAt",
    ]
