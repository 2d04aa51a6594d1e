"""
Tests for latest / per-year assessment selection and historical reads.
"""
import pytest

from ingres.exceptions import InvalidParameterType, InvalidRange, InvalidRegionType, RegionNotFound
from ingres.models import HistoricalData, Region
from ingres.services.assessment_selector import AssessmentSelector, HistoricalFilters


def test_select_latest_picks_newest_year(db):
    latest = AssessmentSelector(db).select_latest(1)
    assert latest.assessment_year == 2023
    assert latest.stage_of_extraction == "Semi-Critical"
    assert latest.extraction_ratio == 78.0


def test_select_latest_duplicate_year_lowest_id(db):
    # Bengaluru Urban has two 2023 rows (ids 7 and 8)
    assert AssessmentSelector(db).select_latest(4).id == 7


def test_select_latest_without_assessments(db):
    db.add(Region(id=9, name="Empty Block", type="block", parent_id=1, code="KA-EB"))
    db.commit()
    assert AssessmentSelector(db).select_latest(9) is None


def test_select_by_year(db):
    selector = AssessmentSelector(db)
    assert selector.select_by_year(1, 2022).stage_of_extraction == "Safe"
    assert selector.select_by_year(1, 1999) is None


def test_select_all_newest_first(db):
    years = [a.assessment_year for a in AssessmentSelector(db).select_all(3)]
    assert years == [2022, 2021]


def test_list_latest_one_row_per_region(db):
    items = AssessmentSelector(db).list_latest(limit=100)
    names = [item["region"]["name"] for item in items]
    assert names == [
        "Bengaluru Urban", "Karnataka", "Lost District", "Ludhiana", "Mysuru", "Punjab",
        "Jaipur", "Rajasthan",
    ]
    bengaluru = items[0]
    assert bengaluru["assessment"]["extractionRatio"] == 92.0
    assert set(bengaluru["region"]) == {"id", "name", "type", "code", "latitude", "longitude"}


def test_list_latest_filters(db):
    selector = AssessmentSelector(db)
    states = selector.list_latest(region_type="state", limit=10)
    assert [(i["region"]["name"], i["assessment"]["year"]) for i in states] == [
        ("Karnataka", 2023), ("Punjab", 2023), ("Rajasthan", 2022),
    ]
    single = selector.list_latest(region_id=3)
    assert len(single) == 1 and single[0]["assessment"]["year"] == 2022


def test_list_latest_pagination(db):
    page = AssessmentSelector(db).list_latest(limit=2, offset=1)
    assert [i["region"]["name"] for i in page] == ["Karnataka", "Lost District"]


def test_list_latest_rejects_region_type(db):
    with pytest.raises(InvalidRegionType):
        AssessmentSelector(db).list_latest(region_type="county")


def test_historical_ordering(db):
    result = AssessmentSelector(db).select_historical(1, HistoricalFilters())
    assert result["region"] == {"id": 1, "name": "Karnataka"}
    assert [(p["year"], p["month"]) for p in result["data"]] == [
        (2023, 2), (2023, 1), (2022, 6), (2022, 2), (2022, 1),
    ]


def add_annual_reading(db):
    db.add(HistoricalData(
        id=50, region_id=1, year=2023, month=None,
        parameter_type="quality", value=7.2, unit="pH",
    ))
    db.commit()


def test_annual_reading_sorts_after_monthly_points(db):
    add_annual_reading(db)
    selector = AssessmentSelector(db)

    data = selector.select_historical(1, HistoricalFilters())["data"]
    assert [(p["year"], p["month"]) for p in data] == [
        (2023, 2), (2023, 1), (2023, None), (2022, 6), (2022, 2), (2022, 1),
    ]

    page = selector.select_historical(1, HistoricalFilters(limit=2, offset=1))["data"]
    assert [(p["year"], p["month"]) for p in page] == [(2023, 1), (2023, None)]

    rows = selector.historical_rows(region_ids=[1], start_year=2023)
    assert [(r["year"], r["month"]) for r in rows] == [(2023, 2), (2023, 1), (2023, None)]


def test_historical_queries_pin_null_month_position(db, engine):
    from sqlalchemy import event

    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", capture)
    try:
        selector = AssessmentSelector(db)
        selector.select_historical(1, HistoricalFilters())
        selector.historical_rows(region_ids=[1])
    finally:
        event.remove(engine, "before_cursor_execute", capture)

    ordered = [s for s in statements if "FROM historical_data" in s and "ORDER BY" in s]
    assert len(ordered) == 2
    assert all("historical_data.month DESC NULLS LAST" in s for s in ordered)


def test_historical_filters(db):
    selector = AssessmentSelector(db)
    recharge = selector.select_historical(1, HistoricalFilters(parameter_type="recharge"))["data"]
    assert [p["value"] for p in recharge] == [20.0]

    recent = selector.select_historical(1, HistoricalFilters(start_year=2023))["data"]
    assert {p["year"] for p in recent} == {2023}

    paged = selector.select_historical(1, HistoricalFilters(limit=2, offset=1))["data"]
    assert [(p["year"], p["month"]) for p in paged] == [(2023, 1), (2022, 6)]


def test_historical_yearly_view(db):
    data = AssessmentSelector(db).select_historical(1, HistoricalFilters(view_mode="yearly"))["data"]
    assert [(p["year"], p["parameterType"], p["value"], p["readings"]) for p in data] == [
        (2023, "water_level", 15.0, 2),
        (2022, "recharge", 20.0, 1),
        (2022, "water_level", 11.0, 2),
    ]
    assert all(p["month"] is None for p in data)


def test_historical_validation(db):
    selector = AssessmentSelector(db)
    with pytest.raises(RegionNotFound):
        selector.select_historical(999, HistoricalFilters())
    with pytest.raises(InvalidRange):
        selector.select_historical(1, HistoricalFilters(start_year=2023, end_year=2022))
    with pytest.raises(InvalidParameterType):
        selector.select_historical(1, HistoricalFilters(parameter_type="rainfall"))


def test_historical_limit_is_clamped():
    assert HistoricalFilters(limit=5000).validate().limit == 1000


def test_assessment_rows_stage_filter(db):
    rows = AssessmentSelector(db).assessment_rows(stage="Critical")
    assert [r["id"] for r in rows] == [7, 12, 6, 5]
    assert rows[0]["regionName"] == "Bengaluru Urban"


def test_historical_rows_for_regions(db):
    rows = AssessmentSelector(db).historical_rows(region_ids=[2])
    assert len(rows) == 1
    assert rows[0]["regionCode"] == "PB"
    assert rows[0]["parameterType"] == "extraction"
