"""
Shared pytest fixtures: an in-memory database with a small, hand-checked
set of regions, assessments and historical readings.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ingres.database import get_db, init_db
from ingres.main import app
from ingres.models import Region, GroundwaterAssessment, HistoricalData
from ingres.services.text_generation import get_text_generator

GENERATED_TEXT = """
## Karnataka groundwater

Extraction is rising steadily.

```json
{
  "language": "en",
  "explanation": "Karnataka is Semi-Critical at 78% extraction.",
  "stats": [{"label": "Extraction Ratio", "value": 78, "unit": "%"}],
  "chart": {
    "type": "line",
    "title": "Extraction ratio",
    "xKey": "name",
    "yKey": "value",
    "data": [{"name": "2022", "value": 65}, {"name": "2023", "value": 78}]
  }
}
```
"""

# (id, name, type, parent_id, code)
REGIONS = [
    (1, "Karnataka", "state", None, "KA"),
    (2, "Punjab", "state", None, "PB"),
    (3, "Rajasthan", "state", None, "RJ"),
    (4, "Bengaluru Urban", "district", 1, "KA-BU"),
    (5, "Mysuru", "district", 1, "KA-MY"),
    (6, "Ludhiana", "district", 2, "PB-LU"),
    (7, "Jaipur", "district", 3, "RJ-JP"),
    (8, "Lost District", "district", 99, "XX-LD"),
]

# (id, region_id, year, stage, ratio, trend); ids fix duplicate resolution
ASSESSMENTS = [
    (1, 1, 2022, "Safe", 65.0, "Stable"),
    (2, 1, 2023, "Semi-Critical", 78.0, "Increasing"),
    (3, 2, 2022, "Over-Exploited", 160.0, "Increasing"),
    (4, 2, 2023, "Over-Exploited", 165.5, "Increasing"),
    (5, 3, 2021, "Critical", 95.0, "Stable"),
    (6, 3, 2022, "Critical", 98.0, "Increasing"),
    (7, 4, 2023, "Critical", 92.0, "Increasing"),
    (8, 4, 2023, "Over-Exploited", 110.0, "Increasing"),
    (9, 5, 2023, "Safe", 45.0, "Declining"),
    (10, 6, 2023, "Over-Exploited", 180.0, "Increasing"),
    (11, 7, 2022, "Over-Exploited", 150.0, "Stable"),
    (12, 8, 2023, "Critical", 91.0, "Stable"),
]

# (id, region_id, year, month, parameter_type, value, unit)
HISTORICAL = [
    (1, 1, 2022, 1, "water_level", 10.0, "meters"),
    (2, 1, 2022, 2, "water_level", 12.0, "meters"),
    (3, 1, 2022, 6, "recharge", 20.0, "MCM"),
    (4, 1, 2023, 1, "water_level", 14.0, "meters"),
    (5, 1, 2023, 2, "water_level", 16.0, "meters"),
    (6, 2, 2023, 5, "extraction", 30.5, "MCM"),
]


class FakeTextGenerator:
    """Stands in for the Gemini client; records prompts."""

    def __init__(self, text=GENERATED_TEXT, error=None):
        self.text = text
        self.error = error
        self.is_configured = True
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def seed(session):
    for region_id, name, region_type, parent_id, code in REGIONS:
        session.add(Region(
            id=region_id, name=name, type=region_type, parent_id=parent_id, code=code,
            latitude=12.0 + region_id, longitude=77.0 + region_id,
        ))
    session.flush()

    for assessment_id, region_id, year, stage, ratio, trend in ASSESSMENTS:
        session.add(GroundwaterAssessment(
            id=assessment_id,
            region_id=region_id,
            assessment_year=year,
            annual_recharge=1000.0 + assessment_id,
            extractable_resources=900.0,
            total_extraction=round(900.0 * ratio / 100, 2),
            stage_of_extraction=stage,
            extraction_ratio=ratio,
            trend=trend,
            assessment_date=f"{year}-03-31",
            data_source="CGWB",
        ))

    for point_id, region_id, year, month, parameter_type, value, unit in HISTORICAL:
        session.add(HistoricalData(
            id=point_id, region_id=region_id, year=year, month=month,
            parameter_type=parameter_type, value=value, unit=unit,
        ))
    session.commit()


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def empty_db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def db(empty_db):
    seed(empty_db)
    return empty_db


@pytest.fixture
def text_generator():
    return FakeTextGenerator()


@pytest.fixture
def client(db, text_generator):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_text_generator] = lambda: text_generator
    # not used as a context manager: startup would touch the real database
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
