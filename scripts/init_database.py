"""
Database initialization script.

Creates the tables and seeds sample regions, yearly assessments and
monthly historical readings. Run this once before starting the API server.
"""
import os
import sys
import logging

import numpy as np
from tqdm import tqdm

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ingres.config import settings, ensure_directories
from ingres.database import SessionLocal, init_db
from ingres.models import Region, GroundwaterAssessment, HistoricalData
from ingres.utils.constants import DISTRICT_CENTROIDS, STATE_CENTROIDS

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

SEED_YEARS = range(2019, 2024)
RANDOM_SEED = 42

# Extraction pressure per state (1.0 = balanced)
STATE_STRESS = {
    "Punjab": 1.8,
    "Haryana": 1.6,
    "Rajasthan": 1.4,
    "Gujarat": 1.2,
    "Tamil Nadu": 1.3,
    "Uttar Pradesh": 1.2,
    "Maharashtra": 1.1,
    "Andhra Pradesh": 1.1,
    "Telangana": 1.0,
    "Karnataka": 1.0,
    "Madhya Pradesh": 1.0,
    "West Bengal": 0.8,
}


def stage_for_ratio(ratio: float) -> str:
    """Assessment stage from the stage of extraction (%)."""
    if ratio > 100:
        return "Over-Exploited"
    if ratio > 90:
        return "Critical"
    if ratio > 70:
        return "Semi-Critical"
    return "Safe"


def seed_regions(db):
    """Insert states and their districts; returns {name: Region}."""
    logger.info("Seeding regions...")
    regions = {}

    for name, centroid in STATE_CENTROIDS.items():
        state = Region(
            name=name,
            type="state",
            code=f"ST-{name[:3].upper()}-{len(regions) + 1:02d}",
            latitude=centroid["lat"],
            longitude=centroid["lng"],
        )
        db.add(state)
        regions[name] = state
    db.flush()

    for name, centroid in DISTRICT_CENTROIDS.items():
        parent = regions.get(centroid["state"])
        district = Region(
            name=name,
            type="district",
            parent_id=parent.id if parent else None,
            code=f"DT-{name[:3].upper()}-{len(regions) + 1:02d}",
            latitude=centroid["lat"],
            longitude=centroid["lng"],
        )
        db.add(district)
        regions[name] = district

    db.commit()
    logger.info(f"✅ Seeded {len(regions)} regions")
    return regions


def _state_of(region: Region) -> str:
    if region.type == "state":
        return region.name
    return DISTRICT_CENTROIDS[region.name]["state"]


def seed_assessments(db, regions: dict, rng) -> int:
    """One assessment per region and year with a drifting extraction ratio."""
    logger.info("Seeding assessments...")
    records = []

    for region in tqdm(regions.values(), desc="    Regions"):
        stress = STATE_STRESS.get(_state_of(region), 1.0)
        recharge_base = rng.uniform(800, 2500) if region.type == "state" else rng.uniform(80, 400)
        ratio = 60 * stress + rng.normal(0, 5)
        previous = None

        for year in SEED_YEARS:
            ratio = max(20.0, ratio + rng.normal(1.5 * (stress - 0.9), 2))
            annual_recharge = round(recharge_base * rng.uniform(0.9, 1.1), 2)
            extractable = round(annual_recharge * 0.9, 2)
            total_extraction = round(extractable * ratio / 100, 2)
            rounded_ratio = round(ratio, 2)

            if previous is None or abs(rounded_ratio - previous) < 1:
                trend = "Stable"
            elif rounded_ratio > previous:
                trend = "Increasing"
            else:
                trend = "Declining"
            previous = rounded_ratio

            records.append(GroundwaterAssessment(
                region_id=region.id,
                assessment_year=year,
                annual_recharge=annual_recharge,
                extractable_resources=extractable,
                total_extraction=total_extraction,
                stage_of_extraction=stage_for_ratio(rounded_ratio),
                extraction_ratio=rounded_ratio,
                trend=trend,
                assessment_date=f"{year}-03-31",
                data_source="CGWB Dynamic Ground Water Resources Assessment",
            ))

    db.bulk_save_objects(records)
    db.commit()
    logger.info(f"✅ Loaded {len(records)} assessment records")
    return len(records)


def seed_historical(db, regions: dict, rng, batch_size: int = 5000) -> int:
    """Monthly recharge/extraction/water level plus a yearly June quality reading."""
    logger.info("Seeding historical data...")
    total_records = 0
    records = []

    for region in tqdm(regions.values(), desc="    Regions"):
        stress = STATE_STRESS.get(_state_of(region), 1.0)
        for year in SEED_YEARS:
            year_trend = (year - SEED_YEARS[0]) * (1.5 if stress >= 1.6 else 0.5)
            for month in range(1, 13):
                if 6 <= month <= 9:
                    recharge = rng.uniform(18, 25)
                    extraction = rng.uniform(9, 12)
                    level = rng.uniform(12, 20) - year_trend * 0.5
                elif 3 <= month <= 5:
                    recharge = rng.uniform(2, 5)
                    extraction = rng.uniform(15, 20)
                    level = rng.uniform(20, 35) + year_trend
                else:
                    recharge = rng.uniform(5, 10)
                    extraction = rng.uniform(11, 15)
                    level = rng.uniform(10, 25) + year_trend * 0.7

                records.extend([
                    HistoricalData(region_id=region.id, year=year, month=month,
                                   parameter_type="recharge", value=round(recharge / stress, 2), unit="MCM"),
                    HistoricalData(region_id=region.id, year=year, month=month,
                                   parameter_type="extraction", value=round(extraction * stress, 2), unit="MCM"),
                    HistoricalData(region_id=region.id, year=year, month=month,
                                   parameter_type="water_level", value=round(max(1.0, level), 2), unit="meters"),
                ])

            tds = 500 * stress + rng.uniform(-150, 150)
            records.append(HistoricalData(
                region_id=region.id, year=year, month=6,
                parameter_type="quality", value=round(max(200.0, tds), 1), unit="mg/L",
            ))

            if len(records) >= batch_size:
                db.bulk_save_objects(records)
                db.commit()
                total_records += len(records)
                records = []

    # Save remaining records
    if records:
        db.bulk_save_objects(records)
        db.commit()
        total_records += len(records)

    logger.info(f"✅ Loaded {total_records} historical records")
    return total_records


def main():
    """Main initialization function."""
    print("=" * 60)
    print("💧 INGRES Groundwater API - Database Initialization")
    print("=" * 60)

    print("\n📊 Initializing database...")
    ensure_directories()
    init_db()
    print(f"  ✅ Database ready at: {settings.database_url}")

    db = SessionLocal()
    rng = np.random.default_rng(RANDOM_SEED)

    try:
        existing = db.query(Region).count()
        if existing > 0:
            print(f"\n⚠️  Database already contains {existing} regions.")
            response = input("   Do you want to clear and reload? (y/N): ").strip().lower()
            if response == 'y':
                print("   Clearing existing data...")
                db.query(HistoricalData).delete()
                db.query(GroundwaterAssessment).delete()
                db.query(Region).update({Region.parent_id: None})
                db.query(Region).delete()
                db.commit()
                print("   ✅ Cleared all existing data")
            else:
                print("   Keeping existing data. Exiting.")
                return

        regions = seed_regions(db)
        assessment_count = seed_assessments(db, regions, rng)
        historical_count = seed_historical(db, regions, rng)

        print("\n" + "=" * 60)
        print("✅ Database initialization complete!")
        print("-" * 40)
        print(f"  📊 Regions: {len(regions):,}")
        print(f"  📊 Assessments: {assessment_count:,}")
        print(f"  📊 Historical records: {historical_count:,}")
        print("=" * 60)
        print("\n🚀 You can now start the API server with: python run.py")

    except Exception as e:
        logger.error(f"Error during initialization: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
