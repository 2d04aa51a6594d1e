"""
Assessment selector - picks latest / requested-year assessments and
historical readings for regions.

Duplicate rows for the same region and year are resolved by the lowest
assessment id everywhere a single "latest" row is chosen.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from ingres.exceptions import InvalidRegionType
from ingres.models.assessment import GroundwaterAssessment
from ingres.models.historical_data import HistoricalData
from ingres.models.region import Region
from ingres.services.region_resolver import RegionResolver
from ingres.utils.aggregators import aggregate_by_view_mode
from ingres.utils.constants import HISTORICAL_LIMITS, REGION_TYPES
from ingres.utils.validators import validate_parameter_type, validate_year_range


@dataclass
class HistoricalFilters:
    """Filters for a historical read; validated by ``validate``."""
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    parameter_type: Optional[str] = None
    limit: int = HISTORICAL_LIMITS[0]
    offset: int = 0
    view_mode: str = "raw"

    def validate(self) -> "HistoricalFilters":
        validate_year_range(self.start_year, self.end_year)
        validate_parameter_type(self.parameter_type)
        self.limit = min(self.limit, HISTORICAL_LIMITS[1])
        return self


def latest_assessment_ids(db: Session):
    """
    Subquery of one assessment id per region: the row with that region's
    maximum assessment year, lowest id among duplicates.
    """
    latest_years = db.query(
        GroundwaterAssessment.region_id.label("region_id"),
        func.max(GroundwaterAssessment.assessment_year).label("max_year")
    ).group_by(GroundwaterAssessment.region_id).subquery("latest_years")

    return db.query(
        func.min(GroundwaterAssessment.id).label("assessment_id")
    ).select_from(GroundwaterAssessment).join(
        latest_years,
        and_(
            GroundwaterAssessment.region_id == latest_years.c.region_id,
            GroundwaterAssessment.assessment_year == latest_years.c.max_year,
        )
    ).group_by(GroundwaterAssessment.region_id).subquery("latest_assessments")


def assessment_row(assessment: GroundwaterAssessment, region: Optional[Region]) -> Dict[str, Any]:
    """Flat assessment row (export shape)."""
    return {
        "id": assessment.id,
        "regionId": assessment.region_id,
        "regionName": region.name if region else None,
        "regionType": region.type if region else None,
        "regionCode": region.code if region else None,
        "assessmentYear": assessment.assessment_year,
        "annualRecharge": assessment.annual_recharge,
        "extractableResources": assessment.extractable_resources,
        "totalExtraction": assessment.total_extraction,
        "stageOfExtraction": assessment.stage_of_extraction,
        "extractionRatio": assessment.extraction_ratio,
        "trend": assessment.trend,
        "assessmentDate": assessment.assessment_date,
        "dataSource": assessment.data_source,
    }


class AssessmentSelector:
    """Business logic for assessment and historical reads."""

    def __init__(self, db: Session):
        self.db = db
        self.resolver = RegionResolver(db)

    def select_latest(self, region_id: int) -> Optional[GroundwaterAssessment]:
        """
        Latest assessment for a region, or None when it has none.

        Ties on the maximum year go to the lowest id.
        """
        return self.db.query(GroundwaterAssessment).filter(
            GroundwaterAssessment.region_id == region_id
        ).order_by(
            GroundwaterAssessment.assessment_year.desc(),
            GroundwaterAssessment.id.asc()
        ).first()

    def select_by_year(self, region_id: int, year: int) -> Optional[GroundwaterAssessment]:
        """Assessment for a region in a given year, or None."""
        return self.db.query(GroundwaterAssessment).filter(
            GroundwaterAssessment.region_id == region_id,
            GroundwaterAssessment.assessment_year == year
        ).order_by(GroundwaterAssessment.id.asc()).first()

    def select_all(self, region_id: int) -> List[GroundwaterAssessment]:
        """Every assessment of a region, newest year first."""
        return self.db.query(GroundwaterAssessment).filter(
            GroundwaterAssessment.region_id == region_id
        ).order_by(
            GroundwaterAssessment.assessment_year.desc(),
            GroundwaterAssessment.id.asc()
        ).all()

    def list_latest(
        self,
        region_id: Optional[int] = None,
        region_type: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        """
        Latest assessment per region, optionally for one region or one level.

        Returns:
            List of {region, assessment} dicts ordered by year desc, then name
        """
        if region_type and region_type not in REGION_TYPES:
            raise InvalidRegionType(
                f"Invalid region_type. Must be one of: {', '.join(REGION_TYPES)}"
            )

        latest = latest_assessment_ids(self.db)
        query = self.db.query(Region, GroundwaterAssessment).join(
            GroundwaterAssessment, Region.id == GroundwaterAssessment.region_id
        ).join(
            latest, GroundwaterAssessment.id == latest.c.assessment_id
        )

        if region_id is not None:
            query = query.filter(Region.id == region_id)
        if region_type:
            query = query.filter(Region.type == region_type)

        results = query.order_by(
            GroundwaterAssessment.assessment_year.desc(),
            Region.name,
            Region.id
        ).limit(limit).offset(offset).all()

        return [
            {
                "region": {
                    "id": region.id,
                    "name": region.name,
                    "type": region.type,
                    "code": region.code,
                    "latitude": region.latitude,
                    "longitude": region.longitude,
                },
                "assessment": assessment.to_dict(),
            }
            for region, assessment in results
        ]

    def select_historical(self, region_id: int, filters: HistoricalFilters) -> Dict[str, Any]:
        """
        Historical points for a region, year desc then month desc.

        Annual points (no month) sort after the monthly points of their year.

        Raises:
            RegionNotFound: region id does not exist
            InvalidRange / InvalidParameterType: bad filters
        """
        filters.validate()
        region = self.resolver.get_region(region_id)

        query = self.db.query(HistoricalData).filter(HistoricalData.region_id == region_id)
        if filters.start_year is not None:
            query = query.filter(HistoricalData.year >= filters.start_year)
        if filters.end_year is not None:
            query = query.filter(HistoricalData.year <= filters.end_year)
        if filters.parameter_type:
            query = query.filter(HistoricalData.parameter_type == filters.parameter_type)

        query = query.order_by(
            HistoricalData.year.desc(),
            HistoricalData.month.desc().nulls_last(),
            HistoricalData.id.asc()
        )

        if filters.view_mode == "yearly":
            points = aggregate_by_view_mode([p.to_dict() for p in query.all()], "yearly")
            points = points[filters.offset:filters.offset + filters.limit]
        else:
            points = [p.to_dict() for p in query.limit(filters.limit).offset(filters.offset).all()]

        return {
            "region": {"id": region.id, "name": region.name},
            "data": points,
        }

    def assessment_rows(
        self,
        region_ids: Optional[List[int]] = None,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
        stage: Optional[str] = None,
        region_id: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Flat assessment rows for export, newest year first."""
        query = self.db.query(GroundwaterAssessment, Region).outerjoin(
            Region, GroundwaterAssessment.region_id == Region.id
        )

        if region_ids:
            query = query.filter(GroundwaterAssessment.region_id.in_(region_ids))
        if region_id is not None:
            query = query.filter(GroundwaterAssessment.region_id == region_id)
        if start_year is not None:
            query = query.filter(GroundwaterAssessment.assessment_year >= start_year)
        if end_year is not None:
            query = query.filter(GroundwaterAssessment.assessment_year <= end_year)
        if stage:
            query = query.filter(GroundwaterAssessment.stage_of_extraction == stage)

        results = query.order_by(
            GroundwaterAssessment.assessment_year.desc(),
            GroundwaterAssessment.id.asc()
        ).all()
        return [assessment_row(a, r) for a, r in results]

    def historical_rows(
        self,
        region_ids: Optional[List[int]] = None,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Flat historical rows for export, newest year first."""
        query = self.db.query(HistoricalData, Region).outerjoin(
            Region, HistoricalData.region_id == Region.id
        )

        if region_ids:
            query = query.filter(HistoricalData.region_id.in_(region_ids))
        if start_year is not None:
            query = query.filter(HistoricalData.year >= start_year)
        if end_year is not None:
            query = query.filter(HistoricalData.year <= end_year)

        results = query.order_by(
            HistoricalData.year.desc(),
            HistoricalData.month.desc().nulls_last(),
            HistoricalData.id.asc()
        ).all()

        return [
            {
                "id": h.id,
                "regionId": h.region_id,
                "regionName": r.name if r else None,
                "regionType": r.type if r else None,
                "regionCode": r.code if r else None,
                "year": h.year,
                "month": h.month,
                "parameterType": h.parameter_type,
                "value": h.value,
                "unit": h.unit,
            }
            for h, r in results
        ]
