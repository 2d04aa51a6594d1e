"""
Comparison aggregator - cross-region comparison and critical-unit rollups.

Two different notions of "latest" live here and must stay separate:

* ``resolve_comparison_year`` picks ONE year for a whole region set (the
  maximum across all of their assessments), so every compared row comes
  from the same year.
* ``find_critical`` looks at each region's OWN latest assessment.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ingres.exceptions import (
    InvalidParameters,
    InvalidStage,
    NoDataForYear,
    NoDataFound,
    StateNotFound,
    ValidationError,
)
from ingres.models.assessment import GroundwaterAssessment
from ingres.models.region import Region
from ingres.services.assessment_selector import assessment_row, latest_assessment_ids
from ingres.utils.constants import (
    COMPARISON_PARAMETERS,
    CRITICAL_STAGES,
    DEFAULT_CRITICAL_STAGES,
    PROVENANCE_FIELDS,
)

logger = logging.getLogger(__name__)


def validate_parameters(parameters: Optional[List[str]]) -> List[str]:
    """Comparison field groups; defaults to all of them."""
    valid = list(COMPARISON_PARAMETERS)
    if not parameters:
        return valid

    invalid = [p for p in parameters if p not in COMPARISON_PARAMETERS]
    if invalid:
        raise InvalidParameters(
            f"Invalid parameters: {', '.join(invalid)}. Valid parameters: {', '.join(valid)}"
        )
    return parameters


def validate_stages(stages: Optional[List[str]]) -> List[str]:
    """Stage filter for the critical rollup; defaults to Critical and Over-Exploited."""
    if stages is None:
        return list(DEFAULT_CRITICAL_STAGES)

    for stage in stages:
        if stage not in CRITICAL_STAGES:
            raise InvalidStage(
                f"Invalid stage: {stage}. Valid stages are: {', '.join(CRITICAL_STAGES)}"
            )
    if not stages:
        raise ValidationError("At least one valid stage must be specified", code="NO_VALID_STAGES")
    return stages


def filter_assessment_fields(assessment: GroundwaterAssessment, parameters: List[str]) -> Dict[str, Any]:
    """Keep only the requested field groups; provenance is always kept."""
    full = assessment.to_dict()
    selected = {}
    for parameter in parameters:
        for key in COMPARISON_PARAMETERS[parameter]:
            selected[key] = full[key]
    for key in PROVENANCE_FIELDS:
        selected[key] = full[key]
    return selected


class ComparisonAggregator:
    """Cross-region comparison and critical-area aggregates."""

    def __init__(self, db: Session):
        self.db = db

    def resolve_comparison_year(self, region_ids: List[int], year: Optional[int] = None) -> int:
        """
        Year used for a comparison: the explicit year, else the single
        maximum assessment year over all requested regions combined.

        Raises:
            NoDataFound: none of the regions has any assessment
        """
        if year is not None:
            return year

        max_year = self.db.query(
            func.max(GroundwaterAssessment.assessment_year)
        ).filter(
            GroundwaterAssessment.region_id.in_(region_ids)
        ).scalar()

        if max_year is None:
            raise NoDataFound("No assessment data found for the specified regions")
        return int(max_year)

    def compare(
        self,
        region_ids: List[int],
        year: Optional[int] = None,
        parameters: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Year-aligned comparison of several regions.

        Regions with no row for the comparison year are listed in
        ``missingRegions`` and contribute no data row.
        """
        if not region_ids:
            raise ValidationError("At least one valid region ID is required", code="INVALID_REGION_IDS")

        requested_parameters = validate_parameters(parameters)
        comparison_year = self.resolve_comparison_year(region_ids, year)

        results = self.db.query(GroundwaterAssessment, Region).join(
            Region, GroundwaterAssessment.region_id == Region.id
        ).filter(
            GroundwaterAssessment.region_id.in_(region_ids),
            GroundwaterAssessment.assessment_year == comparison_year
        ).order_by(
            Region.name,
            Region.id,
            GroundwaterAssessment.id
        ).all()

        if not results:
            raise NoDataForYear(
                f"No assessment data found for the specified regions in year {comparison_year}"
            )

        regions_data = []
        found_ids = set()
        for assessment, region in results:
            # one row per region; the lowest assessment id comes first
            if region.id in found_ids:
                continue
            found_ids.add(region.id)
            regions_data.append({
                "region": region.to_summary(),
                "assessment": filter_assessment_fields(assessment, requested_parameters),
            })

        missing = []
        for region_id in region_ids:
            if region_id not in found_ids and region_id not in missing:
                missing.append(region_id)

        if missing:
            logger.warning(
                "No data found for region IDs: %s in year %s",
                ", ".join(str(m) for m in missing), comparison_year
            )

        return {
            "comparisonYear": comparison_year,
            "totalRegions": len(regions_data),
            "requestedRegions": len(region_ids),
            "missingRegions": missing,
            "parameters": requested_parameters,
            "regions": regions_data,
        }

    def _latest_per_region_query(self, parent_state_id: Optional[int]):
        latest = latest_assessment_ids(self.db)
        query = self.db.query(Region, GroundwaterAssessment).join(
            GroundwaterAssessment, Region.id == GroundwaterAssessment.region_id
        ).join(
            latest, GroundwaterAssessment.id == latest.c.assessment_id
        )
        if parent_state_id is not None:
            # the state itself or its direct children only
            query = query.filter(or_(
                Region.id == parent_state_id,
                Region.parent_id == parent_state_id
            ))
        return query

    def find_critical(
        self,
        stages: Optional[List[str]] = None,
        parent_state_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Dict[str, Any]:
        """
        Regions whose own latest assessment falls in ``stages``.

        Units are ordered by extraction ratio (desc), region id breaking ties.
        The summary always counts Critical and Over-Exploited regardless of
        the stage filter, scoped to the same parent state.

        Raises:
            InvalidStage: unknown stage value
            StateNotFound: parent_state_id does not exist
        """
        stages = validate_stages(stages)

        if parent_state_id is not None and self.db.get(Region, parent_state_id) is None:
            raise StateNotFound("State not found")

        results = self._latest_per_region_query(parent_state_id).filter(
            GroundwaterAssessment.stage_of_extraction.in_(stages)
        ).order_by(
            GroundwaterAssessment.extraction_ratio.desc(),
            Region.id
        ).limit(limit).offset(offset).all()

        parent_ids = {region.parent_id for region, _ in results if region.parent_id is not None}
        parent_names = {}
        if parent_ids:
            parent_names = {
                r.id: r.name
                for r in self.db.query(Region).filter(Region.id.in_(parent_ids)).all()
            }

        units = []
        for region, assessment in results:
            # no resolvable parent: the region names itself
            state_name = parent_names.get(region.parent_id, region.name)

            units.append({
                "region": {
                    "id": region.id,
                    "name": region.name,
                    "type": region.type,
                    "state": state_name,
                    "code": region.code,
                },
                "assessment": {
                    "year": assessment.assessment_year,
                    "stageOfExtraction": assessment.stage_of_extraction,
                    "extractionRatio": assessment.extraction_ratio,
                    "totalExtraction": assessment.total_extraction,
                    "annualRecharge": assessment.annual_recharge,
                    "trend": assessment.trend,
                },
            })

        return {
            "criticalUnits": units,
            "summary": self.critical_summary(parent_state_id),
        }

    def critical_summary(self, parent_state_id: Optional[int] = None) -> Dict[str, int]:
        """Headline counts of Critical and Over-Exploited regions (own latest year)."""
        latest = latest_assessment_ids(self.db)
        query = self.db.query(
            GroundwaterAssessment.stage_of_extraction,
            func.count(GroundwaterAssessment.id)
        ).join(
            latest, GroundwaterAssessment.id == latest.c.assessment_id
        ).join(
            Region, Region.id == GroundwaterAssessment.region_id
        ).filter(
            GroundwaterAssessment.stage_of_extraction.in_(DEFAULT_CRITICAL_STAGES)
        )

        if parent_state_id is not None:
            query = query.filter(or_(
                Region.id == parent_state_id,
                Region.parent_id == parent_state_id
            ))

        counts = dict(query.group_by(GroundwaterAssessment.stage_of_extraction).all())
        return {
            "totalCritical": int(counts.get("Critical", 0)),
            "totalOverExploited": int(counts.get("Over-Exploited", 0)),
        }

    def critical_rows(
        self,
        region_ids: Optional[List[int]] = None,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Every Critical / Over-Exploited assessment as flat export rows."""
        query = self.db.query(GroundwaterAssessment, Region).outerjoin(
            Region, GroundwaterAssessment.region_id == Region.id
        ).filter(
            GroundwaterAssessment.stage_of_extraction.in_(DEFAULT_CRITICAL_STAGES)
        )

        if region_ids:
            query = query.filter(GroundwaterAssessment.region_id.in_(region_ids))
        if start_year is not None:
            query = query.filter(GroundwaterAssessment.assessment_year >= start_year)
        if end_year is not None:
            query = query.filter(GroundwaterAssessment.assessment_year <= end_year)

        results = query.order_by(
            GroundwaterAssessment.extraction_ratio.desc(),
            GroundwaterAssessment.id
        ).all()
        return [assessment_row(a, r) for a, r in results]
