"""
Query orchestrator - the per-request facade.

Parses raw request parameters, runs resolver -> selector/aggregator ->
encoder, and is the single place where typed errors turn into HTTP
statuses and ``{error, code}`` bodies.
"""
import logging
import re
from datetime import date
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ingres.exceptions import (
    GroundwaterError,
    InternalError,
    InvalidDataType,
    InvalidFormat,
    InvalidQuery,
    InvalidStage,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from ingres.models.region import Region
from ingres.services.assessment_selector import AssessmentSelector, HistoricalFilters
from ingres.services.comparison_aggregator import ComparisonAggregator
from ingres.services.export_encoder import to_delimited_text, to_structured, utc_timestamp
from ingres.services.region_resolver import RegionResolver
from ingres.utils.aggregators import calculate_growth_rate
from ingres.utils.constants import (
    ASSESSMENT_LIMITS,
    CHAT_HISTORICAL_RECORDS,
    CRITICAL_KEYWORDS,
    CRITICAL_STAGES,
    CRITICAL_UNIT_LIMITS,
    EXPORT_DATA_TYPES,
    EXPORT_FORMATS,
    EXPORT_YEAR_HEADROOM,
    HISTORICAL_KEYWORDS,
    HISTORICAL_LIMITS,
    SIMPLE_EXPORT_FORMATS,
    SIMPLE_EXPORT_TYPES,
    STAGES,
    STATUS_KEYWORDS,
)
from ingres.utils.validators import (
    parse_csv_list,
    parse_int,
    parse_pagination,
    parse_region_id,
    parse_region_ids,
    parse_year,
    require,
    validate_year_range,
)

logger = logging.getLogger(__name__)

# Transport mapping for the four error families
ERROR_STATUS = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (UpstreamError, 502),
    (InternalError, 500),
]

# Highest priority first; anything unmatched falls through to "status"
INTENT_RULES: List[Tuple[str, List[str]]] = [
    ("status", STATUS_KEYWORDS),
    ("historical", HISTORICAL_KEYWORDS),
    ("critical", CRITICAL_KEYWORDS),
]
DEFAULT_INTENT = "status"

_YEAR_IN_TEXT_RE = re.compile(r"\b(19|20)\d{2}\b")


def error_status(exc: GroundwaterError) -> int:
    for family, status in ERROR_STATUS:
        if isinstance(exc, family):
            return status
    return 500


def error_body(exc: GroundwaterError) -> Dict[str, str]:
    return {"error": exc.message, "code": exc.code}


def validate_query(query: Any) -> str:
    """Free-text questions must be non-blank strings."""
    if not query or not isinstance(query, str):
        raise ValidationError("Query is required and must be a string", code="MISSING_REQUIRED_FIELD")
    if not query.strip():
        raise InvalidQuery("Query cannot be empty")
    return query


def classify_intent(query: str) -> str:
    """First rule whose keywords occur in the (case-insensitive) query."""
    lowered = query.lower()
    for intent, keywords in INTENT_RULES:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return DEFAULT_INTENT


def format_number(value: Any) -> str:
    """78.0 -> '78', 78.25 -> '78.25'."""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


@dataclass
class ExportResult:
    """Encoded export: ``body`` is text for csv, a JSON-able object otherwise."""
    format: str
    export_type: str
    body: Any
    record_count: int


class QueryOrchestrator:
    """Facade over resolver, selector, aggregator and encoder."""

    def __init__(self, db: Session):
        self.db = db
        self.resolver = RegionResolver(db)
        self.selector = AssessmentSelector(db)
        self.aggregator = ComparisonAggregator(db)
        self.handlers: Dict[str, Callable[..., Dict[str, Any]]] = {
            "status": self._handle_status,
            "historical": self._handle_historical,
            "critical": self._handle_critical,
        }

    # --- Conversational queries ---

    def answer(self, query: Any, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Answer a free-text question about one region.

        Returns:
            {query, response: {type, region, data, summary}, timestamp}
        """
        validate_query(query)
        if context is not None and not isinstance(context, dict):
            context = None

        region = self.resolver.resolve_text(query, context)
        intent = classify_intent(query)
        logger.info("Chat query intent=%s region=%s", intent, region.name)

        response = self.handlers[intent](region, query, context or {})
        return {
            "query": query,
            "response": response,
            "timestamp": utc_timestamp(),
        }

    def _requested_year(self, query: str, context: Dict[str, Any]) -> Optional[int]:
        year = parse_int(str(context["year"])) if context.get("year") is not None else None
        if year is None:
            match = _YEAR_IN_TEXT_RE.search(query)
            year = int(match.group(0)) if match else None
        return year

    def _handle_status(self, region: Region, query: str, context: Dict[str, Any]) -> Dict[str, Any]:
        year = self._requested_year(query, context)
        if year is not None:
            assessment = self.selector.select_by_year(region.id, year)
        else:
            assessment = self.selector.select_latest(region.id)

        if assessment is None:
            suffix = f" for {year}" if year is not None else ""
            return {
                "type": "no_data",
                "region": region.name,
                "data": {},
                "summary": f"No groundwater assessment data available for {region.name}{suffix}.",
            }

        return {
            "type": "assessment_data",
            "region": region.name,
            "data": {
                "stageOfExtraction": assessment.stage_of_extraction,
                "extractionRatio": assessment.extraction_ratio,
                "trend": assessment.trend,
                "year": assessment.assessment_year,
                "annualRecharge": assessment.annual_recharge,
                "totalExtraction": assessment.total_extraction,
                "extractableResources": assessment.extractable_resources,
            },
            "summary": (
                f"{region.name} has {assessment.stage_of_extraction} groundwater extraction levels "
                f"with {format_number(assessment.extraction_ratio)}% extraction ratio and "
                f"{assessment.trend.lower()} trend as of {assessment.assessment_year}."
            ),
        }

    def _handle_historical(self, region: Region, query: str, context: Dict[str, Any]) -> Dict[str, Any]:
        result = self.selector.select_historical(
            region.id, HistoricalFilters(limit=CHAT_HISTORICAL_RECORDS)
        )
        records = result["data"]

        if not records:
            return {
                "type": "no_data",
                "region": region.name,
                "data": {},
                "summary": f"No historical groundwater data available for {region.name}.",
            }

        parameters = sorted({r["parameterType"] for r in records})
        years = [r["year"] for r in records]
        return {
            "type": "historical_data",
            "region": region.name,
            "data": {
                "records": records,
                "totalRecords": len(records),
            },
            "summary": (
                f"Found {len(records)} historical data records for {region.name} "
                f"covering {', '.join(parameters)} from {min(years)} to {max(years)}."
            ),
        }

    def _handle_critical(self, region: Region, query: str, context: Dict[str, Any]) -> Dict[str, Any]:
        assessments = self.selector.select_all(region.id)

        if not assessments:
            return {
                "type": "no_data",
                "region": region.name,
                "data": {},
                "summary": f"No assessment data available to determine critical status for {region.name}.",
            }

        latest = assessments[0]
        critical = [a for a in assessments if a.stage_of_extraction in CRITICAL_STAGES]
        is_critical = len(critical) > 0

        ratio_change = None
        previous = next((a for a in assessments if a.assessment_year < latest.assessment_year), None)
        if previous is not None:
            ratio_change = calculate_growth_rate(latest.extraction_ratio, previous.extraction_ratio)

        ratio = format_number(latest.extraction_ratio)
        if is_critical:
            summary = (
                f"{region.name} has critical groundwater conditions with current status: "
                f"{latest.stage_of_extraction} ({ratio}% extraction)."
            )
        else:
            summary = (
                f"{region.name} currently has {latest.stage_of_extraction} groundwater status "
                f"with {ratio}% extraction ratio."
            )

        return {
            "type": "critical_status",
            "region": region.name,
            "data": {
                "isCritical": is_critical,
                "currentStatus": latest.stage_of_extraction,
                "extractionRatio": latest.extraction_ratio,
                "extractionRatioChange": ratio_change,
                "criticalYears": [
                    {
                        "year": a.assessment_year,
                        "status": a.stage_of_extraction,
                        "extractionRatio": a.extraction_ratio,
                    }
                    for a in critical
                ],
            },
            "summary": summary,
        }

    def grounding_for(self, query: str, context: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """Database facts for a generated answer, or None when no region resolves."""
        try:
            return self.answer(query, context)["response"]
        except NotFoundError:
            return None

    # --- Direct API operations ---

    def current_assessments(
        self,
        region_id: Optional[str] = None,
        region_type: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        parsed_id = parse_region_id(region_id)
        parsed_limit, parsed_offset = parse_pagination(limit, offset, ASSESSMENT_LIMITS)
        return self.selector.list_latest(
            region_id=parsed_id,
            region_type=region_type or None,
            limit=parsed_limit,
            offset=parsed_offset,
        )

    def historical(
        self,
        region_id: Optional[str],
        start_year: Optional[str] = None,
        end_year: Optional[str] = None,
        parameter_type: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
        view_mode: Optional[str] = None
    ) -> Dict[str, Any]:
        require(region_id, "region_id", code="MISSING_REGION_ID")
        parsed_id = parse_region_id(region_id)
        parsed_limit, parsed_offset = parse_pagination(limit, offset, HISTORICAL_LIMITS)

        if view_mode not in (None, "", "raw", "yearly"):
            raise ValidationError("view_mode must be one of: raw, yearly", code="INVALID_VIEW_MODE")

        filters = HistoricalFilters(
            start_year=_parse_plain_year(start_year, "start_year", "INVALID_START_YEAR"),
            end_year=_parse_plain_year(end_year, "end_year", "INVALID_END_YEAR"),
            parameter_type=parameter_type or None,
            limit=parsed_limit,
            offset=parsed_offset,
            view_mode=view_mode or "raw",
        )
        return self.selector.select_historical(parsed_id, filters)

    def compare(
        self,
        region_ids: Optional[str],
        year: Optional[str] = None,
        parameters: Optional[str] = None
    ) -> Dict[str, Any]:
        require(region_ids, "region_ids", code="MISSING_REGION_IDS")
        ids = parse_region_ids(region_ids)
        parsed_parameters = parse_csv_list(parameters) if parameters else None
        parsed_year = parse_year(year)
        return self.aggregator.compare(ids, year=parsed_year, parameters=parsed_parameters)

    def critical_units(
        self,
        stage: Optional[str] = None,
        state_id: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None
    ) -> Dict[str, Any]:
        parsed_limit, parsed_offset = parse_pagination(limit, offset, CRITICAL_UNIT_LIMITS)
        stages = parse_csv_list(stage) if stage else None
        parsed_state = parse_region_id(state_id, code="INVALID_STATE_ID")
        return self.aggregator.find_critical(
            stages=stages,
            parent_state_id=parsed_state,
            limit=parsed_limit,
            offset=parsed_offset,
        )

    # --- Exports ---

    def export(
        self,
        format: Optional[str],
        data_type: Optional[str],
        region_ids: Optional[str] = None,
        start_year: Optional[str] = None,
        end_year: Optional[str] = None,
        stage: Optional[str] = None
    ) -> ExportResult:
        """Fetch a dataset and encode it as csv, json or excel-json."""
        require(format, "Format", code="MISSING_FORMAT")
        require(data_type, "Data type", code="MISSING_DATA_TYPE")
        if format not in EXPORT_FORMATS:
            raise InvalidFormat(f"Invalid format. Must be one of: {', '.join(EXPORT_FORMATS)}")
        if data_type not in EXPORT_DATA_TYPES:
            raise InvalidDataType(f"Invalid data type. Must be one of: {', '.join(EXPORT_DATA_TYPES)}")

        ids: List[int] = []
        if region_ids:
            try:
                ids = parse_region_ids(region_ids)
            except ValidationError as e:
                raise ValidationError(
                    "Invalid region IDs format. Must be comma-separated integers",
                    code="INVALID_REGION_IDS"
                ) from e

        max_year = date.today().year + EXPORT_YEAR_HEADROOM
        start = parse_year(start_year, code="INVALID_START_YEAR", label="start year", max_year=max_year)
        end = parse_year(end_year, code="INVALID_END_YEAR", label="end year", max_year=max_year)
        validate_year_range(start, end)

        if stage and stage not in STAGES:
            raise InvalidStage(f"Invalid stage. Must be one of: {', '.join(STAGES)}")

        export_type = data_type
        if data_type == "assessments":
            rows = self.selector.assessment_rows(ids, start, end, stage or None)
        elif data_type == "historical":
            rows = self.selector.historical_rows(ids, start, end)
        elif data_type == "regions":
            rows = self.resolver.list_regions(ids)
        else:
            rows = self.aggregator.critical_rows(ids, start, end)
            export_type = "critical_areas"

        logger.info("Export %s as %s: %d records", export_type, format, len(rows))

        if format == "csv":
            body = to_delimited_text(rows)
        else:
            body = to_structured(rows, export_type)
            if format == "excel":
                body["note"] = "For Excel format, use a client-side library to convert this JSON to Excel format"

        return ExportResult(format=format, export_type=export_type, body=body, record_count=len(rows))

    def simple_export(
        self,
        format: Optional[str],
        type: Optional[str],
        region_id: Optional[str] = None
    ) -> ExportResult:
        """Unfiltered assessments or regions; json gives the bare row list."""
        if not format or format not in SIMPLE_EXPORT_FORMATS:
            raise InvalidFormat("format parameter is required and must be 'json' or 'csv'")
        if not type or type not in SIMPLE_EXPORT_TYPES:
            raise ValidationError(
                "type parameter is required and must be 'assessments' or 'regions'",
                code="INVALID_TYPE"
            )

        # a malformed region_id is ignored here rather than rejected
        parsed_id = parse_int(region_id) if region_id else None

        if type == "assessments":
            rows = self.selector.assessment_rows(region_id=parsed_id)
        else:
            rows = self.resolver.list_regions([parsed_id] if parsed_id is not None else None)

        body = to_delimited_text(rows) if format == "csv" else rows
        return ExportResult(format=format, export_type=f"{type}_export", body=body, record_count=len(rows))


def _parse_plain_year(raw: Optional[str], label: str, code: str) -> Optional[int]:
    """Historical bounds only need to be integers."""
    if raw is None or raw == "":
        return None
    year = parse_int(raw)
    if year is None:
        raise ValidationError(f"{label} must be a valid integer", code=code)
    return year
