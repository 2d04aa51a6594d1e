"""
Schemas package initialization.
"""
from ingres.schemas.common import (
    ErrorResponse,
    RegionSummary,
    RegionLocation,
    RegionRef,
    HealthResponse,
)
from ingres.schemas.assessment import (
    AssessmentFigures,
    CurrentAssessmentItem,
    HistoricalPoint,
    HistoricalResponse,
)
from ingres.schemas.comparison import (
    ComparedRegion,
    ComparisonResponse,
    CriticalUnit,
    CriticalSummary,
    CriticalUnitsResponse,
    StructuredExport,
)
from ingres.schemas.chat import (
    ChatRequest,
    QueryResponse,
    QueryResult,
    Insight,
    AIChatResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "RegionSummary",
    "RegionLocation",
    "RegionRef",
    "HealthResponse",
    # Assessments
    "AssessmentFigures",
    "CurrentAssessmentItem",
    "HistoricalPoint",
    "HistoricalResponse",
    # Comparison
    "ComparedRegion",
    "ComparisonResponse",
    "CriticalUnit",
    "CriticalSummary",
    "CriticalUnitsResponse",
    "StructuredExport",
    # Chat
    "ChatRequest",
    "QueryResponse",
    "QueryResult",
    "Insight",
    "AIChatResponse",
]
