"""
Services package initialization.
"""
from ingres.services.region_resolver import RegionResolver, RegionSet
from ingres.services.assessment_selector import AssessmentSelector, HistoricalFilters
from ingres.services.comparison_aggregator import ComparisonAggregator
from ingres.services.query_orchestrator import QueryOrchestrator
from ingres.services.text_generation import TextGenerationClient

__all__ = [
    "RegionResolver",
    "RegionSet",
    "AssessmentSelector",
    "HistoricalFilters",
    "ComparisonAggregator",
    "QueryOrchestrator",
    "TextGenerationClient",
]
