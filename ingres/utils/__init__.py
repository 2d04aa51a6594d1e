"""
Utils package initialization.
"""
from ingres.utils.validators import (
    parse_int,
    parse_region_id,
    parse_region_ids,
    parse_csv_list,
    parse_pagination,
    parse_year,
    validate_year_range,
    validate_parameter_type,
)
from ingres.utils.aggregators import (
    aggregate_by_view_mode,
    calculate_growth_rate,
)
from ingres.utils.constants import (
    REGION_GAZETTEER,
    STAGES,
    PARAMETER_TYPES,
)

__all__ = [
    "parse_int",
    "parse_region_id",
    "parse_region_ids",
    "parse_csv_list",
    "parse_pagination",
    "parse_year",
    "validate_year_range",
    "validate_parameter_type",
    "aggregate_by_view_mode",
    "calculate_growth_rate",
    "REGION_GAZETTEER",
    "STAGES",
    "PARAMETER_TYPES",
]
