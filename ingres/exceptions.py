"""
Typed errors raised by the resolver, selector, aggregator and encoder.

Every error carries a machine-readable ``code``. The four families below
are mapped to HTTP statuses in one place only
(``ingres.services.query_orchestrator.error_status``).
"""
from typing import Optional


class GroundwaterError(Exception):
    """Base class for all domain errors."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self):
        return self.message


# --- Families ---

class ValidationError(GroundwaterError):
    """Malformed or missing request parameter (client fault)."""
    code = "VALIDATION_ERROR"


class NotFoundError(GroundwaterError):
    """Region/state/year combination has no data."""
    code = "NOT_FOUND"


class UpstreamError(GroundwaterError):
    """Text-generation collaborator unreachable or returned non-success."""
    code = "UPSTREAM_ERROR"


class InternalError(GroundwaterError):
    """Unexpected failure in our own logic."""
    code = "INTERNAL_ERROR"


# --- Validation ---

class MalformedIdentifier(ValidationError):
    """A region id token that does not parse as an integer."""
    code = "INVALID_REGION_ID_FORMAT"

    def __init__(self, token: str, code: Optional[str] = None):
        super().__init__(f"Invalid region ID: {token}", code)
        self.token = token


class InvalidLimit(ValidationError):
    code = "INVALID_LIMIT"


class InvalidOffset(ValidationError):
    code = "INVALID_OFFSET"


class InvalidYear(ValidationError):
    code = "INVALID_YEAR"


class InvalidRange(ValidationError):
    code = "INVALID_YEAR_RANGE"


class InvalidParameterType(ValidationError):
    code = "INVALID_PARAMETER_TYPE"


class InvalidParameters(ValidationError):
    code = "INVALID_PARAMETERS"


class InvalidStage(ValidationError):
    code = "INVALID_STAGE"


class InvalidRegionType(ValidationError):
    code = "INVALID_REGION_TYPE"


class InvalidFormat(ValidationError):
    code = "INVALID_FORMAT"


class InvalidDataType(ValidationError):
    code = "INVALID_DATA_TYPE"


class InvalidQuery(ValidationError):
    code = "INVALID_QUERY"


# --- Not found ---

class RegionNotFound(NotFoundError):
    code = "REGION_NOT_FOUND"


class RegionNotIdentified(RegionNotFound):
    """No region could be read out of free text (before any store lookup)."""
    code = "REGION_NOT_IDENTIFIED"


class StateNotFound(NotFoundError):
    code = "STATE_NOT_FOUND"


class NoDataFound(NotFoundError):
    code = "NO_DATA_FOUND"


class NoDataForYear(NotFoundError):
    code = "NO_DATA_FOR_YEAR"


# --- Internal ---

class ExportEncodingError(InternalError):
    """A row does not share the header's key set."""
    code = "EXPORT_ROW_MISMATCH"
