"""
Common Pydantic schemas shared across endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional


class ErrorResponse(BaseModel):
    """Error payload returned with every 4xx/5xx status."""
    error: str
    code: str = Field(..., description="Machine-readable error code")


class RegionSummary(BaseModel):
    """Region identity embedded in result rows."""
    id: int
    name: str
    type: str
    code: str


class RegionLocation(RegionSummary):
    """Region identity with coordinates."""
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class RegionRef(BaseModel):
    """Minimal region reference."""
    id: int
    name: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    database: str
