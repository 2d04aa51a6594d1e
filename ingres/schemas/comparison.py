"""
Comparison and critical-unit Pydantic schemas.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from ingres.schemas.common import RegionSummary


class ComparedRegion(BaseModel):
    """One region row of a comparison; assessment keys follow the parameter filter."""
    region: RegionSummary
    assessment: Dict[str, Any]


class ComparisonResponse(BaseModel):
    """Year-aligned comparison across regions."""
    comparisonYear: int
    totalRegions: int
    requestedRegions: int
    missingRegions: List[int] = Field(
        default_factory=list,
        description="Requested regions with no assessment in comparisonYear"
    )
    parameters: List[str]
    regions: List[ComparedRegion]


class CriticalRegion(RegionSummary):
    """Region of a critical unit, with its parent state's display name."""
    state: str


class CriticalAssessment(BaseModel):
    year: int
    stageOfExtraction: str
    extractionRatio: float
    totalExtraction: float
    annualRecharge: float
    trend: str


class CriticalUnit(BaseModel):
    region: CriticalRegion
    assessment: CriticalAssessment


class CriticalSummary(BaseModel):
    """Headline counts over Critical and Over-Exploited only."""
    totalCritical: int
    totalOverExploited: int


class CriticalUnitsResponse(BaseModel):
    criticalUnits: List[CriticalUnit]
    summary: CriticalSummary


class StructuredExport(BaseModel):
    """Structured export envelope."""
    exportType: str
    timestamp: str
    recordCount: int
    data: List[Dict[str, Any]]
    note: Optional[str] = None
