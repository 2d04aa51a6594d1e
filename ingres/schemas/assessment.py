"""
Assessment and historical data Pydantic schemas.
"""
from pydantic import BaseModel
from typing import List, Optional

from ingres.schemas.common import RegionLocation, RegionRef


class AssessmentFigures(BaseModel):
    """Full figures of one assessment."""
    year: int
    annualRecharge: float
    extractableResources: float
    totalExtraction: float
    stageOfExtraction: str
    extractionRatio: float
    trend: str
    assessmentDate: str
    dataSource: str


class CurrentAssessmentItem(BaseModel):
    """Latest assessment of one region."""
    region: RegionLocation
    assessment: AssessmentFigures


class HistoricalPoint(BaseModel):
    """Single historical reading (or yearly average)."""
    year: int
    month: Optional[int] = None
    parameterType: str
    value: float
    unit: str
    readings: Optional[int] = None


class HistoricalResponse(BaseModel):
    """Historical readings for one region."""
    region: RegionRef
    data: List[HistoricalPoint]
