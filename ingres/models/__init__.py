"""
Models package initialization.
"""
from ingres.models.region import Region
from ingres.models.assessment import GroundwaterAssessment
from ingres.models.historical_data import HistoricalData

__all__ = ["Region", "GroundwaterAssessment", "HistoricalData"]
