"""
Groundwater assessment SQLAlchemy model.
Stores the periodic resource assessment for a region.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from ingres.database import Base


class GroundwaterAssessment(Base):
    """
    Groundwater assessment table model.

    Volumes are in MCM. ``extraction_ratio`` is stored as reported and is
    not recomputed from extraction and extractable resources.
    """
    __tablename__ = "groundwater_assessments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=False, index=True)
    assessment_year = Column(Integer, nullable=False, index=True)

    annual_recharge = Column(Float, nullable=False)
    extractable_resources = Column(Float, nullable=False)
    total_extraction = Column(Float, nullable=False)
    stage_of_extraction = Column(String(20), nullable=False, index=True)
    extraction_ratio = Column(Float, nullable=False)
    trend = Column(String(20), nullable=False)

    assessment_date = Column(String(20), nullable=False)
    data_source = Column(String(100), nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    region = relationship("Region")

    __table_args__ = (
        Index('idx_assessment_region_year', 'region_id', 'assessment_year'),
    )

    def __repr__(self):
        return (
            f"<GroundwaterAssessment(id={self.id}, region_id={self.region_id}, "
            f"year={self.assessment_year}, stage={self.stage_of_extraction})>"
        )

    def to_dict(self) -> dict:
        """Full assessment figures in API field naming."""
        return {
            "year": self.assessment_year,
            "annualRecharge": self.annual_recharge,
            "extractableResources": self.extractable_resources,
            "totalExtraction": self.total_extraction,
            "stageOfExtraction": self.stage_of_extraction,
            "extractionRatio": self.extraction_ratio,
            "trend": self.trend,
            "assessmentDate": self.assessment_date,
            "dataSource": self.data_source,
        }
