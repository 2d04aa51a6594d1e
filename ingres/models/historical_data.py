"""
Historical data SQLAlchemy model.
Monthly or annual readings of a single groundwater parameter.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index, func
from ingres.database import Base


class HistoricalData(Base):
    """
    Historical data point.

    ``month`` is NULL for annual figures (e.g. a yearly quality reading).
    Several points may share region, year and parameter type.
    """
    __tablename__ = "historical_data"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    month = Column(Integer, nullable=True)
    parameter_type = Column(String(20), nullable=False, index=True)
    value = Column(Float, nullable=False)
    unit = Column(String(20), nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_hist_region_year', 'region_id', 'year'),
        Index('idx_hist_region_param_year', 'region_id', 'parameter_type', 'year'),
    )

    def __repr__(self):
        return (
            f"<HistoricalData(id={self.id}, region_id={self.region_id}, year={self.year}, "
            f"month={self.month}, parameter={self.parameter_type})>"
        )

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "parameterType": self.parameter_type,
            "value": self.value,
            "unit": self.unit,
        }
