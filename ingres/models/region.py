"""
Region SQLAlchemy model.
Administrative units (state, district, block, mandal, taluk) forming a shallow tree.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from ingres.database import Base


class Region(Base):
    """
    Region table model.

    A sub-unit points at its coarser parent through ``parent_id``;
    in practice the tree is two levels deep (state -> sub-unit).
    """
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("regions.id"), nullable=True, index=True)
    code = Column(String(50), nullable=False, unique=True)
    latitude = Column(Float)
    longitude = Column(Float)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    parent = relationship("Region", remote_side=[id])

    __table_args__ = (
        Index('idx_region_type_parent', 'type', 'parent_id'),
    )

    def __repr__(self):
        return f"<Region(id={self.id}, name={self.name}, type={self.type})>"

    def to_summary(self) -> dict:
        """Compact region identity used inside response payloads."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "code": self.code,
        }
