# backend/modules/kds/models/station_models.py

"""
Kitchen station models for keyword-based order routing.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Boolean, JSON, Index
)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin, utc_now


class Station(Base, TimestampMixin):
    """Kitchen preparation station"""
    __tablename__ = "kds_stations"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    color = Column(String(7))  # Hex color for UI
    categories = Column(JSON, nullable=False, default=list)  # lowercase keywords
    enabled = Column(Boolean, nullable=False, default=True, index=True)
    display_order = Column(Integer, nullable=False, default=0)

    # Removal of assignments is explicit, see StationRouterService.remove_station
    assignments = relationship(
        "StationAssignment", back_populates="station", passive_deletes="all"
    )

    __table_args__ = (
        Index('idx_kds_station_display_order', 'display_order', 'id'),
    )

    def __repr__(self):
        return f"<Station(id='{self.id}', name='{self.name}', enabled={self.enabled})>"


class StationAssignment(Base):
    """Current station for an order; at most one row per order"""
    __tablename__ = "kds_station_assignments"

    order_id = Column(Integer, primary_key=True, autoincrement=False)
    station_id = Column(String(64), ForeignKey("kds_stations.id"), nullable=False)
    assigned_at = Column(DateTime, nullable=False, default=utc_now)
    priority = Column(Integer, nullable=False, default=1)

    station = relationship("Station", back_populates="assignments")

    __table_args__ = (
        Index('idx_kds_assignment_station', 'station_id'),
    )
