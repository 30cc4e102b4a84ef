# backend/modules/kds/models/__init__.py

"""
Kitchen Display System models.
"""

from .station_models import Station, StationAssignment

__all__ = [
    "Station",
    "StationAssignment",
]
