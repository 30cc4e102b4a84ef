# backend/modules/kds/__init__.py

"""
Kitchen Display System (KDS) module for routing orders to kitchen stations.
"""

from .models import *
from .schemas import *
from .services import *
from .routes import router as kds_router

__all__ = [
    # Models
    "Station",
    "StationAssignment",
    # Services
    "StationRouterService",
    "CategoryMatcher",
    "FirstMatchMatcher",
    "LongestKeywordMatcher",
    # Schemas
    "StationCreate",
    "StationUpdate",
    "StationResponse",
    "KitchenOrder",
    # Routes
    "kds_router",
]
