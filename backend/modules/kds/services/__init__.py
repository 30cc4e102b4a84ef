# backend/modules/kds/services/__init__.py

"""
Kitchen Display System services.
"""

from .station_router_service import (
    StationRouterService,
    auto_assign_order,
    score_order,
)
from .category_matcher import (
    CategoryMatcher,
    FirstMatchMatcher,
    LongestKeywordMatcher,
    get_matcher,
)

__all__ = [
    "StationRouterService",
    "auto_assign_order",
    "score_order",
    "CategoryMatcher",
    "FirstMatchMatcher",
    "LongestKeywordMatcher",
    "get_matcher",
]
