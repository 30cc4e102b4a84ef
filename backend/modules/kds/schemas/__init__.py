# backend/modules/kds/schemas/__init__.py

"""
Kitchen Display System schemas.
"""

from .station_schemas import (
    StationCreate,
    StationUpdate,
    StationResponse,
    OrderLine,
    KitchenOrder,
    AssignmentRequest,
    AssignmentResponse,
    RouteOrderRequest,
    RouteOrderResponse,
    OrderBatchRequest,
    OrderListResponse,
    StationStatsResponse,
)

__all__ = [
    "StationCreate",
    "StationUpdate",
    "StationResponse",
    "OrderLine",
    "KitchenOrder",
    "AssignmentRequest",
    "AssignmentResponse",
    "RouteOrderRequest",
    "RouteOrderResponse",
    "OrderBatchRequest",
    "OrderListResponse",
    "StationStatsResponse",
]
