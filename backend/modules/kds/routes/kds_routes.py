# backend/modules/kds/routes/kds_routes.py

"""
API routes for kitchen station routing.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
import logging

from core.database import get_db
from ..services.station_router_service import StationRouterService
from ..schemas.station_schemas import (
    StationCreate, StationUpdate, StationResponse,
    AssignmentRequest, AssignmentResponse,
    RouteOrderRequest, RouteOrderResponse,
    KitchenOrder, OrderBatchRequest, OrderListResponse,
    StationStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/kds", tags=["Kitchen Display System"])


def get_router_service(db: Session = Depends(get_db)) -> StationRouterService:
    return StationRouterService(db)


# ========== Station Management ==========

@router.post("/stations", response_model=StationResponse)
def create_station(
    station_data: StationCreate,
    service: StationRouterService = Depends(get_router_service),
):
    """Create a new kitchen station"""
    return service.add_station(station_data)


@router.get("/stations", response_model=List[StationResponse])
def list_stations(
    include_disabled: bool = Query(True),
    service: StationRouterService = Depends(get_router_service),
):
    """List stations in display order"""
    return service.list_stations(include_disabled)


@router.get("/stations/{station_id}", response_model=StationResponse)
def get_station(
    station_id: str,
    service: StationRouterService = Depends(get_router_service),
):
    station = service.get_station(station_id)
    if not station:
        raise HTTPException(status_code=404, detail="Station not found")
    return station


@router.patch("/stations/{station_id}", response_model=StationResponse)
def update_station(
    station_id: str,
    update_data: StationUpdate,
    service: StationRouterService = Depends(get_router_service),
):
    station = service.update_station(station_id, update_data)
    if not station:
        raise HTTPException(status_code=404, detail="Station not found")
    return station


@router.delete("/stations/{station_id}")
def delete_station(
    station_id: str,
    service: StationRouterService = Depends(get_router_service),
):
    """Delete a station and drop its order assignments"""
    return {"success": service.remove_station(station_id), "station_id": station_id}


# ========== Order Routing ==========

@router.post("/orders/suggest", response_model=RouteOrderResponse)
def suggest_station(
    order: KitchenOrder,
    service: StationRouterService = Depends(get_router_service),
):
    """Best matching station for an order, without assigning it"""
    station_id = service.auto_assign(order)
    return {"order_id": order.id, "station_id": station_id, "assigned": False}


@router.post("/orders/route", response_model=RouteOrderResponse)
def route_order(
    request: RouteOrderRequest,
    service: StationRouterService = Depends(get_router_service),
):
    """Auto-assign an order and record the assignment"""
    assignment = service.route_order(request.order, request.priority)
    return {
        "order_id": request.order.id,
        "station_id": assignment.station_id if assignment else None,
        "assigned": assignment is not None,
    }


@router.post("/orders/unassigned", response_model=OrderListResponse)
def unassigned_orders(
    request: OrderBatchRequest,
    service: StationRouterService = Depends(get_router_service),
):
    return {"orders": service.get_unassigned_orders(request.orders)}


@router.put("/assignments/{order_id}", response_model=AssignmentResponse)
def assign_order(
    order_id: int,
    request: AssignmentRequest,
    service: StationRouterService = Depends(get_router_service),
):
    """Manually assign an order, replacing any earlier assignment"""
    assignment = service.assign_order_to_station(
        order_id, request.station_id, request.priority
    )
    if not assignment:
        raise HTTPException(status_code=404, detail="Station not found")
    return assignment


@router.delete("/assignments/{order_id}")
def remove_assignment(
    order_id: int,
    service: StationRouterService = Depends(get_router_service),
):
    return {"success": service.remove_assignment(order_id), "order_id": order_id}


@router.get("/assignments/{order_id}/station", response_model=StationResponse)
def get_order_station(
    order_id: int,
    service: StationRouterService = Depends(get_router_service),
):
    station = service.get_order_station(order_id)
    if not station:
        raise HTTPException(status_code=404, detail="Order is not assigned")
    return station


# ========== Station Views ==========

@router.post("/stations/{station_id}/orders", response_model=OrderListResponse)
def station_orders(
    station_id: str,
    request: OrderBatchRequest,
    service: StationRouterService = Depends(get_router_service),
):
    """Filter the supplied orders down to those assigned to the station"""
    return {"orders": service.get_station_orders(station_id, request.orders)}


@router.post("/stations/{station_id}/stats", response_model=StationStatsResponse)
def station_stats(
    station_id: str,
    request: OrderBatchRequest,
    service: StationRouterService = Depends(get_router_service),
):
    return service.get_station_stats(station_id, request.orders)
