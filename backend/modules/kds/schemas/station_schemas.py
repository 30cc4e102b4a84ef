# backend/modules/kds/schemas/station_schemas.py

"""
Pydantic schemas for kitchen station routing.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
import json


def _normalize_categories(values: Optional[List[str]]) -> Optional[List[str]]:
    """Lowercase, trim and de-duplicate keywords, keeping their order"""
    if values is None:
        return None
    seen = []
    for value in values:
        keyword = value.strip().lower()
        if keyword and keyword not in seen:
            seen.append(keyword)
    return seen


class StationCreate(BaseModel):
    """Schema for creating a kitchen station"""

    id: Optional[str] = Field(None, min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_\-]+$")
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern="^#[0-9A-Fa-f]{6}$")
    categories: List[str] = Field(default_factory=list)
    enabled: bool = True
    display_order: int = 0

    @field_validator("categories")
    @classmethod
    def normalize_categories(cls, v):
        return _normalize_categories(v)


class StationUpdate(BaseModel):
    """Partial update; unset fields are left as they are"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern="^#[0-9A-Fa-f]{6}$")
    categories: Optional[List[str]] = None
    enabled: Optional[bool] = None
    display_order: Optional[int] = None

    @field_validator("categories")
    @classmethod
    def normalize_categories(cls, v):
        return _normalize_categories(v)


class StationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: Optional[str] = None
    categories: List[str]
    enabled: bool
    display_order: int


class OrderLine(BaseModel):
    name: str
    quantity: int = Field(1, ge=0)


class KitchenOrder(BaseModel):
    """Snapshot of an order as seen by the kitchen"""

    id: int
    status: str = "pending"
    created_at: datetime
    items: List[OrderLine] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def decode_items(cls, v):
        # Kitchen clients may send the item list JSON-encoded
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"items is not valid JSON: {e.msg}")
        if v is None:
            return []
        return v


class AssignmentRequest(BaseModel):
    station_id: str = Field(..., min_length=1, max_length=64)
    priority: int = 1


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: int
    station_id: str
    assigned_at: datetime
    priority: int


class RouteOrderRequest(BaseModel):
    order: KitchenOrder
    priority: int = 1


class RouteOrderResponse(BaseModel):
    order_id: int
    station_id: Optional[str] = None
    assigned: bool


class OrderBatchRequest(BaseModel):
    orders: List[KitchenOrder] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    orders: List[KitchenOrder]


class StationStatsResponse(BaseModel):
    station_id: str
    total_orders: int
    active_orders: int
    status_counts: Dict[str, int]
    avg_prep_time_minutes: int
