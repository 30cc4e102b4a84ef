# backend/modules/kds/services/station_router_service.py

"""
Station routing service for Kitchen Display System.

Orders are routed by matching item names against each station's category
keywords. Routing is best effort: an order whose items match nothing stays
unassigned and shows up in ``get_unassigned_orders``.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
import logging
import math
import uuid

from sqlalchemy.orm import Session

from core.config import get_settings
from core.error_handling import ConflictError
from core.locks import KeyedLock
from core.mixins import utc_now
from ..data.default_stations import DEFAULT_STATIONS
from ..models.station_models import Station, StationAssignment
from ..repositories.station_repository import StationRepository
from ..schemas.station_schemas import KitchenOrder, StationCreate, StationUpdate
from .category_matcher import CategoryMatcher, get_matcher

logger = logging.getLogger(__name__)

INACTIVE_STATUSES = {"completed", "cancelled"}

_order_locks = KeyedLock()


def routing_order(stations: Sequence) -> List:
    """Enabled stations sorted by display order; equal orders keep list order"""
    enabled = [s for s in stations if s.enabled]
    return sorted(enabled, key=lambda s: s.display_order or 0)


def score_order(
    order: KitchenOrder, stations: Sequence, matcher: CategoryMatcher
) -> Dict[str, int]:
    """Item quantity per station; each item counts toward one station at most"""
    candidates = routing_order(stations)
    counts: Dict[str, int] = {}
    for item in order.items:
        station_id = matcher.match(item.name, candidates)
        if station_id is not None:
            counts[station_id] = counts.get(station_id, 0) + item.quantity
    return counts


def auto_assign_order(
    order: KitchenOrder, stations: Sequence, matcher: CategoryMatcher
) -> Optional[str]:
    """Station with the highest item count, or None if nothing scored"""
    counts = score_order(order, stations, matcher)
    best_id = None
    best_count = 0
    # Strict comparison keeps the earliest station on ties
    for station in routing_order(stations):
        count = counts.get(station.id, 0)
        if count > best_count:
            best_id = station.id
            best_count = count
    return best_id


def _minutes_since(created_at: datetime, now: datetime) -> float:
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
    return (now - created_at).total_seconds() / 60


class StationRouterService:
    """Service for routing orders to kitchen stations"""

    def __init__(
        self,
        db: Session,
        matcher: Optional[CategoryMatcher] = None,
        repository: Optional[StationRepository] = None,
    ):
        self.db = db
        self.repository = repository or StationRepository(db)
        self.matcher = matcher or get_matcher(get_settings().kds_category_matcher)

    # ========== Station Management ==========

    def list_stations(self, include_disabled: bool = True) -> List[Station]:
        return self.repository.list(include_disabled)

    def get_station(self, station_id: str) -> Optional[Station]:
        return self.repository.get(station_id)

    def add_station(self, station_data: StationCreate) -> Station:
        """Create a station; an id is generated when none is given"""
        station_id = station_data.id or f"station_{uuid.uuid4().hex[:12]}"
        if self.repository.get(station_id) is not None:
            raise ConflictError(
                f"Station {station_id} already exists", {"station_id": station_id}
            )

        station = Station(
            id=station_id,
            name=station_data.name,
            color=station_data.color,
            categories=list(station_data.categories),
            enabled=station_data.enabled,
            display_order=station_data.display_order,
        )
        self.repository.add(station)
        self.db.commit()
        self.db.refresh(station)

        logger.info(f"Created kitchen station: {station.name} ({station.id})")
        return station

    def update_station(
        self, station_id: str, update_data: StationUpdate
    ) -> Optional[Station]:
        station = self.repository.get(station_id)
        if not station:
            return None

        # Explicit nulls leave the field as it is
        update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_dict.items():
            setattr(station, field, value)

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(station)

        logger.info(f"Updated station {station_id}")
        return station

    def remove_station(self, station_id: str) -> bool:
        """Delete a station together with its assignments"""
        station = self.repository.get(station_id)
        if not station:
            return False

        try:
            removed = self.repository.delete_assignments_for_station(station_id)
            self.repository.delete(station)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Removed station {station_id} and {removed} assignment(s)")
        return True

    def seed_default_stations(self) -> int:
        """Create the default stations if the kitchen has none"""
        if self.repository.count() > 0:
            return 0

        for data in DEFAULT_STATIONS:
            self.repository.add(Station(**data))
        self.db.commit()

        logger.info(f"Seeded {len(DEFAULT_STATIONS)} default kitchen stations")
        return len(DEFAULT_STATIONS)

    # ========== Routing ==========

    def auto_assign(
        self, order: KitchenOrder, stations: Optional[Sequence] = None
    ) -> Optional[str]:
        """Best station for ``order`` without recording it"""
        if stations is None:
            stations = self.repository.list(include_disabled=False)
        return auto_assign_order(order, stations, self.matcher)

    def route_order(
        self, order: KitchenOrder, priority: int = 1
    ) -> Optional[StationAssignment]:
        """Auto-assign and record the result as one step per order"""
        with _order_locks.hold(order.id):
            station_id = self.auto_assign(order)
            if station_id is None:
                logger.warning(
                    f"Order {order.id} matched no station; left unassigned"
                )
                return None
            return self._assign(order.id, station_id, priority)

    def assign_order_to_station(
        self, order_id: int, station_id: str, priority: int = 1
    ) -> Optional[StationAssignment]:
        """Replace any existing assignment for the order (last write wins)"""
        with _order_locks.hold(order_id):
            return self._assign(order_id, station_id, priority)

    def _assign(
        self, order_id: int, station_id: str, priority: int
    ) -> Optional[StationAssignment]:
        if self.repository.get(station_id) is None:
            logger.warning(f"Cannot assign order {order_id}: no station {station_id}")
            return None

        try:
            assignment = self.repository.get_assignment(order_id, for_update=True)
            if assignment is None:
                assignment = self.repository.add_assignment(
                    StationAssignment(order_id=order_id)
                )
            assignment.station_id = station_id
            assignment.priority = priority
            assignment.assigned_at = utc_now()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(assignment)
        logger.info(f"Order {order_id} assigned to station {station_id}")
        return assignment

    def remove_assignment(self, order_id: int) -> bool:
        assignment = self.repository.get_assignment(order_id)
        if assignment is None:
            return False
        self.repository.delete_assignment(assignment)
        self.db.commit()
        return True

    def get_order_station(self, order_id: int) -> Optional[Station]:
        assignment = self.repository.get_assignment(order_id)
        if assignment is None:
            return None
        return self.repository.get(assignment.station_id)

    # ========== Station Views ==========

    def get_station_orders(
        self, station_id: str, orders: Sequence[KitchenOrder]
    ) -> List[KitchenOrder]:
        ids = self.repository.order_ids_for_station(
            station_id, (o.id for o in orders)
        )
        return [o for o in orders if o.id in ids]

    def get_unassigned_orders(
        self, orders: Sequence[KitchenOrder]
    ) -> List[KitchenOrder]:
        assigned = self.repository.assigned_order_ids(o.id for o in orders)
        return [o for o in orders if o.id not in assigned]

    def get_station_stats(
        self,
        station_id: str,
        orders: Sequence[KitchenOrder],
        now: Optional[datetime] = None,
    ) -> Dict:
        """Load figures for a station over the supplied orders.

        Active orders exclude ``completed`` and ``cancelled``. The average
        prep time is the mean age of active orders in whole minutes.
        """
        now = now or utc_now()
        station_orders = self.get_station_orders(station_id, orders)
        active = [
            o for o in station_orders if o.status.lower() not in INACTIVE_STATUSES
        ]

        avg_prep = 0.0
        if active:
            avg_prep = sum(_minutes_since(o.created_at, now) for o in active) / len(active)

        return {
            "station_id": station_id,
            "total_orders": len(station_orders),
            "active_orders": len(active),
            "status_counts": dict(Counter(o.status for o in active)),
            "avg_prep_time_minutes": int(math.floor(avg_prep + 0.5)),
        }
