# backend/modules/kds/tests/test_station_router_service.py

"""
Tests for StationRouterService: station management, assignments and views.
"""

import pytest
from datetime import timedelta
from sqlalchemy.orm import Session

from core.error_handling import ConflictError
from core.mixins import utc_now
from modules.kds.models.station_models import Station, StationAssignment
from modules.kds.schemas.station_schemas import (
    KitchenOrder,
    StationCreate,
    StationUpdate,
)
from modules.kds.services.category_matcher import FirstMatchMatcher
from modules.kds.services.station_router_service import StationRouterService
from tests.factories import (
    KitchenOrderFactory,
    OrderLineFactory,
    StationAssignmentFactory,
    StationFactory,
)


@pytest.fixture
def service(db: Session) -> StationRouterService:
    return StationRouterService(db)


@pytest.fixture
def stations(db: Session):
    grill = StationFactory(id="grill", categories=["grilled", "steaks"], display_order=1)
    salad = StationFactory(id="salad", categories=["salads"], display_order=2)
    return grill, salad


def order_with(*names, **kwargs):
    return KitchenOrderFactory(
        items=[OrderLineFactory(name=name) for name in names], **kwargs
    )


class TestStationManagement:

    def test_add_station_normalizes_keywords(self, service: StationRouterService):
        station = service.add_station(
            StationCreate(
                id="bar",
                name="Bar",
                color="#06b6d4",
                categories=[" Cocktails", "beer", "cocktails", ""],
            )
        )

        assert station.id == "bar"
        assert station.categories == ["cocktails", "beer"]
        assert station.enabled is True
        assert station.created_at is not None

    def test_add_station_generates_id(self, service: StationRouterService):
        station = service.add_station(StationCreate(name="Pizza Oven"))
        assert station.id.startswith("station_")

    def test_duplicate_station_id(self, service: StationRouterService, stations):
        with pytest.raises(ConflictError) as exc_info:
            service.add_station(StationCreate(id="grill", name="Another Grill"))
        assert exc_info.value.status_code == 409

    def test_list_stations_in_display_order(self, service: StationRouterService):
        StationFactory(id="late", display_order=5)
        StationFactory(id="early", display_order=1)
        StationFactory(id="off", display_order=0, enabled=False)

        assert [s.id for s in service.list_stations()] == ["off", "early", "late"]
        assert [s.id for s in service.list_stations(include_disabled=False)] == [
            "early",
            "late",
        ]

    def test_update_station(self, service: StationRouterService, stations):
        updated = service.update_station(
            "salad", StationUpdate(categories=["Salads", "Bowls"], enabled=False)
        )

        assert updated.categories == ["salads", "bowls"]
        assert updated.enabled is False
        assert updated.name == stations[1].name

    def test_update_unknown_station(self, service: StationRouterService):
        assert service.update_station("ghost", StationUpdate(name="x")) is None

    def test_remove_station_drops_its_assignments(
        self, service: StationRouterService, db: Session, stations
    ):
        grill, salad = stations
        service.assign_order_to_station(1, "grill")
        service.assign_order_to_station(2, "grill")
        service.assign_order_to_station(3, "salad")

        assert service.remove_station("grill") is True

        assert service.get_station("grill") is None
        assert service.get_order_station(1) is None
        assert db.query(StationAssignment).count() == 1
        assert service.get_order_station(3).id == "salad"

    def test_removed_station_orders_become_unassigned(
        self, service: StationRouterService, stations
    ):
        steak = order_with("Grilled Steak")
        salad = order_with("Caesar Salads")
        service.route_order(steak)
        service.route_order(salad)

        service.remove_station("grill")

        assert service.get_station_orders("grill", [steak, salad]) == []
        assert service.get_unassigned_orders([steak, salad]) == [steak]
        assert service.get_station_orders("salad", [steak, salad]) == [salad]

    def test_update_station_ignores_null_fields(self, service: StationRouterService, stations):
        grill = stations[0]
        name, categories = grill.name, list(grill.categories)

        updated = service.update_station(
            "grill", StationUpdate(name=None, enabled=None, display_order=None)
        )

        assert updated.name == name
        assert updated.enabled is True
        assert updated.display_order == 1
        assert updated.categories == categories

    def test_remove_station_with_loaded_assignments(
        self, service: StationRouterService, db: Session
    ):
        assignment = StationAssignmentFactory(order_id=7)

        assert service.remove_station(assignment.station_id) is True
        assert db.query(StationAssignment).count() == 0

    def test_remove_unknown_station(self, service: StationRouterService):
        assert service.remove_station("ghost") is False

    def test_seed_default_stations_once(self, service: StationRouterService):
        assert service.seed_default_stations() == 5
        assert service.seed_default_stations() == 0
        assert [s.id for s in service.list_stations()] == [
            "grill",
            "salad",
            "fry",
            "dessert",
            "drinks",
        ]


class TestRouting:

    def test_auto_assign_uses_enabled_stations(self, service: StationRouterService, stations):
        order = order_with("Grilled Steak")
        assert service.auto_assign(order) == "grill"

        service.update_station("grill", StationUpdate(enabled=False))
        assert service.auto_assign(order) is None

    def test_auto_assign_does_not_record(self, service: StationRouterService, stations):
        order = order_with("Grilled Steak")
        service.auto_assign(order)
        assert service.get_order_station(order.id) is None

    def test_route_order_records_assignment(self, service: StationRouterService, stations):
        order = order_with("Grilled Steak")

        assignment = service.route_order(order, priority=3)

        assert assignment.order_id == order.id
        assert assignment.station_id == "grill"
        assert assignment.priority == 3
        assert service.get_order_station(order.id).id == "grill"

    def test_unmatched_order_stays_unassigned(self, service: StationRouterService, stations):
        mystery = order_with("Mystery Item")
        steak = order_with("Grilled Steak")

        assert service.route_order(mystery) is None
        service.route_order(steak)

        assert service.get_unassigned_orders([mystery, steak]) == [mystery]

    def test_manual_assignment_overwrites(
        self, service: StationRouterService, db: Session, stations
    ):
        service.assign_order_to_station(42, "grill")
        service.assign_order_to_station(42, "salad", priority=2)

        assert db.query(StationAssignment).count() == 1
        assert service.get_order_station(42).id == "salad"

    def test_assigning_same_station_twice_is_idempotent(
        self, service: StationRouterService, db: Session, stations
    ):
        first = service.assign_order_to_station(42, "grill")
        second = service.assign_order_to_station(42, "grill")

        assert first.order_id == second.order_id == 42
        assert db.query(StationAssignment).count() == 1

    def test_assign_to_unknown_station(self, service: StationRouterService, stations):
        assert service.assign_order_to_station(42, "ghost") is None
        assert service.get_order_station(42) is None

    def test_remove_assignment(self, service: StationRouterService, stations):
        service.assign_order_to_station(42, "grill")

        assert service.remove_assignment(42) is True
        assert service.remove_assignment(42) is False
        assert service.get_order_station(42) is None

    def test_injected_matcher_is_used(self, db: Session):
        StationFactory(id="fry", categories=["fried"], display_order=1)
        StationFactory(id="dessert", categories=["pastry"], display_order=2)
        order = order_with("Fried Pastry")

        assert StationRouterService(db).auto_assign(order) == "dessert"
        assert StationRouterService(db, matcher=FirstMatchMatcher()).auto_assign(order) == "fry"

    def test_items_sent_as_json_string(self, service: StationRouterService, stations):
        order = KitchenOrder.model_validate(
            {
                "id": 9,
                "created_at": utc_now(),
                "items": '[{"name": "Greek Salads", "quantity": 2}]',
            }
        )

        assert order.items[0].quantity == 2
        assert service.auto_assign(order) == "salad"


class TestStationViews:

    def test_station_orders(self, service: StationRouterService, stations):
        orders = [order_with("Grilled Steak"), order_with("Caesar Salads"), order_with("Soup")]
        for order in orders:
            service.route_order(order)

        assert service.get_station_orders("grill", orders) == [orders[0]]
        assert service.get_station_orders("salad", orders) == [orders[1]]
        assert service.get_station_orders("grill", []) == []

    def test_station_stats(self, service: StationRouterService, stations):
        now = utc_now()
        orders = [
            order_with("Grilled Steak", status="pending", created_at=now - timedelta(minutes=10)),
            order_with("Grilled Steak", status="preparing", created_at=now - timedelta(minutes=5)),
            order_with("Grilled Steak", status="completed", created_at=now - timedelta(minutes=40)),
            order_with("Caesar Salads", status="pending", created_at=now - timedelta(minutes=60)),
        ]
        for order in orders:
            service.route_order(order)

        stats = service.get_station_stats("grill", orders, now=now)

        assert stats == {
            "station_id": "grill",
            "total_orders": 3,
            "active_orders": 2,
            "status_counts": {"pending": 1, "preparing": 1},
            "avg_prep_time_minutes": 8,
        }

    def test_station_stats_without_orders(self, service: StationRouterService, stations):
        stats = service.get_station_stats("grill", [])

        assert stats["total_orders"] == 0
        assert stats["avg_prep_time_minutes"] == 0
