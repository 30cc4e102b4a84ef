# backend/modules/kds/repositories/station_repository.py

from typing import Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from ..models.station_models import Station, StationAssignment


class StationRepository:
    """Persistence for stations and their order assignments."""

    def __init__(self, db: Session):
        self.db = db

    # --- Stations ---

    def list(self, include_disabled: bool = True) -> List[Station]:
        query = self.db.query(Station)
        if not include_disabled:
            query = query.filter(Station.enabled.is_(True))
        return query.order_by(Station.display_order, Station.id).all()

    def get(self, station_id: str) -> Optional[Station]:
        return self.db.query(Station).filter(Station.id == station_id).first()

    def add(self, station: Station) -> Station:
        self.db.add(station)
        return station

    def delete(self, station: Station) -> None:
        self.db.delete(station)

    def count(self) -> int:
        return self.db.query(Station).count()

    # --- Assignments ---

    def get_assignment(self, order_id: int, for_update: bool = False) -> Optional[StationAssignment]:
        query = self.db.query(StationAssignment).filter(
            StationAssignment.order_id == order_id
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def add_assignment(self, assignment: StationAssignment) -> StationAssignment:
        self.db.add(assignment)
        return assignment

    def delete_assignment(self, assignment: StationAssignment) -> None:
        self.db.delete(assignment)

    def delete_assignments_for_station(self, station_id: str) -> int:
        return (
            self.db.query(StationAssignment)
            .filter(StationAssignment.station_id == station_id)
            .delete(synchronize_session="fetch")
        )

    def order_ids_for_station(self, station_id: str, order_ids: Iterable[int]) -> Set[int]:
        order_ids = list(order_ids)
        if not order_ids:
            return set()
        rows = (
            self.db.query(StationAssignment.order_id)
            .filter(
                StationAssignment.station_id == station_id,
                StationAssignment.order_id.in_(order_ids),
            )
            .all()
        )
        return {row[0] for row in rows}

    def assigned_order_ids(self, order_ids: Iterable[int]) -> Set[int]:
        order_ids = list(order_ids)
        if not order_ids:
            return set()
        rows = (
            self.db.query(StationAssignment.order_id)
            .filter(StationAssignment.order_id.in_(order_ids))
            .all()
        )
        return {row[0] for row in rows}
