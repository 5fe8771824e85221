# backend/modules/floorplan/services/layout_query_service.py

from typing import Dict, List
from datetime import date
from sqlalchemy.orm import Session

from ..models.floorplan_models import (
    CatalogTable,
    GroupReservation,
    LayoutInstance,
    TableState,
)
from ..schemas.floorplan_schemas import (
    GroupMembership,
    LayoutSnapshot,
    ReservationResponse,
    TableSnapshot,
)
from .layout_instance_service import LayoutInstanceService


class LayoutQueryService:
    """Read-only composition of a date's tables, groups and reservations"""

    def __init__(self, db: Session):
        self.db = db
        self.layout_service = LayoutInstanceService(db)

    def get_snapshot(self, layout_date: date) -> LayoutSnapshot:
        """Snapshot for an already opened date; never creates an instance"""
        instance = self.layout_service.get_instance(layout_date)
        return self.build_snapshot(instance)

    def build_snapshot(self, instance: LayoutInstance) -> LayoutSnapshot:
        rows = (
            self.db.query(TableState, CatalogTable)
            .join(CatalogTable, CatalogTable.id == TableState.table_id)
            .filter(TableState.layout_instance_id == instance.id)
            .order_by(TableState.table_id)
            .all()
        )

        tables: List[TableSnapshot] = []
        members: Dict[int, List[int]] = {}
        for state, table in rows:
            tables.append(
                TableSnapshot(
                    table_id=state.table_id,
                    name=table.name,
                    x=state.x,
                    y=state.y,
                    width=table.width,
                    height=table.height,
                    capacity=table.capacity,
                    group_id=state.group_id,
                )
            )
            if state.group_id is not None:
                members.setdefault(state.group_id, []).append(state.table_id)

        reservations = (
            self.db.query(GroupReservation)
            .filter(GroupReservation.layout_instance_id == instance.id)
            .order_by(GroupReservation.time, GroupReservation.id)
            .all()
        )

        return LayoutSnapshot(
            layout_instance_id=instance.id,
            layout_date=instance.layout_date,
            tables=tables,
            groups=[
                GroupMembership(group_id=group_id, table_ids=table_ids)
                for group_id, table_ids in sorted(members.items())
            ],
            reservations=[
                ReservationResponse.model_validate(reservation)
                for reservation in reservations
            ],
        )
