# backend/modules/floorplan/services/grouping_service.py

"""
Grouping engine.

Tables in a layout instance are either ungrouped or belong to exactly one
group. Grouping never edits an existing group in place: the requested
tables are detached from whatever groups they were in, groups left empty
are deleted, and a fresh group is created for exactly the requested set.
Any reservation on an implicated group blocks the whole operation.
"""

from typing import Dict, Iterable, List
from datetime import date
from sqlalchemy import and_, func
from sqlalchemy.orm import Session
import logging

from ..models.floorplan_models import GroupReservation, TableGroup, TableState
from ..schemas.floorplan_schemas import (
    GroupingResult,
    GroupTransition,
    GroupTransitionKind,
)
from .layout_instance_service import LayoutInstanceService
from core.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class GroupingService:
    """Service for merging tables into groups and dissolving them"""

    def __init__(self, db: Session):
        self.db = db
        self.layout_service = LayoutInstanceService(db)

    def group_tables(self, layout_date: date, table_ids: Iterable[int]) -> GroupingResult:
        """Create a new group containing exactly the given tables"""
        instance = self.layout_service.get_instance(layout_date)
        return self.group(instance.id, table_ids)

    def ungroup(self, layout_date: date, group_id: int) -> GroupingResult:
        """Dissolve a group that has no reservation"""
        instance = self.layout_service.get_instance(layout_date)

        try:
            group = (
                self.db.query(TableGroup)
                .filter(
                    and_(
                        TableGroup.id == group_id,
                        TableGroup.layout_instance_id == instance.id,
                    )
                )
                .first()
            )
            if not group:
                raise NotFoundError(f"Group {group_id} not found")

            if self._reserved_group_ids(instance.id, [group_id]):
                logger.warning(f"Ungroup of reserved group {group_id} rejected")
                raise ConflictError("Remove the reservation before ungrouping")

            member_ids = [
                table_id
                for (table_id,) in self.db.query(TableState.table_id)
                .filter(
                    and_(
                        TableState.layout_instance_id == instance.id,
                        TableState.group_id == group_id,
                    )
                )
                .order_by(TableState.table_id)
            ]

            self.db.query(TableState).filter(
                and_(
                    TableState.layout_instance_id == instance.id,
                    TableState.group_id == group_id,
                )
            ).update({TableState.group_id: None}, synchronize_session=False)
            self.db.query(TableGroup).filter(TableGroup.id == group_id).delete(
                synchronize_session=False
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Dissolved group {group_id} (tables {member_ids})")
        return GroupingResult(
            group_id=None,
            transitions=[
                GroupTransition(
                    kind=GroupTransitionKind.DISSOLVED,
                    group_id=group_id,
                    table_ids=member_ids,
                )
            ],
        )

    def group(self, layout_instance_id: int, table_ids: Iterable[int]) -> GroupingResult:
        """
        Group tables within an already resolved layout instance.

        A single table id yields a one-member group; this is how an
        ungrouped table becomes a reservation target.
        """
        table_ids = sorted(set(table_ids))
        if not table_ids:
            raise ValidationError("table_ids required")

        try:
            states = (
                self.db.query(TableState)
                .filter(
                    and_(
                        TableState.layout_instance_id == layout_instance_id,
                        TableState.table_id.in_(table_ids),
                    )
                )
                .all()
            )
            found = {state.table_id for state in states}
            missing = [table_id for table_id in table_ids if table_id not in found]
            if missing:
                raise NotFoundError(f"Tables not found in layout: {missing}")

            detached: Dict[int, List[int]] = {}
            for state in states:
                if state.group_id is not None:
                    detached.setdefault(state.group_id, []).append(state.table_id)
            implicated = sorted(detached)

            transitions: List[GroupTransition] = []
            if implicated:
                # Every implicated group is checked before anything is written
                reserved = self._reserved_group_ids(layout_instance_id, implicated)
                if reserved:
                    logger.warning(
                        f"Regrouping tables {table_ids} blocked by reserved groups {reserved}"
                    )
                    raise ConflictError(
                        "Reservations exist; remove them before regrouping"
                    )

                self.db.query(TableState).filter(
                    and_(
                        TableState.layout_instance_id == layout_instance_id,
                        TableState.table_id.in_(table_ids),
                    )
                ).update({TableState.group_id: None}, synchronize_session=False)

                remaining = dict(
                    self.db.query(TableState.group_id, func.count(TableState.table_id))
                    .filter(
                        and_(
                            TableState.layout_instance_id == layout_instance_id,
                            TableState.group_id.in_(implicated),
                        )
                    )
                    .group_by(TableState.group_id)
                    .all()
                )
                empty = [group_id for group_id in implicated if not remaining.get(group_id)]
                if empty:
                    self.db.query(TableGroup).filter(TableGroup.id.in_(empty)).delete(
                        synchronize_session=False
                    )

                for group_id in implicated:
                    kind = (
                        GroupTransitionKind.DISSOLVED
                        if group_id in empty
                        else GroupTransitionKind.DETACHED
                    )
                    transitions.append(
                        GroupTransition(
                            kind=kind,
                            group_id=group_id,
                            table_ids=sorted(detached[group_id]),
                        )
                    )

            group = TableGroup(layout_instance_id=layout_instance_id)
            self.db.add(group)
            self.db.flush()
            new_group_id = group.id

            self.db.query(TableState).filter(
                and_(
                    TableState.layout_instance_id == layout_instance_id,
                    TableState.table_id.in_(table_ids),
                )
            ).update({TableState.group_id: new_group_id}, synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        transitions.append(
            GroupTransition(
                kind=GroupTransitionKind.CREATED,
                group_id=new_group_id,
                table_ids=sorted(table_ids),
            )
        )
        logger.info(
            f"Created group {new_group_id} with tables {sorted(table_ids)} "
            f"in layout {layout_instance_id}"
        )
        return GroupingResult(group_id=new_group_id, transitions=transitions)

    def _reserved_group_ids(
        self, layout_instance_id: int, group_ids: List[int]
    ) -> List[int]:
        rows = (
            self.db.query(GroupReservation.group_id)
            .filter(
                and_(
                    GroupReservation.layout_instance_id == layout_instance_id,
                    GroupReservation.group_id.in_(group_ids),
                )
            )
            .distinct()
            .all()
        )
        return sorted(group_id for (group_id,) in rows)
