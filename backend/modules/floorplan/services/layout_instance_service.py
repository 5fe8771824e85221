# backend/modules/floorplan/services/layout_instance_service.py

"""
Per-date layout instances.

A layout instance is created lazily the first time a date is opened and
is seeded from the table catalog in the same transaction, so a reader
never sees an instance with a partial set of table states.
"""

from typing import Optional, Tuple
from datetime import date
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging
import math

from ..models.floorplan_models import CatalogTable, LayoutInstance, TableState
from ..schemas.floorplan_schemas import MAX_COORDINATE, TablePositionUpdate
from core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def to_canvas_coordinate(value: float) -> int:
    """Round half up to an integer and clamp to the canvas origin."""
    if value is None or not math.isfinite(value):
        raise ValidationError(f"Invalid coordinate: {value!r}")
    if value > MAX_COORDINATE:
        raise ValidationError(f"Coordinate {value!r} exceeds {MAX_COORDINATE}")
    return max(0, int(math.floor(value + 0.5)))


class LayoutInstanceService:
    """Service for opening dates and moving tables"""

    def __init__(self, db: Session):
        self.db = db

    def find_instance(self, layout_date: date) -> Optional[LayoutInstance]:
        return (
            self.db.query(LayoutInstance)
            .filter(LayoutInstance.layout_date == layout_date)
            .first()
        )

    def get_instance(self, layout_date: date) -> LayoutInstance:
        """Get the instance for a date without creating it"""
        instance = self.find_instance(layout_date)
        if not instance:
            raise NotFoundError(f"Layout not found for {layout_date.isoformat()}")
        return instance

    def ensure_instance(self, layout_date: date) -> Tuple[LayoutInstance, bool]:
        """
        Return the instance for a date, creating and seeding it if needed.

        Returns:
            (instance, created) where created is False when the date was
            already open.
        """
        instance = self.find_instance(layout_date)
        if instance:
            return instance, False

        try:
            instance = LayoutInstance(layout_date=layout_date)
            self.db.add(instance)
            self.db.flush()

            catalog = self.db.query(CatalogTable).order_by(CatalogTable.id).all()
            self.db.add_all(
                [
                    TableState(
                        layout_instance_id=instance.id,
                        table_id=table.id,
                        x=table.default_x,
                        y=table.default_y,
                        group_id=None,
                    )
                    for table in catalog
                ]
            )
            self.db.commit()
        except IntegrityError:
            # Another writer opened the same date first
            self.db.rollback()
            existing = self.find_instance(layout_date)
            if existing is None:
                raise
            logger.info(f"Layout for {layout_date} was created concurrently")
            return existing, False
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(instance)
        logger.info(
            f"Created layout instance {instance.id} for {layout_date} "
            f"with {len(catalog)} tables"
        )
        return instance, True

    def update_position(
        self, layout_date: date, table_id: int, update: TablePositionUpdate
    ) -> TableState:
        """Update the supplied coordinates of one table"""
        if update.x is None and update.y is None:
            raise ValidationError("No fields to update")

        instance = self.get_instance(layout_date)
        state = (
            self.db.query(TableState)
            .filter(
                and_(
                    TableState.layout_instance_id == instance.id,
                    TableState.table_id == table_id,
                )
            )
            .first()
        )
        if not state:
            raise NotFoundError(
                f"Table {table_id} not found in layout for {layout_date.isoformat()}"
            )

        try:
            if update.x is not None:
                state.x = to_canvas_coordinate(update.x)
            if update.y is not None:
                state.y = to_canvas_coordinate(update.y)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(state)
        return state
