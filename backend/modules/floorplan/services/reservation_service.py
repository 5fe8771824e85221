# backend/modules/floorplan/services/reservation_service.py

from datetime import date
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from ..models.floorplan_models import GroupReservation, LayoutInstance, TableGroup
from ..schemas.floorplan_schemas import (
    CreateReservation,
    ReservationCommand,
    UpdateReservation,
)
from .layout_instance_service import LayoutInstanceService
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.mixins import utcnow

logger = logging.getLogger(__name__)


class GroupReservationService:
    """Service for the single reservation a group may carry"""

    def __init__(self, db: Session):
        self.db = db
        self.layout_service = LayoutInstanceService(db)

    def upsert_reservation(
        self, layout_date: date, command: ReservationCommand
    ) -> GroupReservation:
        """Create or update a reservation depending on the command type"""
        instance = self.layout_service.get_instance(layout_date)

        if isinstance(command, UpdateReservation):
            return self._update_reservation(instance, command)
        if isinstance(command, CreateReservation):
            return self._create_reservation(instance, command)
        raise ValidationError(f"Unsupported reservation command: {command!r}")

    def delete_reservation(self, layout_date: date, reservation_id: int) -> None:
        """Delete a reservation; unknown ids are ignored"""
        instance = self.layout_service.get_instance(layout_date)

        try:
            deleted = (
                self.db.query(GroupReservation)
                .filter(
                    and_(
                        GroupReservation.id == reservation_id,
                        GroupReservation.layout_instance_id == instance.id,
                    )
                )
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if deleted:
            logger.info(f"Deleted reservation {reservation_id} for {layout_date}")
        else:
            logger.debug(f"Reservation {reservation_id} already absent for {layout_date}")

    def _create_reservation(
        self, instance: LayoutInstance, command: CreateReservation
    ) -> GroupReservation:
        group = (
            self.db.query(TableGroup)
            .filter(
                and_(
                    TableGroup.id == command.group_id,
                    TableGroup.layout_instance_id == instance.id,
                )
            )
            .first()
        )
        if not group:
            raise NotFoundError(f"Group {command.group_id} not found")

        existing = (
            self.db.query(GroupReservation)
            .filter(GroupReservation.group_id == command.group_id)
            .first()
        )
        if existing:
            logger.warning(
                f"Group {command.group_id} already has reservation {existing.id}"
            )
            raise ConflictError(
                f"Group {command.group_id} already has a reservation"
            )

        reservation = GroupReservation(
            layout_instance_id=instance.id,
            group_id=command.group_id,
            **command.details.model_dump(),
        )

        try:
            self.db.add(reservation)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                f"Group {command.group_id} already has a reservation"
            )
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reservation)
        logger.info(
            f"Created reservation {reservation.id} for group {reservation.group_id} "
            f"at {reservation.time}"
        )
        return reservation

    def _update_reservation(
        self, instance: LayoutInstance, command: UpdateReservation
    ) -> GroupReservation:
        reservation = (
            self.db.query(GroupReservation)
            .filter(
                and_(
                    GroupReservation.id == command.reservation_id,
                    GroupReservation.layout_instance_id == instance.id,
                )
            )
            .first()
        )
        if not reservation:
            raise NotFoundError(f"Reservation {command.reservation_id} not found")

        try:
            for field, value in command.details.model_dump().items():
                setattr(reservation, field, value)
            reservation.updated_at = utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reservation)
        logger.info(f"Updated reservation {reservation.id}")
        return reservation
