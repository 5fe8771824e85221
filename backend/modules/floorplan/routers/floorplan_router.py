# backend/modules/floorplan/routers/floorplan_router.py

from typing import List
from datetime import date
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from core.database import get_db
from ..schemas.floorplan_schemas import (
    MAX_DB_INT,
    CatalogTableResponse,
    GroupingResult,
    GroupRequest,
    LayoutInstanceResponse,
    LayoutSnapshot,
    OkResponse,
    ReservationRequest,
    ReservationResponse,
    TablePositionUpdate,
    UngroupRequest,
)
from ..services import (
    CatalogService,
    GroupingService,
    GroupReservationService,
    LayoutInstanceService,
    LayoutQueryService,
)

router = APIRouter(prefix="/api", tags=["Floor Plan"])


@router.get("/tables/default", response_model=List[CatalogTableResponse])
def list_default_tables(db: Session = Depends(get_db)):
    """Catalog tables with their default positions"""
    return CatalogService(db).list_tables()


@router.post("/layout/{layout_date}/init", response_model=LayoutInstanceResponse)
def open_layout(layout_date: date, db: Session = Depends(get_db)):
    """Open a date, creating its layout from the catalog on first use"""
    instance, created = LayoutInstanceService(db).ensure_instance(layout_date)
    return LayoutInstanceResponse(
        layout_instance_id=instance.id,
        layout_date=instance.layout_date,
        existed=not created,
    )


@router.get("/layout/{layout_date}", response_model=LayoutSnapshot)
def get_layout(layout_date: date, db: Session = Depends(get_db)):
    """Tables, groups and reservations for an opened date"""
    return LayoutQueryService(db).get_snapshot(layout_date)


@router.put("/layout/{layout_date}/table/{table_id}", response_model=OkResponse)
def update_table_position(
    layout_date: date,
    update: TablePositionUpdate,
    table_id: int = Path(..., ge=1, le=MAX_DB_INT),
    db: Session = Depends(get_db),
):
    """Move a table; coordinates are rounded and clamped at zero"""
    LayoutInstanceService(db).update_position(layout_date, table_id, update)
    return OkResponse()


@router.post("/layout/{layout_date}/group", response_model=GroupingResult)
def group_tables(
    layout_date: date, request: GroupRequest, db: Session = Depends(get_db)
):
    """
    Merge tables into a new group.

    Fails with 409 if any table currently belongs to a reserved group.
    """
    return GroupingService(db).group_tables(layout_date, request.table_ids)


@router.post("/layout/{layout_date}/ungroup", response_model=GroupingResult)
def ungroup_tables(
    layout_date: date, request: UngroupRequest, db: Session = Depends(get_db)
):
    """Dissolve a group; fails with 409 while it has a reservation"""
    return GroupingService(db).ungroup(layout_date, request.group_id)


@router.post("/layout/{layout_date}/reservation", response_model=ReservationResponse)
def save_reservation(
    layout_date: date, request: ReservationRequest, db: Session = Depends(get_db)
):
    """Create ("action": "create") or update ("action": "update") a reservation"""
    return GroupReservationService(db).upsert_reservation(layout_date, request.command)


@router.delete(
    "/layout/{layout_date}/reservation/{reservation_id}", response_model=OkResponse
)
def delete_reservation(
    layout_date: date,
    reservation_id: int = Path(..., ge=1, le=MAX_DB_INT),
    db: Session = Depends(get_db),
):
    GroupReservationService(db).delete_reservation(layout_date, reservation_id)
    return OkResponse()
