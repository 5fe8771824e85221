# backend/modules/floorplan/__init__.py

from .models.floorplan_models import (
    CatalogTable, LayoutInstance, TableGroup, TableState, GroupReservation
)

from .schemas.floorplan_schemas import (
    CatalogTableResponse, CatalogTableSeed,
    LayoutInstanceResponse, TablePositionUpdate,
    GroupRequest, UngroupRequest,
    GroupingResult, GroupTransition, GroupTransitionKind, GroupMembership,
    ReservationFields, CreateReservation, UpdateReservation, ReservationCommand,
    ReservationResponse, TableSnapshot, LayoutSnapshot
)

from .services import (
    CatalogService, LayoutInstanceService, GroupingService,
    GroupReservationService, LayoutQueryService
)

__all__ = [
    # Models
    "CatalogTable", "LayoutInstance", "TableGroup", "TableState", "GroupReservation",

    # Schemas
    "CatalogTableResponse", "CatalogTableSeed",
    "LayoutInstanceResponse", "TablePositionUpdate",
    "GroupRequest", "UngroupRequest",
    "GroupingResult", "GroupTransition", "GroupTransitionKind", "GroupMembership",
    "ReservationFields", "CreateReservation", "UpdateReservation", "ReservationCommand",
    "ReservationResponse", "TableSnapshot", "LayoutSnapshot",

    # Services
    "CatalogService", "LayoutInstanceService", "GroupingService",
    "GroupReservationService", "LayoutQueryService",
]
