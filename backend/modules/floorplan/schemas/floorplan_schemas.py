# backend/modules/floorplan/schemas/floorplan_schemas.py

from typing import Annotated, List, Optional, Union, Literal
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

# Largest value an SQLite INTEGER column holds
MAX_DB_INT = 2**63 - 1

# Canvas coordinates beyond this are rejected rather than stored
MAX_COORDINATE = 1_000_000

RecordId = Annotated[int, Field(ge=1, le=MAX_DB_INT)]


# Catalog Schemas
class CatalogTableResponse(BaseModel):
    """Physical table definition"""

    id: int
    name: str
    default_x: int
    default_y: int
    width: int
    height: int
    capacity: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class CatalogTableSeed(BaseModel):
    """Catalog row used by the seed script"""

    id: int = Field(..., ge=1, le=MAX_DB_INT)
    name: str = Field(..., min_length=1, max_length=50)
    default_x: int = Field(..., ge=0, le=MAX_COORDINATE)
    default_y: int = Field(..., ge=0, le=MAX_COORDINATE)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    capacity: Optional[int] = Field(None, gt=0)


# Layout Instance Schemas
class LayoutInstanceResponse(BaseModel):
    """Result of opening a date"""

    layout_instance_id: int
    layout_date: date
    existed: bool


class TablePositionUpdate(BaseModel):
    """Partial position update; at least one coordinate is required"""

    x: Optional[float] = Field(None, le=MAX_COORDINATE, allow_inf_nan=False)
    y: Optional[float] = Field(None, le=MAX_COORDINATE, allow_inf_nan=False)

    @model_validator(mode="after")
    def require_coordinate(self):
        if self.x is None and self.y is None:
            raise ValueError("No fields to update")
        return self


class OkResponse(BaseModel):
    ok: bool = True


# Grouping Schemas
class GroupRequest(BaseModel):
    """Tables to merge into a single new group"""

    table_ids: List[RecordId] = Field(..., min_length=1)

    @field_validator("table_ids")
    @classmethod
    def dedupe_table_ids(cls, v: List[int]) -> List[int]:
        return sorted(set(v))


class UngroupRequest(BaseModel):
    group_id: RecordId


class GroupTransitionKind(str, Enum):
    """Structural change applied to a group"""

    DISSOLVED = "dissolved"  # Lost its last member and was deleted
    DETACHED = "detached"  # Lost some members, still exists
    CREATED = "created"


class GroupTransition(BaseModel):
    kind: GroupTransitionKind
    group_id: int
    table_ids: List[int] = []


class GroupingResult(BaseModel):
    """Outcome of a group/ungroup call with explicit transitions"""

    group_id: Optional[int] = None
    transitions: List[GroupTransition] = []

    @property
    def dissolved_group_ids(self) -> List[int]:
        return [
            t.group_id
            for t in self.transitions
            if t.kind == GroupTransitionKind.DISSOLVED
        ]


class GroupMembership(BaseModel):
    group_id: int
    table_ids: List[int]


# Reservation Schemas
class ReservationFields(BaseModel):
    """Editable reservation fields"""

    time: str = Field(..., pattern=TIME_PATTERN, description="Local time, HH:MM")
    name: str = Field(..., max_length=100)
    party_size: int = Field(..., gt=0, le=MAX_DB_INT, strict=True)
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class CreateReservation(BaseModel):
    """Create a reservation bound to a group"""

    action: Literal["create"] = "create"
    group_id: RecordId
    details: ReservationFields


class UpdateReservation(BaseModel):
    """Update an existing reservation; its group binding is immutable"""

    action: Literal["update"] = "update"
    reservation_id: RecordId
    details: ReservationFields


ReservationCommand = Annotated[
    Union[CreateReservation, UpdateReservation], Field(discriminator="action")
]


class ReservationRequest(BaseModel):
    """HTTP body wrapper for the tagged reservation command"""

    command: ReservationCommand


class ReservationResponse(BaseModel):
    """Reservation as returned to callers"""

    id: int
    group_id: int
    time: str
    name: str
    party_size: int
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# Snapshot Schemas
class TableSnapshot(BaseModel):
    """Table state joined with catalog metadata"""

    table_id: int
    name: str
    x: int
    y: int
    width: int
    height: int
    capacity: Optional[int] = None
    group_id: Optional[int] = None


class LayoutSnapshot(BaseModel):
    """Composed read model for one date"""

    layout_instance_id: int
    layout_date: date
    tables: List[TableSnapshot]
    groups: List[GroupMembership]
    reservations: List[ReservationResponse]
