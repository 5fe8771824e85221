# backend/modules/floorplan/models/floorplan_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    Text,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin


class CatalogTable(Base):
    """Physical table definition; read-only at runtime"""

    __tablename__ = "tables"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False)

    # Default position and dimensions on the canvas
    default_x = Column(Integer, nullable=False)
    default_y = Column(Integer, nullable=False)
    width = Column(Integer, nullable=False)
    height = Column(Integer, nullable=False)

    capacity = Column(Integer)

    states = relationship("TableState", back_populates="table", passive_deletes=True)


class LayoutInstance(Base, TimestampMixin):
    """Floor plan snapshot for a single calendar date"""

    __tablename__ = "layout_instances"

    id = Column(Integer, primary_key=True)
    layout_date = Column(Date, nullable=False, unique=True)

    table_states = relationship(
        "TableState",
        back_populates="layout_instance",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TableState.table_id",
    )
    groups = relationship(
        "TableGroup",
        back_populates="layout_instance",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reservations = relationship(
        "GroupReservation",
        back_populates="layout_instance",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TableGroup(Base):
    """Ad-hoc set of tables within one layout instance"""

    __tablename__ = "table_groups"

    id = Column(Integer, primary_key=True)
    layout_instance_id = Column(
        Integer,
        ForeignKey("layout_instances.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    layout_instance = relationship("LayoutInstance", back_populates="groups")
    members = relationship("TableState", back_populates="group", passive_deletes=True)
    reservation = relationship(
        "GroupReservation",
        back_populates="group",
        uselist=False,
        passive_deletes=True,
    )

    # Dissolved group ids are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}


class TableState(Base):
    """Position and group membership of one table on one date"""

    __tablename__ = "table_state"

    layout_instance_id = Column(
        Integer,
        ForeignKey("layout_instances.id", ondelete="CASCADE"),
        primary_key=True,
    )
    table_id = Column(
        Integer, ForeignKey("tables.id", ondelete="CASCADE"), primary_key=True
    )

    x = Column(Integer, nullable=False)
    y = Column(Integer, nullable=False)

    group_id = Column(Integer, ForeignKey("table_groups.id", ondelete="SET NULL"))

    layout_instance = relationship("LayoutInstance", back_populates="table_states")
    table = relationship("CatalogTable", back_populates="states")
    group = relationship("TableGroup", back_populates="members")

    __table_args__ = (
        Index("idx_table_state_layout", "layout_instance_id"),
        Index("idx_table_state_group", "group_id"),
    )


class GroupReservation(Base, TimestampMixin):
    """Reservation bound to exactly one table group"""

    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True)
    layout_instance_id = Column(
        Integer,
        ForeignKey("layout_instances.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    group_id = Column(
        Integer, ForeignKey("table_groups.id", ondelete="CASCADE"), nullable=False
    )

    # Local clock time, "HH:MM"
    time = Column(String(5), nullable=False)
    name = Column(String(100), nullable=False)
    party_size = Column(Integer, nullable=False)
    notes = Column(Text)

    layout_instance = relationship("LayoutInstance", back_populates="reservations")
    group = relationship("TableGroup", back_populates="reservation")

    __table_args__ = (
        UniqueConstraint("group_id", name="uix_reservation_group"),
        CheckConstraint("party_size > 0", name="chk_reservation_party_size"),
        {"sqlite_autoincrement": True},
    )
