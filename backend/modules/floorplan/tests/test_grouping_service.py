# backend/modules/floorplan/tests/test_grouping_service.py

"""
Tests for the grouping engine: group, regroup and ungroup.
"""

import pytest
from datetime import date

from core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.floorplan_models import GroupReservation, TableGroup, TableState
from ..schemas.floorplan_schemas import (
    CreateReservation,
    GroupTransitionKind,
    ReservationFields,
)


def _memberships(db_session, instance_id):
    """table_id -> group_id for one layout instance"""
    rows = (
        db_session.query(TableState.table_id, TableState.group_id)
        .filter(TableState.layout_instance_id == instance_id)
        .all()
    )
    return dict(rows)


def _assert_no_empty_groups(db_session):
    for group in db_session.query(TableGroup).all():
        members = (
            db_session.query(TableState).filter(TableState.group_id == group.id).count()
        )
        assert members >= 1, f"group {group.id} has no members"


def _reserve(reservation_service, layout_date, group_id, name="Smith"):
    return reservation_service.upsert_reservation(
        layout_date,
        CreateReservation(
            group_id=group_id,
            details=ReservationFields(time="18:30", name=name, party_size=4),
        ),
    )


class TestGroupTables:
    """Creating groups from ungrouped tables"""

    def test_group_two_tables(self, grouping_service, db_session, opened_layout, layout_date):
        result = grouping_service.group_tables(layout_date, [1, 2])

        assert result.group_id is not None
        memberships = _memberships(db_session, opened_layout.id)
        assert memberships == {1: result.group_id, 2: result.group_id, 3: None}
        assert [t.kind for t in result.transitions] == [GroupTransitionKind.CREATED]
        assert result.transitions[0].table_ids == [1, 2]

    def test_single_table_creates_singleton_group(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        result = grouping_service.group_tables(layout_date, [3])

        memberships = _memberships(db_session, opened_layout.id)
        assert memberships[3] == result.group_id
        assert memberships[1] is None and memberships[2] is None

    def test_duplicate_ids_are_collapsed(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        result = grouping_service.group_tables(layout_date, [2, 2, 1])

        assert result.transitions[-1].table_ids == [1, 2]

    def test_empty_table_ids(self, grouping_service, opened_layout, layout_date):
        with pytest.raises(ValidationError):
            grouping_service.group_tables(layout_date, [])

    def test_group_by_instance_rejects_empty_table_ids(
        self, grouping_service, db_session, opened_layout
    ):
        with pytest.raises(ValidationError):
            grouping_service.group(opened_layout.id, [])

        assert db_session.query(TableGroup).count() == 0
        _assert_no_empty_groups(db_session)

    def test_unknown_table_leaves_state_unchanged(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        with pytest.raises(NotFoundError):
            grouping_service.group_tables(layout_date, [1, 99])

        assert db_session.query(TableGroup).count() == 0
        assert set(_memberships(db_session, opened_layout.id).values()) == {None}

    def test_unknown_date(self, grouping_service, catalog):
        with pytest.raises(NotFoundError):
            grouping_service.group_tables(date(2031, 1, 1), [1])


class TestRegroup:
    """Grouping tables that already belong to groups"""

    def test_regrouping_subset_yields_new_group(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        original = grouping_service.group_tables(layout_date, [1, 2, 3])

        result = grouping_service.group_tables(layout_date, [1, 2])

        assert result.group_id != original.group_id
        memberships = _memberships(db_session, opened_layout.id)
        assert memberships[1] == memberships[2] == result.group_id
        # The remaining member keeps the old group
        assert memberships[3] == original.group_id
        assert result.transitions[0].kind == GroupTransitionKind.DETACHED
        assert result.transitions[0].group_id == original.group_id
        assert result.transitions[0].table_ids == [1, 2]
        _assert_no_empty_groups(db_session)

    def test_regrouping_same_set_recreates_group(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        original = grouping_service.group_tables(layout_date, [1, 2])

        result = grouping_service.group_tables(layout_date, [1, 2])

        assert result.group_id != original.group_id
        assert result.dissolved_group_ids == [original.group_id]
        assert db_session.query(TableGroup).filter(TableGroup.id == original.group_id).first() is None
        assert db_session.query(TableGroup).count() == 1

    def test_merging_two_groups(self, grouping_service, db_session, opened_layout, layout_date):
        first = grouping_service.group_tables(layout_date, [1])
        second = grouping_service.group_tables(layout_date, [2, 3])

        result = grouping_service.group_tables(layout_date, [1, 2, 3])

        assert sorted(result.dissolved_group_ids) == sorted([first.group_id, second.group_id])
        assert set(_memberships(db_session, opened_layout.id).values()) == {result.group_id}
        assert db_session.query(TableGroup).count() == 1

    def test_extending_group_with_ungrouped_table(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        original = grouping_service.group_tables(layout_date, [1, 2])

        result = grouping_service.group_tables(layout_date, [1, 2, 3])

        assert result.dissolved_group_ids == [original.group_id]
        assert set(_memberships(db_session, opened_layout.id).values()) == {result.group_id}

    def test_sequence_never_leaves_empty_groups(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        steps = [[1], [2], [1, 2], [3], [2, 3], [1], [1, 2, 3], [2]]
        for table_ids in steps:
            grouping_service.group_tables(layout_date, table_ids)
            _assert_no_empty_groups(db_session)

        group_id = _memberships(db_session, opened_layout.id)[1]
        grouping_service.ungroup(layout_date, group_id)
        _assert_no_empty_groups(db_session)


class TestReservationGate:
    """Reserved groups cannot be restructured"""

    def test_regroup_member_of_reserved_group_conflicts(
        self, grouping_service, reservation_service, db_session, opened_layout, layout_date
    ):
        reserved = grouping_service.group_tables(layout_date, [1])
        _reserve(reservation_service, layout_date, reserved.group_id)
        before = _memberships(db_session, opened_layout.id)

        with pytest.raises(ConflictError):
            grouping_service.group_tables(layout_date, [1, 3])

        assert _memberships(db_session, opened_layout.id) == before
        assert db_session.query(TableGroup).count() == 1

    def test_merge_with_one_reserved_group_is_atomic(
        self, grouping_service, reservation_service, db_session, opened_layout, layout_date
    ):
        free = grouping_service.group_tables(layout_date, [1])
        reserved = grouping_service.group_tables(layout_date, [2, 3])
        _reserve(reservation_service, layout_date, reserved.group_id)
        before = _memberships(db_session, opened_layout.id)

        with pytest.raises(ConflictError):
            grouping_service.group_tables(layout_date, [1, 2])

        # The unreserved group was not dissolved either
        assert _memberships(db_session, opened_layout.id) == before
        assert db_session.query(TableGroup).filter(TableGroup.id == free.group_id).count() == 1

    def test_merge_of_two_reserved_groups_conflicts(
        self, grouping_service, reservation_service, db_session, opened_layout, layout_date
    ):
        first = grouping_service.group_tables(layout_date, [1])
        second = grouping_service.group_tables(layout_date, [2])
        _reserve(reservation_service, layout_date, first.group_id, name="Smith")
        _reserve(reservation_service, layout_date, second.group_id, name="Jones")

        with pytest.raises(ConflictError):
            grouping_service.group_tables(layout_date, [1, 2])

        assert db_session.query(GroupReservation).count() == 2

    def test_ungroup_reserved_group_conflicts(
        self, grouping_service, reservation_service, db_session, opened_layout, layout_date
    ):
        reserved = grouping_service.group_tables(layout_date, [1, 2])
        _reserve(reservation_service, layout_date, reserved.group_id)

        with pytest.raises(ConflictError):
            grouping_service.ungroup(layout_date, reserved.group_id)

        memberships = _memberships(db_session, opened_layout.id)
        assert memberships[1] == memberships[2] == reserved.group_id


class TestUngroup:
    def test_ungroup_clears_members_and_deletes_group(
        self, grouping_service, db_session, opened_layout, layout_date
    ):
        result = grouping_service.group_tables(layout_date, [1, 2])

        ungrouped = grouping_service.ungroup(layout_date, result.group_id)

        assert ungrouped.group_id is None
        assert ungrouped.transitions[0].kind == GroupTransitionKind.DISSOLVED
        assert ungrouped.transitions[0].table_ids == [1, 2]
        assert db_session.query(TableGroup).count() == 0
        assert set(_memberships(db_session, opened_layout.id).values()) == {None}

    def test_ungroup_unknown_group(self, grouping_service, opened_layout, layout_date):
        with pytest.raises(NotFoundError):
            grouping_service.ungroup(layout_date, 12345)

    def test_ungroup_group_from_other_date(
        self, grouping_service, layout_service, opened_layout, layout_date
    ):
        other_date = date(2024, 1, 2)
        layout_service.ensure_instance(other_date)
        result = grouping_service.group_tables(other_date, [1])

        with pytest.raises(NotFoundError):
            grouping_service.ungroup(layout_date, result.group_id)


class TestGroupingRollback:
    """A failure after the membership rewrite leaves every row as it was"""

    def test_failed_merge_restores_memberships_and_groups(
        self, grouping_service, db_session, opened_layout, layout_date, monkeypatch
    ):
        first = grouping_service.group_tables(layout_date, [1])
        second = grouping_service.group_tables(layout_date, [2, 3])
        before = _memberships(db_session, opened_layout.id)

        def fail_flush(*args, **kwargs):
            raise RuntimeError("connection lost")

        # The new group is flushed after old groups are emptied and deleted
        monkeypatch.setattr(db_session, "flush", fail_flush)

        with pytest.raises(RuntimeError):
            grouping_service.group_tables(layout_date, [1, 2, 3])

        monkeypatch.undo()
        assert _memberships(db_session, opened_layout.id) == before
        group_ids = {group_id for (group_id,) in db_session.query(TableGroup.id)}
        assert group_ids == {first.group_id, second.group_id}

    def test_failed_ungroup_keeps_group(
        self, grouping_service, db_session, opened_layout, layout_date, monkeypatch
    ):
        result = grouping_service.group_tables(layout_date, [1, 2])

        def fail_commit():
            raise RuntimeError("connection lost")

        monkeypatch.setattr(db_session, "commit", fail_commit)

        with pytest.raises(RuntimeError):
            grouping_service.ungroup(layout_date, result.group_id)

        monkeypatch.undo()
        memberships = _memberships(db_session, opened_layout.id)
        assert memberships[1] == memberships[2] == result.group_id
        assert db_session.query(TableGroup).count() == 1
