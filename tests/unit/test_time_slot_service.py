"""Unit tests for the time slot registry."""

import uuid
from datetime import timedelta

import pytest
from fastapi import HTTPException
from libs.auth.models import Role
from pydantic import ValidationError
from services.sessions_service.schemas import (
    TimeSlotCreate,
    TimeSlotFilters,
    TimeSlotUpdate,
)
from services.sessions_service.services import time_slot_service
from tests.conftest import make_auth_user
from tests.factories import CoachFactory, SessionFactory, TimeSlotFactory, _now


async def _coach_with_slots(db, *offsets_days, **slot_overrides):
    coach = CoachFactory.create()
    slots = [
        TimeSlotFactory.create(
            coach_id=coach.id,
            date_time=(_now() + timedelta(days=days)).replace(microsecond=0),
            **slot_overrides,
        )
        for days in offsets_days
    ]
    db.add(coach)
    db.add_all(slots)
    await db.commit()
    return coach, slots


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_available_skips_past_and_booked(db_session):
    coach, (past, later, sooner) = await _coach_with_slots(db_session, -1, 5, 2)
    booked = TimeSlotFactory.create(coach_id=coach.id, is_available=False)
    db_session.add(booked)
    await db_session.commit()

    slots = await time_slot_service.find_available(db_session, TimeSlotFilters())

    assert [s.id for s in slots] == [sooner.id, later.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_available_window_and_coach_filter(db_session):
    coach, (d1, d3, d6) = await _coach_with_slots(db_session, 1, 3, 6)
    await _coach_with_slots(db_session, 3)

    slots = await time_slot_service.find_available(
        db_session,
        TimeSlotFilters(
            coach_id=coach.id,
            start_date=_now() + timedelta(days=2),
            end_date=_now() + timedelta(days=4),
        ),
    )

    assert [s.id for s in slots] == [d3.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_by_coach_includes_booked_slots(db_session):
    coach, (open_slot,) = await _coach_with_slots(db_session, 1)
    booked = TimeSlotFactory.create(
        coach_id=coach.id, date_time=_now() + timedelta(days=2), is_available=False
    )
    db_session.add(booked)
    await db_session.commit()

    slots = await time_slot_service.find_by_coach(
        db_session, coach.id, TimeSlotFilters()
    )

    assert [s.id for s in slots] == [open_slot.id, booked.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_one_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        await time_slot_service.find_one(db_session, uuid.uuid4())

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Time slot not found"


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_coach_creates_slot_for_self(db_session):
    coach = CoachFactory.create()
    db_session.add(coach)
    await db_session.commit()

    slot = await time_slot_service.create_time_slot(
        db_session,
        # coach_id from a coach payload is ignored
        TimeSlotCreate(date_time=_now() + timedelta(days=1), coach_id=uuid.uuid4()),
        make_auth_user(coach),
    )

    assert slot.coach_id == coach.id
    assert slot.is_available is True
    assert slot.duration_min == 60


@pytest.mark.asyncio
@pytest.mark.unit
async def test_admin_creates_slot_for_coach(db_session):
    coach = CoachFactory.create()
    db_session.add(coach)
    await db_session.commit()

    slot = await time_slot_service.create_time_slot(
        db_session,
        TimeSlotCreate(date_time=_now() + timedelta(days=1), coach_id=coach.id),
        make_auth_user(role=Role.ADMIN),
    )

    assert slot.coach_id == coach.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_other_coach_cannot_update_slot(db_session):
    _, (slot,) = await _coach_with_slots(db_session, 1)
    intruder = CoachFactory.create()
    db_session.add(intruder)
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await time_slot_service.update_time_slot(
            db_session, slot.id, TimeSlotUpdate(duration_min=90), make_auth_user(intruder)
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Not authorized to update this time slot"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_owner_updates_slot(db_session):
    coach, (slot,) = await _coach_with_slots(db_session, 1)

    updated = await time_slot_service.update_time_slot(
        db_session, slot.id, TimeSlotUpdate(duration_min=90), make_auth_user(coach)
    )

    assert updated.duration_min == 90


@pytest.mark.asyncio
@pytest.mark.unit
async def test_other_coach_cannot_delete_slot(db_session):
    _, (slot,) = await _coach_with_slots(db_session, 1)

    with pytest.raises(HTTPException) as exc_info:
        await time_slot_service.remove_time_slot(
            db_session, slot.id, make_auth_user(role=Role.COACH)
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Not authorized to delete this time slot"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_admin_deletes_any_slot(db_session):
    _, (slot,) = await _coach_with_slots(db_session, 1)

    await time_slot_service.remove_time_slot(
        db_session, slot.id, make_auth_user(role=Role.ADMIN)
    )

    with pytest.raises(HTTPException):
        await time_slot_service.find_one(db_session, slot.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_booked_slot_cannot_be_deleted(db_session):
    coach, (slot,) = await _coach_with_slots(db_session, 1, is_available=False)
    session = SessionFactory.create(coach_id=coach.id, time_slot_id=slot.id)
    db_session.add(session)
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await time_slot_service.remove_time_slot(
            db_session, slot.id, make_auth_user(coach)
        )

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Cannot delete a booked time slot"
    assert (await time_slot_service.find_one(db_session, slot.id)).id == slot.id


@pytest.mark.unit
def test_update_rejects_explicit_null():
    with pytest.raises(ValidationError):
        TimeSlotUpdate(date_time=None)
    with pytest.raises(ValidationError):
        TimeSlotUpdate(is_available=None)

    assert TimeSlotUpdate(duration_min=90).model_dump(exclude_unset=True) == {
        "duration_min": 90
    }


# ---------------------------------------------------------------------------
# Availability flag
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_unavailable_only_wins_once(db_session):
    _, (slot,) = await _coach_with_slots(db_session, 1)

    first = await time_slot_service.mark_unavailable(db_session, slot.id)
    second = await time_slot_service.mark_unavailable(db_session, slot.id)

    assert first is True
    assert second is False


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_available_reopens_slot(db_session):
    _, (slot,) = await _coach_with_slots(db_session, 1, is_available=False)

    await time_slot_service.mark_available(db_session, slot.id)

    assert await time_slot_service.find_available_by_id(db_session, slot.id) is not None
