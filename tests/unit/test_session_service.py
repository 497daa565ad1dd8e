"""Unit tests for the session lifecycle.

Tests call session_service functions directly with the db_session fixture.
No HTTP layer involved.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException
from libs.auth.models import Role
from pydantic import ValidationError
from services.communications_service.models import Notification, NotificationType
from services.payments_service.models import Discount
from services.sessions_service.models import Session, SessionStatus, TimeSlot
from services.sessions_service.schemas import (
    SessionCreate,
    SessionFilters,
    SessionUpdate,
)
from services.sessions_service.services import session_service, time_slot_service
from sqlalchemy import func, select
from tests.conftest import make_auth_user
from tests.factories import (
    AccountFactory,
    BookingTypeFactory,
    CoachFactory,
    DiscountFactory,
    SessionFactory,
    TimeSlotFactory,
    _now,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _setup_bookable(db, *, base_price=Decimal("50.00")):
    """Insert a coach, a client, an open slot and an active booking type."""
    coach = CoachFactory.create()
    client = AccountFactory.create()
    slot = TimeSlotFactory.create(coach_id=coach.id)
    booking_type = BookingTypeFactory.create(coach_id=coach.id, base_price=base_price)
    db.add_all([coach, client, slot, booking_type])
    await db.commit()
    return coach, client, slot, booking_type


async def _book(db, client, slot, booking_type, **extra):
    return await session_service.create_session(
        db,
        SessionCreate(booking_type_id=booking_type.id, time_slot_id=slot.id, **extra),
        make_auth_user(client),
    )


async def _slot_available(db, slot_id) -> bool:
    result = await db.execute(
        select(TimeSlot.is_available).where(TimeSlot.id == slot_id)
    )
    return result.scalar_one()


async def _count_sessions(db) -> int:
    result = await db.execute(select(func.count(Session.id)))
    return result.scalar_one()


# ---------------------------------------------------------------------------
# create_session
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_booking_creates_scheduled_unpaid_session(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)

    session = await _book(db_session, client, slot, booking_type, notes="Backhand")

    assert session.status == SessionStatus.SCHEDULED
    assert session.is_paid is False
    assert session.user_id == client.id
    assert session.coach_id == coach.id
    assert session.price == Decimal("50.00")
    assert session.duration_min == slot.duration_min
    assert session.notes == "Backhand"
    assert await _slot_available(db_session, slot.id) is False


@pytest.mark.asyncio
@pytest.mark.unit
async def test_booking_writes_confirmation_for_both_participants(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)

    await _book(db_session, client, slot, booking_type)

    result = await db_session.execute(
        select(Notification.recipient_id).where(
            Notification.type == NotificationType.BOOKING_CONFIRMATION
        )
    )
    assert set(result.scalars().all()) == {client.id, coach.id}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_booking_survives_notification_failure(db_session, monkeypatch):
    from services.communications_service.services import notification_service

    async def _boom(db, session):
        raise RuntimeError("notification store down")

    monkeypatch.setattr(notification_service, "notify_booking_confirmed", _boom)
    _, client, slot, booking_type = await _setup_bookable(db_session)

    session = await _book(db_session, client, slot, booking_type)

    assert session.status == SessionStatus.SCHEDULED
    assert await _count_sessions(db_session) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_booking_unavailable_slot_rejected(db_session):
    _, client, slot, booking_type = await _setup_bookable(db_session)
    slot.is_available = False
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await _book(db_session, client, slot, booking_type)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Time slot not available"
    assert await _count_sessions(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_second_booking_of_same_slot_rejected(db_session):
    _, client, slot, booking_type = await _setup_bookable(db_session)
    other = AccountFactory.create()
    db_session.add(other)
    await db_session.commit()

    await _book(db_session, client, slot, booking_type)
    with pytest.raises(HTTPException) as exc_info:
        await _book(db_session, other, slot, booking_type)

    assert exc_info.value.status_code == 400
    assert await _count_sessions(db_session) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_lost_slot_race_rolls_back_booking(db_session, monkeypatch):
    """A booking that passed the availability check but lost the claim."""
    _, client, slot, booking_type = await _setup_bookable(db_session)
    discount = DiscountFactory.create(coach_id=booking_type.coach_id)
    db_session.add(discount)
    await db_session.commit()

    # Another request claims the slot after our availability check.
    async def _stale_lookup(db, slot_id):
        await time_slot_service.mark_unavailable(db, slot_id)
        return slot

    monkeypatch.setattr(time_slot_service, "find_available_by_id", _stale_lookup)

    with pytest.raises(HTTPException) as exc_info:
        await _book(db_session, client, slot, booking_type, discount_code=discount.code)

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Time slot was booked by another request"
    assert await _count_sessions(db_session) == 0
    use_count = await db_session.execute(
        select(Discount.use_count).where(Discount.id == discount.id)
    )
    assert use_count.scalar_one() == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_inactive_booking_type_rejected(db_session):
    _, client, slot, booking_type = await _setup_bookable(db_session)
    booking_type.is_active = False
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await _book(db_session, client, slot, booking_type)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Invalid booking type"
    assert await _slot_available(db_session, slot.id) is True


@pytest.mark.asyncio
@pytest.mark.unit
async def test_pending_bookings_limit(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)
    db_session.add_all(
        [SessionFactory.create(user_id=client.id, coach_id=coach.id) for _ in range(3)]
    )
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await _book(db_session, client, slot, booking_type)

    assert exc_info.value.status_code == 400
    assert "Maximum pending bookings" in exc_info.value.detail


@pytest.mark.asyncio
@pytest.mark.unit
async def test_paid_sessions_do_not_count_as_pending(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)
    db_session.add_all(
        [
            SessionFactory.create(user_id=client.id, coach_id=coach.id, is_paid=True)
            for _ in range(3)
        ]
    )
    await db_session.commit()

    session = await _book(db_session, client, slot, booking_type)
    assert session.status == SessionStatus.SCHEDULED


# ---------------------------------------------------------------------------
# Discounts at booking time
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_valid_discount_reduces_price_and_counts_usage(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)
    discount = DiscountFactory.create(coach_id=coach.id, amount=Decimal("15.00"))
    db_session.add(discount)
    await db_session.commit()

    session = await _book(db_session, client, slot, booking_type, discount_code=discount.code)

    assert session.price == Decimal("35.00")
    assert session.discount_id == discount.id
    assert session.discount_code == discount.code
    await db_session.refresh(discount)
    assert discount.use_count == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_discount_never_drives_price_negative(db_session):
    coach, client, slot, booking_type = await _setup_bookable(
        db_session, base_price=Decimal("20.00")
    )
    discount = DiscountFactory.create(coach_id=coach.id, amount=Decimal("30.00"))
    db_session.add(discount)
    await db_session.commit()

    session = await _book(db_session, client, slot, booking_type, discount_code=discount.code)

    assert session.price == Decimal("0.00")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_expired_discount_stored_but_not_applied(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)
    discount = DiscountFactory.create(
        coach_id=coach.id, expiry=_now() - timedelta(days=1)
    )
    db_session.add(discount)
    await db_session.commit()

    session = await _book(db_session, client, slot, booking_type, discount_code=discount.code)

    assert session.price == Decimal("50.00")
    assert session.discount_id is None
    assert session.discount_code == discount.code


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_discount_code_kept_verbatim(db_session):
    _, client, slot, booking_type = await _setup_bookable(db_session)

    session = await _book(db_session, client, slot, booking_type, discount_code="nope-123")

    assert session.price == Decimal("50.00")
    assert session.discount_code == "nope-123"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_exhausted_discount_not_applied(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)
    discount = DiscountFactory.create(coach_id=coach.id, max_usage=1, use_count=1)
    db_session.add(discount)
    await db_session.commit()

    session = await _book(db_session, client, slot, booking_type, discount_code=discount.code)

    assert session.price == Decimal("50.00")
    await db_session.refresh(discount)
    assert discount.use_count == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_other_coach_discount_not_applied(db_session):
    _, client, slot, booking_type = await _setup_bookable(db_session)
    other_coach = CoachFactory.create()
    discount = DiscountFactory.create(coach_id=other_coach.id, amount=Decimal("15.00"))
    db_session.add_all([other_coach, discount])
    await db_session.commit()

    session = await _book(db_session, client, slot, booking_type, discount_code=discount.code)

    assert session.price == Decimal("50.00")
    assert session.discount_id is None
    assert session.discount_code == discount.code
    await db_session.refresh(discount)
    assert discount.use_count == 0


# ---------------------------------------------------------------------------
# find_all / find_one
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_all_scopes_by_role(db_session):
    coach = CoachFactory.create()
    client = AccountFactory.create()
    mine = SessionFactory.create(user_id=client.id, coach_id=coach.id)
    other = SessionFactory.create()
    db_session.add_all([coach, client, mine, other])
    await db_session.commit()

    as_client = await session_service.find_all(
        db_session, SessionFilters(), make_auth_user(client)
    )
    as_coach = await session_service.find_all(
        db_session, SessionFilters(), make_auth_user(coach)
    )
    as_admin = await session_service.find_all(
        db_session, SessionFilters(), make_auth_user(role=Role.ADMIN)
    )

    assert [s.id for s in as_client] == [mine.id]
    assert [s.id for s in as_coach] == [mine.id]
    assert {s.id for s in as_admin} == {mine.id, other.id}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_all_filters_and_orders_descending(db_session):
    client = AccountFactory.create()
    soon = SessionFactory.create(user_id=client.id, date_time=_now() + timedelta(days=1))
    later = SessionFactory.create(user_id=client.id, date_time=_now() + timedelta(days=5))
    done = SessionFactory.create(
        user_id=client.id,
        date_time=_now() + timedelta(days=3),
        status=SessionStatus.COMPLETED,
    )
    db_session.add_all([client, soon, later, done])
    await db_session.commit()
    caller = make_auth_user(client)

    everything = await session_service.find_all(db_session, SessionFilters(), caller)
    scheduled = await session_service.find_all(
        db_session, SessionFilters(status=SessionStatus.SCHEDULED), caller
    )
    windowed = await session_service.find_all(
        db_session, SessionFilters(start_date=_now() + timedelta(days=2)), caller
    )

    assert [s.id for s in everything] == [later.id, done.id, soon.id]
    assert [s.id for s in scheduled] == [later.id, soon.id]
    assert [s.id for s in windowed] == [later.id, done.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_one_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        await session_service.find_one(db_session, uuid.uuid4(), make_auth_user())

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Session not found"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_find_one_forbidden_for_outsider(db_session):
    session = SessionFactory.create()
    db_session.add(session)
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await session_service.find_one(db_session, session.id, make_auth_user())

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Not authorized to access this session"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_admin_can_view_any_session(db_session):
    session = SessionFactory.create()
    db_session.add(session)
    await db_session.commit()

    found = await session_service.find_one(
        db_session, session.id, make_auth_user(role=Role.ADMIN)
    )
    assert found.id == session.id


# ---------------------------------------------------------------------------
# update_session
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_client_can_update_notes(db_session):
    client = AccountFactory.create()
    session = SessionFactory.create(user_id=client.id)
    db_session.add_all([client, session])
    await db_session.commit()

    updated = await session_service.update_session(
        db_session, session.id, SessionUpdate(notes="Bring spare racket"), make_auth_user(client)
    )
    assert updated.notes == "Bring spare racket"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_client_cannot_change_status(db_session):
    client = AccountFactory.create()
    session = SessionFactory.create(user_id=client.id)
    db_session.add_all([client, session])
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await session_service.update_session(
            db_session,
            session.id,
            SessionUpdate(status=SessionStatus.CONFIRMED),
            make_auth_user(client),
        )
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
@pytest.mark.unit
async def test_coach_walks_session_through_lifecycle(db_session):
    coach = CoachFactory.create()
    session = SessionFactory.create(coach_id=coach.id)
    db_session.add_all([coach, session])
    await db_session.commit()
    caller = make_auth_user(coach)

    for target in (SessionStatus.CONFIRMED, SessionStatus.COMPLETED):
        session = await session_service.update_session(
            db_session, session.id, SessionUpdate(status=target), caller
        )
        assert session.status == target


@pytest.mark.asyncio
@pytest.mark.unit
async def test_invalid_transition_rejected(db_session):
    coach = CoachFactory.create()
    session = SessionFactory.create(coach_id=coach.id, status=SessionStatus.CANCELLED)
    db_session.add_all([coach, session])
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await session_service.update_session(
            db_session,
            session.id,
            SessionUpdate(status=SessionStatus.CONFIRMED),
            make_auth_user(coach),
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Invalid status transition from cancelled to confirmed"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_outsider_cannot_update_session(db_session):
    owner = AccountFactory.create()
    outsider = AccountFactory.create()
    session = SessionFactory.create(user_id=owner.id)
    db_session.add_all([owner, outsider, session])
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await session_service.update_session(
            db_session, session.id, SessionUpdate(notes="mine now"), make_auth_user(outsider)
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Not authorized to access this session"
    await db_session.refresh(session)
    assert session.notes is None


@pytest.mark.unit
def test_update_rejects_explicit_null_for_required_fields():
    with pytest.raises(ValidationError):
        SessionUpdate(is_paid=None)
    with pytest.raises(ValidationError):
        SessionUpdate(status=None)

    assert SessionUpdate(notes=None).model_dump(exclude_unset=True) == {"notes": None}


# ---------------------------------------------------------------------------
# cancel_session
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cancel_releases_slot_and_notifies(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)
    session = await _book(db_session, client, slot, booking_type)

    cancelled = await session_service.cancel_session(
        db_session, session.id, make_auth_user(client)
    )

    assert cancelled.status == SessionStatus.CANCELLED
    assert await _slot_available(db_session, slot.id) is True
    result = await db_session.execute(
        select(Notification.recipient_id).where(
            Notification.type == NotificationType.BOOKING_CANCELLATION
        )
    )
    assert result.scalars().all() == [coach.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cancel_twice_fails(db_session):
    _, client, slot, booking_type = await _setup_bookable(db_session)
    session = await _book(db_session, client, slot, booking_type)
    caller = make_auth_user(client)
    await session_service.cancel_session(db_session, session.id, caller)

    with pytest.raises(HTTPException) as exc_info:
        await session_service.cancel_session(db_session, session.id, caller)

    assert exc_info.value.status_code == 400
    assert "already cancelled" in exc_info.value.detail


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cancel_completed_session_fails(db_session):
    client = AccountFactory.create()
    session = SessionFactory.create(user_id=client.id, status=SessionStatus.COMPLETED)
    db_session.add_all([client, session])
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await session_service.cancel_session(db_session, session.id, make_auth_user(client))

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Cannot cancel a completed session"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cancel_past_session_fails(db_session):
    client = AccountFactory.create()
    session = SessionFactory.create(
        user_id=client.id, date_time=_now() - timedelta(hours=2)
    )
    db_session.add_all([client, session])
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await session_service.cancel_session(db_session, session.id, make_auth_user(client))

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Cannot cancel past sessions"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_outsider_cannot_cancel(db_session):
    session = SessionFactory.create()
    db_session.add(session)
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await session_service.cancel_session(db_session, session.id, make_auth_user())

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Not authorized to cancel this session"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_admin_cancel_notifies_both_participants(db_session):
    coach, client, slot, booking_type = await _setup_bookable(db_session)
    session = await _book(db_session, client, slot, booking_type)

    await session_service.cancel_session(
        db_session, session.id, make_auth_user(role=Role.ADMIN)
    )

    result = await db_session.execute(
        select(Notification.recipient_id).where(
            Notification.type == NotificationType.BOOKING_CANCELLATION
        )
    )
    assert set(result.scalars().all()) == {client.id, coach.id}


# ---------------------------------------------------------------------------
# mark_paid / reminders / stats
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_paid(db_session):
    session = SessionFactory.create()
    db_session.add(session)
    await db_session.commit()

    paid = await session_service.mark_paid(db_session, session.id, "pay_123")

    assert paid.is_paid is True
    assert paid.payment_id == "pay_123"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reminders_sent_once_per_session(db_session):
    soon = SessionFactory.create(date_time=_now() + timedelta(hours=3))
    far = SessionFactory.create(date_time=_now() + timedelta(days=4))
    cancelled = SessionFactory.create(
        date_time=_now() + timedelta(hours=5), status=SessionStatus.CANCELLED
    )
    db_session.add_all([soon, far, cancelled])
    await db_session.commit()

    assert await session_service.send_booking_reminders(db_session) == 1
    assert await session_service.send_booking_reminders(db_session) == 0

    result = await db_session.execute(
        select(func.count(Notification.id)).where(
            Notification.type == NotificationType.BOOKING_REMINDER
        )
    )
    assert result.scalar_one() == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_stats_for_coach(db_session):
    coach = CoachFactory.create()
    db_session.add_all(
        [
            coach,
            SessionFactory.create(coach_id=coach.id),
            SessionFactory.create(
                coach_id=coach.id,
                status=SessionStatus.COMPLETED,
                price=Decimal("40.00"),
                date_time=_now() - timedelta(days=2),
            ),
            SessionFactory.create(
                coach_id=coach.id,
                status=SessionStatus.COMPLETED,
                price=Decimal("25.50"),
                date_time=_now() - timedelta(days=1),
            ),
            SessionFactory.create(status=SessionStatus.COMPLETED),
        ]
    )
    await db_session.commit()

    stats = await session_service.stats(db_session, make_auth_user(coach))

    assert stats.total == 3
    assert stats.upcoming == 1
    assert stats.by_status[SessionStatus.COMPLETED] == 2
    assert stats.by_status[SessionStatus.CANCELLED] == 0
    assert stats.completed_revenue == Decimal("65.50")
