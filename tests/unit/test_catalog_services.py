"""Unit tests for booking types and discount codes."""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException
from libs.auth.models import Role
from pydantic import ValidationError
from services.payments_service.schemas import DiscountCreate, DiscountUpdate
from services.payments_service.services import discount_service
from services.sessions_service.schemas import BookingTypeCreate, BookingTypeUpdate
from services.sessions_service.services import booking_type_service
from tests.conftest import make_auth_user
from tests.factories import BookingTypeFactory, CoachFactory, DiscountFactory, _now

# ---------------------------------------------------------------------------
# Booking types
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_booking_type_scoped_to_coach(db_session):
    coach = CoachFactory.create()
    db_session.add(coach)
    await db_session.commit()

    booking_type = await booking_type_service.create_booking_type(
        db_session,
        BookingTypeCreate(name="Group clinic", base_price=Decimal("25.00")),
        make_auth_user(coach),
    )

    assert booking_type.coach_id == coach.id
    assert booking_type.is_active is True
    assert booking_type.base_price == Decimal("25.00")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_soft_delete_hides_booking_type(db_session):
    coach = CoachFactory.create()
    booking_type = BookingTypeFactory.create(coach_id=coach.id)
    db_session.add_all([coach, booking_type])
    await db_session.commit()

    await booking_type_service.remove_booking_type(
        db_session, booking_type.id, make_auth_user(coach)
    )

    assert await booking_type_service.list_active(db_session) == []
    assert await booking_type_service.list_by_coach(db_session, coach.id) == []
    assert await booking_type_service.find_active_by_id(db_session, booking_type.id) is None
    # Still resolvable by id for sessions that reference it.
    kept = await booking_type_service.get_booking_type(db_session, booking_type.id)
    assert kept.is_active is False


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_by_coach_without_types_is_empty(db_session):
    assert await booking_type_service.list_by_coach(db_session, uuid.uuid4()) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_get_booking_type_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        await booking_type_service.get_booking_type(db_session, uuid.uuid4())

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Booking type not found"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_other_coach_cannot_update_booking_type(db_session):
    booking_type = BookingTypeFactory.create()
    db_session.add(booking_type)
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await booking_type_service.update_booking_type(
            db_session,
            booking_type.id,
            BookingTypeUpdate(base_price=Decimal("1.00")),
            make_auth_user(role=Role.COACH),
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Not authorized to update this booking type"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_admin_updates_any_booking_type(db_session):
    booking_type = BookingTypeFactory.create()
    db_session.add(booking_type)
    await db_session.commit()

    updated = await booking_type_service.update_booking_type(
        db_session,
        booking_type.id,
        BookingTypeUpdate(name="Video analysis"),
        make_auth_user(role=Role.ADMIN),
    )

    assert updated.name == "Video analysis"


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------


def _discount_payload(**overrides) -> DiscountCreate:
    data = {
        "code": "SPRING10",
        "amount": Decimal("10.00"),
        "expiry": _now() + timedelta(days=10),
        "max_usage": 2,
    }
    data.update(overrides)
    return DiscountCreate(**data)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_discount_rejects_duplicate_code(db_session):
    coach = CoachFactory.create()
    db_session.add(coach)
    await db_session.commit()
    caller = make_auth_user(coach)

    await discount_service.create_discount(db_session, _discount_payload(), caller)
    with pytest.raises(HTTPException) as exc_info:
        await discount_service.create_discount(db_session, _discount_payload(), caller)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Discount code already exists"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_validate_code(db_session):
    good = DiscountFactory.create(code="GOOD")
    expired = DiscountFactory.create(code="OLD", expiry=_now() - timedelta(hours=1))
    used_up = DiscountFactory.create(code="USED", max_usage=1, use_count=1)
    inactive = DiscountFactory.create(code="GONE", is_active=False)
    db_session.add_all([good, expired, used_up, inactive])
    await db_session.commit()

    assert (await discount_service.validate_code(db_session, "GOOD")).id == good.id

    for code, message in [
        ("OLD", "Invalid or expired discount code"),
        ("GONE", "Invalid or expired discount code"),
        ("MISSING", "Invalid or expired discount code"),
        ("USED", "Discount code usage limit reached"),
    ]:
        with pytest.raises(HTTPException) as exc_info:
            await discount_service.validate_code(db_session, code)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == message


@pytest.mark.asyncio
@pytest.mark.unit
async def test_increment_usage_stops_at_limit(db_session):
    discount = DiscountFactory.create(code="ONCE", max_usage=1)
    db_session.add(discount)
    await db_session.commit()

    assert await discount_service.increment_usage(db_session, "ONCE") is True
    assert await discount_service.increment_usage(db_session, "ONCE") is False
    await db_session.commit()

    assert await discount_service.find_applicable(db_session, "ONCE") is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_by_code_owner_gated(db_session):
    coach = CoachFactory.create()
    discount = DiscountFactory.create(coach_id=coach.id, code="SUMMER")
    db_session.add_all([coach, discount])
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await discount_service.update_by_code(
            db_session,
            "SUMMER",
            DiscountUpdate(amount=Decimal("99.00")),
            make_auth_user(role=Role.COACH),
        )
    assert exc_info.value.status_code == 403

    updated = await discount_service.update_by_code(
        db_session, "SUMMER", DiscountUpdate(max_usage=10), make_auth_user(coach)
    )
    assert updated.max_usage == 10


@pytest.mark.asyncio
@pytest.mark.unit
async def test_removed_code_cannot_be_updated(db_session):
    coach = CoachFactory.create()
    discount = DiscountFactory.create(coach_id=coach.id, code="WINTER")
    db_session.add_all([coach, discount])
    await db_session.commit()
    caller = make_auth_user(coach)

    await discount_service.remove_by_code(db_session, "WINTER", caller)

    with pytest.raises(HTTPException) as exc_info:
        await discount_service.update_by_code(
            db_session, "WINTER", DiscountUpdate(max_usage=3), caller
        )
    assert exc_info.value.status_code == 404


@pytest.mark.unit
def test_catalog_updates_reject_explicit_null():
    for payload in (
        {"name": None},
        {"base_price": None},
        {"is_active": None},
    ):
        with pytest.raises(ValidationError):
            BookingTypeUpdate(**payload)
    for payload in ({"amount": None}, {"expiry": None}, {"max_usage": None}):
        with pytest.raises(ValidationError):
            DiscountUpdate(**payload)

    assert BookingTypeUpdate(description=None).model_dump(exclude_unset=True) == {
        "description": None
    }
