"""Account store: identity records, profile rules and role management."""

import uuid
from typing import Optional

from libs.auth.hashing import hash_password, verify_password
from libs.auth.models import CLIENT_ROLES, AuthUser, Role
from libs.common.datetime_utils import utc_now
from libs.common.errors import BadRequestError, ConflictError, NotFoundError
from libs.common.logging import get_logger
from services.accounts_service.models import Account
from services.accounts_service.schemas import AccountCreate, AccountUpdate
from services.communications_service.services import notification_service
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DISABILITY_CAUSE_REQUIRED = "disability_cause is required when disability is true"


def _check_disability(disability: Optional[bool], cause: Optional[str]) -> None:
    if disability and not (cause and cause.strip()):
        raise BadRequestError(DISABILITY_CAUSE_REQUIRED)


async def get_account(db: AsyncSession, account_id: uuid.UUID) -> Account:
    account = await db.get(Account, account_id)
    if not account:
        raise NotFoundError("Account not found")
    return account


async def find_by_email(db: AsyncSession, email: str) -> Optional[Account]:
    """Case-insensitive lookup; emails are stored lower-cased."""
    result = await db.execute(select(Account).where(Account.email == email.lower()))
    return result.scalar_one_or_none()


async def list_accounts(
    db: AsyncSession, *, role: Optional[Role] = None
) -> list[Account]:
    query = select(Account).order_by(Account.created_at.desc())
    if role is not None:
        query = query.where(Account.role == role)
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_coaches(
    db: AsyncSession, *, country: Optional[str] = None, is_active: bool = True
) -> list[Account]:
    query = (
        select(Account)
        .where(Account.role == Role.COACH, Account.is_active.is_(is_active))
        .order_by(Account.name.asc())
    )
    if country:
        query = query.where(Account.country == country)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_coach(db: AsyncSession, coach_id: uuid.UUID) -> Account:
    result = await db.execute(
        select(Account).where(Account.id == coach_id, Account.role == Role.COACH)
    )
    coach = result.scalar_one_or_none()
    if not coach:
        raise NotFoundError("Coach not found")
    return coach


async def list_clients(db: AsyncSession, *, is_active: bool = True) -> list[Account]:
    result = await db.execute(
        select(Account)
        .where(Account.role.in_(CLIENT_ROLES), Account.is_active.is_(is_active))
        .order_by(Account.created_at.desc())
    )
    return list(result.scalars().all())


async def create_account(db: AsyncSession, data: AccountCreate) -> Account:
    """Create an account after the uniqueness and disability checks.

    Email comparison is case-insensitive; emails are stored lower-cased.
    """
    email = data.email.lower()
    if await find_by_email(db, email):
        raise ConflictError("Account with this email already exists")

    _check_disability(data.disability, data.disability_cause)

    profile = data.model_dump(
        exclude={"email", "password", "role", "disability"}, exclude_none=True
    )
    account = Account(
        email=email,
        password_hash=hash_password(data.password),
        role=data.role,
        disability=bool(data.disability),
        **profile,
    )
    db.add(account)
    await db.commit()
    await db.refresh(account)

    logger.info("Created account %s (role=%s)", account.id, account.role.value)
    return account


async def update_account(
    db: AsyncSession, account_id: uuid.UUID, data: AccountUpdate
) -> Account:
    account = await get_account(db, account_id)
    changes = data.model_dump(exclude_unset=True)

    # Re-check the rule against the record as it will look after the update.
    _check_disability(
        changes.get("disability", account.disability),
        changes.get("disability_cause", account.disability_cause),
    )

    for field, value in changes.items():
        setattr(account, field, value)
    if changes.get("disability") is False:
        account.disability_cause = None
    account.updated_at = utc_now()

    await db.commit()
    await db.refresh(account)
    return account


async def change_role(
    db: AsyncSession, *, account_id: uuid.UUID, role: Role, acting_admin: AuthUser
) -> Account:
    """Admin-only role change; an admin can never modify their own role."""
    if acting_admin.user_id == account_id:
        raise BadRequestError("Cannot change your own role")

    account = await get_account(db, account_id)
    previous = account.role
    account.role = role
    account.updated_at = utc_now()
    await notification_service.notify_role_changed(
        db,
        account_id=account.id,
        previous_role=previous.value,
        new_role=role.value,
        changed_by=acting_admin.user_id,
    )
    await db.commit()
    await db.refresh(account)

    logger.info(
        "Admin %s changed role of %s from %s to %s",
        acting_admin.user_id,
        account_id,
        previous.value,
        role.value,
    )
    return account


async def delete_account(db: AsyncSession, account_id: uuid.UUID) -> None:
    account = await get_account(db, account_id)
    await db.delete(account)
    await db.commit()
    logger.info("Deleted account %s", account_id)


async def set_online_status(
    db: AsyncSession, account_id: uuid.UUID, is_online: bool
) -> Account:
    account = await get_account(db, account_id)
    account.is_online = is_online
    await db.commit()
    await db.refresh(account)
    return account


async def authenticate(
    db: AsyncSession, *, email: str, password: str
) -> Optional[Account]:
    """Return the active account matching the credentials, else ``None``."""
    account = await find_by_email(db, email)
    if not account or not verify_password(password, account.password_hash):
        return None
    if not account.is_active:
        return None
    return account
