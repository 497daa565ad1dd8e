import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser, Role
from libs.db.session import get_async_db
from services.accounts_service.schemas import (
    AccountResponse,
    AccountUpdate,
    RoleUpdate,
)
from services.accounts_service.services import account_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/me", response_model=AccountResponse)
async def get_my_account(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await account_service.get_account(db, current_user.user_id)


@router.patch("/me", response_model=AccountResponse)
async def update_my_account(
    payload: AccountUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Update the caller's own profile."""
    return await account_service.update_account(db, current_user.user_id, payload)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_account(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    await account_service.delete_account(db, current_user.user_id)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[AccountResponse])
async def list_accounts(
    role: Optional[Role] = None,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await account_service.list_accounts(db, role=role)


@router.get("/clients", response_model=List[AccountResponse])
async def list_client_accounts(
    is_active: bool = True,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Accounts with a client role (user or premium_user)."""
    return await account_service.list_clients(db, is_active=is_active)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await account_service.get_account(db, account_id)


@router.patch("/{account_id}/role", response_model=AccountResponse)
async def change_account_role(
    account_id: uuid.UUID,
    payload: RoleUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Change another account's role (admin only, never your own)."""
    return await account_service.change_role(
        db, account_id=account_id, role=payload.role, acting_admin=current_user
    )


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await account_service.delete_account(db, account_id)
