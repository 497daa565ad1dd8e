from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser, Role
from libs.auth.tokens import create_access_token
from libs.common.logging import get_logger
from libs.common.rate_limit import auth_limit
from libs.db.session import get_async_db
from services.accounts_service.schemas import (
    AccountCreate,
    AccountResponse,
    LoginRequest,
    SignUpRequest,
    TokenResponse,
)
from services.accounts_service.services import account_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


def _token_for(account) -> str:
    return create_access_token(
        subject=str(account.id), email=account.email, role=account.role.value
    )


@router.post(
    "/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED
)
@auth_limit
async def signup(
    request: Request,
    payload: SignUpRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Register a client or coach account and return an access token."""
    account = await account_service.create_account(
        db,
        AccountCreate(**payload.model_dump(exclude={"role"}), role=Role(payload.role)),
    )
    account = await account_service.set_online_status(db, account.id, True)
    return TokenResponse(
        access_token=_token_for(account),
        account=AccountResponse.model_validate(account),
    )


@router.post("/login", response_model=TokenResponse)
@auth_limit
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    account = await account_service.authenticate(
        db, email=payload.email, password=payload.password
    )
    if not account:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    account = await account_service.set_online_status(db, account.id, True)
    return TokenResponse(
        access_token=_token_for(account),
        account=AccountResponse.model_validate(account),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Mark the caller offline. Tokens are stateless and simply expire."""
    await account_service.set_online_status(db, current_user.user_id, False)
