import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_admin_user, get_current_user
from app.api.schemas.auth import LoginRequest, SignupRequest, TokenResponse
from app.core.db import get_session
from app.models.user import User, UserCreate, UserPublic
from app.services.auth_service import list_users, login_user, signup_user, user_to_public

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    data = UserCreate(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
    )
    result = await signup_user(session, data)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )
    user, access, expires_in = result
    logger.info("New user %s signed up", user.id)
    return TokenResponse(access_token=access, expires_in=expires_in, user=user_to_public(user))


@router.post("/signin", response_model=TokenResponse)
async def signin(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    result = await login_user(session, body.email, body.password)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    user, access, expires_in = result
    return TokenResponse(access_token=access, expires_in=expires_in, user=user_to_public(user))


@router.get("/me", response_model=UserPublic)
async def me(current_user: User = Depends(get_current_user)) -> UserPublic:
    return user_to_public(current_user)


@users_router.get("", response_model=list[UserPublic])
async def all_users(
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> list[UserPublic]:
    return [user_to_public(u) for u in await list_users(session)]
