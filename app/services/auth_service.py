from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import (
    create_access_token,
    hash_password,
    is_admin_email,
    verify_password,
)
from app.models.user import User, UserCreate, UserPublic
from app.repositories.catalog import UserRepository


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    return await UserRepository(session).get_by_email(_normalize_email(email))


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    user = User(
        email=_normalize_email(data.email),
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        hashed_password=hash_password(data.password),
    )
    return await UserRepository(session).insert(user)


def user_to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        is_admin=is_admin_email(user.email),
        created_at=user.created_at,
    )


def make_access_token(user_id: int) -> tuple[str, int]:
    access = create_access_token(user_id)
    expires_in = settings.access_token_expire_minutes * 60
    return access, expires_in


async def login_user(
    session: AsyncSession, email: str, password: str
) -> tuple[User, str, int] | None:
    user = await get_user_by_email(session, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    access, expires_in = make_access_token(user.id)
    return user, access, expires_in


async def signup_user(session: AsyncSession, data: UserCreate) -> tuple[User, str, int] | None:
    existing = await get_user_by_email(session, data.email)
    if existing:
        return None
    user = await create_user(session, data)
    access, expires_in = make_access_token(user.id)
    return user, access, expires_in


async def list_users(session: AsyncSession) -> list[User]:
    return await UserRepository(session).find_all()
