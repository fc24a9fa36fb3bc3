from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.core.security import decode_access_token, is_admin_email
from app.models.user import User
from app.repositories.appointments import AppointmentRepository
from app.repositories.catalog import UserRepository
from app.repositories.slots import SlotRepository
from app.services.appointment_service import AppointmentLifecycle
from app.services.slot_service import ConflictChecker

security = HTTPBearer(auto_error=False)


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        uid = int(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = await UserRepository(session).get_by_id(uid)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    if not is_admin_email(current_user.email):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def get_slot_repository(session: AsyncSession = Depends(get_session)) -> SlotRepository:
    return SlotRepository(session)


def get_appointment_repository(session: AsyncSession = Depends(get_session)) -> AppointmentRepository:
    return AppointmentRepository(session)


def get_appointment_lifecycle(
    slots: SlotRepository = Depends(get_slot_repository),
    appointments: AppointmentRepository = Depends(get_appointment_repository),
) -> AppointmentLifecycle:
    return AppointmentLifecycle(appointments, ConflictChecker(slots, appointments))
