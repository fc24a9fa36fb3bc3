from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointment import Appointment
from app.models.blocked_slot import BlockedSlot


class BaseRepository:
    """Wraps the request-scoped AsyncSession; callers own commit/rollback."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session


class SlotStore(Protocol):
    async def find_one(self, date: str, time: str, staff_id: int) -> BlockedSlot | None: ...

    async def insert(self, slot: BlockedSlot) -> BlockedSlot: ...

    async def delete(self, slot_id: int) -> bool: ...


class AppointmentStore(Protocol):
    async def find_conflict(
        self, staff_id: int, date: str, time: str, exclude_id: int | None = None
    ) -> Appointment | None: ...

    async def find_by_id(self, appointment_id: int) -> Appointment | None: ...

    async def insert(self, appointment: Appointment) -> Appointment: ...

    async def update(self, appointment_id: int, **fields: Any) -> Appointment | None: ...
