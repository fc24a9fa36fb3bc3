from typing import Any

from sqlalchemy import select

from app.models.appointment import Appointment, AppointmentStatus
from app.models.common import utc_naive_now
from app.repositories.base import BaseRepository


class AppointmentRepository(BaseRepository):
    async def find_conflict(
        self, staff_id: int, date: str, time: str, exclude_id: int | None = None
    ) -> Appointment | None:
        """First non-cancelled appointment holding (staff_id, date, time), ignoring exclude_id."""
        q = select(Appointment).where(
            Appointment.staff_id == staff_id,
            Appointment.date == date,
            Appointment.time == time,
            Appointment.status != AppointmentStatus.CANCELLED.value,
        )
        if exclude_id is not None:
            q = q.where(Appointment.id != exclude_id)
        result = await self.session.execute(q)
        return result.scalars().first()

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        result = await self.session.execute(select(Appointment).where(Appointment.id == appointment_id))
        return result.scalar_one_or_none()

    async def find_all(
        self,
        date: str | None = None,
        staff_id: int | None = None,
        customer_id: int | None = None,
    ) -> list[Appointment]:
        q = select(Appointment).order_by(Appointment.date, Appointment.time)
        if date:
            q = q.where(Appointment.date == date)
        if staff_id is not None:
            q = q.where(Appointment.staff_id == staff_id)
        if customer_id is not None:
            q = q.where(Appointment.customer_id == customer_id)
        result = await self.session.execute(q)
        return list(result.scalars().all())

    async def insert(self, appointment: Appointment) -> Appointment:
        self.session.add(appointment)
        await self.session.flush()
        await self.session.refresh(appointment)
        return appointment

    async def update(self, appointment_id: int, **fields: Any) -> Appointment | None:
        appointment = await self.find_by_id(appointment_id)
        if not appointment:
            return None
        for key, value in fields.items():
            setattr(appointment, key, value)
        appointment.updated_at = utc_naive_now()
        self.session.add(appointment)
        await self.session.flush()
        await self.session.refresh(appointment)
        return appointment

    async def delete(self, appointment_id: int) -> bool:
        appointment = await self.find_by_id(appointment_id)
        if not appointment:
            return False
        await self.session.delete(appointment)
        await self.session.flush()
        return True
