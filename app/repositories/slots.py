from sqlalchemy import select

from app.models.blocked_slot import BlockedSlot
from app.repositories.base import BaseRepository


class SlotRepository(BaseRepository):
    """Blocked (date, time, staff) slots."""

    async def find_one(self, date: str, time: str, staff_id: int) -> BlockedSlot | None:
        result = await self.session.execute(
            select(BlockedSlot).where(
                BlockedSlot.date == date,
                BlockedSlot.time == time,
                BlockedSlot.staff_id == staff_id,
            )
        )
        return result.scalars().first()

    async def find_by_id(self, slot_id: int) -> BlockedSlot | None:
        result = await self.session.execute(select(BlockedSlot).where(BlockedSlot.id == slot_id))
        return result.scalar_one_or_none()

    async def find_all(self, date: str | None = None, staff_id: int | None = None) -> list[BlockedSlot]:
        q = select(BlockedSlot).order_by(BlockedSlot.date, BlockedSlot.time)
        if date:
            q = q.where(BlockedSlot.date == date)
        if staff_id is not None:
            q = q.where(BlockedSlot.staff_id == staff_id)
        result = await self.session.execute(q)
        return list(result.scalars().all())

    async def insert(self, slot: BlockedSlot) -> BlockedSlot:
        self.session.add(slot)
        await self.session.flush()
        await self.session.refresh(slot)
        return slot

    async def delete(self, slot_id: int) -> bool:
        slot = await self.find_by_id(slot_id)
        if not slot:
            return False
        await self.session.delete(slot)
        await self.session.flush()
        return True
