import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import RejectionCode
from app.models.blocked_slot import BlockedSlot, BlockedSlotCreate
from app.repositories.base import AppointmentStore, SlotStore

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_REASON = "Not specified"


@dataclass(frozen=True)
class SlotDecision:
    """Outcome of a slot check: allowed when no rejection code is set."""

    code: RejectionCode | None = None

    @property
    def allowed(self) -> bool:
        return self.code is None


ALLOWED = SlotDecision()


class ConflictChecker:
    """Decides whether a staff member's (date, time) slot can take an appointment.

    Read-only. The check and the caller's subsequent write are not atomic, so two
    concurrent callers can both be allowed into the same slot.
    """

    def __init__(self, slots: SlotStore, appointments: AppointmentStore) -> None:
        self.slots = slots
        self.appointments = appointments

    async def check_slot_available(
        self,
        staff_id: int,
        date: str,
        time: str,
        exclude_appointment_id: int | None = None,
    ) -> SlotDecision:
        try:
            blocked = await self.slots.find_one(date, time, staff_id)
            if blocked is not None:
                logger.info("Slot %s %s for staff %s is blocked (%s)", date, time, staff_id, blocked.reason)
                return SlotDecision(RejectionCode.SLOT_BLOCKED)
            taken = await self.appointments.find_conflict(
                staff_id, date, time, exclude_id=exclude_appointment_id
            )
            if taken is not None:
                logger.info("Slot %s %s for staff %s taken by appointment %s", date, time, staff_id, taken.id)
                return SlotDecision(RejectionCode.SLOT_TAKEN)
        except SQLAlchemyError as e:
            logger.exception("Slot check failed for staff %s at %s %s: %s", staff_id, date, time, e)
            return SlotDecision(RejectionCode.STORE_ERROR)
        return ALLOWED


async def block_slot(slots: SlotStore, data: BlockedSlotCreate) -> BlockedSlot | None:
    """Insert a blocked slot; None when the (date, time, staff) triple is already blocked."""
    existing = await slots.find_one(data.date, data.time, data.staff_id)
    if existing:
        return None
    slot = BlockedSlot(
        date=data.date,
        time=data.time,
        staff_id=data.staff_id,
        reason=data.reason or DEFAULT_BLOCK_REASON,
    )
    return await slots.insert(slot)
