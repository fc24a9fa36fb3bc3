from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_admin_user, get_slot_repository
from app.models.blocked_slot import BlockedSlotCreate, BlockedSlotPublic
from app.models.user import User
from app.repositories.slots import SlotRepository
from app.services.slot_service import block_slot

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=list[BlockedSlotPublic])
async def list_blocked_slots(
    date: str | None = Query(None, description="YYYY-MM-DD"),
    staff_id: int | None = Query(None),
    slots: SlotRepository = Depends(get_slot_repository),
) -> list[BlockedSlotPublic]:
    """Blocked slots, optionally narrowed to one date and/or stylist."""
    rows = await slots.find_all(date=date, staff_id=staff_id)
    return [BlockedSlotPublic.model_validate(s, from_attributes=True) for s in rows]


@router.post("", response_model=BlockedSlotPublic, status_code=status.HTTP_201_CREATED)
async def create_blocked_slot(
    body: BlockedSlotCreate,
    slots: SlotRepository = Depends(get_slot_repository),
    _admin: User = Depends(get_admin_user),
) -> BlockedSlotPublic:
    slot = await block_slot(slots, body)
    if not slot:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Availability slot already exists for this date, time, and stylist.",
        )
    return BlockedSlotPublic.model_validate(slot, from_attributes=True)


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_blocked_slot(
    slot_id: int,
    slots: SlotRepository = Depends(get_slot_repository),
    _admin: User = Depends(get_admin_user),
) -> None:
    if not await slots.delete(slot_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Availability slot not found",
        )
