import asyncio

import pytest

from app.core.errors import AppointmentError, RejectionCode
from app.models.appointment import Appointment, AppointmentCreate
from app.models.blocked_slot import BlockedSlot
from app.services.appointment_service import AppointmentLifecycle
from app.services.slot_service import ConflictChecker
from tests.fakes import GatedAppointmentStore, InMemorySlotStore

E1 = 1


def _booking(**overrides):
    fields = {
        "customer_id": 7,
        "customer_name": "Thandi Test",
        "staff_id": E1,
        "date": "2024-06-01",
        "time": "10:00 am",
        "service_ids": [1, 2],
        "total_price": 450.0,
    }
    fields.update(overrides)
    return fields


class TestCreate:
    async def test_new_booking_starts_booked(self, lifecycle):
        appt = await lifecycle.create_appointment(_booking())

        assert appt.id is not None
        assert appt.status == "Booked"
        assert appt.service_ids == [1, 2]
        assert appt.cancel_reason is None

    async def test_accepts_validated_model(self, lifecycle):
        appt = await lifecycle.create_appointment(AppointmentCreate(**_booking()))
        assert appt.date == "2024-06-01"

    async def test_blocked_slot_rejects_booking(self, lifecycle, slot_store, appointment_store):
        await slot_store.insert(BlockedSlot(date="2024-06-01", time="10:00 am", staff_id=E1))

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.create_appointment(_booking())

        assert exc.value.code is RejectionCode.SLOT_BLOCKED
        assert appointment_store.rows == {}

    async def test_double_booking_rejected(self, lifecycle):
        await lifecycle.create_appointment(_booking())

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.create_appointment(_booking(customer_id=8))

        assert exc.value.code is RejectionCode.SLOT_TAKEN

    async def test_unassigned_booking_skips_slot_check(self, lifecycle, slot_store):
        await slot_store.insert(BlockedSlot(date="2024-06-01", time="10:00 am", staff_id=E1))

        first = await lifecycle.create_appointment(_booking(staff_id=None))
        second = await lifecycle.create_appointment(_booking(staff_id=None))

        assert first.staff_id is None and second.staff_id is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"date": "2024-6-1"},
            {"date": "2024-02-30"},
            {"date": "01/06/2024"},
            {"time": ""},
            {"time": " 10:00 am"},
            {"total_price": -1},
        ],
    )
    async def test_malformed_fields_are_validation_errors(self, lifecycle, appointment_store, overrides):
        with pytest.raises(AppointmentError) as exc:
            await lifecycle.create_appointment(_booking(**overrides))

        assert exc.value.code is RejectionCode.VALIDATION_ERROR
        assert appointment_store.rows == {}

    async def test_missing_required_field(self, lifecycle):
        fields = _booking()
        del fields["time"]

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.create_appointment(fields)

        assert exc.value.code is RejectionCode.VALIDATION_ERROR
        assert "time" in exc.value.message

    async def test_write_failure_is_store_error(self, lifecycle, appointment_store):
        appointment_store.fail_writes = True

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.create_appointment(_booking())

        assert exc.value.code is RejectionCode.STORE_ERROR
        assert exc.value.retryable

    async def test_unknown_customer_is_validation_error(self, lifecycle, appointment_store):
        appointment_store.known_customers = {7}

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.create_appointment(_booking(customer_id=999))

        assert exc.value.code is RejectionCode.VALIDATION_ERROR
        assert not exc.value.retryable
        assert appointment_store.rows == {}


class TestCancel:
    async def test_cancel_records_reason(self, lifecycle, make_appointment):
        appt = await make_appointment()
        before = appt.updated_at

        cancelled = await lifecycle.cancel_appointment(appt.id, "Client is ill")

        assert cancelled.status == "Cancelled"
        assert cancelled.cancel_reason == "Client is ill"
        assert cancelled.updated_at >= before

    async def test_cancel_rescheduled(self, lifecycle, make_appointment):
        appt = await make_appointment(status="Rescheduled")

        cancelled = await lifecycle.cancel_appointment(appt.id)

        assert cancelled.status == "Cancelled"
        assert cancelled.cancel_reason is None

    async def test_cancel_twice_is_idempotent(self, lifecycle, make_appointment):
        appt = await make_appointment()

        first = await lifecycle.cancel_appointment(appt.id, "No longer needed")
        second = await lifecycle.cancel_appointment(appt.id, "No longer needed")

        assert first.status == second.status == "Cancelled"
        assert second.cancel_reason == "No longer needed"

    async def test_cancel_unknown_id(self, lifecycle):
        with pytest.raises(AppointmentError) as exc:
            await lifecycle.cancel_appointment(999)

        assert exc.value.code is RejectionCode.NOT_FOUND

    async def test_cancel_store_failure(self, lifecycle, make_appointment, appointment_store):
        appt = await make_appointment()
        appointment_store.fail_writes = True

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.cancel_appointment(appt.id)

        assert exc.value.code is RejectionCode.STORE_ERROR


class TestReschedule:
    async def test_reschedule_into_free_slot(self, lifecycle, make_appointment):
        x = await make_appointment(staff_id=E1, date="2024-06-01", time="10:00 am")

        moved = await lifecycle.reschedule_appointment(x.id, "2024-06-02", "11:00 am")

        assert moved.status == "Rescheduled"
        assert (moved.date, moved.time) == ("2024-06-02", "11:00 am")

    async def test_reschedule_into_blocked_slot(self, lifecycle, make_appointment, slot_store):
        x = await make_appointment(staff_id=E1, date="2024-06-01", time="10:00 am")
        await slot_store.insert(BlockedSlot(date="2024-06-02", time="11:00 am", staff_id=E1))

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.reschedule_appointment(x.id, "2024-06-02", "11:00 am")

        assert exc.value.code is RejectionCode.SLOT_BLOCKED
        assert (x.date, x.time, x.status) == ("2024-06-01", "10:00 am", "Booked")

    async def test_reschedule_into_taken_slot(self, lifecycle, make_appointment):
        x = await make_appointment(staff_id=E1, date="2024-06-01", time="10:00 am")
        await make_appointment(staff_id=E1, date="2024-06-02", time="11:00 am")

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.reschedule_appointment(x.id, "2024-06-02", "11:00 am")

        assert exc.value.code is RejectionCode.SLOT_TAKEN
        assert (x.date, x.time, x.status) == ("2024-06-01", "10:00 am", "Booked")

    async def test_reschedule_to_own_slot_is_allowed(self, lifecycle, make_appointment):
        x = await make_appointment(staff_id=E1, date="2024-06-01", time="10:00 am")

        moved = await lifecycle.reschedule_appointment(x.id, "2024-06-01", "10:00 am")

        assert moved.status == "Rescheduled"

    async def test_rescheduled_can_move_again(self, lifecycle, make_appointment):
        x = await make_appointment()
        await lifecycle.reschedule_appointment(x.id, "2024-06-02", "11:00 am")

        moved = await lifecycle.reschedule_appointment(x.id, "2024-06-03", "12:00 pm")

        assert moved.status == "Rescheduled"
        assert moved.date == "2024-06-03"

    async def test_cancelled_appointment_can_still_be_rescheduled(self, lifecycle, make_appointment):
        x = await make_appointment(status="Cancelled")

        moved = await lifecycle.reschedule_appointment(x.id, "2024-06-05", "02:00 pm")

        # No state guard out of Cancelled: the record comes back as Rescheduled
        assert moved.status == "Rescheduled"
        assert (moved.date, moved.time) == ("2024-06-05", "02:00 pm")

    async def test_unassigned_reschedule_skips_slot_check(self, lifecycle, make_appointment, slot_store):
        await slot_store.insert(BlockedSlot(date="2024-06-02", time="11:00 am", staff_id=E1))
        await make_appointment(staff_id=None, date="2024-06-02", time="11:00 am")
        x = await make_appointment(staff_id=None)

        moved = await lifecycle.reschedule_appointment(x.id, "2024-06-02", "11:00 am")

        assert moved.status == "Rescheduled"
        assert moved.staff_id is None

    async def test_reschedule_unknown_id(self, lifecycle):
        with pytest.raises(AppointmentError) as exc:
            await lifecycle.reschedule_appointment(42, "2024-06-02", "11:00 am")

        assert exc.value.code is RejectionCode.NOT_FOUND

    async def test_invalid_target_is_validation_error(self, lifecycle, make_appointment):
        x = await make_appointment()

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.reschedule_appointment(x.id, "June 2nd", "11:00 am")

        assert exc.value.code is RejectionCode.VALIDATION_ERROR
        assert x.date == "2024-06-01"

    async def test_store_error_during_check_leaves_record(self, lifecycle, make_appointment, slot_store):
        x = await make_appointment()
        slot_store.fail = True

        with pytest.raises(AppointmentError) as exc:
            await lifecycle.reschedule_appointment(x.id, "2024-06-02", "11:00 am")

        assert exc.value.code is RejectionCode.STORE_ERROR
        assert x.status == "Booked"


async def test_concurrent_reschedules_can_double_book():
    """Check-then-write is not atomic: both movers pass the check before either writes."""
    slots = InMemorySlotStore()
    store = GatedAppointmentStore(parties=2)
    lifecycle = AppointmentLifecycle(store, ConflictChecker(slots, store))
    x1 = await store.insert(_seed("09:00 am"))
    x2 = await store.insert(_seed("10:00 am"))

    results = await asyncio.wait_for(
        asyncio.gather(
            lifecycle.reschedule_appointment(x1.id, "2024-06-02", "11:00 am"),
            lifecycle.reschedule_appointment(x2.id, "2024-06-02", "11:00 am"),
        ),
        timeout=5,
    )

    assert [r.status for r in results] == ["Rescheduled", "Rescheduled"]
    assert len(store.occupants(E1, "2024-06-02", "11:00 am")) == 2


def _seed(time):
    return Appointment(customer_id=7, staff_id=E1, date="2024-06-01", time=time, service_ids=[1], total_price=200.0)
