from app.repositories.appointments import AppointmentRepository
from app.repositories.base import AppointmentStore, BaseRepository, SlotStore
from app.repositories.catalog import (
    EmployeeRepository,
    PaymentRepository,
    ServiceRepository,
    UserRepository,
)
from app.repositories.slots import SlotRepository

__all__ = [
    "AppointmentRepository",
    "AppointmentStore",
    "BaseRepository",
    "EmployeeRepository",
    "PaymentRepository",
    "ServiceRepository",
    "SlotRepository",
    "SlotStore",
    "UserRepository",
]
