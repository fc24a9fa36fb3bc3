from app.models.user import User, UserCreate, UserPublic
from app.models.appointment import Appointment, AppointmentCreate, AppointmentPublic, AppointmentStatus
from app.models.blocked_slot import BlockedSlot, BlockedSlotCreate, BlockedSlotPublic
from app.models.employee import Employee, EmployeeCreate, EmployeePublic
from app.models.payment import Payment, PaymentCreate, PaymentPublic
from app.models.service import Service, ServiceCreate, ServicePublic, ServiceUpdate

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentStatus",
    "BlockedSlot",
    "BlockedSlotCreate",
    "BlockedSlotPublic",
    "Employee",
    "EmployeeCreate",
    "EmployeePublic",
    "Payment",
    "PaymentCreate",
    "PaymentPublic",
    "Service",
    "ServiceCreate",
    "ServicePublic",
    "ServiceUpdate",
]
