"""Salon services, staff and payment records."""
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.employee import Employee, EmployeeCreate
from app.models.payment import Payment, PaymentCreate
from app.models.service import Service, ServiceCreate, ServiceUpdate
from app.repositories.catalog import EmployeeRepository, PaymentRepository, ServiceRepository


async def list_services(session: AsyncSession) -> list[Service]:
    return await ServiceRepository(session).find_all()


async def create_service(session: AsyncSession, data: ServiceCreate) -> Service:
    service = Service(
        name=data.name,
        description=data.description or "",
        price=data.price,
        duration_minutes=data.duration_minutes,
    )
    return await ServiceRepository(session).insert(service)


async def update_service(session: AsyncSession, service_id: int, data: ServiceUpdate) -> Service | None:
    return await ServiceRepository(session).update(service_id, **data.changes())


async def delete_service(session: AsyncSession, service_id: int) -> bool:
    return await ServiceRepository(session).delete(service_id)


async def get_services_by_ids(session: AsyncSession, service_ids: list[int]) -> list[Service]:
    return await ServiceRepository(session).get_many(service_ids)


async def list_employees(session: AsyncSession) -> list[Employee]:
    return await EmployeeRepository(session).find_all()


async def get_employee(session: AsyncSession, employee_id: int) -> Employee | None:
    return await EmployeeRepository(session).get_by_id(employee_id)


async def create_employee(session: AsyncSession, data: EmployeeCreate) -> Employee | None:
    """None when another employee already uses the email."""
    repo = EmployeeRepository(session)
    email = data.email.strip().lower()
    if await repo.get_by_email(email):
        return None
    employee = Employee(name=data.name, email=email, phone=data.phone, role=data.role)
    return await repo.insert(employee)


async def list_payments(session: AsyncSession) -> list[Payment]:
    return await PaymentRepository(session).find_all()


async def create_payment(session: AsyncSession, data: PaymentCreate) -> Payment:
    payment = Payment(**data.model_dump())
    return await PaymentRepository(session).insert(payment)
