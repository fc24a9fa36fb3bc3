from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_admin_user
from app.core.db import get_session
from app.models.employee import EmployeeCreate, EmployeePublic
from app.models.payment import PaymentCreate, PaymentPublic
from app.models.service import ServiceCreate, ServicePublic, ServiceUpdate
from app.models.user import User
from app.services import catalog_service

services_router = APIRouter(prefix="/services", tags=["services"])
employees_router = APIRouter(prefix="/employees", tags=["employees"])
payments_router = APIRouter(prefix="/payments", tags=["payments"])


@services_router.get("", response_model=list[ServicePublic])
async def list_services(session: AsyncSession = Depends(get_session)) -> list[ServicePublic]:
    rows = await catalog_service.list_services(session)
    return [ServicePublic.model_validate(s, from_attributes=True) for s in rows]


@services_router.post("", response_model=ServicePublic, status_code=status.HTTP_201_CREATED)
async def create_service(
    body: ServiceCreate,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> ServicePublic:
    service = await catalog_service.create_service(session, body)
    return ServicePublic.model_validate(service, from_attributes=True)


@services_router.put("/{service_id}", response_model=ServicePublic)
async def update_service(
    service_id: int,
    body: ServiceUpdate,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> ServicePublic:
    service = await catalog_service.update_service(session, service_id, body)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return ServicePublic.model_validate(service, from_attributes=True)


@services_router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> None:
    if not await catalog_service.delete_service(session, service_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")


@employees_router.get("", response_model=list[EmployeePublic])
async def list_employees(
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> list[EmployeePublic]:
    rows = await catalog_service.list_employees(session)
    return [EmployeePublic.model_validate(e, from_attributes=True) for e in rows]


@employees_router.get("/{employee_id}", response_model=EmployeePublic)
async def get_employee(
    employee_id: int,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> EmployeePublic:
    employee = await catalog_service.get_employee(session, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return EmployeePublic.model_validate(employee, from_attributes=True)


@employees_router.post("", response_model=EmployeePublic, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> EmployeePublic:
    employee = await catalog_service.create_employee(session, body)
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An employee with this email already exists",
        )
    return EmployeePublic.model_validate(employee, from_attributes=True)


@payments_router.get("", response_model=list[PaymentPublic])
async def list_payments(
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> list[PaymentPublic]:
    rows = await catalog_service.list_payments(session)
    return [PaymentPublic.model_validate(p, from_attributes=True) for p in rows]


@payments_router.post("", response_model=PaymentPublic, status_code=status.HTTP_201_CREATED)
async def create_payment(
    body: PaymentCreate,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(get_admin_user),
) -> PaymentPublic:
    payment = await catalog_service.create_payment(session, body)
    return PaymentPublic.model_validate(payment, from_attributes=True)
