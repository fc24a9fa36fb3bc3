from typing import Any

from sqlalchemy import select

from app.models.common import utc_naive_now
from app.models.employee import Employee
from app.models.payment import Payment
from app.models.service import Service
from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_all(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def insert(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user


class ServiceRepository(BaseRepository):
    async def get_by_id(self, service_id: int) -> Service | None:
        result = await self.session.execute(select(Service).where(Service.id == service_id))
        return result.scalar_one_or_none()

    async def get_many(self, service_ids: list[int]) -> list[Service]:
        if not service_ids:
            return []
        result = await self.session.execute(select(Service).where(Service.id.in_(service_ids)))
        by_id = {s.id: s for s in result.scalars().all()}
        # Keep the caller's order; unknown ids are dropped
        return [by_id[i] for i in service_ids if i in by_id]

    async def find_all(self) -> list[Service]:
        result = await self.session.execute(select(Service).order_by(Service.name))
        return list(result.scalars().all())

    async def insert(self, service: Service) -> Service:
        self.session.add(service)
        await self.session.flush()
        await self.session.refresh(service)
        return service

    async def update(self, service_id: int, **fields: Any) -> Service | None:
        service = await self.get_by_id(service_id)
        if not service:
            return None
        for key, value in fields.items():
            setattr(service, key, value)
        service.updated_at = utc_naive_now()
        self.session.add(service)
        await self.session.flush()
        await self.session.refresh(service)
        return service

    async def delete(self, service_id: int) -> bool:
        service = await self.get_by_id(service_id)
        if not service:
            return False
        await self.session.delete(service)
        await self.session.flush()
        return True


class EmployeeRepository(BaseRepository):
    async def get_by_id(self, employee_id: int) -> Employee | None:
        result = await self.session.execute(select(Employee).where(Employee.id == employee_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Employee | None:
        result = await self.session.execute(select(Employee).where(Employee.email == email))
        return result.scalar_one_or_none()

    async def find_all(self) -> list[Employee]:
        result = await self.session.execute(select(Employee).order_by(Employee.name))
        return list(result.scalars().all())

    async def insert(self, employee: Employee) -> Employee:
        self.session.add(employee)
        await self.session.flush()
        await self.session.refresh(employee)
        return employee


class PaymentRepository(BaseRepository):
    async def find_all(self) -> list[Payment]:
        result = await self.session.execute(select(Payment).order_by(Payment.created_at))
        return list(result.scalars().all())

    async def insert(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment
