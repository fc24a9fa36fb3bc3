from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.common import utc_naive_now


class UserBase(SQLModel):
    email: str = Field(unique=True, index=True)
    first_name: str
    last_name: str
    phone: str | None = None


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utc_naive_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class UserCreate(SQLModel):
    email: str
    password: str
    first_name: str
    last_name: str
    phone: str | None = None


class UserPublic(SQLModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    is_admin: bool = False
    created_at: datetime
