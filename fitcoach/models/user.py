import enum
from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


def timestamp_field():
    """Timezone-aware UTC timestamp column defaulting to now."""
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    COACH = "coach"
    ADMIN = "admin"


# Highest priority first
ROLE_PRIORITY: tuple[UserRole, ...] = (UserRole.ADMIN, UserRole.COACH, UserRole.CUSTOMER)


class AuthProvider(str, enum.Enum):
    LOCAL = "local"
    GOOGLE = "google"


class User(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True)
    name: str = ""
    image: str | None = None
    password_hash: str | None = None
    is_active: bool = True
    # ``role`` mirrors roles[0]; older records only carried the singular field
    role: UserRole = Field(default=UserRole.CUSTOMER, index=True)
    roles: list[str] = Field(
        default_factory=lambda: [UserRole.CUSTOMER.value],
        sa_column=Column(JSON, nullable=False),
    )
    auth_provider: AuthProvider = Field(default=AuthProvider.LOCAL)
    sub: str | None = Field(default=None, unique=True, index=True)
    google_id: str | None = Field(default=None, unique=True, index=True)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class UserRead(BaseModel):
    id: UUID
    email: str
    name: str
    image: str | None
    is_active: bool
    role: UserRole
    roles: list[UserRole]
    auth_provider: AuthProvider


class UserSummary(BaseModel):
    id: UUID
    email: str
    name: str
    image: str | None = None


class UserUpdate(BaseModel):
    name: str | None = None
    image: str | None = None
    is_active: bool | None = None


class UserRolesUpdate(BaseModel):
    roles: list[UserRole]
