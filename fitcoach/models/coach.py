import enum
from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from fitcoach.models.user import UserSummary, timestamp_field


class Coach(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", unique=True, index=True)
    specialties: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    bio: str = ""
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class CoachCustomer(SQLModel, table=True):
    __tablename__ = "coach_customer"

    coach_id: UUID = Field(foreign_key="coach.id", primary_key=True)
    customer_id: UUID = Field(foreign_key="user.id", primary_key=True, index=True)
    assigned_at: datetime = timestamp_field()


class CoachCreate(BaseModel):
    user_id: UUID
    specialties: list[str] = []
    bio: str = ""


class CoachUpdate(BaseModel):
    specialties: list[str] | None = None
    bio: str | None = None


class CoachRead(BaseModel):
    id: UUID
    user: UserSummary
    specialties: list[str]
    bio: str
    customers: list[UserSummary]
    created_at: datetime
    updated_at: datetime


class CustomerAction(str, enum.Enum):
    ADD = "add"
    REMOVE = "remove"


class CustomerActionRequest(BaseModel):
    customer_id: UUID
    action: CustomerAction


class AssignCustomersRequest(BaseModel):
    customer_ids: list[UUID]


class CoachCustomerIds(BaseModel):
    customers: list[UUID]
