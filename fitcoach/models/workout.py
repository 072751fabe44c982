import enum
from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field as PydanticField
from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from fitcoach.models.user import timestamp_field


def _node_id() -> str:
    return uuid4().hex


class BodyZone(str, enum.Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    LEGS = "legs"
    ABS = "abs"
    GLUTES = "glutes"
    CORE = "core"
    CARDIO = "cardio"
    FULLBODY = "fullbody"


class WorkoutStatus(str, enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    COMPLETED = "completed"


class AssignmentKind(str, enum.Enum):
    CUSTOMER = "customer"
    COACH = "coach"


# Structure stored as JSON on the workout row


class Exercise(BaseModel):
    id: str = PydanticField(default_factory=_node_id)
    name: str
    sets: int = PydanticField(default=0, ge=0)
    reps: int = PydanticField(default=0, ge=0)
    weight: float = PydanticField(default=0, ge=0)
    video_url: str = ""
    notes: str = ""
    tags: list[BodyZone] = []


class Block(BaseModel):
    id: str = PydanticField(default_factory=_node_id)
    name: str
    exercises: list[Exercise] = []


class WorkoutDay(BaseModel):
    id: str = PydanticField(default_factory=_node_id)
    name: str
    blocks: list[Block] = []


class Workout(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    created_by: UUID = Field(foreign_key="user.id", index=True)
    name: str
    description: str = ""
    days: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    status: WorkoutStatus = Field(default=WorkoutStatus.ACTIVE, index=True)
    is_coach_created: bool = False
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class WorkoutAssignment(SQLModel, table=True):
    __tablename__ = "workout_assignment"
    __table_args__ = (UniqueConstraint("workout_id", "user_id", "kind"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workout_id: UUID = Field(foreign_key="workout.id", index=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    kind: AssignmentKind
    assigned_at: datetime = timestamp_field()


class WorkoutCreate(BaseModel):
    name: str | None = None
    description: str | None = None
    days: list[WorkoutDay] | None = None
    owner_id: UUID | None = None


class WorkoutUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    days: list[WorkoutDay] | None = None


class WorkoutRead(BaseModel):
    id: UUID
    user_id: UUID
    created_by: UUID
    name: str
    description: str
    days: list[WorkoutDay]
    status: WorkoutStatus
    is_coach_created: bool
    assigned_customers: list[UUID]
    assigned_coaches: list[UUID]
    created_at: datetime
    updated_at: datetime


class WorkoutCount(BaseModel):
    count: int


class WorkoutAccessRead(BaseModel):
    workout_id: UUID
    access: str
    can_modify: bool
    can_complete: bool


class AssignWorkoutRequest(BaseModel):
    customer_ids: list[UUID] = []
    coach_ids: list[UUID] = []


class DuplicateWorkoutRequest(BaseModel):
    name: str | None = None
    description: str | None = None


class NameUpdate(BaseModel):
    name: str = PydanticField(min_length=1)


class OptionalName(BaseModel):
    name: str | None = None


class ExerciseCreate(BaseModel):
    name: str = PydanticField(min_length=1)
    sets: int = PydanticField(default=0, ge=0)
    reps: int = PydanticField(default=0, ge=0)
    weight: float = PydanticField(default=0, ge=0)
    video_url: str = ""
    notes: str = ""
    tags: list[BodyZone] = []


class ExerciseUpdate(BaseModel):
    name: str | None = None
    sets: int | None = PydanticField(default=None, ge=0)
    reps: int | None = PydanticField(default=None, ge=0)
    weight: float | None = PydanticField(default=None, ge=0)
    video_url: str | None = None
    notes: str | None = None
    tags: list[BodyZone] | None = None
