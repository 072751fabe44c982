from fitcoach.models.auth import AuthResponse, GoogleAuthRequest, LoginRequest, RegisterRequest
from fitcoach.models.coach import Coach, CoachCreate, CoachCustomer, CoachRead, CoachUpdate
from fitcoach.models.user import AuthProvider, User, UserRead, UserRole, UserSummary
from fitcoach.models.workout import (
    AssignmentKind,
    Block,
    BodyZone,
    Exercise,
    Workout,
    WorkoutAssignment,
    WorkoutCreate,
    WorkoutDay,
    WorkoutRead,
    WorkoutStatus,
    WorkoutUpdate,
)

__all__ = [
    "AssignmentKind",
    "AuthProvider",
    "AuthResponse",
    "Block",
    "BodyZone",
    "Coach",
    "CoachCreate",
    "CoachCustomer",
    "CoachRead",
    "CoachUpdate",
    "Exercise",
    "GoogleAuthRequest",
    "LoginRequest",
    "RegisterRequest",
    "User",
    "UserRead",
    "UserRole",
    "UserSummary",
    "Workout",
    "WorkoutAssignment",
    "WorkoutCreate",
    "WorkoutDay",
    "WorkoutRead",
    "WorkoutStatus",
    "WorkoutUpdate",
]
