"""Workout access decisions.

Everything here is pure: callers load the facts (the user, the workout's
grants and the customers the user coaches) and these functions decide.
"""

import enum
from dataclasses import dataclass
from uuid import UUID

from fitcoach.models.user import User, UserRole
from fitcoach.models.workout import AssignmentKind, Workout, WorkoutAssignment
from fitcoach.services.identity import has_any_role, has_role


class AccessLevel(str, enum.Enum):
    OWNER = "owner"
    ASSIGNED_CUSTOMER = "assigned_customer"
    ASSIGNED_COACH = "assigned_coach"
    COACH_OF_OWNER = "coach_of_owner"
    ADMIN = "admin"
    DENIED = "denied"


@dataclass(frozen=True)
class WorkoutGrants:
    owner_id: UUID
    created_by: UUID
    is_coach_created: bool = False
    customer_ids: frozenset[UUID] = frozenset()
    coach_ids: frozenset[UUID] = frozenset()

    @classmethod
    def from_workout(
        cls, workout: Workout, assignments: list[WorkoutAssignment]
    ) -> "WorkoutGrants":
        return cls(
            owner_id=workout.user_id,
            created_by=workout.created_by,
            is_coach_created=workout.is_coach_created,
            customer_ids=frozenset(
                a.user_id for a in assignments if a.kind == AssignmentKind.CUSTOMER
            ),
            coach_ids=frozenset(
                a.user_id for a in assignments if a.kind == AssignmentKind.COACH
            ),
        )


def access_level(
    user: User, grants: WorkoutGrants, coached_customer_ids: frozenset[UUID]
) -> AccessLevel:
    """Decide how ``user`` relates to a workout. The first matching rule wins."""
    if not user.is_active:
        return AccessLevel.DENIED
    if user.id == grants.owner_id:
        return AccessLevel.OWNER
    if user.id in grants.customer_ids:
        return AccessLevel.ASSIGNED_CUSTOMER

    is_coach = has_role(user, UserRole.COACH)
    if is_coach and user.id in grants.coach_ids:
        return AccessLevel.ASSIGNED_COACH
    if is_coach and grants.owner_id in coached_customer_ids:
        return AccessLevel.COACH_OF_OWNER

    if has_role(user, UserRole.ADMIN):
        return AccessLevel.ADMIN
    return AccessLevel.DENIED


def can_read(level: AccessLevel) -> bool:
    return level != AccessLevel.DENIED


def can_modify(level: AccessLevel, user: User, grants: WorkoutGrants) -> bool:
    if level in (
        AccessLevel.ADMIN,
        AccessLevel.ASSIGNED_COACH,
        AccessLevel.COACH_OF_OWNER,
    ):
        return True
    if level == AccessLevel.OWNER:
        # A customer cannot edit a plan their coach wrote for them
        if grants.is_coach_created and grants.created_by != user.id:
            return has_any_role(user, UserRole.COACH, UserRole.ADMIN)
        return True
    return False


def can_complete(level: AccessLevel, user: User, grants: WorkoutGrants) -> bool:
    if level in (AccessLevel.OWNER, AccessLevel.ASSIGNED_CUSTOMER):
        return True
    return can_modify(level, user, grants)


class Scope(str, enum.Enum):
    ALL = "all"
    COACH = "coach"
    CUSTOMER = "customer"


def visible_scope(user: User) -> Scope:
    """Which listing rule applies to ``user`` (highest role wins)."""
    if has_role(user, UserRole.ADMIN):
        return Scope.ALL
    if has_role(user, UserRole.COACH):
        return Scope.COACH
    return Scope.CUSTOMER
