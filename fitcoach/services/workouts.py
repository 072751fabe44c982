import logging
from collections.abc import Callable
from uuid import UUID

from sqlalchemy import delete, or_
from sqlmodel import col, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.core.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
    WorkoutLimitError,
)
from fitcoach.models.user import User, UserRole, utcnow
from fitcoach.models.workout import (
    AssignmentKind,
    Workout,
    WorkoutAccessRead,
    WorkoutAssignment,
    WorkoutCreate,
    WorkoutDay,
    WorkoutRead,
    WorkoutStatus,
    WorkoutUpdate,
)
from fitcoach.services import access
from fitcoach.services.access import AccessLevel, Scope, WorkoutGrants
from fitcoach.services.coaches import coached_customer_ids, is_user_coach
from fitcoach.services.identity import has_role, is_pure_customer
from fitcoach.services.sanitize import sanitize_days, sanitize_text
from fitcoach.services.workout_structure import clone_days, default_days

logger = logging.getLogger(__name__)

DEFAULT_WORKOUT_NAME = "New workout"

StructureEdit = Callable[[list[WorkoutDay]], list[WorkoutDay]]


def workout_days(workout: Workout) -> list[WorkoutDay]:
    return [WorkoutDay.model_validate(d) for d in workout.days or []]


def _dump_days(days: list[WorkoutDay]) -> list[dict]:
    return [d.model_dump(mode="json") for d in days]


def _clean_days(days: list[WorkoutDay]) -> list[WorkoutDay]:
    """Sanitize a structure and reject names that end up empty."""
    cleaned = sanitize_days(days)
    for day in cleaned:
        if not day.name:
            raise InvalidRequestError("Day name cannot be empty")
        for block in day.blocks:
            if not block.name:
                raise InvalidRequestError("Block name cannot be empty")
            if any(not e.name for e in block.exercises):
                raise InvalidRequestError("Exercise name cannot be empty")
    return cleaned


async def _assignments(
    session: AsyncSession, workout_ids: list[UUID]
) -> dict[UUID, list[WorkoutAssignment]]:
    grouped: dict[UUID, list[WorkoutAssignment]] = {i: [] for i in workout_ids}
    if not workout_ids:
        return grouped
    result = await session.exec(
        select(WorkoutAssignment).where(col(WorkoutAssignment.workout_id).in_(workout_ids))
    )
    for assignment in result.all():
        grouped[assignment.workout_id].append(assignment)
    return grouped


def _to_read(workout: Workout, assignments: list[WorkoutAssignment]) -> WorkoutRead:
    grants = WorkoutGrants.from_workout(workout, assignments)
    return WorkoutRead(
        id=workout.id,
        user_id=workout.user_id,
        created_by=workout.created_by,
        name=workout.name,
        description=workout.description,
        days=workout_days(workout),
        status=workout.status,
        is_coach_created=workout.is_coach_created,
        assigned_customers=sorted(grants.customer_ids, key=str),
        assigned_coaches=sorted(grants.coach_ids, key=str),
        created_at=workout.created_at,
        updated_at=workout.updated_at,
    )


async def to_read(session: AsyncSession, workout: Workout) -> WorkoutRead:
    grouped = await _assignments(session, [workout.id])
    return _to_read(workout, grouped[workout.id])


async def to_read_many(session: AsyncSession, workouts: list[Workout]) -> list[WorkoutRead]:
    grouped = await _assignments(session, [w.id for w in workouts])
    return [_to_read(w, grouped[w.id]) for w in workouts]


async def _get_row(session: AsyncSession, workout_id: UUID) -> Workout:
    workout = await session.get(Workout, workout_id)
    if workout is None:
        raise NotFoundError("Workout not found")
    return workout


async def load_grants(session: AsyncSession, workout: Workout) -> WorkoutGrants:
    grouped = await _assignments(session, [workout.id])
    return WorkoutGrants.from_workout(workout, grouped[workout.id])


async def _decide(
    session: AsyncSession, user: User, workout: Workout
) -> tuple[AccessLevel, WorkoutGrants]:
    grants = await load_grants(session, workout)
    coached = await coached_customer_ids(session, user)
    return access.access_level(user, grants, coached), grants


async def _load_readable(
    session: AsyncSession, user: User, workout_id: UUID
) -> tuple[Workout, AccessLevel, WorkoutGrants]:
    workout = await _get_row(session, workout_id)
    level, grants = await _decide(session, user, workout)
    if not access.can_read(level):
        logger.warning("User %s denied access to workout %s", user.id, workout_id)
        # Unreadable workouts are indistinguishable from missing ones
        raise NotFoundError("Workout not found")
    return workout, level, grants


async def _load_modifiable(
    session: AsyncSession, user: User, workout_id: UUID
) -> Workout:
    workout, level, grants = await _load_readable(session, user, workout_id)
    if not access.can_modify(level, user, grants):
        logger.warning(
            "User %s (%s) may not modify workout %s", user.id, level.value, workout_id
        )
        raise PermissionDeniedError("You do not have permission to modify this workout")
    return workout


async def get_access(
    session: AsyncSession, user: User, workout_id: UUID
) -> WorkoutAccessRead:
    workout, level, grants = await _load_readable(session, user, workout_id)
    return WorkoutAccessRead(
        workout_id=workout.id,
        access=level.value,
        can_modify=access.can_modify(level, user, grants),
        can_complete=access.can_complete(level, user, grants),
    )


async def get_workout(session: AsyncSession, user: User, workout_id: UUID) -> WorkoutRead:
    workout, _, _ = await _load_readable(session, user, workout_id)
    return await to_read(session, workout)


def _assigned_to(user_id: UUID, kind: AssignmentKind):
    return select(WorkoutAssignment.workout_id).where(
        WorkoutAssignment.user_id == user_id, WorkoutAssignment.kind == kind
    )


async def list_workouts(session: AsyncSession, user: User) -> list[WorkoutRead]:
    """Workouts visible to ``user``, newest first."""
    scope = access.visible_scope(user)
    statement = select(Workout)

    if scope == Scope.ALL:
        statement = statement.where(Workout.status != WorkoutStatus.ARCHIVED)
    elif scope == Scope.COACH:
        owners = [user.id, *await coached_customer_ids(session, user)]
        statement = statement.where(
            Workout.status == WorkoutStatus.ACTIVE,
            or_(
                col(Workout.user_id).in_(owners),
                col(Workout.id).in_(_assigned_to(user.id, AssignmentKind.COACH)),
                col(Workout.id).in_(_assigned_to(user.id, AssignmentKind.CUSTOMER)),
            ),
        )
    else:
        statement = statement.where(
            Workout.status == WorkoutStatus.ACTIVE,
            or_(
                Workout.user_id == user.id,
                col(Workout.id).in_(_assigned_to(user.id, AssignmentKind.CUSTOMER)),
            ),
        )

    result = await session.exec(statement.order_by(col(Workout.created_at).desc()))
    return await to_read_many(session, list(result.all()))


async def count_own_workouts(session: AsyncSession, user: User) -> int:
    result = await session.exec(
        select(func.count())
        .select_from(Workout)
        .where(Workout.user_id == user.id, Workout.status == WorkoutStatus.ACTIVE)
    )
    return result.one()


async def _check_customer_limit(session: AsyncSession, user: User, limit: int) -> None:
    if not is_pure_customer(user):
        return
    result = await session.exec(
        select(func.count())
        .select_from(Workout)
        .where(
            Workout.user_id == user.id,
            Workout.created_by == user.id,
            Workout.status == WorkoutStatus.ACTIVE,
        )
    )
    if result.one() >= limit:
        raise WorkoutLimitError(f"You have reached the limit of {limit} personal workouts")


async def create_workout(
    session: AsyncSession, user: User, data: WorkoutCreate, *, limit: int
) -> WorkoutRead:
    owner_id = data.owner_id or user.id
    on_behalf = owner_id != user.id

    if on_behalf:
        if await session.get(User, owner_id) is None:
            raise NotFoundError("User not found")
        allowed = has_role(user, UserRole.ADMIN) or (
            has_role(user, UserRole.COACH)
            and await is_user_coach(session, user.id, owner_id)
        )
        if not allowed:
            raise PermissionDeniedError(
                "Only admins or the customer's coach can create workouts for other users"
            )
    else:
        await _check_customer_limit(session, user, limit)

    days = _clean_days(data.days) if data.days is not None else default_days()
    workout = Workout(
        user_id=owner_id,
        created_by=user.id,
        name=sanitize_text(data.name) or DEFAULT_WORKOUT_NAME,
        description=sanitize_text(data.description),
        days=_dump_days(days),
        is_coach_created=on_behalf,
    )
    session.add(workout)
    if on_behalf and has_role(user, UserRole.COACH):
        session.add(
            WorkoutAssignment(
                workout_id=workout.id, user_id=user.id, kind=AssignmentKind.COACH
            )
        )
    await session.commit()
    await session.refresh(workout)
    logger.info("Workout %s created by %s for %s", workout.id, user.id, owner_id)
    return await to_read(session, workout)


def _require_editable(workout: Workout) -> None:
    if workout.status == WorkoutStatus.ARCHIVED:
        raise ConflictError("Archived workouts cannot be edited")


async def _save(session: AsyncSession, workout: Workout) -> WorkoutRead:
    workout.updated_at = utcnow()
    session.add(workout)
    await session.commit()
    await session.refresh(workout)
    return await to_read(session, workout)


async def update_workout(
    session: AsyncSession, user: User, workout_id: UUID, data: WorkoutUpdate
) -> WorkoutRead:
    workout = await _load_modifiable(session, user, workout_id)
    _require_editable(workout)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("name") is not None:
        name = sanitize_text(data.name)
        if not name:
            raise InvalidRequestError("Workout name cannot be empty")
        workout.name = name
    if "description" in update_data:
        workout.description = sanitize_text(data.description)
    if data.days is not None:
        workout.days = _dump_days(_clean_days(data.days))
    return await _save(session, workout)


async def edit_structure(
    session: AsyncSession, user: User, workout_id: UUID, edit: StructureEdit
) -> WorkoutRead:
    workout = await _load_modifiable(session, user, workout_id)
    _require_editable(workout)
    workout.days = _dump_days(_clean_days(edit(workout_days(workout))))
    return await _save(session, workout)


async def archive_workout(session: AsyncSession, user: User, workout_id: UUID) -> WorkoutRead:
    workout = await _load_modifiable(session, user, workout_id)
    if workout.status == WorkoutStatus.ARCHIVED:
        raise ConflictError("Workout is already archived")
    workout.status = WorkoutStatus.ARCHIVED
    logger.info("Workout %s archived by %s", workout_id, user.id)
    return await _save(session, workout)


async def complete_workout(session: AsyncSession, user: User, workout_id: UUID) -> WorkoutRead:
    workout, level, grants = await _load_readable(session, user, workout_id)
    if not access.can_complete(level, user, grants):
        raise PermissionDeniedError("You do not have permission to complete this workout")
    if workout.status != WorkoutStatus.ACTIVE:
        raise ConflictError("Only active workouts can be completed")
    workout.status = WorkoutStatus.COMPLETED
    return await _save(session, workout)


async def _get_archived(session: AsyncSession, workout_id: UUID) -> Workout:
    workout = await session.get(Workout, workout_id)
    if workout is None or workout.status != WorkoutStatus.ARCHIVED:
        raise NotFoundError("Workout not found or not archived")
    return workout


async def list_archived(session: AsyncSession) -> list[WorkoutRead]:
    result = await session.exec(
        select(Workout)
        .where(Workout.status == WorkoutStatus.ARCHIVED)
        .order_by(col(Workout.updated_at).desc())
    )
    return await to_read_many(session, list(result.all()))


async def restore_workout(session: AsyncSession, workout_id: UUID) -> WorkoutRead:
    workout = await _get_archived(session, workout_id)
    workout.status = WorkoutStatus.ACTIVE
    logger.info("Workout %s restored", workout_id)
    return await _save(session, workout)


async def delete_workout_rows(session: AsyncSession, workout_ids: list[UUID]) -> None:
    """Delete workouts and their assignments. Does not commit."""
    if not workout_ids:
        return
    await session.exec(
        delete(WorkoutAssignment).where(col(WorkoutAssignment.workout_id).in_(workout_ids))
    )
    await session.exec(delete(Workout).where(col(Workout.id).in_(workout_ids)))


async def delete_archived_workout(session: AsyncSession, workout_id: UUID) -> None:
    workout = await _get_archived(session, workout_id)
    await delete_workout_rows(session, [workout.id])
    await session.commit()
    logger.info("Archived workout %s permanently deleted", workout_id)


async def duplicate_workout(
    session: AsyncSession,
    user: User,
    workout_id: UUID,
    *,
    name: str | None = None,
    description: str | None = None,
    limit: int,
) -> WorkoutRead:
    original, _, _ = await _load_readable(session, user, workout_id)
    await _check_customer_limit(session, user, limit)

    copy = Workout(
        user_id=user.id,
        created_by=user.id,
        name=sanitize_text(name) or f"{original.name} (Copy)",
        description=(
            sanitize_text(description) if description is not None else original.description
        ),
        days=_dump_days(clone_days(workout_days(original))),
    )
    session.add(copy)
    await session.commit()
    await session.refresh(copy)
    logger.info("Workout %s duplicated into %s by %s", workout_id, copy.id, user.id)
    return await to_read(session, copy)


async def _require_role(
    session: AsyncSession, user_ids: list[UUID], role: UserRole
) -> None:
    for user_id in user_ids:
        assignee = await session.get(User, user_id)
        if assignee is None:
            raise InvalidRequestError(f"User {user_id} not found")
        if not has_role(assignee, role):
            raise InvalidRequestError(f"User {user_id} does not have the {role.value} role")


async def assign_workout(
    session: AsyncSession,
    user: User,
    workout_id: UUID,
    customer_ids: list[UUID],
    coach_ids: list[UUID],
) -> WorkoutRead:
    workout = await _load_modifiable(session, user, workout_id)
    _require_editable(workout)
    customer_ids = list(dict.fromkeys(customer_ids))
    coach_ids = list(dict.fromkeys(coach_ids))
    await _require_role(session, customer_ids, UserRole.CUSTOMER)
    await _require_role(session, coach_ids, UserRole.COACH)

    grants = await load_grants(session, workout)
    for customer_id in customer_ids:
        if customer_id not in grants.customer_ids:
            session.add(
                WorkoutAssignment(
                    workout_id=workout.id, user_id=customer_id, kind=AssignmentKind.CUSTOMER
                )
            )
    for coach_id in coach_ids:
        if coach_id not in grants.coach_ids:
            session.add(
                WorkoutAssignment(
                    workout_id=workout.id, user_id=coach_id, kind=AssignmentKind.COACH
                )
            )
    logger.info(
        "Workout %s assigned to %d customers and %d coaches by %s",
        workout_id,
        len(customer_ids),
        len(coach_ids),
        user.id,
    )
    return await _save(session, workout)


async def unassign_workout(
    session: AsyncSession, user: User, workout_id: UUID, assignee_id: UUID
) -> WorkoutRead:
    workout = await _load_modifiable(session, user, workout_id)
    _require_editable(workout)
    result = await session.exec(
        select(WorkoutAssignment).where(
            WorkoutAssignment.workout_id == workout.id,
            WorkoutAssignment.user_id == assignee_id,
        )
    )
    assignments = result.all()
    if not assignments:
        raise NotFoundError("Assignment not found")
    for assignment in assignments:
        await session.delete(assignment)
    return await _save(session, workout)


async def list_customer_workouts(
    session: AsyncSession, user: User, customer_id: UUID
) -> list[WorkoutRead]:
    if await session.get(User, customer_id) is None:
        raise NotFoundError("Customer not found")
    if not has_role(user, UserRole.ADMIN) and not await is_user_coach(
        session, user.id, customer_id
    ):
        raise PermissionDeniedError("You are not this customer's coach")

    result = await session.exec(
        select(Workout)
        .where(Workout.user_id == customer_id, Workout.status == WorkoutStatus.ACTIVE)
        .order_by(col(Workout.created_at).desc())
    )
    return await to_read_many(session, list(result.all()))
