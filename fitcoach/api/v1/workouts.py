from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.api.v1.deps import get_current_user
from fitcoach.core.config import Settings, get_settings
from fitcoach.db import get_db_session
from fitcoach.models.user import User
from fitcoach.models.workout import (
    AssignWorkoutRequest,
    DuplicateWorkoutRequest,
    WorkoutAccessRead,
    WorkoutCount,
    WorkoutCreate,
    WorkoutRead,
    WorkoutUpdate,
)
from fitcoach.services import workouts as workouts_service

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Workouts visible to the caller, newest first."""
    return await workouts_service.list_workouts(session, user)


@router.post("", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def create_workout(
    body: WorkoutCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    return await workouts_service.create_workout(
        session, user, body, limit=settings.customer_workout_limit
    )


@router.get("/count", response_model=WorkoutCount)
async def count_workouts(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return WorkoutCount(count=await workouts_service.count_own_workouts(session, user))


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(
    workout_id: UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await workouts_service.get_workout(session, user, workout_id)


@router.patch("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: UUID,
    body: WorkoutUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await workouts_service.update_workout(session, user, workout_id, body)


@router.get("/{workout_id}/access", response_model=WorkoutAccessRead)
async def get_workout_access(
    workout_id: UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """The caller's access level on a workout and what it allows."""
    return await workouts_service.get_access(session, user, workout_id)


@router.post("/{workout_id}/archive", response_model=WorkoutRead)
async def archive_workout(
    workout_id: UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await workouts_service.archive_workout(session, user, workout_id)


@router.post("/{workout_id}/complete", response_model=WorkoutRead)
async def complete_workout(
    workout_id: UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await workouts_service.complete_workout(session, user, workout_id)


@router.post(
    "/{workout_id}/duplicate",
    response_model=WorkoutRead,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_workout(
    workout_id: UUID,
    body: DuplicateWorkoutRequest | None = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    body = body or DuplicateWorkoutRequest()
    return await workouts_service.duplicate_workout(
        session,
        user,
        workout_id,
        name=body.name,
        description=body.description,
        limit=settings.customer_workout_limit,
    )


@router.post("/{workout_id}/assign", response_model=WorkoutRead)
async def assign_workout(
    workout_id: UUID,
    body: AssignWorkoutRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await workouts_service.assign_workout(
        session, user, workout_id, body.customer_ids, body.coach_ids
    )


@router.delete("/{workout_id}/assignments/{assignee_id}", response_model=WorkoutRead)
async def unassign_workout(
    workout_id: UUID,
    assignee_id: UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await workouts_service.unassign_workout(session, user, workout_id, assignee_id)
