"""Day, block and exercise edits on a single workout.

Each route builds a pure edit from ``fitcoach.services.workout_structure``
and hands it to ``edit_structure``, which checks modify rights and saves.
"""

from functools import partial
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.api.v1.deps import get_current_user
from fitcoach.db import get_db_session
from fitcoach.models.user import User
from fitcoach.models.workout import (
    ExerciseCreate,
    ExerciseUpdate,
    NameUpdate,
    OptionalName,
    WorkoutRead,
)
from fitcoach.services import workout_structure as structure
from fitcoach.services.workouts import edit_structure

router = APIRouter(prefix="/workouts/{workout_id}/days", tags=["workout structure"])


@router.post("", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def add_day(
    workout_id: UUID,
    body: OptionalName | None = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    name = body.name if body else None
    return await edit_structure(
        session, user, workout_id, partial(structure.add_day, name=name)
    )


@router.patch("/{day_id}", response_model=WorkoutRead)
async def rename_day(
    workout_id: UUID,
    day_id: str,
    body: NameUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await edit_structure(
        session,
        user,
        workout_id,
        lambda days: structure.rename_day(days, day_id, body.name),
    )


@router.delete("/{day_id}", response_model=WorkoutRead)
async def delete_day(
    workout_id: UUID,
    day_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await edit_structure(
        session, user, workout_id, lambda days: structure.delete_day(days, day_id)
    )


@router.post(
    "/{day_id}/blocks", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED
)
async def add_block(
    workout_id: UUID,
    day_id: str,
    body: OptionalName | None = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    name = body.name if body else None
    return await edit_structure(
        session,
        user,
        workout_id,
        lambda days: structure.add_block(days, day_id, name),
    )


@router.patch("/{day_id}/blocks/{block_id}", response_model=WorkoutRead)
async def rename_block(
    workout_id: UUID,
    day_id: str,
    block_id: str,
    body: NameUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await edit_structure(
        session,
        user,
        workout_id,
        lambda days: structure.rename_block(days, day_id, block_id, body.name),
    )


@router.delete("/{day_id}/blocks/{block_id}", response_model=WorkoutRead)
async def delete_block(
    workout_id: UUID,
    day_id: str,
    block_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await edit_structure(
        session,
        user,
        workout_id,
        lambda days: structure.delete_block(days, day_id, block_id),
    )


@router.post(
    "/{day_id}/blocks/{block_id}/exercises",
    response_model=WorkoutRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_exercise(
    workout_id: UUID,
    day_id: str,
    block_id: str,
    body: ExerciseCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await edit_structure(
        session,
        user,
        workout_id,
        lambda days: structure.add_exercise(days, day_id, block_id, body),
    )


@router.patch(
    "/{day_id}/blocks/{block_id}/exercises/{exercise_id}", response_model=WorkoutRead
)
async def update_exercise(
    workout_id: UUID,
    day_id: str,
    block_id: str,
    exercise_id: str,
    body: ExerciseUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await edit_structure(
        session,
        user,
        workout_id,
        lambda days: structure.update_exercise(days, day_id, block_id, exercise_id, body),
    )


@router.delete(
    "/{day_id}/blocks/{block_id}/exercises/{exercise_id}", response_model=WorkoutRead
)
async def delete_exercise(
    workout_id: UUID,
    day_id: str,
    block_id: str,
    exercise_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await edit_structure(
        session,
        user,
        workout_id,
        lambda days: structure.delete_exercise(days, day_id, block_id, exercise_id),
    )
