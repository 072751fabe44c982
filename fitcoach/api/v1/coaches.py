from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.api.v1.deps import require_coach
from fitcoach.db import get_db_session
from fitcoach.models.coach import CoachRead
from fitcoach.models.user import User
from fitcoach.models.workout import WorkoutRead
from fitcoach.services import coaches as coaches_service
from fitcoach.services import workouts as workouts_service

router = APIRouter(prefix="/coach", tags=["coach"])


@router.get("/me", response_model=CoachRead)
async def get_my_coach_profile(
    user: User = Depends(require_coach),
    session: AsyncSession = Depends(get_db_session),
):
    """Coach profile of the caller, created on first access."""
    coach = await coaches_service.get_coach_by_user_id(session, user.id)
    if coach is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Coach profile not found"
        )
    return await coaches_service.coach_read(session, coach)


@router.get("/customers/{customer_id}/workouts", response_model=list[WorkoutRead])
async def list_customer_workouts(
    customer_id: UUID,
    user: User = Depends(require_coach),
    session: AsyncSession = Depends(get_db_session),
):
    return await workouts_service.list_customer_workouts(session, user, customer_id)
