from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.api.v1.deps import require_admin
from fitcoach.db import get_db_session
from fitcoach.models.coach import (
    AssignCustomersRequest,
    CoachCreate,
    CoachCustomerIds,
    CoachRead,
    CoachUpdate,
    CustomerAction,
    CustomerActionRequest,
)
from fitcoach.models.user import User, UserRead, UserRolesUpdate, UserUpdate
from fitcoach.models.workout import WorkoutRead
from fitcoach.services import coaches as coaches_service
from fitcoach.services import users as users_service
from fitcoach.services import workouts as workouts_service

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# Users


@router.get("/users", response_model=list[UserRead])
async def list_users(session: AsyncSession = Depends(get_db_session)):
    return [users_service.user_read(u) for u in await users_service.list_users(session)]


@router.get("/customers", response_model=list[UserRead])
async def list_customers(session: AsyncSession = Depends(get_db_session)):
    """Active users holding the customer role."""
    return [users_service.user_read(u) for u in await users_service.list_customers(session)]


@router.get("/users/{user_id}", response_model=UserRead)
async def get_user(user_id: UUID, session: AsyncSession = Depends(get_db_session)):
    return users_service.user_read(await users_service.get_user(session, user_id))


@router.patch("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    session: AsyncSession = Depends(get_db_session),
):
    user = await users_service.update_user(session, user_id, body)
    return users_service.user_read(user)


@router.put("/users/{user_id}/roles", response_model=UserRead)
async def update_roles(
    user_id: UUID,
    body: UserRolesUpdate,
    session: AsyncSession = Depends(get_db_session),
):
    user = await users_service.update_roles(session, user_id, body.roles)
    return users_service.user_read(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot delete their own account",
        )
    await users_service.delete_user(session, user_id)


# Coaches


@router.get("/coaches", response_model=list[CoachRead])
async def list_coaches(session: AsyncSession = Depends(get_db_session)):
    return await coaches_service.list_coaches(session)


@router.post("/coaches", response_model=CoachRead, status_code=status.HTTP_201_CREATED)
async def create_coach(body: CoachCreate, session: AsyncSession = Depends(get_db_session)):
    coach = await coaches_service.create_coach(
        session, body.user_id, body.specialties, body.bio
    )
    return await coaches_service.coach_read(session, coach)


@router.get("/coaches/{coach_id}", response_model=CoachRead)
async def get_coach(coach_id: UUID, session: AsyncSession = Depends(get_db_session)):
    coach = await coaches_service.get_coach(session, coach_id)
    return await coaches_service.coach_read(session, coach)


@router.put("/coaches/{coach_id}", response_model=CoachRead)
async def update_coach(
    coach_id: UUID,
    body: CoachUpdate,
    session: AsyncSession = Depends(get_db_session),
):
    coach = await coaches_service.update_coach(
        session, coach_id, specialties=body.specialties, bio=body.bio
    )
    return await coaches_service.coach_read(session, coach)


@router.delete("/coaches/{coach_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_coach(coach_id: UUID, session: AsyncSession = Depends(get_db_session)):
    await coaches_service.delete_coach(session, coach_id)


@router.get("/coaches/{coach_id}/customers", response_model=CoachCustomerIds)
async def get_coach_customers(coach_id: UUID, session: AsyncSession = Depends(get_db_session)):
    coach = await coaches_service.get_coach(session, coach_id)
    return CoachCustomerIds(customers=await coaches_service.customer_ids(session, coach.id))


@router.patch("/coaches/{coach_id}/customers", response_model=CoachRead)
async def change_coach_customer(
    coach_id: UUID,
    body: CustomerActionRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Add or remove a single customer."""
    if body.action == CustomerAction.ADD:
        coach = await coaches_service.add_customer(session, coach_id, body.customer_id)
    else:
        coach = await coaches_service.remove_customer(session, coach_id, body.customer_id)
    return await coaches_service.coach_read(session, coach)


@router.put("/coaches/{coach_id}/customers", response_model=CoachRead)
async def replace_coach_customers(
    coach_id: UUID,
    body: AssignCustomersRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Replace the customer set. ``coach_id`` may also be the coach's user id."""
    coach = await coaches_service.assign_customers(session, coach_id, body.customer_ids)
    return await coaches_service.coach_read(session, coach)


# Archived workouts


@router.get("/workouts/archived", response_model=list[WorkoutRead])
async def list_archived_workouts(session: AsyncSession = Depends(get_db_session)):
    return await workouts_service.list_archived(session)


@router.post("/workouts/archived/{workout_id}/restore", response_model=WorkoutRead)
async def restore_workout(workout_id: UUID, session: AsyncSession = Depends(get_db_session)):
    return await workouts_service.restore_workout(session, workout_id)


@router.delete("/workouts/archived/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def purge_workout(workout_id: UUID, session: AsyncSession = Depends(get_db_session)):
    await workouts_service.delete_archived_workout(session, workout_id)
