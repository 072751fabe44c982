import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.core.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    ServiceError,
)
from fitcoach.models.coach import Coach, CoachCustomer, CoachRead
from fitcoach.models.user import User, UserRole, UserSummary, utcnow
from fitcoach.services.identity import add_role, has_role

logger = logging.getLogger(__name__)


def user_summary(user: User) -> UserSummary:
    return UserSummary(id=user.id, email=user.email, name=user.name, image=user.image)


async def get_coach(session: AsyncSession, coach_id: UUID) -> Coach:
    coach = await session.get(Coach, coach_id)
    if coach is None:
        raise NotFoundError("Coach not found")
    return coach


async def find_coach_by_user_id(session: AsyncSession, user_id: UUID) -> Coach | None:
    result = await session.exec(select(Coach).where(Coach.user_id == user_id))
    return result.first()


async def ensure_coach_exists(session: AsyncSession, user_id: UUID) -> Coach:
    """Return the coach profile of ``user_id``, creating it if needed.

    The user must exist and hold the coach role.
    """
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not has_role(user, UserRole.COACH):
        raise InvalidRequestError("User does not have the coach role")

    coach = await find_coach_by_user_id(session, user_id)
    if coach is None:
        coach = Coach(user_id=user_id)
        session.add(coach)
        await session.commit()
        await session.refresh(coach)
        logger.info("Created missing coach profile for user %s", user_id)
    return coach


async def get_coach_by_user_id(session: AsyncSession, user_id: UUID) -> Coach | None:
    """Coach profile for ``user_id``; created on the fly for users with the coach role."""
    coach = await find_coach_by_user_id(session, user_id)
    if coach is not None:
        return coach
    user = await session.get(User, user_id)
    if user is None or not has_role(user, UserRole.COACH):
        return None
    return await ensure_coach_exists(session, user_id)


async def customer_ids(session: AsyncSession, coach_id: UUID) -> list[UUID]:
    result = await session.exec(
        select(CoachCustomer.customer_id).where(CoachCustomer.coach_id == coach_id)
    )
    return list(result.all())


async def coached_customer_ids(session: AsyncSession, user: User) -> frozenset[UUID]:
    if not has_role(user, UserRole.COACH):
        return frozenset()
    coach = await get_coach_by_user_id(session, user.id)
    if coach is None:
        return frozenset()
    return frozenset(await customer_ids(session, coach.id))


async def is_user_coach(
    session: AsyncSession, coach_user_id: UUID, customer_user_id: UUID
) -> bool:
    """True if ``coach_user_id`` coaches ``customer_user_id``."""
    coach = await find_coach_by_user_id(session, coach_user_id)
    if coach is None:
        return False
    link = await session.get(CoachCustomer, (coach.id, customer_user_id))
    return link is not None


async def _users_by_id(session: AsyncSession, ids: Iterable[UUID]) -> dict[UUID, User]:
    ids = list(ids)
    if not ids:
        return {}
    result = await session.exec(select(User).where(col(User.id).in_(ids)))
    return {u.id: u for u in result.all()}


async def coach_read(session: AsyncSession, coach: Coach) -> CoachRead:
    ids = await customer_ids(session, coach.id)
    users = await _users_by_id(session, [coach.user_id, *ids])
    owner = users.get(coach.user_id)
    if owner is None:
        raise NotFoundError("Coach user not found")
    return CoachRead(
        id=coach.id,
        user=user_summary(owner),
        specialties=list(coach.specialties or []),
        bio=coach.bio,
        customers=[user_summary(users[i]) for i in ids if i in users],
        created_at=coach.created_at,
        updated_at=coach.updated_at,
    )


async def list_coaches(session: AsyncSession) -> list[CoachRead]:
    result = await session.exec(select(Coach).order_by(Coach.created_at))
    return [await coach_read(session, coach) for coach in result.all()]


async def create_coach(
    session: AsyncSession, user_id: UUID, specialties: list[str], bio: str
) -> Coach:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if await find_coach_by_user_id(session, user_id) is not None:
        raise ConflictError("User is already a coach")

    if not has_role(user, UserRole.COACH):
        add_role(user, UserRole.COACH)
        session.add(user)

    coach = Coach(user_id=user_id, specialties=list(specialties), bio=bio)
    session.add(coach)
    await session.commit()
    await session.refresh(coach)
    logger.info("Coach profile %s created for user %s", coach.id, user_id)
    return coach


async def update_coach(
    session: AsyncSession,
    coach_id: UUID,
    specialties: list[str] | None = None,
    bio: str | None = None,
) -> Coach:
    coach = await get_coach(session, coach_id)
    if specialties is not None:
        coach.specialties = list(specialties)
    if bio is not None:
        coach.bio = bio
    coach.updated_at = utcnow()
    session.add(coach)
    await session.commit()
    await session.refresh(coach)
    return coach


async def delete_coach(session: AsyncSession, coach_id: UUID) -> None:
    coach = await get_coach(session, coach_id)
    await session.exec(delete(CoachCustomer).where(CoachCustomer.coach_id == coach_id))
    await session.delete(coach)
    await session.commit()
    logger.info("Coach profile %s deleted", coach_id)


async def _require_customers(
    session: AsyncSession, ids: list[UUID], missing: type[ServiceError] = NotFoundError
) -> None:
    users = await _users_by_id(session, ids)
    for customer_id in ids:
        user = users.get(customer_id)
        if user is None:
            raise missing(f"Customer {customer_id} not found")
        if not has_role(user, UserRole.CUSTOMER):
            raise InvalidRequestError(
                f"User {customer_id} does not have the customer role"
            )


async def add_customer(session: AsyncSession, coach_id: UUID, customer_id: UUID) -> Coach:
    coach = await get_coach(session, coach_id)
    await _require_customers(session, [customer_id])
    if await session.get(CoachCustomer, (coach_id, customer_id)) is None:
        session.add(CoachCustomer(coach_id=coach_id, customer_id=customer_id))
        await session.commit()
    return coach


async def remove_customer(
    session: AsyncSession, coach_id: UUID, customer_id: UUID
) -> Coach:
    coach = await get_coach(session, coach_id)
    link = await session.get(CoachCustomer, (coach_id, customer_id))
    if link is not None:
        await session.delete(link)
        await session.commit()
    return coach


async def assign_customers(
    session: AsyncSession, coach_or_user_id: UUID, ids: list[UUID]
) -> Coach:
    """Replace the customer set of a coach.

    ``coach_or_user_id`` may be a coach profile id or the id of a user with
    the coach role; in the latter case the profile is created if missing.
    """
    coach = await session.get(Coach, coach_or_user_id)
    if coach is None:
        coach = await ensure_coach_exists(session, coach_or_user_id)

    unique_ids = list(dict.fromkeys(ids))
    await _require_customers(session, unique_ids, missing=InvalidRequestError)

    await session.exec(delete(CoachCustomer).where(CoachCustomer.coach_id == coach.id))
    for customer_id in unique_ids:
        session.add(CoachCustomer(coach_id=coach.id, customer_id=customer_id))
    await session.commit()
    logger.info("Coach %s now has %d customers", coach.id, len(unique_ids))
    return coach
