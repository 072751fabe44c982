import logging
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.core.errors import ConflictError, InvalidRequestError, NotFoundError
from fitcoach.core.security import hash_password, verify_password
from fitcoach.models.coach import Coach, CoachCustomer
from fitcoach.models.user import AuthProvider, User, UserRead, UserRole, UserUpdate, utcnow
from fitcoach.models.workout import Workout, WorkoutAssignment
from fitcoach.services.identity import primary_role, set_roles, user_roles
from fitcoach.services.workouts import delete_workout_rows

logger = logging.getLogger(__name__)


def user_read(user: User) -> UserRead:
    roles = user_roles(user)
    return UserRead(
        id=user.id,
        email=user.email,
        name=user.name,
        image=user.image,
        is_active=user.is_active,
        role=primary_role(roles),
        roles=roles,
        auth_provider=user.auth_provider,
    )


async def get_user(session: AsyncSession, user_id: UUID) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def find_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.exec(select(User).where(func.lower(User.email) == email.lower()))
    return result.first()


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.exec(select(User).order_by(User.created_at))
    return list(result.all())


async def list_customers(session: AsyncSession) -> list[User]:
    result = await session.exec(
        select(User).where(User.is_active == True).order_by(User.name)  # noqa: E712
    )
    # roles is a JSON column, so the role filter runs here
    return [u for u in result.all() if UserRole.CUSTOMER in user_roles(u)]


async def register_local_user(
    session: AsyncSession, name: str, email: str, password: str
) -> User:
    if await find_by_email(session, email) is not None:
        raise ConflictError("A user with this email already exists")

    user = User(
        email=email.lower(),
        name=name.strip(),
        password_hash=hash_password(password),
        auth_provider=AuthProvider.LOCAL,
    )
    set_roles(user, [UserRole.CUSTOMER])
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Registered local user %s", user.id)
    return user


async def authenticate_local(session: AsyncSession, email: str, password: str) -> User | None:
    """Return the user for valid credentials, ``None`` otherwise."""
    user = await find_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        return None
    return user


async def upsert_google_user(session: AsyncSession, payload: dict) -> User:
    """Find or create the user behind a verified Google token payload.

    Matches by ``sub``, then by legacy ``google_id``, then by e-mail, in which
    case the existing account is linked to Google.
    """
    subject: str = payload["sub"]
    email: str = (payload.get("email") or "").lower()
    name: str = payload.get("name") or ""
    picture: str | None = payload.get("picture")

    result = await session.exec(select(User).where(User.sub == subject))
    user = result.first()
    if user is None:
        result = await session.exec(select(User).where(User.google_id == subject))
        user = result.first()
    if user is None and email:
        user = await find_by_email(session, email)
        if user is not None:
            logger.info("Linking user %s to Google account", user.id)

    if user is None:
        if not email:
            raise InvalidRequestError("Google account has no email address")
        user = User(
            email=email,
            name=name,
            image=picture,
            auth_provider=AuthProvider.GOOGLE,
            sub=subject,
            google_id=subject,
        )
        set_roles(user, [UserRole.CUSTOMER])
        logger.info("Creating user for Google account %s", email)
    else:
        user.sub = subject
        if user.google_id is None:
            user.google_id = subject
        if not user.name and name:
            user.name = name
        if not user.image and picture:
            user.image = picture
        user.updated_at = utcnow()

    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def update_user(session: AsyncSession, user_id: UUID, data: UserUpdate) -> User:
    user = await get_user(session, user_id)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(user, key, value)
    user.updated_at = utcnow()
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def update_roles(session: AsyncSession, user_id: UUID, roles: list[UserRole]) -> User:
    if not roles:
        raise InvalidRequestError("At least one role is required")
    user = await get_user(session, user_id)
    set_roles(user, roles)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Roles of user %s set to %s", user_id, user.roles)
    return user


async def delete_user(session: AsyncSession, user_id: UUID) -> None:
    """Delete a user along with their workouts, assignments and coach data."""
    user = await get_user(session, user_id)

    result = await session.exec(select(Workout.id).where(Workout.user_id == user_id))
    await delete_workout_rows(session, list(result.all()))
    await session.exec(delete(WorkoutAssignment).where(WorkoutAssignment.user_id == user_id))
    # Workouts this user created for others stay with their owners
    result = await session.exec(select(Workout).where(Workout.created_by == user_id))
    for workout in result.all():
        workout.created_by = workout.user_id
        session.add(workout)

    await session.exec(delete(CoachCustomer).where(CoachCustomer.customer_id == user_id))
    result = await session.exec(select(Coach.id).where(Coach.user_id == user_id))
    coach_ids = list(result.all())
    if coach_ids:
        await session.exec(
            delete(CoachCustomer).where(col(CoachCustomer.coach_id).in_(coach_ids))
        )
        await session.exec(delete(Coach).where(col(Coach.id).in_(coach_ids)))

    await session.delete(user)
    await session.commit()
    logger.info("User %s deleted", user_id)
