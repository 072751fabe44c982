"""Identity resolution and role normalisation.

A token subject may be any of the identifiers a user has carried over time:
the primary key, an e-mail address, an OAuth ``sub`` or a legacy Google id.
``resolve_identity`` is the single place that turns such a string into a
``User``.
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.models.user import ROLE_PRIORITY, User, UserRole, utcnow

logger = logging.getLogger(__name__)


def _coerce_role(value) -> UserRole | None:
    try:
        return UserRole(value)
    except ValueError:
        return None


def normalize_roles(
    roles: Iterable[str | UserRole] | None, role: str | UserRole | None = None
) -> list[UserRole]:
    """Return a non-empty, de-duplicated role list ordered by priority.

    Unknown values are dropped. An empty result falls back to ``role`` and
    then to ``customer``.
    """
    found = {r for r in (_coerce_role(v) for v in roles or ()) if r is not None}
    if not found and role is not None:
        fallback = _coerce_role(role)
        if fallback is not None:
            found.add(fallback)
    if not found:
        found.add(UserRole.CUSTOMER)
    return [r for r in ROLE_PRIORITY if r in found]


def primary_role(roles: Iterable[str | UserRole]) -> UserRole:
    return normalize_roles(roles)[0]


def user_roles(user: User) -> list[UserRole]:
    return normalize_roles(user.roles, user.role)


def has_role(user: User, role: UserRole) -> bool:
    return role in user_roles(user)


def has_any_role(user: User, *roles: UserRole) -> bool:
    held = user_roles(user)
    return any(r in held for r in roles)


def is_pure_customer(user: User) -> bool:
    return not has_any_role(user, UserRole.ADMIN, UserRole.COACH)


def set_roles(user: User, roles: Iterable[str | UserRole]) -> list[UserRole]:
    """Write normalised roles onto ``user`` and keep ``role`` in sync."""
    normalized = normalize_roles(roles)
    # Always assign a new list so the JSON column is flagged dirty
    user.roles = [r.value for r in normalized]
    user.role = normalized[0]
    user.updated_at = utcnow()
    return normalized


def add_role(user: User, role: UserRole) -> list[UserRole]:
    return set_roles(user, [*user_roles(user), role])


async def resolve_identity(session: AsyncSession, subject: str | None) -> User | None:
    """Find the user behind ``subject``.

    Lookup order: primary key, e-mail (case-insensitive), OAuth ``sub``,
    legacy Google id.
    """
    if not subject:
        return None
    subject = subject.strip()
    if not subject:
        return None

    try:
        user_id = UUID(subject)
    except ValueError:
        user_id = None
    if user_id is not None:
        user = await session.get(User, user_id)
        if user is not None:
            return user

    if "@" in subject:
        result = await session.exec(
            select(User).where(func.lower(User.email) == subject.lower())
        )
        user = result.first()
        if user is not None:
            return user

    result = await session.exec(select(User).where(User.sub == subject))
    user = result.first()
    if user is not None:
        return user

    result = await session.exec(select(User).where(User.google_id == subject))
    user = result.first()
    if user is None:
        logger.info("No user matches token subject %r", subject)
    return user
