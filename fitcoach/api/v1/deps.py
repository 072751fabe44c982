import logging

from fastapi import Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.core.security import get_token_subject
from fitcoach.db import get_db_session
from fitcoach.models.user import User, UserRole
from fitcoach.services.identity import has_any_role, resolve_identity

logger = logging.getLogger(__name__)


async def get_current_user(
    subject: str = Depends(get_token_subject),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolve the bearer token to an active user."""
    user = await resolve_identity(session, subject)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        logger.warning("Inactive user %s attempted access", user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User account is disabled"
        )
    return user


def require_roles(*roles: UserRole):
    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not has_any_role(user, *roles):
            logger.warning("User %s lacks roles %s", user.id, [r.value for r in roles])
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions"
            )
        return user

    return dependency


require_admin = require_roles(UserRole.ADMIN)
require_coach = require_roles(UserRole.COACH, UserRole.ADMIN)
