from fastapi import APIRouter, Depends

from fitcoach.api.v1.deps import get_current_user
from fitcoach.models.user import User, UserRead
from fitcoach.services.users import user_read

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    """Return the currently authenticated user's profile."""
    return user_read(user)
