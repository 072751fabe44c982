from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.core.security import create_access_token, get_google_verifier
from fitcoach.db import get_db_session
from fitcoach.models.auth import AuthResponse, GoogleAuthRequest, LoginRequest, RegisterRequest
from fitcoach.services import users as users_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(user.id, user.email), user_id=user.id
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db_session: AsyncSession = Depends(get_db_session),
):
    """Create a local account with the customer role and sign it in."""
    user = await users_service.register_local_user(
        db_session, body.name, body.email, body.password
    )
    return _token_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    db_session: AsyncSession = Depends(get_db_session),
):
    user = await users_service.authenticate_local(db_session, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User account is disabled"
        )
    return _token_response(user)


@router.post("/google", response_model=AuthResponse)
async def google_auth(
    body: GoogleAuthRequest,
    db_session: AsyncSession = Depends(get_db_session),
    verify_google_id_token=Depends(get_google_verifier),
):
    """Authenticate with a Google ID token.

    The client handles the Google sign-in flow and sends the resulting
    ``id_token`` here. The backend verifies it, finds or creates the user,
    and returns a local JWT for subsequent requests.
    """
    google_payload = await verify_google_id_token(body.id_token)
    if not google_payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Google ID token"
        )

    user = await users_service.upsert_google_user(db_session, google_payload)
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User account is disabled"
        )
    return _token_response(user)
