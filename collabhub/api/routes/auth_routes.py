"""
Authentication Routes

POST /auth/signup - Create account and log in
POST /auth/login - Login and get JWT token
POST /auth/logout - End the session
GET /auth/me - Get current user
PUT /auth/me - Update own profile
"""

from fastapi import APIRouter, Depends

from collabhub.core.auth import get_current_session
from collabhub.core.security import create_access_token
from collabhub.services.container import Services, get_services
from collabhub.services.identity_service import Session
from collabhub.schemas.schemas import (
    SignupInput, LoginRequest, ProfileUpdate, TokenResponse, User, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(request: SignupInput, services: Services = Depends(get_services)):
    """
    Register a new account and start a session for it.

    Include token in requests: Authorization: Bearer <token>
    """
    session = services.identity.new_session()
    user = services.identity.signup(session, request)
    token = create_access_token(user.id, session.session_id)
    return TokenResponse(access_token=token, user=user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, services: Services = Depends(get_services)):
    """Login and receive JWT access token."""
    session = services.identity.new_session()
    user = services.identity.login(session, request.email, request.password)
    token = create_access_token(user.id, session.session_id)
    return TokenResponse(access_token=token, user=user)


@router.post("/logout", response_model=MessageResponse)
async def logout(session: Session = Depends(get_current_session), services: Services = Depends(get_services)):
    """Clear the session; its token stops working."""
    services.identity.logout(session)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=User)
async def get_me(session: Session = Depends(get_current_session)):
    """Get current authenticated user's profile."""
    return session.user


@router.put("/me", response_model=User)
async def update_me(
    updates: ProfileUpdate,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    """Update own profile. Links and preferences are replaced as a whole."""
    return services.identity.update_profile(session, updates)
