"""
Session endpoints: login, registration, logout and the current profile
"""

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
import logging

from app.config import RATE_LIMIT_ENABLED
from app.schemas.user import LoginRequest, RegisterRequest, UserProfile
from app.services.crm_api import CrmApiClient, get_api_client
from app.services.session_store import SessionContext
from app.services.user_service import UserService
from app.auth.auth_handler import get_session, get_current_user

logger = logging.getLogger(__name__)
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

router = APIRouter()

@router.post("/login", response_model=UserProfile)
@limiter.limit("10/minute")  # Prevent brute force attacks
async def login(
    request: Request,
    login_data: LoginRequest,
    api_client: CrmApiClient = Depends(get_api_client),
    session: SessionContext = Depends(get_session)
):
    """Check credentials with the CRM API and store the returned profile"""
    user_service = UserService(api_client, session)
    return await user_service.login(login_data)

@router.post("/register", response_model=UserProfile, status_code=201)
@limiter.limit("5/minute")
async def register(
    request: Request,
    register_data: RegisterRequest,
    api_client: CrmApiClient = Depends(get_api_client),
    session: SessionContext = Depends(get_session)
):
    """Create an account and log it in"""
    user_service = UserService(api_client, session)
    profile = await user_service.register(register_data)
    logger.info(f"New user registered: {profile.email}")
    return profile

@router.post("/logout")
async def logout(
    request: Request,
    session: SessionContext = Depends(get_session)
):
    """Clear the stored profile"""
    session.logout()
    return {"message": "Logged out successfully"}

@router.get("/me", response_model=UserProfile)
async def me(current_user: UserProfile = Depends(get_current_user)):
    """Profile of the logged-in user"""
    return current_user
