"""
User service for sign-in, registration and sign-out
Credentials are checked by the CRM API; only the returned profile is kept.
"""

from fastapi import HTTPException, status
import logging

from app.schemas.user import LoginRequest, RegisterRequest, UserCreate, UserProfile
from app.services.crm_api import CrmApiClient
from app.services.session_store import SessionContext
from app.utils.error_handler import BoundaryError

logger = logging.getLogger(__name__)

class UserService:
    """Service for session-related user operations"""

    def __init__(self, api_client: CrmApiClient, session: SessionContext):
        self.api_client = api_client
        self.session = session

    async def login(self, login_data: LoginRequest) -> UserProfile:
        """Authenticate against the CRM API and start the session"""
        try:
            user = await self.api_client.login(login_data.email, login_data.password)
        except BoundaryError as e:
            logger.warning(f"Failed login attempt for: {login_data.email}")
            if e.status_code is None or e.status_code >= 500:
                raise
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message or "Invalid email or password"
            )

        profile = UserProfile(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )
        self.session.login(profile)
        return profile

    async def register(self, register_data: RegisterRequest) -> UserProfile:
        """Create the account and log the new user in"""
        user_data = UserCreate(
            email=register_data.email,
            password=register_data.password,
            first_name=register_data.first_name,
            last_name=register_data.last_name,
        )
        try:
            created = await self.api_client.create_user(user_data.model_dump(by_alias=True))
        except BoundaryError as e:
            if "email already exists" in e.message.lower():
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="A user with this email already exists"
                )
            raise

        logger.info(f"Created new user: {created.email}")
        profile = UserProfile(
            id=created.id,
            email=created.email,
            first_name=created.first_name,
            last_name=created.last_name,
        )
        self.session.login(profile)
        return profile
