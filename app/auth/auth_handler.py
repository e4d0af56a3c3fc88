"""
Session gating for the ClientIQ routes
There is no token: a request is authorized when the service holds a logged-in profile.
"""

from fastapi import HTTPException, status, Depends, Request

from app.schemas.user import UserProfile
from app.services.session_store import SessionContext

def get_session(request: Request) -> SessionContext:
    """Dependency returning the session context initialized at startup"""
    return request.app.state.session

def get_current_user(session: SessionContext = Depends(get_session)) -> UserProfile:
    """Dependency to get the logged-in user"""
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in"
        )
    return session.user
