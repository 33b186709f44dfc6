"""
Authentication dependencies for FastAPI routes.

A bearer token names a user and a session; the session's durable
`currentUser` record must still hold that user (logout clears it, which
invalidates the token).
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from collabhub.core.security import decode_token
from collabhub.services.container import Services, get_services
from collabhub.services.identity_service import Session

# Bearer token extractors
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)


def _session_from_token(token: str, services: Services) -> Optional[Session]:
    payload = decode_token(token)
    if not payload:
        return None
    user_id, session_id = payload.get("sub"), payload.get("sid")
    if not user_id or not session_id:
        return None
    session = services.identity.restore(session_id)
    if session.user_id != user_id:
        return None
    return session


async def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    services: Services = Depends(get_services),
) -> Session:
    """
    FastAPI dependency - Get the authenticated session.

    Usage:
        @router.get("/protected")
        async def route(session: Session = Depends(get_current_session)):
            return session.user
    """
    session = _session_from_token(credentials.credentials, services)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer_scheme),
    services: Services = Depends(get_services),
) -> Session:
    """Dependency - session if a valid token was sent, else an anonymous one."""
    if credentials is None:
        return Session("anonymous")
    return _session_from_token(credentials.credentials, services) or Session("anonymous")
