import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from wavenote.dashboard.dependencies import (
    SESSION_UID_KEY,
    get_auth_service,
    get_auth_session,
    get_session_id,
    get_service_manager
)
from wavenote.models.user import AuthError, User
from wavenote.services import AuthService, AuthSession, ServiceManager
from wavenote.shared.schemas import Credentials, SessionOut, UserOut
from wavenote.utils.validators import MISSING_CREDENTIALS_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _session_out(user: Optional[User] = None) -> SessionOut:
    if user is None:
        return SessionOut(authenticated=False)
    return SessionOut(authenticated=True, user=UserOut(**user.to_dict()))


@router.post("/signup", response_model=SessionOut)
async def sign_up(
    credentials: Credentials,
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Create an account and sign in"""
    if not credentials.email or not credentials.password:
        raise HTTPException(status_code=400, detail=MISSING_CREDENTIALS_MESSAGE)
    try:
        user = await auth_service.sign_up(session, credentials.email, credentials.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)

    request.session[SESSION_UID_KEY] = user.uid
    return _session_out(user)


@router.post("/login", response_model=SessionOut)
async def log_in(
    credentials: Credentials,
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    auth_service: AuthService = Depends(get_auth_service)
):
    if not credentials.email or not credentials.password:
        raise HTTPException(status_code=400, detail=MISSING_CREDENTIALS_MESSAGE)
    try:
        user = await auth_service.log_in(session, credentials.email, credentials.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)

    request.session[SESSION_UID_KEY] = user.uid
    return _session_out(user)


@router.post("/logout", response_model=SessionOut)
async def log_out(
    request: Request,
    session_id: str = Depends(get_session_id),
    session: AuthSession = Depends(get_auth_session),
    services: ServiceManager = Depends(get_service_manager)
):
    await services.auth_service.log_out(session)
    services.sessions.drop(session_id)
    request.session.pop(SESSION_UID_KEY, None)
    return _session_out()


@router.get("/me", response_model=SessionOut)
async def current_user(session: AuthSession = Depends(get_auth_session)):
    return _session_out(session.current_user)
