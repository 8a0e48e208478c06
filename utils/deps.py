from typing import Annotated
from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from starlette import status
from core.context import AppContext
from core.errors import InvalidTokenError
from repositories.sessions import SessionRepository
from repositories.users import UserRepository
from services.auth_service import AuthService
from utils.logger import get_logger

logger = get_logger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def get_context(request: Request) -> AppContext:
    return request.app.state.context

context_dependency = Annotated[AppContext, Depends(get_context)]


def get_db(context: context_dependency):
    db = context.session_factory()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]


def get_session_repository(context: context_dependency) -> SessionRepository:
    return SessionRepository(context.session_factory)

session_repository_dependency = Annotated[SessionRepository, Depends(get_session_repository)]


def get_auth_service(db: db_dependency, context: context_dependency,
                     sessions: session_repository_dependency) -> AuthService:
    return AuthService(
        users=UserRepository(db),
        sessions=sessions,
        tokens=context.token_service,
        max_sessions=context.settings.MAX_SESSIONS_PER_USER,
        default_photo_url=context.settings.DEFAULT_PHOTO_URL,
    )

auth_service_dependency = Annotated[AuthService, Depends(get_auth_service)]


def get_current_user(request: Request, token: Annotated[str, Depends(oauth2_scheme)],
                     context: context_dependency):
    """
    Bearer-token guard for protected routes.

    Puts the caller's user id and premium flag on request.state and
    returns them.
    """
    try:
        claims = context.token_service.verify(token)
    except InvalidTokenError as exc:
        logger.warning("Rejected access token", extra={"reason": exc.code})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail=exc.message,
                            headers={"WWW-Authenticate": "Bearer"})

    request.state.user_id = claims.user_id
    request.state.is_premium = claims.is_premium

    return {"user_id": claims.user_id, "is_premium": claims.is_premium}


user_dependency = Annotated[dict, Depends(get_current_user)]
