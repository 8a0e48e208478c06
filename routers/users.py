from fastapi import APIRouter, Request
from starlette import status
from core.errors import UserNotFoundError
from repositories.users import UserRepository
from schemas.user_schemas import UserProfile, SessionInfo, SessionList
from utils.deps import user_dependency, db_dependency, session_repository_dependency
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/users",
    tags=["users"]
)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserProfile)
@limiter.limit("30/minute")
def get_user_info(request: Request, user: user_dependency, db: db_dependency):
    """
    Get current user info (protected endpoint).
    """
    try:
        model = UserRepository(db).get_by_id(user.get("user_id"))
    except UserNotFoundError:
        # token outlived its account
        logger.warning("Token for missing account", extra={"user_id": str(user.get("user_id"))})
        raise

    return UserProfile.model_validate(model)


@router.get("/me/sessions", status_code=status.HTTP_200_OK, response_model=SessionList)
@limiter.limit("30/minute")
def list_my_sessions(request: Request, user: user_dependency, sessions: session_repository_dependency):
    """
    Active sessions of the current user, oldest first.
    """
    with sessions.new_client(transactional=False) as store:
        rows = store.list_by_account(user.get("user_id"))
        items = [SessionInfo.model_validate(row) for row in rows]

    return SessionList(count=len(items), sessions=items)
