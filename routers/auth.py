from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette import status
from core.context import AppContext
from schemas.auth_schemas import RegisterRequest, LoginRequest, TokenPair, LoginResponse
from utils.deps import auth_service_dependency, context_dependency
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)

REFRESH_TOKEN_COOKIE = "refresh_token"


router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def set_refresh_cookie(response: JSONResponse, refresh_token: str, context: AppContext) -> None:
    settings = context.settings
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE,
        value=refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=TokenPair)
@limiter.limit("5/minute")
def register(request: Request, body: RegisterRequest, auth_service: auth_service_dependency,
             context: context_dependency):
    """
    Create an account and log it in.
    """
    tokens = auth_service.register(body)

    response = JSONResponse(status_code=status.HTTP_201_CREATED, content=tokens.model_dump())
    set_refresh_cookie(response, tokens.refresh_token, context)

    return response


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, auth_service: auth_service_dependency,
          context: context_dependency):
    tokens = auth_service.login(body)

    payload = LoginResponse(message="login successful", payload=tokens)
    response = JSONResponse(status_code=status.HTTP_200_OK, content=payload.model_dump())
    set_refresh_cookie(response, tokens.refresh_token, context)

    return response
