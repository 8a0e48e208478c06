from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from core.errors import InvalidTokenError


def get_user_id(request: Request):
    """
    Rate-limit key: the authenticated user when a valid bearer token is
    present, otherwise the client address.
    """
    authorization = request.headers.get("Authorization")
    context = getattr(request.app.state, "context", None)

    if authorization and context is not None:
        scheme, _, token = authorization.partition(" ")
        if scheme == "Bearer" and token:
            try:
                claims = context.token_service.verify(token)
                return str(claims.user_id)
            except InvalidTokenError:
                pass

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_user_id,
    default_limits=["200/hour"]
)
