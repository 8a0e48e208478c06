import base64
import binascii
from datetime import datetime, timezone, timedelta
from typing import Callable, Optional
from uuid import UUID
from jose import jwt
from jose.exceptions import JOSEError, JWTError, ExpiredSignatureError, JWTClaimsError
from pydantic import ValidationError as SchemaValidationError
from core.errors import (SigningError, ExpiredTokenError, InvalidSignatureError,
                         MalformedTokenError)
from schemas.auth_schemas import TokenClaims
from utils.logger import get_logger

logger = get_logger(__name__)

ISSUER = "nusa"
SUBJECT = "authentication"
ACCESS_TOKEN_LIFETIME = timedelta(hours=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Issues and verifies signed access tokens, and encodes the opaque
    refresh token handed out with them.

    Access tokens are HS256 JWTs with a fixed one-hour lifetime. They are
    never stored server-side, so validity is signature + expiry only.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 clock: Callable[[], datetime] = utcnow):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: UUID, is_premium: bool,
              premium_expired_at: Optional[datetime] = None) -> str:
        """
        Creates a signed access token.

        Args:
            user_id: Account id
            is_premium: Account premium flag
            premium_expired_at: When premium ends (None for free accounts)

        Returns:
            Encoded JWT string

        Raises:
            SigningError: If the signer rejects the secret or claims
        """
        issued_at = self._clock()

        payload = {
            "user_id": str(user_id),
            "is_premium": bool(is_premium),
            "premium_expired_at": premium_expired_at.isoformat() if premium_expired_at else None,
            "iss": ISSUER,
            "sub": SUBJECT,
            "iat": issued_at,
            "exp": issued_at + ACCESS_TOKEN_LIFETIME,
        }

        try:
            return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        except JOSEError as exc:
            logger.error(
                "Failed to sign access token",
                extra={"user_id": str(user_id), "algorithm": self._algorithm},
                exc_info=True
            )
            raise SigningError() from exc

    def verify(self, token: str) -> TokenClaims:
        """
        Decodes and validates an access token.

        Raises:
            MalformedTokenError: Token segments or claims cannot be decoded
            ExpiredTokenError: exp has passed
            InvalidSignatureError: MAC does not verify
        """
        try:
            jwt.get_unverified_claims(token)
        except JOSEError as exc:
            raise MalformedTokenError() from exc

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=ISSUER,
                subject=SUBJECT
            )
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except JWTClaimsError as exc:
            raise MalformedTokenError() from exc
        except JWTError as exc:
            raise InvalidSignatureError() from exc

        try:
            return TokenClaims.model_validate(payload)
        except SchemaValidationError as exc:
            raise MalformedTokenError() from exc

    @staticmethod
    def encode_refresh_token(session_id: UUID) -> str:
        """Reversible (base64) encoding of a session id. Not a secret."""
        return base64.b64encode(str(session_id).encode("utf-8")).decode("ascii")

    @staticmethod
    def decode_refresh_token(refresh_token: str) -> UUID:
        try:
            raw = base64.b64decode(refresh_token.encode("ascii"), validate=True)
            return UUID(raw.decode("utf-8"))
        except (binascii.Error, ValueError) as exc:
            raise MalformedTokenError() from exc
