from passlib.context import CryptContext
from core.errors import HashError, PasswordMismatchError
from utils.logger import get_logger

logger = get_logger(__name__)

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

# Bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Salted one-way hash. Raises HashError if the bcrypt backend fails."""
    try:
        return bcrypt_context.hash(_truncate(password))
    except (ValueError, TypeError, RuntimeError) as exc:
        logger.error("Password hashing failed", extra={"error_type": type(exc).__name__}, exc_info=True)
        raise HashError() from exc


def compare_password(hashed_password: str, plain_password: str) -> None:
    """
    Constant-time comparison of a plaintext against a stored hash.

    Raises PasswordMismatchError when they do not match. A stored value
    passlib cannot identify as a bcrypt hash is treated as a mismatch.
    """
    try:
        matched = bcrypt_context.verify(_truncate(plain_password), hashed_password)
    except (ValueError, TypeError) as exc:
        raise PasswordMismatchError() from exc

    if not matched:
        raise PasswordMismatchError()
