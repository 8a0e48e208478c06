from typing import Optional
from core.errors import (InvalidCredentialsError, UserNotFoundError, PasswordMismatchError,
                         RollbackError)
from models.sessions import UserSession
from models.users import User, AuthProvider
from repositories.sessions import SessionRepository, SessionStore
from repositories.users import UserRepository
from schemas.auth_schemas import LoginRequest, RegisterRequest, TokenPair
from services.token_service import TokenService
from utils.hashing import hash_password, compare_password
from utils.ids import uuid7
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_SESSIONS_PER_USER = 3

# Verified against when the email is unknown, so both login failures cost one bcrypt check
DUMMY_PASSWORD_HASH = hash_password("nusa-unknown-account")


class AuthService:
    """
    Registration and login.

    A login issues an access token and records a session. An account keeps
    at most `max_sessions` sessions: when a login pushes it over the cap,
    the oldest session is evicted in the same transaction that created the
    new one. Two concurrent logins for one account may briefly leave it one
    over the cap; the next login brings it back down.
    """

    def __init__(self, users: UserRepository, sessions: SessionRepository,
                 tokens: TokenService, max_sessions: int = MAX_SESSIONS_PER_USER,
                 default_photo_url: Optional[str] = None):
        self.users = users
        self.sessions = sessions
        self.tokens = tokens
        self.max_sessions = max_sessions
        self.default_photo_url = default_photo_url

    def register(self, request: RegisterRequest) -> TokenPair:
        """
        Creates an email/password account, then logs it in through the
        regular login path.

        Raises:
            DuplicateEmailError: Email already registered
        """
        user = User(
            id=uuid7(),
            full_name=request.full_name,
            email=request.email,
            hashed_password=hash_password(request.password),
            auth_provider=AuthProvider.EMAIL,
            photo_url=self.default_photo_url,
        )

        user = self.users.create(user)

        logger.info(
            "User registered successfully",
            extra={"user_id": str(user.id), "email": user.email}
        )

        return self.login(LoginRequest(email=request.email, password=request.password))

    def login(self, request: LoginRequest) -> TokenPair:
        """
        Flow:
        1. Look up account by email
        2. Verify password
        3. Issue access token
        4. Open a session-store transaction
        5. Create the session
        6. Evict the oldest session if the account is now over the cap
        7. Commit
        8. Return access token + encoded session id

        Any failure in steps 5-7 rolls the transaction back before the
        error is raised.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            TokenIssuanceError: Access token could not be signed
            StoreUnavailableError: Transaction could not be opened
            SessionCreateError, SessionNotFoundError, CommitError: Store failure
            RollbackError: Rollback failed; carries the triggering error as `cause`
        """
        user = self._authenticate(request.email, request.password)

        access_token = self.tokens.issue(user.id, user.is_premium, user.premium_expired_at)

        with self.sessions.new_client(transactional=True) as store:
            new_session = self._open_session(store, user)

        logger.info(
            "User logged in successfully",
            extra={"user_id": str(user.id), "session_id": str(new_session.id)}
        )

        return TokenPair(
            access_token=access_token,
            refresh_token=self.tokens.encode_refresh_token(new_session.id),
        )

    def _authenticate(self, email: str, password: str) -> User:
        try:
            user = self.users.get_by_email(email)
        except UserNotFoundError:
            try:
                compare_password(DUMMY_PASSWORD_HASH, password)
            except PasswordMismatchError:
                pass  # always a mismatch
            logger.warning("Login failed - user not found", extra={"email": email})
            raise InvalidCredentialsError() from None

        try:
            compare_password(user.hashed_password, password)
        except PasswordMismatchError:
            logger.warning(
                "Login failed - invalid password",
                extra={"user_id": str(user.id), "email": email}
            )
            raise InvalidCredentialsError() from None

        return user

    def _open_session(self, store: SessionStore, user: User) -> UserSession:
        try:
            new_session = store.create(UserSession(id=uuid7(), user_id=user.id))

            # post-insert check: the new session counts toward the cap
            active = store.count_by_account(user.id)
            if active > self.max_sessions:
                store.delete_oldest_by_account(user.id)
                logger.debug(
                    "Evicted oldest session",
                    extra={"user_id": str(user.id), "active_sessions": active}
                )

            store.commit()
        except Exception as exc:
            self._rollback(store, exc)
            raise

        return new_session

    @staticmethod
    def _rollback(store: SessionStore, cause: Exception) -> None:
        try:
            store.rollback()
        except RollbackError as rollback_exc:
            logger.error(
                "Rollback failed after session store error",
                extra={
                    "error_type": type(cause).__name__,
                    "rollback_error_type": type(rollback_exc.rollback_error).__name__,
                },
                exc_info=True
            )
            raise RollbackError(cause=cause, rollback_error=rollback_exc.rollback_error) from cause
