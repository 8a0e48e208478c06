from typing import List
from uuid import UUID
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased, sessionmaker
from core.errors import (StoreUnavailableError, SessionCreateError, SessionNotFoundError,
                         CommitError, RollbackError)
from models.sessions import UserSession
from utils.logger import get_logger

logger = get_logger(__name__)


class SessionStore:
    """
    Session rows for one borrowed connection.

    A transactional store groups every call until commit() or rollback().
    A non-transactional store commits each write as it happens, and its
    commit()/rollback() are no-ops, so callers can write the same cleanup
    code either way.

    Use as a context manager: leaving the block returns the connection to
    the pool, rolling back anything still uncommitted.
    """

    def __init__(self, db: Session, transactional: bool):
        self.db = db
        self.transactional = transactional
        self._finished = False

    def __enter__(self) -> "SessionStore":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _autocommit(self):
        if not self.transactional:
            self.db.commit()

    def create(self, session: UserSession) -> UserSession:
        """
        Inserts a new session row.

        Raises:
            SessionCreateError: The insert was rejected
        """
        self.db.add(session)
        try:
            self.db.flush()
            self._autocommit()
        except SQLAlchemyError as exc:
            if not self.transactional:
                self.db.rollback()
            raise SessionCreateError() from exc

        return session

    def list_by_account(self, user_id: UUID) -> List[UserSession]:
        """All sessions of an account, oldest first by (created_at, id)."""
        query = (
            select(UserSession)
            .where(UserSession.user_id == user_id)
            .order_by(UserSession.created_at, UserSession.id)
        )
        return list(self.db.execute(query).scalars().all())

    def count_by_account(self, user_id: UUID) -> int:
        query = select(func.count(UserSession.id)).where(UserSession.user_id == user_id)
        return self.db.execute(query).scalar_one()

    def delete_oldest_by_account(self, user_id: UUID) -> None:
        """
        Deletes exactly one row, the account's oldest session.

        Selecting the oldest id and deleting it happen in one statement so
        no other writer can slip in between.

        Raises:
            SessionNotFoundError: The account has no sessions
        """
        candidate = aliased(UserSession)
        oldest_id = (
            select(candidate.id)
            .where(candidate.user_id == user_id)
            .order_by(candidate.created_at, candidate.id)
            .limit(1)
            .scalar_subquery()
        )

        result = self.db.execute(
            delete(UserSession).where(UserSession.id == oldest_id),
            execution_options={"synchronize_session": False}
        )

        if result.rowcount == 0:
            raise SessionNotFoundError()

        self._autocommit()

    def commit(self) -> None:
        if not self.transactional:
            return

        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            raise CommitError() from exc
        finally:
            self._finished = True

    def rollback(self) -> None:
        if not self.transactional:
            return

        try:
            self.db.rollback()
        except SQLAlchemyError as exc:
            raise RollbackError(rollback_error=exc) from exc
        finally:
            self._finished = True

    def close(self) -> None:
        if self.transactional and not self._finished:
            logger.warning("Session store closed with an open transaction, rolling back")

        # Session.close() rolls back any transaction still in progress
        self.db.close()


class SessionRepository:
    """
    Hands out SessionStore scopes over the pooled engine.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def new_client(self, transactional: bool = False) -> SessionStore:
        """
        Borrow a connection and wrap it in a SessionStore.

        Args:
            transactional: Begin a transaction that lasts until commit/rollback

        Raises:
            StoreUnavailableError: No connection or transaction could be opened
        """
        db = self._session_factory()

        if transactional:
            try:
                db.begin()
                # acquire the connection now so pool/driver failures surface here
                db.connection()
            except SQLAlchemyError as exc:
                db.close()
                logger.error(
                    "Failed to open session store transaction",
                    extra={"error_type": type(exc).__name__},
                    exc_info=True
                )
                raise StoreUnavailableError() from exc

        return SessionStore(db, transactional)
