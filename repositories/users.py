from uuid import UUID
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from core.errors import DuplicateEmailError, UserNotFoundError
from models.users import User
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """
    Account lookup and creation over the request's database session.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User:
        user = self.db.query(User).filter(User.email == email.strip().lower()).one_or_none()

        if not user:
            raise UserNotFoundError()

        return user

    def get_by_id(self, user_id: UUID) -> User:
        user = self.db.get(User, user_id)

        if not user:
            raise UserNotFoundError()

        return user

    def create(self, user: User) -> User:
        """
        Persists a new account and commits.

        Raises:
            DuplicateEmailError: An account already uses this email
        """
        user.email = user.email.strip().lower()

        existing = self.db.query(User.id).filter(User.email == user.email).first()
        if existing:
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": user.email}
            )
            raise DuplicateEmailError()

        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            self.db.rollback()
            raise DuplicateEmailError() from exc
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(user)
        return user
