from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from core.errors import LocalNotFoundError
from models.locals import Local
from schemas.local_schemas import LocalType
from utils.ids import uuid7
from utils.logger import get_logger

logger = get_logger(__name__)


class LocalRepository:
    """
    CRUD for local businesses and individuals over the request's database
    session. Every write commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self, city: Optional[str] = None, kind: LocalType = LocalType.BUSINESS) -> List[Local]:
        """
        Newest first. `city` matches case-insensitively anywhere in the
        city name.
        """
        query = select(Local)

        if city:
            query = query.where(func.lower(Local.city).like(f"%{city.strip().lower()}%"))

        if kind == LocalType.BUSINESS:
            query = query.where(Local.is_business.is_(True))
        elif kind == LocalType.INDIVIDUAL:
            query = query.where(Local.is_business.is_(False))

        query = query.order_by(Local.created_at.desc(), Local.id.desc())
        return list(self.db.execute(query).scalars().all())

    def get(self, local_id: UUID) -> Local:
        """Loads the listing together with its reviews, newest first."""
        query = select(Local).options(selectinload(Local.reviews)).where(Local.id == local_id)
        local = self.db.execute(query).scalar_one_or_none()

        if not local:
            raise LocalNotFoundError()

        return local

    def create(self, data: Dict[str, Any]) -> Local:
        local = Local(id=uuid7(), **data)

        self.db.add(local)
        self._commit()
        self.db.refresh(local)

        logger.info("Local business created", extra={"local_id": str(local.id)})
        return local

    def update(self, local_id: UUID, changes: Dict[str, Any]) -> Local:
        local = self.get(local_id)

        for field, value in changes.items():
            setattr(local, field, value)

        self._commit()
        self.db.refresh(local)

        logger.info(
            "Local business updated",
            extra={"local_id": str(local_id), "fields": sorted(changes)}
        )
        return local

    def delete(self, local_id: UUID) -> None:
        local = self.get(local_id)

        self.db.delete(local)
        self._commit()

        logger.info("Local business deleted", extra={"local_id": str(local_id)})

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
