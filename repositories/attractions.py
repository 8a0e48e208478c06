from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.errors import AttractionNotFoundError
from models.attractions import TouristAttraction
from utils.ids import uuid7
from utils.logger import get_logger

logger = get_logger(__name__)


class AttractionRepository:

    def __init__(self, db: Session):
        self.db = db

    def list_all(self, city: Optional[str] = None) -> List[TouristAttraction]:
        query = select(TouristAttraction)

        if city:
            query = query.where(func.lower(TouristAttraction.city).like(f"%{city.strip().lower()}%"))

        query = query.order_by(TouristAttraction.created_at.desc(), TouristAttraction.id.desc())
        return list(self.db.execute(query).scalars().all())

    def get(self, attraction_id: UUID) -> TouristAttraction:
        attraction = self.db.get(TouristAttraction, attraction_id)

        if not attraction:
            raise AttractionNotFoundError()

        return attraction

    def create(self, data: Dict[str, Any]) -> TouristAttraction:
        attraction = TouristAttraction(id=uuid7(), **data)

        self.db.add(attraction)
        self._commit()
        self.db.refresh(attraction)

        logger.info("Tourist attraction created", extra={"attraction_id": str(attraction.id)})
        return attraction

    def update(self, attraction_id: UUID, changes: Dict[str, Any]) -> TouristAttraction:
        attraction = self.get(attraction_id)

        for field, value in changes.items():
            setattr(attraction, field, value)

        self._commit()
        self.db.refresh(attraction)

        logger.info(
            "Tourist attraction updated",
            extra={"attraction_id": str(attraction_id), "fields": sorted(changes)}
        )
        return attraction

    def delete(self, attraction_id: UUID) -> None:
        attraction = self.get(attraction_id)

        self.db.delete(attraction)
        self._commit()

        logger.info("Tourist attraction deleted", extra={"attraction_id": str(attraction_id)})

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
