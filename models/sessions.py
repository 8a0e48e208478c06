from core.database import Base
from sqlalchemy import Column, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from utils.ids import uuid7
from .mixins import CreatedAtMixin


class UserSession(Base, CreatedAtMixin):
    """
    One active login.

    Rows are immutable: they are inserted on login and only ever deleted
    (by cap eviction). Ordering for eviction is (created_at, id); ids are
    UUIDv7 so they break timestamp ties in creation order.
    """
    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_user_id_created_at", "user_id", "created_at"),
    )

    #pk
    id = Column(Uuid, primary_key=True, default=uuid7)

    #fk
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    #relationships
    user = relationship("User", back_populates="sessions")
