from core.database import Base
from sqlalchemy import (Column, String, Text, Boolean, Integer, ForeignKey, Index, Uuid)
from sqlalchemy.orm import relationship
from utils.ids import uuid7
from .mixins import CreatedAtMixin, UpdatedAtMixin


class Local(Base, CreatedAtMixin, UpdatedAtMixin):
    """
    A local business or an individual (street vendor, craftsman) listed on
    the platform. `is_business` tells the two apart.
    """
    __tablename__ = "locals"

    #pk
    id = Column(Uuid, primary_key=True, default=uuid7)

    #relationships
    reviews = relationship(
        "Review",
        back_populates="local",
        cascade="all, delete-orphan",
        order_by="Review.created_at.desc()"
    )

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    address = Column(String(200), nullable=False)
    city = Column(String(50), nullable=False, index=True)
    province = Column(String(50), nullable=False)
    # stored as sent by the client
    longitude = Column(String(32), nullable=False)
    latitude = Column(String(32), nullable=False)
    label = Column(String(50), nullable=False)
    opened_time = Column(String(50), nullable=False)
    photo_url = Column(String, nullable=False)
    is_business = Column(Boolean, default=False, nullable=False)


class Review(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_local_id_created_at", "local_id", "created_at"),
    )

    #pk
    id = Column(Uuid, primary_key=True, default=uuid7)

    #fks
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    local_id = Column(Uuid, ForeignKey("locals.id", ondelete="CASCADE"), nullable=False)

    #relationships
    local = relationship("Local", back_populates="reviews")

    star = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    photo_url = Column(String)
