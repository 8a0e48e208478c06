import enum
from core.database import Base
from sqlalchemy import (Column, String, Boolean, DateTime, Enum, Uuid)
from sqlalchemy.orm import relationship
from utils.ids import uuid7
from .mixins import CreatedAtMixin, UpdatedAtMixin


class AuthProvider(str, enum.Enum):
    EMAIL = "email"
    GOOGLE = "google"


class User(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "users"

    #pk
    id = Column(Uuid, primary_key=True, default=uuid7)

    #relationships
    sessions = relationship("UserSession", back_populates="user", passive_deletes=True)

    full_name = Column(String(100), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    auth_provider = Column(
        Enum(AuthProvider, name="auth_provider", values_callable=lambda e: [m.value for m in e]),
        default=AuthProvider.EMAIL,
        nullable=False
    )
    photo_url = Column(String)
    # Premium fields
    is_premium = Column(Boolean, default=False, nullable=False)
    premium_expired_at = Column(DateTime, nullable=True)
