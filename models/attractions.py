from core.database import Base
from sqlalchemy import (Column, String, Text, Integer, BigInteger, Float, Uuid)
from utils.ids import uuid7
from .mixins import CreatedAtMixin, UpdatedAtMixin


class TouristAttraction(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "tourist_attractions"

    #pk
    id = Column(Uuid, primary_key=True, default=uuid7)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    address = Column(String(200), nullable=False)
    city = Column(String(50), nullable=False, index=True)
    province = Column(String(50), nullable=False)
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    photo_url = Column(String, nullable=False)
    # Prices are whole rupiah
    price = Column(BigInteger, nullable=False)
    discount_percentage = Column(Float, default=0, nullable=False)
    tour_guide_price = Column(BigInteger, nullable=False)
    tour_guide_count = Column(Integer, nullable=False)
    tour_guide_discount_percentage = Column(Float, default=0, nullable=False)
