from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class LocalType(str, Enum):
    BUSINESS = "business"
    INDIVIDUAL = "individual"
    ALL = "all"


class _StripStrings(BaseModel):

    @field_validator('*', mode='before')
    @classmethod
    def strip_strings(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


# Local businesses

class LocalCreate(_StripStrings):
    name: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    address: str = Field(min_length=10, max_length=200)
    city: str = Field(min_length=2, max_length=50)
    province: str = Field(min_length=2, max_length=50)
    longitude: str = Field(min_length=1, max_length=32)
    latitude: str = Field(min_length=1, max_length=32)
    label: str = Field(min_length=2, max_length=50)
    opened_time: str = Field(min_length=1, max_length=50)
    photo_url: HttpUrl
    is_business: bool = False


class LocalUpdate(_StripStrings):
    """Partial update: only the fields present in the body change."""
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=500)
    address: Optional[str] = Field(default=None, min_length=10, max_length=200)
    city: Optional[str] = Field(default=None, min_length=2, max_length=50)
    province: Optional[str] = Field(default=None, min_length=2, max_length=50)
    longitude: Optional[str] = Field(default=None, min_length=1, max_length=32)
    latitude: Optional[str] = Field(default=None, min_length=1, max_length=32)
    label: Optional[str] = Field(default=None, min_length=2, max_length=50)
    opened_time: Optional[str] = Field(default=None, min_length=1, max_length=50)
    photo_url: Optional[HttpUrl] = None
    is_business: Optional[bool] = None


class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    star: int
    content: str
    photo_url: Optional[str] = None
    created_at: datetime


class LocalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    address: str
    city: str
    province: str
    longitude: str
    latitude: str
    label: str
    opened_time: str
    photo_url: str
    is_business: bool
    created_at: datetime


class LocalDetail(LocalOut):
    reviews: list[ReviewOut] = []


class LocalResponse(BaseModel):
    message: str
    payload: LocalDetail


class LocalListResponse(BaseModel):
    message: str
    payload: list[LocalOut]


# Tourist attractions

class AttractionCreate(_StripStrings):
    name: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    address: str = Field(min_length=10, max_length=200)
    city: str = Field(min_length=2, max_length=50)
    province: str = Field(min_length=2, max_length=50)
    longitude: float = Field(ge=-180, le=180)
    latitude: float = Field(ge=-90, le=90)
    photo_url: HttpUrl
    price: int = Field(ge=0)
    discount_percentage: float = Field(default=0, ge=0, le=100)
    tour_guide_price: int = Field(ge=0)
    tour_guide_count: int = Field(ge=1)
    tour_guide_discount_percentage: float = Field(default=0, ge=0, le=100)


class AttractionUpdate(_StripStrings):
    """Partial update: only the fields present in the body change."""
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=500)
    address: Optional[str] = Field(default=None, min_length=10, max_length=200)
    city: Optional[str] = Field(default=None, min_length=2, max_length=50)
    province: Optional[str] = Field(default=None, min_length=2, max_length=50)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    photo_url: Optional[HttpUrl] = None
    price: Optional[int] = Field(default=None, ge=0)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    tour_guide_price: Optional[int] = Field(default=None, ge=0)
    tour_guide_count: Optional[int] = Field(default=None, ge=1)
    tour_guide_discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)


class AttractionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    address: str
    city: str
    province: str
    longitude: float
    latitude: float
    photo_url: str
    price: int
    discount_percentage: float
    tour_guide_price: int
    tour_guide_count: int
    tour_guide_discount_percentage: float
    created_at: datetime


class AttractionResponse(BaseModel):
    message: str
    payload: AttractionOut


class AttractionListResponse(BaseModel):
    message: str
    payload: list[AttractionOut]


class MessageResponse(BaseModel):
    message: str
