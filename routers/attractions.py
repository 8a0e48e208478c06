from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Request
from starlette import status
from repositories.attractions import AttractionRepository
from schemas.local_schemas import (AttractionCreate, AttractionUpdate, AttractionOut,
                                   AttractionResponse, AttractionListResponse, MessageResponse)
from utils.deps import user_dependency, db_dependency
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/tourist-attractions",
    tags=["tourist-attractions"]
)


@router.get("", status_code=status.HTTP_200_OK, response_model=AttractionListResponse)
@limiter.limit("60/minute")
def list_attractions(request: Request, user: user_dependency, db: db_dependency,
                     city: Optional[str] = None):
    rows = AttractionRepository(db).list_all(city=city)

    return AttractionListResponse(
        message="get all tourist attractions successful",
        payload=[AttractionOut.model_validate(row) for row in rows]
    )


@router.get("/{attraction_id}", status_code=status.HTTP_200_OK, response_model=AttractionResponse)
@limiter.limit("60/minute")
def get_attraction(request: Request, attraction_id: UUID, user: user_dependency, db: db_dependency):
    attraction = AttractionRepository(db).get(attraction_id)

    return AttractionResponse(
        message="get specific tourist attraction successful",
        payload=AttractionOut.model_validate(attraction)
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AttractionResponse)
@limiter.limit("20/minute")
def create_attraction(request: Request, body: AttractionCreate, user: user_dependency,
                      db: db_dependency):
    attraction = AttractionRepository(db).create(body.model_dump(mode="json"))

    return AttractionResponse(
        message="create tourist attraction successful",
        payload=AttractionOut.model_validate(attraction)
    )


@router.put("/{attraction_id}", status_code=status.HTTP_200_OK, response_model=AttractionResponse)
@limiter.limit("20/minute")
def update_attraction(request: Request, attraction_id: UUID, body: AttractionUpdate,
                      user: user_dependency, db: db_dependency):
    changes = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    attraction = AttractionRepository(db).update(attraction_id, changes)

    return AttractionResponse(
        message="update tourist attraction successful",
        payload=AttractionOut.model_validate(attraction)
    )


@router.delete("/{attraction_id}", status_code=status.HTTP_200_OK, response_model=MessageResponse)
@limiter.limit("20/minute")
def delete_attraction(request: Request, attraction_id: UUID, user: user_dependency,
                      db: db_dependency):
    AttractionRepository(db).delete(attraction_id)

    return MessageResponse(message="delete tourist attraction successful")
