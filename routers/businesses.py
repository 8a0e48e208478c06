from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Query, Request
from starlette import status
from repositories.locals import LocalRepository
from schemas.local_schemas import (LocalCreate, LocalUpdate, LocalType, LocalOut, LocalDetail,
                                   LocalResponse, LocalListResponse, MessageResponse)
from utils.deps import user_dependency, db_dependency
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/locals",
    tags=["locals"]
)


@router.get("", status_code=status.HTTP_200_OK, response_model=LocalListResponse)
@limiter.limit("60/minute")
def list_locals(request: Request, user: user_dependency, db: db_dependency,
                city: Optional[str] = None,
                kind: LocalType = Query(LocalType.BUSINESS, alias="type")):
    """
    List local businesses, newest first.

    `type` is business (default), individual, or all.
    """
    rows = LocalRepository(db).list_all(city=city, kind=kind)

    return LocalListResponse(
        message="get all local businesses successful",
        payload=[LocalOut.model_validate(row) for row in rows]
    )


@router.get("/{local_id}", status_code=status.HTTP_200_OK, response_model=LocalResponse)
@limiter.limit("60/minute")
def get_local(request: Request, local_id: UUID, user: user_dependency, db: db_dependency):
    local = LocalRepository(db).get(local_id)

    return LocalResponse(
        message="get specific local business successful",
        payload=LocalDetail.model_validate(local)
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=LocalResponse)
@limiter.limit("20/minute")
def create_local(request: Request, body: LocalCreate, user: user_dependency, db: db_dependency):
    local = LocalRepository(db).create(body.model_dump(mode="json"))

    return LocalResponse(
        message="create local business successful",
        payload=LocalDetail.model_validate(local)
    )


@router.put("/{local_id}", status_code=status.HTTP_200_OK, response_model=LocalResponse)
@limiter.limit("20/minute")
def update_local(request: Request, local_id: UUID, body: LocalUpdate, user: user_dependency,
                 db: db_dependency):
    """
    Partial update: fields left out of the body (or sent as null) keep their value.
    """
    changes = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    local = LocalRepository(db).update(local_id, changes)

    return LocalResponse(
        message="update local business successful",
        payload=LocalDetail.model_validate(local)
    )


@router.delete("/{local_id}", status_code=status.HTTP_200_OK, response_model=MessageResponse)
@limiter.limit("20/minute")
def delete_local(request: Request, local_id: UUID, user: user_dependency, db: db_dependency):
    LocalRepository(db).delete(local_id)

    return MessageResponse(message="delete local business successful")
