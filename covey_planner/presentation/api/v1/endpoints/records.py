"""Owner-scoped record CRUD endpoints for every synced planner table."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status

from covey_planner.application.services import RecordService
from covey_planner.domain.exceptions import (
    EntityNotFoundError,
    RecordOwnershipError,
    RemoteStoreError,
    UnknownColumnError,
    UnknownTableError,
    UnscopedQueryError,
    ValidationFailedError,
)
from covey_planner.infrastructure.dependencies import get_record_service

router = APIRouter(prefix="/records", tags=["Records"])

_RESERVED_PARAMS = frozenset({"owner_id", "order_by", "descending"})

_DOMAIN_ERRORS = (
    EntityNotFoundError,
    RecordOwnershipError,
    RemoteStoreError,
    UnknownColumnError,
    UnknownTableError,
    UnscopedQueryError,
    ValidationFailedError,
)


def _to_http_error(exc: Exception) -> HTTPException:
    """Map a domain exception to the matching HTTP error."""
    if isinstance(exc, (UnknownTableError, EntityNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, UnknownColumnError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, ValidationFailedError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.errors)
    if isinstance(exc, UnscopedQueryError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, RecordOwnershipError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/{table}")
async def list_records(
    table: str,
    request: Request,
    owner_id: str = Query(..., min_length=1, description="Owning user ID"),
    order_by: str | None = Query(None, description="Column to sort by"),
    descending: bool = Query(False),
    service: RecordService = Depends(get_record_service),
) -> list[dict[str, Any]]:
    """List the owner's rows; any other query parameter is an equality filter."""
    filters = {
        name: value
        for name, value in request.query_params.items()
        if name not in _RESERVED_PARAMS
    }
    try:
        return await service.list_records(
            table,
            owner_id,
            filters=filters,
            order_by=order_by,
            descending=descending,
        )
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)


@router.post("/{table}", status_code=status.HTTP_201_CREATED)
async def create_record(
    table: str,
    row: dict[str, Any] = Body(...),
    service: RecordService = Depends(get_record_service),
) -> dict[str, Any]:
    """Insert a row, or overwrite the owner's row with the same id."""
    try:
        return await service.create_record(table, row)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)


@router.patch("/{table}/{record_id}")
async def update_record(
    table: str,
    record_id: str,
    owner_id: str = Query(..., min_length=1),
    patch: dict[str, Any] = Body(...),
    service: RecordService = Depends(get_record_service),
) -> dict[str, Any]:
    """Apply a partial update to one of the owner's rows."""
    try:
        return await service.update_record(table, record_id, patch, owner_id=owner_id)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)


@router.delete("/{table}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    table: str,
    record_id: str,
    owner_id: str = Query(..., min_length=1),
    service: RecordService = Depends(get_record_service),
) -> None:
    """Delete one of the owner's rows. Absent rows are a no-op."""
    try:
        await service.delete_record(table, record_id, owner_id=owner_id)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)
