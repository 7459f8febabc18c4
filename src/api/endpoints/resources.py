"""
Resources API

Generic REST endpoints shared by every registered resource. Handlers only
translate HTTP to service calls; datastore work runs in the threadpool so
the event loop keeps serving other requests meanwhile.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.concurrency import run_in_threadpool

from src.api.dependencies import get_resource_service
from src.api.schemas import ErrorResponse, SuccessResponse
from src.core.logger import get_logger
from src.services.resource_service import ResourceService

logger = get_logger(__name__)

router = APIRouter(
    tags=["resources"],
    responses={
        400: {"model": ErrorResponse, "description": "Body does not fit the resource"},
        404: {"model": ErrorResponse, "description": "Unknown resource"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)


@router.get(
    "/{resource}",
    summary="List a resource",
    description="All records of a resource, or the settings document",
)
async def list_resource(
    resource: str,
    service: ResourceService = Depends(get_resource_service),
) -> Any:
    """
    List all records of a resource.

    Returns:
        JSON array of records, or the settings document (``{}`` if unset)
    """
    logger.debug("API: Listing %s", resource)
    return await run_in_threadpool(service.list_resource, resource)


@router.post(
    "/{resource}",
    summary="Create a record",
    description="Insert a record; for settings, replace the whole document",
)
async def create_record(
    resource: str,
    body: Dict[str, Any] = Body(...),
    service: ResourceService = Depends(get_resource_service),
) -> Dict[str, Any]:
    """
    Create a record from the body's fields.

    Returns:
        The created record, or ``{"success": true}`` for the settings document
    """
    logger.info("API: Creating %s record", resource)
    return await run_in_threadpool(service.create, resource, body)


@router.put(
    "/{resource}/{record_id}",
    response_model=SuccessResponse,
    summary="Update a record",
    description="Patch only the fields present in the body",
    responses={405: {"model": ErrorResponse, "description": "Not supported"}},
)
async def update_record(
    resource: str,
    record_id: str,
    body: Dict[str, Any] = Body(...),
    service: ResourceService = Depends(get_resource_service),
) -> SuccessResponse:
    logger.info("API: Updating %s/%s", resource, record_id)
    await run_in_threadpool(service.update, resource, record_id, body)
    return SuccessResponse()


@router.delete(
    "/{resource}/{record_id}",
    response_model=SuccessResponse,
    summary="Delete a record",
    description="Delete a record; a missing id is still a success",
    responses={405: {"model": ErrorResponse, "description": "Not supported"}},
)
async def delete_record(
    resource: str,
    record_id: str,
    service: ResourceService = Depends(get_resource_service),
) -> SuccessResponse:
    logger.info("API: Deleting %s/%s", resource, record_id)
    await run_in_threadpool(service.remove, resource, record_id)
    return SuccessResponse()


__all__ = ["router"]
