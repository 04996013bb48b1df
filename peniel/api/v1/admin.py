from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, UploadFile

from peniel.api.schemas import (
    ActivityLogResponse,
    DashboardResponse,
    EventInput,
    EventResponse,
    InspirationInput,
    InspirationResponse,
    SermonInput,
    SermonResponse,
    ServiceInput,
    ServiceResponse,
    UploadResponse,
)
from peniel.application.services import ContentService, parse_content_key
from peniel.core.dependencies import get_content_service, get_file_storage, require_admin
from peniel.core.observability import metrics, trace_async_operation
from peniel.domain.exceptions import (
    ContentNotFoundException,
    StorageException,
    UnknownContentKeyException,
)
from peniel.infrastructure.storage.file_storage import FileStorage

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _not_found(e: ContentNotFoundException) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    content_service: ContentService = Depends(get_content_service),
) -> DashboardResponse:
    sermon_count, event_count, recent = await content_service.dashboard()
    return DashboardResponse(
        sermon_count=sermon_count,
        event_count=event_count,
        recent_activity=[ActivityLogResponse.from_entity(a) for a in recent],
    )


@router.get("/activity", response_model=List[ActivityLogResponse])
async def list_activity(
    limit: int = Query(default=5, ge=1, le=20),
    content_service: ContentService = Depends(get_content_service),
) -> List[ActivityLogResponse]:
    entries = await content_service.activity.recent(limit)
    return [ActivityLogResponse.from_entity(a) for a in entries]


# Sermons


@router.post("/sermons", response_model=SermonResponse, status_code=201)
async def create_sermon(
    data: SermonInput,
    content_service: ContentService = Depends(get_content_service),
) -> SermonResponse:
    sermon = await content_service.create_sermon(data)
    metrics.record_http_request("POST", "/api/v1/admin/sermons", 201, 0.0)
    return SermonResponse.from_entity(sermon)


@router.put("/sermons/{sermon_id}", response_model=SermonResponse)
async def update_sermon(
    sermon_id: UUID,
    data: SermonInput,
    content_service: ContentService = Depends(get_content_service),
) -> SermonResponse:
    try:
        sermon = await content_service.update_sermon(sermon_id, data)
    except ContentNotFoundException as e:
        raise _not_found(e)
    return SermonResponse.from_entity(sermon)


@router.delete("/sermons/{sermon_id}", status_code=204)
async def delete_sermon(
    sermon_id: UUID,
    content_service: ContentService = Depends(get_content_service),
) -> None:
    try:
        await content_service.delete_sermon(sermon_id)
    except ContentNotFoundException as e:
        raise _not_found(e)


# Events


@router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventInput,
    content_service: ContentService = Depends(get_content_service),
) -> EventResponse:
    event = await content_service.create_event(data)
    metrics.record_http_request("POST", "/api/v1/admin/events", 201, 0.0)
    return EventResponse.from_entity(event)


@router.put("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    data: EventInput,
    content_service: ContentService = Depends(get_content_service),
) -> EventResponse:
    try:
        event = await content_service.update_event(event_id, data)
    except ContentNotFoundException as e:
        raise _not_found(e)
    return EventResponse.from_entity(event)


@router.delete("/events/{event_id}", status_code=204)
async def delete_event(
    event_id: UUID,
    content_service: ContentService = Depends(get_content_service),
) -> None:
    try:
        await content_service.delete_event(event_id)
    except ContentNotFoundException as e:
        raise _not_found(e)


# Services


@router.post("/services", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceInput,
    content_service: ContentService = Depends(get_content_service),
) -> ServiceResponse:
    service = await content_service.create_service(data)
    return ServiceResponse.from_entity(service)


@router.put("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceInput,
    content_service: ContentService = Depends(get_content_service),
) -> ServiceResponse:
    try:
        service = await content_service.update_service(service_id, data)
    except ContentNotFoundException as e:
        raise _not_found(e)
    return ServiceResponse.from_entity(service)


@router.delete("/services/{service_id}", status_code=204)
async def delete_service(
    service_id: int,
    content_service: ContentService = Depends(get_content_service),
) -> None:
    try:
        await content_service.delete_service(service_id)
    except ContentNotFoundException as e:
        raise _not_found(e)


# Inspirations


@router.post("/inspirations", response_model=InspirationResponse, status_code=201)
async def create_inspiration(
    data: InspirationInput,
    content_service: ContentService = Depends(get_content_service),
) -> InspirationResponse:
    try:
        inspiration = await content_service.create_inspiration(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return InspirationResponse.from_entity(inspiration)


@router.put("/inspirations/{inspiration_id}", response_model=InspirationResponse)
async def update_inspiration(
    inspiration_id: int,
    data: InspirationInput,
    content_service: ContentService = Depends(get_content_service),
) -> InspirationResponse:
    try:
        inspiration = await content_service.update_inspiration(inspiration_id, data)
    except ContentNotFoundException as e:
        raise _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return InspirationResponse.from_entity(inspiration)


@router.delete("/inspirations/{inspiration_id}", status_code=204)
async def delete_inspiration(
    inspiration_id: int,
    content_service: ContentService = Depends(get_content_service),
) -> None:
    try:
        await content_service.delete_inspiration(inspiration_id)
    except ContentNotFoundException as e:
        raise _not_found(e)


# Site content


@router.put("/content/{key}")
async def update_site_content(
    key: str,
    content: Dict[str, Any] = Body(...),
    content_service: ContentService = Depends(get_content_service),
) -> Dict[str, Any]:
    try:
        content_key = parse_content_key(key)
    except UnknownContentKeyException as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        document = await content_service.update_site_content(content_key, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return document.model_dump(mode="json")


# Uploads


@router.post("/uploads/{bucket}", response_model=UploadResponse, status_code=201)
async def upload_file(
    bucket: str,
    file: UploadFile = File(...),
    storage: FileStorage = Depends(get_file_storage),
) -> UploadResponse:
    """Store an image in a bucket and return its public URL."""
    async with trace_async_operation("api_upload", bucket=bucket):
        data = await file.read()
        try:
            url = await storage.upload(file.filename or "upload", data, bucket)
        except StorageException as e:
            status = 404 if e.reason == "unknown bucket" else 500
            raise HTTPException(status_code=status, detail=str(e))
        return UploadResponse(bucket=bucket, url=url)
