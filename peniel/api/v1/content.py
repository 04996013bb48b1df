from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from peniel.api.schemas import (
    EventResponse,
    InspirationResponse,
    SermonFacetsResponse,
    SermonResponse,
    ServiceResponse,
)
from peniel.application.services import ContentService, parse_content_key
from peniel.core.dependencies import get_content_service
from peniel.core.observability import metrics, trace_async_operation
from peniel.domain.entities import SiteContentKey
from peniel.domain.exceptions import UnknownContentKeyException

router = APIRouter(tags=["content"])


@router.get("/sermons", response_model=List[SermonResponse])
async def list_sermons(
    search: Optional[str] = Query(default=None, max_length=200),
    topic: Optional[str] = Query(default=None),
    speaker: Optional[str] = Query(default=None),
    content_service: ContentService = Depends(get_content_service),
) -> List[SermonResponse]:
    """Sermon archive, newest first."""
    async with trace_async_operation("api_list_sermons"):
        sermons = await content_service.list_sermons(search, topic, speaker)
        metrics.record_http_request("GET", "/api/v1/sermons", 200, 0.0)
        return [SermonResponse.from_entity(s) for s in sermons]


@router.get("/sermons/facets", response_model=SermonFacetsResponse)
async def sermon_facets(
    content_service: ContentService = Depends(get_content_service),
) -> SermonFacetsResponse:
    topics, speakers = await content_service.sermon_facets()
    return SermonFacetsResponse(topics=topics, speakers=speakers)


@router.get("/events", response_model=List[EventResponse])
async def list_events(
    upcoming: bool = Query(default=False),
    content_service: ContentService = Depends(get_content_service),
) -> List[EventResponse]:
    events = await content_service.list_events(upcoming_only=upcoming)
    metrics.record_http_request("GET", "/api/v1/events", 200, 0.0)
    return [EventResponse.from_entity(e) for e in events]


@router.get("/services", response_model=List[ServiceResponse])
async def list_services(
    content_service: ContentService = Depends(get_content_service),
) -> List[ServiceResponse]:
    services = await content_service.list_services()
    return [ServiceResponse.from_entity(s) for s in services]


@router.get("/inspirations", response_model=List[InspirationResponse])
async def list_inspirations(
    content_service: ContentService = Depends(get_content_service),
) -> List[InspirationResponse]:
    """Admin-curated inspiration items shown on the daily inspiration page."""
    items = await content_service.list_inspirations()
    return [InspirationResponse.from_entity(i) for i in items]


@router.get("/content/{key}")
async def get_site_content(
    key: str,
    content_service: ContentService = Depends(get_content_service),
) -> Dict[str, Any]:
    try:
        content_key: SiteContentKey = parse_content_key(key)
    except UnknownContentKeyException:
        metrics.record_http_request("GET", "/api/v1/content/{key}", 404, 0.0)
        raise HTTPException(status_code=404, detail=f"Unknown content key: {key}")

    document = await content_service.get_site_content(content_key)
    metrics.record_http_request("GET", "/api/v1/content/{key}", 200, 0.0)
    return document.model_dump(mode="json")
