import time
from typing import Dict, Optional, Union

from fastapi import APIRouter, Body, Depends

from peniel.application.inspiration import (
    DailyInspirationHandler,
    DailyInspirationRequest,
    InspirationFailure,
    InspirationSuccess,
)
from peniel.core.dependencies import get_inspiration_handler
from peniel.core.observability import metrics, trace_async_operation

router = APIRouter(prefix="/daily-inspiration", tags=["daily-inspiration"])


@router.post("", response_model=Union[InspirationSuccess, InspirationFailure])
async def get_daily_inspiration(
    request: Optional[DailyInspirationRequest] = Body(default=None),
    handler: DailyInspirationHandler = Depends(get_inspiration_handler),
) -> Dict[str, str]:
    """Pick today's prompt.

    Always answers 200; the body is either ``{"prompt": ...}`` or
    ``{"error": ...}`` and the caller decides whether to offer a retry.
    """
    started = time.perf_counter()
    async with trace_async_operation(
        "api_daily_inspiration", has_history=bool(request and request.user_history)
    ):
        outcome = await handler.ahandle(request)

    metrics.record_http_request(
        "POST", "/api/v1/daily-inspiration", 200, time.perf_counter() - started
    )
    return outcome.to_payload()
