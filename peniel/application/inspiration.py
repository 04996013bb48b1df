from typing import Callable, Dict, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field

from peniel.core.observability import metrics
from peniel.domain.inspiration import select_prompt

logger = structlog.get_logger(__name__)

EMPTY_RESULT_MESSAGE = "Failed to generate a prompt. Please try again."
UNEXPECTED_FAILURE_MESSAGE = "An unexpected error occurred. Please try again later."

Selector = Callable[[Optional[str]], Optional[str]]


class DailyInspirationRequest(BaseModel):
    user_history: Optional[str] = Field(default=None, alias="userHistory")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class InspirationSuccess(BaseModel):
    prompt: str

    def to_payload(self) -> Dict[str, str]:
        return {"prompt": self.prompt}


class InspirationFailure(BaseModel):
    error: str

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.error}


InspirationOutcome = Union[InspirationSuccess, InspirationFailure]


class DailyInspirationHandler:
    """Boundary around the prompt selector.

    Every call returns an outcome; selector exceptions are logged and
    converted, never re-raised.
    """

    def __init__(self, selector: Selector = select_prompt) -> None:
        self.selector = selector

    def handle(
        self, request: Optional[DailyInspirationRequest] = None
    ) -> InspirationOutcome:
        history = request.user_history if request is not None else None

        try:
            prompt = self.selector(history)
        except Exception as e:
            logger.error(
                "Daily inspiration selection failed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            metrics.record_inspiration_outcome("unexpected_failure")
            return InspirationFailure(error=UNEXPECTED_FAILURE_MESSAGE)

        if not prompt:
            logger.warning("Daily inspiration selector returned no prompt")
            metrics.record_inspiration_outcome("empty_result")
            return InspirationFailure(error=EMPTY_RESULT_MESSAGE)

        metrics.record_inspiration_outcome("success")
        return InspirationSuccess(prompt=prompt)

    async def ahandle(
        self, request: Optional[DailyInspirationRequest] = None
    ) -> InspirationOutcome:
        return self.handle(request)


default_handler = DailyInspirationHandler()


def get_daily_inspiration(
    request: Optional[DailyInspirationRequest] = None,
) -> InspirationOutcome:
    return default_handler.handle(request)


async def aget_daily_inspiration(
    request: Optional[DailyInspirationRequest] = None,
) -> InspirationOutcome:
    return await default_handler.ahandle(request)
