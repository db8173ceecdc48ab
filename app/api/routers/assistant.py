import json
import logging
from typing import Any, Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.api.deps import get_llm_provider, get_owned_trip, get_repo
from app.core.assistant_context import build_assistant_messages
from app.core.exceptions import AssistantUnavailableError, QuotaExceededError, RateLimitedError
from app.core.expense_ledger import total_spent
from app.core.llm_provider import QUOTA_EXCEEDED, RATE_LIMITED, LLMProvider, LLMRequestError
from app.core.repository import MongoDBRepo
from app.core.schemas import AssistantRequest, Trip, TripAssistantRequest, TripContext, User
from app.core.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assistant"])

SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def _open_stream(provider: LLMProvider, messages: list[dict[str, Any]]) -> Iterator[str]:
    try:
        return provider.stream_chat(messages)
    except LLMRequestError as exc:
        if exc.kind == RATE_LIMITED:
            raise RateLimitedError("Rate limit exceeded. Please try again later.") from exc
        if exc.kind == QUOTA_EXCEEDED:
            raise QuotaExceededError("Usage limit reached. Please add credits.") from exc
        raise AssistantUnavailableError() from exc


def _sse_events(tokens: Iterator[str]) -> Iterator[str]:
    """Frame each token as an SSE event and finish with ``[DONE]``."""
    try:
        for token in tokens:
            yield f"data: {json.dumps({'content': token}, ensure_ascii=False)}\n\n"
    except Exception as exc:
        # Headers are already sent; end the stream with what was delivered
        logger.error(f"[Assistant] Stream interrupted: {exc}")
        yield f"data: {json.dumps({'error': 'Stream interrupted'})}\n\n"
        return
    finally:
        close = getattr(tokens, "close", None)
        if callable(close):
            close()
    yield "data: [DONE]\n\n"


def _stream_response(provider: LLMProvider, context: TripContext, request_messages) -> StreamingResponse:
    messages = build_assistant_messages(context, request_messages)
    logger.info(
        f"[Assistant] Answering for '{context.destination}' "
        f"with {len(request_messages)} conversation messages"
    )
    tokens = _open_stream(provider, messages)
    return StreamingResponse(_sse_events(tokens), media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/assistant/chat")
def assistant_chat(
    payload: AssistantRequest,
    provider: LLMProvider = Depends(get_llm_provider),
    current_user: User = Depends(get_current_user),
) -> StreamingResponse:
    """Stream an answer using the trip context supplied by the caller."""
    return _stream_response(provider, payload.trip_context, payload.messages)


@router.post("/trips/{trip_id}/assistant")
def trip_assistant_chat(
    payload: TripAssistantRequest,
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
    provider: LLMProvider = Depends(get_llm_provider),
) -> StreamingResponse:
    """Stream an answer with context read from the stored trip, itinerary and expenses."""
    itinerary = repo.get_itinerary(trip.id)
    context = TripContext(
        destination=trip.destination,
        start_date=trip.start_date,
        end_date=trip.end_date,
        budget=trip.budget,
        travel_style=trip.travel_style.value,
        pace=trip.pace.value,
        itinerary=itinerary.to_document() if itinerary else None,
        total_spent=total_spent(repo.list_expenses(trip.id)),
    )
    return _stream_response(provider, context, payload.messages)
