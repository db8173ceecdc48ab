from __future__ import annotations

import logging
from typing import Any, Iterator

import aisuite as ai  # type: ignore

logger = logging.getLogger(__name__)

RATE_LIMITED = "rate_limited"
QUOTA_EXCEEDED = "quota_exceeded"
UNAVAILABLE = "unavailable"


class LLMRequestError(Exception):
    """A completion request failed upstream.

    ``kind`` is one of ``rate_limited``, ``quota_exceeded`` or ``unavailable`` so
    callers can map it to their own user-facing error.
    """

    def __init__(self, kind: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


def _status_code_of(exc: BaseException) -> int | None:
    # aisuite re-raises provider SDK errors, so walk the cause chain for an HTTP status
    seen = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        status = getattr(current, "status_code", None)
        if isinstance(status, int):
            return status
        response = getattr(current, "response", None)
        status = getattr(response, "status_code", None)
        if isinstance(status, int):
            return status
        current = current.__cause__ or current.__context__
    return None


def classify_error(exc: BaseException) -> LLMRequestError:
    status = _status_code_of(exc)
    text = str(exc).lower()

    # OpenAI reports exhausted credit as a 429 with code insufficient_quota
    if status == 402 or "insufficient_quota" in text or "payment required" in text:
        return LLMRequestError(QUOTA_EXCEEDED, str(exc), status)
    if status == 429 or "rate limit" in text:
        return LLMRequestError(RATE_LIMITED, str(exc), status)
    return LLMRequestError(UNAVAILABLE, str(exc), status)


class LLMProvider:
    def __init__(self, model: str, client: Any | None = None) -> None:
        self.model = model
        if client is not None:
            self._client = client
            return
        try:
            self._client = ai.Client()
        except Exception as exc:  # fail fast if aisuite cannot initialize
            raise RuntimeError("Failed to initialize aisuite client") from exc

    def chat(self, messages: list[dict[str, Any]], temperature: float = 1.0) -> str:
        """Send a chat completion request. messages: list of dicts with keys: role (system|user|assistant), content (str)"""
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
            )
        except Exception as exc:
            error = classify_error(exc)
            logger.error(f"[LLM] Completion failed ({error.kind}, status={error.status_code}): {exc}")
            raise error from exc

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise LLMRequestError(UNAVAILABLE, "Malformed completion response") from exc
        if not content:
            raise LLMRequestError(UNAVAILABLE, "No content in AI response")
        return content

    def stream_chat(
        self, messages: list[dict[str, Any]], temperature: float = 1.0
    ) -> Iterator[str]:
        """
        Open a streaming completion and return an iterator of text deltas.

        The upstream request is made before this returns, so rate-limit and
        quota errors surface as LLMRequestError here rather than mid-stream.
        """
        try:
            stream = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                stream=True,
            )
        except Exception as exc:
            error = classify_error(exc)
            logger.error(f"[LLM] Stream open failed ({error.kind}, status={error.status_code}): {exc}")
            raise error from exc
        return self._iter_stream(stream)

    @staticmethod
    def _iter_stream(stream: Any) -> Iterator[str]:
        try:
            for chunk in stream:
                choices = getattr(chunk, "choices", None)
                if not choices:
                    continue
                delta = getattr(choices[0], "delta", None)
                content = getattr(delta, "content", None)
                if content:
                    yield content
        finally:
            close = getattr(stream, "close", None)
            if callable(close):
                close()
