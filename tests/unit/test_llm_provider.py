import pytest

from app.core.llm_provider import (
    QUOTA_EXCEEDED,
    RATE_LIMITED,
    UNAVAILABLE,
    LLMProvider,
    LLMRequestError,
    classify_error,
)
from tests.fakes import FakeUpstreamError


class WrappedProviderError(Exception):
    pass


def test_status_is_found_on_the_cause_chain():
    try:
        try:
            raise FakeUpstreamError("slow down", 429)
        except FakeUpstreamError as inner:
            raise WrappedProviderError("provider call failed") from inner
    except WrappedProviderError as outer:
        error = classify_error(outer)
    assert error.kind == RATE_LIMITED
    assert error.status_code == 429


@pytest.mark.parametrize(
    "exc, kind",
    [
        (FakeUpstreamError("Payment Required", 402), QUOTA_EXCEEDED),
        (FakeUpstreamError("insufficient_quota", 429), QUOTA_EXCEEDED),
        (Exception("Rate limit reached for requests"), RATE_LIMITED),
        (FakeUpstreamError("Internal error", 500), UNAVAILABLE),
        (TimeoutError("timed out"), UNAVAILABLE),
    ],
)
def test_classify_error(exc, kind):
    assert classify_error(exc).kind == kind


def test_empty_completion_is_an_error(llm_client):
    llm_client.completions.responses = [""]
    with pytest.raises(LLMRequestError) as exc:
        LLMProvider("openai:test-model", client=llm_client).chat([{"role": "user", "content": "hi"}])
    assert exc.value.kind == UNAVAILABLE


def test_stream_yields_deltas_and_closes_upstream(llm_client):
    provider = LLMProvider("openai:test-model", client=llm_client)
    tokens = provider.stream_chat([{"role": "user", "content": "hi"}])

    assert list(tokens) == ["Hello", " from", " Goa"]
    assert llm_client.completions.calls[0]["stream"] is True
    assert llm_client.completions.last_stream.closed is True


def test_abandoned_stream_is_closed(llm_client):
    provider = LLMProvider("openai:test-model", client=llm_client)
    tokens = provider.stream_chat([{"role": "user", "content": "hi"}])

    assert next(tokens) == "Hello"
    tokens.close()
    assert llm_client.completions.last_stream.closed is True


def test_stream_open_failure_is_raised_eagerly(llm_client):
    llm_client.completions.error = FakeUpstreamError("Too Many Requests", 429)
    provider = LLMProvider("openai:test-model", client=llm_client)
    with pytest.raises(LLMRequestError) as exc:
        provider.stream_chat([{"role": "user", "content": "hi"}])
    assert exc.value.kind == RATE_LIMITED
