import json
from types import SimpleNamespace


def make_itinerary(day_count: int = 5) -> dict:
    days = []
    for number in range(1, day_count + 1):
        days.append(
            {
                "dayNumber": number,
                "title": f"Day {number} in Goa",
                "places": [
                    {
                        "name": f"Beach {number}",
                        "description": "Golden sand",
                        "timingTip": "Sunset",
                        "estimatedCost": 200,
                    }
                ],
                "transport": {"mode": "Scooter", "description": "Rent a scooter", "estimatedCost": 400},
                "food": [
                    {
                        "meal": "Lunch",
                        "recommendation": "Fish thali",
                        "cuisine": "Goan",
                        "estimatedCost": 300,
                    }
                ],
                "dailyCostBreakdown": {
                    "sightseeing": 200,
                    "transport": 400,
                    "food": 300,
                    "miscellaneous": 100,
                    "total": 1000,
                },
                "tips": ["Carry sunscreen"],
            }
        )
    return {
        "summary": "A relaxed week of beaches and seafood.",
        "totalEstimatedCost": 1000 * day_count,
        "days": days,
        "packingTips": ["Light cotton clothes"],
        "generalTips": ["Bargain at flea markets"],
    }


class FakeStream:
    def __init__(self, tokens, fail_after=None):
        self.tokens = tokens
        self.fail_after = fail_after
        self.closed = False

    def __iter__(self):
        for index, token in enumerate(self.tokens):
            if self.fail_after is not None and index >= self.fail_after:
                raise ConnectionError("upstream dropped")
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=token))])

    def close(self):
        self.closed = True


class FakeUpstreamError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class FakeCompletions:
    def __init__(self):
        self.calls = []
        self.responses = []
        self.error = None
        self.stream_tokens = ["Hello", " from", " Goa"]
        self.stream_fail_after = None
        self.last_stream = None

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            self.last_stream = FakeStream(self.stream_tokens, self.stream_fail_after)
            return self.last_stream
        content = self.responses.pop(0) if self.responses else json.dumps(make_itinerary())
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeLLMClient:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


