import json

import pytest

from app.core.exceptions import ItineraryParseError, ItineraryValidationError
from app.core.itinerary_parser import parse_itinerary, strip_code_fence


def test_fenced_json_is_parsed(itinerary_doc):
    raw = f"```json\n{json.dumps(itinerary_doc)}\n```"
    parsed = parse_itinerary(raw, expected_days=5)
    assert len(parsed.itinerary.days) == 5
    assert [day.day_number for day in parsed.itinerary.days] == [1, 2, 3, 4, 5]
    assert parsed.warnings == []


def test_unfenced_json_is_parsed(itinerary_doc):
    parsed = parse_itinerary(json.dumps(itinerary_doc))
    assert parsed.itinerary.summary == itinerary_doc["summary"]
    assert parsed.itinerary.days[0].places[0].timing_tip == "Sunset"


def test_bare_fence_without_language_tag():
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('{"a": 1}') == '{"a": 1}'


def test_json_wrapped_in_prose_is_recovered(itinerary_doc):
    raw = f"Here is your plan:\n{json.dumps(itinerary_doc)}\nEnjoy your trip!"
    parsed = parse_itinerary(raw)
    assert parsed.itinerary.total_estimated_cost == 5000


@pytest.mark.parametrize("raw", ["", "   ", "Sorry, I cannot help with that.", "{not json}", "[1, 2, 3]"])
def test_unparseable_output_raises_parse_error(raw):
    with pytest.raises(ItineraryParseError) as exc:
        parse_itinerary(raw)
    assert exc.value.message == "Could not interpret AI response. Please try again."
    assert exc.value.status_code == 502


def test_missing_required_keys_are_reported(itinerary_doc):
    del itinerary_doc["days"]
    del itinerary_doc["packingTips"]
    with pytest.raises(ItineraryValidationError) as exc:
        parse_itinerary(json.dumps(itinerary_doc))
    assert exc.value.details["missing_fields"] == ["days", "packingTips"]


def test_empty_days_is_rejected(itinerary_doc):
    itinerary_doc["days"] = []
    with pytest.raises(ItineraryValidationError):
        parse_itinerary(json.dumps(itinerary_doc))


@pytest.mark.parametrize("numbers", [[0, 1, 2, 3, 4], [1, 2, 2, 3, 4], [1, 2, 4, 5, 6], [2, 1, 3, 4, 5]])
def test_day_numbers_must_be_one_to_n(itinerary_doc, numbers):
    for day, number in zip(itinerary_doc["days"], numbers):
        day["dayNumber"] = number
    with pytest.raises(ItineraryValidationError) as exc:
        parse_itinerary(json.dumps(itinerary_doc))
    assert exc.value.details["day_numbers"] == numbers


def test_day_count_mismatch_is_a_warning(itinerary_doc):
    parsed = parse_itinerary(json.dumps(itinerary_doc), expected_days=7)
    assert len(parsed.itinerary.days) == 5
    assert parsed.warnings == ["Requested 7 days but received 5"]


def test_optional_day_sections_may_be_missing(itinerary_doc):
    day = itinerary_doc["days"][0]
    del day["transport"]
    del day["dailyCostBreakdown"]
    day["food"] = []
    parsed = parse_itinerary(json.dumps(itinerary_doc))
    first = parsed.itinerary.days[0]
    assert first.transport is None
    assert first.daily_cost_breakdown is None
    assert first.food == []


def test_currency_strings_are_coerced(itinerary_doc):
    itinerary_doc["totalEstimatedCost"] = "₹12,500"
    itinerary_doc["days"][0]["places"][0]["estimatedCost"] = "1200 INR"
    parsed = parse_itinerary(json.dumps(itinerary_doc))
    assert parsed.itinerary.total_estimated_cost == 12500
    assert parsed.itinerary.days[0].places[0].estimated_cost == 1200


def test_document_round_trips_in_camel_case(itinerary_doc):
    parsed = parse_itinerary(json.dumps(itinerary_doc))
    document = parsed.itinerary.to_document()
    assert set(document) == {"summary", "totalEstimatedCost", "days", "packingTips", "generalTips"}
    assert document["days"][0]["dailyCostBreakdown"]["total"] == 1000
