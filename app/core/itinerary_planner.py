"""
Helper functions for planning itinerary structure based on trip parameters.
"""

from dataclasses import dataclass
from datetime import date

from app.core.exceptions import InvalidTripInputError
from app.core.schemas import Pace, TravelStyle, TripRequest

TRAVEL_STYLE_DESCRIPTIONS = {
    TravelStyle.SOLO: "solo traveler looking for authentic experiences and flexibility",
    TravelStyle.COUPLE: "romantic couple seeking memorable experiences together",
    TravelStyle.FAMILY: "family with mixed ages, needs comfortable and family-friendly options",
    TravelStyle.FRIENDS: "group of friends looking for fun, adventure, and social experiences",
}

PACE_DESCRIPTIONS = {
    Pace.RELAXED: "prefer a relaxed pace with fewer activities but more time to enjoy each place",
    Pace.PACKED: "want to maximize sightseeing and cover as many attractions as possible",
}

SYSTEM_PROMPT = (
    "You are an expert India travel planner. Create detailed, practical day-by-day "
    "itineraries with accurate local knowledge. Always provide realistic cost "
    "estimates in INR. Consider local weather, festivals, and seasonal factors."
)

OUTPUT_SHAPE = """{
  "summary": "Brief 2-3 sentence overview of the trip",
  "totalEstimatedCost": number,
  "days": [
    {
      "dayNumber": 1,
      "title": "Day title/theme",
      "places": [
        {
          "name": "Place name",
          "description": "Brief description",
          "timingTip": "Best time to visit",
          "estimatedCost": number
        }
      ],
      "transport": {
        "mode": "Auto/Metro/Cab/etc",
        "description": "How to get around",
        "estimatedCost": number
      },
      "food": [
        {
          "meal": "Breakfast/Lunch/Dinner",
          "recommendation": "Restaurant or food type",
          "cuisine": "Local specialty",
          "estimatedCost": number
        }
      ],
      "dailyCostBreakdown": {
        "sightseeing": number,
        "transport": number,
        "food": number,
        "miscellaneous": number,
        "total": number
      },
      "tips": ["Practical tip 1", "Practical tip 2"]
    }
  ],
  "packingTips": ["Season-specific packing suggestion"],
  "generalTips": ["Local customs", "Safety tips", "Money-saving tips"]
}"""


@dataclass(frozen=True)
class PlanParameters:
    """Values derived from a trip request that shape the generation prompt."""

    destination: str
    day_count: int
    season: str
    total_budget: float
    daily_budget: int
    travel_style: TravelStyle
    pace: Pace


def validate_trip_request(trip: TripRequest) -> None:
    """
    Reject trip parameters that can never produce a valid plan.

    Raises:
        InvalidTripInputError: On empty destination, reversed dates or a
            non-positive budget.
    """
    if not trip.destination or not trip.destination.strip():
        raise InvalidTripInputError("Destination is required", field="destination")
    if trip.end_date < trip.start_date:
        raise InvalidTripInputError("End date must be after start date", field="endDate")
    if trip.budget is None or trip.budget <= 0:
        raise InvalidTripInputError("Budget must be a positive amount", field="budget")


def calculate_day_count(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days between two dates."""
    return (end_date - start_date).days + 1


def get_season(start_date: date) -> str:
    """
    Map a trip start date to its season label.

    Spring covers March-May, Monsoon June-September, Autumn October-November
    and Winter December-February.
    """
    month = start_date.month
    if 3 <= month <= 5:
        return "Spring (March-May)"
    if 6 <= month <= 9:
        return "Monsoon (June-September)"
    if 10 <= month <= 11:
        return "Autumn (October-November)"
    return "Winter (December-February)"


def calculate_daily_budget(total_budget: float, day_count: int) -> int:
    return int(total_budget // day_count)


def format_inr(amount: float) -> str:
    """
    Format an amount with Indian digit grouping, e.g. 150000 -> "1,50,000".
    """
    negative = amount < 0
    whole = str(int(round(abs(amount))))
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"-{whole}" if negative else whole


def derive_plan_parameters(trip: TripRequest) -> PlanParameters:
    validate_trip_request(trip)
    day_count = calculate_day_count(trip.start_date, trip.end_date)
    return PlanParameters(
        destination=trip.destination.strip(),
        day_count=day_count,
        season=get_season(trip.start_date),
        total_budget=trip.budget,
        daily_budget=calculate_daily_budget(trip.budget, day_count),
        travel_style=trip.travel_style,
        pace=trip.pace,
    )


def build_itinerary_prompt(params: PlanParameters) -> list[dict[str, str]]:
    """
    Build the chat messages asking the model for a day-by-day plan.

    Returns:
        OpenAI-style message list: a system message and one user message that
        embeds the trip details and the exact JSON shape expected back.
    """
    style = TRAVEL_STYLE_DESCRIPTIONS.get(params.travel_style, params.travel_style.value)
    pace = PACE_DESCRIPTIONS.get(params.pace, params.pace.value)

    user_prompt = (
        f"Create a {params.day_count}-day travel itinerary for {params.destination}, India.\n\n"
        "Travel Details:\n"
        f"- Season: {params.season}\n"
        f"- Travel Style: {style}\n"
        f"- Pace: {pace}\n"
        f"- Total Budget: ₹{format_inr(params.total_budget)}\n"
        f"- Daily Budget: ₹{format_inr(params.daily_budget)} per day\n\n"
        "Please provide a JSON response with this exact structure:\n"
        f"{OUTPUT_SHAPE}\n\n"
        f"The days array must contain exactly {params.day_count} entries numbered 1 to "
        f"{params.day_count}. Ensure costs are realistic for {params.destination} and stay "
        f"within the daily budget of ₹{params.daily_budget}. Include local gems and "
        "must-visit spots."
    )

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]
