"""
Instruction context for the trip assistant.

Everything the assistant knows about a trip is rebuilt from the request on
every call; no conversation state is kept server-side.
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Any

from app.core.itinerary_planner import format_inr
from app.core.schemas import ChatMessage, TripContext


@dataclass(frozen=True)
class SeasonAdvisory:
    name: str
    advice: str


MONSOON = SeasonAdvisory(
    name="Monsoon",
    advice="""MONSOON SEASON ALERT (June-September):
- AVOID outdoor activities like trekking, beach visits, and wildlife safaris during heavy rain
- Roads may be slippery or flooded in hilly areas
- Suggest indoor activities: museums, temples, cooking classes, spa treatments
- Recommend waterproof gear and umbrellas
- Some hill stations like Munnar, Coorg get very heavy rainfall""",
)

SUMMER = SeasonAdvisory(
    name="Summer",
    advice="""SUMMER SEASON (April-May):
- STRONGLY RECOMMEND hill stations: Manali, Shimla, Ooty, Darjeeling, Munnar, Mount Abu, Mussoorie
- Avoid plains of North India (Delhi, Jaipur, Varanasi) - temperatures exceed 45°C
- Best time for Ladakh and Spiti Valley (May-June)
- Suggest early morning activities (before 10 AM) or evening plans
- Recommend AC accommodations and staying hydrated""",
)

PEAK = SeasonAdvisory(
    name="Peak",
    advice="""PEAK TOURIST SEASON (October-February):
- Best weather across most of India
- Expect higher prices and crowds at popular destinations
- Book accommodations and trains well in advance
- Perfect for Rajasthan, Goa, Kerala, and wildlife safaris""",
)

SHOULDER = SeasonAdvisory(
    name="Shoulder",
    advice="""SHOULDER SEASON (March):
- Good weather in most places before summer heat
- Holi festival celebrations (if in March)
- Wildlife safaris still good before parks close""",
)

WEEKEND_WARNING = """WEEKEND CROWD ALERT:
- Popular tourist spots will be very crowded
- Suggest visiting major attractions early morning (before 8 AM) or late afternoon
- Local hill stations near metros (Lonavala, Mahabaleshwar, Matheran, Nandi Hills) extremely crowded
- Restaurant wait times longer; consider reservations
- Traffic on highways will be heavy; plan extra travel time"""

FESTIVAL_CALENDAR = """MAJOR INDIAN FESTIVALS TO CONSIDER:
- Diwali (Oct/Nov): Best time to experience local celebrations, but shops may close, prices surge
- Holi (March): Colorful but be prepared for crowds and color play
- Durga Puja (Oct): Best experienced in Kolkata
- Ganesh Chaturthi (Aug/Sept): Best in Mumbai and Pune
- Navratri/Garba (Oct): Best in Gujarat
- Pushkar Mela (Nov): Famous camel fair in Rajasthan
- Kumbh Mela: Massive pilgrim gathering (check dates)
- Republic Day (26 Jan): Delhi parade, tight security
- Independence Day (15 Aug): Celebrations but tight security at monuments
Note: During major festivals, transport and hotels book up fast. Plan accordingly."""

ASSISTANT_ROLE = """Your role is to:
1. Help users find cheaper alternatives (hotels, transport, food)
2. Suggest things they can skip to save money
3. Recommend hidden gems and local spots near their destinations
4. Provide budget-saving tips specific to India
5. Answer questions about their trip using the context provided
6. PROACTIVELY WARN about weather/season issues based on trip dates
7. Suggest festival experiences if timing aligns
8. Warn about peak crowds and suggest off-peak timing
9. Recommend season-appropriate destinations (hill stations in summer, beaches in winter)

INDIA-SPECIFIC TIPS TO SHARE:
- Use IRCTC Tatkal for last-minute train bookings (opens 10 AM, one day before)
- Sleeper buses are cheaper than trains for overnight travel
- Street food is safe at busy stalls with high turnover
- Negotiate auto-rickshaw fares or use Ola/Uber
- Government tourism hotels (ITDC, state tourism) offer good value
- Dharamshalas and ashrams offer budget accommodation in religious cities

Keep responses concise, friendly, and actionable. Use ₹ for prices. Focus on practical advice for traveling in India."""


def season_advisory(start_date: date) -> SeasonAdvisory:
    month = start_date.month
    if 6 <= month <= 9:
        return MONSOON
    if 4 <= month <= 5:
        return SUMMER
    if month >= 10 or month <= 2:
        return PEAK
    return SHOULDER


def starts_on_weekend(start_date: date) -> bool:
    """Friday, Saturday and Sunday starts get the crowd warning."""
    return start_date.weekday() in (4, 5, 6)


def _money(amount: float | None) -> str:
    return f"₹{format_inr(amount)}" if amount is not None else "Not set"


def build_system_prompt(context: TripContext) -> str:
    spent = context.total_spent or 0
    remaining = _money(context.budget - spent) if context.budget is not None else "Not set"

    sections = [
        f"You are a helpful travel assistant specializing in India travel for a trip to {context.destination}.",
        "TRIP DETAILS:\n"
        f"- Destination: {context.destination}\n"
        f"- Dates: {context.start_date.isoformat()} to {context.end_date.isoformat()}\n"
        f"- Budget: {_money(context.budget)}\n"
        f"- Travel Style: {context.travel_style or 'solo'}\n"
        f"- Pace: {context.pace or 'relaxed'}\n"
        f"- Amount Spent So Far: {_money(spent)}\n"
        f"- Remaining Budget: {remaining}",
        season_advisory(context.start_date).advice,
    ]
    if starts_on_weekend(context.start_date):
        sections.append(WEEKEND_WARNING)
    sections.append(FESTIVAL_CALENDAR)

    if context.itinerary:
        sections.append(
            "CURRENT ITINERARY:\n" + json.dumps(context.itinerary, indent=2, ensure_ascii=False)
        )
    else:
        sections.append("No itinerary generated yet.")

    sections.append(ASSISTANT_ROLE)
    return "\n\n".join(sections)


def build_assistant_messages(
    context: TripContext, messages: list[ChatMessage]
) -> list[dict[str, Any]]:
    """Prepend the trip instruction context to the caller's conversation history."""
    return [{"role": "system", "content": build_system_prompt(context)}] + [
        {"role": message.role, "content": message.content} for message in messages
    ]
