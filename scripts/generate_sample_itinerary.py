#!/usr/bin/env python3
"""
Generate an itinerary against the configured model without touching the database.

Usage:
    AISUITE_MODEL=openai:gpt-4o-mini OPENAI_API_KEY=... python scripts/generate_sample_itinerary.py
"""
import os
import sys
from datetime import date, timedelta

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Add the app directory to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.core.cost_reconciliation import reconcile_costs
from app.core.exceptions import TripPlannerError
from app.core.itinerary_generator import ItineraryGenerator
from app.core.llm_provider import LLMProvider
from app.core.schemas import Pace, TravelStyle, TripRequest
from app.core.settings import get_settings


def print_section(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80 + "\n")


def generate_sample_itinerary():
    settings = get_settings()
    print_section(f"Generating with {settings.aisuite_model}")

    start_date = date.today() + timedelta(days=30)
    trip = TripRequest(
        destination="Udaipur",
        start_date=start_date,
        end_date=start_date + timedelta(days=2),
        budget=30000,
        travel_style=TravelStyle.COUPLE,
        pace=Pace.RELAXED,
    )

    generator = ItineraryGenerator(LLMProvider(settings.aisuite_model))
    try:
        result = generator.generate(trip)
    except TripPlannerError as exc:
        print(f"❌ {exc.error_code.value}: {exc.message}")
        if exc.details:
            print(f"   Details: {exc.details}")
        sys.exit(1)

    itinerary = result.itinerary
    print(f"Summary: {itinerary.summary}")
    print(f"Total estimated cost: ₹{itinerary.total_estimated_cost:,.0f}")
    for day in itinerary.days:
        print(f"\nDay {day.day_number}: {day.title}")
        for place in day.places:
            print(f"  - {place.name} (₹{place.estimated_cost:,.0f})")

    for warning in result.warnings:
        print(f"\n⚠️  {warning}")

    reconciliation = reconcile_costs(itinerary)
    if reconciliation.has_mismatch:
        print("\n⚠️  Declared totals do not match their parts:")
        for check in reconciliation.days:
            if check.mismatch:
                print(f"  Day {check.day_number}: declared {check.declared_total}, computed {check.computed_total}")

    print("\n✅ Itinerary generated")


if __name__ == "__main__":
    generate_sample_itinerary()
