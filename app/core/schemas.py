import re
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _coerce_amount(value: Any) -> Any:
    """Accept model-produced amounts such as "₹1,200" or "1200 INR"."""
    if value is None:
        return 0
    if isinstance(value, str):
        cleaned = re.sub(r"[^0-9.\-]", "", value)
        if not cleaned or cleaned in {"-", ".", "-."}:
            return 0
        return cleaned
    return value


Amount = Annotated[float, BeforeValidator(_coerce_amount)]


class CamelModel(BaseModel):
    """Base for documents exchanged in camelCase (itinerary JSON, place details)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Itinerary document
# =============================================================================


class Place(CamelModel):
    name: str
    description: str = ""
    timing_tip: str = ""
    estimated_cost: Amount = Field(0, ge=0)


class Transport(CamelModel):
    mode: str = ""
    description: str = ""
    estimated_cost: Amount = Field(0, ge=0)


class FoodItem(CamelModel):
    meal: str = Field("", description="Meal slot, e.g. Breakfast/Lunch/Dinner")
    recommendation: str = ""
    cuisine: str = ""
    estimated_cost: Amount = Field(0, ge=0)


class DailyCostBreakdown(CamelModel):
    sightseeing: Amount = 0
    transport: Amount = 0
    food: Amount = 0
    miscellaneous: Amount = 0
    total: Amount = 0

    def category_sum(self) -> float:
        return self.sightseeing + self.transport + self.food + self.miscellaneous


class Day(CamelModel):
    day_number: int
    title: str = ""
    places: list[Place] = Field(default_factory=list)
    transport: Transport | None = None
    food: list[FoodItem] = Field(default_factory=list)
    daily_cost_breakdown: DailyCostBreakdown | None = None
    tips: list[str] = Field(default_factory=list)


class Itinerary(CamelModel):
    summary: str
    total_estimated_cost: Amount = Field(..., ge=0)
    days: list[Day]
    packing_tips: list[str] = Field(default_factory=list)
    general_tips: list[str] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Trips
# =============================================================================


class TravelStyle(str, Enum):
    SOLO = "solo"
    COUPLE = "couple"
    FAMILY = "family"
    FRIENDS = "friends"


class Pace(str, Enum):
    RELAXED = "relaxed"
    PACKED = "packed"


class TripStatus(str, Enum):
    PLANNING = "planning"
    BOOKED = "booked"
    COMPLETED = "completed"


class TripRequest(CamelModel):
    """Trip parameters accepted by the itinerary generator."""

    destination: str = Field(..., max_length=120)
    start_date: date
    end_date: date
    budget: float = Field(..., allow_inf_nan=False)
    travel_style: TravelStyle = TravelStyle.SOLO
    pace: Pace = Pace.RELAXED


class TripCreate(TripRequest):
    title: str | None = Field(None, max_length=120)


class TripUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=120)
    status: TripStatus | None = None
    cover_image: str | None = Field(None, max_length=2048)

    @field_validator("title", "status")
    @classmethod
    def _reject_null(cls, value):
        # Omit the field to leave it unchanged; only cover_image can be cleared
        if value is None:
            raise ValueError("must not be null")
        return value


class Trip(BaseModel):
    id: str
    user_id: str
    title: str
    destination: str
    start_date: date
    end_date: date
    budget: float | None = None
    travel_style: TravelStyle = TravelStyle.SOLO
    pace: Pace = Pace.RELAXED
    status: TripStatus = TripStatus.PLANNING
    is_shared: bool = False
    share_token: str | None = None
    cover_image: str | None = None
    created_at: datetime

    def to_request(self) -> TripRequest:
        return TripRequest(
            destination=self.destination,
            start_date=self.start_date,
            end_date=self.end_date,
            budget=self.budget or 0,
            travel_style=self.travel_style,
            pace=self.pace,
        )


class PublicTrip(BaseModel):
    """Read-only projection exposed through a share link."""

    title: str
    destination: str
    start_date: date
    end_date: date
    budget: float | None = None
    travel_style: TravelStyle
    pace: Pace
    status: TripStatus
    display_image: str


class ShareToggleRequest(BaseModel):
    enabled: bool


class ShareStatus(BaseModel):
    is_shared: bool
    share_token: str | None = None
    share_url: str | None = None


# =============================================================================
# Expenses
# =============================================================================


class ExpenseCategory(str, Enum):
    FOOD = "Food"
    TRAVEL = "Travel"
    STAY = "Stay"
    ACTIVITIES = "Activities"


class ExpenseCreate(BaseModel):
    category: ExpenseCategory
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    description: str | None = Field(None, max_length=500)
    expense_date: date


class Expense(ExpenseCreate):
    id: str
    trip_id: str
    user_id: str
    created_at: datetime
    seq: int = Field(0, description="Insertion order, breaks expense_date ties")


class CategoryBreakdown(BaseModel):
    category: ExpenseCategory
    amount: float
    percentage: float


class BudgetSummary(BaseModel):
    budget: float | None = None
    total_spent: float
    remaining: float | None = None
    over_budget: bool = False
    categories: list[CategoryBreakdown] = Field(default_factory=list)


class ExpenseListResponse(BaseModel):
    expenses: list[Expense]
    summary: BudgetSummary


# =============================================================================
# Place enrichment
# =============================================================================


class PlaceLookup(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    day_number: int = Field(..., ge=1)


class PlaceDetailsRequest(BaseModel):
    places: list[PlaceLookup] = Field(default_factory=list)
    destination: str = Field(..., min_length=1, max_length=120)


class PlaceDetails(CamelModel):
    name: str
    description: str = ""
    day_number: int
    lat: float = 0
    lng: float = 0
    photo_url: str | None = None
    place_id: str | None = None

    @property
    def is_resolved(self) -> bool:
        return not (self.lat == 0 and self.lng == 0)


# =============================================================================
# Assistant
# =============================================================================


class ChatMessage(BaseModel):
    role: str = Field(pattern="^(user|assistant)$")
    content: str = Field(..., max_length=8000)


class TripContext(CamelModel):
    destination: str
    start_date: date
    end_date: date
    budget: float | None = None
    travel_style: str | None = None
    pace: str | None = None
    itinerary: dict[str, Any] | None = None
    total_spent: float | None = None


class AssistantRequest(CamelModel):
    messages: list[ChatMessage] = Field(..., min_length=1)
    trip_context: TripContext


class TripAssistantRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)


# =============================================================================
# Cost reconciliation
# =============================================================================


class DayCostCheck(BaseModel):
    day_number: int
    declared_total: float | None = None
    computed_total: float | None = None
    mismatch: bool = False
    missing_breakdown: bool = False


class CostReconciliation(BaseModel):
    days: list[DayCostCheck]
    declared_trip_total: float
    computed_trip_total: float
    trip_total_mismatch: bool
    has_mismatch: bool


# =============================================================================
# Users
# =============================================================================


class User(BaseModel):
    """Signed-in caller, identified by the ``sub`` claim of its bearer token."""

    id: str
    email: str | None = None
