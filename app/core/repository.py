from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.schemas import (
    Expense,
    ExpenseCreate,
    Itinerary,
    Trip,
    TripCreate,
    TripStatus,
    TripUpdate,
)
from app.core.settings import get_settings
from app.core.share_utils import generate_share_token

logger = logging.getLogger(__name__)

SHARE_TOKEN_ATTEMPTS = 3


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MongoDBRepo:
    def __init__(self, db: Database | None = None):
        if db is None:
            settings = get_settings()
            if not settings.mongodb_uri:
                raise ValueError("MONGODB_URI environment variable is required")
            self.client = MongoClient(
                settings.mongodb_uri,
                serverSelectionTimeoutMS=5000,  # 5 second timeout
                connectTimeoutMS=10000,  # 10 second connection timeout
                socketTimeoutMS=20000,  # 20 second socket timeout
                retryWrites=True,
                retryReads=True,
            )
            db = self.client[settings.database_name]
            logger.info(f"[Repo] Using database: {settings.database_name}")

        self.db = db

        # Collections
        self.trips_collection = self.db.trips
        self.itineraries_collection = self.db.itineraries
        self.expenses_collection = self.db.expenses
        self.counters_collection = self.db.counters

        try:
            self.trips_collection.create_index("id", unique=True)
            self.trips_collection.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
            # share_token is unset (not null) while sharing is off, so sparse keeps uniqueness
            self.trips_collection.create_index("share_token", unique=True, sparse=True)
            self.itineraries_collection.create_index("trip_id", unique=True)
            self.expenses_collection.create_index("id", unique=True)
            self.expenses_collection.create_index("trip_id")
        except PyMongoError as exc:
            logger.warning(f"[Repo] Index creation failed (continuing): {exc}")

    # Helpers
    @staticmethod
    def _strip(doc: dict | None) -> dict | None:
        if doc:
            doc.pop("_id", None)  # Remove MongoDB ObjectId
        return doc

    def _trip_from_doc(self, doc: dict | None) -> Trip | None:
        doc = self._strip(doc)
        if not doc:
            return None
        return Trip(**doc)

    def _next_sequence(self, name: str) -> int:
        counter = self.counters_collection.find_one_and_update(
            {"_id": name},
            {"$inc": {"value": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["value"]

    # Trips
    def create_trip(self, user_id: str, data: TripCreate) -> Trip:
        destination = data.destination.strip()
        trip_doc = {
            "id": f"trip_{uuid.uuid4().hex[:12]}",
            "user_id": user_id,
            "title": (data.title or "").strip() or f"Trip to {destination}",
            "destination": destination,
            "start_date": data.start_date.isoformat(),
            "end_date": data.end_date.isoformat(),
            "budget": data.budget,
            "travel_style": data.travel_style.value,
            "pace": data.pace.value,
            "status": TripStatus.PLANNING.value,
            "is_shared": False,
            "cover_image": None,
            "created_at": _now(),
        }
        self.trips_collection.insert_one(trip_doc)
        return self._trip_from_doc(trip_doc)

    def get_trip(self, trip_id: str, user_id: str) -> Trip | None:
        doc = self.trips_collection.find_one({"id": trip_id, "user_id": user_id})
        return self._trip_from_doc(doc)

    def list_trips(self, user_id: str) -> list[Trip]:
        cursor = self.trips_collection.find({"user_id": user_id}).sort("created_at", -1)
        return [self._trip_from_doc(doc) for doc in cursor]

    def update_trip(self, trip_id: str, user_id: str, data: TripUpdate) -> Trip | None:
        updates: dict[str, Any] = data.model_dump(mode="json", exclude_unset=True)
        if not updates:
            return self.get_trip(trip_id, user_id)
        doc = self.trips_collection.find_one_and_update(
            {"id": trip_id, "user_id": user_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        return self._trip_from_doc(doc)

    def delete_trip(self, trip_id: str, user_id: str) -> bool:
        """Delete a trip together with its itinerary and expenses."""
        result = self.trips_collection.delete_one({"id": trip_id, "user_id": user_id})
        if result.deleted_count == 0:
            return False
        self.itineraries_collection.delete_many({"trip_id": trip_id})
        self.expenses_collection.delete_many({"trip_id": trip_id})
        return True

    # Sharing
    def enable_sharing(self, trip_id: str, user_id: str) -> Trip | None:
        """Mint a fresh share token and mark the trip shared in one write."""
        for _ in range(SHARE_TOKEN_ATTEMPTS):
            try:
                doc = self.trips_collection.find_one_and_update(
                    {"id": trip_id, "user_id": user_id},
                    {"$set": {"is_shared": True, "share_token": generate_share_token()}},
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                logger.warning("[Repo] Share token collision, minting another")
                continue
            return self._trip_from_doc(doc)
        raise RuntimeError("Could not mint a unique share token")

    def disable_sharing(self, trip_id: str, user_id: str) -> Trip | None:
        doc = self.trips_collection.find_one_and_update(
            {"id": trip_id, "user_id": user_id},
            {"$set": {"is_shared": False}, "$unset": {"share_token": ""}},
            return_document=ReturnDocument.AFTER,
        )
        return self._trip_from_doc(doc)

    def get_shared_trip(self, share_token: str) -> Trip | None:
        if not share_token:
            return None
        doc = self.trips_collection.find_one({"share_token": share_token, "is_shared": True})
        return self._trip_from_doc(doc)

    # Itineraries
    def replace_itinerary(self, trip_id: str, user_id: str, itinerary: Itinerary) -> dict:
        """Store the itinerary for a trip, replacing any previous one."""
        itinerary_doc = {
            "trip_id": trip_id,
            "user_id": user_id,
            "content": itinerary.to_document(),
            "created_at": _now(),
        }
        self.itineraries_collection.replace_one({"trip_id": trip_id}, itinerary_doc, upsert=True)
        return itinerary_doc

    def get_itinerary(self, trip_id: str) -> Itinerary | None:
        doc = self.itineraries_collection.find_one({"trip_id": trip_id})
        if not doc or not doc.get("content"):
            return None
        return Itinerary.model_validate(doc["content"])

    # Expenses
    def add_expense(self, trip_id: str, user_id: str, data: ExpenseCreate) -> Expense:
        expense_doc = {
            "id": f"exp_{uuid.uuid4().hex[:12]}",
            "trip_id": trip_id,
            "user_id": user_id,
            "category": data.category.value,
            "amount": data.amount,
            "description": data.description.strip() if data.description else None,
            "expense_date": data.expense_date.isoformat(),
            "created_at": _now(),
            "seq": self._next_sequence("expenses"),
        }
        self.expenses_collection.insert_one(expense_doc)
        self._strip(expense_doc)
        return Expense(**expense_doc)

    def list_expenses(self, trip_id: str) -> list[Expense]:
        """Expenses for a trip, latest expense date first, then insertion order."""
        cursor = self.expenses_collection.find({"trip_id": trip_id}).sort(
            [("expense_date", DESCENDING), ("seq", ASCENDING)]
        )
        return [Expense(**self._strip(doc)) for doc in cursor]

    def delete_expense(self, trip_id: str, expense_id: str) -> bool:
        result = self.expenses_collection.delete_one({"id": expense_id, "trip_id": trip_id})
        return result.deleted_count > 0
