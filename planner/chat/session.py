# planner/chat/session.py
from __future__ import annotations

import random
import string
import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from planner.common.config import settings
from planner.common.slots import (
    AccommodationType,
    CANONICAL_SLOTS,
    DEFAULT_CURRENCY,
    REQUIRED_SLOTS,
    SLOT_LABELS,
    TravelStyle,
)


class WireModel(BaseModel):
    """Atrybuty snake_case, na drucie (JSON od modelu, snapshoty sesji) camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ===== Stan slotów =====

class TripDates(WireModel):
    start_date: Optional[str] = None   # ISO 'YYYY-MM-DD'
    duration: Optional[int] = None     # dni


class TripBudget(WireModel):
    amount: Optional[Union[int, float]] = None
    currency: str = DEFAULT_CURRENCY
    per_person: bool = True


class Travelers(WireModel):
    adults: int = 1
    children: int = 0

    @field_validator("adults")
    @classmethod
    def at_least_one_adult(cls, v: int) -> int:
        return max(1, v)

    @field_validator("children")
    @classmethod
    def children_not_negative(cls, v: int) -> int:
        return max(0, v)


class TripSlots(WireModel):
    destination: Optional[str] = None
    dates: TripDates = Field(default_factory=TripDates)
    budget: TripBudget = Field(default_factory=TripBudget)
    travelers: Travelers = Field(default_factory=Travelers)
    travel_style: Optional[TravelStyle] = None
    interests: List[str] = Field(default_factory=list)
    accommodation_type: Optional[AccommodationType] = None

    # pochodne, liczone przez update_slot_completion
    is_complete: bool = False
    completion_percentage: int = 0

    @classmethod
    def from_json(cls, data: str) -> "TripSlots":
        return cls.model_validate_json(data)


# ===== Częściowa aktualizacja (wynik walidatora) =====
# None = "model nic o tym nie powiedział"

class DatesUpdate(WireModel):
    start_date: Optional[str] = None
    duration: Optional[int] = None


class BudgetUpdate(WireModel):
    amount: Optional[Union[int, float]] = None
    currency: Optional[str] = None
    per_person: Optional[bool] = None


class TravelersUpdate(WireModel):
    adults: Optional[int] = None
    children: Optional[int] = None


class SlotUpdate(WireModel):
    destination: Optional[str] = None
    dates: Optional[DatesUpdate] = None
    budget: Optional[BudgetUpdate] = None
    travelers: Optional[TravelersUpdate] = None
    travel_style: Optional[TravelStyle] = None
    interests: Optional[List[str]] = None
    accommodation_type: Optional[AccommodationType] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


# ===== Postęp wypełniania =====

class SlotProgress(WireModel):
    filled: int
    total: int
    missing: List[str]
    percentage: int


def _filled_checks(slots: TripSlots) -> Dict[str, bool]:
    dates = slots.dates
    budget = slots.budget
    return {
        "destination": bool(slots.destination and slots.destination.strip()),
        "dates": dates.start_date is not None and dates.duration is not None and dates.duration > 0,
        "budget": budget.amount is not None and budget.amount > 0,
        "travelers": slots.travelers.adults > 0,
        "travelStyle": slots.travel_style is not None,
        "interests": len(slots.interests) > 0,
        "accommodationType": slots.accommodation_type is not None,
    }


def _progress_from(checks: Dict[str, bool]) -> SlotProgress:
    filled = sum(1 for key in CANONICAL_SLOTS if checks[key])
    total = len(CANONICAL_SLOTS)
    return SlotProgress(
        filled=filled,
        total=total,
        missing=[SLOT_LABELS[key] for key in CANONICAL_SLOTS if not checks[key]],
        percentage=round(filled / total * 100),
    )


def calculate_slot_progress(slots: TripSlots) -> SlotProgress:
    """
    Ile slotów jest wypełnionych i których brakuje.
    Każda z siedmiu kategorii waży tyle samo; `missing` to etykiety w kolejności kanonicznej.
    """
    return _progress_from(_filled_checks(slots))


def update_slot_completion(slots: TripSlots) -> TripSlots:
    """Nowy TripSlots z przeliczonymi is_complete / completion_percentage."""
    checks = _filled_checks(slots)
    return slots.model_copy(
        deep=True,
        update={
            "is_complete": all(checks[key] for key in REQUIRED_SLOTS),
            "completion_percentage": _progress_from(checks).percentage,
        },
    )


def empty_slots() -> TripSlots:
    """Stan na start rozmowy: wszystko puste, domyślne wartości, pola pochodne spójne."""
    return update_slot_completion(TripSlots())


# ===== Sesja czatu =====

class ConversationState(str, Enum):
    GATHERING = "gathering"     # zbieramy sloty
    READY = "ready"             # komplet, czekamy na potwierdzenie
    GENERATING = "generating"   # model tworzy plan
    REFINING = "refining"       # plan istnieje, poprawki


class ChatMessage(WireModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GeneratedTrip(WireModel):
    """
    Plan wygenerowany przez model (<!--TRIP_JSON{...}TRIP_JSON-->).
    Struktura dni i rekomendacji jest luźna, trzymamy to, co przyszło.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    metadata: Dict[str, Any]
    itinerary: List[Dict[str, Any]]
    recommendations: Dict[str, Any] = Field(default_factory=dict)

    @property
    def destination(self) -> str:
        return str(self.metadata.get("destination") or "")


def generate_session_id() -> str:
    """chat_<ms>_<7 znaków base36>"""
    alphabet = string.digits + string.ascii_lowercase
    suffix = "".join(random.choices(alphabet, k=7))
    return f"chat_{int(time.time() * 1000)}_{suffix}"


class ChatSession(WireModel):
    session_id: str = Field(..., min_length=1)
    slots: TripSlots = Field(default_factory=empty_slots)
    conversation_state: ConversationState = ConversationState.GATHERING
    last_messages: List[ChatMessage] = Field(default_factory=list)
    generated_trip: Optional[GeneratedTrip] = None
    updated_at: float = Field(default_factory=time.time)  # epoch, sekundy

    @classmethod
    def from_json(cls, data: str) -> "ChatSession":
        return cls.model_validate_json(data)

    def remember(self, role: str, content: str, *, limit: Optional[int] = None) -> "ChatSession":
        """Nowa sesja z dopisaną wiadomością; trzymamy tylko ostatnie `limit` (domyślnie z settings)."""
        keep = settings.chat_last_messages if limit is None else limit
        messages = [*self.last_messages, ChatMessage(role=role, content=content)]
        return self.model_copy(update={"last_messages": messages[-keep:] if keep > 0 else []})


def create_empty_chat_session(session_id: Optional[str] = None) -> ChatSession:
    return ChatSession(session_id=session_id or generate_session_id())
