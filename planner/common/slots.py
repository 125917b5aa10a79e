# planner/common/slots.py
from __future__ import annotations
from enum import Enum


class TravelStyle(str, Enum):
    ADVENTURE = "adventure"
    RELAXED = "relaxed"
    CULTURAL = "cultural"
    LUXURY = "luxury"


class AccommodationType(str, Enum):
    HOTEL = "hotel"
    HOSTEL = "hostel"
    AIRBNB = "airbnb"
    LUXURY = "luxury"


TRAVEL_STYLES: frozenset[str] = frozenset(s.value for s in TravelStyle)
ACCOMMODATION_TYPES: frozenset[str] = frozenset(a.value for a in AccommodationType)

DEFAULT_CURRENCY = "USD"

# Kolejność kanoniczna = kolejność w promptach i w liście brakujących slotów
CANONICAL_SLOTS: tuple[str, ...] = (
    "destination",
    "dates",
    "budget",
    "travelers",
    "travelStyle",
    "interests",
    "accommodationType",
)

# Wszystkie sloty są wymagane, żeby rozmowa przeszła w stan "ready"
REQUIRED_SLOTS: frozenset[str] = frozenset(CANONICAL_SLOTS)

SLOT_LABELS: dict[str, str] = {
    "destination": "Destination",
    "dates": "Travel Dates",
    "budget": "Budget",
    "travelers": "Travelers",
    "travelStyle": "Travel Style",
    "interests": "Interests",
    "accommodationType": "Accommodation Type",
}

# Podpowiedzi dla UI/promptu, nie ograniczenie walidacji
INTEREST_OPTIONS: tuple[str, ...] = (
    "food",
    "temples",
    "nightlife",
    "nature",
    "history",
    "shopping",
    "beaches",
    "museums",
    "adventure",
    "photography",
    "local culture",
    "architecture",
)
