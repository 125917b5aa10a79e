# planner/chat/slot_extractor.py
"""
Sloty z odpowiedzi modelu.

Model na końcu odpowiedzi dokleja blok <!--SLOTS{...}SLOTS--> z tym, czego się
dowiedział. Tutaj:
- wyciągamy i walidujemy ten JSON pole po polu (zepsute pola odpadają pojedynczo),
- scalamy wynik z dotychczasowym TripSlots (czysta funkcja, bez mutacji wejścia),
- usuwamy blok z tekstu, który zobaczy użytkownik.
Nic tu nie rzuca: odpowiedź modelu to niezaufane wejście, a wywołujący zawsze
ma ostatni poprawny stan.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from planner.common.metrics import inc
from planner.common.slots import DEFAULT_CURRENCY
from planner.common.validators import (
    validate_accommodation_type,
    validate_adults,
    validate_budget_amount,
    validate_currency,
    validate_destination,
    validate_duration,
    validate_headcount,
    validate_interests,
    validate_per_person,
    validate_start_date,
    validate_travel_style,
)
from planner.nlp.extract import SLOTS_MARKER, parse_metadata_block, strip_metadata_block

from .session import (
    BudgetUpdate,
    DatesUpdate,
    SlotUpdate,
    TravelersUpdate,
    TripBudget,
    TripDates,
    Travelers,
    TripSlots,
    update_slot_completion,
)

logger = logging.getLogger(__name__)


def _checked(validator, value, default=None, **kwargs):
    ok, out = validator(value, **kwargs)
    if ok:
        return out
    if value is not None:
        logger.debug("dropped slot value %r: %s", value, out)
    return default


def validate_extracted_slots(data: Any) -> Optional[SlotUpdate]:
    """
    Zawęża dowolną wartość JSON do SlotUpdate.
    Zwraca None, gdy to nie obiekt albo żadne pole nie przeszło walidacji.
    """
    if not isinstance(data, dict) or not data:
        return None

    fields: Dict[str, Any] = {}

    destination = _checked(validate_destination, data.get("destination"))
    if destination is not None:
        fields["destination"] = destination

    dates = data.get("dates")
    if isinstance(dates, dict):
        start_date = _checked(validate_start_date, dates.get("startDate"))
        duration = _checked(validate_duration, dates.get("duration"))
        # None w środku = "brak wartości", cały obiekt = "model mówił o datach"
        if start_date is not None or duration is not None:
            fields["dates"] = DatesUpdate(start_date=start_date, duration=duration)

    budget = data.get("budget")
    if isinstance(budget, dict):
        amount = _checked(validate_budget_amount, budget.get("amount"))
        # bez kwoty odrzucamy całe pole
        if amount is not None:
            fields["budget"] = BudgetUpdate(
                amount=amount,
                currency=_checked(validate_currency, budget.get("currency"), DEFAULT_CURRENCY),
                per_person=_checked(validate_per_person, budget.get("perPerson"), True),
            )

    travelers = data.get("travelers")
    if isinstance(travelers, dict):
        # brak liczby = None, merge zostawi dotychczasową (domyślnie 1 / 0)
        adults = _checked(validate_adults, travelers.get("adults"))
        children = _checked(validate_headcount, travelers.get("children"), minimum=0, field="travelers.children")
        if adults is not None or children is not None:
            fields["travelers"] = TravelersUpdate(adults=adults, children=children)

    travel_style = _checked(validate_travel_style, data.get("travelStyle"))
    if travel_style is not None:
        fields["travel_style"] = travel_style

    interests = _checked(validate_interests, data.get("interests"))
    if interests is not None:
        fields["interests"] = interests

    accommodation_type = _checked(validate_accommodation_type, data.get("accommodationType"))
    if accommodation_type is not None:
        fields["accommodation_type"] = accommodation_type

    if not fields:
        return None
    return SlotUpdate(**fields)


def extract_slots_from_response(response_text: Optional[str]) -> Optional[SlotUpdate]:
    """
    Pierwszy blok SLOTS z odpowiedzi modelu → zwalidowany SlotUpdate.
    None, gdy bloku nie ma, JSON jest zepsuty albo nic nie przeszło walidacji.
    """
    data = parse_metadata_block(response_text, SLOTS_MARKER)
    if data is None:
        return None
    update = validate_extracted_slots(data)
    inc("slots.extracted" if update is not None else "slots.rejected")
    return update


def strip_slots_metadata(response_text: Optional[str]) -> str:
    """Tekst do wyświetlenia: bez bloku SLOTS (nawet zepsutego) i bez końcowych białych znaków."""
    return strip_metadata_block(response_text, SLOTS_MARKER)


def merge_slots(existing: TripSlots, extracted: Optional[SlotUpdate]) -> TripSlots:
    """
    Scala dotychczasowe sloty z aktualizacją. Zasady:
    - pola proste (destination, travel_style, accommodation_type): nadpisujemy tylko wartością nie-None,
    - dates i travelers: pole po polu, None zostawia starą wartość,
    - budget: tylko gdy aktualizacja niesie kwotę,
    - interests: podmiana całej listy, gdy niepusta (bez doklejania),
    - pola pochodne liczone od zera.
    Nie modyfikuje `existing`; przy braku aktualizacji zwraca równą mu kopię.
    """
    if extracted is None:
        return existing.model_copy(deep=True)

    destination = existing.destination
    if extracted.destination is not None:
        destination = extracted.destination

    dates = existing.dates
    if extracted.dates is not None:
        dates = TripDates(
            start_date=extracted.dates.start_date if extracted.dates.start_date is not None else dates.start_date,
            duration=extracted.dates.duration if extracted.dates.duration is not None else dates.duration,
        )

    budget = existing.budget
    if extracted.budget is not None and extracted.budget.amount is not None:
        budget = TripBudget(
            amount=extracted.budget.amount,
            currency=extracted.budget.currency if extracted.budget.currency is not None else budget.currency,
            per_person=extracted.budget.per_person if extracted.budget.per_person is not None else budget.per_person,
        )

    travelers = existing.travelers
    if extracted.travelers is not None:
        travelers = Travelers(
            adults=extracted.travelers.adults if extracted.travelers.adults is not None else travelers.adults,
            children=extracted.travelers.children if extracted.travelers.children is not None else travelers.children,
        )

    travel_style = existing.travel_style
    if extracted.travel_style is not None:
        travel_style = extracted.travel_style

    interests = existing.interests
    if extracted.interests:
        interests = extracted.interests

    accommodation_type = existing.accommodation_type
    if extracted.accommodation_type is not None:
        accommodation_type = extracted.accommodation_type

    merged = TripSlots(
        destination=destination,
        dates=dates.model_copy(),
        budget=budget.model_copy(),
        travelers=travelers.model_copy(),
        travel_style=travel_style,
        interests=list(interests),
        accommodation_type=accommodation_type,
        is_complete=existing.is_complete,
        completion_percentage=existing.completion_percentage,
    )
    return update_slot_completion(merged)
