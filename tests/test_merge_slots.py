import pytest

from planner.chat.session import (
    BudgetUpdate,
    DatesUpdate,
    SlotUpdate,
    TravelersUpdate,
    TripSlots,
    empty_slots,
)
from planner.chat.slot_extractor import extract_slots_from_response, merge_slots


def test_merge_with_none_is_an_equal_copy(full_slots):
    merged = merge_slots(full_slots, None)
    assert merged.model_dump() == full_slots.model_dump()
    assert merged is not full_slots

    merged.interests.append("shopping")
    merged.travelers.adults = 5
    assert full_slots.interests == ["food", "temples"]
    assert full_slots.travelers.adults == 2

def test_merge_with_empty_text_extraction_is_noop(full_slots):
    assert merge_slots(full_slots, extract_slots_from_response("")).model_dump() == full_slots.model_dump()

def test_merge_does_not_mutate_inputs(full_slots):
    before = full_slots.model_dump()
    update = SlotUpdate(destination="Osaka", interests=["nightlife"], travelers=TravelersUpdate(adults=4))
    update_before = update.model_dump()
    merge_slots(full_slots, update)
    assert full_slots.model_dump() == before
    assert update.model_dump() == update_before

def test_interests_are_replaced_not_appended(slots):
    existing = merge_slots(slots, SlotUpdate(interests=["food", "art"]))
    merged = merge_slots(existing, SlotUpdate(interests=["hiking"]))
    assert merged.interests == ["hiking"]

def test_empty_interests_update_keeps_existing(full_slots):
    assert merge_slots(full_slots, SlotUpdate(interests=[])).interests == ["food", "temples"]

def test_dates_merge_field_by_field(full_slots):
    merged = merge_slots(full_slots, SlotUpdate(dates=DatesUpdate(duration=10)))
    assert merged.dates.start_date == "2025-04-01"
    assert merged.dates.duration == 10

    merged = merge_slots(full_slots, SlotUpdate(dates=DatesUpdate()))
    assert merged.dates == full_slots.dates

def test_budget_merge_falls_back_to_existing_currency(full_slots):
    merged = merge_slots(full_slots, SlotUpdate(budget=BudgetUpdate(amount=500)))
    assert merged.budget.amount == 500
    assert merged.budget.currency == "EUR"
    assert merged.budget.per_person is False

def test_budget_without_amount_is_ignored(full_slots):
    merged = merge_slots(full_slots, SlotUpdate(budget=BudgetUpdate(currency="GBP", per_person=True)))
    assert merged.budget == full_slots.budget

def test_travelers_merge_independently(full_slots):
    merged = merge_slots(full_slots, SlotUpdate(travelers=TravelersUpdate(children=3)))
    assert (merged.travelers.adults, merged.travelers.children) == (2, 3)

def test_travelers_floor_is_enforced_on_merge(slots, full_slots):
    update = SlotUpdate(travelers=TravelersUpdate(adults=0, children=-1))
    merged = merge_slots(slots, update)
    assert (merged.travelers.adults, merged.travelers.children) == (1, 0)

    # brak adults w odpowiedzi modelu => zostaje poprzednia poprawna wartość
    update = extract_slots_from_response('<!--SLOTS{"travelers":{"children":0}}SLOTS-->')
    assert update.travelers.adults is None
    merged = merge_slots(full_slots, update)
    assert (merged.travelers.adults, merged.travelers.children) == (2, 0)

def test_derived_fields_are_recomputed():
    stale = TripSlots(completion_percentage=99, is_complete=True)
    merged = merge_slots(stale, SlotUpdate(destination="Quito"))
    assert merged.completion_percentage == 29   # destination + travelers = 2/7
    assert merged.is_complete is False

def test_full_update_completes_the_trip(full_slots):
    assert full_slots.is_complete is True
    assert full_slots.completion_percentage == 100

def test_sequential_independent_merges_equal_combined(slots):
    first = SlotUpdate(destination="Tokyo")
    second = SlotUpdate(dates=DatesUpdate(start_date="2025-05-01", duration=8))
    combined = SlotUpdate(destination="Tokyo", dates=DatesUpdate(start_date="2025-05-01", duration=8))

    sequential = merge_slots(merge_slots(slots, first), second)
    at_once = merge_slots(slots, combined)
    assert sequential.model_dump() == at_once.model_dump()

def test_merge_is_deterministic_and_idempotent_on_repeat(full_slots):
    update = SlotUpdate(destination="Sapporo", interests=["snow"])
    once = merge_slots(full_slots, update)
    twice = merge_slots(once, update)
    assert merge_slots(full_slots, update).model_dump() == once.model_dump()
    assert twice.model_dump() == once.model_dump()

@pytest.mark.parametrize("update", [
    SlotUpdate(destination="Cusco"),
    SlotUpdate(dates=DatesUpdate(start_date="2025-07-01", duration=9)),
    SlotUpdate(budget=BudgetUpdate(amount=1500)),
    SlotUpdate(travelers=TravelersUpdate(adults=3)),
    SlotUpdate(travel_style="adventure"),
    SlotUpdate(interests=["hiking", "ruins"]),
    SlotUpdate(accommodation_type="hostel"),
])
def test_completion_is_monotonic_under_additive_updates(update):
    state = empty_slots()
    merged = merge_slots(state, update)
    assert merged.completion_percentage >= state.completion_percentage

    # kolejne addytywne kroki też nie zmniejszają postępu
    again = merge_slots(merged, SlotUpdate(destination="Lima"))
    assert again.completion_percentage >= merged.completion_percentage
