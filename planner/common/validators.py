from __future__ import annotations
from datetime import date
import math

from planner.common.slots import TRAVEL_STYLES, ACCOMMODATION_TYPES


def _is_number(v) -> bool:
    # bool to podklasa int, ale w JSON to nie liczba
    if isinstance(v, bool):
        return False
    if isinstance(v, int):
        return True
    return isinstance(v, float) and math.isfinite(v)


def _as_whole(v):
    """Zwraca int dla liczb całkowitych (także 3.0), inaczej None."""
    if not _is_number(v):
        return None
    if isinstance(v, float):
        return int(v) if v.is_integer() else None
    return v


def validate_destination(v):
    if not isinstance(v, str) or not v.strip():
        return False, "destination must be a non-empty string"
    return True, v.strip()


def validate_start_date(v):
    """
    Akceptuje dowolny niepusty string.
    'YYYY-MM-DD' (też bez zer wiodących) jest normalizowany, jeśli to poprawna data kalendarzowa;
    inne opisy ("mid June") zostają w postaci oryginalnej, bez białych znaków na brzegach.
    Zwraca (ok: bool, normalized_or_msg)
    """
    if not isinstance(v, str) or not v.strip():
        return False, "startDate must be a non-empty string"
    s = v.strip()
    parts = s.split("-")
    if len(parts) == 3:
        try:
            y, m, d = (int(p) for p in parts)
            _ = date(y, m, d)  # walidacja poprawności kalendarzowej
            return True, f"{y:04d}-{m:02d}-{d:02d}"
        except (ValueError, OverflowError):  # np. rok poza zakresem datetime
            pass
    return True, s


def validate_duration(v):
    """
    Akceptuje liczbę całkowitą > 0 (liczba dni). Stringi odrzucamy.
    Zwraca (ok: bool, normalized_or_msg)
    """
    n = _as_whole(v)
    if n is None:
        return False, "duration must be a whole number of days"
    if n <= 0:
        return False, "duration must be > 0"
    return True, n


def validate_budget_amount(v):
    if not _is_number(v):
        return False, "budget.amount must be a number"
    if v < 0:
        return False, "budget.amount must be >= 0"
    return True, v


def validate_currency(v):
    """Kod ISO 4217: trzy litery, normalizowane do wielkich."""
    if not isinstance(v, str):
        return False, "budget.currency must be a string"
    s = v.strip()
    if len(s) != 3 or not s.isalpha():
        return False, "budget.currency must be a 3-letter code"
    return True, s.upper()


def validate_per_person(v):
    if isinstance(v, bool):
        return True, v
    return False, "budget.perPerson must be boolean"


def validate_headcount(v, *, minimum: int, field: str = "travelers"):
    """
    Liczba osób: liczba całkowita, podciągana w górę do `minimum`.
    Zwraca (ok: bool, normalized_or_msg)
    """
    n = _as_whole(v)
    if n is None:
        return False, f"{field} must be a whole number"
    return True, max(minimum, n)


def validate_adults(v):
    """
    Dorośli: liczba całkowita >= 1. Zero, liczby ujemne i złe typy odrzucamy,
    wtedy przy scalaniu zostaje poprzednia (poprawna) wartość.
    """
    n = _as_whole(v)
    if n is None or n < 1:
        return False, "travelers.adults must be a whole number >= 1"
    return True, n


def validate_travel_style(v):
    if isinstance(v, str) and v in TRAVEL_STYLES:
        return True, v
    return False, f"travelStyle must be one of {sorted(TRAVEL_STYLES)}"


def validate_accommodation_type(v):
    if isinstance(v, str) and v in ACCOMMODATION_TYPES:
        return True, v
    return False, f"accommodationType must be one of {sorted(ACCOMMODATION_TYPES)}"


def validate_interests(v):
    """
    Akceptuje listę; zostawia tylko niepuste (po strip) stringi, w oryginalnej kolejności.
    Duplikatów nie usuwamy.
    Zwraca (ok: bool, normalized_or_msg)
    """
    if not isinstance(v, list):
        return False, "interests must be a list"
    items = [x.strip() for x in v if isinstance(x, str) and x.strip()]
    if not items:
        return False, "interests must contain at least one non-empty string"
    return True, items
