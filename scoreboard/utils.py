"""
Utility functions: name guard, sequence allocator and value coercion
"""
from typing import Any, Iterable


def _field(item: Any, field: str) -> Any:
    """Read a field from a mapping or an object"""
    if isinstance(item, dict):
        return item.get(field)
    return getattr(item, field, None)


def to_int(value: Any) -> int:
    """
    Coerce a stored value to int, 0 when missing or non-numeric

    Example:
        >>> to_int("7"), to_int(None), to_int("x"), to_int(2.9)
        (7, 0, 0, 2)
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def coerce_score(value: Any) -> int:
    """Stored score as a non-negative int; invalid or negative values count as 0"""
    number = to_int(value)
    return number if number > 0 else 0


def normalize_name(name: str) -> str:
    """Trim surrounding whitespace and lowercase"""
    return (name or "").strip().lower()


def name_exists(collection: Iterable[Any], proposed_name: str) -> bool:
    """
    Check whether a name is already taken in a collection

    Case and surrounding whitespace are ignored, so "Ana " and "ana"
    are the same name.

    Args:
        collection: Challenges or people (models or dicts with a "name")
        proposed_name: Name about to be created

    Returns:
        True if any element has the same normalized name

    Example:
        >>> name_exists([{"name": "Ana "}], "ana")
        True
        >>> name_exists([{"name": "Ana"}], "Anabela")
        False
    """
    wanted = normalize_name(proposed_name)
    return any(normalize_name(_field(item, "name")) == wanted for item in collection)


def next_number(collection: Iterable[Any], field: str, start: int = 1) -> int:
    """
    Compute the next sequential display number of a collection

    Non-numeric and non-positive values are ignored. Freed numbers are
    never reused: the result is always above the current maximum.

    Args:
        collection: Challenges or people (models or dicts)
        field: "display_number" or "enrollment_number"
        start: Number returned when no valid value exists

    Returns:
        max + 1, or start

    Example:
        >>> next_number([{"n": 3}, {"n": 7}, {"n": 2}], "n")
        8
        >>> next_number([{"n": -1}, {"n": 0}], "n")
        1
    """
    numbers = [to_int(_field(item, field)) for item in collection]
    numbers = [n for n in numbers if n > 0]
    return max(numbers) + 1 if numbers else start
