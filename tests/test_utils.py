"""
Tests for the name guard, sequence allocator and value coercion
"""
from scoreboard.models import Person
from scoreboard.utils import coerce_score, name_exists, next_number, normalize_name, to_int


def test_next_number_empty():
    """Empty collection starts at 1"""
    assert next_number([], "display_number") == 1


def test_next_number_max_plus_one():
    """Next number is the maximum plus one, not the count"""
    items = [{"n": 3}, {"n": 7}, {"n": 2}]
    assert next_number(items, "n") == 8


def test_next_number_ignores_non_positive():
    """Zero and negative values are excluded"""
    assert next_number([{"n": -1}, {"n": 0}], "n") == 1


def test_next_number_ignores_non_numeric():
    """Missing or non-numeric values are excluded"""
    items = [{"n": "abc"}, {"n": None}, {}, {"n": "4"}]
    assert next_number(items, "n") == 5


def test_next_number_does_not_reuse_gaps():
    """Freed numbers stay free"""
    items = [{"n": 1}, {"n": 5}]
    assert next_number(items, "n") == 6


def test_next_number_on_models():
    """Works on model objects as well as dicts"""
    people = [
        Person(id="a", enrollment_number=2, name="Ana"),
        Person(id="b", enrollment_number=9, name="Bruno"),
    ]
    assert next_number(people, "enrollment_number") == 10


def test_name_exists_case_and_whitespace():
    """Case and surrounding spaces do not make a different name"""
    assert name_exists([{"name": "Ana "}], "ana") is True
    assert name_exists([{"name": "Quiz"}], "  QUIZ ") is True


def test_name_exists_prefix_is_different():
    """A longer name sharing a prefix is a new name"""
    assert name_exists([{"name": "Ana"}], "Anabela") is False


def test_name_exists_empty_collection():
    assert name_exists([], "Ana") is False


def test_normalize_name():
    assert normalize_name("  Ana Maria ") == "ana maria"
    assert normalize_name(None) == ""


def test_to_int():
    assert to_int("7") == 7
    assert to_int(None) == 0
    assert to_int("x") == 0
    assert to_int(True) == 0


def test_coerce_score_defaults_invalid_to_zero():
    """Negative, missing and garbage values read as 0"""
    assert coerce_score(-5) == 0
    assert coerce_score(None) == 0
    assert coerce_score("") == 0
    assert coerce_score(42) == 42


def test_name_exists_lowercases_without_folding():
    """'Straße' and 'Strasse' are different names"""
    assert name_exists([{"name": "Strasse"}], "Straße") is False
    assert name_exists([{"name": "STRASSE"}], " strasse") is True
