"""
Tests for dice terms, their averages and the dice notation parser.
"""

import pytest

from dprcalc.core.dice import (
    DiceTerm,
    as_dice_term,
    average_dice,
    format_dice_expression,
    parse_dice_expression,
    tokenize_dice_expression,
)
from dprcalc.core.errors import DprError, InvalidDice


def test_dice_term_average():
    assert DiceTerm(count=2, sides=6).average == 7
    assert DiceTerm(count=1, sides=8, plus=2).average == 6.5
    assert DiceTerm(count=1, sides=20).average == 10.5


def test_dice_term_str():
    assert str(DiceTerm(count=2, sides=6, plus=3)) == "2d6+3"
    assert str(DiceTerm(count=1, sides=10)) == "1d10"


def test_dice_term_plus_none_means_zero():
    assert DiceTerm.model_validate({"count": 1, "sides": 4, "plus": None}).plus == 0


@pytest.mark.parametrize("count", [0, -1, 1.5, None, "2", True])
def test_dice_term_rejects_bad_count(count):
    with pytest.raises(InvalidDice, match="at least one whole number die"):
        DiceTerm.model_validate({"count": count, "sides": 6})


@pytest.mark.parametrize("sides", [0, 3, 5, 7, 100, 6.5])
def test_dice_term_rejects_bad_sides(sides):
    with pytest.raises(InvalidDice, match="4, 6, 8, 10, 12 or 20 sides"):
        DiceTerm.model_validate({"count": 1, "sides": sides})


@pytest.mark.parametrize("plus", [-1, 0.5])
def test_dice_term_rejects_bad_plus(plus):
    with pytest.raises(InvalidDice, match="non-negative integers"):
        DiceTerm.model_validate({"count": 1, "sides": 6, "plus": plus})


def test_invalid_dice_is_a_dpr_error_with_context():
    with pytest.raises(DprError) as exc_info:
        DiceTerm.model_validate({"count": 1, "sides": 7})
    assert exc_info.value.context == {"sides": 7}
    assert "sides=7" in str(exc_info.value)


def test_dice_term_is_frozen():
    term = DiceTerm(count=1, sides=6)
    with pytest.raises(Exception):
        term.count = 3


def test_as_dice_term_accepts_mappings():
    assert as_dice_term({"count": 3, "sides": 4}) == DiceTerm(count=3, sides=4)


def test_as_dice_term_rechecks_unvalidated_terms():
    term = DiceTerm.model_construct(count=1, sides=7, plus=0)
    with pytest.raises(InvalidDice):
        as_dice_term(term)


def test_as_dice_term_rejects_other_values():
    with pytest.raises(InvalidDice):
        as_dice_term("2d6")


def test_average_dice():
    assert average_dice([]) == 0
    assert average_dice(None) == 0
    expr = [DiceTerm(count=2, sides=6), {"count": 1, "sides": 4, "plus": 1}]
    assert average_dice(expr) == 7 + 3.5


def test_tokenize_dice_expression():
    assert tokenize_dice_expression("2d6 + d4 - 1") == [
        (1, 2, 6),
        (1, 1, 4),
        (-1, 1, 0),
    ]


@pytest.mark.parametrize("text", ["", "abc", "2d", "d", "2d6++3", "2d6*3", 5])
def test_tokenize_rejects_malformed_text(text):
    with pytest.raises(InvalidDice):
        tokenize_dice_expression(text)


def test_parse_dice_expression_attaches_constants():
    terms = parse_dice_expression("1d8 + 1d4 + 2")
    assert terms == (
        DiceTerm(count=1, sides=8),
        DiceTerm(count=1, sides=4, plus=2),
    )


def test_parse_dice_expression_is_case_insensitive():
    assert parse_dice_expression("2D6+3") == (DiceTerm(count=2, sides=6, plus=3),)


@pytest.mark.parametrize("text", ["2d6-1", "3+1d6", "1d7"])
def test_parse_dice_expression_rejects(text):
    with pytest.raises(InvalidDice):
        parse_dice_expression(text)


def test_format_dice_expression():
    assert format_dice_expression(()) == "0"
    assert format_dice_expression(parse_dice_expression("2d6+3 + 1d4")) == "2d6+3 + 1d4"
