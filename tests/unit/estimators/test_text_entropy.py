"""
enes unit tests for the text entropy estimator

File: tests/unit/estimators/test_text_entropy.py

Purpose
- Validate the character-class entropy decomposition and its report layouts.

What this test file should cover
- Character classification (digit, symbol, upper, lower).
- Literal scenarios: identical passwords give 0.0, two distinct lower-case pairs give 2.0.
- Verbose block layout with separators, short single-line layout.
- Total equals the left-to-right sum of the eleven contributions.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from enes.constants import SEPARATOR
from enes.domain.models import PasswordType
from enes.estimators.text_entropy import (
    CLASS_PREDICATES,
    CharacterClass,
    TextEntropyEstimator,
    amount_entropy,
    classify,
    in_class_entropy,
    length_entropy,
    placement_entropy,
)
from enes.metrics.common import total

pytestmark = pytest.mark.unit


class _RecordingSink:
    def __init__(self) -> None:
        self.chunks: list[str] = []
        self.closed = False

    def write(self, text: str) -> int:
        self.chunks.append(text)
        return len(text)

    def close(self) -> None:
        self.closed = True

    @property
    def text(self) -> str:
        return "".join(self.chunks)


def _calculated(records: list[str]) -> TextEntropyEstimator:
    estimator = TextEntropyEstimator()
    estimator.calculate(records, ())
    return estimator


def test_classify_assigns_each_character_one_class() -> None:
    assert classify("7") is CharacterClass.DIGIT
    assert classify("Q") is CharacterClass.UPPER
    assert classify("q") is CharacterClass.LOWER
    assert classify("!") is CharacterClass.SYMBOL
    assert classify(" ") is CharacterClass.SYMBOL
    assert classify("é") is CharacterClass.LOWER


def test_expected_type_is_text() -> None:
    assert TextEntropyEstimator().expected_type() is PasswordType.TEXT


def test_identical_passwords_have_zero_entropy() -> None:
    estimator = _calculated(["a", "a", "a"])
    sink = _RecordingSink()

    estimator.render_short(sink)

    assert sink.text == "Entropy Total: 0.0\n"
    assert sink.closed is True


def test_two_distinct_lowercase_passwords_have_two_bits() -> None:
    estimator = _calculated(["ab", "cd"])
    result = estimator.result
    assert result is not None

    assert result.length == 0.0
    assert result.digit_amount == 0.0
    assert result.symbol_placement == 0.0
    assert result.upper_type == 0.0
    assert result.lower_type == 2.0
    assert result.total == 2.0


def test_verbose_report_lists_every_contribution_between_separators() -> None:
    estimator = _calculated(["ab", "cd"])
    sink = _RecordingSink()

    estimator.render_verbose(sink)

    expected = [
        "Length: 0.0",
        SEPARATOR,
        "Number Amount: 0.0",
        "Number Placement: 0.0",
        "Number Type: 0.0",
        "Number Total: 0.0",
        SEPARATOR,
        "Symbol Amount: 0.0",
        "Symbol Placement: 0.0",
        "Symbol Type: 0.0",
        "Symbol Total: 0.0",
        SEPARATOR,
        "Uppercase Amount: 0.0",
        "Uppercase Placement: 0.0",
        "Uppercase Type: 0.0",
        "Uppercase Total: 0.0",
        SEPARATOR,
        "Lowercase Type: 2.0",
        "Lowercase Total: 2.0",
        SEPARATOR,
        "Entropy Total: 2.0",
    ]
    assert sink.text == "\n".join(expected) + "\n"


def test_component_helpers_on_mixed_passwords() -> None:
    passwords = ["a1", "1a", "ab"]
    digit = CLASS_PREDICATES[CharacterClass.DIGIT]

    # Lengths are all 2.
    assert length_entropy(passwords, 2) == 0.0
    # Digit counts [1, 1, 0] -> histogram [1, 2, 0].
    assert amount_entropy(passwords, 2, digit) == pytest.approx(0.9182958340544896)
    # Digits at positions 1 and 0.
    assert placement_entropy(passwords, 2, digit) == 1.0
    assert in_class_entropy(passwords, digit) == 0.0


def test_empty_dataset_reports_zero_total() -> None:
    estimator = _calculated([])
    sink = _RecordingSink()

    estimator.render_short(sink)

    assert sink.text == "Entropy Total: 0.0\n"


def test_result_payload_groups_contributions_by_class() -> None:
    payload = _calculated(["ab", "cd"]).result_payload()

    assert payload["total"] == 2.0
    assert payload["lower"] == {"type": 2.0}
    assert payload["digit"] == {"amount": 0.0, "placement": 0.0, "type": 0.0}


def test_rendering_twice_produces_identical_reports() -> None:
    estimator = _calculated(["Passw0rd!", "hunter2", "CorrectHorse"])
    first = _RecordingSink()
    second = _RecordingSink()

    estimator.render_verbose(first)
    estimator.render_verbose(second)

    assert first.text == second.text


@given(st.lists(st.text(max_size=12), max_size=20))
def test_total_is_left_to_right_sum_of_contributions(passwords: list[str]) -> None:
    result = _calculated(passwords).result
    assert result is not None

    contributions = result.contributions()
    assert len(contributions) == 11
    assert all(value >= 0.0 for value in contributions)
    assert result.total == total(contributions)


def test_single_lowercase_record_keeps_in_class_entropy() -> None:
    result = _calculated(["ab"]).result
    assert result is not None

    # One record fixes length and amounts, but its characters still differ within a class.
    assert result.length == 0.0
    assert result.lower_type == 1.0
    assert result.total == 1.0


def test_single_mixed_record_keeps_placement_and_in_class_entropy() -> None:
    estimator = _calculated(["a1b2"])
    result = estimator.result
    assert result is not None
    sink = _RecordingSink()

    estimator.render_short(sink)

    # Digits sit at positions 1 and 3 and are two different digits.
    assert result.digit_amount == 0.0
    assert result.digit_placement == 1.0
    assert result.digit_type == 1.0
    assert result.lower_type == 1.0
    assert sink.text == "Entropy Total: 3.0\n"
