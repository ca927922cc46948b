"""
enes unit tests for the grouped cognometric entropy estimator

File: tests/unit/estimators/test_cognometric_entropy.py

Purpose
- Validate per-position group and element entropies over grouped selections.

What this test file should cover
- Literal two-record sample: per-position histograms and an overall element entropy of 2.0.
- Group entropies are reported but never added to the overall figure.
- Verbose and short layouts.
"""

from __future__ import annotations

import pytest

from enes.constants import SEPARATOR
from enes.domain.models import CognometricGroupedPassword, PasswordType
from enes.estimators.cognometric_entropy import CognometricGroupedEntropyEstimator

pytestmark = pytest.mark.unit

PARAMETERS = (3, 4)
SAMPLE = [
    CognometricGroupedPassword([(0, 0), (1, 1)]),
    CognometricGroupedPassword([(0, 2), (2, 3)]),
]


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


def _calculated() -> CognometricGroupedEntropyEstimator:
    estimator = CognometricGroupedEntropyEstimator()
    estimator.calculate(SAMPLE, PARAMETERS)
    return estimator


def test_expected_type_is_grouped_cognometric() -> None:
    assert (
        CognometricGroupedEntropyEstimator().expected_type()
        is PasswordType.GRAPHICAL_COGNOMETRIC_GROUP
    )


def test_sample_position_entropies() -> None:
    result = _calculated().result
    assert result is not None

    # Groups [2,0,0] then [0,1,1]; elements [1,0,1,0] then [0,1,0,1].
    assert result.group_entropies == (0.0, 1.0)
    assert result.element_entropies == (1.0, 1.0)
    assert result.overall == 2.0


def test_short_report() -> None:
    sink = _RecordingSink()

    _calculated().render_short(sink)

    assert sink.text == "Overall element entropy: 2.0\n"


def test_verbose_report_lists_positions_then_overall() -> None:
    sink = _RecordingSink()

    _calculated().render_verbose(sink)

    assert sink.text.splitlines() == [
        "Element position: 1",
        "Position entropy (groups): 0.0",
        "Position entropy (elements): 1.0",
        SEPARATOR,
        "Element position: 2",
        "Position entropy (groups): 1.0",
        "Position entropy (elements): 1.0",
        SEPARATOR,
        "Overall element entropy: 2.0",
    ]


def test_group_entropy_does_not_contribute_to_overall() -> None:
    estimator = CognometricGroupedEntropyEstimator()
    # Every selection lands on the same element but in a different group.
    estimator.calculate(
        [
            CognometricGroupedPassword([(0, 1)]),
            CognometricGroupedPassword([(1, 1)]),
            CognometricGroupedPassword([(2, 1)]),
        ],
        PARAMETERS,
    )
    result = estimator.result
    assert result is not None

    assert result.group_entropies[0] > 0.0
    assert result.overall == 0.0


def test_empty_dataset_reports_zero() -> None:
    estimator = CognometricGroupedEntropyEstimator()
    estimator.calculate([], PARAMETERS)
    sink = _RecordingSink()

    estimator.render_verbose(sink)

    assert sink.text == "Overall element entropy: 0.0\n"


def test_payload_pairs_group_and_element_entropy_per_position() -> None:
    payload = _calculated().result_payload()

    assert payload["overall"] == 2.0
    assert payload["positions"] == [
        {"position": 1, "group_entropy": 0.0, "element_entropy": 1.0},
        {"position": 2, "group_entropy": 1.0, "element_entropy": 1.0},
    ]


def test_single_record_reports_zero() -> None:
    estimator = CognometricGroupedEntropyEstimator()
    estimator.calculate([CognometricGroupedPassword([(0, 1), (2, 3)])], PARAMETERS)
    result = estimator.result
    assert result is not None
    sink = _RecordingSink()

    estimator.render_short(sink)

    assert result.group_entropies == (0.0, 0.0)
    assert result.element_entropies == (0.0, 0.0)
    assert sink.text == "Overall element entropy: 0.0\n"
