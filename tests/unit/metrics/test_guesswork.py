"""
enes unit tests for guessing metrics

File: tests/unit/metrics/test_guesswork.py

Purpose
- Validate beta-success-rate, alpha-work-factor and alpha-guesswork (plain and in bits).

What this test file should cover
- Monotonicity of lambda(beta) and mu(alpha); lambda(|p|) == 1.
- The -1 sentinel when alpha is unreachable.
- Both summation bounds of the partial guesswork term.
"""

from __future__ import annotations

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from enes.metrics.common import log2, probabilities
from enes.metrics.guesswork import (
    GUESSWORK_SUM_INCLUSIVE,
    alpha_guesswork,
    alpha_guesswork_bits,
    alpha_work_factor,
    beta_success_rate,
)

pytestmark = pytest.mark.unit

SKEWED = [0.75, 0.25, 0.0, 0.0]


@st.composite
def sorted_distributions(draw: st.DrawFn) -> list[float]:
    counts = draw(st.lists(st.integers(min_value=0, max_value=50), min_size=1, max_size=30))
    if not any(counts):
        counts[0] = 1
    return sorted(probabilities(counts), reverse=True)


def test_beta_success_rate_sums_prefix_and_clamps_to_length() -> None:
    assert beta_success_rate(SKEWED, 0) == 0.0
    assert beta_success_rate(SKEWED, 1) == 0.75
    assert beta_success_rate(SKEWED, 2) == 1.0
    assert beta_success_rate(SKEWED, 99) == 1.0
    assert beta_success_rate(SKEWED, -1) == 0.0


def test_alpha_work_factor_is_smallest_prefix_reaching_alpha() -> None:
    assert alpha_work_factor(SKEWED, 0.01) == 1
    assert alpha_work_factor(SKEWED, 0.75) == 1
    assert alpha_work_factor(SKEWED, 0.76) == 2
    assert alpha_work_factor(SKEWED, 1.0) == 2


def test_alpha_work_factor_returns_minus_one_when_alpha_unreachable() -> None:
    assert alpha_work_factor([0.0, 0.0], 0.5) == -1
    assert alpha_work_factor([], 0.1) == -1


def test_inclusive_bound_is_the_default() -> None:
    assert GUESSWORK_SUM_INCLUSIVE is True
    assert alpha_guesswork(SKEWED, 0.5) == alpha_guesswork(SKEWED, 0.5, inclusive=True)


def test_alpha_guesswork_inclusive_bound() -> None:
    # mu = 1, lambda = 0.75: (1 - 0.75) * 1 + (0 * 0.75 + 1 * 0.25)
    assert alpha_guesswork(SKEWED, 0.5, inclusive=True) == pytest.approx(0.5)
    expected_bits = log2(2 * 0.5 / 0.75 - 1) + log2(1 / (2 - 0.75))
    assert alpha_guesswork_bits(SKEWED, 0.5, inclusive=True) == pytest.approx(expected_bits)


def test_alpha_guesswork_exclusive_bound_matches_paper_formula() -> None:
    # (1 - 0.75) * 1 + 0 * 0.75; 2 * 0.25 / 0.75 - 1 < 0, so the bits are NaN.
    assert alpha_guesswork(SKEWED, 0.5, inclusive=False) == pytest.approx(0.25)
    assert math.isnan(alpha_guesswork_bits(SKEWED, 0.5, inclusive=False))


def test_alpha_guesswork_on_fully_guessed_uniform_distribution() -> None:
    uniform = [0.25] * 4
    # mu = 4, lambda = 1: 0 + (0 + 1 + 2 + 3) * 0.25
    assert alpha_guesswork(uniform, 1.0) == 1.5
    assert alpha_guesswork_bits(uniform, 1.0) == 1.0


def test_alpha_guesswork_bits_on_empty_distribution_is_nan() -> None:
    assert math.isnan(alpha_guesswork_bits([0.0, 0.0], 0.5))


@given(sorted_distributions())
def test_beta_success_rate_is_non_decreasing_and_reaches_one(distribution: list[float]) -> None:
    rates = [beta_success_rate(distribution, beta) for beta in range(len(distribution) + 1)]
    assert all(left <= right for left, right in zip(rates, rates[1:], strict=False))
    assert rates[-1] == pytest.approx(1.0)


@given(sorted_distributions(), st.floats(min_value=0.01, max_value=0.99))
def test_alpha_work_factor_is_minimal_and_monotonic(
    distribution: list[float], alpha: float
) -> None:
    mu = alpha_work_factor(distribution, alpha)
    assert mu >= 1
    assert beta_success_rate(distribution, mu) >= alpha
    assert beta_success_rate(distribution, mu - 1) < alpha
    assert alpha_work_factor(distribution, min(alpha + 0.01, 0.99)) >= mu
