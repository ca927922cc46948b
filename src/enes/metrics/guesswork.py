"""Guessing metrics after Bonneau (2012): success rate, work factor, guesswork.

Every function takes a probability distribution ``X`` sorted in descending
order. ``GUESSWORK_SUM_INCLUSIVE`` selects the summation bound of the partial
guesswork term: ``True`` sums ``i * X[i]`` for ``i <= mu`` (the bound behind
published EnEs figures), ``False`` uses the
``i < mu`` bound of the paper's formula.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final

from enes.metrics.common import log2

GUESSWORK_SUM_INCLUSIVE: Final[bool] = True


def beta_success_rate(distribution: Sequence[float], beta: int) -> float:
    """Cumulative probability of the ``beta`` most likely secrets."""

    lam = 0.0
    for index in range(min(beta, len(distribution))):
        lam += distribution[index]
    return lam


def alpha_work_factor(distribution: Sequence[float], alpha: float) -> int:
    """Smallest number of guesses whose success rate reaches ``alpha``, else -1."""

    cumulative = 0.0
    for index, prob in enumerate(distribution):
        cumulative += prob
        if cumulative >= alpha:
            return index + 1
    return -1


def alpha_guesswork(
    distribution: Sequence[float],
    alpha: float,
    *,
    inclusive: bool = GUESSWORK_SUM_INCLUSIVE,
) -> float:
    """Expected guesses per account for an attacker stopping after ``mu(alpha)``."""

    mu = alpha_work_factor(distribution, alpha)
    lam = beta_success_rate(distribution, mu)
    first = (1 - lam) * mu

    upper = mu + 1 if inclusive else mu
    second = 0.0
    for index in range(min(upper, len(distribution))):
        second += index * distribution[index]

    return first + second


def alpha_guesswork_bits(
    distribution: Sequence[float],
    alpha: float,
    *,
    inclusive: bool = GUESSWORK_SUM_INCLUSIVE,
) -> float:
    """Alpha-guesswork converted to bits for comparison with uniform distributions."""

    guesswork = alpha_guesswork(distribution, alpha, inclusive=inclusive)
    lam = beta_success_rate(distribution, alpha_work_factor(distribution, alpha))
    return log2(_ieee_divide(2 * guesswork, lam) - 1) + log2(_ieee_divide(1, 2 - lam))


def _ieee_divide(numerator: float, denominator: float) -> float:
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


__all__ = [
    "GUESSWORK_SUM_INCLUSIVE",
    "alpha_guesswork",
    "alpha_guesswork_bits",
    "alpha_work_factor",
    "beta_success_rate",
]
