"""Numeric primitives: logarithms, totals, probability normalisation, Shannon sums.

All helpers are pure and operate on plain Python sequences. Totals are
accumulated strictly left to right so that reported sums are reproducible
bit for bit across interpreter versions (``sum()`` on floats switched to a
compensated algorithm in Python 3.12).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final

_LN2: Final[float] = math.log(2)

Frequencies = Sequence[int] | Sequence[float]
FrequencyTable = Frequencies | Sequence[Frequencies]


def log2(x: float) -> float:
    """Return ``ln(x) / ln(2)`` with IEEE semantics for non-positive input."""

    if math.isnan(x) or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    return math.log(x) / _LN2


def total(values: Sequence[int] | Sequence[float]) -> int | float:
    """Sum ``values`` left to right without compensation."""

    acc: int | float = 0
    for value in values:
        acc += value
    return acc


def flatten(grid: Sequence[Sequence[int]]) -> list[int]:
    """Concatenate the rows of a 2-D table, first row first."""

    flat: list[int] = []
    for row in grid:
        flat.extend(row)
    return flat


def probabilities(frequencies: Frequencies) -> list[float]:
    """Normalise ``frequencies`` by their total; all zeros when the total is 0."""

    amount = total(frequencies)
    if amount == 0:
        return [0.0] * len(frequencies)
    return [float(item) / float(amount) for item in frequencies]


def shannon(frequencies: FrequencyTable) -> float:
    """Shannon entropy in bits of a 1-D or 2-D frequency table.

    Zero-probability cells are skipped, so ``0 * log2(0)`` counts as 0. A
    2-D table is normalised by its grand total.
    """

    if _is_two_dimensional(frequencies):
        flat: list[int | float] = []
        for row in frequencies:
            flat.extend(row)  # type: ignore[arg-type]
        probs = probabilities(flat)
    else:
        probs = probabilities(frequencies)  # type: ignore[arg-type]

    entropy = 0.0
    for prob in probs:
        if prob == 0:
            continue
        entropy += prob * log2(prob)
    # Subtracting from 0.0 keeps an empty sum at +0.0 rather than -0.0.
    return 0.0 - entropy


def _is_two_dimensional(table: FrequencyTable) -> bool:
    for item in table:
        return isinstance(item, Sequence)
    return False


__all__ = ["flatten", "log2", "probabilities", "shannon", "total"]
