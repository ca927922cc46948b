"""Shannon entropy of click-based graphical passwords (Dirik et al., SOUPS 2007).

The canvas is divided into square cells whose side equals the tolerance
margin of the scheme; a click ``(x, y)`` falls into cell
``(ceil(x / t), ceil(y / t))``. For every click-point position the entropy of
the cell distribution is computed. Independent click-points (one canvas per
position, e.g. PCCP) add up per position; dependent click-points (one shared
canvas, e.g. PassPoints) are accumulated on a single grid.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from enes.domain.models import ClickPassword, PasswordType, max_length
from enes.estimators.base import MetricEstimator, format_double, join_blocks
from enes.metrics.common import flatten, shannon, total

if TYPE_CHECKING:
    from typing import TextIO


@dataclass(frozen=True, slots=True)
class ClickGrid:
    """Tolerance grid over an ``x_max`` by ``y_max`` canvas."""

    x_max: int
    y_max: int
    tolerance: int

    @classmethod
    def from_parameters(cls, parameters: Sequence[int]) -> ClickGrid:
        x_max, y_max, tolerance = parameters
        return cls(x_max=x_max, y_max=y_max, tolerance=tolerance)

    @property
    def columns(self) -> int:
        return math.ceil(self.x_max / self.tolerance)

    @property
    def rows(self) -> int:
        return math.ceil(self.y_max / self.tolerance)

    @property
    def cell_count(self) -> int:
        return self.columns * self.rows

    def cell(self, x: int, y: int) -> tuple[int, int]:
        """Zero-based ``(column, row)`` of the 1-based cell a click falls into."""

        return math.ceil(x / self.tolerance) - 1, math.ceil(y / self.tolerance) - 1

    def flat_index(self, x: int, y: int) -> int:
        column, row = self.cell(x, y)
        return column * self.rows + row

    def empty_buckets(self) -> list[list[int]]:
        return [[0] * self.rows for _ in range(self.columns)]


def position_buckets(
    passwords: Sequence[ClickPassword], grid: ClickGrid, position: int
) -> list[list[int]]:
    """Bin the ``position``-th click of every password that has one."""

    buckets = grid.empty_buckets()
    for password in passwords:
        if position >= len(password):
            continue
        column, row = grid.cell(*password.click_point(position))
        buckets[column][row] += 1
    return buckets


@dataclass(frozen=True, slots=True)
class ClickEntropyResult:
    position_entropies: tuple[float, ...]
    cumulative_entropies: tuple[float, ...] | None = None

    @property
    def dependent(self) -> bool:
        return self.cumulative_entropies is not None

    @property
    def overall(self) -> float:
        if self.cumulative_entropies is not None:
            if not self.cumulative_entropies:
                return 0.0
            return self.cumulative_entropies[-1]
        return float(total(self.position_entropies))


class _ClickEntropyEstimator(MetricEstimator[ClickPassword]):
    """Shared implementation; use the dependent or independent subclass."""

    overall_label = "Overall entropy"
    dependent: bool = False

    def __init__(self, *, error_sink: TextIO | None = None) -> None:
        super().__init__(error_sink=error_sink)
        self._result: ClickEntropyResult | None = None

    def expected_type(self) -> PasswordType:
        return PasswordType.GRAPHICAL_CLICK

    @property
    def result(self) -> ClickEntropyResult | None:
        return self._result

    def _compute(
        self, records: Sequence[ClickPassword], parameters: Sequence[int]
    ) -> ClickEntropyResult:
        grid = ClickGrid.from_parameters(parameters)
        longest = max_length(records)

        per_position: list[float] = []
        cumulative: list[float] = []
        shared = grid.empty_buckets()

        for position in range(longest):
            buckets = position_buckets(records, grid, position)
            per_position.append(shannon(flatten(buckets)))
            if self.dependent:
                for column, row_counts in enumerate(buckets):
                    for row, count in enumerate(row_counts):
                        shared[column][row] += count
                cumulative.append(shannon(flatten(shared)))

        self._result = ClickEntropyResult(
            position_entropies=tuple(per_position),
            cumulative_entropies=tuple(cumulative) if self.dependent else None,
        )
        return self._result

    def _verbose_lines(self) -> list[str]:
        result = self._require_result()
        blocks: list[list[str]] = []
        for position, entropy in enumerate(result.position_entropies):
            block = [
                f"Click-point: {position + 1}",
                f"Click-point entropy: {format_double(entropy)}",
            ]
            if result.cumulative_entropies is not None:
                block.append(
                    f"{self.overall_label}: "
                    f"{format_double(result.cumulative_entropies[position])}"
                )
            blocks.append(block)
        if not result.dependent or not blocks:
            blocks.append([f"{self.overall_label}: {format_double(result.overall)}"])
        return join_blocks(blocks)

    def _short_lines(self) -> list[str]:
        return [f"{self.overall_label}: {format_double(self._require_result().overall)}"]

    def result_payload(self) -> dict[str, object]:
        result = self._require_result()
        payload: dict[str, object] = {
            "dependent": result.dependent,
            "positions": [
                {"position": index + 1, "entropy": entropy}
                for index, entropy in enumerate(result.position_entropies)
            ],
            "overall": result.overall,
        }
        if result.cumulative_entropies is not None:
            payload["cumulative"] = list(result.cumulative_entropies)
        return payload

    def _require_result(self) -> ClickEntropyResult:
        if self._result is None:
            raise RuntimeError("calculate() must run before the result is read")
        return self._result


class ClickEntropyEstimatorDep(_ClickEntropyEstimator):
    """Click-points chosen on one shared image (PassPoints)."""

    dependent = True


class ClickEntropyEstimatorIndep(_ClickEntropyEstimator):
    """Click-points chosen on a distinct image per position (PCCP, Cued Click-Points)."""

    dependent = False


__all__ = [
    "ClickEntropyEstimatorDep",
    "ClickEntropyEstimatorIndep",
    "ClickEntropyResult",
    "ClickGrid",
    "position_buckets",
]
