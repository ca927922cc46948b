"""Alpha-guesswork of click-based graphical passwords (Bonneau, IEEE S&P 2012).

Click-points are assumed independent between positions, which fits schemes
like PCCP better than PassPoints. For every position the tolerance-cell
distribution is sorted by likelihood and the alpha-guesswork in bits is
evaluated for alpha = 0.01 .. 0.99.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from enes.constants import ALPHA_STEPS
from enes.domain.models import ClickPassword, PasswordType, max_length
from enes.estimators.base import MetricEstimator, format_double, join_blocks
from enes.estimators.click_entropy import ClickGrid
from enes.metrics.common import probabilities
from enes.metrics.guesswork import GUESSWORK_SUM_INCLUSIVE, alpha_guesswork_bits

if TYPE_CHECKING:
    from typing import TextIO

# Position 0 is left out of the verbose listing to keep the established
# report layout; the short report covers every position.
VERBOSE_FIRST_POSITION = 1


def sorted_distribution(
    passwords: Sequence[ClickPassword], grid: ClickGrid, position: int
) -> list[float]:
    """Cell probabilities of one click-point position, most likely first."""

    frequencies = [0] * grid.cell_count
    for password in passwords:
        if position >= len(password):
            continue
        frequencies[grid.flat_index(*password.click_point(position))] += 1
    return sorted(probabilities(frequencies), reverse=True)


def alphas() -> list[float]:
    return [step / ALPHA_STEPS for step in range(1, ALPHA_STEPS)]


class ClickAlphaGuessworkEstimator(MetricEstimator[ClickPassword]):
    """Per-position alpha-guesswork table, ``L`` rows by ``ALPHA_STEPS`` columns."""

    overall_label = "Click-point"

    def __init__(
        self,
        *,
        error_sink: TextIO | None = None,
        inclusive: bool = GUESSWORK_SUM_INCLUSIVE,
    ) -> None:
        super().__init__(error_sink=error_sink)
        self._inclusive = inclusive
        self._results: list[list[float]] | None = None

    def expected_type(self) -> PasswordType:
        return PasswordType.GRAPHICAL_CLICK

    @property
    def results(self) -> list[list[float]] | None:
        """Row ``i`` holds position ``i``; column 0 is unused and stays 0.0."""

        if self._results is None:
            return None
        return [list(row) for row in self._results]

    def _compute(
        self, records: Sequence[ClickPassword], parameters: Sequence[int]
    ) -> list[list[float]]:
        grid = ClickGrid.from_parameters(parameters)
        table: list[list[float]] = []
        for position in range(max_length(records)):
            distribution = sorted_distribution(records, grid, position)
            row = [0.0] * ALPHA_STEPS
            for step in range(1, ALPHA_STEPS):
                row[step] = alpha_guesswork_bits(
                    distribution, step / ALPHA_STEPS, inclusive=self._inclusive
                )
            table.append(row)
        self._results = table
        return table

    def _verbose_lines(self) -> list[str]:
        table = self._require_results()
        blocks: list[list[str]] = []
        for position in range(VERBOSE_FIRST_POSITION, len(table)):
            block = [f"Click-point: {position}"]
            block.extend(format_double(value) for value in table[position][1:])
            blocks.append(block)
        return join_blocks(blocks)

    def _short_lines(self) -> list[str]:
        # Guesswork grows with alpha, so the first and last values bound the range.
        return [
            f"{self.overall_label} {position}: "
            f"{format_double(row[1])} - {format_double(row[-1])}"
            for position, row in enumerate(self._require_results())
        ]

    def result_payload(self) -> dict[str, object]:
        return {
            "alphas": alphas(),
            "inclusive_sum": self._inclusive,
            "positions": [
                {"position": index, "bits": row[1:]}
                for index, row in enumerate(self._require_results())
            ],
        }

    def _require_results(self) -> list[list[float]]:
        if self._results is None:
            raise RuntimeError("calculate() must run before the result is read")
        return self._results


__all__ = [
    "VERBOSE_FIRST_POSITION",
    "ClickAlphaGuessworkEstimator",
    "alphas",
    "sorted_distribution",
]
