"""Shannon entropy of grouped recognition-based passwords (e.g. Passfaces).

Group and in-group element distributions are estimated separately for each
position. Only the element entropies add up to the overall figure: the group
shown at a position does not strengthen the password against offline
guessing once the selected element is known.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from enes.domain.models import CognometricGroupedPassword, PasswordType, max_length
from enes.estimators.base import MetricEstimator, format_double, join_blocks
from enes.metrics.common import shannon, total

if TYPE_CHECKING:
    from typing import TextIO


@dataclass(frozen=True, slots=True)
class CognometricEntropyResult:
    group_entropies: tuple[float, ...]
    element_entropies: tuple[float, ...]

    @property
    def overall(self) -> float:
        return float(total(self.element_entropies))


class CognometricGroupedEntropyEstimator(MetricEstimator[CognometricGroupedPassword]):
    overall_label = "Overall element entropy"

    def __init__(self, *, error_sink: TextIO | None = None) -> None:
        super().__init__(error_sink=error_sink)
        self._result: CognometricEntropyResult | None = None

    def expected_type(self) -> PasswordType:
        return PasswordType.GRAPHICAL_COGNOMETRIC_GROUP

    @property
    def result(self) -> CognometricEntropyResult | None:
        return self._result

    def _compute(
        self, records: Sequence[CognometricGroupedPassword], parameters: Sequence[int]
    ) -> CognometricEntropyResult:
        groups, elements = parameters
        longest = max_length(records)
        group_buckets = [[0] * groups for _ in range(longest)]
        element_buckets = [[0] * elements for _ in range(longest)]

        for password in records:
            for position, (group_id, element_id) in enumerate(password):
                group_buckets[position][group_id] += 1
                element_buckets[position][element_id] += 1

        self._result = CognometricEntropyResult(
            group_entropies=tuple(shannon(bucket) for bucket in group_buckets),
            element_entropies=tuple(shannon(bucket) for bucket in element_buckets),
        )
        return self._result

    def _verbose_lines(self) -> list[str]:
        result = self._require_result()
        blocks: list[list[str]] = [
            [
                f"Element position: {position + 1}",
                f"Position entropy (groups): {format_double(group_entropy)}",
                f"Position entropy (elements): {format_double(element_entropy)}",
            ]
            for position, (group_entropy, element_entropy) in enumerate(
                zip(result.group_entropies, result.element_entropies, strict=True)
            )
        ]
        blocks.append([f"{self.overall_label}: {format_double(result.overall)}"])
        return join_blocks(blocks)

    def _short_lines(self) -> list[str]:
        return [f"{self.overall_label}: {format_double(self._require_result().overall)}"]

    def result_payload(self) -> dict[str, object]:
        result = self._require_result()
        return {
            "positions": [
                {"position": index + 1, "group_entropy": group, "element_entropy": element}
                for index, (group, element) in enumerate(
                    zip(result.group_entropies, result.element_entropies, strict=True)
                )
            ],
            "overall": result.overall,
        }

    def _require_result(self) -> CognometricEntropyResult:
        if self._result is None:
            raise RuntimeError("calculate() must run before the result is read")
        return self._result


__all__ = ["CognometricEntropyResult", "CognometricGroupedEntropyEstimator"]
