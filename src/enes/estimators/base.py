"""Estimator contract shared by every metric/password-type pairing.

An estimator is single use: ``calculate`` fills its result, after which
``render_verbose`` or ``render_short`` writes the textual report to a sink
and closes it. Rendering before ``calculate`` only emits a diagnostic.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from enes.constants import NOT_CALCULATED_MESSAGE, SEPARATOR, WRITE_FAILED_MESSAGE

if TYPE_CHECKING:
    from typing import TextIO

    from enes.domain.models import PasswordType

E = TypeVar("E")

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    """Writable text target; closed by the estimator once a report is complete."""

    def write(self, text: str, /) -> object: ...

    def close(self) -> None: ...


def format_double(value: float) -> str:
    """Render a float the way ``java.lang.Double.toString`` does.

    Reports keep the EnEs text layout, so
    ``1.0``, ``1.0E-5``, ``NaN`` and ``-Infinity`` are reproduced verbatim.
    """

    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "Infinity" if value > 0 else "-Infinity"

    magnitude = abs(value)
    if magnitude == 0 or 1e-3 <= magnitude < 1e7:
        return repr(float(value))

    digits_tuple = Decimal(repr(magnitude)).as_tuple()
    digits = "".join(str(item) for item in digits_tuple.digits)
    exponent = int(digits_tuple.exponent) + len(digits) - 1
    digits = digits.rstrip("0") or "0"
    fraction = digits[1:] or "0"
    sign = "-" if value < 0 else ""
    return f"{sign}{digits[0]}.{fraction}E{exponent}"


class MetricEstimator(ABC, Generic[E]):
    """Base class of all estimators over records of type ``E``."""

    #: Label of the aggregate line written by :meth:`render_short`.
    overall_label: str = "Overall"

    def __init__(self, *, error_sink: TextIO | None = None) -> None:
        self._error_sink = error_sink
        self._calculated = False

    @abstractmethod
    def expected_type(self) -> PasswordType:
        """Password type this estimator consumes."""

    @abstractmethod
    def _compute(self, records: Sequence[E], parameters: Sequence[int]) -> object:
        """Run the metric and return a non-null result token."""

    @abstractmethod
    def _verbose_lines(self) -> list[str]:
        """Report lines of the per-position breakdown, separators included."""

    @abstractmethod
    def _short_lines(self) -> list[str]:
        """Report lines with the aggregate figure(s) only."""

    @abstractmethod
    def result_payload(self) -> dict[str, object]:
        """Machine-readable result used by JSON and YAML output."""

    @property
    def is_calculated(self) -> bool:
        return self._calculated

    def calculate(self, records: Sequence[E], parameters: Sequence[int]) -> object:
        """Execute the metric over ``records``; repeated calls recompute from scratch."""

        result = self._compute(records, tuple(parameters))
        self._calculated = True
        logger.debug(
            "estimator calculated",
            extra={"estimator": type(self).__name__, "record_count": len(records)},
        )
        return result

    def render_verbose(self, sink: ResultSink) -> None:
        self._render(sink, self._verbose_lines)

    def render_short(self, sink: ResultSink) -> None:
        self._render(sink, self._short_lines)

    def _render(self, sink: ResultSink, build: Callable[[], list[str]]) -> None:
        if not self._calculated:
            self._diagnostic(NOT_CALCULATED_MESSAGE)
            return
        try:
            for line in build():
                sink.write(line + "\n")
            sink.close()
        except OSError as exc:
            logger.debug("failed writing report: %s", exc)
            self._diagnostic(WRITE_FAILED_MESSAGE)

    def _diagnostic(self, message: str) -> None:
        logger.info(message, extra={"estimator": type(self).__name__})
        target = self._error_sink if self._error_sink is not None else sys.stderr
        target.write(message + "\n")
        target.flush()


def join_blocks(blocks: Sequence[Sequence[str]]) -> list[str]:
    """Concatenate report blocks with a separator line between consecutive blocks."""

    lines: list[str] = []
    for index, block in enumerate(blocks):
        if index:
            lines.append(SEPARATOR)
        lines.extend(block)
    return lines


__all__ = ["MetricEstimator", "ResultSink", "format_double", "join_blocks"]
