"""Metric engine: method registry, estimator dispatch and report rendering.

The engine owns one estimator per run. It refuses to run when the dataset's
password type differs from what the selected estimator consumes, then
computes the metric and renders the report into a caller-supplied sink.
"""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Literal

import yaml

from enes.constants import (
    METHOD_ALIASES,
    METHOD_CLICK_ENTROPY_DEP,
    METHOD_CLICK_ENTROPY_INDEP,
    METHOD_CLICK_GUESSWORK,
    METHOD_COGNOMETRIC_ENTROPY,
    METHOD_TEXT_ENTROPY,
    OUTPUT_FORMATS,
)
from enes.estimators import (
    ClickAlphaGuessworkEstimator,
    ClickEntropyEstimatorDep,
    ClickEntropyEstimatorIndep,
    CognometricGroupedEntropyEstimator,
    MetricEstimator,
    TextEntropyEstimator,
)

if TYPE_CHECKING:
    from typing import TextIO

    from enes.domain.models import InputDescriptor, PasswordType
    from enes.estimators.base import ResultSink

OutputFormat = Literal["text", "json", "yaml"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MethodSpec:
    """Registry entry binding a method identifier to its estimator."""

    name: str
    factory: Callable[..., MetricEstimator[object]]
    summary: str

    @property
    def password_type(self) -> PasswordType:
        """Password type consumed by this method's estimator."""

        return self.factory().expected_type()


METHODS: Final[Mapping[str, MethodSpec]] = {
    spec.name: spec
    for spec in (
        MethodSpec(
            METHOD_TEXT_ENTROPY,
            TextEntropyEstimator,
            "Shannon entropy of text passwords by character class (Shay et al.)",
        ),
        MethodSpec(
            METHOD_CLICK_ENTROPY_DEP,
            ClickEntropyEstimatorDep,
            "Shannon entropy of dependent click-points, shared canvas (Dirik et al.)",
        ),
        MethodSpec(
            METHOD_CLICK_ENTROPY_INDEP,
            ClickEntropyEstimatorIndep,
            "Shannon entropy of independent click-points, canvas per position",
        ),
        MethodSpec(
            METHOD_CLICK_GUESSWORK,
            ClickAlphaGuessworkEstimator,
            "Alpha-guesswork in bits per click-point position (Bonneau)",
        ),
        MethodSpec(
            METHOD_COGNOMETRIC_ENTROPY,
            CognometricGroupedEntropyEstimator,
            "Group and element Shannon entropy of grouped cognometric passwords",
        ),
    )
}


class EngineError(ValueError):
    """Base class for dispatch failures detected before any computation."""


class UnknownMethodError(EngineError):
    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Invalid estimation method: {method}")


class TypeMismatchError(EngineError):
    def __init__(self, method: str, expected: PasswordType, found: PasswordType) -> None:
        self.method = method
        self.expected = expected
        self.found = found
        super().__init__(
            f"Method {method} expects {expected} passwords, but the file contains {found}"
        )


def resolve_method(method: str) -> MethodSpec:
    """Look up a method identifier, ignoring case and surrounding whitespace."""

    key = method.strip().lower()
    spec = METHODS.get(METHOD_ALIASES.get(key, key))
    if spec is None:
        raise UnknownMethodError(method)
    return spec


def create_estimator(method: str, *, error_sink: TextIO | None = None) -> MetricEstimator[object]:
    """Construct a fresh estimator for ``method``."""

    return resolve_method(method).factory(error_sink=error_sink)


def check_compatible(
    method: str, estimator: MetricEstimator[object], descriptor: InputDescriptor
) -> None:
    expected = estimator.expected_type()
    if descriptor.password_type != expected:
        raise TypeMismatchError(method, expected, descriptor.password_type)


def estimate(
    descriptor: InputDescriptor,
    method: str,
    *,
    error_sink: TextIO | None = None,
) -> MetricEstimator[object]:
    """Select, type-check and run the estimator for ``method``; no rendering."""

    estimator = create_estimator(method, error_sink=error_sink)
    check_compatible(method, estimator, descriptor)
    estimator.calculate(descriptor.records, descriptor.parameters)
    logger.info(
        "estimation finished",
        extra={
            "method": resolve_method(method).name,
            "password_type": str(descriptor.password_type),
            "record_count": len(descriptor.records),
        },
    )
    return estimator


def run_estimation(
    descriptor: InputDescriptor,
    method: str,
    sink: ResultSink,
    *,
    verbose: bool = False,
    error_sink: TextIO | None = None,
) -> MetricEstimator[object]:
    """Compute ``method`` over ``descriptor`` and render the text report to ``sink``.

    The sink is closed by the estimator after a successful render.
    """

    estimator = estimate(descriptor, method, error_sink=error_sink)
    if verbose:
        estimator.render_verbose(sink)
    else:
        estimator.render_short(sink)
    return estimator


class _BufferSink(io.StringIO):
    """In-memory sink that keeps its text available after ``close``."""

    def __init__(self) -> None:
        super().__init__()
        self.text = ""

    def close(self) -> None:
        if not self.closed:
            self.text = self.getvalue()
        super().close()


def render_to_string(estimator: MetricEstimator[object], *, verbose: bool = False) -> str:
    """Render a calculated estimator's text report into a string."""

    sink = _BufferSink()
    if verbose:
        estimator.render_verbose(sink)
    else:
        estimator.render_short(sink)
    return sink.text if sink.closed else sink.getvalue()


def result_document(
    estimator: MetricEstimator[object], *, method: str, descriptor: InputDescriptor
) -> dict[str, object]:
    """Machine-readable summary of a finished run."""

    return {
        "method": resolve_method(method).name,
        "password_type": str(descriptor.password_type),
        "parameters": list(descriptor.parameters),
        "record_count": len(descriptor.records),
        "result": estimator.result_payload(),
    }


def dump_document(document: Mapping[str, object], output_format: OutputFormat) -> str:
    if output_format == "json":
        return json.dumps(document, sort_keys=True, indent=2, ensure_ascii=False) + "\n"
    if output_format == "yaml":
        return yaml.safe_dump(dict(document), sort_keys=True, allow_unicode=True)
    raise ValueError(f"unsupported structured output format {output_format!r}")


__all__ = [
    "METHODS",
    "OUTPUT_FORMATS",
    "EngineError",
    "MethodSpec",
    "OutputFormat",
    "TypeMismatchError",
    "UnknownMethodError",
    "check_compatible",
    "create_estimator",
    "dump_document",
    "estimate",
    "render_to_string",
    "resolve_method",
    "result_document",
    "run_estimation",
]
