"""Metric estimators, one per metric/password-type pairing."""

from enes.estimators.base import MetricEstimator, ResultSink, format_double
from enes.estimators.click_entropy import ClickEntropyEstimatorDep, ClickEntropyEstimatorIndep
from enes.estimators.click_guesswork import ClickAlphaGuessworkEstimator
from enes.estimators.cognometric_entropy import CognometricGroupedEntropyEstimator
from enes.estimators.text_entropy import TextEntropyEstimator

__all__ = [
    "ClickAlphaGuessworkEstimator",
    "ClickEntropyEstimatorDep",
    "ClickEntropyEstimatorIndep",
    "CognometricGroupedEntropyEstimator",
    "MetricEstimator",
    "ResultSink",
    "TextEntropyEstimator",
    "format_double",
]
