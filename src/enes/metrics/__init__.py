"""Pure numeric helpers shared by all estimators."""

from enes.metrics.common import flatten, log2, probabilities, shannon, total
from enes.metrics.guesswork import (
    GUESSWORK_SUM_INCLUSIVE,
    alpha_guesswork,
    alpha_guesswork_bits,
    alpha_work_factor,
    beta_success_rate,
)

__all__ = [
    "GUESSWORK_SUM_INCLUSIVE",
    "alpha_guesswork",
    "alpha_guesswork_bits",
    "alpha_work_factor",
    "beta_success_rate",
    "flatten",
    "log2",
    "probabilities",
    "shannon",
    "total",
]
