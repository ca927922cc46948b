"""Stable constants shared across parser, engine and estimators."""

from __future__ import annotations

from typing import Final

# Schema version of enes.toml.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Prefix of the optional first line that pins the password type of a file.
PASSWORD_TYPE_PREFIX: Final[str] = "password type:"

# Line placed between blocks of a verbose report.
SEPARATOR: Final[str] = "-" * 31

# Diagnostics written to the error sink.
NOT_CALCULATED_MESSAGE: Final[str] = "Can't print: calculation not finished."
WRITE_FAILED_MESSAGE: Final[str] = "Could not write to target output."

# Alpha grid of the guesswork estimator: alpha = step / ALPHA_STEPS for step in 1..ALPHA_STEPS-1.
ALPHA_STEPS: Final[int] = 100

# Method identifiers accepted by the engine.
METHOD_TEXT_ENTROPY: Final[str] = "text_entropy"
METHOD_CLICK_ENTROPY_DEP: Final[str] = "gp_click_entropy_dep"
METHOD_CLICK_ENTROPY_INDEP: Final[str] = "gp_click_entropy_indep"
METHOD_CLICK_GUESSWORK: Final[str] = "gp_click_guesswork"
METHOD_COGNOMETRIC_ENTROPY: Final[str] = "gp_cognometric_entropy"

# Legacy identifiers of the same click entropy computations.
METHOD_ALIASES: Final[dict[str, str]] = {
    "gp_dirik_dep": METHOD_CLICK_ENTROPY_DEP,
    "gp_dirik_indep": METHOD_CLICK_ENTROPY_INDEP,
}

# Report formats; "text" is the line-oriented report layout.
OUTPUT_FORMATS: Final[tuple[str, ...]] = ("text", "json", "yaml")

__all__ = [
    "ALPHA_STEPS",
    "CONFIG_SCHEMA_VERSION",
    "METHOD_ALIASES",
    "METHOD_CLICK_ENTROPY_DEP",
    "METHOD_CLICK_ENTROPY_INDEP",
    "METHOD_CLICK_GUESSWORK",
    "METHOD_COGNOMETRIC_ENTROPY",
    "METHOD_TEXT_ENTROPY",
    "NOT_CALCULATED_MESSAGE",
    "OUTPUT_FORMATS",
    "PASSWORD_TYPE_PREFIX",
    "SEPARATOR",
    "WRITE_FAILED_MESSAGE",
]
