"""
enes: entropy and guesswork estimates for password sets.

Purpose
- Package root. Computes Shannon entropy and Bonneau alpha-guesswork over
  datasets of text, click-based graphical and grouped cognometric passwords.

What should be included in this file
- Version export and minimal public API surface (keep small).

Functional requirements
- Must not configure logging handlers at import time beyond a NullHandler.
"""

import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["__version__"]
