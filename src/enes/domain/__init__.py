"""Domain records for password datasets."""

from enes.domain.models import (
    ClickPassword,
    CognometricGroupedPassword,
    DescriptorError,
    InputDescriptor,
    PasswordType,
    Point,
    Record,
    max_length,
)

__all__ = [
    "ClickPassword",
    "CognometricGroupedPassword",
    "DescriptorError",
    "InputDescriptor",
    "PasswordType",
    "Point",
    "Record",
    "max_length",
]
