"""Password file parsing."""

from enes.parsing.parser import (
    FORMATS,
    PasswordFileError,
    detect_type,
    parse_lines,
    parse_password_file,
    parse_tag,
    read_password_file,
    serialize_descriptor,
    split_lines,
)

__all__ = [
    "FORMATS",
    "PasswordFileError",
    "detect_type",
    "parse_lines",
    "parse_password_file",
    "parse_tag",
    "read_password_file",
    "serialize_descriptor",
    "split_lines",
]
