"""Password file reading, type detection and record parsing.

A password file holds one record per line. An optional first line
``password type: <TAG>`` (case-insensitive) forces the type; otherwise each
registered format inspects the parameter line and the first record and the
first one that accepts the file wins. Text accepts everything, so it is
always tried last.

File layouts::

    TEXT                          records only, empty lines preserved
    GRAPHICAL_CLICK               Xmax,Ymax,tolerance / x1,y1;x2,y2;...
    GRAPHICAL_COGNOMETRIC_GROUP   G,E / g1,e1;g2,e2;...
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from enes.constants import PASSWORD_TYPE_PREFIX
from enes.domain.models import (
    ClickPassword,
    CognometricGroupedPassword,
    DescriptorError,
    InputDescriptor,
    PasswordType,
    Record,
)

logger = logging.getLogger(__name__)

_LINE_BREAK: Final = re.compile(r"\r\n|\r|\n")
_INTEGER: Final = re.compile(r"[+-]?[0-9]+")

DETECTION_ORDER: Final[tuple[PasswordType, ...]] = (
    PasswordType.GRAPHICAL_CLICK,
    PasswordType.GRAPHICAL_COGNOMETRIC_GROUP,
    PasswordType.TEXT,
)


class PasswordFileError(ValueError):
    """Input file cannot be read or does not match the declared format."""

    def __init__(self, message: str, *, line: int | None = None, path: str | None = None) -> None:
        self.line = line
        self.path = path
        location = ""
        if path is not None:
            location = path if line is None else f"{path}:{line}"
        elif line is not None:
            location = f"line {line}"
        super().__init__(f"{location}: {message}" if location else message)


def split_lines(text: str) -> list[str]:
    """Split on ``\\r\\n``, ``\\r`` or ``\\n``; a final line break adds no empty record."""

    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def read_password_file(path: str | Path, *, encoding: str = "utf-8") -> list[str]:
    """Read ``path`` into a list of lines.

    ``FileNotFoundError`` and other ``OSError``s propagate so the caller can
    tell a missing file from an unreadable one; undecodable content raises
    :class:`PasswordFileError`.
    """

    file_path = Path(path)
    raw = file_path.read_bytes()
    try:
        text = raw.decode(encoding)
    except UnicodeDecodeError as exc:
        raise PasswordFileError(
            f"content is not valid {encoding} (byte offset {exc.start})", path=str(file_path)
        ) from exc
    lines = split_lines(text)
    logger.debug("password file read", extra={"line_count": len(lines)})
    return lines


def parse_tag(line: str) -> PasswordType | None:
    """Return the type forced by a tag line, or ``None`` when ``line`` is no tag."""

    if not line.lower().startswith(PASSWORD_TYPE_PREFIX):
        return None
    name = line[len(PASSWORD_TYPE_PREFIX) :].strip().upper()
    try:
        password_type = PasswordType(name)
    except ValueError:
        return None
    if password_type is PasswordType.MALFORMATTED:
        return None
    return password_type


def _parse_int(token: str) -> int:
    stripped = token.strip()
    if _INTEGER.fullmatch(stripped) is None:
        raise ValueError(f"not an integer: {token!r}")
    return int(stripped)


def parse_int_list(line: str) -> list[int]:
    """Parse a comma-separated integer list such as a parameter line."""

    return [_parse_int(token) for token in line.split(",")]


def parse_pairs(line: str) -> list[tuple[int, int]]:
    """Parse ``a1,b1;a2,b2;...`` into integer pairs; a blank line is an empty record."""

    pairs: list[tuple[int, int]] = []
    if not line.strip():
        return pairs
    for chunk in line.split(";"):
        values = parse_int_list(chunk)
        if len(values) != 2:
            raise ValueError(f"expected two comma-separated integers, got {chunk!r}")
        pairs.append((values[0], values[1]))
    return pairs


class PasswordFormat(ABC):
    """One on-disk layout: header detection, record parsing and re-serialisation."""

    password_type: PasswordType
    parameter_count: int = 0

    def accepts(self, body: Sequence[str]) -> bool:
        """Heuristic check on the parameter line and the first record only."""

        try:
            parameters = self.parse_parameters(body)
            if len(body) > self.header_lines:
                self.parse_record(body[self.header_lines], parameters)
        except ValueError:
            return False
        return True

    @property
    def header_lines(self) -> int:
        return 1 if self.parameter_count else 0

    def parse_parameters(self, body: Sequence[str]) -> tuple[int, ...]:
        if not self.parameter_count:
            return ()
        if not body:
            raise ValueError("missing parameter line")
        parameters = parse_int_list(body[0])
        if len(parameters) != self.parameter_count:
            raise ValueError(
                f"expected {self.parameter_count} parameters, got {len(parameters)}"
            )
        if any(value <= 0 for value in parameters):
            raise ValueError("parameters must be > 0")
        self.check_parameters(parameters)
        return tuple(parameters)

    def check_parameters(self, parameters: Sequence[int]) -> None:
        """Hook for format-specific parameter constraints."""

    @abstractmethod
    def parse_record(self, line: str, parameters: Sequence[int]) -> Record:
        """Parse one record line, raising ``ValueError`` when it does not conform."""

    def serialize_record(self, record: Record) -> str:
        if isinstance(record, str):
            return record
        return ";".join(f"{first},{second}" for first, second in record)


class TextFormat(PasswordFormat):
    password_type = PasswordType.TEXT

    def parse_record(self, line: str, parameters: Sequence[int]) -> Record:
        return line


class ClickFormat(PasswordFormat):
    password_type = PasswordType.GRAPHICAL_CLICK
    parameter_count = 3

    def check_parameters(self, parameters: Sequence[int]) -> None:
        x_max, y_max, tolerance = parameters
        if tolerance > x_max or tolerance > y_max:
            raise ValueError("tolerance must not exceed the canvas size")

    def parse_record(self, line: str, parameters: Sequence[int]) -> Record:
        x_max, y_max, _tolerance = parameters
        password = ClickPassword()
        for x, y in parse_pairs(line):
            if not 1 <= x <= x_max or not 1 <= y <= y_max:
                raise ValueError(f"click-point ({x},{y}) lies outside the {x_max}x{y_max} canvas")
            password.add_click_point(x, y)
        return password


class CognometricFormat(PasswordFormat):
    password_type = PasswordType.GRAPHICAL_COGNOMETRIC_GROUP
    parameter_count = 2

    def parse_record(self, line: str, parameters: Sequence[int]) -> Record:
        groups, elements = parameters
        password = CognometricGroupedPassword()
        for group_id, element_id in parse_pairs(line):
            if not 0 <= group_id < groups:
                raise ValueError(f"group id {group_id} outside [0, {groups})")
            if not 0 <= element_id < elements:
                raise ValueError(f"element id {element_id} outside [0, {elements})")
            password.add_element(group_id, element_id)
        return password


FORMATS: Final[dict[PasswordType, PasswordFormat]] = {
    fmt.password_type: fmt for fmt in (TextFormat(), ClickFormat(), CognometricFormat())
}


def detect_type(lines: Sequence[str], *, prefer: PasswordType | None = None) -> PasswordType:
    """Resolve the type of a file: tag line first, then ``prefer``, then detection order."""

    if lines:
        tagged = parse_tag(lines[0])
        if tagged is not None:
            return tagged

    candidates = list(DETECTION_ORDER)
    if prefer is not None and prefer in FORMATS:
        candidates.remove(prefer)
        candidates.insert(0, prefer)
    for candidate in candidates:
        if FORMATS[candidate].accepts(lines):
            return candidate
    return PasswordType.MALFORMATTED


def parse_lines(
    lines: Sequence[str],
    *,
    prefer: PasswordType | None = None,
    path: str | None = None,
) -> InputDescriptor:
    """Parse already-split lines into a validated :class:`InputDescriptor`."""

    offset = 0
    if lines and parse_tag(lines[0]) is not None:
        offset = 1
    password_type = detect_type(lines, prefer=prefer)
    if password_type is PasswordType.MALFORMATTED:
        raise PasswordFileError("file matches no known password format", path=path)

    fmt = FORMATS[password_type]
    body = lines[offset:]
    try:
        parameters = fmt.parse_parameters(body)
    except ValueError as exc:
        raise PasswordFileError(
            f"invalid parameter line: {exc}", line=offset + 1, path=path
        ) from exc

    records: list[Record] = []
    first_record = offset + fmt.header_lines
    for index, line in enumerate(lines[first_record:], start=first_record + 1):
        try:
            records.append(fmt.parse_record(line, parameters))
        except ValueError as exc:
            raise PasswordFileError(f"invalid record: {exc}", line=index, path=path) from exc

    try:
        descriptor = InputDescriptor(password_type, parameters, tuple(records)).validate()
    except DescriptorError as exc:
        raise PasswordFileError(str(exc), path=path) from exc
    logger.info(
        "password file parsed",
        extra={
            "password_type": str(password_type),
            "record_count": len(records),
            "tagged": bool(offset),
        },
    )
    return descriptor


def parse_password_file(
    path: str | Path,
    *,
    prefer: PasswordType | None = None,
    encoding: str = "utf-8",
) -> InputDescriptor:
    lines = read_password_file(path, encoding=encoding)
    return parse_lines(lines, prefer=prefer, path=str(path))


def serialize_descriptor(descriptor: InputDescriptor) -> str:
    """Write ``descriptor`` in the canonical tagged layout accepted by :func:`parse_lines`."""

    fmt = FORMATS[descriptor.password_type]
    lines = [f"{PASSWORD_TYPE_PREFIX} {descriptor.password_type}"]
    if fmt.parameter_count:
        lines.append(",".join(str(value) for value in descriptor.parameters))
    lines.extend(fmt.serialize_record(record) for record in descriptor.records)
    return "\n".join(lines) + "\n"


__all__ = [
    "DETECTION_ORDER",
    "FORMATS",
    "ClickFormat",
    "CognometricFormat",
    "PasswordFileError",
    "PasswordFormat",
    "TextFormat",
    "detect_type",
    "parse_int_list",
    "parse_lines",
    "parse_pairs",
    "parse_password_file",
    "parse_tag",
    "read_password_file",
    "serialize_descriptor",
    "split_lines",
]
