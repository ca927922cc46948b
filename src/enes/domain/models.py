"""Typed password records and the input descriptor handed from parser to engine."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import NoReturn, TypeAlias

Point: TypeAlias = tuple[int, int]


class PasswordType(StrEnum):
    """Structural password kinds; ``MALFORMATTED`` is assigned by the parser only."""

    TEXT = "TEXT"
    GRAPHICAL_CLICK = "GRAPHICAL_CLICK"
    GRAPHICAL_COGNOMETRIC_GROUP = "GRAPHICAL_COGNOMETRIC_GROUP"
    MALFORMATTED = "MALFORMATTED"


class DescriptorError(ValueError):
    """Raised when records or parameters violate the descriptor invariants."""


def _fail(path: str, message: str) -> NoReturn:
    raise DescriptorError(f"{path}: {message}")


class _PairSequence:
    """Append-only sequence of integer pairs, frozen once handed to a descriptor."""

    __slots__ = ("_frozen", "_pairs")

    def __init__(self, pairs: Sequence[Point] = ()) -> None:
        self._pairs: list[Point] = []
        self._frozen = False
        for first, second in pairs:
            self._append(first, second)

    def _append(self, first: int, second: int) -> None:
        if self._frozen:
            raise TypeError(f"{type(self).__name__} is frozen and can no longer be extended")
        self._pairs.append((int(first), int(second)))

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def pairs(self) -> tuple[Point, ...]:
        return tuple(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[Point]:
        return iter(tuple(self._pairs))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._pairs == other._pairs  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, tuple(self._pairs)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._pairs!r})"


class ClickPassword(_PairSequence):
    """Ordered click-points ``(x, y)`` of one graphical password."""

    __slots__ = ()

    def add_click_point(self, x: int, y: int) -> None:
        self._append(x, y)

    def click_point(self, index: int) -> Point:
        return self._pairs[index]

    @property
    def points(self) -> tuple[Point, ...]:
        return self.pairs


class CognometricGroupedPassword(_PairSequence):
    """Ordered ``(group_id, element_id)`` selections, e.g. one Passfaces login."""

    __slots__ = ()

    def add_element(self, group_id: int, element_id: int) -> None:
        self._append(group_id, element_id)

    def element(self, index: int) -> Point | None:
        """Return the ``index``-th selection or ``None`` when out of range."""

        if index < 0 or index >= len(self._pairs):
            return None
        return self._pairs[index]

    @property
    def elements(self) -> tuple[Point, ...]:
        return self.pairs


Record: TypeAlias = str | ClickPassword | CognometricGroupedPassword


def max_length(records: Sequence[Record]) -> int:
    """Longest record length; 0 for an empty dataset."""

    longest = 0
    for record in records:
        longest = max(longest, len(record))
    return longest


_PARAMETER_COUNT: dict[PasswordType, int] = {
    PasswordType.TEXT: 0,
    PasswordType.GRAPHICAL_CLICK: 3,
    PasswordType.GRAPHICAL_COGNOMETRIC_GROUP: 2,
}

_RECORD_CLASS: dict[PasswordType, type] = {
    PasswordType.TEXT: str,
    PasswordType.GRAPHICAL_CLICK: ClickPassword,
    PasswordType.GRAPHICAL_COGNOMETRIC_GROUP: CognometricGroupedPassword,
}


@dataclass(frozen=True, slots=True)
class InputDescriptor:
    """Parsed dataset: type tag, integer parameters and typed records.

    Records are frozen on construction; estimators only ever read them.
    """

    password_type: PasswordType
    parameters: tuple[int, ...] = ()
    records: tuple[Record, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(int(item) for item in self.parameters))
        object.__setattr__(self, "records", tuple(self.records))
        for record in self.records:
            if isinstance(record, _PairSequence):
                record.freeze()

    @property
    def max_length(self) -> int:
        return max_length(self.records)

    def validate(self) -> InputDescriptor:
        """Check tag conformance and parameter bounds; return ``self`` when valid."""

        if self.password_type is PasswordType.MALFORMATTED:
            _fail("password_type", "malformatted password files cannot be estimated")

        expected_count = _PARAMETER_COUNT[self.password_type]
        if len(self.parameters) != expected_count:
            _fail(
                "parameters",
                f"{self.password_type} expects {expected_count} parameters, "
                f"got {len(self.parameters)}",
            )
        for index, value in enumerate(self.parameters):
            if value <= 0:
                _fail(f"parameters[{index}]", "must be > 0")

        if self.password_type is PasswordType.GRAPHICAL_CLICK:
            x_max, y_max, tolerance = self.parameters
            if tolerance > min(x_max, y_max):
                _fail("parameters[2]", "tolerance must not exceed the canvas size")

        record_class = _RECORD_CLASS[self.password_type]
        for index, record in enumerate(self.records):
            if not isinstance(record, record_class):
                _fail(
                    f"records[{index}]",
                    f"expected {record_class.__name__}, got {type(record).__name__}",
                )
            if isinstance(record, ClickPassword):
                _validate_click(record, self.parameters, f"records[{index}]")
            elif isinstance(record, CognometricGroupedPassword):
                _validate_cognometric(record, self.parameters, f"records[{index}]")
        return self


def _validate_click(record: ClickPassword, parameters: tuple[int, ...], path: str) -> None:
    x_max, y_max, _tolerance = parameters
    for position, (x, y) in enumerate(record):
        if not 1 <= x <= x_max or not 1 <= y <= y_max:
            _fail(f"{path}[{position}]", f"click-point ({x},{y}) lies outside the canvas")


def _validate_cognometric(
    record: CognometricGroupedPassword, parameters: tuple[int, ...], path: str
) -> None:
    groups, elements = parameters
    for position, (group_id, element_id) in enumerate(record):
        if not 0 <= group_id < groups:
            _fail(f"{path}[{position}]", f"group id {group_id} outside [0, {groups})")
        if not 0 <= element_id < elements:
            _fail(f"{path}[{position}]", f"element id {element_id} outside [0, {elements})")


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
