"""Shannon entropy of text passwords decomposed by character class.

Follows Shay et al., "Encountering Stronger Password Requirements" (SOUPS
2010): the entropy of a password set is the sum of the entropy of the
length distribution and, per character class, the entropy of how many
characters of the class a password holds, where they are placed and which
characters are chosen. For lower-case letters only the choice contributes;
count and placement are fixed once the other three classes are known.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from enes.domain.models import PasswordType, max_length
from enes.estimators.base import MetricEstimator, format_double, join_blocks
from enes.metrics.common import shannon, total

if TYPE_CHECKING:
    from typing import TextIO


class CharacterClass(StrEnum):
    DIGIT = "digit"
    SYMBOL = "symbol"
    UPPER = "upper"
    LOWER = "lower"


def _is_digit(char: str) -> bool:
    return char.isdecimal()


def _is_upper(char: str) -> bool:
    return char.isupper()


def _is_lower(char: str) -> bool:
    return char.islower()


def _is_symbol(char: str) -> bool:
    return not (_is_digit(char) or _is_upper(char) or _is_lower(char))


CLASS_PREDICATES: dict[CharacterClass, Callable[[str], bool]] = {
    CharacterClass.DIGIT: _is_digit,
    CharacterClass.SYMBOL: _is_symbol,
    CharacterClass.UPPER: _is_upper,
    CharacterClass.LOWER: _is_lower,
}


def classify(char: str) -> CharacterClass:
    """Return the character class of a single code point."""

    for character_class, predicate in CLASS_PREDICATES.items():
        if predicate(char):
            return character_class
    return CharacterClass.SYMBOL


@dataclass(frozen=True, slots=True)
class TextEntropyResult:
    """The eleven entropy contributions, in report order."""

    length: float
    digit_amount: float
    digit_placement: float
    digit_type: float
    symbol_amount: float
    symbol_placement: float
    symbol_type: float
    upper_amount: float
    upper_placement: float
    upper_type: float
    lower_type: float

    def contributions(self) -> tuple[float, ...]:
        return (
            self.length,
            self.digit_amount,
            self.digit_placement,
            self.digit_type,
            self.symbol_amount,
            self.symbol_placement,
            self.symbol_type,
            self.upper_amount,
            self.upper_placement,
            self.upper_type,
            self.lower_type,
        )

    @property
    def total(self) -> float:
        return float(total(self.contributions()))


def length_entropy(passwords: Sequence[str], longest: int) -> float:
    lengths = [0] * (longest + 1)
    for password in passwords:
        lengths[len(password)] += 1
    return shannon(lengths)


def amount_entropy(
    passwords: Sequence[str], longest: int, predicate: Callable[[str], bool]
) -> float:
    """Entropy of the per-password count of characters matching ``predicate``."""

    amounts = [0] * (longest + 1)
    for password in passwords:
        amounts[sum(1 for char in password if predicate(char))] += 1
    return shannon(amounts)


def placement_entropy(
    passwords: Sequence[str], longest: int, predicate: Callable[[str], bool]
) -> float:
    """Entropy of the positions at which matching characters occur."""

    placements = [0] * (longest + 1)
    for password in passwords:
        for position, char in enumerate(password):
            if predicate(char):
                placements[position] += 1
    return shannon(placements)


def in_class_entropy(passwords: Sequence[str], predicate: Callable[[str], bool]) -> float:
    """Entropy of the choice of character within a class across the whole dataset."""

    tally: Counter[str] = Counter()
    for password in passwords:
        tally.update(char for char in password if predicate(char))
    return shannon(list(tally.values()))


class TextEntropyEstimator(MetricEstimator[str]):
    """Character-class Shannon entropy over text passwords."""

    overall_label = "Entropy Total"

    def __init__(self, *, error_sink: TextIO | None = None) -> None:
        super().__init__(error_sink=error_sink)
        self._result: TextEntropyResult | None = None

    def expected_type(self) -> PasswordType:
        return PasswordType.TEXT

    @property
    def result(self) -> TextEntropyResult | None:
        return self._result

    def _compute(self, records: Sequence[str], parameters: Sequence[int]) -> TextEntropyResult:
        longest = max_length(records)
        digit = CLASS_PREDICATES[CharacterClass.DIGIT]
        symbol = CLASS_PREDICATES[CharacterClass.SYMBOL]
        upper = CLASS_PREDICATES[CharacterClass.UPPER]
        lower = CLASS_PREDICATES[CharacterClass.LOWER]

        self._result = TextEntropyResult(
            length=length_entropy(records, longest),
            digit_amount=amount_entropy(records, longest, digit),
            digit_placement=placement_entropy(records, longest, digit),
            digit_type=in_class_entropy(records, digit),
            symbol_amount=amount_entropy(records, longest, symbol),
            symbol_placement=placement_entropy(records, longest, symbol),
            symbol_type=in_class_entropy(records, symbol),
            upper_amount=amount_entropy(records, longest, upper),
            upper_placement=placement_entropy(records, longest, upper),
            upper_type=in_class_entropy(records, upper),
            lower_type=in_class_entropy(records, lower),
        )
        return self._result

    def _verbose_lines(self) -> list[str]:
        result = self._require_result()
        blocks: list[list[str]] = [[f"Length: {format_double(result.length)}"]]
        for label, amount, placement, kind in (
            ("Number", result.digit_amount, result.digit_placement, result.digit_type),
            ("Symbol", result.symbol_amount, result.symbol_placement, result.symbol_type),
            ("Uppercase", result.upper_amount, result.upper_placement, result.upper_type),
        ):
            blocks.append(
                [
                    f"{label} Amount: {format_double(amount)}",
                    f"{label} Placement: {format_double(placement)}",
                    f"{label} Type: {format_double(kind)}",
                    f"{label} Total: {format_double(amount + placement + kind)}",
                ]
            )
        blocks.append(
            [
                f"Lowercase Type: {format_double(result.lower_type)}",
                f"Lowercase Total: {format_double(result.lower_type)}",
            ]
        )
        blocks.append([f"{self.overall_label}: {format_double(result.total)}"])
        return join_blocks(blocks)

    def _short_lines(self) -> list[str]:
        return [f"{self.overall_label}: {format_double(self._require_result().total)}"]

    def result_payload(self) -> dict[str, object]:
        result = self._require_result()
        return {
            "length": result.length,
            "digit": {
                "amount": result.digit_amount,
                "placement": result.digit_placement,
                "type": result.digit_type,
            },
            "symbol": {
                "amount": result.symbol_amount,
                "placement": result.symbol_placement,
                "type": result.symbol_type,
            },
            "upper": {
                "amount": result.upper_amount,
                "placement": result.upper_placement,
                "type": result.upper_type,
            },
            "lower": {"type": result.lower_type},
            "total": result.total,
        }

    def _require_result(self) -> TextEntropyResult:
        if self._result is None:
            raise RuntimeError("calculate() must run before the result is read")
        return self._result


__all__ = [
    "CLASS_PREDICATES",
    "CharacterClass",
    "TextEntropyEstimator",
    "TextEntropyResult",
    "amount_entropy",
    "classify",
    "in_class_entropy",
    "length_entropy",
    "placement_entropy",
]
