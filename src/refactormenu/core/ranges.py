"""Structured helpers for representing line spans."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(slots=True, frozen=True)
class LineRange(Sequence[int]):
    """Line-based span using 1-based, inclusive bounds."""

    first_line: int
    last_line: int

    def __post_init__(self) -> None:
        first = self._coerce_line(self.first_line, "first_line")
        last = self._coerce_line(self.last_line, "last_line")
        if last < first:
            first, last = last, first
        object.__setattr__(self, "first_line", first)
        object.__setattr__(self, "last_line", last)

    @staticmethod
    def _coerce_line(value: Any, label: str) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"LineRange {label} must be an integer") from exc
        if number < 1:
            return 1
        return number

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> int | tuple[int, ...]:
        if isinstance(index, slice):
            return self.to_tuple()[index]
        if index == 0:
            return self.first_line
        if index == 1:
            return self.last_line
        raise IndexError("LineRange index out of range")

    def __iter__(self) -> Iterator[int]:
        yield self.first_line
        yield self.last_line

    def __contains__(self, line: object) -> bool:
        if not isinstance(line, int) or isinstance(line, bool):
            return False
        return self.first_line <= line <= self.last_line

    @property
    def line_count(self) -> int:
        """Return the number of lines covered by the span (inclusive)."""

        return (self.last_line - self.first_line) + 1

    def to_tuple(self) -> tuple[int, int]:
        """Return the span as a ``(first_line, last_line)`` tuple."""

        return (self.first_line, self.last_line)

    @classmethod
    def from_value(cls, value: Any) -> "LineRange":
        """Coerce ``value`` into a :class:`LineRange`."""

        if isinstance(value, LineRange):
            return value
        if isinstance(value, Mapping):
            first = value.get("first_line")
            last = value.get("last_line")
            if first is None or last is None:
                raise ValueError("LineRange mappings require first_line and last_line")
            return cls(first, last)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) != 2:
                raise ValueError("LineRange sequences must have exactly two entries")
            return cls(seq[0], seq[1])
        raise TypeError("Unsupported LineRange input")


__all__ = ["LineRange"]
