"""Core text and range helpers shared by the menu and the editor host."""

from .ranges import LineRange
from .text_diff import DiffResult, first_differing_line, first_divergent_line
from .text_format import collapse_whitespace, ellipsize

__all__ = [
    "DiffResult",
    "LineRange",
    "collapse_whitespace",
    "ellipsize",
    "first_differing_line",
    "first_divergent_line",
]
