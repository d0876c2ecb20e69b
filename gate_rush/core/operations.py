"""
Gate Operations
===============

The four arithmetic operations a gate can carry.
"""

from __future__ import annotations

from enum import Enum


class FeedbackKind(Enum):
    """Presentation category for a scored gate."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    MULTIPLY = "multiply"


class GateOperation(Enum):
    """Arithmetic operation carried by a gate, keyed by its display symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "x"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def feedback_kind(self) -> FeedbackKind:
        """Which feedback burst presentation should show for this operation."""
        if self is GateOperation.ADD:
            return FeedbackKind.POSITIVE
        if self is GateOperation.MULTIPLY:
            return FeedbackKind.MULTIPLY
        return FeedbackKind.NEGATIVE

    def label(self, value: int) -> str:
        """Gate caption, e.g. ``+5`` or ``x3``."""
        return f"{self.symbol}{value}"

    @classmethod
    def from_symbol(cls, symbol: str) -> "GateOperation":
        """
        Look up an operation by symbol.

        Accepts the canonical symbols plus ``*`` and ``÷`` as aliases.

        Raises:
            ValueError: If the symbol is not a known operation.
        """
        aliases = {"*": cls.MULTIPLY, "÷": cls.DIVIDE}
        if symbol in aliases:
            return aliases[symbol]
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown gate operation: {symbol!r}") from None


# Stable integer ids for numpy observations
OPERATION_IDS = {op: i for i, op in enumerate(GateOperation)}
