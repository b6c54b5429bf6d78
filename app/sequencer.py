# app/sequencer.py
"""The HARE / KRISHNA click sequencer.

A two-state machine: the player alternates between the two buttons and every
HARE immediately followed by a KRISHNA completes one pair (one point). Every
click, right or wrong, flips the expectation to the opposite of the button just
pressed, so a wrong click never locks the player out.
"""

from enum import Enum
from typing import Optional

from app.config import PAIRS_PER_MALA


class Symbol(str, Enum):
    HARE = "hare"
    KRISHNA = "krishna"

    @property
    def opposite(self) -> "Symbol":
        return Symbol.KRISHNA if self is Symbol.HARE else Symbol.HARE

    @classmethod
    def parse(cls, value: str) -> "Symbol":
        """Accepts 'hare' / 'krishna' in any case. Raises ValueError otherwise."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown symbol: {value!r}") from None


class ClickSequencer:
    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.score = 0
        self.expecting = Symbol.HARE
        self.last_symbol: Optional[Symbol] = None

    @property
    def mala_count(self) -> int:
        return self.score // PAIRS_PER_MALA

    @property
    def remaining_to_next_mala(self) -> int:
        return PAIRS_PER_MALA - (self.score % PAIRS_PER_MALA)

    def click(self, symbol: Symbol) -> bool:
        """Apply one click. Returns True when the click completed a pair."""
        completed = (
            symbol is self.expecting
            and symbol is Symbol.KRISHNA
            and self.last_symbol is Symbol.HARE
        )
        if completed:
            self.score += 1

        self.last_symbol = symbol
        self.expecting = symbol.opposite
        return completed

    def snapshot(self) -> dict:
        return {
            "score": self.score,
            "expecting": self.expecting.value,
            "lastSymbol": self.last_symbol.value if self.last_symbol else None,
            "malaCount": self.mala_count,
            "toNextMala": self.remaining_to_next_mala,
        }
