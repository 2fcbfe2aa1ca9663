"""Core blackjack rules engine - 100% UI-agnostic."""

from core.cards import Card, Shoe, Rank, Suit
from core.hand import Hand
from core.exceptions import InvalidActionError, InvalidBetError, TableError

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "InvalidActionError",
    "InvalidBetError",
    "TableError",
]
