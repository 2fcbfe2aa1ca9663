"""Card and Shoe classes."""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from random import Random
from typing import Iterator

logger = logging.getLogger(__name__)

# A deal never starts from a shoe holding fewer cards than one full deck.
RESHUFFLE_THRESHOLD = 52


class Suit(Enum):
    """Card suits."""

    SPADES = auto()
    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }
        return symbols[self]

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def values(self) -> tuple[int, ...]:
        """All point values the rank can take (Ace = 1 or 11)."""
        if self == Rank.ACE:
            return (1, 11)
        if self.value >= 10:
            return (10,)
        return (self.value,)

    @property
    def blackjack_value(self) -> int:
        """Return the default point value (Ace = 11, face cards = 10)."""
        return max(self.values)


_RANK_CODES = {str(rank): rank for rank in Rank} | {"T": Rank.TEN}
_SUIT_CODES = {
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
}


@dataclass(frozen=True, slots=True)
class Card:
    """
    Playing card.

    Rank and suit never change. ``face_down`` only ever goes from True to
    False through :meth:`reveal`; a card is never hidden again.
    """

    rank: Rank
    suit: Suit
    face_down: bool = field(default=False, compare=False)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        hidden = ", face_down" if self.face_down else ""
        return f"Card({self.rank.name}, {self.suit.name}{hidden})"

    @property
    def value(self) -> int:
        """Return the default point value (Ace = 11)."""
        return self.rank.blackjack_value

    @property
    def values(self) -> tuple[int, ...]:
        return self.rank.values

    @property
    def is_ace(self) -> bool:
        return self.rank == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.rank.values == (10,)

    def reveal(self) -> None:
        """Turn the card face up."""
        object.__setattr__(self, "face_down", False)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh', '10D'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str, suit_str = s[:-1], s[-1]
        if rank_str not in _RANK_CODES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_CODES[rank_str], _SUIT_CODES[suit_str])


class Shoe:
    """A multi-deck shoe, shuffled on build and on every rebuild."""

    def __init__(self, num_decks: int = 6, rng: Random | None = None) -> None:
        """
        Initialize and shuffle a shoe.

        Args:
            num_decks: Number of 52-card decks in the shoe
            rng: Random number generator used for shuffling
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self._rebuilds = 0
        self.rebuild()

    def rebuild(self) -> None:
        """Replace the pool with fresh decks and shuffle them."""
        self._cards = [
            Card(rank, suit)
            for _ in range(self._num_decks)
            for suit in Suit
            for rank in Rank
        ]
        # Random.shuffle is an in-place Fisher-Yates permutation.
        self._rng.shuffle(self._cards)
        self._rebuilds += 1
        logger.info("Shoe rebuilt with %d decks", self._num_decks)

    def deal(self, face_down: bool = False) -> Card:
        """Deal the top card, rebuilding first if the shoe runs low."""
        if self.needs_rebuild:
            self.rebuild()
        card = self._cards.pop()
        if face_down:
            card = replace(card, face_down=True)
        return card

    @property
    def needs_rebuild(self) -> bool:
        """Check whether the next deal will rebuild the shoe."""
        return len(self._cards) < RESHUFFLE_THRESHOLD

    @property
    def rebuilds(self) -> int:
        """Return how many times the shoe has been built."""
        return self._rebuilds

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def total_cards(self) -> int:
        return self._num_decks * 52

    @property
    def num_decks(self) -> int:
        return self._num_decks

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
