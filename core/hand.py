"""Hand scoring for blackjack."""

from dataclasses import dataclass, field
from typing import Iterator

from core.cards import Card


def _score(cards: list[Card]) -> tuple[int, bool]:
    """
    Score a run of cards.

    Aces count 11 and are demoted to 1 one at a time while the total
    exceeds 21.

    Returns:
        (total, soft) where soft means an Ace still counts as 11
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total, aces > 0 and total <= 21


@dataclass
class Hand:
    """A blackjack hand with score calculation."""

    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    stood: bool = False
    doubled: bool = False
    split_aces: bool = False

    def add(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    @property
    def visible_cards(self) -> list[Card]:
        return [card for card in self.cards if not card.face_down]

    @property
    def score(self) -> int:
        """Best total of the face-up cards."""
        return _score(self.visible_cards)[0]

    @property
    def is_soft(self) -> bool:
        """Check if an Ace is still counted as 11."""
        return _score(self.visible_cards)[1]

    @property
    def is_bust(self) -> bool:
        return self.score > 21

    @property
    def is_blackjack(self) -> bool:
        """
        Check for a natural: two cards totalling 21.

        A 21 made after splitting Aces is a plain 21.
        """
        return len(self.cards) == 2 and self.score == 21 and not self.split_aces

    @property
    def peek_blackjack(self) -> bool:
        """Check for a natural counting face-down cards too."""
        return (
            len(self.cards) == 2
            and _score(self.cards)[0] == 21
            and not self.split_aces
        )

    @property
    def can_split(self) -> bool:
        """Check for a pair: equal ranks, or any two ten-value cards."""
        if len(self.cards) != 2:
            return False
        first, second = self.cards
        return first.rank == second.rank or (first.is_ten_value and second.is_ten_value)

    @property
    def has_hidden(self) -> bool:
        return any(card.face_down for card in self.cards)

    @property
    def score_label(self) -> str:
        """
        Short label for display.

        Soft totals show both readings ("7/17"), naturals show "BJ!" and
        busted hands show the total with "BUST". Only face-up cards count.
        """
        if not self.visible_cards:
            return ""
        if self.is_blackjack:
            return "BJ!"
        if self.is_bust:
            return f"{self.score} BUST"
        if self.is_soft:
            return f"{self.score - 10}/{self.score}"
        return str(self.score)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join("??" if card.face_down else str(card) for card in self.cards)
        return f"{cards_str} ({self.score_label})"
