"""Builders for scripted hands and tables."""

from random import Random

from core.cards import Card
from core.hand import Hand
from core.game import RoundEngine


class StackedRandom(Random):
    """
    Random whose shuffle puts chosen cards on top of the shoe.

    Cards are given in deal order. The rest of the shoe is shuffled
    normally with a fixed seed.
    """

    def __init__(self, cards: list[Card], seed: int = 7) -> None:
        super().__init__(seed)
        self._top = list(cards)

    def shuffle(self, x: list) -> None:  # type: ignore[override]
        super().shuffle(x)
        for card in self._top:
            x.remove(card)
        # The shoe deals from the end of the list
        x.extend(reversed(self._top))


def cards(text: str) -> list[Card]:
    """Build cards from a string like 'AS KH 10D'."""
    return [Card.from_string(s) for s in text.split()]


def make_hand(text: str, bet: int = 0, **flags: bool) -> Hand:
    """Build a hand from a string like 'AS KH'."""
    return Hand(cards=cards(text), bet=bet, **flags)


def stacked_table(text: str, **kwargs) -> RoundEngine:
    """A table whose shoe deals the given cards first."""
    return RoundEngine(rng=StackedRandom(cards(text)), **kwargs)


def bet(table: RoundEngine, *chips: int) -> None:
    """Place chips and deal."""
    for chip in chips:
        table.add_chip(chip)
    table.deal_round()
