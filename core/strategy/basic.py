"""Basic strategy advice for the current decision."""

from dataclasses import dataclass
from enum import Enum, auto

from core.cards import Card, Rank
from core.hand import Hand


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Tip:
    """A recommended action with its explanation."""

    situation: str
    action: Action
    reason: str


def _upcard_label(upcard: Card) -> str:
    return "A" if upcard.is_ace else str(upcard.value)


class BasicStrategy:
    """
    Basic strategy advisor.

    Checks pairs, then soft totals, then hard totals; the first rule that
    matches gives the advice. The dealer's Ace counts as 11 when comparing
    upcards. Advice never changes table state.
    """

    def advise(
        self,
        hand: Hand,
        upcard: Card,
        can_double: bool = False,
        can_split: bool = False,
    ) -> Tip:
        """
        Recommend an action.

        Args:
            hand: The player's active hand
            upcard: Dealer's face-up card
            can_double: Whether doubling is legal right now
            can_split: Whether splitting is legal right now

        Returns:
            The recommended action
        """
        dealer = upcard.value
        label = _upcard_label(upcard)

        if can_split:
            tip = self._pair_tip(hand, dealer, label)
            if tip is not None:
                return tip

        if hand.is_soft:
            return self._soft_tip(hand.score, dealer, label, can_double)

        return self._hard_tip(hand.score, dealer, label, can_double)

    def _pair_tip(self, hand: Hand, dealer: int, label: str) -> Tip | None:
        """Split advice, or None when the pair should be played as a total."""
        rank = hand.cards[0].rank
        value = rank.values[0]
        name = str(rank)
        situation = f"Pair of {name}s vs dealer {label}"

        if rank == Rank.ACE:
            return Tip(f"Pair of Aces vs dealer {label}", Action.SPLIT, "Always split Aces.")
        if value == 8:
            return Tip(situation, Action.SPLIT, "Always split 8s; 16 is the worst hand.")
        if value == 9 and dealer != 7 and dealer < 10:
            return Tip(situation, Action.SPLIT, "Split 9s vs dealer 2-6 and 8-9.")
        if value in (2, 3, 7) and 2 <= dealer <= 7:
            return Tip(situation, Action.SPLIT, f"Split {name}s vs dealer 2-7.")
        if value == 6 and 2 <= dealer <= 6:
            return Tip(situation, Action.SPLIT, "Split 6s vs dealer 2-6.")
        # Tens, fives and fours play as hard totals.
        return None

    def _soft_tip(self, score: int, dealer: int, label: str, can_double: bool) -> Tip:
        situation = f"Soft {score} vs dealer {label}"

        if score >= 19:
            return Tip(situation, Action.STAND, f"Soft {score} is strong; always stand.")
        if score == 18:
            if can_double and 3 <= dealer <= 6:
                return Tip(situation, Action.DOUBLE, "Soft 18 doubles vs dealer 3-6.")
            if dealer >= 9:
                return Tip(situation, Action.HIT, "Soft 18 hits vs dealer 9, 10, A.")
            return Tip(situation, Action.STAND, "Soft 18 stands vs dealer 2, 7, 8.")
        if score == 17:
            if can_double and 3 <= dealer <= 6:
                return Tip(situation, Action.DOUBLE, "Soft 17 doubles vs dealer 3-6.")
            return Tip(situation, Action.HIT, "Soft 17 always hits otherwise.")
        if score in (15, 16):
            if can_double and 4 <= dealer <= 6:
                return Tip(situation, Action.DOUBLE, f"Soft {score} doubles vs dealer 4-6.")
            return Tip(situation, Action.HIT, f"Soft {score} hits otherwise.")
        if score in (13, 14):
            if can_double and 5 <= dealer <= 6:
                return Tip(situation, Action.DOUBLE, f"Soft {score} doubles vs dealer 5-6.")
            return Tip(situation, Action.HIT, f"Soft {score} hits otherwise.")
        return Tip(situation, Action.HIT, f"Hit soft {score}.")

    def _hard_tip(self, score: int, dealer: int, label: str, can_double: bool) -> Tip:
        situation = f"Hard {score} vs dealer {label}"

        if score >= 17:
            return Tip(situation, Action.STAND, "Hard 17+ always stands.")
        if score >= 13:
            if dealer <= 6:
                return Tip(situation, Action.STAND, f"Hard {score} stands; dealer is weak (2-6).")
            return Tip(situation, Action.HIT, f"Hard {score} hits; dealer is strong (7+).")
        if score == 12:
            if 4 <= dealer <= 6:
                return Tip(situation, Action.STAND, "Hard 12 stands vs dealer 4-6.")
            return Tip(situation, Action.HIT, "Hard 12 hits vs dealer 2-3 and 7+.")
        if score == 11:
            action = Action.DOUBLE if can_double else Action.HIT
            return Tip(situation, action, "Hard 11 is the best doubling hand in the game.")
        if score == 10:
            if dealer <= 9:
                action = Action.DOUBLE if can_double else Action.HIT
                return Tip(situation, action, "Double 10 vs dealer 2-9.")
            return Tip(situation, Action.HIT, "Hit 10 vs dealer 10 or A.")
        if score == 9:
            if can_double and 3 <= dealer <= 6:
                return Tip(situation, Action.DOUBLE, "Double 9 vs dealer 3-6.")
            return Tip(situation, Action.HIT, "Hit 9 vs dealer 2 and 7+.")
        return Tip(situation, Action.HIT, f"Always hit {score} or less.")
