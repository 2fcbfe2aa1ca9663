"""Settlement of player hands against the dealer."""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from core.hand import Hand


class Outcome(Enum):
    """Result of a settled hand or round."""

    BLACKJACK = "blackjack"
    WIN = "win"
    PUSH = "push"
    LOSS = "loss"

    @property
    def is_win(self) -> bool:
        return self in (Outcome.BLACKJACK, Outcome.WIN)


@dataclass(frozen=True)
class Settlement:
    """Outcome of one hand and the amount returned to the bankroll."""

    outcome: Outcome
    payout: int


def resolve_hand(hand: Hand, dealer: Hand) -> Settlement:
    """
    Settle one player hand against the dealer.

    The bet was taken from the bankroll when it was placed, so ``payout``
    is the full amount handed back: the stake plus any winnings. Rules are
    checked in order and the first match wins.
    """
    bet = hand.bet

    if hand.is_bust:
        return Settlement(Outcome.LOSS, 0)

    player_bj = hand.is_blackjack
    dealer_bj = dealer.is_blackjack

    if player_bj and dealer_bj:
        return Settlement(Outcome.PUSH, bet)
    if player_bj:
        # 3:2, odd chips rounded down
        return Settlement(Outcome.BLACKJACK, bet + (bet * 3) // 2)
    if dealer_bj:
        return Settlement(Outcome.LOSS, 0)
    if dealer.is_bust:
        return Settlement(Outcome.WIN, bet * 2)
    if hand.score > dealer.score:
        return Settlement(Outcome.WIN, bet * 2)
    if hand.score == dealer.score:
        return Settlement(Outcome.PUSH, bet)
    return Settlement(Outcome.LOSS, 0)


def round_outcome(outcomes: Sequence[Outcome]) -> Outcome:
    """
    Summarize a round for display and progression.

    A single hand keeps its own outcome. With split hands any win counts
    the round as a win even if the money nets out flat or negative, so
    this is a display label and not a statement of the bankroll change.
    """
    if not outcomes:
        raise ValueError("A round needs at least one settled hand")
    if len(outcomes) == 1:
        return outcomes[0]
    if all(outcome == Outcome.LOSS for outcome in outcomes):
        return Outcome.LOSS
    if all(outcome == Outcome.PUSH for outcome in outcomes):
        return Outcome.PUSH
    if any(outcome.is_win for outcome in outcomes):
        return Outcome.WIN
    return Outcome.PUSH
