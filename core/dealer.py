"""Dealer drawing policy."""

from core.hand import Hand
from core.strategy.basic import Action


def dealer_decision(hand: Hand) -> Action:
    """
    Decide the dealer's next move: hit below 17 and on soft 17.

    Must be applied after the hole card is revealed.
    """
    score = hand.score
    if score < 17:
        return Action.HIT
    if score == 17 and hand.is_soft:
        return Action.HIT
    return Action.STAND
