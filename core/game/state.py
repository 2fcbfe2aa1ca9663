"""Round phases and the state held between actions."""

from dataclasses import dataclass, field
from enum import Enum

from core.hand import Hand


class Phase(Enum):
    """
    Round phases.

    Flow: BETTING → DEALING → PLAYER_TURN → DEALER_TURN → RESULT → BETTING
    """

    BETTING = "betting"
    DEALING = "dealing"
    PLAYER_TURN = "player-turn"
    DEALER_TURN = "dealer-turn"
    RESULT = "result"

    def __str__(self) -> str:
        return self.value


@dataclass
class RoundState:
    """
    Table state owned by a single engine.

    Player hands exist only from the deal until the next betting phase.
    """

    bankroll: int = 1000
    current_bet: int = 0
    last_bet: int = 0
    player_hands: list[Hand] = field(default_factory=list)
    active_hand_index: int = 0
    dealer_hand: Hand | None = None

    @property
    def active_hand(self) -> Hand | None:
        if 0 <= self.active_hand_index < len(self.player_hands):
            return self.player_hands[self.active_hand_index]
        return None

    @property
    def total_wagered(self) -> int:
        return sum(hand.bet for hand in self.player_hands)

    def clear_table(self) -> None:
        """Drop the hands of the finished round."""
        self.player_hands = []
        self.active_hand_index = 0
        self.dealer_hand = None
