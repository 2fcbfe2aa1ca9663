"""Round engine: the table's state machine."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from random import Random
from typing import Callable, Iterator, NoReturn

from transitions import Machine

from core.cards import Card, Shoe
from core.dealer import dealer_decision
from core.exceptions import InvalidActionError, InvalidBetError, TableError
from core.hand import Hand
from core.payout import Outcome, Settlement, resolve_hand, round_outcome
from core.progression import ProgressionTracker, SessionStats, XPAward
from core.strategy.basic import Action, BasicStrategy, Tip
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import Phase, RoundState

logger = logging.getLogger(__name__)

STARTING_BANKROLL = 1000
CHIP_VALUES: tuple[int, ...] = (10, 20, 50, 100)
MAX_HANDS = 4

RESULT_LABELS = {
    Outcome.BLACKJACK: "BLACKJACK!",
    Outcome.WIN: "YOU WIN!",
    Outcome.PUSH: "PUSH",
    Outcome.LOSS: "YOU LOSE",
}


@dataclass(frozen=True)
class RoundResult:
    """Everything settled at the end of a round."""

    settlements: tuple[Settlement, ...]
    outcome: Outcome
    total_payout: int
    total_wagered: int
    all_bust: bool
    xp: XPAward

    @property
    def net_gain(self) -> int:
        return self.total_payout - self.total_wagered

    @property
    def label(self) -> str:
        if self.outcome == Outcome.LOSS and self.all_bust:
            return "BUST!"
        return RESULT_LABELS[self.outcome]


class RoundEngine:
    """
    Single-table blackjack engine.

    Owns the shoe, the bankroll and the hands of the current round. Every
    public action runs to completion before it returns and reports what
    happened through events; the engine never waits on whoever renders
    them. Rejected requests raise a :class:`~core.exceptions.TableError`
    without touching state.
    """

    STATES = [phase.name.lower() for phase in Phase]

    TRANSITIONS = [
        {"trigger": "place_bet", "source": "betting", "dest": "dealing"},
        {"trigger": "start_player_turn", "source": "dealing", "dest": "player_turn"},
        # Either side holding a natural skips straight to settlement
        {"trigger": "settle_naturals", "source": "dealing", "dest": "result"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "player_busts_all", "source": "player_turn", "dest": "result"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "result"},
        {"trigger": "next_round", "source": "result", "dest": "betting"},
        {"trigger": "restart", "source": "*", "dest": "betting"},
    ]

    def __init__(
        self,
        num_decks: int = 6,
        starting_bankroll: int = STARTING_BANKROLL,
        chip_values: tuple[int, ...] = CHIP_VALUES,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a table.

        Args:
            num_decks: Number of decks in the shoe
            starting_bankroll: Bankroll at the start of every session
            chip_values: Chip denominations accepted while betting
            rng: Random number generator for reproducible shoes
        """
        if starting_bankroll < 0:
            raise ValueError("starting_bankroll cannot be negative")

        self.starting_bankroll = starting_bankroll
        self.chip_values = tuple(chip_values)
        self.shoe = Shoe(num_decks=num_decks, rng=rng)
        self.table = RoundState(bankroll=starting_bankroll)
        self.progression = ProgressionTracker()
        self.advisor = BasicStrategy()
        self.events = EventEmitter()
        self.last_result: RoundResult | None = None
        self._busy = False

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_on_phase_changed",
        )

    @property
    def phase(self) -> Phase:
        """Get the current phase."""
        return Phase[self._machine_state.upper()]  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    # Betting

    def add_chip(self, value: int) -> None:
        """Add a chip to the pending bet."""
        with self._action("add a chip"):
            self._require_phase(Phase.BETTING, "add a chip")
            if value not in self.chip_values:
                self._reject(InvalidBetError, f"Unknown chip value: {value}")
            if self.table.current_bet + value > self.table.bankroll:
                self._reject(InvalidBetError, "Bet cannot exceed the bankroll")
            self.table.current_bet += value
            self._emit_bet()

    def clear_bet(self) -> None:
        """Take the pending bet back."""
        with self._action("clear the bet"):
            self._require_phase(Phase.BETTING, "clear the bet")
            self.table.current_bet = 0
            self._emit_bet()

    def rebet(self) -> None:
        """Set the pending bet to the last bet, capped at the bankroll."""
        with self._action("repeat the bet"):
            self._require_phase(Phase.BETTING, "repeat the bet")
            if self.table.last_bet == 0:
                self._reject(InvalidBetError, "No previous bet to repeat")
            self.table.current_bet = min(self.table.last_bet, self.table.bankroll)
            self._emit_bet()

    def deal_round(self) -> None:
        """Take the pending bet and deal a new round."""
        with self._action("deal"):
            self._require_phase(Phase.BETTING, "deal")
            if self.table.current_bet <= 0:
                self._reject(InvalidBetError, "Place a bet before dealing")
            if self.table.current_bet > self.table.bankroll:
                self._reject(InvalidBetError, "Bet cannot exceed the bankroll")
            self._deal()

    # Player actions

    def player_hit(self) -> None:
        """Draw one card into the active hand."""
        with self._action("hit"):
            hand = self._require_active_hand("hit")
            self._draw(hand)
            self.events.emit_new(
                EventType.PLAYER_HIT,
                hand=self.table.active_hand_index,
                score=hand.score,
            )
            if hand.is_bust:
                self.events.emit_new(EventType.PLAYER_BUSTS, hand=self.table.active_hand_index)
                self._advance()
            elif hand.split_aces:
                self._advance()

    def player_stand(self) -> None:
        """Stand on the active hand."""
        with self._action("stand"):
            hand = self._require_active_hand("stand")
            hand.stood = True
            self.events.emit_new(
                EventType.PLAYER_STAND,
                hand=self.table.active_hand_index,
                score=hand.score,
            )
            self._advance()

    def player_double(self) -> None:
        """Double the active hand's bet and draw exactly one card."""
        with self._action("double"):
            hand = self._require_active_hand("double")
            reason = self._double_blocker(hand)
            if reason is not None:
                self._reject(InvalidActionError, reason)

            self.table.bankroll -= hand.bet
            hand.bet *= 2
            hand.doubled = True
            self._emit_bankroll()

            self._draw(hand)
            index = self.table.active_hand_index
            self.events.emit_new(
                EventType.PLAYER_DOUBLE,
                hand=index,
                bet=hand.bet,
                score=hand.score,
            )
            if hand.is_bust:
                self.events.emit_new(EventType.PLAYER_BUSTS, hand=index)
            self._advance()

    def player_split(self) -> None:
        """Split the active pair into two hands of one card each, then deal to both."""
        with self._action("split"):
            hand = self._require_active_hand("split")
            reason = self._split_blocker(hand)
            if reason is not None:
                self._reject(InvalidActionError, reason)

            table = self.table
            is_aces = hand.cards[0].is_ace
            table.bankroll -= hand.bet
            self._emit_bankroll()

            new_hand = Hand(bet=hand.bet, split_aces=is_aces)
            new_hand.add(hand.cards.pop())
            hand.split_aces = is_aces

            index = table.active_hand_index
            table.player_hands.insert(index + 1, new_hand)
            self.events.emit_new(
                EventType.PLAYER_SPLIT,
                hand=index,
                new_hand=index + 1,
                aces=is_aces,
            )

            self._draw(hand)
            self._draw(new_hand)

            if is_aces:
                # One card each, no further play on either hand
                hand.stood = True
                new_hand.stood = True
                self._advance()

    # Between rounds

    def advance_after_result(self, keep_bet: bool = False) -> None:
        """
        Clear the table and return to betting.

        Args:
            keep_bet: Re-arm the last bet (capped at the bankroll) and deal
                immediately when it is above zero
        """
        with self._action("start the next round"):
            self._require_phase(Phase.RESULT, "start the next round")
            table = self.table
            table.clear_table()
            self.next_round()

            table.current_bet = min(table.last_bet, table.bankroll) if keep_bet else 0
            self._emit_bet()

            if keep_bet and table.current_bet > 0:
                self._deal()

    def get_advisor_tip(self) -> Tip:
        """Basic strategy advice for the active hand."""
        self._require_phase(Phase.PLAYER_TURN, "ask for advice")
        hand = self.table.active_hand
        dealer = self.table.dealer_hand
        if hand is None or dealer is None or not dealer.visible_cards:
            self._reject(InvalidActionError, "No decision to advise on")
        return self.advisor.advise(
            hand,
            dealer.visible_cards[0],
            can_double=self.can_double,
            can_split=self.can_split,
        )

    def reset_session(self) -> None:
        """Restore the starting bankroll and clear statistics and progression."""
        with self._action("reset the session"):
            table = self.table
            table.bankroll = self.starting_bankroll
            table.current_bet = 0
            table.last_bet = 0
            table.clear_table()
            self.progression.reset()
            self.last_result = None

            self.restart()
            self.events.emit_new(EventType.SESSION_RESET, bankroll=table.bankroll)
            self._emit_bankroll()
            self._emit_bet()

    # Round flow

    def _deal(self) -> None:
        table = self.table
        bet = table.current_bet

        table.bankroll -= bet
        table.last_bet = bet
        table.current_bet = 0
        self.events.emit_new(EventType.BET_PLACED, amount=bet)
        self._emit_bankroll()
        self.place_bet()

        hand = Hand(bet=bet)
        dealer = Hand()
        table.player_hands = [hand]
        table.active_hand_index = 0
        table.dealer_hand = dealer

        # Player, dealer, player, dealer hole card
        self._draw(hand)
        self._draw(dealer)
        self._draw(hand)
        self._draw(dealer, face_down=True)

        if hand.is_blackjack or dealer.peek_blackjack:
            self._reveal_dealer()
            self.settle_naturals()
            self._settle()
            return

        self.start_player_turn()
        self.events.emit_new(EventType.ACTIVE_HAND_CHANGED, hand=0)

    def _advance(self) -> None:
        """Move to the next unfinished hand, or on to the dealer."""
        table = self.table
        hands = table.player_hands

        for index in range(table.active_hand_index + 1, len(hands)):
            if not hands[index].stood and not hands[index].is_bust:
                table.active_hand_index = index
                self.events.emit_new(EventType.ACTIVE_HAND_CHANGED, hand=index)
                return

        if all(hand.is_bust for hand in hands):
            # Nothing left for the dealer to beat
            self.player_busts_all()
            self._settle()
            return

        self.player_done()
        self._play_dealer()

    def _play_dealer(self) -> None:
        dealer = self._dealer()
        self._reveal_dealer()

        while dealer_decision(dealer) == Action.HIT:
            self._draw(dealer)
            self.events.emit_new(EventType.DEALER_HITS, score=dealer.score)

        if dealer.is_bust:
            self.events.emit_new(EventType.DEALER_BUSTS, score=dealer.score)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, score=dealer.score)

        self.dealer_done()
        self._settle()

    def _settle(self) -> None:
        """Pay out every hand and record the round."""
        table = self.table
        dealer = self._dealer()
        self._reveal_dealer()

        settlements = []
        for index, hand in enumerate(table.player_hands):
            settlement = resolve_hand(hand, dealer)
            settlements.append(settlement)
            self.events.emit_new(
                EventType.HAND_SETTLED,
                hand=index,
                outcome=settlement.outcome.value,
                bet=hand.bet,
                payout=settlement.payout,
            )

        total_payout = sum(settlement.payout for settlement in settlements)
        table.bankroll += total_payout
        self._emit_bankroll()

        outcome = round_outcome([settlement.outcome for settlement in settlements])
        total_wagered = table.total_wagered
        xp = self.progression.award(outcome, net_gain=total_payout - total_wagered)

        result = RoundResult(
            settlements=tuple(settlements),
            outcome=outcome,
            total_payout=total_payout,
            total_wagered=total_wagered,
            all_bust=all(hand.is_bust for hand in table.player_hands),
            xp=xp,
        )
        self.last_result = result
        logger.debug(
            "Round settled: %s, wagered %d, paid %d, bankroll %d",
            outcome.value,
            total_wagered,
            total_payout,
            table.bankroll,
        )

        self.events.emit_new(
            EventType.XP_AWARDED,
            amount=xp.amount,
            total_xp=xp.total_xp,
            level=xp.new_level.level,
        )
        if xp.leveled_up:
            self.events.emit_new(
                EventType.LEVEL_UP,
                level=xp.new_level.level,
                rank=xp.new_level.rank,
            )

        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.value,
            label=result.label,
            payout=total_payout,
            net=result.net_gain,
            bankroll=table.bankroll,
        )

        if table.bankroll == 0:
            logger.info("Bankroll exhausted")
            self.events.emit_new(EventType.BANKRUPT)

    # Helpers

    def _draw(self, hand: Hand, face_down: bool = False) -> Card:
        """Deal a card from the shoe into a hand."""
        rebuilds = self.shoe.rebuilds
        card = self.shoe.deal(face_down=face_down)
        if self.shoe.rebuilds != rebuilds:
            self.events.emit_new(EventType.SHOE_SHUFFLED, cards=self.shoe.total_cards)

        hand.add(card)
        hand_id = self._hand_id(hand)
        self.events.emit_new(
            EventType.CARD_DEALT,
            hand=hand_id,
            card="??" if face_down else str(card),
            face_down=face_down,
        )
        self._emit_hand(hand_id, hand)
        return card

    def _reveal_dealer(self) -> None:
        dealer = self._dealer()
        if not dealer.has_hidden:
            return
        for card in dealer.cards:
            if card.face_down:
                card.reveal()
                self.events.emit_new(EventType.CARD_REVEALED, hand="dealer", card=str(card))
        self._emit_hand("dealer", dealer)

    def _dealer(self) -> Hand:
        if self.table.dealer_hand is None:
            raise InvalidActionError("No round in progress")
        return self.table.dealer_hand

    def _hand_id(self, hand: Hand) -> int | str:
        if hand is self.table.dealer_hand:
            return "dealer"
        for index, player_hand in enumerate(self.table.player_hands):
            if player_hand is hand:
                return index
        raise ValueError("Hand is not on the table")

    def _double_blocker(self, hand: Hand) -> str | None:
        if len(hand.cards) != 2:
            return "Can only double on two cards"
        if hand.doubled:
            return "Hand is already doubled"
        if self.table.bankroll < hand.bet:
            return "Not enough bankroll to double"
        return None

    def _split_blocker(self, hand: Hand) -> str | None:
        if not hand.can_split:
            return "Hand is not a pair"
        if len(self.table.player_hands) >= MAX_HANDS:
            return f"Cannot play more than {MAX_HANDS} hands"
        if hand.split_aces:
            return "Split Aces cannot be split again"
        if self.table.bankroll < hand.bet:
            return "Not enough bankroll to split"
        return None

    def _require_phase(self, phase: Phase, verb: str) -> None:
        if self.phase != phase:
            self._reject(InvalidActionError, f"Cannot {verb} during {self.phase}")

    def _require_active_hand(self, verb: str) -> Hand:
        self._require_phase(Phase.PLAYER_TURN, verb)
        hand = self.table.active_hand
        if hand is None or hand.stood or hand.is_bust:
            self._reject(InvalidActionError, f"Cannot {verb}: the hand is finished")
        return hand

    def _reject(self, error: type[TableError], message: str) -> NoReturn:
        logger.debug("Rejected in %s: %s", self.phase, message)
        self.events.emit_new(EventType.INVALID_ACTION, message=message, phase=self.phase.value)
        raise error(message)

    @contextmanager
    def _action(self, verb: str) -> Iterator[None]:
        """Run one public action; actions submitted while it runs are refused."""
        if self._busy:
            self._reject(InvalidActionError, f"Cannot {verb}: another action is in progress")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _on_phase_changed(self) -> None:
        logger.debug("Phase -> %s", self.phase)
        self.events.emit_new(EventType.PHASE_CHANGED, phase=self.phase.value)

    def _emit_bet(self) -> None:
        self.events.emit_new(
            EventType.BET_CHANGED,
            current_bet=self.table.current_bet,
            bankroll=self.table.bankroll,
        )

    def _emit_bankroll(self) -> None:
        self.events.emit_new(EventType.BANKROLL_CHANGED, bankroll=self.table.bankroll)

    def _emit_hand(self, hand_id: int | str, hand: Hand) -> None:
        self.events.emit_new(
            EventType.HAND_UPDATED,
            hand=hand_id,
            score=hand.score,
            label=hand.score_label,
        )

    # Read-only view

    @property
    def bankroll(self) -> int:
        return self.table.bankroll

    @property
    def current_bet(self) -> int:
        return self.table.current_bet

    @property
    def last_bet(self) -> int:
        return self.table.last_bet

    @property
    def player_hands(self) -> list[Hand]:
        return self.table.player_hands

    @property
    def active_hand_index(self) -> int:
        return self.table.active_hand_index

    @property
    def active_hand(self) -> Hand | None:
        if self.phase != Phase.PLAYER_TURN:
            return None
        return self.table.active_hand

    @property
    def dealer_hand(self) -> Hand | None:
        return self.table.dealer_hand

    @property
    def stats(self) -> SessionStats:
        return self.progression.stats

    @property
    def is_bankrupt(self) -> bool:
        # Mid-round the stake is out of the bankroll but not yet lost
        return self.table.bankroll == 0 and self.phase in (Phase.BETTING, Phase.RESULT)

    @property
    def can_hit(self) -> bool:
        hand = self.active_hand
        return hand is not None and not hand.stood and not hand.is_bust

    @property
    def can_stand(self) -> bool:
        return self.can_hit

    @property
    def can_double(self) -> bool:
        hand = self.active_hand
        if hand is None or hand.stood or hand.is_bust:
            return False
        return self._double_blocker(hand) is None

    @property
    def can_split(self) -> bool:
        hand = self.active_hand
        if hand is None or hand.stood or hand.is_bust:
            return False
        return self._split_blocker(hand) is None

    @property
    def can_rebet(self) -> bool:
        return self.table.last_bet > 0 and self.table.bankroll >= self.table.last_bet
