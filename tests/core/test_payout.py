"""Tests for hand settlement."""

import pytest

from core.payout import Outcome, Settlement, resolve_hand, round_outcome
from helpers import make_hand


class TestResolveHand:
    """Tests for resolve_hand precedence."""

    def test_player_bust_loses_even_if_dealer_busts(self):
        player = make_hand("10S 6H KC", bet=100)
        dealer = make_hand("10D 6C QH")
        assert resolve_hand(player, dealer) == Settlement(Outcome.LOSS, 0)

    def test_double_blackjack_pushes(self):
        player = make_hand("AS KH", bet=100)
        dealer = make_hand("AD QC")
        assert resolve_hand(player, dealer) == Settlement(Outcome.PUSH, 100)

    def test_blackjack_pays_three_to_two(self):
        player = make_hand("AS KH", bet=100)
        dealer = make_hand("9D 8C")
        assert resolve_hand(player, dealer) == Settlement(Outcome.BLACKJACK, 250)

    @pytest.mark.parametrize("bet, payout", [(10, 25), (15, 37), (25, 62), (50, 125)])
    def test_blackjack_payout_rounds_down(self, bet, payout):
        player = make_hand("AS KH", bet=bet)
        dealer = make_hand("10D 7C")
        assert resolve_hand(player, dealer).payout == payout

    def test_blackjack_beats_dealer_three_card_21(self):
        player = make_hand("AS KH", bet=20)
        dealer = make_hand("7D 7C 7H")
        assert resolve_hand(player, dealer).outcome == Outcome.BLACKJACK

    def test_dealer_blackjack_beats_player_21(self):
        player = make_hand("7S 7H 7C", bet=100)
        dealer = make_hand("AD KC")
        assert resolve_hand(player, dealer) == Settlement(Outcome.LOSS, 0)

    def test_dealer_bust_pays_even_money(self):
        player = make_hand("10S 2H", bet=100)
        dealer = make_hand("10D 6C 9H")
        assert resolve_hand(player, dealer) == Settlement(Outcome.WIN, 200)

    def test_higher_score_wins(self):
        player = make_hand("10S 9H", bet=40)
        dealer = make_hand("10D 8C")
        assert resolve_hand(player, dealer) == Settlement(Outcome.WIN, 80)

    def test_equal_scores_push(self):
        player = make_hand("10S 8H", bet=40)
        dealer = make_hand("10D 8C")
        assert resolve_hand(player, dealer) == Settlement(Outcome.PUSH, 40)

    def test_lower_score_loses(self):
        player = make_hand("10S 7H", bet=40)
        dealer = make_hand("10D 8C")
        assert resolve_hand(player, dealer) == Settlement(Outcome.LOSS, 0)

    def test_split_aces_21_is_not_paid_as_blackjack(self):
        player = make_hand("AS KH", bet=50, split_aces=True)
        dealer = make_hand("10D 8C")
        assert resolve_hand(player, dealer) == Settlement(Outcome.WIN, 100)

    def test_split_aces_21_loses_to_dealer_blackjack(self):
        player = make_hand("AS KH", bet=50, split_aces=True)
        dealer = make_hand("AD QC")
        assert resolve_hand(player, dealer).outcome == Outcome.LOSS


class TestRoundOutcome:
    """Tests for the round-level summary."""

    def test_single_hand_keeps_its_outcome(self):
        for outcome in Outcome:
            assert round_outcome([outcome]) == outcome

    def test_all_losses(self):
        assert round_outcome([Outcome.LOSS, Outcome.LOSS]) == Outcome.LOSS

    def test_all_pushes(self):
        assert round_outcome([Outcome.PUSH, Outcome.PUSH]) == Outcome.PUSH

    def test_any_win_is_a_win(self):
        assert round_outcome([Outcome.WIN, Outcome.LOSS]) == Outcome.WIN
        assert round_outcome([Outcome.BLACKJACK, Outcome.LOSS, Outcome.LOSS]) == Outcome.WIN

    def test_push_and_loss_is_a_push(self):
        assert round_outcome([Outcome.PUSH, Outcome.LOSS]) == Outcome.PUSH

    def test_empty_round_rejected(self):
        with pytest.raises(ValueError):
            round_outcome([])
