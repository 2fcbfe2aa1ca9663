"""Tests for basic strategy advice."""

import pytest

from core.cards import Card
from core.strategy import Action
from helpers import make_hand


UPCARDS = ["2C", "3C", "4C", "5C", "6C", "7C", "8C", "9C", "KC", "AC"]


def upcard(text: str) -> Card:
    return Card.from_string(text)


class TestPairs:
    """Tests for split advice."""

    def test_aces_always_split(self, advisor):
        for up in UPCARDS:
            tip = advisor.advise(make_hand("AS AH"), upcard(up), can_double=True, can_split=True)
            assert tip.action == Action.SPLIT
            assert tip.situation.startswith("Pair of Aces")

    def test_eights_always_split(self, advisor):
        for up in UPCARDS:
            tip = advisor.advise(make_hand("8S 8H"), upcard(up), can_double=True, can_split=True)
            assert tip.action == Action.SPLIT

    def test_eights_vs_six(self, advisor):
        tip = advisor.advise(make_hand("8S 8H"), upcard("6C"), can_double=True, can_split=True)
        assert tip.action == Action.SPLIT
        assert tip.situation == "Pair of 8s vs dealer 6"
        assert "16" in tip.reason

    def test_nines_stand_vs_seven(self, advisor):
        """9s vs 7 fall through to a hard 18."""
        tip = advisor.advise(make_hand("9S 9H"), upcard("7C"), can_split=True)
        assert tip.action == Action.STAND
        assert tip.situation == "Hard 18 vs dealer 7"

    @pytest.mark.parametrize("up", ["2C", "6C", "8C", "9C"])
    def test_nines_split(self, advisor, up):
        tip = advisor.advise(make_hand("9S 9H"), upcard(up), can_split=True)
        assert tip.action == Action.SPLIT

    @pytest.mark.parametrize("up", ["KC", "AC"])
    def test_nines_stand_vs_ten_and_ace(self, advisor, up):
        tip = advisor.advise(make_hand("9S 9H"), upcard(up), can_split=True)
        assert tip.action == Action.STAND

    def test_tens_never_split(self, advisor):
        for up in UPCARDS:
            tip = advisor.advise(make_hand("KS QH"), upcard(up), can_double=True, can_split=True)
            assert tip.action == Action.STAND

    def test_fives_play_as_ten(self, advisor):
        tip = advisor.advise(make_hand("5S 5H"), upcard("6C"), can_double=True, can_split=True)
        assert tip.action == Action.DOUBLE
        assert tip.situation == "Hard 10 vs dealer 6"

    @pytest.mark.parametrize("pair", ["2S 2H", "3S 3H", "7S 7H"])
    def test_low_pairs_split_vs_two_to_seven(self, advisor, pair):
        assert advisor.advise(make_hand(pair), upcard("7C"), can_split=True).action == Action.SPLIT
        assert advisor.advise(make_hand(pair), upcard("8C"), can_split=True).action != Action.SPLIT

    def test_sixes_split_vs_two_to_six(self, advisor):
        assert advisor.advise(make_hand("6S 6H"), upcard("6C"), can_split=True).action == Action.SPLIT
        assert advisor.advise(make_hand("6S 6H"), upcard("7C"), can_split=True).action == Action.HIT

    def test_pair_not_split_when_split_is_illegal(self, advisor):
        tip = advisor.advise(make_hand("8S 8H"), upcard("6C"), can_split=False)
        assert tip.action == Action.STAND
        assert tip.situation == "Hard 16 vs dealer 6"

    def test_unsplittable_aces_play_as_soft_12(self, advisor):
        tip = advisor.advise(make_hand("AS AH"), upcard("6C"), can_split=False)
        assert tip.action == Action.HIT
        assert tip.situation == "Soft 12 vs dealer 6"


class TestSoftTotals:
    """Tests for soft hand advice."""

    @pytest.mark.parametrize("hand", ["AS 8H", "AS 9H", "AS 2H 7C"])
    def test_soft_19_plus_stands(self, advisor, hand):
        for up in UPCARDS:
            assert advisor.advise(make_hand(hand), upcard(up), can_double=True).action == Action.STAND

    @pytest.mark.parametrize(
        "up, can_double, expected",
        [
            ("2C", True, Action.STAND),
            ("4C", True, Action.DOUBLE),
            ("4C", False, Action.STAND),
            ("7C", True, Action.STAND),
            ("8C", True, Action.STAND),
            ("9C", True, Action.HIT),
            ("KC", True, Action.HIT),
            ("AC", True, Action.HIT),
        ],
    )
    def test_soft_18(self, advisor, up, can_double, expected):
        tip = advisor.advise(make_hand("AS 7H"), upcard(up), can_double=can_double)
        assert tip.action == expected

    def test_soft_17(self, advisor):
        assert advisor.advise(make_hand("AS 6H"), upcard("3C"), can_double=True).action == Action.DOUBLE
        assert advisor.advise(make_hand("AS 6H"), upcard("3C")).action == Action.HIT
        assert advisor.advise(make_hand("AS 6H"), upcard("2C"), can_double=True).action == Action.HIT

    def test_soft_15_and_16(self, advisor):
        for hand in ("AS 4H", "AS 5H"):
            assert advisor.advise(make_hand(hand), upcard("4C"), can_double=True).action == Action.DOUBLE
            assert advisor.advise(make_hand(hand), upcard("3C"), can_double=True).action == Action.HIT

    def test_soft_13_and_14(self, advisor):
        for hand in ("AS 2H", "AS 3H"):
            assert advisor.advise(make_hand(hand), upcard("5C"), can_double=True).action == Action.DOUBLE
            assert advisor.advise(make_hand(hand), upcard("4C"), can_double=True).action == Action.HIT


class TestHardTotals:
    """Tests for hard hand advice."""

    def test_hard_17_plus_stands(self, advisor):
        for hand in ("10S 7H", "10S 8H", "10S 9H", "10S 5H 6C"):
            for up in UPCARDS:
                assert advisor.advise(make_hand(hand), upcard(up)).action == Action.STAND

    @pytest.mark.parametrize("hand", ["10S 3H", "10S 4H", "10S 5H", "10S 6H"])
    def test_stiff_hands(self, advisor, hand):
        assert advisor.advise(make_hand(hand), upcard("6C")).action == Action.STAND
        assert advisor.advise(make_hand(hand), upcard("7C")).action == Action.HIT
        assert advisor.advise(make_hand(hand), upcard("AC")).action == Action.HIT

    def test_hard_12(self, advisor):
        assert advisor.advise(make_hand("10S 2H"), upcard("3C")).action == Action.HIT
        assert advisor.advise(make_hand("10S 2H"), upcard("4C")).action == Action.STAND
        assert advisor.advise(make_hand("10S 2H"), upcard("6C")).action == Action.STAND
        assert advisor.advise(make_hand("10S 2H"), upcard("7C")).action == Action.HIT

    def test_hard_11_doubles_against_everything(self, advisor):
        for up in UPCARDS:
            tip = advisor.advise(make_hand("5S 6H"), upcard(up), can_double=True)
            assert tip.action == Action.DOUBLE
            assert tip.reason == "Hard 11 is the best doubling hand in the game."

    def test_hard_11_hits_when_double_is_illegal(self, advisor):
        assert advisor.advise(make_hand("5S 4H 2C"), upcard("6C")).action == Action.HIT

    def test_hard_10(self, advisor):
        assert advisor.advise(make_hand("6S 4H"), upcard("9C"), can_double=True).action == Action.DOUBLE
        assert advisor.advise(make_hand("6S 4H"), upcard("KC"), can_double=True).action == Action.HIT
        assert advisor.advise(make_hand("6S 4H"), upcard("AC"), can_double=True).action == Action.HIT

    def test_hard_9(self, advisor):
        assert advisor.advise(make_hand("5S 4H"), upcard("3C"), can_double=True).action == Action.DOUBLE
        assert advisor.advise(make_hand("5S 4H"), upcard("2C"), can_double=True).action == Action.HIT
        assert advisor.advise(make_hand("5S 4H"), upcard("7C"), can_double=True).action == Action.HIT

    def test_hard_8_or_less_hits(self, advisor):
        for hand in ("2S 3H", "4S 4H", "5S 3H"):
            for up in UPCARDS:
                tip = advisor.advise(make_hand(hand), upcard(up), can_double=True)
                assert tip.action == Action.HIT

    def test_ace_upcard_label(self, advisor):
        tip = advisor.advise(make_hand("10S 6H"), upcard("AC"))
        assert tip.situation == "Hard 16 vs dealer A"
