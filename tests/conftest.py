"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from core.cards import Shoe
from core.hand import Hand
from core.game import RoundEngine
from core.strategy import BasicStrategy
from helpers import make_hand


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    return Shoe(num_decks=6, rng=rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS 6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S 6H")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return make_hand("8S 8H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S 6H KC")


@pytest.fixture
def advisor():
    """Basic strategy advisor."""
    return BasicStrategy()


@pytest.fixture
def table(rng):
    """A new table with a seeded shoe."""
    return RoundEngine(rng=rng)
