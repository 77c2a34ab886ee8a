"""Pytest fixtures for blackjack round engine tests."""

import pytest
from random import Random

from blackjack_core.cards import Card, Deck, Rank, Suit
from blackjack_core.game import EventEmitter, Game
from blackjack_core.hand import Hand, PlayerHand
from blackjack_core.player import Player
from blackjack_core.strategy import DecisionEvaluator, GameRules, StrategyEngine


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled 6-deck shoe."""
    return Deck.shuffled(num_decks=6, rng=rng)


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand((Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand((Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)))


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand((Card(Rank.TEN, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)))


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand((Card(Rank.EIGHT, Suit.SPADES), Card(Rank.EIGHT, Suit.HEARTS)))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand.from_string("TS 6H KC")


@pytest.fixture
def pair_8s_player_hand(pair_8s_hand):
    """A pair of 8s carrying a 25 chip wager."""
    return PlayerHand.initial(pair_8s_hand.cards, 25)


@pytest.fixture
def rules():
    """Default ruleset."""
    return GameRules()


@pytest.fixture
def no_surrender_rules():
    """Default rules with surrender disabled."""
    return GameRules(surrender_allowed=False)


@pytest.fixture
def vegas_strip_rules():
    """Vegas Strip rules."""
    return GameRules.vegas_strip()


@pytest.fixture
def strategy_engine(rules):
    """Strategy engine for default rules."""
    return StrategyEngine(rules)


@pytest.fixture
def evaluator():
    """Decision evaluator backed by the default strategy engine."""
    return DecisionEvaluator()


@pytest.fixture
def events():
    """Event emitter that records everything emitted into it."""
    return EventEmitter()


@pytest.fixture
def game(rng):
    """A new table with a 100 chip player seated."""
    return Game.create(GameRules(), rng=rng).add_player(Player("p1", 100))


@pytest.fixture
def stacked_game():
    """
    Factory for a seated, bet game over a stacked deck.

    Cards are dealt in the order given: two to the player, the dealer's up
    card, the dealer's hole card, then any draws.
    """

    def _make(codes: str, bet: int = 25, chips: int = 100, rules: GameRules | None = None) -> Game:
        deck = Deck.from_cards(Hand.from_string(codes).cards)
        table = Game(rules=rules or GameRules(), deck=deck)
        table = table.add_player(Player("p1", chips))
        return table.place_bet(bet) if bet else table

    return _make
