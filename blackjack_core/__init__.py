"""Blackjack round engine - UI-agnostic, immutable snapshots."""

from blackjack_core.actions import Action
from blackjack_core.cards import Card, Deck, Rank, Suit
from blackjack_core.dealer import Dealer
from blackjack_core.hand import Hand, HandStatus, PlayerHand
from blackjack_core.player import Player
from blackjack_core.game import Game, GamePhase, RoundResult
from blackjack_core.strategy import GameRules, StrategyEngine

__all__ = [
    "Action",
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Dealer",
    "Hand",
    "HandStatus",
    "PlayerHand",
    "Player",
    "Game",
    "GamePhase",
    "RoundResult",
    "GameRules",
    "StrategyEngine",
]
