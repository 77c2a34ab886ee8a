"""Round flow, settlement and the game aggregate."""

from blackjack_core.game.events import EventEmitter, EventType, GameEvent
from blackjack_core.game.state import GamePhase
from blackjack_core.game.settlement import RoundResult, Settlement, SettlementService
from blackjack_core.game.round_manager import RoundManager
from blackjack_core.game.engine import Game

__all__ = [
    "EventEmitter",
    "EventType",
    "GameEvent",
    "GamePhase",
    "RoundResult",
    "Settlement",
    "SettlementService",
    "RoundManager",
    "Game",
]
