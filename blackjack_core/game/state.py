"""Game phase enumeration."""

from enum import Enum, auto


class GamePhase(Enum):
    """
    Round phases.

    Flow: WAITING_FOR_BETS → DEALING → PLAYER_ACTIONS → DEALER_TURN → SETTLEMENT
    """

    # Idle, bets may be placed or cleared
    WAITING_FOR_BETS = auto()

    # Cards being dealt (instantaneous)
    DEALING = auto()

    # Player decisions
    PLAYER_ACTIONS = auto()

    # Dealer plays
    DEALER_TURN = auto()

    # Payouts; a reset starts the next round
    SETTLEMENT = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def state_name(self) -> str:
        """Name of the matching state in the round state machine."""
        return self.name.lower()

    @classmethod
    def from_state_name(cls, name: str) -> "GamePhase":
        return cls[name.upper()]

