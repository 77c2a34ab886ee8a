"""Player actions."""

from enum import Enum, auto


class Action(Enum):
    """Decisions a player can make on an active hand."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()
    SURRENDER = auto()

    def __str__(self) -> str:
        return self.name.lower()
