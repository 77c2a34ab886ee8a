"""Blackjack rule variations."""

import hashlib
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class GameRules:
    """
    Blackjack table rules configuration.

    Treated as an opaque, immutable input by every engine operation.
    """

    # Deck configuration
    num_decks: int = 6
    penetration: float = 0.75

    # Betting
    minimum_bet: int = 5

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Blackjack payout ratio (3:2 = 1.5, 6:5 = 1.2)
    blackjack_payout: float = 1.5

    # Double down rules
    double_after_split: bool = True  # DAS

    # Split rules
    max_splits: int = 3  # 3 splits = 4 hands

    # Surrender rules (late surrender only)
    surrender_allowed: bool = True

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if not 0.0 < self.penetration <= 1.0:
            raise ValueError("penetration must be between 0 and 1")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")
        if self.max_splits < 0:
            raise ValueError("max_splits cannot be negative")
        if self.minimum_bet < 1:
            raise ValueError("minimum_bet must be at least 1")

    @property
    def max_hands(self) -> int:
        return self.max_splits + 1

    def fingerprint(self) -> str:
        """Short stable hash identifying this rule set in decision records."""
        payload = repr(sorted(asdict(self).items())).encode()
        return hashlib.sha1(payload).hexdigest()[:6]

    @classmethod
    def vegas_strip(cls) -> "GameRules":
        """Standard Vegas Strip rules."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=False,
            blackjack_payout=1.5,
            double_after_split=True,
            surrender_allowed=True,
        )

    @classmethod
    def downtown_vegas(cls) -> "GameRules":
        """Downtown Las Vegas rules (typically H17)."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=True,
            blackjack_payout=1.5,
            double_after_split=True,
            surrender_allowed=True,
        )

    @classmethod
    def single_deck(cls) -> "GameRules":
        """Single deck rules, 6:5 blackjack."""
        return cls(
            num_decks=1,
            dealer_hits_soft_17=True,
            blackjack_payout=1.2,
            double_after_split=False,
            max_splits=1,
            surrender_allowed=False,
        )

    @classmethod
    def atlantic_city(cls) -> "GameRules":
        """Atlantic City rules."""
        return cls(
            num_decks=8,
            dealer_hits_soft_17=False,
            blackjack_payout=1.5,
            double_after_split=True,
            surrender_allowed=True,
        )
