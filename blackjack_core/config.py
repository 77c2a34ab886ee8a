"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field
from random import Random

from blackjack_core.strategy.rules import GameRules


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _parse_seed() -> int | None:
    """Parse BJ_RNG_SEED; unset or empty means an unseeded shuffle."""
    seed = os.getenv("BJ_RNG_SEED", "").strip()
    return int(seed) if seed else None


@dataclass(frozen=True)
class RulesConfig:
    """Table rule configuration."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("BJ_NUM_DECKS", "6")))
    dealer_hits_soft_17: bool = field(
        default_factory=lambda: _env_bool("BJ_DEALER_HITS_SOFT_17", "true")
    )
    surrender_allowed: bool = field(
        default_factory=lambda: _env_bool("BJ_SURRENDER_ALLOWED", "true")
    )
    double_after_split: bool = field(
        default_factory=lambda: _env_bool("BJ_DOUBLE_AFTER_SPLIT", "true")
    )
    max_splits: int = field(default_factory=lambda: int(os.getenv("BJ_MAX_SPLITS", "3")))
    blackjack_payout: float = field(
        default_factory=lambda: float(os.getenv("BJ_BLACKJACK_PAYOUT", "1.5"))
    )
    minimum_bet: int = field(default_factory=lambda: int(os.getenv("BJ_MINIMUM_BET", "5")))

    def to_rules(self) -> GameRules:
        """Build validated table rules; invalid values raise ValueError."""
        return GameRules(
            num_decks=self.num_decks,
            dealer_hits_soft_17=self.dealer_hits_soft_17,
            surrender_allowed=self.surrender_allowed,
            double_after_split=self.double_after_split,
            max_splits=self.max_splits,
            blackjack_payout=self.blackjack_payout,
            minimum_bet=self.minimum_bet,
        )


@dataclass(frozen=True)
class EngineConfig:
    """Engine configuration."""

    starting_chips: int = field(
        default_factory=lambda: int(os.getenv("BJ_STARTING_CHIPS", "1000"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("BJ_LOG_LEVEL", "INFO").upper())
    rng_seed: int | None = field(default_factory=_parse_seed)

    rules: RulesConfig = field(default_factory=RulesConfig)

    def make_rng(self) -> Random:
        """Random number generator for shuffling, seeded when a seed is configured."""
        return Random(self.rng_seed)


def configure_logging(cfg: EngineConfig) -> None:
    """Configure root logging for applications embedding the engine."""
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
