"""Plain records the engine hands to external collaborators for storage."""

from collections import defaultdict
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from pydantic import BaseModel, ConfigDict, Field, computed_field

from blackjack_core.cards import Card

if TYPE_CHECKING:
    from blackjack_core.game.engine import Game

MIN_SCENARIO_SAMPLES = 3
PRACTICE_ERROR_RATE = 0.3


class CardRecord(BaseModel):
    """Card representation."""

    model_config = ConfigDict(frozen=True)

    rank: str
    suit: str
    value: int

    @classmethod
    def from_card(cls, card: Card) -> "CardRecord":
        return cls(rank=card.rank.name, suit=card.suit.name, value=card.value)


class DecisionRecord(BaseModel):
    """One graded player decision: what was seen, what was done, and the verdict."""

    model_config = ConfigDict(frozen=True)

    hand: list[CardRecord] = Field(..., min_length=1)
    dealer_up_card: CardRecord
    action: str
    optimal_action: str
    is_correct: bool
    base_scenario_key: str
    scenario_key: str
    rule_fingerprint: str
    hand_index: int = Field(default=0, ge=0)
    is_split_hand: bool = False
    timestamp: datetime = Field(default_factory=datetime.now)


class HandOutcomeRecord(BaseModel):
    """Settlement of a single player hand."""

    model_config = ConfigDict(frozen=True)

    hand_index: int = Field(..., ge=0)
    cards: list[CardRecord]
    bet: int = Field(..., ge=0)
    result: str
    payout: int = Field(..., ge=0)


class RoundOutcomeRecord(BaseModel):
    """Round result: wagers, per-hand results and net chip change."""

    model_config = ConfigDict(frozen=True)

    bet: int = Field(..., ge=0)
    result: str
    hands: list[HandOutcomeRecord]
    dealer_hand: list[CardRecord]
    total_wagered: int = Field(..., ge=0)
    total_payout: int = Field(..., ge=0)
    net_chip_change: int
    rule_fingerprint: str
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_game(cls, game: "Game") -> "RoundOutcomeRecord":
        """Build the record from a settled game."""
        settlement = game.settlement
        if settlement is None or not game.is_settled:
            raise ValueError("Round has not been settled")

        hands = [
            HandOutcomeRecord(
                hand_index=row.hand_index,
                cards=[CardRecord.from_card(card) for card in game.player_hands[row.hand_index].cards],
                bet=row.bet,
                result=row.result.name,
                payout=row.payout,
            )
            for row in settlement.hands
        ]
        dealer_cards = game.dealer.hand.cards if game.dealer.hand is not None else ()
        return cls(
            bet=game.bet,
            result=settlement.primary_result.name,
            hands=hands,
            dealer_hand=[CardRecord.from_card(card) for card in dealer_cards],
            total_wagered=settlement.total_wagered,
            total_payout=settlement.total_payout,
            net_chip_change=settlement.net_chip_change,
            rule_fingerprint=game.rules.fingerprint(),
        )


class ScenarioErrorStat(BaseModel):
    """Error rate analysis for one scenario."""

    model_config = ConfigDict(frozen=True)

    base_scenario_key: str = Field(..., min_length=1)
    total_attempts: int = Field(..., ge=0)
    error_count: int = Field(..., ge=0)

    @computed_field
    @property
    def error_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.error_count / self.total_attempts

    @property
    def accuracy_rate(self) -> float:
        return 1.0 - self.error_rate

    @property
    def has_sufficient_data(self) -> bool:
        return self.total_attempts >= MIN_SCENARIO_SAMPLES

    @property
    def needs_practice(self) -> bool:
        return self.has_sufficient_data and self.error_rate > PRACTICE_ERROR_RATE


def summarize_decisions(records: Iterable[DecisionRecord]) -> list[ScenarioErrorStat]:
    """Group decisions by base scenario key, worst error rate first."""
    attempts: dict[str, int] = defaultdict(int)
    errors: dict[str, int] = defaultdict(int)
    for record in records:
        attempts[record.base_scenario_key] += 1
        if not record.is_correct:
            errors[record.base_scenario_key] += 1

    stats = [
        ScenarioErrorStat(base_scenario_key=key, total_attempts=count, error_count=errors[key])
        for key, count in attempts.items()
    ]
    return sorted(stats, key=lambda stat: (-stat.error_rate, stat.base_scenario_key))
