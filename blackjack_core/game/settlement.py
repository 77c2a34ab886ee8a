"""Round settlement: outcomes, payouts and chip crediting."""

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING

from blackjack_core.errors import (
    AlreadySettledError,
    IllegalActionError,
    InvalidPhaseError,
    PlayerError,
)
from blackjack_core.game.events import EventEmitter, EventType, NullEmitter
from blackjack_core.game.state import GamePhase
from blackjack_core.hand import Hand, HandStatus, PlayerHand
from blackjack_core.strategy.rules import GameRules

if TYPE_CHECKING:
    from blackjack_core.game.engine import Game

logger = logging.getLogger(__name__)


class RoundResult(Enum):
    """Outcome of one player hand against the dealer."""

    PLAYER_WIN = auto()
    PLAYER_BLACKJACK = auto()
    DEALER_WIN = auto()
    PUSH = auto()
    SURRENDER = auto()

    @property
    def hand_status(self) -> HandStatus:
        """Status a settled hand takes for this result."""
        if self in (RoundResult.PLAYER_WIN, RoundResult.PLAYER_BLACKJACK):
            return HandStatus.WIN
        if self == RoundResult.DEALER_WIN:
            return HandStatus.LOSS
        if self == RoundResult.PUSH:
            return HandStatus.PUSH
        return HandStatus.SURRENDERED


@dataclass(frozen=True)
class HandSettlement:
    """Settlement row for a single hand."""

    hand_index: int
    bet: int
    result: RoundResult
    payout: int

    @property
    def net(self) -> int:
        return self.payout - self.bet


@dataclass(frozen=True)
class Settlement:
    """Summary of a settled round, one row per player hand in play order."""

    hands: tuple[HandSettlement, ...]

    @property
    def total_payout(self) -> int:
        return sum(row.payout for row in self.hands)

    @property
    def total_wagered(self) -> int:
        return sum(row.bet for row in self.hands)

    @property
    def net_chip_change(self) -> int:
        """Payout minus the stakes on the settled hands, split stakes included."""
        return self.total_payout - self.total_wagered

    @property
    def primary_result(self) -> RoundResult:
        """Result of the first hand, used as the round's headline result."""
        return self.hands[0].result

    @property
    def results(self) -> tuple[RoundResult, ...]:
        return tuple(row.result for row in self.hands)


def determine_result(hand: PlayerHand, dealer_hand: Hand) -> RoundResult:
    """
    Compare one finished hand against the dealer.

    Precedence: surrender, player bust, dealer bust, naturals, totals.
    """
    if hand.status == HandStatus.SURRENDERED:
        return RoundResult.SURRENDER
    if hand.is_busted:
        return RoundResult.DEALER_WIN
    if dealer_hand.is_busted:
        return RoundResult.PLAYER_WIN

    player_natural = hand.is_blackjack
    dealer_natural = dealer_hand.is_blackjack
    if player_natural and dealer_natural:
        return RoundResult.PUSH
    if player_natural:
        return RoundResult.PLAYER_BLACKJACK
    if dealer_natural:
        return RoundResult.DEALER_WIN

    if hand.value > dealer_hand.value:
        return RoundResult.PLAYER_WIN
    if hand.value < dealer_hand.value:
        return RoundResult.DEALER_WIN
    return RoundResult.PUSH


def calculate_payout(result: RoundResult, bet: int, rules: GameRules) -> int:
    """
    Chips returned to the player for a hand, stake included.

    Fractional blackjack and surrender payouts are truncated.
    """
    if result == RoundResult.PLAYER_WIN:
        return bet * 2
    if result == RoundResult.PLAYER_BLACKJACK:
        return int(bet * (1 + rules.blackjack_payout))
    if result == RoundResult.SURRENDER:
        return bet // 2
    if result == RoundResult.PUSH:
        return bet
    return 0


class SettlementService:
    """Settles every player hand of a finished round and credits the player once."""

    def __init__(self, events: EventEmitter | None = None) -> None:
        self.events = events or NullEmitter()

    def settle_round(self, game: "Game", events: EventEmitter | None = None) -> "Game":
        """
        Settle all hands against the revealed dealer hand.

        Args:
            game: Game in the SETTLEMENT phase
            events: Emitter for this call, overriding the service's own

        Returns:
            The settled game with chips credited and a Settlement attached

        Raises:
            InvalidPhaseError: Not in the SETTLEMENT phase
            AlreadySettledError: The round was settled before
            IllegalActionError: The dealer hole card is still concealed
            PlayerError: No player is seated
        """
        emitter = events or self.events

        if game.phase != GamePhase.SETTLEMENT:
            raise InvalidPhaseError(f"Cannot settle during {game.phase}")
        if game.is_settled:
            raise AlreadySettledError("Round has already been settled")
        if not game.dealer.is_revealed:
            raise IllegalActionError("Dealer hole card has not been revealed")
        if game.player is None:
            raise PlayerError("No player at the table")

        dealer_hand = game.dealer.hand
        rows: list[HandSettlement] = []
        settled_hands: list[PlayerHand] = []

        for index, hand in enumerate(game.player_hands):
            result = determine_result(hand, dealer_hand)
            payout = calculate_payout(result, hand.bet, game.rules)
            rows.append(HandSettlement(index, hand.bet, result, payout))
            settled_hands.append(hand.settle(result.hand_status))
            emitter.emit_new(
                EventType.HAND_SETTLED,
                hand_index=index,
                result=result.name,
                bet=hand.bet,
                payout=payout,
            )

        settlement = Settlement(tuple(rows))
        player = game.player.add_chips(settlement.total_payout)

        logger.info(
            "Settled %d hand(s) vs dealer %d: paid %d on %d wagered (net %+d)",
            len(rows),
            dealer_hand.value,
            settlement.total_payout,
            settlement.total_wagered,
            settlement.net_chip_change,
        )
        emitter.emit_new(
            EventType.ROUND_SETTLED,
            result=settlement.primary_result.name,
            total_payout=settlement.total_payout,
            net=settlement.net_chip_change,
            chips=player.chips,
        )

        return replace(
            game,
            player=player,
            player_hands=tuple(settled_hands),
            is_settled=True,
            settlement=settlement,
        )
