"""Game aggregate: one table, one player, one round at a time."""

import logging
from dataclasses import dataclass, field, replace
from random import Random

from blackjack_core.actions import Action
from blackjack_core.cards import Card, Deck
from blackjack_core.dealer import Dealer
from blackjack_core.errors import (
    IllegalActionError,
    InsufficientChipsError,
    InvalidPhaseError,
    PlayerError,
)
from blackjack_core.game.events import EventEmitter, EventType
from blackjack_core.game.round_manager import RoundManager
from blackjack_core.game.settlement import Settlement, SettlementService
from blackjack_core.game.state import GamePhase
from blackjack_core.hand import PlayerHand
from blackjack_core.player import Player
from blackjack_core.strategy.rules import GameRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Game:
    """
    Immutable snapshot of a blackjack table.

    Every operation validates its preconditions, then returns a new Game;
    a failed operation raises and leaves the snapshot it was called on
    unchanged. Collaborators (round manager, settlement service, event
    emitter) are passed in, never stored.
    """

    rules: GameRules
    deck: Deck
    player: Player | None = None
    bet: int = 0
    dealer: Dealer = field(default_factory=Dealer)
    player_hands: tuple[PlayerHand, ...] = ()
    current_hand_index: int = 0
    phase: GamePhase = GamePhase.WAITING_FOR_BETS
    is_settled: bool = False
    settlement: Settlement | None = None

    @classmethod
    def create(cls, rules: GameRules | None = None, rng: Random | None = None) -> "Game":
        """
        Create an empty table with a freshly shuffled deck.

        Args:
            rules: Table rules (uses defaults if not provided)
            rng: Random number generator for reproducible shuffles
        """
        rules = rules or GameRules()
        deck = Deck.shuffled(rules.num_decks, rng=rng, penetration=rules.penetration)
        return cls(rules=rules, deck=deck)

    # Derived state

    @property
    def current_hand(self) -> PlayerHand | None:
        if 0 <= self.current_hand_index < len(self.player_hands):
            return self.player_hands[self.current_hand_index]
        return None

    @property
    def can_act(self) -> bool:
        """Check if the player has a decision to make on the current hand."""
        hand = self.current_hand
        return (
            self.phase == GamePhase.PLAYER_ACTIONS
            and hand is not None
            and hand.is_active
        )

    @property
    def all_hands_complete(self) -> bool:
        return bool(self.player_hands) and all(hand.is_completed for hand in self.player_hands)

    @property
    def is_game_over(self) -> bool:
        """Check if the player can no longer cover the minimum bet between rounds."""
        return (
            self.player is not None
            and self.phase == GamePhase.WAITING_FOR_BETS
            and self.bet == 0
            and self.player.chips < self.rules.minimum_bet
        )

    @property
    def dealer_up_card(self) -> Card | None:
        return self.dealer.up_card

    @property
    def round_in_progress(self) -> bool:
        return self.phase != GamePhase.WAITING_FOR_BETS

    def available_actions(self) -> set[Action]:
        """
        Actions legal for the current hand right now.

        Hand eligibility narrowed by table constraints: the split ceiling
        and the chips needed to cover a double.
        """
        if not self.can_act or self.player is None:
            return set()

        hand = self.current_hand
        actions = hand.available_actions(self.rules)

        if Action.DOUBLE in actions and not self.player.can_afford(hand.bet):
            actions.discard(Action.DOUBLE)

        if Action.SPLIT in actions and len(self.player_hands) >= self.rules.max_hands:
            actions.discard(Action.SPLIT)

        return actions

    # Seating and betting

    def add_player(self, player: Player) -> "Game":
        if self.player is not None:
            raise PlayerError("A player is already seated")
        logger.info("Player %s joins with %d chips", player.id, player.chips)
        return replace(self, player=player)

    def place_bet(self, amount: int, events: EventEmitter | None = None) -> "Game":
        """
        Reserve ``amount`` chips for the next round.

        Repeated bets before the deal add up.

        Raises:
            PlayerError: No player is seated or the amount is not positive
            InvalidPhaseError: A round is in progress
            InsufficientChipsError: The player cannot cover the amount
        """
        if self.player is None:
            raise PlayerError("No player at the table")
        if self.phase != GamePhase.WAITING_FOR_BETS:
            raise InvalidPhaseError(f"Cannot bet during {self.phase}")
        if amount <= 0:
            raise PlayerError("Bet amount must be positive")
        if not self.player.can_afford(amount):
            raise InsufficientChipsError(
                f"Insufficient chips: need {amount}, have {self.player.chips}"
            )

        player = self.player.deduct_chips(amount)
        bet = self.bet + amount
        logger.debug("Bet %d reserved (total %d, %d chips left)", amount, bet, player.chips)
        if events is not None:
            events.emit_new(EventType.BET_PLACED, amount=amount, total=bet, chips=player.chips)
        return replace(self, player=player, bet=bet)

    def clear_bet(self, events: EventEmitter | None = None) -> "Game":
        """Refund the reserved bet before the deal."""
        if self.phase != GamePhase.WAITING_FOR_BETS:
            raise InvalidPhaseError(f"Cannot clear bet during {self.phase}")
        if self.player is None:
            raise PlayerError("No player at the table")

        refunded = self.bet
        player = self.player.add_chips(refunded)
        if events is not None:
            events.emit_new(EventType.BET_CLEARED, amount=refunded, chips=player.chips)
        return replace(self, player=player, bet=0)

    # Round flow

    def deal_round(self, events: EventEmitter | None = None) -> "Game":
        return RoundManager(events).deal_round(self)

    def player_action(
        self,
        action: Action,
        hand_index: int | None = None,
        events: EventEmitter | None = None,
    ) -> "Game":
        """
        Apply ``action`` to the current hand.

        Args:
            action: The player's decision
            hand_index: Hand the caller believes is current; must match
            events: Emitter for round events
        """
        if hand_index is not None and hand_index != self.current_hand_index:
            raise IllegalActionError(
                f"Hand {hand_index} is not the current hand ({self.current_hand_index})"
            )
        return RoundManager(events).process_player_action(self, action)

    def dealer_play_automated(
        self,
        events: EventEmitter | None = None,
        auto_settle: bool = True,
    ) -> "Game":
        """Play the dealer's hand and, by default, settle the round."""
        return RoundManager(events, auto_settle=auto_settle).play_dealer_turn(self)

    def settle_round(self, events: EventEmitter | None = None) -> "Game":
        return SettlementService(events).settle_round(self)

    def reset_for_new_round(
        self,
        rng: Random | None = None,
        events: EventEmitter | None = None,
    ) -> "Game":
        """
        Clear the table for the next round.

        Keeps the player and chips and issues a freshly shuffled deck.

        Raises:
            InvalidPhaseError: A bet is reserved but not dealt, or a round
                is in progress and not yet settled
        """
        if self.phase == GamePhase.WAITING_FOR_BETS and self.bet > 0:
            raise InvalidPhaseError("Cannot reset while a bet is pending; clear it first")
        if self.round_in_progress and not self.is_settled:
            raise InvalidPhaseError(f"Cannot reset an unsettled round during {self.phase}")

        deck = Deck.shuffled(self.rules.num_decks, rng=rng, penetration=self.rules.penetration)
        if events is not None:
            events.emit_new(
                EventType.ROUND_RESET,
                chips=self.player.chips if self.player is not None else 0,
            )
        return Game(rules=self.rules, deck=deck, player=self.player)
