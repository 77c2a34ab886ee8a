"""Round lifecycle: dealing, player actions and the dealer turn."""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from transitions import Machine, MachineError

from blackjack_core.actions import Action
from blackjack_core.cards import Card, Deck
from blackjack_core.errors import (
    IllegalActionError,
    InvalidPhaseError,
    PlayerError,
)
from blackjack_core.game.events import EventEmitter, EventType, NullEmitter
from blackjack_core.game.settlement import SettlementService
from blackjack_core.game.state import GamePhase
from blackjack_core.hand import Hand, HandStatus, PlayerHand
from blackjack_core.strategy.rules import GameRules

if TYPE_CHECKING:
    from blackjack_core.game.engine import Game

logger = logging.getLogger(__name__)

DEALER_STAND_VALUE = 17


def dealer_should_hit(hand: Hand, rules: GameRules) -> bool:
    """Dealer draws below 17, and on soft 17 when the table hits soft 17."""
    if hand.is_busted:
        return False
    if hand.value < DEALER_STAND_VALUE:
        return True
    return hand.value == DEALER_STAND_VALUE and hand.is_soft and rules.dealer_hits_soft_17


def _next_hand_index(hands: tuple[PlayerHand, ...], current: int) -> int:
    """First incomplete hand after ``current``, wrapping, else ``current``."""
    count = len(hands)
    for offset in range(1, count + 1):
        index = (current + offset) % count
        if hands[index].is_active:
            return index
    return current


class RoundManager:
    """
    Drives a round through its phases.

    The phase graph is a ``transitions`` state machine; every operation
    syncs the machine to the game's phase, fires its trigger and returns a
    new Game carrying the destination phase. Triggers fired from the wrong
    phase raise InvalidPhaseError and leave the game untouched.
    """

    # State machine states
    STATES = [phase.state_name for phase in GamePhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_deal", "source": "waiting_for_bets", "dest": "dealing"},
        {"trigger": "begin_play", "source": "dealing", "dest": "player_actions"},
        {"trigger": "act", "source": "player_actions", "dest": "player_actions"},
        {"trigger": "finish_player_turn", "source": "player_actions", "dest": "dealer_turn"},
        {"trigger": "finish_dealer_turn", "source": "dealer_turn", "dest": "settlement"},
    ]

    def __init__(
        self,
        events: EventEmitter | None = None,
        auto_settle: bool = True,
        settlement: SettlementService | None = None,
    ) -> None:
        """
        Args:
            events: Emitter for round events (events are dropped if not provided)
            auto_settle: Settle immediately after the dealer turn
            settlement: Settlement service used when auto-settling
        """
        self.events = events or NullEmitter()
        self.auto_settle = auto_settle
        self.settlement = settlement or SettlementService(self.events)

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=GamePhase.WAITING_FOR_BETS.state_name,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> GamePhase:
        """Phase the state machine last moved to."""
        return GamePhase.from_state_name(self._machine_state)  # type: ignore

    def _fire(self, trigger: str, phase: GamePhase) -> GamePhase:
        """Fire ``trigger`` starting from ``phase`` and return the destination phase."""
        self.machine.set_state(phase.state_name)
        try:
            getattr(self, trigger)()
        except MachineError as exc:
            raise InvalidPhaseError(f"Cannot {trigger.replace('_', ' ')} during {phase}") from exc
        return self.phase

    def deal_round(self, game: "Game", events: EventEmitter | None = None) -> "Game":
        """
        Deal two cards to the player and two to the dealer.

        The player's single hand carries the reserved bet. The dealer's
        first card is the up card, the second stays concealed.
        """
        emitter = events or self.events

        if game.player is None:
            raise PlayerError("No player at the table")
        if game.bet <= 0:
            raise InvalidPhaseError("No bet placed")

        self._fire("start_deal", game.phase)

        player_cards, deck = game.deck.deal_cards(2)
        dealer_cards, deck = deck.deal_cards(2)

        hand = PlayerHand.initial(player_cards, game.bet)
        dealer = game.dealer.deal_initial_cards(up_card=dealer_cards[0], hole_card=dealer_cards[1])

        for card in player_cards:
            emitter.emit_new(EventType.CARD_DEALT, card=str(card), to="player", hand_index=0)
        emitter.emit_new(EventType.CARD_DEALT, card=str(dealer_cards[0]), to="dealer")
        emitter.emit_new(EventType.CARD_DEALT, card=None, to="dealer", face_up=False)

        phase = self._fire("begin_play", self.phase)

        logger.info(
            "Dealt round: player %s vs dealer up card %s (bet %d)",
            hand.hand,
            dealer.up_card,
            game.bet,
        )
        emitter.emit_new(
            EventType.ROUND_STARTED,
            bet=game.bet,
            player_value=hand.value,
            dealer_up_card=str(dealer.up_card),
        )

        return replace(
            game,
            player_hands=(hand,),
            current_hand_index=0,
            dealer=dealer,
            deck=deck,
            phase=phase,
            is_settled=False,
            settlement=None,
        )

    def process_player_action(
        self,
        game: "Game",
        action: Action,
        events: EventEmitter | None = None,
    ) -> "Game":
        """
        Apply one player action to the current hand.

        Raises:
            InvalidPhaseError: Not in the PLAYER_ACTIONS phase
            IllegalActionError: The action is not legal for the current hand
            InsufficientChipsError: A double cannot be covered
        """
        emitter = events or self.events

        if game.phase != GamePhase.PLAYER_ACTIONS:
            raise InvalidPhaseError(f"Cannot act during {game.phase}")

        hand = game.current_hand
        if hand is None or not hand.is_active:
            raise IllegalActionError("Current hand cannot act")
        if action not in hand.available_actions(game.rules):
            raise IllegalActionError(f"Action {action.name} is not available for this hand")

        if action == Action.SPLIT:
            updated = self._split(game, hand, emitter)
        else:
            updated = self._regular_action(game, hand, action, emitter)

        if updated.all_hands_complete:
            phase = self._fire("finish_player_turn", game.phase)
        else:
            phase = self._fire("act", game.phase)

        return replace(updated, phase=phase)

    def _split(self, game: "Game", hand: PlayerHand, emitter: EventEmitter) -> "Game":
        if len(game.player_hands) >= game.rules.max_hands:
            raise IllegalActionError("Maximum splits exceeded")

        new_cards, deck = game.deck.deal_cards(2)
        first, second = hand.split(new_cards[0], new_cards[1])

        index = game.current_hand_index
        hands = game.player_hands[:index] + (first, second) + game.player_hands[index + 1:]

        logger.info("Split %s into %s and %s", hand.hand, first.hand, second.hand)
        emitter.emit_new(
            EventType.PLAYER_SPLIT,
            hand_index=index,
            bet=hand.bet,
            hands=len(hands),
        )

        return replace(game, player_hands=hands, deck=deck)

    def _regular_action(
        self,
        game: "Game",
        hand: PlayerHand,
        action: Action,
        emitter: EventEmitter,
    ) -> "Game":
        index = game.current_hand_index
        player = game.player
        deck = game.deck
        card: Card | None = None

        if action == Action.HIT:
            card, deck = deck.deal_card()
            new_hand = hand.hit(card)
            emitter.emit_new(EventType.PLAYER_HIT, hand_index=index, card=str(card), value=new_hand.value)
        elif action == Action.STAND:
            new_hand = hand.stand()
            emitter.emit_new(EventType.PLAYER_STAND, hand_index=index, value=new_hand.value)
        elif action == Action.DOUBLE:
            player = player.deduct_chips(hand.bet)
            card, deck = deck.deal_card()
            new_hand = hand.double_down(card)
            emitter.emit_new(
                EventType.PLAYER_DOUBLE,
                hand_index=index,
                card=str(card),
                bet=new_hand.bet,
                value=new_hand.value,
            )
        elif action == Action.SURRENDER:
            new_hand = hand.surrender()
            emitter.emit_new(EventType.PLAYER_SURRENDER, hand_index=index)
        else:
            raise IllegalActionError(f"Unsupported action: {action}")

        logger.info(
            "Hand %d: %s%s -> %s (%d)",
            index,
            action.name,
            f" {card}" if card is not None else "",
            new_hand.status.name,
            new_hand.value,
        )
        if new_hand.status == HandStatus.BUSTED:
            emitter.emit_new(EventType.PLAYER_BUSTS, hand_index=index, value=new_hand.value)

        hands = game.player_hands[:index] + (new_hand,) + game.player_hands[index + 1:]
        next_index = index if new_hand.is_active else _next_hand_index(hands, index)

        return replace(
            game,
            player=player,
            player_hands=hands,
            current_hand_index=next_index,
            deck=deck,
        )

    def play_dealer_turn(self, game: "Game", events: EventEmitter | None = None) -> "Game":
        """
        Reveal the hole card and draw to the table's standing rule.

        When every player hand is busted or surrendered the dealer reveals
        but does not draw. With ``auto_settle`` the round is settled too.
        """
        emitter = events or self.events

        if game.phase != GamePhase.DEALER_TURN:
            raise InvalidPhaseError(f"Dealer cannot play during {game.phase}")
        if game.dealer.hand is None:
            raise IllegalActionError("No cards dealt to dealer yet")

        dealer = game.dealer.reveal_hole_card()
        deck: Deck = game.deck
        emitter.emit_new(EventType.DEALER_REVEALS, card=str(dealer.hand.cards[-1]), value=dealer.hand.value)

        hands_in_play = any(
            not hand.is_busted and hand.status != HandStatus.SURRENDERED
            for hand in game.player_hands
        )

        if hands_in_play:
            while dealer_should_hit(dealer.hand, game.rules):
                card, deck = deck.deal_card()
                dealer = dealer.hit(card)
                logger.debug("Dealer draws %s (%d)", card, dealer.hand.value)
                emitter.emit_new(EventType.DEALER_HITS, card=str(card), value=dealer.hand.value)

            if dealer.hand.is_busted:
                emitter.emit_new(EventType.DEALER_BUSTS, value=dealer.hand.value)
            else:
                emitter.emit_new(EventType.DEALER_STANDS, value=dealer.hand.value)

        logger.info(
            "Dealer finishes with %s%s",
            dealer.hand,
            "" if hands_in_play else " (no live player hands)",
        )

        phase = self._fire("finish_dealer_turn", game.phase)
        finished = replace(game, dealer=dealer, deck=deck, phase=phase)

        if self.auto_settle:
            return self.settlement.settle_round(finished, emitter)
        return finished
