"""Grading player decisions against basic strategy."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from blackjack_core.actions import Action
from blackjack_core.cards import Card
from blackjack_core.errors import IllegalActionError
from blackjack_core.hand import Hand, PlayerHand
from blackjack_core.records import CardRecord, DecisionRecord
from blackjack_core.strategy.basic import StrategyEngine
from blackjack_core.strategy.rules import GameRules

if TYPE_CHECKING:
    from blackjack_core.game.engine import Game

logger = logging.getLogger(__name__)


def hand_type(hand: Hand | PlayerHand) -> str:
    """Compact hand shape: 'Pair 8s', 'BJ', 'S17' or 'H16'."""
    if hand.is_pair:
        return f"Pair {hand.cards[0].rank}s"
    if hand.is_blackjack:
        return "BJ"
    if hand.is_soft:
        return f"S{hand.value}"
    return f"H{hand.value}"


def scenario_key(hand: Hand | PlayerHand, dealer_up_card: Card) -> str:
    """Rule independent scenario key, e.g. 'H16 vs 10' or 'S17 vs A'."""
    return f"{hand_type(hand)} vs {dealer_up_card.rank}"


def full_scenario_key(hand: Hand | PlayerHand, dealer_up_card: Card, rules: GameRules) -> str:
    """Scenario key qualified by the rule fingerprint, e.g. 'H16 vs 10 [1f3a9c]'."""
    return _with_fingerprint(scenario_key(hand, dealer_up_card), rules.fingerprint())


def _with_fingerprint(key: str, fingerprint: str) -> str:
    return f"{key} [{fingerprint}]"


@dataclass(frozen=True)
class DecisionFeedback:
    """Verdict on one decision compared to the optimal play."""

    player_action: Action
    optimal_action: Action
    is_correct: bool
    scenario_key: str
    explanation: str


def _describe(hand: Hand | PlayerHand) -> str:
    if hand.is_pair:
        return "pair"
    return "soft" if hand.is_soft else "hard"


def _reasoning(hand: Hand | PlayerHand, dealer: int, action: Action) -> str:
    if hand.is_pair:
        if action == Action.SPLIT:
            return "Splitting this pair has the better expected value."
        if action == Action.STAND:
            return "Never split this pair - it is already a strong total."
        if action == Action.DOUBLE:
            return "Don't split - double this pair as a strong total."
        return "Play this pair as an ordinary total against this up card."

    if hand.is_soft:
        if action == Action.DOUBLE:
            return f"Soft hands can double safely against a weak dealer {dealer}."
        if action == Action.STAND:
            return "This soft total is strong enough to stand."
        if dealer >= 9:
            return "Hit against strong dealer cards."
        return "Hit to improve this soft total."

    if action == Action.HIT:
        if hand.value <= 11:
            return "Always hit with 11 or less - you cannot bust."
        if dealer >= 7:
            return "Hit against strong dealer up cards (7-A)."
        return "Hit to improve against this dealer up card."
    if action == Action.STAND:
        if hand.value >= 17:
            return "Always stand with 17 or higher."
        if dealer <= 6:
            return "Stand against weak dealer up cards (2-6)."
        return "Stand with this total in this situation."
    if action == Action.DOUBLE:
        return "Double down for extra profit in this favorable spot."
    if action == Action.SURRENDER:
        return "Surrendering loses less than playing this hand out."
    return "Follow basic strategy for optimal play."


def explain(
    hand: Hand | PlayerHand,
    dealer_up_card: Card,
    player_action: Action,
    optimal_action: Action,
) -> str:
    """Human readable explanation of a graded decision."""
    dealer = dealer_up_card.value
    situation = f"With {_describe(hand)} {hand.value} vs dealer {dealer_up_card.rank}"
    reasoning = _reasoning(hand, dealer, optimal_action)
    if player_action == optimal_action:
        return f"Correct! {situation}, the optimal play is {optimal_action.name}. {reasoning}"
    return (
        f"Incorrect. You chose {player_action.name}, but should {optimal_action.name}. "
        f"{situation}: {reasoning}"
    )


class DecisionEvaluator:
    """
    Compares a player's chosen action with the strategy engine's answer.

    Evaluation is meant to happen before the action is applied, on the hand
    the player was looking at.
    """

    def __init__(self, engine: StrategyEngine | None = None) -> None:
        self.engine = engine or StrategyEngine()

    def evaluate(
        self,
        hand: Hand | PlayerHand,
        dealer_up_card: Card,
        player_action: Action,
        rules: GameRules,
        can_double: bool | None = None,
        can_split: bool | None = None,
    ) -> DecisionFeedback:
        optimal = self.engine.get_optimal_action(
            hand, dealer_up_card, rules, can_double, can_split
        )
        is_correct = player_action == optimal
        key = scenario_key(hand, dealer_up_card)
        logger.debug(
            "Graded %s on %s: optimal %s (%s)",
            player_action.name,
            key,
            optimal.name,
            "correct" if is_correct else "incorrect",
        )
        return DecisionFeedback(
            player_action=player_action,
            optimal_action=optimal,
            is_correct=is_correct,
            scenario_key=key,
            explanation=explain(hand, dealer_up_card, player_action, optimal),
        )

    def evaluate_game(self, game: "Game", player_action: Action) -> DecisionFeedback:
        """
        Grade an action on the game's current hand.

        Doubling and splitting count as eligible only when the table would
        actually allow them, so an unaffordable double is never "optimal".
        """
        hand = game.current_hand
        up_card = game.dealer.up_card
        if not game.can_act or hand is None or up_card is None:
            raise IllegalActionError("No decision to evaluate: player cannot act")
        legal = game.available_actions()
        return self.evaluate(
            hand,
            up_card,
            player_action,
            game.rules,
            can_double=Action.DOUBLE in legal,
            can_split=Action.SPLIT in legal,
        )

    def record(
        self,
        hand: Hand | PlayerHand,
        dealer_up_card: Card,
        player_action: Action,
        rules: GameRules,
        hand_index: int = 0,
        feedback: DecisionFeedback | None = None,
    ) -> DecisionRecord:
        """Plain decision record suitable for an external repository."""
        feedback = feedback or self.evaluate(hand, dealer_up_card, player_action, rules)
        fingerprint = rules.fingerprint()
        return DecisionRecord(
            hand=[CardRecord.from_card(card) for card in hand.cards],
            dealer_up_card=CardRecord.from_card(dealer_up_card),
            action=player_action.name,
            optimal_action=feedback.optimal_action.name,
            is_correct=feedback.is_correct,
            base_scenario_key=feedback.scenario_key,
            scenario_key=_with_fingerprint(feedback.scenario_key, fingerprint),
            rule_fingerprint=fingerprint,
            hand_index=hand_index,
            is_split_hand=isinstance(hand, PlayerHand) and hand.is_split_hand,
        )

    def record_game(self, game: "Game", player_action: Action) -> DecisionRecord:
        """Grade and record an action on the game's current hand."""
        feedback = self.evaluate_game(game, player_action)
        return self.record(
            game.current_hand,
            game.dealer.up_card,
            player_action,
            game.rules,
            hand_index=game.current_hand_index,
            feedback=feedback,
        )
