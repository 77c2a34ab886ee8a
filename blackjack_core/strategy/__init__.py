"""Table rules, basic strategy and decision grading."""

from blackjack_core.strategy.rules import GameRules
from blackjack_core.strategy.basic import StrategyEngine, optimal_action
from blackjack_core.strategy.evaluator import (
    DecisionEvaluator,
    DecisionFeedback,
    full_scenario_key,
    scenario_key,
)

__all__ = [
    "GameRules",
    "StrategyEngine",
    "optimal_action",
    "DecisionEvaluator",
    "DecisionFeedback",
    "full_scenario_key",
    "scenario_key",
]
