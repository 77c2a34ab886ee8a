"""Tests for decision grading and scenario keys."""

import pytest

from blackjack_core.actions import Action
from blackjack_core.cards import Card
from blackjack_core.errors import IllegalActionError
from blackjack_core.hand import Hand, PlayerHand
from blackjack_core.strategy import GameRules, full_scenario_key, scenario_key


class TestScenarioKey:
    """Tests for scenario key formatting."""

    def test_hard_key(self, hard_16_hand):
        assert scenario_key(hard_16_hand, Card.from_string("TC")) == "H16 vs 10"

    def test_soft_key(self, soft_17_hand):
        assert scenario_key(soft_17_hand, Card.from_string("AC")) == "S17 vs A"

    def test_pair_key(self, pair_8s_hand):
        assert scenario_key(pair_8s_hand, Card.from_string("9C")) == "Pair 8s vs 9"

    def test_blackjack_key(self, blackjack_hand):
        assert scenario_key(blackjack_hand, Card.from_string("6C")) == "BJ vs 6"

    def test_full_key_appends_fingerprint(self, hard_16_hand, rules):
        key = full_scenario_key(hard_16_hand, Card.from_string("TC"), rules)
        assert key == f"H16 vs 10 [{rules.fingerprint()}]"


class TestDecisionEvaluator:
    """Tests for DecisionEvaluator feedback."""

    def test_correct_decision(self, evaluator, pair_8s_hand, rules):
        feedback = evaluator.evaluate(pair_8s_hand, Card.from_string("6D"), Action.SPLIT, rules)

        assert feedback.is_correct
        assert feedback.optimal_action == Action.SPLIT
        assert feedback.scenario_key == "Pair 8s vs 6"
        assert feedback.explanation.startswith("Correct!")

    def test_incorrect_decision(self, evaluator, hard_16_hand):
        rules = GameRules(surrender_allowed=False)
        feedback = evaluator.evaluate(hard_16_hand, Card.from_string("TD"), Action.STAND, rules)

        assert not feedback.is_correct
        assert feedback.player_action == Action.STAND
        assert feedback.optimal_action == Action.HIT
        assert feedback.explanation.startswith("Incorrect. You chose STAND, but should HIT.")

    def test_record(self, evaluator, soft_17_hand, rules):
        record = evaluator.record(soft_17_hand, Card.from_string("3D"), Action.HIT, rules, hand_index=1)

        assert record.action == "HIT"
        assert record.optimal_action == "DOUBLE"
        assert not record.is_correct
        assert record.base_scenario_key == "S17 vs 3"
        assert record.scenario_key == f"S17 vs 3 [{rules.fingerprint()}]"
        assert record.rule_fingerprint == rules.fingerprint()
        assert record.hand_index == 1
        assert [card.rank for card in record.hand] == ["ACE", "SIX"]

    def test_record_key_matches_full_scenario_key(self, evaluator, pair_8s_hand, vegas_strip_rules):
        up = Card.from_string("AC")
        record = evaluator.record(pair_8s_hand, up, Action.SPLIT, vegas_strip_rules)

        assert record.scenario_key == full_scenario_key(pair_8s_hand, up, vegas_strip_rules)

    def test_evaluate_game_uses_table_constraints(self, evaluator, stacked_game):
        """An unaffordable double is not counted as the optimal play."""
        # Player A-6 vs dealer 3, all chips on the table
        game = stacked_game("AS 6H 3D TC 2C", bet=100, chips=100).deal_round()

        feedback = evaluator.evaluate_game(game, Action.HIT)

        assert Action.DOUBLE not in game.available_actions()
        assert feedback.optimal_action == Action.HIT
        assert feedback.is_correct

    def test_all_in_pair_of_eights_splits(self, evaluator, stacked_game):
        # Player 8-8 vs dealer 6 with no chips left after the bet
        game = stacked_game("8S 8H 6D TC 3C TD", bet=100, chips=100).deal_round()

        feedback = evaluator.evaluate_game(game, Action.SPLIT)

        assert feedback.optimal_action == Action.SPLIT
        assert feedback.is_correct

    def test_evaluate_game_without_decision(self, evaluator, game):
        with pytest.raises(IllegalActionError):
            evaluator.evaluate_game(game, Action.HIT)

    def test_record_game(self, evaluator, stacked_game):
        game = stacked_game("TS 6H TD 7C").deal_round()
        record = evaluator.record_game(game, Action.SURRENDER)

        assert record.is_correct
        assert record.dealer_up_card.rank == "TEN"
        assert record.hand_index == 0
        assert not record.is_split_hand

    def test_evaluation_does_not_depend_on_hand_type(self, evaluator, rules):
        """A plain Hand and a PlayerHand with the same cards grade the same."""
        hand = Hand.from_string("9S 2H")
        up = Card.from_string("5D")
        plain = evaluator.evaluate(hand, up, Action.DOUBLE, rules)
        wagered = evaluator.evaluate(PlayerHand.initial(hand.cards, 10), up, Action.DOUBLE, rules)
        assert plain == wagered
