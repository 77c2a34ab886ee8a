"""Tests for settlement outcomes, payouts and chip crediting."""

from dataclasses import replace

import pytest

from blackjack_core.actions import Action
from blackjack_core.cards import Card
from blackjack_core.errors import AlreadySettledError, IllegalActionError, InvalidPhaseError
from blackjack_core.game import GamePhase, RoundResult, SettlementService
from blackjack_core.game.settlement import calculate_payout, determine_result
from blackjack_core.hand import Hand, HandStatus, PlayerHand
from blackjack_core.strategy import GameRules


def _standing(codes: str, bet: int = 10, is_split_hand: bool = False) -> PlayerHand:
    cards = Hand.from_string(codes).cards
    hand = PlayerHand(cards, bet, is_split_hand=is_split_hand)
    return hand if hand.is_busted else hand.stand()


class TestDetermineResult:
    """Outcome precedence for a single hand."""

    def test_higher_total_wins(self):
        assert determine_result(_standing("TS 9H"), Hand.from_string("TD 7C")) == RoundResult.PLAYER_WIN

    def test_lower_total_loses(self):
        assert determine_result(_standing("TS 7H"), Hand.from_string("TD 9C")) == RoundResult.DEALER_WIN

    def test_equal_totals_push(self):
        assert determine_result(_standing("TS 8H"), Hand.from_string("9D 9C")) == RoundResult.PUSH

    def test_player_bust_loses_even_if_dealer_busts(self):
        busted = PlayerHand.initial(Hand.from_string("TS 6H").cards, 10).hit(Card.from_string("KC"))
        assert determine_result(busted, Hand.from_string("TD 6C 8S")) == RoundResult.DEALER_WIN

    def test_dealer_bust_wins(self):
        assert determine_result(_standing("TS 2H"), Hand.from_string("TD 6C 8S")) == RoundResult.PLAYER_WIN

    def test_surrender_first(self):
        hand = PlayerHand.initial(Hand.from_string("TS 6H").cards, 10).surrender()
        assert determine_result(hand, Hand.from_string("TD 6C 8S")) == RoundResult.SURRENDER

    def test_player_blackjack(self):
        assert determine_result(_standing("AS KH"), Hand.from_string("TD QC")) == RoundResult.PLAYER_BLACKJACK

    def test_both_blackjack_push(self):
        assert determine_result(_standing("AS KH"), Hand.from_string("AD QC")) == RoundResult.PUSH

    def test_dealer_blackjack_beats_21(self):
        assert determine_result(_standing("7S 7H 7C"), Hand.from_string("AD QC")) == RoundResult.DEALER_WIN

    def test_split_21_is_not_blackjack(self):
        hand = _standing("AS KH", is_split_hand=True)
        assert determine_result(hand, Hand.from_string("TD QC")) == RoundResult.PLAYER_WIN


class TestCalculatePayout:
    """Chips returned per result, stake included."""

    @pytest.mark.parametrize(
        "result,expected",
        [
            (RoundResult.PLAYER_WIN, 50),
            (RoundResult.PLAYER_BLACKJACK, 62),
            (RoundResult.SURRENDER, 12),
            (RoundResult.PUSH, 25),
            (RoundResult.DEALER_WIN, 0),
        ],
    )
    def test_payouts(self, result, expected):
        assert calculate_payout(result, 25, GameRules()) == expected

    def test_six_to_five_blackjack(self):
        assert calculate_payout(RoundResult.PLAYER_BLACKJACK, 10, GameRules.single_deck()) == 22


class TestSettlementService:
    """Tests for settling whole rounds."""

    def test_player_19_beats_dealer_17(self, stacked_game):
        game = stacked_game("TS 9H TD 7C").deal_round().player_action(Action.STAND)
        settled = game.dealer_play_automated()

        assert settled.settlement.primary_result == RoundResult.PLAYER_WIN
        assert settled.settlement.total_payout == 50
        assert settled.player.chips == 125
        assert settled.player_hands[0].status == HandStatus.WIN

    def test_blackjack_vs_20(self, stacked_game):
        game = stacked_game("AS KH TD QC").deal_round().player_action(Action.STAND)
        settled = game.dealer_play_automated()

        assert settled.settlement.primary_result == RoundResult.PLAYER_BLACKJACK
        assert settled.settlement.total_payout == 62
        assert settled.player.chips == 75 + 62

    def test_loss_leaves_chips_deducted(self, stacked_game):
        """100 chips, bet 25, lose: 75 remain."""
        game = stacked_game("TS 7H TD 9C").deal_round().player_action(Action.STAND)
        settled = game.dealer_play_automated()

        assert settled.player.chips == 75
        assert settled.settlement.net_chip_change == -25
        assert settled.player_hands[0].status == HandStatus.LOSS

    def test_push_returns_bet(self, stacked_game):
        """100 chips, bet 25, push: 100 remain."""
        game = stacked_game("TS 8H 9D 9C").deal_round().player_action(Action.STAND)
        settled = game.dealer_play_automated()

        assert settled.player.chips == 100
        assert settled.settlement.net_chip_change == 0
        assert settled.player_hands[0].status == HandStatus.PUSH

    def test_surrender_returns_half(self, stacked_game):
        game = stacked_game("TS 6H TD 7C").deal_round().player_action(Action.SURRENDER)
        settled = game.dealer_play_automated()

        assert settled.settlement.primary_result == RoundResult.SURRENDER
        assert settled.player.chips == 75 + 12
        assert settled.player_hands[0].status == HandStatus.SURRENDERED

    def test_split_hands_settled_individually(self, stacked_game):
        # 8-8 vs dealer 6-10; split hands 8-3 (stand 11) and 8-10 (18); dealer draws 9, busts
        game = stacked_game("8S 8H 6D TC 3C TD 9S").deal_round()
        game = game.player_action(Action.SPLIT)
        game = game.player_action(Action.STAND).player_action(Action.STAND)
        settled = game.dealer_play_automated()

        assert settled.settlement.results == (RoundResult.PLAYER_WIN, RoundResult.PLAYER_WIN)
        assert settled.settlement.total_wagered == 50
        assert settled.settlement.total_payout == 100
        assert settled.player.chips == 75 + 100

    def test_settle_twice_fails(self, stacked_game):
        game = stacked_game("TS 9H TD 7C").deal_round().player_action(Action.STAND)
        settled = game.dealer_play_automated()

        with pytest.raises(AlreadySettledError):
            settled.settle_round()

    def test_manual_settlement(self, stacked_game, events):
        game = stacked_game("TS 9H TD 7C").deal_round().player_action(Action.STAND)
        finished = game.dealer_play_automated(auto_settle=False)
        settled = finished.settle_round(events=events)

        assert settled.is_settled
        assert settled.player.chips == 125
        types = [event.event_type.name for event in events.history]
        assert types == ["HAND_SETTLED", "ROUND_SETTLED"]

    def test_settle_before_dealer_turn(self, stacked_game):
        game = stacked_game("TS 9H TD 7C").deal_round().player_action(Action.STAND)
        with pytest.raises(InvalidPhaseError):
            SettlementService().settle_round(game)

    def test_settle_requires_revealed_dealer(self, stacked_game):
        game = stacked_game("TS 9H TD 7C").deal_round().player_action(Action.STAND)
        with pytest.raises(IllegalActionError):
            SettlementService().settle_round(replace(game, phase=GamePhase.SETTLEMENT))
