"""Basic strategy tables for blackjack."""

from enum import Enum, auto
from typing import Mapping

from blackjack_core.actions import Action
from blackjack_core.cards import Card
from blackjack_core.hand import Hand, PlayerHand
from blackjack_core.strategy.rules import GameRules

# Type aliases for clarity
DealerUpcard = int  # 2-11 (11 = Ace)
PlayerTotal = int

DEALER_UPCARDS = range(2, 12)


class Play(Enum):
    """Strategy table cell; conditional doubles fall back when doubling is not eligible."""

    HIT = auto()
    STAND = auto()
    DOUBLE_OR_HIT = auto()
    DOUBLE_OR_STAND = auto()

    def resolve(self, can_double: bool) -> Action:
        if self == Play.DOUBLE_OR_HIT:
            return Action.DOUBLE if can_double else Action.HIT
        if self == Play.DOUBLE_OR_STAND:
            return Action.DOUBLE if can_double else Action.STAND
        if self == Play.STAND:
            return Action.STAND
        return Action.HIT


def _build_hard_table() -> Mapping[tuple[PlayerTotal, DealerUpcard], Play]:
    """Build hard totals strategy table."""
    H = Play.HIT
    S = Play.STAND
    D = Play.DOUBLE_OR_HIT

    table: dict[tuple[int, int], Play] = {}

    # Hard 8 and below (one-card split hands start at 2): always hit
    for total in range(2, 9):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = H

    # Hard 9
    for dealer in DEALER_UPCARDS:
        table[(9, dealer)] = D if 3 <= dealer <= 6 else H

    # Hard 10
    for dealer in DEALER_UPCARDS:
        table[(10, dealer)] = D if dealer <= 9 else H

    # Hard 11: double against everything but an Ace
    for dealer in DEALER_UPCARDS:
        table[(11, dealer)] = D if dealer != 11 else H

    # Hard 12
    for dealer in DEALER_UPCARDS:
        table[(12, dealer)] = S if 4 <= dealer <= 6 else H

    # Hard 13-16
    for total in range(13, 17):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = S if dealer <= 6 else H

    # Hard 17+: always stand
    for total in range(17, 22):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = S

    return table


def _build_soft_table() -> Mapping[tuple[PlayerTotal, DealerUpcard], Play]:
    """Build soft totals strategy table."""
    H = Play.HIT
    S = Play.STAND
    D = Play.DOUBLE_OR_HIT
    Ds = Play.DOUBLE_OR_STAND

    table: dict[tuple[int, int], Play] = {}

    # Soft 11-12 (a lone Ace, A-A that cannot be split)
    for total in (11, 12):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = H

    # Soft 13-14 (A,2 / A,3)
    for total in (13, 14):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = D if dealer in (5, 6) else H

    # Soft 15-16 (A,4 / A,5)
    for total in (15, 16):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = D if 4 <= dealer <= 6 else H

    # Soft 17 (A,6)
    for dealer in DEALER_UPCARDS:
        table[(17, dealer)] = D if 3 <= dealer <= 6 else H

    # Soft 18 (A,7)
    for dealer in (3, 4, 5, 6):
        table[(18, dealer)] = Ds
    for dealer in (2, 7, 8):
        table[(18, dealer)] = S
    for dealer in (9, 10, 11):
        table[(18, dealer)] = H

    # Soft 19-21: always stand
    for total in range(19, 22):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = S

    return table


def _build_pair_table() -> Mapping[tuple[int, DealerUpcard], bool]:
    """
    Build pair splitting table keyed by card value (Ace = 11).

    False means the pair is played as an ordinary soft or hard total.
    """
    table: dict[tuple[int, int], bool] = {}

    for dealer in DEALER_UPCARDS:
        # Aces and 8s: always split
        table[(11, dealer)] = True
        table[(8, dealer)] = True

        # 2s, 3s and 7s split against 2-7
        for pair in (2, 3, 7):
            table[(pair, dealer)] = dealer <= 7

        # 6s split against 2-6
        table[(6, dealer)] = dealer <= 6

        # 9s split except against 7, 10 and Ace
        table[(9, dealer)] = dealer not in (7, 10, 11)

        # 4s, 5s and tens: never split
        for pair in (4, 5, 10):
            table[(pair, dealer)] = False

    return table


HARD_TABLE = _build_hard_table()
SOFT_TABLE = _build_soft_table()
PAIR_TABLE = _build_pair_table()


def _should_surrender(hand: Hand, dealer: DealerUpcard) -> bool:
    if hand.is_soft or hand.is_pair:
        return False
    if hand.value == 16:
        return dealer in (9, 10, 11)
    if hand.value == 15:
        return dealer == 10
    return False


def optimal_action(
    hand: Hand | PlayerHand,
    dealer_up_card: Card,
    rules: GameRules,
    can_double: bool | None = None,
    can_split: bool | None = None,
) -> Action:
    """
    Get the basic strategy action.

    Precedence: surrender, pair splitting, soft totals, hard totals.

    Args:
        hand: The player's hand (a PlayerHand carries its split history)
        dealer_up_card: Dealer's visible card
        rules: Table rules in effect
        can_double: Whether doubling is eligible and affordable; defaults to
            a two-card hand, honouring double-after-split for split hands
        can_split: Whether splitting is possible; defaults to the hand being a pair

    Returns:
        The recommended action
    """
    is_split_hand = isinstance(hand, PlayerHand) and hand.is_split_hand
    cards = Hand(hand.cards)
    if cards.is_busted:
        raise ValueError("No decision exists for a busted hand")

    dealer = dealer_up_card.value
    if can_double is None:
        can_double = cards.can_double and (not is_split_hand or rules.double_after_split)
    if can_split is None:
        can_split = cards.is_pair

    if (
        rules.surrender_allowed
        and len(cards) == 2
        and not is_split_hand
        and _should_surrender(cards, dealer)
    ):
        return Action.SURRENDER

    if can_split and cards.is_pair and PAIR_TABLE[(cards.cards[0].value, dealer)]:
        return Action.SPLIT

    if cards.is_soft:
        return SOFT_TABLE[(cards.value, dealer)].resolve(can_double)

    return HARD_TABLE[(cards.value, dealer)].resolve(can_double)


class StrategyEngine:
    """
    Basic strategy advisor for one rule set.

    Stateless: the same hand, up card and rules always give the same
    action. Used both for hints and for grading a player's choice.
    """

    def __init__(self, rules: GameRules | None = None) -> None:
        self.rules = rules or GameRules()

    def recommend(
        self,
        hand: Hand | PlayerHand,
        dealer_up_card: Card,
        can_double: bool | None = None,
        can_split: bool | None = None,
    ) -> Action:
        """Recommend the optimal action under this engine's rules."""
        return optimal_action(hand, dealer_up_card, self.rules, can_double, can_split)

    def get_optimal_action(
        self,
        hand: Hand | PlayerHand,
        dealer_up_card: Card,
        rules: GameRules,
        can_double: bool | None = None,
        can_split: bool | None = None,
    ) -> Action:
        """Optimal action for an explicit rule set."""
        return optimal_action(hand, dealer_up_card, rules, can_double, can_split)

    @property
    def hard_table(self) -> Mapping[tuple[int, int], Play]:
        return HARD_TABLE

    @property
    def soft_table(self) -> Mapping[tuple[int, int], Play]:
        return SOFT_TABLE

    @property
    def pair_table(self) -> Mapping[tuple[int, int], bool]:
        return PAIR_TABLE
