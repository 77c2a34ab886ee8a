"""Hand evaluation for blackjack."""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable, Iterator

from blackjack_core.actions import Action
from blackjack_core.cards import Card
from blackjack_core.errors import IllegalActionError

if TYPE_CHECKING:
    from blackjack_core.strategy.rules import GameRules

BLACKJACK = 21


class HandStatus(Enum):
    """
    Lifecycle of a player hand.

    ACTIVE → STANDING | BUSTED | SURRENDERED during play, then
    WIN | LOSS | PUSH (surrendered hands stay SURRENDERED) at settlement.
    """

    ACTIVE = auto()
    STANDING = auto()
    BUSTED = auto()
    SURRENDERED = auto()
    WIN = auto()
    LOSS = auto()
    PUSH = auto()


@dataclass(frozen=True)
class Hand:
    """An immutable blackjack hand with value calculation."""

    cards: tuple[Card, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards", tuple(self.cards))
        if not self.cards:
            raise ValueError("Hand cannot be empty")

    @classmethod
    def from_string(cls, s: str) -> "Hand":
        """Create a hand from space separated card codes like 'AS KH'."""
        return cls(tuple(Card.from_string(code) for code in s.split()))

    def add_card(self, card: Card) -> "Hand":
        """Return a new hand with ``card`` appended."""
        return Hand(self.cards + (card,))

    @property
    def hard_value(self) -> int:
        """Total with every ace counted as 1."""
        return sum(1 if card.is_ace else card.value for card in self.cards)

    @property
    def value(self) -> int:
        """
        Calculate the best hand value.

        Returns the highest value that doesn't bust, or the lowest bust value.
        """
        total = 0
        aces = 0

        for card in self.cards:
            if card.is_ace:
                aces += 1
            total += card.value

        # Reduce aces from 11 to 1 as needed
        while total > BLACKJACK and aces > 0:
            total -= 10
            aces -= 1

        return total

    @property
    def is_soft(self) -> bool:
        """Check if the hand counts an ace as 11."""
        return self.value != self.hard_value

    @property
    def is_hard(self) -> bool:
        return not self.is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == BLACKJACK

    @property
    def is_busted(self) -> bool:
        return self.value > BLACKJACK

    @property
    def is_pair(self) -> bool:
        """Check if the hand is a pair (two cards of same rank)."""
        return len(self.cards) == 2 and self.cards[0].rank == self.cards[1].rank

    @property
    def can_double(self) -> bool:
        return len(self.cards) == 2

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"


@dataclass(frozen=True)
class PlayerHand:
    """
    A player's hand together with its wager and lifecycle status.

    Every action returns a new PlayerHand. Hands that are no longer ACTIVE
    refuse further cards and wager changes.
    """

    cards: tuple[Card, ...]
    bet: int
    status: HandStatus = HandStatus.ACTIVE
    is_split_hand: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards", tuple(self.cards))
        if not self.cards:
            raise ValueError("Hand cannot be empty")
        if self.bet < 0:
            raise ValueError("Bet cannot be negative")

    @classmethod
    def initial(cls, cards: Iterable[Card], bet: int) -> "PlayerHand":
        return cls(tuple(cards), bet)

    @property
    def hand(self) -> Hand:
        return Hand(self.cards)

    @property
    def value(self) -> int:
        return self.hand.value

    @property
    def is_soft(self) -> bool:
        return self.hand.is_soft

    @property
    def is_busted(self) -> bool:
        return self.hand.is_busted

    @property
    def is_blackjack(self) -> bool:
        """Split hands never count as a natural."""
        return self.hand.is_blackjack and not self.is_split_hand

    @property
    def is_pair(self) -> bool:
        return self.hand.is_pair

    @property
    def can_double(self) -> bool:
        return self.hand.can_double

    @property
    def is_active(self) -> bool:
        return self.status == HandStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status != HandStatus.ACTIVE

    def _require_active(self, action: str) -> None:
        if not self.is_active:
            raise IllegalActionError(f"Cannot {action}: hand is {self.status.name}")

    def hit(self, card: Card) -> "PlayerHand":
        """Take one card; the hand busts above 21 and otherwise stays active."""
        self._require_active("hit")
        cards = self.cards + (card,)
        status = HandStatus.BUSTED if Hand(cards).is_busted else HandStatus.ACTIVE
        return replace(self, cards=cards, status=status)

    def stand(self) -> "PlayerHand":
        self._require_active("stand")
        return replace(self, status=HandStatus.STANDING)

    def double_down(self, card: Card) -> "PlayerHand":
        """Double the wager, take exactly one card and complete the hand."""
        self._require_active("double")
        if not self.can_double:
            raise IllegalActionError("Can only double on the first two cards")
        cards = self.cards + (card,)
        status = HandStatus.BUSTED if Hand(cards).is_busted else HandStatus.STANDING
        return replace(self, cards=cards, bet=self.bet * 2, status=status)

    def surrender(self) -> "PlayerHand":
        self._require_active("surrender")
        if len(self.cards) != 2 or self.is_split_hand:
            raise IllegalActionError("Can only surrender as the first decision")
        return replace(self, status=HandStatus.SURRENDERED)

    def split(self, first_card: Card, second_card: Card) -> tuple["PlayerHand", "PlayerHand"]:
        """
        Split a pair into two hands.

        Each original card starts its own hand, completed by one of the
        given cards. Both hands carry the original wager.
        """
        self._require_active("split")
        if not self.is_pair:
            raise IllegalActionError("Can only split a pair")
        return (
            PlayerHand((self.cards[0], first_card), self.bet, is_split_hand=True),
            PlayerHand((self.cards[1], second_card), self.bet, is_split_hand=True),
        )

    def settle(self, status: HandStatus) -> "PlayerHand":
        """Record the settlement status of a finished hand."""
        if self.is_active:
            raise IllegalActionError("Cannot settle an active hand")
        return replace(self, status=status)

    def available_actions(self, rules: "GameRules") -> set[Action]:
        """Actions this hand allows on its own, before table constraints."""
        if not self.is_active:
            return set()

        if self.value >= BLACKJACK:
            return {Action.STAND}

        actions = {Action.HIT, Action.STAND}

        if self.can_double and (not self.is_split_hand or rules.double_after_split):
            actions.add(Action.DOUBLE)

        if self.is_pair:
            actions.add(Action.SPLIT)

        if rules.surrender_allowed and len(self.cards) == 2 and not self.is_split_hand:
            actions.add(Action.SURRENDER)

        return actions

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        return f"{self.hand} [{self.status.name}, bet {self.bet}]"
