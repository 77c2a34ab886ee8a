"""Dealer hand with a concealed hole card."""

from dataclasses import dataclass

from blackjack_core.cards import Card
from blackjack_core.errors import IllegalActionError
from blackjack_core.hand import Hand


@dataclass(frozen=True)
class Dealer:
    """
    The house's hand.

    Until ``reveal_hole_card`` is called only the up card is part of the
    visible hand; afterwards the hand holds both cards and ``hole_card``
    is empty. When to draw is decided by the round manager from the table
    rules, not here.
    """

    hand: Hand | None = None
    hole_card: Card | None = None

    def deal_initial_cards(self, up_card: Card, hole_card: Card) -> "Dealer":
        return Dealer(hand=Hand((up_card,)), hole_card=hole_card)

    def reveal_hole_card(self) -> "Dealer":
        if self.hand is None:
            raise IllegalActionError("No cards dealt to dealer yet")
        if self.hole_card is None:
            raise IllegalActionError("No hole card to reveal")
        return Dealer(hand=self.hand.add_card(self.hole_card))

    def hit(self, card: Card) -> "Dealer":
        if self.hand is None:
            raise IllegalActionError("No cards dealt to dealer yet")
        return Dealer(hand=self.hand.add_card(card), hole_card=self.hole_card)

    @property
    def up_card(self) -> Card | None:
        """The face-up card, always the first one dealt."""
        return self.hand.cards[0] if self.hand is not None else None

    @property
    def is_revealed(self) -> bool:
        return self.hand is not None and self.hole_card is None
