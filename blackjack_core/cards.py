"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator

from blackjack_core.errors import DeckExhaustedError


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10

    @property
    def is_ace(self) -> bool:
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.blackjack_value == 10


_RANK_CODES = {
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
    "A": Rank.ACE,
}

_SUIT_CODES = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str, suit_str = s[:-1], s[-1]
        if rank_str not in _RANK_CODES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_CODES[rank_str], _SUIT_CODES[suit_str])


def standard_cards(num_decks: int = 1) -> list[Card]:
    """Return every card of ``num_decks`` standard decks in suit/rank order."""
    return [
        Card(rank, suit)
        for _ in range(num_decks)
        for suit in Suit
        for rank in Rank
    ]


@dataclass(frozen=True)
class Deck:
    """
    Immutable sequence of undealt cards.

    Dealing never mutates a deck; it returns the dealt cards together with
    the deck that remains, so ``cards_dealt + remaining`` always equals
    ``total_cards``.
    """

    cards: tuple[Card, ...]
    cards_dealt: int = 0
    penetration: float = 0.75

    @classmethod
    def shuffled(
        cls,
        num_decks: int = 6,
        rng: Random | None = None,
        penetration: float = 0.75,
    ) -> "Deck":
        """
        Build a freshly shuffled multi-deck shoe.

        Args:
            num_decks: Number of 52-card decks (1-8)
            rng: Random number generator for shuffling
            penetration: Fraction dealt before ``needs_shuffle`` turns true
        """
        if not 1 <= num_decks <= 8:
            raise ValueError("num_decks must be between 1 and 8")
        if not 0.0 < penetration <= 1.0:
            raise ValueError("Penetration must be between 0 and 1")

        cards = standard_cards(num_decks)
        (rng or Random()).shuffle(cards)
        return cls(cards=tuple(cards), penetration=penetration)

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "Deck":
        """Build a deck that deals ``cards`` in the given order."""
        return cls(cards=tuple(cards))

    def deal_card(self) -> tuple[Card, "Deck"]:
        """Deal the top card, returning it with the remaining deck."""
        if not self.cards:
            raise DeckExhaustedError("Cannot deal from an empty deck")
        return self.cards[0], Deck(self.cards[1:], self.cards_dealt + 1, self.penetration)

    def deal_cards(self, count: int) -> tuple[tuple[Card, ...], "Deck"]:
        """Deal ``count`` cards from the top, returning them with the remaining deck."""
        if count < 1:
            raise ValueError("Must deal at least one card")
        if len(self.cards) < count:
            raise DeckExhaustedError(
                f"Not enough cards in deck. Have {len(self.cards)}, need {count}"
            )
        return (
            self.cards[:count],
            Deck(self.cards[count:], self.cards_dealt + count, self.penetration),
        )

    @property
    def remaining(self) -> int:
        return len(self.cards)

    @property
    def total_cards(self) -> int:
        return self.cards_dealt + len(self.cards)

    @property
    def needs_shuffle(self) -> bool:
        """Check if the cut card has been reached."""
        return self.cards_dealt >= int(self.total_cards * self.penetration)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)
