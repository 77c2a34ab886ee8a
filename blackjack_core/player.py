"""Player identity and chip balance."""

from dataclasses import dataclass, replace

from blackjack_core.errors import InsufficientChipsError, PlayerError


@dataclass(frozen=True)
class Player:
    """A seated player; chip changes return a new Player."""

    id: str
    chips: int

    def __post_init__(self) -> None:
        if self.chips < 0:
            raise PlayerError("Chip balance cannot be negative")

    def can_afford(self, amount: int) -> bool:
        return self.chips >= amount

    def deduct_chips(self, amount: int) -> "Player":
        if amount < 0:
            raise PlayerError("Amount cannot be negative")
        if not self.can_afford(amount):
            raise InsufficientChipsError(
                f"Insufficient chips: need {amount}, have {self.chips}"
            )
        return replace(self, chips=self.chips - amount)

    def add_chips(self, amount: int) -> "Player":
        if amount < 0:
            raise PlayerError("Amount cannot be negative")
        return replace(self, chips=self.chips + amount)
