"""Value Object Tariff - two-tier flat parking rate."""

from dataclasses import dataclass

MOTORCYCLE = "Motorcycle"


@dataclass(frozen=True)
class Tariff:
    """
    Flat rate per vehicle class.

    Attributes:
        motorcycle_rate: Rate charged for motorcycles.
        standard_rate: Rate charged for every other vehicle class.
    """

    motorcycle_rate: int = 30
    standard_rate: int = 50

    def __post_init__(self) -> None:
        if self.motorcycle_rate <= 0 or self.standard_rate <= 0:
            raise ValueError("tariff rates must be positive")

    def amount_for(self, vehicle: str) -> int:
        return self.motorcycle_rate if vehicle == MOTORCYCLE else self.standard_rate

    def accepts(self, vehicle: str, amount: int | float) -> bool:
        # bool is an int subclass; never a valid amount
        if isinstance(amount, bool):
            return False
        return amount == self.amount_for(vehicle)
