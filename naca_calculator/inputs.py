"""Calculator input that has already passed validation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidatedInput:
    """Strongly-typed calculator input that passed every field rule."""

    price: float  # desired payment or purchase price, depending on direction
    term: int  # years
    rate: float  # annual percent, e.g. 6.5
    tax: float  # dollars per $1000 per year
    insurance: float  # monthly
    hoa_fee: float  # monthly
    principal_buydown: float = 0.0
