"""Program rules and form defaults for the NACA calculator."""

from dataclasses import dataclass, field
from typing import Dict, Tuple

# Form defaults (what the calculator form starts with)
DEFAULT_TERM = 30
DEFAULT_TAX_RATE = 15.0  # dollars per $1000 per year
DEFAULT_INSURANCE = 50.0  # monthly
DEFAULT_HOA_FEE = 0.0
DEFAULT_PRINCIPAL_BUYDOWN = 0.0


@dataclass(frozen=True)
class ProgramRules:
    """Loan program constraints shared by validation and calculation."""

    allowed_terms: Tuple[int, ...] = (15, 20, 30)

    # Property tax grid, dollars per $1000 per year
    tax_min: float = 5.0
    tax_max: float = 30.5
    tax_step: float = 0.5
    tax_precision: int = 1  # decimals used when matching against the grid

    # Interest rate buydown
    max_rate_buydown: float = 1.5  # percentage points
    buydown_multipliers: Dict[int, float] = field(
        default_factory=lambda: {15: 0.04, 20: 0.06, 30: 0.06}
    )
    default_buydown_multiplier: float = 0.06
    rate_precision: int = 3

    # Payment -> price search
    solver_epsilon: float = 0.01
    solver_max_iterations: int = 1000

    def buydown_multiplier(self, term: int) -> float:
        """Cost per point of reduction, as a fraction of principal."""
        return self.buydown_multipliers.get(int(term), self.default_buydown_multiplier)


DEFAULT_RULES = ProgramRules()
