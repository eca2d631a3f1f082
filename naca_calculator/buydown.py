"""Interest rate and principal buydown pricing."""

import math
import numbers
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .config import DEFAULT_RULES, ProgramRules
from .mortgage import calculate_monthly_payment


@dataclass(frozen=True)
class InterestRateBuydown:
    """Priced interest rate buydown.

    ``reduction`` is what the borrower actually gets after the program cap,
    which can be less than ``original_rate - requested_rate``.
    """

    cost: float
    original_rate: float
    requested_rate: float
    effective_rate: float
    reduction: float  # percentage points
    points: float
    cap_reached: bool


def _all_finite(*values) -> bool:
    return all(isinstance(v, numbers.Real) and math.isfinite(v) for v in values)


def minimum_buydown_rate(original_rate: float, rules: ProgramRules = DEFAULT_RULES) -> float:
    """Lowest rate reachable by buying down ``original_rate``."""
    return max(0.0, original_rate - rules.max_rate_buydown)


def price_interest_rate_buydown(
    principal: float,
    original_rate: float,
    desired_rate: float,
    term: int,
    rules: ProgramRules = DEFAULT_RULES,
) -> InterestRateBuydown:
    """Price a buydown from ``original_rate`` to ``desired_rate``.

    One point costs 1% of principal. On 20 and 30 year loans a point buys
    1/6% of rate, on 15 year loans 1/4%, so each full percentage point of
    reduction costs 6% or 4% of principal. The reduction is capped at
    ``rules.max_rate_buydown`` (1.5 points) no matter what is requested.
    """
    no_buydown = InterestRateBuydown(
        cost=0.0,
        original_rate=original_rate,
        requested_rate=desired_rate,
        effective_rate=original_rate,
        reduction=0.0,
        points=0.0,
        cap_reached=False,
    )

    if not _all_finite(principal, original_rate, desired_rate, term):
        return no_buydown
    if principal <= 0 or term <= 0 or desired_rate >= original_rate:
        return no_buydown

    requested = original_rate - desired_rate
    reduction = min(requested, rules.max_rate_buydown)
    multiplier = rules.buydown_multiplier(term)

    return InterestRateBuydown(
        cost=principal * reduction * multiplier,
        original_rate=original_rate,
        requested_rate=desired_rate,
        effective_rate=original_rate - reduction,
        reduction=reduction,
        # multiplier is cost per percentage point; a point is 1% of principal
        points=reduction * multiplier * 100,
        cap_reached=requested > rules.max_rate_buydown,
    )


def calculate_interest_rate_buydown(
    principal: float,
    original_rate: float,
    desired_rate: float,
    term: int,
    rules: ProgramRules = DEFAULT_RULES,
) -> float:
    """Cost in dollars to buy ``original_rate`` down to ``desired_rate``.

    Returns 0 if the desired rate is not lower or the principal is not a
    positive finite number.
    """
    return price_interest_rate_buydown(principal, original_rate, desired_rate, term, rules).cost


def calculate_principal_buydown_cost(amount: float) -> float:
    """A principal buydown costs exactly the dollars applied to principal."""
    if not _all_finite(amount) or amount < 0:
        return 0.0
    return float(amount)


def max_principal_buydown(purchase_price: float) -> float:
    """Largest principal buydown allowed: the whole purchase price."""
    if not _all_finite(purchase_price) or purchase_price < 0:
        return 0.0
    return float(purchase_price)


def buydown_options(
    principal: float,
    original_rate: float,
    term: int,
    step: float = 0.125,
    rules: ProgramRules = DEFAULT_RULES,
) -> pd.DataFrame:
    """Table of rate steps from the original rate down to the program floor.

    Columns: rate, reduction, points, cost, principal_interest,
    monthly_savings.
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    floor = minimum_buydown_rate(original_rate, rules)
    count = int(math.floor((original_rate - floor) / step + 1e-9)) + 1
    rates = np.round(original_rate - np.arange(count) * step, rules.rate_precision)
    if rates[-1] > floor + 1e-9:
        rates = np.append(rates, round(floor, rules.rate_precision))

    base_payment = calculate_monthly_payment(principal, original_rate, term)

    data = []
    for rate in rates:
        priced = price_interest_rate_buydown(principal, original_rate, float(rate), term, rules)
        payment = calculate_monthly_payment(principal, priced.effective_rate, term)
        data.append({
            'rate': round(priced.effective_rate, rules.rate_precision),
            'reduction': round(priced.reduction, rules.rate_precision),
            'points': round(priced.points, 3),
            'cost': round(priced.cost, 2),
            'principal_interest': round(payment, 2),
            'monthly_savings': round(base_payment - payment, 2),
        })

    return pd.DataFrame(data)
