"""Core PITI calculations in both directions.

``CalcMethod.PRICE``: the purchase price is known, solve for the monthly
payment. ``CalcMethod.PAYMENT``: the desired monthly payment is known, solve
for the purchase price it affords.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Tuple, Union

import numpy as np
import pandas as pd

from .config import DEFAULT_RULES, ProgramRules
from .inputs import ValidatedInput
from .solver import BisectionResult, bisect


class CalcMethod(Enum):
    """Which side of the calculation the user supplied."""
    PAYMENT = "payment"  # desired payment known, solve for price
    PRICE = "price"  # purchase price known, solve for payment


@dataclass(frozen=True)
class CalculationResult:
    """Raw PITI figures. Formatting is left to the caller."""

    monthly_payment: float
    purchase_price: float
    principal_interest: float
    taxes: float
    insurance: float
    hoa_fee: float


@dataclass
class Mortgage:
    """A fixed-rate, fully amortizing loan."""

    principal: float
    annual_rate: float  # as percent, e.g., 6.5 for 6.5%
    term_years: int

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / 100 / 12

    @property
    def num_payments(self) -> int:
        return int(self.term_years * 12)

    @property
    def monthly_payment(self) -> float:
        """Principal and interest per month.

        M = P * [r(1+r)^n] / [(1+r)^n - 1]

        At a 0% rate the formula divides by zero; the loan then amortizes
        linearly and the payment is P / n.

        Evaluated as P * r / (1 - (1+r)^-n) through log1p/expm1, so huge
        rates tend to P * r instead of overflowing and tiny rates tend to
        P / n instead of dividing by zero.
        """
        r = self.monthly_rate
        n = self.num_payments
        p = self.principal

        if p <= 0 or n <= 0:
            return 0.0

        if r == 0:
            return p / n

        return p * r / -math.expm1(-n * math.log1p(r))


def calculate_monthly_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """Standalone function for monthly P&I calculation."""
    return Mortgage(principal, annual_rate, term_years).monthly_payment


def calculate_monthly_tax(purchase_price: float, tax_rate: float) -> float:
    """Monthly property tax, rounded to the nearest whole dollar.

    ``tax_rate`` is dollars per $1000 of purchase price per year, so a
    $300,000 home at 15 pays $4,500 a year, or $375 a month. Halves round up.
    """
    monthly_tax = purchase_price * tax_rate / 1000 / 12
    if math.isinf(monthly_tax) and math.isfinite(purchase_price):
        # price * rate overflowed before the division
        monthly_tax = purchase_price / 12000 * tax_rate
    return float(np.floor(monthly_tax + 0.5))


def calculate_max_purchase_price(
    desired_payment: float,
    annual_rate: float,
    term_years: int,
    tax_rate: float,
    insurance: float,
    hoa_fee: float,
    principal_buydown: float = 0.0,
    rules: ProgramRules = DEFAULT_RULES,
) -> Tuple[float, BisectionResult]:
    """Find the purchase price whose total monthly cost is the desired payment.

    Tax depends on the price being solved for, so there is no closed form.
    The search runs over the loan principal (price minus buydown) between 0
    and twice the undiscounted sum of all payments, which always exceeds the
    answer.

    Returns:
        Tuple of (purchase price, solver result for the principal search)
    """
    def total_monthly(principal: float) -> float:
        return (
            calculate_monthly_payment(principal, annual_rate, term_years)
            + calculate_monthly_tax(principal + principal_buydown, tax_rate)
            + insurance
            + hoa_fee
        )

    high = min(max(0.0, 2 * desired_payment * term_years * 12), np.finfo(float).max)
    search = bisect(
        total_monthly,
        desired_payment,
        low=0.0,
        high=high,
        epsilon=rules.solver_epsilon,
        max_iterations=rules.solver_max_iterations,
    )
    principal = max(0.0, search.value)
    return principal + principal_buydown, search


def calculate_price_to_payment(inputs: ValidatedInput) -> CalculationResult:
    """Monthly payment for a known purchase price."""
    purchase_price = inputs.price
    principal = max(0.0, purchase_price - inputs.principal_buydown)

    principal_interest = calculate_monthly_payment(principal, inputs.rate, inputs.term)
    # Tax is on the full price, not the bought-down principal
    monthly_tax = calculate_monthly_tax(purchase_price, inputs.tax)

    monthly_payment = principal_interest + monthly_tax + inputs.insurance + inputs.hoa_fee

    return CalculationResult(
        monthly_payment=monthly_payment,
        purchase_price=purchase_price,
        principal_interest=principal_interest,
        taxes=monthly_tax,
        insurance=inputs.insurance,
        hoa_fee=inputs.hoa_fee,
    )


def calculate_payment_to_price(
    inputs: ValidatedInput,
    rules: ProgramRules = DEFAULT_RULES,
) -> CalculationResult:
    """Maximum purchase price for a desired monthly payment.

    ``monthly_payment`` echoes the desired payment so the user sees the
    number they typed; the P&I and tax come from the solved price.
    """
    desired_payment = inputs.price

    purchase_price, _ = calculate_max_purchase_price(
        desired_payment,
        inputs.rate,
        inputs.term,
        inputs.tax,
        inputs.insurance,
        inputs.hoa_fee,
        inputs.principal_buydown,
        rules,
    )

    principal = max(0.0, purchase_price - inputs.principal_buydown)
    principal_interest = calculate_monthly_payment(principal, inputs.rate, inputs.term)
    monthly_tax = calculate_monthly_tax(purchase_price, inputs.tax)

    return CalculationResult(
        monthly_payment=desired_payment,
        purchase_price=purchase_price,
        principal_interest=principal_interest,
        taxes=monthly_tax,
        insurance=inputs.insurance,
        hoa_fee=inputs.hoa_fee,
    )


def calculate(
    inputs: ValidatedInput,
    calc_method: Union[CalcMethod, str],
    rules: ProgramRules = DEFAULT_RULES,
) -> CalculationResult:
    """Run the calculation in the requested direction.

    Raises:
        ValueError: If ``calc_method`` is not "payment" or "price".
    """
    method = CalcMethod(calc_method)
    if method == CalcMethod.PAYMENT:
        return calculate_payment_to_price(inputs, rules)
    return calculate_price_to_payment(inputs)


def _results_frame(rows: list) -> pd.DataFrame:
    return pd.DataFrame([
        {
            'monthly_payment': r.monthly_payment,
            'purchase_price': r.purchase_price,
            'principal_interest': r.principal_interest,
            'taxes': r.taxes,
            'insurance': r.insurance,
            'hoa_fee': r.hoa_fee,
        }
        for r in rows
    ])


def affordability_table(
    inputs: ValidatedInput,
    payments: Iterable[float],
    rules: ProgramRules = DEFAULT_RULES,
) -> pd.DataFrame:
    """Purchase price afforded by each desired payment.

    ``inputs.price`` is ignored; every other field is held fixed.
    """
    rows = [
        calculate_payment_to_price(replace(inputs, price=float(p)), rules)
        for p in np.asarray(list(payments), dtype=float)
    ]
    return _results_frame(rows)


def payment_table(inputs: ValidatedInput, prices: Iterable[float]) -> pd.DataFrame:
    """Monthly payment for each purchase price, other fields held fixed."""
    rows = [
        calculate_price_to_payment(replace(inputs, price=float(p)))
        for p in np.asarray(list(prices), dtype=float)
    ]
    return _results_frame(rows)
