"""Dict conversion for handing inputs and results to a UI layer.

Keys use the calculator form's names (``hoaFee``, ``monthlyPayment``).
"""

from typing import Dict, List

from .buydown import InterestRateBuydown
from .inputs import ValidatedInput
from .mortgage import CalculationResult
from .validation import ValidationError


def validated_input_to_dict(inputs: ValidatedInput) -> dict:
    """Convert ValidatedInput to serializable dictionary."""
    return {
        'price': inputs.price,
        'term': inputs.term,
        'rate': inputs.rate,
        'tax': inputs.tax,
        'insurance': inputs.insurance,
        'hoaFee': inputs.hoa_fee,
        'principalBuydown': inputs.principal_buydown,
    }


def dict_to_validated_input(data: dict) -> ValidatedInput:
    """Convert dictionary of already validated numbers to ValidatedInput."""
    return ValidatedInput(
        price=float(data['price']),
        term=int(data['term']),
        rate=float(data['rate']),
        tax=float(data['tax']),
        insurance=float(data['insurance']),
        hoa_fee=float(data['hoaFee']),
        principal_buydown=float(data.get('principalBuydown', 0.0)),
    )


def calculation_result_to_dict(result: CalculationResult) -> dict:
    """Convert CalculationResult to serializable dictionary."""
    return {
        'monthlyPayment': result.monthly_payment,
        'purchasePrice': result.purchase_price,
        'principalInterest': result.principal_interest,
        'taxes': result.taxes,
        'insurance': result.insurance,
        'hoaFee': result.hoa_fee,
    }


def validation_errors_to_list(errors: List[ValidationError]) -> List[Dict[str, str]]:
    """Convert validation errors to ``{field, message}`` dicts."""
    return [{'field': e.field, 'message': e.message} for e in errors]


def interest_rate_buydown_to_dict(buydown: InterestRateBuydown) -> dict:
    """Convert InterestRateBuydown to serializable dictionary."""
    return {
        'cost': buydown.cost,
        'originalRate': buydown.original_rate,
        'requestedRate': buydown.requested_rate,
        'effectiveRate': buydown.effective_rate,
        'reduction': buydown.reduction,
        'points': buydown.points,
        'capReached': buydown.cap_reached,
    }
