"""Single entry point for calculator callers: validate, then calculate."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Union

from .config import DEFAULT_RULES, ProgramRules
from .mortgage import CalcMethod, CalculationResult, calculate
from .validation import ValidatedInput, ValidationError, validate_calculator_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceResult:
    """Either a calculation result or the full list of validation errors."""

    ok: bool
    data: Optional[CalculationResult] = None
    errors: List[ValidationError] = field(default_factory=list)


def calculate_mortgage(
    raw: Mapping[str, Any],
    calc_method: Union[CalcMethod, str],
    allowable_rates: Optional[Mapping[Any, Iterable[Any]]] = None,
    rules: ProgramRules = DEFAULT_RULES,
) -> ServiceResult:
    """Validate raw form input and run the calculation.

    Args:
        raw: Form values, usually strings
        calc_method: "payment" (solve for price) or "price" (solve for payment)
        allowable_rates: Optional term -> rates table; enables strict rate checks
        rules: Program rules

    Returns:
        ServiceResult; on failure ``errors`` lists every invalid field and no
        calculation is attempted.

    Raises:
        ValueError: If ``calc_method`` is unknown.
    """
    method = CalcMethod(calc_method)

    validation = validate_calculator_input(raw, allowable_rates, rules)
    if not validation.ok:
        logger.info(
            "Calculator input rejected: %s",
            ", ".join(e.field for e in validation.errors),
        )
        return ServiceResult(ok=False, errors=validation.errors)

    return ServiceResult(ok=True, data=calculate(validation.data, method, rules))


def recalculate_mortgage(
    inputs: ValidatedInput,
    calc_method: Union[CalcMethod, str],
    rules: ProgramRules = DEFAULT_RULES,
) -> CalculationResult:
    """Recalculate with inputs that were already validated.

    Used when only a buydown control moved, e.g. the bought-down rate
    replaces ``inputs.rate``.
    """
    return calculate(inputs, calc_method, rules)
