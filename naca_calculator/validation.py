"""Input validation for the calculator form.

Every rule takes the raw (usually string) form value and returns a
``ValidationResult``. Rules never raise on bad input, and the aggregate
validator runs every field rule so the caller gets all field errors at once.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .config import DEFAULT_RULES, ProgramRules
from .inputs import ValidatedInput

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Form key -> alternative snake_case key accepted in raw input
FIELD_ALIASES = {
    "price": "price",
    "term": "term",
    "rate": "rate",
    "tax": "tax",
    "insurance": "insurance",
    "hoaFee": "hoa_fee",
    "principalBuydown": "principal_buydown",
}


@dataclass(frozen=True)
class ValidationError:
    """A single field-level problem, suitable for inline display."""

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation rule: parsed data or a list of errors."""

    ok: bool
    data: Any = None
    errors: List[ValidationError] = field(default_factory=list)

    @classmethod
    def success(cls, data: Any) -> "ValidationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, errors: Iterable[ValidationError]) -> "ValidationResult":
        return cls(ok=False, errors=list(errors))

    @classmethod
    def error(cls, field_name: str, message: str) -> "ValidationResult":
        return cls.failure([ValidationError(field_name, message)])


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def parse_number(value: Any) -> Optional[float]:
    """Parse a finite decimal number, or return None.

    Strings must be entirely numeric after trimming; ``"12abc"``, ``"nan"``
    and ``"inf"`` are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    else:
        text = str(value).strip()
        if not _NUMBER_RE.match(text):
            return None
        number = float(text)
    if not math.isfinite(number):
        return None
    return number


def _format_options(options: Sequence[int]) -> str:
    """Join options as ``15, 20, or 30``."""
    labels = [str(o) for o in options]
    if len(labels) <= 1:
        return "".join(labels)
    return ", ".join(labels[:-1]) + ", or " + labels[-1]


def normalize_rate_table(allowable_rates: Mapping[Any, Iterable[Any]], precision: int = 3) -> Dict[int, List[float]]:
    """Coerce a term -> rates mapping to int keys and rounded float rates."""
    table = {}
    for term, rates in allowable_rates.items():
        table[int(term)] = [round(float(r), precision) for r in rates]
    return table


def validate_price(value: Any) -> ValidationResult:
    """Validate the price/payment field. Zero is allowed."""
    if _is_blank(value):
        return ValidationResult.error("price", "Required")
    number = parse_number(value)
    if number is None:
        return ValidationResult.error("price", "Must be a number")
    if number < 0:
        return ValidationResult.error("price", "Must be positive")
    return ValidationResult.success(number)


def validate_term(value: Any, allowed_terms: Optional[Iterable[int]] = None) -> ValidationResult:
    """Validate the loan term in years against the allowed set."""
    terms = sorted(allowed_terms if allowed_terms is not None else DEFAULT_RULES.allowed_terms)
    if _is_blank(value):
        return ValidationResult.error("term", "Required")
    number = parse_number(value)
    if number is None or not number.is_integer() or int(number) not in terms:
        return ValidationResult.error("term", f"Invalid term. Must be {_format_options(terms)}")
    return ValidationResult.success(int(number))


def validate_rate(value: Any) -> ValidationResult:
    """Validate an interest rate without a rate table: any positive number."""
    if _is_blank(value):
        return ValidationResult.error("rate", "Required")
    number = parse_number(value)
    if number is None:
        return ValidationResult.error("rate", "Rate must be a number")
    if number <= 0:
        return ValidationResult.error("rate", "Rate must be greater than 0")
    return ValidationResult.success(number)


def validate_mortgage_rate(
    term_value: Any,
    rate_value: Any,
    allowable_rates: Optional[Mapping[Any, Iterable[Any]]] = None,
    rules: ProgramRules = DEFAULT_RULES,
) -> ValidationResult:
    """Validate term and rate together.

    Without ``allowable_rates`` the term must be an allowed program term and
    the rate any positive number. With a table (term -> list of rates, e.g.
    ``{"15": [4.625, 5.625], "30": [5.125, 6.125]}``) the term must be one of
    its keys and the rate must be listed for that term.

    On success ``data`` is a dict with ``term`` and ``rate``.
    """
    if allowable_rates is None:
        term_result = validate_term(term_value, rules.allowed_terms)
        rate_result = validate_rate(rate_value)
        errors = term_result.errors + rate_result.errors
        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success({"term": term_result.data, "rate": rate_result.data})

    table = normalize_rate_table(allowable_rates, rules.rate_precision)
    errors = []

    term_result = validate_term(term_value, table.keys())
    errors.extend(term_result.errors)

    rate = parse_number(rate_value)
    if _is_blank(rate_value):
        errors.append(ValidationError("rate", "Required"))
    elif rate is None:
        errors.append(ValidationError("rate", "Rate must be a number"))
    elif term_result.ok and round(rate, rules.rate_precision) not in table[term_result.data]:
        errors.append(ValidationError("rate", f"Invalid rate for {term_result.data}-year term"))

    if errors:
        return ValidationResult.failure(errors)
    return ValidationResult.success({"term": term_result.data, "rate": rate})


def property_tax_grid(rules: ProgramRules = DEFAULT_RULES) -> np.ndarray:
    """All valid tax rates, e.g. 5.0, 5.5, ..., 30.5."""
    count = int(round((rules.tax_max - rules.tax_min) / rules.tax_step)) + 1
    grid = rules.tax_min + np.arange(count) * rules.tax_step
    return np.round(grid, rules.tax_precision)


def validate_property_tax(value: Any, rules: ProgramRules = DEFAULT_RULES) -> ValidationResult:
    """Validate the property tax rate (dollars per $1000 per year).

    The value must sit on the program's discrete grid. It is rounded to the
    grid precision before comparing so float steps like 15.499999 still match.
    """
    if _is_blank(value):
        return ValidationResult.error("tax", "Required")
    number = parse_number(value)
    if number is None:
        return ValidationResult.error("tax", "Property tax must be a number")
    rounded = round(number, rules.tax_precision)
    if not np.any(np.isclose(property_tax_grid(rules), rounded)):
        return ValidationResult.error("tax", "Invalid property tax rate")
    return ValidationResult.success(number)


def validate_non_negative(value: Any, field_name: str) -> ValidationResult:
    """Validate a dollar amount that may be zero (insurance, HOA, buydown)."""
    if _is_blank(value):
        return ValidationResult.error(field_name, "Required")
    number = parse_number(value)
    if number is None:
        return ValidationResult.error(field_name, "Must be a number")
    if number < 0:
        return ValidationResult.error(field_name, "Must be non-negative")
    return ValidationResult.success(number)


def _raw_value(raw: Mapping[str, Any], form_key: str) -> Any:
    if form_key in raw:
        return raw[form_key]
    return raw.get(FIELD_ALIASES[form_key])


def validate_calculator_input(
    raw: Mapping[str, Any],
    allowable_rates: Optional[Mapping[Any, Iterable[Any]]] = None,
    rules: ProgramRules = DEFAULT_RULES,
) -> ValidationResult:
    """Validate every calculator field and collect all errors.

    Args:
        raw: Form values keyed by form name (``hoaFee``) or snake_case
            (``hoa_fee``). Missing keys are reported as ``Required``.
        allowable_rates: Optional term -> rates table from the rates
            service. When given, the rate must be one of the listed rates.
        rules: Program rules (allowed terms, tax grid).

    Returns:
        ValidationResult with a ``ValidatedInput`` on success.
    """
    raw = raw or {}
    errors = []

    price = validate_price(_raw_value(raw, "price"))
    term_rate = validate_mortgage_rate(
        _raw_value(raw, "term"), _raw_value(raw, "rate"), allowable_rates, rules
    )
    tax = validate_property_tax(_raw_value(raw, "tax"), rules)
    insurance = validate_non_negative(_raw_value(raw, "insurance"), "insurance")
    hoa_fee = validate_non_negative(_raw_value(raw, "hoaFee"), "hoaFee")
    buydown = validate_non_negative(_raw_value(raw, "principalBuydown"), "principalBuydown")

    for result in (price, term_rate, tax, insurance, hoa_fee, buydown):
        errors.extend(result.errors)

    if errors:
        return ValidationResult.failure(errors)

    return ValidationResult.success(
        ValidatedInput(
            price=price.data,
            term=term_rate.data["term"],
            rate=term_rate.data["rate"],
            tax=tax.data,
            insurance=insurance.data,
            hoa_fee=hoa_fee.data,
            principal_buydown=buydown.data,
        )
    )
