"""Allowed interest rates per loan term.

The rates service publishes one rate per term. The calculator offers two
rates for each term, the published rate and one point above it, and the
strict validator only accepts rates from that table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from .validation import parse_number

RATE_PRECISION = 3
DEFAULT_RATE_SPREAD = 1.0

# Used when no rates record is available
DEFAULT_ALLOWABLE_RATES: dict[int, list[float]] = {
    15: [5.0, 6.0],
    20: [5.5, 6.5],
    30: [6.0, 7.0],
}

_RECORD_FIELDS = {
    15: "fifteen_year_rate",
    20: "twenty_year_rate",
    30: "thirty_year_rate",
}


@dataclass(frozen=True)
class RatesRecord:
    """Rates published for one day."""

    thirty_year_rate: float
    twenty_year_rate: float
    fifteen_year_rate: float
    created_at: datetime | None = None

    def rate_for_term(self, term: int) -> float:
        return getattr(self, _RECORD_FIELDS[int(term)])


def parse_rates_record(data: Mapping[str, Any]) -> RatesRecord:
    """Build a RatesRecord from a service payload.

    Rates may arrive as numbers or numeric strings; ``created_at`` is an
    optional ISO timestamp or datetime.

    Raises:
        ValueError: If a rate is missing or not numeric, or the timestamp
            cannot be parsed.
    """
    rates = {}
    for key in _RECORD_FIELDS.values():
        if key not in data:
            raise ValueError(f"Missing rate: {key}")
        value = parse_number(data[key])
        if value is None:
            raise ValueError(f"Invalid rate for {key}: {data[key]!r}")
        rates[key] = value

    created_at = data.get("created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    elif created_at is not None and not isinstance(created_at, datetime):
        raise ValueError(f"Invalid created_at: {created_at!r}")

    return RatesRecord(created_at=created_at, **rates)


def build_allowable_rates(
    record: RatesRecord,
    spread: float = DEFAULT_RATE_SPREAD,
) -> dict[int, list[float]]:
    """Term -> [published rate, published rate + spread]."""
    table = {}
    for term in sorted(_RECORD_FIELDS):
        base = record.rate_for_term(term)
        table[term] = [round(base, RATE_PRECISION), round(base + spread, RATE_PRECISION)]
    return table


def default_allowable_rates() -> dict[int, list[float]]:
    """Fresh copy of the fallback table."""
    return {term: list(rates) for term, rates in DEFAULT_ALLOWABLE_RATES.items()}


def rates_equivalent(a: RatesRecord, b: RatesRecord) -> bool:
    """True when both records carry the same three rates.

    The publish date is ignored, so a daily refresh that returns unchanged
    rates can be recognised and skipped.
    """
    return (
        a.thirty_year_rate == b.thirty_year_rate
        and a.twenty_year_rate == b.twenty_year_rate
        and a.fifteen_year_rate == b.fifteen_year_rate
    )


def default_rate_for_term(allowable_rates: Mapping[Any, list], term: int) -> float:
    """Rate pre-selected for a term: the higher of its two options.

    Falls back to the 30-year list when the term is not in the table, then
    to the first term that lists any rates.

    Raises:
        ValueError: If no term in the table lists a rate.
    """
    table = {int(k): list(v) for k, v in allowable_rates.items()}
    candidates = [table.get(int(term)), table.get(30)] + [table[t] for t in sorted(table)]
    rates = next((r for r in candidates if r), None)
    if rates is None:
        raise ValueError(f"No allowable rates to choose a default for {term}-year term")
    return rates[1] if len(rates) > 1 else rates[0]
