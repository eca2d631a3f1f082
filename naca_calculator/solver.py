"""Bounded bisection for monotonic cost functions."""

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BisectionResult:
    """Outcome of a bisection search."""

    value: float  # last guess
    output: float  # func(value)
    iterations: int
    converged: bool


def bisect(
    func: Callable[[float], float],
    target: float,
    low: float,
    high: float,
    epsilon: float = 0.01,
    max_iterations: int = 1000,
) -> BisectionResult:
    """Find x in [low, high] where a non-decreasing ``func`` hits ``target``.

    Halves the bracket until ``|func(x) - target| <= epsilon`` or
    ``max_iterations`` guesses have been made. ``func`` may be a step
    function (e.g. tax rounded to whole dollars), so termination never relies
    on exact equality.

    If the target lies outside ``[func(low), func(high)]`` the guesses
    collapse onto the nearer bound and ``converged`` is False.

    Raises:
        ValueError: If the bounds are inverted or the limits are not positive.
    """
    if high < low:
        raise ValueError(f"Invalid bounds: high ({high}) < low ({low})")
    if epsilon <= 0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")
    if max_iterations <= 0:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}")

    for iterations in range(1, max_iterations + 1):
        guess = low + (high - low) / 2
        output = func(guess)

        if abs(output - target) <= epsilon:
            return BisectionResult(guess, output, iterations, True)

        if output > target:
            high = guess
        else:
            low = guess

    logger.debug(
        "Bisection stopped after %d iterations at %.6f (off by %.6f)",
        iterations, guess, output - target,
    )
    return BisectionResult(guess, output, iterations, False)
