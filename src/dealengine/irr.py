import math
from typing import Optional, Sequence

from dealengine.config import config
from dealengine.logging_utils import get_logger

logger = get_logger(__name__)


def npv(rate: float, cashflows: Sequence[float]) -> float:
    """Net present value of yearly cash flows, the first one at t=0."""
    return sum(cf / (1.0 + rate) ** t for t, cf in enumerate(cashflows))


def solve_irr(
    cashflows: Sequence[float],
    guess: Optional[float] = None,
    max_iterations: Optional[int] = None,
    tolerance: Optional[float] = None,
    min_derivative: Optional[float] = None,
) -> Optional[float]:
    """
    Internal rate of return by Newton-Raphson on sum(CF_t / (1+r)^t) = 0.

    Returns the rate as a fraction (0.12 for 12%), or None when the solver
    does not converge: derivative too flat, iterations exhausted, or the
    iterate leaves the domain r > -1. None means "N/A", never 0.
    """
    x0 = config.IRR_GUESS if guess is None else guess
    max_iterations = config.IRR_MAX_ITERATIONS if max_iterations is None else max_iterations
    tolerance = config.IRR_TOLERANCE if tolerance is None else tolerance
    min_derivative = config.IRR_MIN_DERIVATIVE if min_derivative is None else min_derivative

    if len(cashflows) < 2:
        return None

    for i in range(max_iterations):
        if x0 <= -1.0:
            logger.debug("irr left domain", extra={"context": {"iteration": i, "rate": x0}})
            return None

        f = 0.0
        df = 0.0
        try:
            for t, cf in enumerate(cashflows):
                f += cf / (1.0 + x0) ** t
                if t != 0:
                    df -= t * cf / (1.0 + x0) ** (t + 1)
        except (OverflowError, ZeroDivisionError):
            logger.debug("irr iterate overflowed", extra={"context": {"iteration": i, "rate": x0}})
            return None

        if abs(df) < min_derivative:
            logger.debug("irr derivative vanished", extra={"context": {"iteration": i, "rate": x0}})
            return None

        x1 = x0 - f / df
        if not math.isfinite(x1):
            return None
        if abs(x1 - x0) < tolerance:
            return x1
        x0 = x1

    logger.debug("irr did not converge", extra={"context": {"iterations": max_iterations}})
    return None
