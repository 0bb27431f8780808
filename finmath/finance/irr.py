# finmath/finance/irr.py
"""
Root finders that invert the annuity equation where no closed form exists:
 - irr  : rate at which a cash-flow sequence is worth nothing today
 - rate : per-period rate implied by nper / pmt / pv / fv

Both run the same secant iteration: a two-point window, a nudge of the
older point when the secant is flat, and a bisection toward -1 whenever a
step would leave the domain rate > -1. At most MAX_ITERATIONS steps.

The loops return a SolveResult; irr() and rate() unwrap it into a value or
the matching error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

from finmath.errors import (
    DegenerateIterationError,
    InvalidArgumentError,
    MalformedCashFlowsError,
    NonConvergenceError,
)
from finmath.finance.numeric import FLOAT, Numeric
from finmath.types import DueDate

MAX_ITERATIONS = 40


class SolveStatus(Enum):
    CONVERGED = "converged"
    NON_CONVERGENCE = "non_convergence"
    DEGENERATE = "degenerate"


@dataclass(frozen=True)
class SolveResult:
    status: SolveStatus
    value: Optional[Any] = None
    iterations: int = 0
    message: str = ""

    @property
    def converged(self) -> bool:
        return self.status is SolveStatus.CONVERGED

    def unwrap(self):
        """Return the root or raise the error the status stands for."""
        if self.status is SolveStatus.CONVERGED:
            return self.value
        if self.status is SolveStatus.DEGENERATE:
            raise DegenerateIterationError(self.message or "division by zero")
        raise NonConvergenceError(self.message or f"no convergence after {self.iterations} iterations")


# ---------- evaluators ----------
def _present_value_from_first_flow(num: Numeric, values: List[Any], guess):
    """
    NPV in Horner form, valued at the first non-zero flow (leading zero
    flows are skipped). Same roots as npv(), cheaper per evaluation.
    """
    growth = num.one + guess
    start = 0
    while start < len(values) and values[start] == num.zero:
        start += 1
    total = num.zero
    for value in reversed(values[start:]):
        total = total / growth + value
    return total


def _eval_rate(num: Numeric, rate, nper, pmt, pv, fv, due: DueDate):
    """Residual of the annuity equation at `rate`; zero at the solution."""
    if rate == num.zero:
        return pv + pmt * nper + fv
    growth = num.power(rate + num.one, nper)
    k = due.discount_factor(rate, num.one)
    return pv * growth + pmt * k * num.annuity_factor(rate, nper) + fv


# ---------- secant loop ----------
def _secant(
    num: Numeric,
    f: Callable[[Any], Any],
    x1,
    f1,
    x2,
    f2,
    *,
    nudge,
    converged: Callable[[Any, Any, Any], bool],
    degenerate_message: str,
    failure_message: str,
) -> SolveResult:
    half = num.const("0.5")
    for i in range(MAX_ITERATIONS):
        if f2 == f1:
            x1 = x1 - nudge if x2 > x1 else x1 + nudge
            if x1 <= -num.one:
                return SolveResult(SolveStatus.DEGENERATE, iterations=i + 1, message=degenerate_message)
            f1 = f(x1)
            if f2 == f1:
                return SolveResult(SolveStatus.DEGENERATE, iterations=i + 1, message=degenerate_message)
        x3 = x2 - (x2 - x1) * f2 / (f2 - f1)
        if x3 <= -num.one:
            x3 = (x2 - num.one) * half
        f3 = f(x3)
        if converged(x2, x3, f3):
            return SolveResult(SolveStatus.CONVERGED, value=x3, iterations=i + 1)
        x1, f1 = x2, f2
        x2, f2 = x3, f3
    return SolveResult(SolveStatus.NON_CONVERGENCE, iterations=MAX_ITERATIONS, message=failure_message)


# ---------- IRR (periodic) ----------
def solve_irr(cashflows: Iterable[Any], guess=0.1, *, num: Numeric = FLOAT) -> SolveResult:
    """IRR as a SolveResult; argument errors are still raised."""
    with num.scope():
        values = num.coerce_flows(cashflows)
        guess = num.coerce(guess, argument="guess")
        if guess <= -num.one:
            raise InvalidArgumentError("guess", f"must be greater than -1, got {guess}")
        if len(values) < 2:
            raise MalformedCashFlowsError("at least two cash flows are required")

        step = num.const("1e-5")
        rate_tol = num.const("1e-7")
        scale = max(abs(v) for v in values)
        value_tol = scale * rate_tol * num.const("0.01")

        def f(g):
            return _present_value_from_first_flow(num, values, g)

        g1 = guess
        f1 = f(g1)
        g2 = g1 - step if f1 <= num.zero else g1 + step
        if g2 <= -num.one:
            raise InvalidArgumentError("guess", f"too close to -1: {guess}")
        f2 = f(g2)

        return _secant(
            num,
            f,
            g1,
            f1,
            g2,
            f2,
            nudge=step,
            converged=lambda prev, cur, fcur: abs(fcur) < value_tol and abs(cur - prev) < rate_tol,
            degenerate_message="cannot calculate IRR: net present value is flat around the guess",
            failure_message=f"cannot calculate IRR within {MAX_ITERATIONS} iterations",
        )


def irr(cashflows: Iterable[Any], guess=0.1, *, num: Numeric = FLOAT):
    """
    Periodic internal rate of return, e.g. 0.18 = 18% per period.
    Needs at least one payment and one receipt to have a meaningful root.
    """
    return solve_irr(cashflows, guess, num=num).unwrap()


# ---------- RATE (annuity) ----------
def solve_rate(
    nper, pmt, pv, fv=0, due=DueDate.END_OF_PERIOD, guess=0.1, *, num: Numeric = FLOAT
) -> SolveResult:
    """Rate as a SolveResult; argument errors are still raised."""
    with num.scope():
        nper = num.coerce(nper, argument="nper")
        pmt = num.coerce(pmt, argument="pmt")
        pv = num.coerce(pv, argument="pv")
        fv = num.coerce(fv, argument="fv")
        guess = num.coerce(guess, argument="guess")
        due = DueDate.coerce(due)
        if nper <= num.zero:
            raise InvalidArgumentError("nper", f"must be greater than zero, got {nper}")
        if guess <= -num.one:
            raise InvalidArgumentError("guess", f"must be greater than -1, got {guess}")

        tol = num.const("1e-7")
        two = num.const("2")

        def f(r):
            return _eval_rate(num, r, nper, pmt, pv, fv, due)

        r1 = guess
        f1 = f(r1)
        r2 = r1 * two if f1 <= num.zero else r1 / two
        if r2 <= -num.one:
            r2 = (r1 - num.one) / two
        f2 = f(r2)

        return _secant(
            num,
            f,
            r1,
            f1,
            r2,
            f2,
            nudge=num.const("1e-5"),
            converged=lambda prev, cur, fcur: abs(fcur) < tol,
            degenerate_message="division by zero",
            failure_message="cannot calculate rate",
        )


def rate(nper, pmt, pv, fv=0, due=DueDate.END_OF_PERIOD, guess=0.1, *, num: Numeric = FLOAT):
    """Interest rate per period of an annuity."""
    return solve_rate(nper, pmt, pv, fv, due, guess, num=num).unwrap()


__all__ = ["irr", "rate", "solve_irr", "solve_rate", "SolveResult", "SolveStatus", "MAX_ITERATIONS"]
