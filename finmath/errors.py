# finmath/errors.py
"""
Error taxonomy for the financial functions.

Every failure aborts the single call that raised it; nothing is retried
or logged inside the library.
"""

from __future__ import annotations

from typing import Optional


class FinancialError(Exception):
    """Base class for every error raised by finmath."""


class InvalidArgumentError(FinancialError, ValueError):
    """A precondition on an argument does not hold."""

    def __init__(self, argument: Optional[str], message: str) -> None:
        self.argument = argument
        super().__init__(f"{argument}: {message}" if argument else message)


class MalformedCashFlowsError(InvalidArgumentError):
    """Cash flows are missing, empty, not flat, or hold non-numeric values."""

    def __init__(self, message: str, argument: str = "cashflows") -> None:
        super().__init__(argument, message)


class NonConvergenceError(FinancialError, ArithmeticError):
    """A root finder exhausted its iteration budget."""


class DegenerateIterationError(FinancialError, ZeroDivisionError):
    """The secant denominator stayed zero after perturbing the window."""


__all__ = [
    "FinancialError",
    "InvalidArgumentError",
    "MalformedCashFlowsError",
    "NonConvergenceError",
    "DegenerateIterationError",
]
