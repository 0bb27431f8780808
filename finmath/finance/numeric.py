# finmath/finance/numeric.py
"""
Numeric representations the formulas are written against.

Formulas only use +, -, *, /, comparisons and abs() directly on values, plus
the few operations below that differ between representations:
  - coerce / coerce_flows : bring caller input into the representation
  - power, ln             : exponentiation and natural log
  - annuity_factor        : ((1+r)^n - 1)/r, accurate for r near zero
  - const                 : literal constants (1e-7, 0.01, ...)
  - scope                 : arithmetic context to evaluate inside

Two instantiations exist: FloatNumeric (binary floating point) and
DecimalNumeric (decimal.Decimal under a private context).
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import nullcontext
from decimal import Context, Decimal, InvalidOperation, localcontext
from typing import Any, ContextManager, List

import numpy as np

from finmath.errors import InvalidArgumentError, MalformedCashFlowsError

DEFAULT_DECIMAL_PRECISION = 28


class Numeric:
    """Common surface; subclasses fill in the representation specifics."""

    name = "abstract"

    def __init__(self) -> None:
        self.zero = self.const("0")
        self.one = self.const("1")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def const(self, literal: str):
        raise NotImplementedError

    def _convert(self, value: Any):
        raise NotImplementedError

    def _is_finite(self, value) -> bool:
        raise NotImplementedError

    def power(self, base, exponent):
        raise NotImplementedError

    def ln(self, value):
        raise NotImplementedError

    def annuity_factor(self, rate, nper):
        """((1+rate)^nper - 1) / rate for rate != 0."""
        raise NotImplementedError

    def scope(self) -> ContextManager:
        return nullcontext()

    def coerce(self, value: Any, argument: str = "value"):
        """Convert one scalar argument, rejecting non-numeric and non-finite input."""
        if isinstance(value, (bool, np.bool_)):
            raise InvalidArgumentError(argument, f"expected a number, got {value!r}")
        try:
            out = self._convert(value)
        except (TypeError, ValueError, ArithmeticError):
            raise InvalidArgumentError(argument, f"expected a number, got {value!r}") from None
        if not self._is_finite(out):
            raise InvalidArgumentError(argument, f"must be finite, got {value!r}")
        return out

    def coerce_flows(self, values: Any, argument: str = "cashflows") -> List[Any]:
        """
        Convert a cash-flow collection to a list in this representation.
        The collection must be flat (one-dimensional); emptiness is left to
        the caller since the minimum length differs per function.
        """
        if values is None:
            raise MalformedCashFlowsError("cash flows are required", argument)
        if isinstance(values, (str, bytes)):
            raise MalformedCashFlowsError("expected a sequence of amounts, got text", argument)
        if isinstance(values, Iterator):
            values = list(values)
        arr = np.asarray(values, dtype=object)
        if np.ndim(arr) != 1:
            raise MalformedCashFlowsError(
                f"expected a one-dimensional sequence, got {np.ndim(arr)} dimension(s)", argument
            )
        out: List[Any] = []
        for i, v in enumerate(arr.tolist()):
            try:
                out.append(self.coerce(v, argument=f"{argument}[{i}]"))
            except InvalidArgumentError as e:
                raise MalformedCashFlowsError(str(e), argument) from None
        return out


class FloatNumeric(Numeric):
    name = "float"

    def const(self, literal: str) -> float:
        return float(literal)

    def _convert(self, value: Any) -> float:
        return float(value)

    def _is_finite(self, value: float) -> bool:
        return math.isfinite(value)

    def power(self, base: float, exponent: float) -> float:
        try:
            return math.pow(base, exponent)
        except OverflowError:
            return math.inf
        except ValueError:
            raise InvalidArgumentError(
                None, f"({base}) ** ({exponent}) is undefined in real numbers"
            ) from None

    def ln(self, value: float) -> float:
        return math.log(value)

    def annuity_factor(self, rate: float, nper: float) -> float:
        # expm1/log1p keep full precision when rate is close to zero
        try:
            return math.expm1(nper * math.log1p(rate)) / rate
        except OverflowError:
            return math.copysign(math.inf, rate)
        except ValueError:
            raise InvalidArgumentError("rate", f"must be greater than -1, got {rate}") from None


class DecimalNumeric(Numeric):
    name = "decimal"

    def __init__(self, precision: int = DEFAULT_DECIMAL_PRECISION) -> None:
        if int(precision) < 1:
            raise InvalidArgumentError("precision", f"must be >= 1, got {precision}")
        self.precision = int(precision)
        self.context = Context(prec=self.precision)
        super().__init__()
        self._series_bound = self.const("1e-3")

    def __repr__(self) -> str:
        return f"DecimalNumeric(precision={self.precision})"

    def const(self, literal: str) -> Decimal:
        return Decimal(literal)

    def _convert(self, value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, (float, np.floating)):
            # repr() gives the shortest round-tripping text, so 0.1 stays one tenth
            return Decimal(repr(float(value)))
        if isinstance(value, (int, np.integer)):
            return Decimal(int(value))
        if isinstance(value, str):
            return Decimal(value.strip())
        return Decimal(repr(float(value)))

    def _is_finite(self, value: Decimal) -> bool:
        return value.is_finite()

    def power(self, base: Decimal, exponent: Decimal) -> Decimal:
        try:
            return base ** exponent
        except InvalidOperation:
            raise InvalidArgumentError(
                None, f"({base}) ** ({exponent}) is undefined in real numbers"
            ) from None

    def ln(self, value: Decimal) -> Decimal:
        return value.ln()

    def annuity_factor(self, rate: Decimal, nper: Decimal) -> Decimal:
        if abs(rate) * (abs(nper) + self.one) >= self._series_bound:
            return (self.power(self.one + rate, nper) - self.one) / rate
        # binomial series sum_j C(n, j) r^(j-1); 1 + rate would round the rate away
        term = total = nper
        j = self.one
        while True:
            term = term * (nper - j) / (j + self.one) * rate
            if total + term == total:
                return total
            total += term
            j += self.one

    def scope(self) -> ContextManager:
        return localcontext(self.context)


FLOAT = FloatNumeric()
DECIMAL = DecimalNumeric()

NUMERICS = {"float": FLOAT, "decimal": DECIMAL}


def get_numeric(name: str, precision: int | None = None) -> Numeric:
    """Look up a representation by name ("decimal" or "float")."""
    key = (name or "").strip().lower()
    if key not in NUMERICS:
        raise InvalidArgumentError("numeric", f"expected one of {sorted(NUMERICS)}, got {name!r}")
    if key == "decimal" and precision is not None and int(precision) != DECIMAL.precision:
        return DecimalNumeric(precision)
    return NUMERICS[key]


__all__ = [
    "Numeric",
    "FloatNumeric",
    "DecimalNumeric",
    "FLOAT",
    "DECIMAL",
    "NUMERICS",
    "get_numeric",
    "DEFAULT_DECIMAL_PRECISION",
]
