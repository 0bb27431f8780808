# finmath/finance/annuity.py
"""
Closed-form annuity algebra.

Sign convention: cash paid out is negative, cash received is positive, so a
loan taken (pv > 0) is repaid by negative payments.

Every public function takes a `num` keyword selecting the numeric
representation (finmath.finance.numeric); inputs are coerced on entry.
All payment-derived functions go through two shared primitives,
_pmt_internal and _fv_internal.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Iterable, List

from finmath.errors import InvalidArgumentError, MalformedCashFlowsError
from finmath.finance.numeric import FLOAT, Numeric
from finmath.types import DueDate


class FlowFilter(IntEnum):
    """Which cash flows the discounting evaluator includes."""

    NON_POSITIVE = -1
    ALL = 0
    NON_NEGATIVE = 1


# ---------- shared primitives ----------
def _check_rate(num: Numeric, rate) -> None:
    # (1+rate)^n compounds only above -1
    if rate <= -num.one:
        raise InvalidArgumentError("rate", f"must be greater than -1, got {rate}")


def _pmt_internal(num: Numeric, rate, nper, pv, fv, due: DueDate):
    _check_rate(num, rate)
    if nper == num.zero:
        raise InvalidArgumentError("nper", "must be non-zero")
    if rate == num.zero:
        return (-fv - pv) / nper
    k = due.discount_factor(rate, num.one)
    growth = num.power(rate + num.one, nper)
    return (-fv - pv * growth) / (k * num.annuity_factor(rate, nper))


def _fv_internal(num: Numeric, rate, nper, pmt, pv, due: DueDate):
    _check_rate(num, rate)
    if rate == num.zero:
        return -pv - pmt * nper
    k = due.discount_factor(rate, num.one)
    growth = num.power(num.one + rate, nper)
    return -pv * growth - pmt * k * num.annuity_factor(rate, nper)


def _check_period(num: Numeric, per, nper) -> None:
    if per <= num.zero or per >= nper + num.one:
        raise InvalidArgumentError("per", f"must satisfy 0 < per < nper + 1, got per={per}, nper={nper}")


def _ipmt_internal(num: Numeric, rate, per, nper, pv, fv, due: DueDate):
    # paid in advance: nothing has accrued when the first payment is made
    if due.in_advance and per == num.one:
        return num.zero
    payment = _pmt_internal(num, rate, nper, pv, fv, due)
    if due.in_advance:
        pv = pv + payment
    return _fv_internal(num, rate, per - due.period_offset(num.one), payment, pv, DueDate.END_OF_PERIOD) * rate


def _discounted_sum(num: Numeric, rate, values: List[Any], mode: FlowFilter = FlowFilter.ALL):
    """
    Sum of values[i] / (1+rate)^i with one running discount factor.
    `mode` restricts the sum to non-positive or non-negative flows.
    """
    growth = num.one + rate
    factor = num.one
    total = num.zero
    for value in values:
        if (mode != FlowFilter.NON_POSITIVE or value <= num.zero) and (
            mode != FlowFilter.NON_NEGATIVE or value >= num.zero
        ):
            total += value / factor
        factor *= growth
    return total


def _coerce(num: Numeric, **kwargs):
    return [num.coerce(v, argument=k) for k, v in kwargs.items()]


# ---------- public formulas ----------
def pmt(rate, nper, pv, fv=0, due=DueDate.END_OF_PERIOD, *, num: Numeric = FLOAT):
    """Payment per period of an annuity with a fixed rate."""
    with num.scope():
        rate, nper, pv, fv = _coerce(num, rate=rate, nper=nper, pv=pv, fv=fv)
        return _pmt_internal(num, rate, nper, pv, fv, DueDate.coerce(due))


def ipmt(rate, per, nper, pv, fv=0, due=DueDate.END_OF_PERIOD, *, num: Numeric = FLOAT):
    """
    Interest portion of the payment for period `per` (1-based).
    Requires 0 < per < nper + 1; non-integer periods are accepted.
    """
    with num.scope():
        rate, per, nper, pv, fv = _coerce(num, rate=rate, per=per, nper=nper, pv=pv, fv=fv)
        _check_period(num, per, nper)
        _check_rate(num, rate)
        return _ipmt_internal(num, rate, per, nper, pv, fv, DueDate.coerce(due))


def ppmt(rate, per, nper, pv, fv=0, due=DueDate.END_OF_PERIOD, *, num: Numeric = FLOAT):
    """Principal portion of the payment for period `per`: pmt - ipmt."""
    with num.scope():
        rate, per, nper, pv, fv = _coerce(num, rate=rate, per=per, nper=nper, pv=pv, fv=fv)
        _check_period(num, per, nper)
        due = DueDate.coerce(due)
        return _pmt_internal(num, rate, nper, pv, fv, due) - _ipmt_internal(num, rate, per, nper, pv, fv, due)


def pv(rate, nper, pmt, fv=0, due=DueDate.END_OF_PERIOD, *, num: Numeric = FLOAT):
    """Present value of a series of equal payments plus a final balance."""
    with num.scope():
        rate, nper, pmt, fv = _coerce(num, rate=rate, nper=nper, pmt=pmt, fv=fv)
        due = DueDate.coerce(due)
        _check_rate(num, rate)
        if rate == num.zero:
            return -fv - pmt * nper
        k = due.discount_factor(rate, num.one)
        growth = num.power(num.one + rate, nper)
        return -(fv + pmt * k * num.annuity_factor(rate, nper)) / growth


def fv(rate, nper, pmt, pv=0, due=DueDate.END_OF_PERIOD, *, num: Numeric = FLOAT):
    """Future value after `nper` periods of payments on top of `pv`."""
    with num.scope():
        rate, nper, pmt, pv = _coerce(num, rate=rate, nper=nper, pmt=pmt, pv=pv)
        return _fv_internal(num, rate, nper, pmt, pv, DueDate.coerce(due))


def nper(rate, pmt, pv, fv=0, due=DueDate.END_OF_PERIOD, *, num: Numeric = FLOAT):
    """Number of periods needed to move from `pv` to `fv` paying `pmt` each period."""
    with num.scope():
        rate, pmt, pv, fv = _coerce(num, rate=rate, pmt=pmt, pv=pv, fv=fv)
        due = DueDate.coerce(due)
        _check_rate(num, rate)
        if rate == num.zero:
            if pmt == num.zero:
                raise InvalidArgumentError("pmt", "must be non-zero when rate is zero")
            return -(pv + fv) / pmt

        z = pmt * (num.one + rate) / rate if due.in_advance else pmt / rate
        d1 = -fv + z
        d2 = pv + z
        if d1 < num.zero and d2 < num.zero:
            d1, d2 = -d1, -d2
        elif d1 <= num.zero or d2 <= num.zero:
            raise InvalidArgumentError(None, "cannot calculate number of periods: cash flows point the same way")
        return (num.ln(d1) - num.ln(d2)) / num.ln(rate + num.one)


def npv(rate, cashflows: Iterable[Any], *, num: Numeric = FLOAT):
    """
    Net present value, flow i (0-based) discounted by (1+rate)^i:
        NPV(r) = sum_{i=0..N} CF[i] / (1+r)^i
    """
    with num.scope():
        flows = num.coerce_flows(cashflows)
        rate = num.coerce(rate, argument="rate")
        if rate == -num.one:
            raise InvalidArgumentError("rate", "must not be -1")
        if not flows:
            raise MalformedCashFlowsError("at least one cash flow is required")
        return _discounted_sum(num, rate, flows, FlowFilter.ALL)


__all__ = ["pmt", "ipmt", "ppmt", "pv", "fv", "nper", "npv", "FlowFilter"]
