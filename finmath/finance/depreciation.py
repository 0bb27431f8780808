# finmath/finance/depreciation.py
"""
Depreciation of an asset over its useful life:
 - sln : straight line
 - syd : sum-of-years' digits
 - ddb : declining balance (double by default)
"""

from __future__ import annotations

from finmath.errors import InvalidArgumentError
from finmath.finance.numeric import FLOAT, Numeric


def _check_period(num: Numeric, life, period) -> None:
    if period > life:
        raise InvalidArgumentError("period", f"must not exceed life ({life}), got {period}")
    if period <= num.zero:
        raise InvalidArgumentError("period", f"must be greater than zero, got {period}")


def sln(cost, salvage, life, *, num: Numeric = FLOAT):
    """Straight-line depreciation for one period."""
    with num.scope():
        cost = num.coerce(cost, argument="cost")
        salvage = num.coerce(salvage, argument="salvage")
        life = num.coerce(life, argument="life")
        if life == num.zero:
            raise InvalidArgumentError("life", "must be non-zero")
        return (cost - salvage) / life


def syd(cost, salvage, life, period, *, num: Numeric = FLOAT):
    """Sum-of-years' digits depreciation for `period`."""
    with num.scope():
        cost = num.coerce(cost, argument="cost")
        salvage = num.coerce(salvage, argument="salvage")
        life = num.coerce(life, argument="life")
        period = num.coerce(period, argument="period")
        if salvage < num.zero:
            raise InvalidArgumentError("salvage", f"must be >= 0, got {salvage}")
        _check_period(num, life, period)
        two = num.const("2")
        return (cost - salvage) / (life * (life + num.one)) * (life + num.one - period) * two


def ddb(cost, salvage, life, period, factor=2, *, num: Numeric = FLOAT):
    """
    Declining-balance depreciation for `period` at `factor` times the
    straight-line rate. Short lives are written off immediately:
      life < 2  -> the whole depreciable amount in any period
      life == 2 -> the whole amount in period 1, nothing afterwards
    """
    with num.scope():
        cost = num.coerce(cost, argument="cost")
        salvage = num.coerce(salvage, argument="salvage")
        life = num.coerce(life, argument="life")
        period = num.coerce(period, argument="period")
        factor = num.coerce(factor, argument="factor")
        if factor <= num.zero:
            raise InvalidArgumentError("factor", f"must be greater than zero, got {factor}")
        if salvage < num.zero:
            raise InvalidArgumentError("salvage", f"must be >= 0, got {salvage}")
        _check_period(num, life, period)

        two = num.const("2")
        if cost <= num.zero:
            return num.zero
        if life < two:
            return cost - salvage
        if life == two:
            return cost - salvage if period <= num.one else num.zero
        if period <= num.one:
            return min(cost * factor / life, cost - salvage)

        x = (life - factor) / life
        dep = factor * cost / life * num.power(x, period - num.one)
        # never depreciate below salvage
        excess = cost * (num.one - num.power(x, period)) - cost + salvage
        if excess > num.zero:
            dep -= excess
        return num.zero if dep < num.zero else dep


__all__ = ["sln", "syd", "ddb"]
