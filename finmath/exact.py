# finmath/exact.py
"""
Financial functions in exact decimal arithmetic (decimal.Decimal, 28
significant digits in a private context). Use these when results feed
currency amounts; floats passed in are read by their shortest repr, so
0.1 means one tenth.

    >>> from decimal import Decimal
    >>> from finmath import exact
    >>> round(exact.pmt(Decimal("0.025") / 12, 10, -1000), 2)
    Decimal('101.15')
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

import pandas as pd

from finmath.finance import annuity, depreciation, irr as _irr, schedule
from finmath.finance.numeric import DECIMAL
from finmath.types import DueDate

END = DueDate.END_OF_PERIOD
_NUM = DECIMAL


def pmt(rate, nper, pv, fv=0, due=END) -> Decimal:
    return annuity.pmt(rate, nper, pv, fv, due, num=_NUM)


def ipmt(rate, per, nper, pv, fv=0, due=END) -> Decimal:
    return annuity.ipmt(rate, per, nper, pv, fv, due, num=_NUM)


def ppmt(rate, per, nper, pv, fv=0, due=END) -> Decimal:
    return annuity.ppmt(rate, per, nper, pv, fv, due, num=_NUM)


def pv(rate, nper, pmt, fv=0, due=END) -> Decimal:
    return annuity.pv(rate, nper, pmt, fv, due, num=_NUM)


def fv(rate, nper, pmt, pv=0, due=END) -> Decimal:
    return annuity.fv(rate, nper, pmt, pv, due, num=_NUM)


def nper(rate, pmt, pv, fv=0, due=END) -> Decimal:
    return annuity.nper(rate, pmt, pv, fv, due, num=_NUM)


def npv(rate, cashflows: Iterable[Any]) -> Decimal:
    return annuity.npv(rate, cashflows, num=_NUM)


def irr(cashflows: Iterable[Any], guess=Decimal("0.1")) -> Decimal:
    return _irr.irr(cashflows, guess, num=_NUM)


def rate(nper, pmt, pv, fv=0, due=END, guess=Decimal("0.1")) -> Decimal:
    return _irr.rate(nper, pmt, pv, fv, due, guess, num=_NUM)


def sln(cost, salvage, life) -> Decimal:
    return depreciation.sln(cost, salvage, life, num=_NUM)


def syd(cost, salvage, life, period) -> Decimal:
    return depreciation.syd(cost, salvage, life, period, num=_NUM)


def ddb(cost, salvage, life, period, factor=2) -> Decimal:
    return depreciation.ddb(cost, salvage, life, period, factor, num=_NUM)


def amortization_schedule(rate, nper, pv, fv=0, due=END) -> pd.DataFrame:
    return schedule.amortization_schedule(rate, nper, pv, fv, due, num=_NUM)


__all__ = [
    "pmt", "ipmt", "ppmt", "pv", "fv", "nper", "npv",
    "irr", "rate", "sln", "syd", "ddb", "amortization_schedule",
]
