# finmath/floating.py
"""
Financial functions in binary floating point. Faster than finmath.exact
and interoperable with numpy; agrees with it once both are rounded to
currency precision.
"""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from finmath.finance import annuity, depreciation, irr as _irr, schedule
from finmath.finance.numeric import FLOAT
from finmath.types import DueDate

END = DueDate.END_OF_PERIOD
_NUM = FLOAT


def pmt(rate, nper, pv, fv=0, due=END) -> float:
    return annuity.pmt(rate, nper, pv, fv, due, num=_NUM)


def ipmt(rate, per, nper, pv, fv=0, due=END) -> float:
    return annuity.ipmt(rate, per, nper, pv, fv, due, num=_NUM)


def ppmt(rate, per, nper, pv, fv=0, due=END) -> float:
    return annuity.ppmt(rate, per, nper, pv, fv, due, num=_NUM)


def pv(rate, nper, pmt, fv=0, due=END) -> float:
    return annuity.pv(rate, nper, pmt, fv, due, num=_NUM)


def fv(rate, nper, pmt, pv=0, due=END) -> float:
    return annuity.fv(rate, nper, pmt, pv, due, num=_NUM)


def nper(rate, pmt, pv, fv=0, due=END) -> float:
    return annuity.nper(rate, pmt, pv, fv, due, num=_NUM)


def npv(rate, cashflows: Iterable[Any]) -> float:
    return annuity.npv(rate, cashflows, num=_NUM)


def irr(cashflows: Iterable[Any], guess=0.1) -> float:
    return _irr.irr(cashflows, guess, num=_NUM)


def rate(nper, pmt, pv, fv=0, due=END, guess=0.1) -> float:
    return _irr.rate(nper, pmt, pv, fv, due, guess, num=_NUM)


def sln(cost, salvage, life) -> float:
    return depreciation.sln(cost, salvage, life, num=_NUM)


def syd(cost, salvage, life, period) -> float:
    return depreciation.syd(cost, salvage, life, period, num=_NUM)


def ddb(cost, salvage, life, period, factor=2) -> float:
    return depreciation.ddb(cost, salvage, life, period, factor, num=_NUM)


def amortization_schedule(rate, nper, pv, fv=0, due=END) -> pd.DataFrame:
    return schedule.amortization_schedule(rate, nper, pv, fv, due, num=_NUM)


__all__ = [
    "pmt", "ipmt", "ppmt", "pv", "fv", "nper", "npv",
    "irr", "rate", "sln", "syd", "ddb", "amortization_schedule",
]
