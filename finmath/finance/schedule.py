# finmath/finance/schedule.py
"""
Period-by-period amortization table built on the annuity primitives.

Columns: period, payment, interest, principal, balance.
`balance` is what is still outstanding after the period's payment and
carries the same sign as `pv`.
"""

from __future__ import annotations

from typing import Dict, List

import pandas as pd

from finmath.errors import InvalidArgumentError
from finmath.finance.annuity import _fv_internal, _ipmt_internal, _pmt_internal
from finmath.finance.numeric import FLOAT, Numeric
from finmath.types import DueDate

COLUMNS = ("period", "payment", "interest", "principal", "balance")


def amortization_schedule(rate, nper, pv, fv=0, due=DueDate.END_OF_PERIOD, *, num: Numeric = FLOAT) -> pd.DataFrame:
    """One row per period 1..nper; nper must be a positive whole number."""
    with num.scope():
        rate = num.coerce(rate, argument="rate")
        n = num.coerce(nper, argument="nper")
        pv = num.coerce(pv, argument="pv")
        fv = num.coerce(fv, argument="fv")
        due = DueDate.coerce(due)
        if n <= num.zero or n != int(n):
            raise InvalidArgumentError("nper", f"must be a positive whole number, got {nper}")

        payment = _pmt_internal(num, rate, n, pv, fv, due)
        rows: List[Dict[str, object]] = []
        for p in range(1, int(n) + 1):
            per = num.coerce(p, argument="period")
            interest = _ipmt_internal(num, rate, per, n, pv, fv, due)
            rows.append({
                "period": p,
                "payment": payment,
                "interest": interest,
                "principal": payment - interest,
                "balance": -_fv_internal(num, rate, per, payment, pv, due),
            })
        return pd.DataFrame(rows, columns=list(COLUMNS))


__all__ = ["amortization_schedule", "COLUMNS"]
