"""
Finance metrics façade.

Design:
- IRR/RATE solvers live only in finmath.finance.irr (singleton).
- NPV lives only in finmath.finance.annuity.
- This module must not *define* them (no 'def irr' / 'def npv' here).
"""
from .annuity import npv as npv
from .irr import irr as irr, rate as rate, solve_irr as solve_irr, solve_rate as solve_rate  # re-exports only

__all__ = ["npv", "irr", "rate", "solve_irr", "solve_rate"]
