from __future__ import annotations
from typing import Any, Callable, Dict

from finmath.finance import annuity, depreciation, irr

# Function schema: parameter order, how many are required, and description.
SCHEMA: Dict[str, Dict[str, Any]] = {
    "pmt":  {"params": ("rate", "nper", "pv", "fv", "due"),                "required": 3, "desc": "Payment per period"},
    "ipmt": {"params": ("rate", "per", "nper", "pv", "fv", "due"),         "required": 4, "desc": "Interest portion of a payment"},
    "ppmt": {"params": ("rate", "per", "nper", "pv", "fv", "due"),         "required": 4, "desc": "Principal portion of a payment"},
    "pv":   {"params": ("rate", "nper", "pmt", "fv", "due"),               "required": 3, "desc": "Present value"},
    "fv":   {"params": ("rate", "nper", "pmt", "pv", "due"),               "required": 3, "desc": "Future value"},
    "nper": {"params": ("rate", "pmt", "pv", "fv", "due"),                 "required": 3, "desc": "Number of periods"},
    "npv":  {"params": ("rate", "cashflows"),                              "required": 2, "desc": "Net present value"},
    "irr":  {"params": ("cashflows", "guess"),                             "required": 1, "desc": "Internal rate of return"},
    "rate": {"params": ("nper", "pmt", "pv", "fv", "due", "guess"),        "required": 3, "desc": "Interest rate per period"},
    "sln":  {"params": ("cost", "salvage", "life"),                        "required": 3, "desc": "Straight-line depreciation"},
    "syd":  {"params": ("cost", "salvage", "life", "period"),              "required": 4, "desc": "Sum-of-years' digits depreciation"},
    "ddb":  {"params": ("cost", "salvage", "life", "period", "factor"),    "required": 4, "desc": "Declining-balance depreciation"},
}

CALLABLES: Dict[str, Callable[..., Any]] = {
    "pmt": annuity.pmt,
    "ipmt": annuity.ipmt,
    "ppmt": annuity.ppmt,
    "pv": annuity.pv,
    "fv": annuity.fv,
    "nper": annuity.nper,
    "npv": annuity.npv,
    "irr": irr.irr,
    "rate": irr.rate,
    "sln": depreciation.sln,
    "syd": depreciation.syd,
    "ddb": depreciation.ddb,
}

# Top-level keys a scenario file may carry.
SCENARIO_KEYS = ("digits", "decimal_precision", "cases")
CASE_KEYS = ("name", "function", "args", "digits")
