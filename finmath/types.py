# finmath/types.py
from __future__ import annotations

from enum import Enum
from typing import Any

from .errors import InvalidArgumentError


class DueDate(Enum):
    """When payments fall within each period."""

    END_OF_PERIOD = "end"
    BEGINNING_OF_PERIOD = "begin"

    @classmethod
    def coerce(cls, value: Any) -> "DueDate":
        """
        Accept the enum itself, "end"/"begin" (numpy-financial's `when`),
        or 0/1 with 1 meaning beginning of period.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.END_OF_PERIOD
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("end", "end_of_period", "endofperiod"):
                return cls.END_OF_PERIOD
            if key in ("begin", "start", "beginning", "beginning_of_period", "begofperiod"):
                return cls.BEGINNING_OF_PERIOD
        elif value in (0, 1) and not isinstance(value, float):
            return cls.BEGINNING_OF_PERIOD if value == 1 else cls.END_OF_PERIOD
        raise InvalidArgumentError("due", f"unknown payment timing: {value!r}")

    @property
    def in_advance(self) -> bool:
        return self is DueDate.BEGINNING_OF_PERIOD

    def discount_factor(self, rate, one):
        # 1 for end-of-period, 1 + rate for beginning-of-period
        return one + rate if self.in_advance else one

    def period_offset(self, one):
        return one + one if self.in_advance else one


__all__ = ["DueDate"]
