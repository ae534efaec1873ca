"""Billing period policy for transport fees.

Transport is billed per calendar month. The first bill is generated when a
student is assigned; it belongs to the month of the assignment call (not of
``valid_from``) and is due on the 15th of that month.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

TRANSPORT_FEE_TYPE_NAME = "Transport Fee"
TRANSPORT_FEE_TYPE_DESCRIPTION = "Monthly transport fee"
TRANSPORT_FEE_TYPE_CATEGORY = "Transport"

DUE_DAY_OF_MONTH = 15


@dataclass(frozen=True)
class BillingPeriod:
    month: int
    year: int

    @classmethod
    def containing(cls, moment: datetime) -> BillingPeriod:
        return cls(month=moment.month, year=moment.year)

    @property
    def due_date(self) -> datetime:
        return datetime(self.year, self.month, DUE_DAY_OF_MONTH, tzinfo=timezone.utc)
