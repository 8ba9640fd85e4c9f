"""Periodicity enum for task recurrence rules."""

from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta


class Periodicity(Enum):
    """How often a task recurs once it is completed."""

    NONE = "none"
    EVERY_30_DAYS = "30-days"
    EVERY_3_MONTHS = "3-months"
    EVERY_6_MONTHS = "6-months"
    EVERY_1_YEAR = "1-year"
    CUSTOM = "custom"

    @property
    def interval(self) -> Optional[relativedelta]:
        """Calendar interval to the next occurrence, None if not mechanical."""
        return _INTERVALS.get(self)

    @property
    def recurs(self) -> bool:
        return self is not Periodicity.NONE

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value) -> "Periodicity":
        """
        Read a periodicity from its value, name or display label.

        Unknown values read as NONE so a bad field never blocks loading.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower(), member.label.lower()):
                return member
        return _LEGACY_LABELS.get(text, cls.NONE)


_INTERVALS = {
    Periodicity.EVERY_30_DAYS: relativedelta(days=30),
    Periodicity.EVERY_3_MONTHS: relativedelta(months=3),
    Periodicity.EVERY_6_MONTHS: relativedelta(months=6),
    Periodicity.EVERY_1_YEAR: relativedelta(years=1),
}

_LABELS = {
    Periodicity.NONE: "None",
    Periodicity.EVERY_30_DAYS: "30 days",
    Periodicity.EVERY_3_MONTHS: "3 months",
    Periodicity.EVERY_6_MONTHS: "6 months",
    Periodicity.EVERY_1_YEAR: "1 year",
    Periodicity.CUSTOM: "Custom",
}

# Labels written by older backups
_LEGACY_LABELS = {
    "nenhuma": Periodicity.NONE,
    "30 dias": Periodicity.EVERY_30_DAYS,
    "3 meses": Periodicity.EVERY_3_MONTHS,
    "6 meses": Periodicity.EVERY_6_MONTHS,
    "1 ano": Periodicity.EVERY_1_YEAR,
    "personalizado": Periodicity.CUSTOM,
}
