# kpi_dashboard/targeting/periods.py
"""
Period arithmetic over the Solar Hijri month/season/year domain.

A Period is a (month, year) pair. Seasons group three consecutive months.
Score, note and ledger maps are keyed by the string form, e.g. "Farvardin 1404".
"""

from dataclasses import dataclass
from typing import List, Union

from .constants import MONTH_ORDER, SEASON_ORDER, SEASON_MONTHS


def month_index(month: str) -> int:
    """Position of a month name in the canonical ordering (0..11)."""
    return MONTH_ORDER.index(month)


def season_of(month: str) -> str:
    return SEASON_ORDER[month_index(month) // 3]


def months_of_season(season: str) -> List[str]:
    return list(SEASON_MONTHS[season])


@dataclass(frozen=True)
class Period:
    month: str
    year: int

    def __post_init__(self):
        if self.month not in MONTH_ORDER:
            raise ValueError(f"Unknown month: {self.month!r}")

    def __str__(self) -> str:
        return f"{self.month} {self.year}"

    @property
    def key(self) -> str:
        return str(self)

    @property
    def index(self) -> int:
        return month_index(self.month)

    @property
    def season(self) -> str:
        return season_of(self.month)

    @property
    def sort_key(self):
        return (self.year, self.index)

    def __lt__(self, other: "Period") -> bool:
        return self.sort_key < other.sort_key

    def __le__(self, other: "Period") -> bool:
        return self.sort_key <= other.sort_key

    @classmethod
    def parse(cls, value: Union[str, "Period"]) -> "Period":
        """Build a Period from its "Month Year" string form."""
        if isinstance(value, Period):
            return value
        parts = str(value).split()
        if len(parts) != 2:
            raise ValueError(f"Invalid period: {value!r}")
        return cls(parts[0], int(parts[1]))


def previous_period(period: Period) -> Period:
    """Step back one month, wrapping into the previous year."""
    idx = period.index
    if idx == 0:
        return Period(MONTH_ORDER[-1], period.year - 1)
    return Period(MONTH_ORDER[idx - 1], period.year)


def next_period(period: Period) -> Period:
    idx = period.index
    if idx == len(MONTH_ORDER) - 1:
        return Period(MONTH_ORDER[0], period.year + 1)
    return Period(MONTH_ORDER[idx + 1], period.year)


def compare_periods(a: Period, b: Period) -> int:
    """Negative, zero or positive as a is before, equal to or after b."""
    if a.sort_key < b.sort_key:
        return -1
    if a.sort_key > b.sort_key:
        return 1
    return 0


def periods_in_year_before(period: Period) -> List[Period]:
    """Months of the same year preceding period, oldest first."""
    return [Period(month, period.year) for month in MONTH_ORDER[:period.index]]


def recent_periods(period: Period, count: int) -> List[Period]:
    """Window of `count` periods ending at period, oldest first."""
    window = []
    current = period
    for _ in range(max(count, 0)):
        window.append(current)
        current = previous_period(current)
    window.reverse()
    return window
