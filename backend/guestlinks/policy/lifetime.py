from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

# Imprecise, but file lifetimes are not exact measures of time.
DAYS_PER_YEAR = 365

MIN_FILE_LIFETIME_DAYS = 1
MAX_FILE_LIFETIME_YEARS = 10

# A distant instant stands in for "this file never expires".
NEVER_EXPIRE = datetime(2999, 12, 31, tzinfo=timezone.utc)


@dataclass(frozen=True)
class FileLifetime:
    """How long a file uploaded through a guest link may live.

    ``duration`` is ``None`` for the infinite lifetime.
    """

    duration: Optional[timedelta]

    @classmethod
    def in_days(cls, days: int) -> "FileLifetime":
        return cls(timedelta(days=days))

    @classmethod
    def in_years(cls, years: int) -> "FileLifetime":
        return cls(timedelta(days=years * DAYS_PER_YEAR))

    @property
    def is_infinite(self) -> bool:
        return self.duration is None

    @property
    def days(self) -> int:
        if self.duration is None:
            raise ValueError("infinite lifetime has no day count")
        return self.duration.days

    def is_year_boundary(self) -> bool:
        return self.days % DAYS_PER_YEAR == 0

    def friendly_name(self) -> str:
        if self.is_infinite:
            return "Never"
        value, unit = self.days, "day"
        if self.is_year_boundary():
            value, unit = value // DAYS_PER_YEAR, "year"
        if value > 1:
            unit += "s"
        return f"{value} {unit}"

    def expires_at(self, now: datetime) -> datetime:
        if self.duration is None:
            return NEVER_EXPIRE
        return now + self.duration

    def __str__(self) -> str:
        return self.friendly_name()


FILE_LIFETIME_INFINITE = FileLifetime(None)


class ChoiceKind(str, Enum):
    LIFETIME = "lifetime"
    NEVER = "never"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ExpirationChoice:
    """One entry of the file-expiration picker shown to a guest."""

    key: str
    label: str
    kind: ChoiceKind
    lifetime: Optional[FileLifetime] = None

    def expires_at(self, now: datetime) -> Optional[datetime]:
        if self.kind is ChoiceKind.NEVER:
            return NEVER_EXPIRE
        if self.kind is ChoiceKind.CUSTOM:
            return None
        return self.lifetime.expires_at(now)


ONE_DAY = ExpirationChoice("1d", "1 day", ChoiceKind.LIFETIME, FileLifetime.in_days(1))
SEVEN_DAYS = ExpirationChoice("7d", "7 days", ChoiceKind.LIFETIME, FileLifetime.in_days(7))
THIRTY_DAYS = ExpirationChoice("30d", "30 days", ChoiceKind.LIFETIME, FileLifetime.in_days(30))
ONE_YEAR = ExpirationChoice("1y", "1 year", ChoiceKind.LIFETIME, FileLifetime.in_years(1))
NEVER = ExpirationChoice("never", "Never", ChoiceKind.NEVER)
CUSTOM = ExpirationChoice("custom", "Custom", ChoiceKind.CUSTOM)

STANDARD_CHOICES = (ONE_DAY, SEVEN_DAYS, THIRTY_DAYS, ONE_YEAR, NEVER, CUSTOM)


def choice_expiration(choice: ExpirationChoice, now: datetime) -> Optional[datetime]:
    return choice.expires_at(now)


def parse_file_lifetime_days(days: Optional[int]) -> FileLifetime:
    """Build a guest link file lifetime from a day count; ``None`` is unrestricted."""
    if days is None:
        return FILE_LIFETIME_INFINITE
    if days < MIN_FILE_LIFETIME_DAYS:
        raise ValueError(f"file lifetime must be at least {MIN_FILE_LIFETIME_DAYS} days")
    if days > MAX_FILE_LIFETIME_YEARS * DAYS_PER_YEAR:
        raise ValueError(f"file lifetime must be at most {MAX_FILE_LIFETIME_YEARS} years")
    return FileLifetime.in_days(days)
