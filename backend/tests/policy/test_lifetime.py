"""
File lifetime and expiration catalog tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from guestlinks.policy.lifetime import (
    CUSTOM,
    FILE_LIFETIME_INFINITE,
    NEVER,
    NEVER_EXPIRE,
    ONE_YEAR,
    SEVEN_DAYS,
    STANDARD_CHOICES,
    FileLifetime,
    choice_expiration,
    parse_file_lifetime_days,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestFriendlyName:

    @pytest.mark.parametrize(
        "lifetime, expected",
        [
            (FileLifetime.in_days(1), "1 day"),
            (FileLifetime.in_days(7), "7 days"),
            (FileLifetime.in_days(30), "30 days"),
            (FileLifetime.in_years(1), "1 year"),
            (FileLifetime.in_years(3), "3 years"),
            (FileLifetime.in_days(400), "400 days"),
            (FILE_LIFETIME_INFINITE, "Never"),
        ],
    )
    def test_friendly_name(self, lifetime, expected) -> None:
        assert lifetime.friendly_name() == expected

    def test_infinite_has_no_day_count(self) -> None:
        with pytest.raises(ValueError):
            FILE_LIFETIME_INFINITE.days


class TestCatalog:

    def test_catalog_order_is_fixed(self) -> None:
        assert [c.label for c in STANDARD_CHOICES] == [
            "1 day", "7 days", "30 days", "1 year", "Never", "Custom",
        ]

    def test_lifetime_choice_expiration(self) -> None:
        assert choice_expiration(SEVEN_DAYS, NOW) == NOW + timedelta(days=7)
        assert choice_expiration(ONE_YEAR, NOW) == NOW + timedelta(days=365)

    def test_never_choice_uses_sentinel(self) -> None:
        assert choice_expiration(NEVER, NOW) == NEVER_EXPIRE

    def test_custom_choice_has_no_instant(self) -> None:
        assert choice_expiration(CUSTOM, NOW) is None


class TestParseFileLifetimeDays:

    def test_none_is_unrestricted(self) -> None:
        assert parse_file_lifetime_days(None).is_infinite

    def test_valid_days(self) -> None:
        assert parse_file_lifetime_days(30) == FileLifetime.in_days(30)

    def test_rejects_zero_days(self) -> None:
        with pytest.raises(ValueError, match="at least 1 days"):
            parse_file_lifetime_days(0)

    def test_rejects_more_than_ten_years(self) -> None:
        with pytest.raises(ValueError, match="at most 10 years"):
            parse_file_lifetime_days(10 * 365 + 1)
