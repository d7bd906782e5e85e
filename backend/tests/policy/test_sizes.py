import pytest

from guestlinks.policy.sizes import (
    MIB,
    EmptyFile,
    FileSize,
    NegativeFileSize,
    format_size_limit,
    human_size,
)


def test_file_size_from_positive_int() -> None:
    assert FileSize.from_int(42).size == 42


def test_file_size_rejects_zero() -> None:
    with pytest.raises(EmptyFile):
        FileSize.from_int(0)


def test_file_size_rejects_negative() -> None:
    with pytest.raises(NegativeFileSize):
        FileSize.from_int(-1)


def test_fits_within_unlimited() -> None:
    assert FileSize(10 ** 12).fits_within(None)


def test_fits_within_boundary() -> None:
    limit = 50 * MIB
    assert FileSize(limit).fits_within(limit)
    assert not FileSize(limit + 1).fits_within(limit)


def test_human_size() -> None:
    assert human_size(0) == "0 B"
    assert human_size(512) == "512.00 B"
    assert human_size(50 * MIB) == "50.00 MB"


def test_format_size_limit_unlimited() -> None:
    assert format_size_limit(None) == "Unlimited"
