from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

KIB = 1024
MIB = 1024 * KIB


class EmptyFile(ValueError):
    pass


class NegativeFileSize(ValueError):
    pass


@dataclass(frozen=True, order=True)
class FileSize:
    size: int

    @classmethod
    def from_int(cls, value: int) -> "FileSize":
        if value < 0:
            raise NegativeFileSize("file size must be positive")
        if value == 0:
            raise EmptyFile("file must be non-empty")
        return cls(value)

    def fits_within(self, limit: Optional[int]) -> bool:
        return limit is None or self.size <= limit

    def __int__(self) -> int:
        return self.size

    def __str__(self) -> str:
        return human_size(self.size)


def human_size(n: Optional[int]) -> str:
    if n is None:
        return "unknown"
    units = ["B", "KB", "MB", "GB", "TB"]
    if n == 0:
        return "0 B"
    p = min(int(math.log(n, 1024)), len(units) - 1)
    return f"{n / (1024 ** p):.2f} {units[p]}"


def format_size_limit(limit: Optional[int]) -> str:
    if limit is None:
        return "Unlimited"
    return human_size(limit)
