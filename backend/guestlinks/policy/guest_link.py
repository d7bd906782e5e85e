from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from .lifetime import FILE_LIFETIME_INFINITE, ExpirationChoice, FileLifetime


@dataclass(frozen=True)
class GuestLinkConfig:
    """Limits an operator attached to a guest link when issuing it."""

    id: str
    created: datetime
    label: str = ""
    url_expires: Optional[datetime] = None
    file_lifetime: FileLifetime = FILE_LIFETIME_INFINITE
    max_file_bytes: Optional[int] = None
    max_file_uploads: Optional[int] = None

    def is_expired(self, now: datetime) -> bool:
        if self.url_expires is None:
            return False
        return now >= self.url_expires

    def can_accept_more_files(self, uploads_consumed: int) -> bool:
        if self.max_file_uploads is None:
            return True
        return uploads_consumed < self.max_file_uploads


@dataclass(frozen=True)
class GuestLinkUsage:
    uploads_consumed: int = 0
    is_disabled: bool = False

    def incremented(self) -> "GuestLinkUsage":
        return replace(self, uploads_consumed=self.uploads_consumed + 1)


class GuestLinkStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    DISABLED = "disabled"


@dataclass(frozen=True)
class EffectiveGuestLinkState:
    is_active: bool
    status: GuestLinkStatus
    allowed_expiration_choices: tuple[ExpirationChoice, ...]
    default_expiration_choice: ExpirationChoice
    uploads_remaining: Optional[int] = None
    max_file_bytes: Optional[int] = None


class RejectionReason(str, Enum):
    LINK_INACTIVE = "link_inactive"
    FILE_TOO_LARGE = "file_too_large"
    INVALID_FILE_SIZE = "invalid_file_size"


@dataclass(frozen=True)
class Rejection:
    reason: RejectionReason
    status: Optional[GuestLinkStatus] = None
    max_file_bytes: Optional[int] = None
    detail: Optional[str] = None

    @property
    def message(self) -> str:
        if self.reason is RejectionReason.LINK_INACTIVE:
            return "Guest Link Inactive"
        if self.reason is RejectionReason.INVALID_FILE_SIZE:
            return self.detail or "Invalid file size"
        return f"File exceeds guest link size limit of {self.max_file_bytes} bytes"


@dataclass(frozen=True)
class UploadAccepted:
    usage: GuestLinkUsage
    file_expires: Optional[datetime] = field(default=None)
    # the link as it looks once this upload is counted
    state: Optional[EffectiveGuestLinkState] = field(default=None)
