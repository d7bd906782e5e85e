from .errors import (
    ClockSkew,
    Conflict,
    ExpirationOutOfRange,
    GuestLinkError,
    GuestLinkNotFound,
    InvalidConfiguration,
    StorageUnavailable,
)
from .evaluator import evaluate, record_upload, resolve_file_expiration
from .guest_link import (
    EffectiveGuestLinkState,
    GuestLinkConfig,
    GuestLinkStatus,
    GuestLinkUsage,
    Rejection,
    RejectionReason,
    UploadAccepted,
)
from .lifetime import (
    FILE_LIFETIME_INFINITE,
    NEVER_EXPIRE,
    STANDARD_CHOICES,
    ExpirationChoice,
    FileLifetime,
    choice_expiration,
)
from .sizes import FileSize

__all__ = [
    "ClockSkew",
    "Conflict",
    "EffectiveGuestLinkState",
    "ExpirationChoice",
    "ExpirationOutOfRange",
    "FILE_LIFETIME_INFINITE",
    "FileLifetime",
    "FileSize",
    "GuestLinkConfig",
    "GuestLinkError",
    "GuestLinkNotFound",
    "GuestLinkStatus",
    "GuestLinkUsage",
    "InvalidConfiguration",
    "NEVER_EXPIRE",
    "Rejection",
    "RejectionReason",
    "STANDARD_CHOICES",
    "StorageUnavailable",
    "UploadAccepted",
    "choice_expiration",
    "evaluate",
    "record_upload",
    "resolve_file_expiration",
]
