"""Guest link session policy.

Turns a guest link's configured limits plus its usage counters into the
state the upload page is built from, and decides whether a single upload
may consume one of the link's slots. Nothing in here touches storage or
reads the clock; callers pass ``now`` in.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Union

from .errors import ClockSkew, ExpirationOutOfRange, InvalidConfiguration
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
    MIN_FILE_LIFETIME_DAYS,
    NEVER,
    STANDARD_CHOICES,
    ChoiceKind,
    ExpirationChoice,
    FileLifetime,
)
from .sizes import FileSize

logger = logging.getLogger(__name__)

MIN_FIXED_LIFETIME = timedelta(days=MIN_FILE_LIFETIME_DAYS)


def validate_config(config: GuestLinkConfig) -> None:
    if config.max_file_bytes is not None and config.max_file_bytes < 0:
        raise InvalidConfiguration("guest upload size limit must not be negative")
    if config.max_file_uploads is not None and config.max_file_uploads < 0:
        raise InvalidConfiguration("guest upload count limit must not be negative")
    lifetime = config.file_lifetime
    if not lifetime.is_infinite and lifetime.duration < MIN_FIXED_LIFETIME:
        raise InvalidConfiguration(f"guest file lifetime must be at least {MIN_FILE_LIFETIME_DAYS} day")


def link_status(config: GuestLinkConfig, usage: GuestLinkUsage, now: datetime) -> GuestLinkStatus:
    # Expired and exhausted are terminal, so they win over a reversible disable.
    if config.is_expired(now):
        return GuestLinkStatus.EXPIRED
    if not config.can_accept_more_files(usage.uploads_consumed):
        return GuestLinkStatus.EXHAUSTED
    if usage.is_disabled:
        return GuestLinkStatus.DISABLED
    return GuestLinkStatus.ACTIVE


def allowed_expiration_choices(lifetime: FileLifetime, now: datetime) -> tuple[ExpirationChoice, ...]:
    if lifetime.is_infinite:
        return STANDARD_CHOICES
    ceiling = lifetime.expires_at(now)
    return tuple(
        choice
        for choice in STANDARD_CHOICES
        if choice.kind is ChoiceKind.LIFETIME and choice.expires_at(now) <= ceiling
    )


def default_expiration_choice(
    lifetime: FileLifetime, allowed: tuple[ExpirationChoice, ...]
) -> ExpirationChoice:
    if lifetime.is_infinite:
        return NEVER
    for choice in allowed:
        if choice.lifetime == lifetime:
            return choice
    # allowed holds only choices no longer than the lifetime, in ascending order
    return allowed[-1]


def evaluate(config: GuestLinkConfig, usage: GuestLinkUsage, now: datetime) -> EffectiveGuestLinkState:
    validate_config(config)
    if now < config.created:
        raise ClockSkew(now, config.created)

    status = link_status(config, usage, now)
    allowed = allowed_expiration_choices(config.file_lifetime, now)

    remaining = None
    if config.max_file_uploads is not None:
        remaining = max(config.max_file_uploads - usage.uploads_consumed, 0)

    return EffectiveGuestLinkState(
        is_active=status is GuestLinkStatus.ACTIVE,
        status=status,
        allowed_expiration_choices=allowed,
        default_expiration_choice=default_expiration_choice(config.file_lifetime, allowed),
        uploads_remaining=remaining,
        max_file_bytes=config.max_file_bytes,
    )


def record_upload(
    usage: GuestLinkUsage,
    file_size: Union[int, FileSize],
    config: GuestLinkConfig,
    now: datetime,
) -> Union[UploadAccepted, Rejection]:
    """Decide whether one upload may consume a slot of the guest link.

    Returns the incremented usage on success. Rejections come back as values
    so callers racing on the same link can tell a lost race from a block.
    """
    state = evaluate(config, usage, now)
    if not state.is_active:
        logger.info("guest link %s rejected upload: %s", config.id, state.status.value)
        return Rejection(RejectionReason.LINK_INACTIVE, status=state.status)

    if isinstance(file_size, FileSize):
        size = file_size
    else:
        try:
            size = FileSize.from_int(int(file_size))
        except ValueError as e:
            logger.info("guest link %s rejected upload: %s", config.id, e)
            return Rejection(RejectionReason.INVALID_FILE_SIZE, detail=str(e))
    if not size.fits_within(config.max_file_bytes):
        logger.info(
            "guest link %s rejected upload of %d bytes (limit %d)",
            config.id, int(size), config.max_file_bytes,
        )
        return Rejection(RejectionReason.FILE_TOO_LARGE, max_file_bytes=config.max_file_bytes)

    return UploadAccepted(usage=usage.incremented())


def resolve_file_expiration(
    config: GuestLinkConfig, requested: Optional[datetime], now: datetime
) -> datetime:
    """Compute the expiration a file gets when uploaded through the guest link.

    Without a request the file lives as long as the link allows. A requested
    instant must be in the future and, for a fixed lifetime, no later than
    ``now`` plus that lifetime.
    """
    lifetime = config.file_lifetime
    if requested is None:
        return lifetime.expires_at(now)
    if requested <= now:
        raise ExpirationOutOfRange("file expiration must be in the future")
    if not lifetime.is_infinite and requested > lifetime.expires_at(now):
        raise ExpirationOutOfRange(
            f"file expiration exceeds guest link limit of {lifetime.friendly_name()}"
        )
    return requested
