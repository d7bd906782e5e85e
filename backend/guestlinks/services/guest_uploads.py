from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Union

from guestlinks.monitoring.setup import (
    report_upload_accepted,
    report_upload_conflict,
    report_upload_rejected,
)
from guestlinks.policy.errors import Conflict, StorageUnavailable
from guestlinks.policy.evaluator import evaluate, record_upload, resolve_file_expiration
from guestlinks.policy.guest_link import Rejection, UploadAccepted
from guestlinks.store.guest_links import GuestLinkStore

logger = logging.getLogger(__name__)

# One retry after a lost race; a second conflict means the link is too hot.
MAX_COMMIT_ATTEMPTS = 2


async def record_guest_upload(
    store: GuestLinkStore,
    link_id: str,
    file_size: int,
    now: datetime,
    requested_expiration: Optional[datetime] = None,
) -> Union[UploadAccepted, Rejection]:
    """Consume one upload slot of a guest link for a file the storage layer accepted.

    Reads the link, lets the policy decide, then commits the counter only if
    nobody else advanced it in between. Raises ``GuestLinkNotFound``,
    ``ExpirationOutOfRange`` or ``StorageUnavailable``.
    """
    for attempt in range(1, MAX_COMMIT_ATTEMPTS + 1):
        config, usage = await store.load_guest_link(link_id)

        outcome = record_upload(usage, file_size, config, now)
        if isinstance(outcome, Rejection):
            report_upload_rejected(outcome.reason.value)
            return outcome

        file_expires = resolve_file_expiration(config, requested_expiration, now)

        try:
            await store.commit_upload_count(link_id, usage.uploads_consumed)
        except Conflict:
            report_upload_conflict()
            logger.warning(
                "upload count conflict on guest link %s (attempt %s/%s)",
                link_id, attempt, MAX_COMMIT_ATTEMPTS,
            )
            continue

        report_upload_accepted()
        logger.info(
            "guest link %s accepted upload %s/%s",
            link_id, outcome.usage.uploads_consumed,
            config.max_file_uploads if config.max_file_uploads is not None else "unlimited",
        )
        return UploadAccepted(
            usage=outcome.usage,
            file_expires=file_expires,
            state=evaluate(config, outcome.usage, now),
        )

    raise StorageUnavailable(f"upload count for guest link {link_id} kept changing")
