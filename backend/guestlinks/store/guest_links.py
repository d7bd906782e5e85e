from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from guestlinks.models.guest_link import GuestLink
from guestlinks.policy.errors import Conflict, GuestLinkNotFound, StorageUnavailable
from guestlinks.policy.guest_link import GuestLinkConfig, GuestLinkUsage
from guestlinks.policy.lifetime import FILE_LIFETIME_INFINITE, FileLifetime

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Columns hold UTC wall-clock time; naive input is taken to be UTC already.
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def config_from_row(row: GuestLink) -> GuestLinkConfig:
    lifetime = FILE_LIFETIME_INFINITE
    if row.file_lifetime_days is not None:
        lifetime = FileLifetime.in_days(row.file_lifetime_days)
    return GuestLinkConfig(
        id=row.id,
        label=row.label or "",
        created=_as_utc(row.created_at),
        url_expires=_as_utc(row.url_expires_at),
        file_lifetime=lifetime,
        max_file_bytes=row.max_file_bytes,
        max_file_uploads=row.max_file_uploads,
    )


def usage_from_row(row: GuestLink) -> GuestLinkUsage:
    return GuestLinkUsage(uploads_consumed=row.uploads_consumed or 0, is_disabled=bool(row.is_disabled))


class GuestLinkStore:
    """System of record for guest link limits and upload counters."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self):
        try:
            async with self._session_factory() as db:
                yield db
        except SQLAlchemyError as e:
            logger.error("guest link store failure: %s", e)
            raise StorageUnavailable(f"guest link store unavailable: {e}") from e

    async def insert_guest_link(self, config: GuestLinkConfig) -> None:
        logger.info("saving new guest link %s", config.id)
        lifetime_days = None if config.file_lifetime.is_infinite else config.file_lifetime.days
        async with self._session() as db:
            db.add(GuestLink(
                id=config.id,
                label=config.label,
                created_at=_to_utc(config.created),
                url_expires_at=_to_utc(config.url_expires),
                file_lifetime_days=lifetime_days,
                max_file_bytes=config.max_file_bytes,
                max_file_uploads=config.max_file_uploads,
                uploads_consumed=0,
                is_disabled=False,
            ))
            await db.commit()

    async def list_guest_links(self) -> list[tuple[GuestLinkConfig, GuestLinkUsage]]:
        async with self._session() as db:
            res = await db.execute(select(GuestLink).order_by(GuestLink.created_at))
            return [(config_from_row(row), usage_from_row(row)) for row in res.scalars().all()]

    async def load_guest_link(self, link_id: str) -> tuple[GuestLinkConfig, GuestLinkUsage]:
        async with self._session() as db:
            row = await self._get(db, link_id)
            return config_from_row(row), usage_from_row(row)

    async def commit_upload_count(self, link_id: str, expected_prior: int) -> None:
        """Advance the upload counter by one if it still reads ``expected_prior``."""
        async with self._session() as db:
            res = await db.execute(
                update(GuestLink)
                .where(GuestLink.id == link_id, GuestLink.uploads_consumed == expected_prior)
                .values(uploads_consumed=expected_prior + 1)
            )
            updated = res.rowcount
            await db.commit()
        if updated != 1:
            raise Conflict(link_id, expected_prior)

    async def set_disabled(self, link_id: str, disabled: bool) -> None:
        logger.info("%s guest link %s", "disabling" if disabled else "enabling", link_id)
        async with self._session() as db:
            row = await self._get(db, link_id)
            row.is_disabled = disabled
            await db.commit()

    async def delete_guest_link(self, link_id: str) -> None:
        logger.info("deleting guest link %s", link_id)
        async with self._session() as db:
            res = await db.execute(delete(GuestLink).where(GuestLink.id == link_id))
            deleted = res.rowcount
            await db.commit()
        if deleted == 0:
            raise GuestLinkNotFound(link_id)

    @staticmethod
    async def _get(db: AsyncSession, link_id: str) -> GuestLink:
        res = await db.execute(select(GuestLink).where(GuestLink.id == link_id))
        row = res.scalars().first()
        if row is None:
            raise GuestLinkNotFound(link_id)
        return row
