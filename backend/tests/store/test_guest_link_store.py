"""
Guest link store tests against a real SQLite database.
"""

from datetime import datetime, timedelta, timezone

import pytest

from guestlinks.core.database import make_engine, make_sessionmaker
from guestlinks.policy.errors import Conflict, GuestLinkNotFound, StorageUnavailable
from guestlinks.policy.guest_link import GuestLinkUsage
from guestlinks.policy.lifetime import FILE_LIFETIME_INFINITE, FileLifetime
from guestlinks.store.guest_links import GuestLinkStore

from conftest import LINK_ID, OTHER_LINK_ID


@pytest.mark.asyncio
async def test_insert_then_load_round_trips_config(store, make_config, now) -> None:
    config = make_config(
        label="For e2e testing",
        url_expires=now + timedelta(days=3),
        file_lifetime=FileLifetime.in_days(7),
        max_file_bytes=50 * 1024 * 1024,
        max_file_uploads=1,
    )
    await store.insert_guest_link(config)

    loaded, usage = await store.load_guest_link(LINK_ID)

    assert loaded == config
    assert usage == GuestLinkUsage(uploads_consumed=0, is_disabled=False)


@pytest.mark.asyncio
async def test_non_utc_instants_keep_their_moment(store, make_config, now) -> None:
    plus_five = timezone(timedelta(hours=5))
    created = (now - timedelta(hours=2)).astimezone(plus_five)
    expires = datetime(2024, 1, 4, 5, 0, tzinfo=plus_five)
    await store.insert_guest_link(make_config(created=created, url_expires=expires))

    loaded, _ = await store.load_guest_link(LINK_ID)

    assert loaded.url_expires == datetime(2024, 1, 4, 0, 0, tzinfo=timezone.utc)
    assert loaded.url_expires.utcoffset() == timedelta(0)
    assert loaded.created == created
    assert not loaded.is_expired(datetime(2024, 1, 3, 23, 59, tzinfo=timezone.utc))
    assert loaded.is_expired(datetime(2024, 1, 4, 0, 0, tzinfo=timezone.utc))


@pytest.mark.asyncio
async def test_unrestricted_lifetime_is_stored_as_infinite(store, make_config) -> None:
    await store.insert_guest_link(make_config())
    loaded, _ = await store.load_guest_link(LINK_ID)
    assert loaded.file_lifetime == FILE_LIFETIME_INFINITE


@pytest.mark.asyncio
async def test_load_unknown_link_raises_not_found(store) -> None:
    with pytest.raises(GuestLinkNotFound):
        await store.load_guest_link(LINK_ID)


@pytest.mark.asyncio
async def test_list_guest_links(store, make_config, now) -> None:
    await store.insert_guest_link(make_config(label="first"))
    await store.insert_guest_link(make_config(id=OTHER_LINK_ID, label="second", created=now))

    links = await store.list_guest_links()

    assert [config.label for config, _ in links] == ["first", "second"]


@pytest.mark.asyncio
async def test_commit_upload_count_advances_matching_count(store, make_config) -> None:
    await store.insert_guest_link(make_config())

    await store.commit_upload_count(LINK_ID, 0)
    await store.commit_upload_count(LINK_ID, 1)

    _, usage = await store.load_guest_link(LINK_ID)
    assert usage.uploads_consumed == 2


@pytest.mark.asyncio
async def test_commit_upload_count_with_stale_count_conflicts(store, make_config) -> None:
    await store.insert_guest_link(make_config())
    await store.commit_upload_count(LINK_ID, 0)

    with pytest.raises(Conflict):
        await store.commit_upload_count(LINK_ID, 0)

    _, usage = await store.load_guest_link(LINK_ID)
    assert usage.uploads_consumed == 1


@pytest.mark.asyncio
async def test_disable_and_enable(store, make_config) -> None:
    await store.insert_guest_link(make_config())

    await store.set_disabled(LINK_ID, True)
    _, usage = await store.load_guest_link(LINK_ID)
    assert usage.is_disabled

    await store.set_disabled(LINK_ID, False)
    _, usage = await store.load_guest_link(LINK_ID)
    assert not usage.is_disabled


@pytest.mark.asyncio
async def test_disable_unknown_link_raises_not_found(store) -> None:
    with pytest.raises(GuestLinkNotFound):
        await store.set_disabled(LINK_ID, True)


@pytest.mark.asyncio
async def test_delete_guest_link(store, make_config) -> None:
    await store.insert_guest_link(make_config())

    await store.delete_guest_link(LINK_ID)

    with pytest.raises(GuestLinkNotFound):
        await store.load_guest_link(LINK_ID)
    with pytest.raises(GuestLinkNotFound):
        await store.delete_guest_link(LINK_ID)


@pytest.mark.asyncio
async def test_database_errors_surface_as_storage_unavailable(tmp_path) -> None:
    # No tables were created in this database.
    empty = GuestLinkStore(make_sessionmaker(make_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")))

    with pytest.raises(StorageUnavailable):
        await empty.load_guest_link(LINK_ID)
