from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request

from guestlinks.core.config import settings
from guestlinks.core.database import SessionLocal
from guestlinks.monitoring.setup import report_guest_link_created
from guestlinks.policy.errors import (
    ExpirationOutOfRange,
    GuestLinkNotFound,
    InvalidConfiguration,
    StorageUnavailable,
)
from guestlinks.policy.evaluator import evaluate, validate_config
from guestlinks.policy.guest_link import GuestLinkConfig, GuestLinkUsage, Rejection, RejectionReason
from guestlinks.policy.lifetime import parse_file_lifetime_days
from guestlinks.policy.sizes import format_size_limit
from guestlinks.schemas.guest_link import (
    ExpirationChoiceOut,
    GuestLinkCreate,
    GuestLinkCreated,
    GuestLinkInfo,
    GuestLinkListResponse,
    GuestSessionState,
    GuestUploadRequest,
    GuestUploadResponse,
)
from guestlinks.services.guest_uploads import record_guest_upload
from guestlinks.store.guest_links import GuestLinkStore
from guestlinks.utils.ids import generate_guest_link_id, parse_guest_link_id
from guestlinks.utils.urls import guest_link_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/guest-links", tags=["Guest Links"])
guest_router = APIRouter(prefix="/guest", tags=["Guest Uploads"])


def get_store() -> GuestLinkStore:
    return GuestLinkStore(SessionLocal)

def get_now() -> datetime:
    return datetime.now(timezone.utc)


# -----------------------------
# Helpers
# -----------------------------

def _utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def _link_id_or_400(raw: str) -> str:
    try:
        return parse_guest_link_id(raw)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid guest link ID: {e}")

def guest_link_from_request(body: GuestLinkCreate, link_id: str, now: datetime) -> GuestLinkConfig:
    limit = settings.GUEST_LINK_LABEL_MAX_LENGTH
    if len(body.label) > limit:
        raise ValueError(f"label too long - limit {limit} characters")

    url_expires = _utc(body.url_expires)
    if url_expires is not None and url_expires <= now:
        raise ValueError("guest link expiration must be in the future")

    if body.max_file_bytes is not None and body.max_file_bytes < settings.GUEST_LINK_BYTE_LIMIT_MINIMUM:
        raise ValueError(
            f"guest upload size limit must be at least {settings.GUEST_LINK_BYTE_LIMIT_MINIMUM} bytes"
        )
    if body.max_file_uploads is not None and body.max_file_uploads <= 0:
        raise ValueError("guest upload count limit must be a positive number")

    config = GuestLinkConfig(
        id=link_id,
        created=now,
        label=body.label,
        url_expires=url_expires,
        file_lifetime=parse_file_lifetime_days(body.file_lifetime_days),
        max_file_bytes=body.max_file_bytes,
        max_file_uploads=body.max_file_uploads,
    )
    validate_config(config)
    return config

def _evaluate_or_500(config: GuestLinkConfig, usage: GuestLinkUsage, now: datetime):
    try:
        return evaluate(config, usage, now)
    except InvalidConfiguration as e:
        logger.error("guest link %s cannot be evaluated: %s", config.id, e)
        raise HTTPException(status_code=500, detail="Guest link is misconfigured")

MISCONFIGURED = "misconfigured"

def _link_info(
    request: Request, config: GuestLinkConfig, usage: GuestLinkUsage, now: datetime, strict: bool = True
) -> GuestLinkInfo:
    if strict:
        state = _evaluate_or_500(config, usage, now)
        is_active, status = state.is_active, state.status.value
    else:
        try:
            state = evaluate(config, usage, now)
            is_active, status = state.is_active, state.status.value
        except InvalidConfiguration as e:
            logger.error("guest link %s cannot be evaluated: %s", config.id, e)
            is_active, status = False, MISCONFIGURED
    return GuestLinkInfo(
        id=config.id,
        url=guest_link_url(request, config.id),
        label=config.label,
        created_at=config.created,
        url_expires_at=config.url_expires,
        file_lifetime=config.file_lifetime.friendly_name(),
        max_file_bytes=config.max_file_bytes,
        max_file_size=format_size_limit(config.max_file_bytes),
        max_file_uploads=config.max_file_uploads,
        uploads_consumed=usage.uploads_consumed,
        is_disabled=usage.is_disabled,
        is_active=is_active,
        status=status,
    )

def _storage_unavailable(e: StorageUnavailable) -> HTTPException:
    return HTTPException(status_code=503, detail=f"Storage unavailable: {e}")


# -----------------------------
# Operator endpoints
# -----------------------------

@router.post("", response_model=GuestLinkCreated)
async def create_guest_link(
    request: Request,
    body: GuestLinkCreate,
    store: GuestLinkStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    try:
        config = guest_link_from_request(body, generate_guest_link_id(), now)
    except (ValueError, InvalidConfiguration) as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: {e}")

    try:
        await store.insert_guest_link(config)
    except StorageUnavailable as e:
        raise _storage_unavailable(e)

    report_guest_link_created()
    return GuestLinkCreated(id=config.id, url=guest_link_url(request, config.id))


@router.get("", response_model=GuestLinkListResponse)
async def list_guest_links(
    request: Request,
    store: GuestLinkStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    try:
        links = await store.list_guest_links()
    except StorageUnavailable as e:
        raise _storage_unavailable(e)

    items = [_link_info(request, config, usage, now, strict=False) for config, usage in links]
    return GuestLinkListResponse(guest_links=items, total=len(items))


@router.get("/{link_id}", response_model=GuestLinkInfo)
async def get_guest_link(
    link_id: str,
    request: Request,
    store: GuestLinkStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    link_id = _link_id_or_400(link_id)
    try:
        config, usage = await store.load_guest_link(link_id)
    except GuestLinkNotFound:
        raise HTTPException(status_code=404, detail="Guest link not found")
    except StorageUnavailable as e:
        raise _storage_unavailable(e)
    return _link_info(request, config, usage, now)


@router.delete("/{link_id}", status_code=204)
async def delete_guest_link(link_id: str, store: GuestLinkStore = Depends(get_store)):
    """Delete a guest link. Files already uploaded through it keep their expiration."""
    link_id = _link_id_or_400(link_id)
    try:
        await store.delete_guest_link(link_id)
    except GuestLinkNotFound:
        raise HTTPException(status_code=404, detail="Guest link not found")
    except StorageUnavailable as e:
        raise _storage_unavailable(e)


async def _set_disabled(link_id: str, disabled: bool, store: GuestLinkStore) -> None:
    link_id = _link_id_or_400(link_id)
    try:
        await store.set_disabled(link_id, disabled)
    except GuestLinkNotFound:
        raise HTTPException(status_code=404, detail="Guest link not found")
    except StorageUnavailable as e:
        raise _storage_unavailable(e)


@router.put("/{link_id}/enable", status_code=204)
async def enable_guest_link(link_id: str, store: GuestLinkStore = Depends(get_store)):
    await _set_disabled(link_id, False, store)


@router.put("/{link_id}/disable", status_code=204)
async def disable_guest_link(link_id: str, store: GuestLinkStore = Depends(get_store)):
    await _set_disabled(link_id, True, store)


# -----------------------------
# Guest endpoints
# -----------------------------

@guest_router.get("/{link_id}", response_model=GuestSessionState)
async def get_guest_session(
    link_id: str,
    store: GuestLinkStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    link_id = _link_id_or_400(link_id)
    try:
        config, usage = await store.load_guest_link(link_id)
    except GuestLinkNotFound:
        raise HTTPException(status_code=404, detail="Guest link not found")
    except StorageUnavailable as e:
        raise _storage_unavailable(e)

    state = _evaluate_or_500(config, usage, now)
    default = state.default_expiration_choice
    return GuestSessionState(
        id=config.id,
        label=config.label,
        is_active=state.is_active,
        status=state.status.value,
        message=None if state.is_active else "Guest Link Inactive",
        expiration_choices=[
            ExpirationChoiceOut(
                key=choice.key,
                label=choice.label,
                expires_at=choice.expires_at(now),
                is_default=choice == default,
            )
            for choice in state.allowed_expiration_choices
        ],
        default_choice=default.key,
        max_file_bytes=state.max_file_bytes,
        max_file_size=format_size_limit(state.max_file_bytes),
        uploads_remaining=state.uploads_remaining,
    )


@guest_router.post("/{link_id}/uploads", response_model=GuestUploadResponse)
async def record_guest_link_upload(
    link_id: str,
    body: GuestUploadRequest,
    store: GuestLinkStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    link_id = _link_id_or_400(link_id)
    try:
        outcome = await record_guest_upload(store, link_id, body.size, now, _utc(body.expiration))
    except GuestLinkNotFound:
        raise HTTPException(status_code=404, detail="Guest link not found")
    except ExpirationOutOfRange as e:
        raise HTTPException(status_code=400, detail=f"Invalid expiration: {e}")
    except InvalidConfiguration as e:
        logger.error("guest link %s cannot be evaluated: %s", link_id, e)
        raise HTTPException(status_code=500, detail="Guest link is misconfigured")
    except StorageUnavailable as e:
        raise _storage_unavailable(e)

    if isinstance(outcome, Rejection):
        if outcome.reason is RejectionReason.LINK_INACTIVE:
            raise HTTPException(status_code=401, detail=outcome.message)
        raise HTTPException(status_code=400, detail=outcome.message)

    return GuestUploadResponse(
        uploads_consumed=outcome.usage.uploads_consumed,
        uploads_remaining=outcome.state.uploads_remaining,
        is_active=outcome.state.is_active,
        file_expires_at=outcome.file_expires,
    )
