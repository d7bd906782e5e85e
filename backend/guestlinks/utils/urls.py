from fastapi import Request

from guestlinks.core.config import settings

GUEST_PATH = "/g"


def guest_link_url(request: Request, link_id: str) -> str:
    """Absolute URL a guest opens to reach the upload page of a link.

    ``PUBLIC_BASE_URL`` wins when the service sits behind a proxy; otherwise
    the URL the request arrived on is used.
    """
    base = settings.PUBLIC_BASE_URL or str(request.base_url)
    return f"{base.rstrip('/')}{GUEST_PATH}/{link_id}"
