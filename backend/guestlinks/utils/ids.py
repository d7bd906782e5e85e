import secrets

from guestlinks.core.config import settings


def generate_guest_link_id() -> str:
    alphabet = settings.GUEST_LINK_ID_CHARACTERS
    return "".join(secrets.choice(alphabet) for _ in range(settings.GUEST_LINK_ID_LENGTH))


def parse_guest_link_id(raw: str) -> str:
    if len(raw) != settings.GUEST_LINK_ID_LENGTH:
        raise ValueError(
            f"guest link ID ({raw}) has invalid length: got {len(raw)}, want {settings.GUEST_LINK_ID_LENGTH}"
        )
    for c in raw:
        if c not in settings.GUEST_LINK_ID_CHARACTERS:
            raise ValueError(f"guest link ID ({raw}) contains invalid character: {c}")
    return raw
