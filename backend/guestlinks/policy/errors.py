class GuestLinkError(Exception):
    """Base class for guest link domain errors."""


class InvalidConfiguration(GuestLinkError):
    """The guest link was set up with limits that cannot be evaluated."""


class ClockSkew(InvalidConfiguration):
    def __init__(self, now, created):
        self.now = now
        self.created = created
        super().__init__(f"current time {now.isoformat()} precedes guest link creation {created.isoformat()}")


class ExpirationOutOfRange(GuestLinkError):
    """A requested file expiration falls outside what the guest link permits."""


class GuestLinkNotFound(GuestLinkError):
    def __init__(self, link_id: str):
        self.link_id = link_id
        super().__init__(f"guest link {link_id} not found")


class Conflict(GuestLinkError):
    """The stored upload count no longer matches the count the caller read."""

    def __init__(self, link_id: str, expected_prior: int):
        self.link_id = link_id
        self.expected_prior = expected_prior
        super().__init__(f"upload count for guest link {link_id} changed from {expected_prior}")


class StorageUnavailable(GuestLinkError):
    """The guest link store could not be reached or kept conflicting."""
