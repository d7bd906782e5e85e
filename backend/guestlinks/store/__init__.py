from .guest_links import GuestLinkStore

__all__ = ["GuestLinkStore"]
