from .guest_link import GuestLink
