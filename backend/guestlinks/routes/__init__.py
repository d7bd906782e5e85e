from .guest_links import guest_router as guest_sessions
from .guest_links import router as guest_links
