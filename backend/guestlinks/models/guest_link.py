from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String

from guestlinks.core.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class GuestLink(Base):
    __tablename__ = "guest_links"

    id = Column(String(16), primary_key=True)
    label = Column(String(200), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    url_expires_at = Column(DateTime(timezone=True), nullable=True)
    # NULL means files uploaded through the link may choose any expiration
    file_lifetime_days = Column(Integer, nullable=True)
    max_file_bytes = Column(BigInteger, nullable=True)
    max_file_uploads = Column(Integer, nullable=True)
    uploads_consumed = Column(Integer, nullable=False, default=0)
    is_disabled = Column(Boolean, nullable=False, default=False)
