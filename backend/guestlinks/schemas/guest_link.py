from datetime import datetime

from pydantic import BaseModel


class GuestLinkCreate(BaseModel):
    label: str = ""
    url_expires: datetime | None = None
    # None lets each guest upload choose its own expiration
    file_lifetime_days: int | None = None
    max_file_bytes: int | None = None
    max_file_uploads: int | None = None

class GuestLinkCreated(BaseModel):
    id: str
    url: str

class GuestLinkInfo(BaseModel):
    id: str
    url: str
    label: str
    created_at: datetime
    url_expires_at: datetime | None
    file_lifetime: str
    max_file_bytes: int | None
    max_file_size: str
    max_file_uploads: int | None
    uploads_consumed: int
    is_disabled: bool
    is_active: bool
    status: str

class GuestLinkListResponse(BaseModel):
    guest_links: list[GuestLinkInfo]
    total: int

class ExpirationChoiceOut(BaseModel):
    key: str
    label: str
    expires_at: datetime | None
    is_default: bool

class GuestSessionState(BaseModel):
    id: str
    label: str
    is_active: bool
    status: str
    message: str | None = None
    expiration_choices: list[ExpirationChoiceOut]
    default_choice: str
    max_file_bytes: int | None
    max_file_size: str
    uploads_remaining: int | None

class GuestUploadRequest(BaseModel):
    size: int
    expiration: datetime | None = None

class GuestUploadResponse(BaseModel):
    uploads_consumed: int
    uploads_remaining: int | None
    is_active: bool
    file_expires_at: datetime
