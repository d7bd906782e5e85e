import os


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./guestlinks.db")
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    GUEST_LINK_ID_LENGTH: int = 16
    # Omit visually similar characters (I,l,1), (0,O)
    GUEST_LINK_ID_CHARACTERS: str = "abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789"
    GUEST_LINK_LABEL_MAX_LENGTH: int = 200
    GUEST_LINK_BYTE_LIMIT_MINIMUM: int = 1024 * 1024

settings = Settings()
