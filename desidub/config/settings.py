from typing import Optional, List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False
    )

    # ===========================
    # Provider Customization
    # ===========================
    PROVIDER_NAME: str = "Desidubanime"
    PROVIDER_PREFIX: str = "desidubanime"

    # ===========================
    # Server Configuration
    # ===========================
    PORT: Optional[int] = 7000

    # ===========================
    # Source Configuration
    # ===========================
    DESIDUB_URL: str = "https://www.desidubanime.me"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    ACCEPT_HEADER: str = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
    SITE_TITLE_SUFFIX: str = " - Desi Dub Anime"
    IGNORED_IFRAME_HOSTS: List[str] = ["google", "disqus"]

    # ===========================
    # Cache Configuration
    # ===========================
    HOME_CACHE_TTL: int = 600
    SEARCH_CACHE_TTL: int = 300
    INFO_CACHE_TTL: int = 1800
    WATCH_CACHE_TTL: int = 600

    # ===========================
    # HTTP Timeout Configuration
    # ===========================
    HTTP_TIMEOUT: Optional[int] = 15

    # ===========================
    # Proxy Configuration
    # ===========================
    PROXY_URL: Optional[str] = None

    # ===========================
    # Logging Configuration
    # ===========================
    LOG_LEVEL: str = "DEBUG"

    # ===========================
    # Internal Configuration
    # ===========================
    CLEANUP_INTERVAL: int = 60

    # ===========================
    # Field Validators
    # ===========================
    @field_validator("DESIDUB_URL", "PROXY_URL")
    @classmethod
    def normalize_urls(cls, v):
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


# ===========================
# Settings Instance
# ===========================
settings = Settings()
