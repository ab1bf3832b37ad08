import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    scraper_user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
        alias="SCRAPER_USER_AGENT",
    )
    scraper_cookies: str | None = Field(None, alias="SCRAPER_COOKIES")
    scraper_timeout_seconds: float = Field(15.0, alias="SCRAPER_TIMEOUT_SECONDS")
    scraper_connect_timeout_seconds: float = Field(5.0, alias="SCRAPER_CONNECT_TIMEOUT_SECONDS")
    json_ld_max_depth: int = Field(32, alias="JSON_LD_MAX_DEPTH")
    placeholder_image_width: int = Field(600, alias="PLACEHOLDER_IMAGE_WIDTH")
    placeholder_image_height: int = Field(400, alias="PLACEHOLDER_IMAGE_HEIGHT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings
