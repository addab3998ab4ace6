"""Configuration management for restchain"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings, read from RESTCHAIN_* environment variables or .env.

    These only feed transport defaults and logging; base URL, auth and
    middleware are always supplied per Api handle.
    """

    # ===== Transport Timeouts (seconds) =====
    timeout: float = Field(default=60.0, gt=0, description="Read timeout")
    connect_timeout: float = Field(default=10.0, gt=0)
    write_timeout: float = Field(default=10.0, gt=0)
    pool_timeout: float = Field(default=5.0, gt=0)

    # ===== Transport Behavior =====
    follow_redirects: bool = True
    verify_ssl: bool = True

    # ===== Logging =====
    log_level: str = "info"

    class Config:
        env_prefix = "RESTCHAIN_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for applications and scripts using restchain.

    The library itself never installs handlers; call this once at startup.
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


settings = Settings()
