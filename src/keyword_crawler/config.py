"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings

from .core.fetcher import DEFAULT_ACCEPT, DEFAULT_ACCEPT_LANGUAGE, DEFAULT_USER_AGENT


class CrawlerSettings(BaseSettings):
    """Crawler configuration."""

    timeout: float = 30.0
    store_timeout: float = 5.0
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    max_connections: int = 100
    max_keepalive_connections: int = 20
    db_path: str = "crawler.db"
    results_limit: int = 10
    log_level: str = "INFO"

    model_config = {"env_prefix": "CRAWLER_", "env_file": ".env", "extra": "ignore"}


settings = CrawlerSettings()
