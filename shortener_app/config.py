from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "URL Shortener"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Database (durable record store)
    database_url: str = "sqlite:///./url_shortener.db"

    # URL Shortener specific
    base_url: str = "http://127.0.0.1:8000"
    short_url_length: int = 7  # 62^7 possible short ids
    max_retries: int = 10  # Generation attempts before giving up

    # Short id generation strategy
    short_code_strategy: str = "random"  # Options: "random", "base62"
    short_code_salt: int = 0  # Offset added to the counter by the base62 strategy

    # Cache settings (volatile lookup cache)
    cache_backend: str = "redis"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)
    cache_socket_timeout: float = 2.0  # Connect/operation timeout, seconds
    cache_reconnect_interval: float = 30.0  # Seconds to treat cache as down after a failure
    cache_key_prefix: Optional[str] = None

    # Hit tracking
    hit_counter_ttl: int = 86400  # Approximate counters expire after 24h
    popular_threshold: int = 10  # Hits needed before a link is marked popular
    popular_ttl: int = 86400

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Seconds to wait for pending hit increments on shutdown
    shutdown_drain_timeout: float = 5.0

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
