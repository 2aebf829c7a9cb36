import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _database_url_from_env() -> Optional[str]:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # Fall back to the discrete POSTGRES_* variables used by docker-compose.
    db_name = os.getenv("POSTGRES_DB")
    if not db_name:
        return None
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    host = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
    port = os.getenv("POSTGRES_PORT", "5432")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"


class Settings(BaseModel):
    service_name: str = "marketplace"
    version: str = "1.0.0"

    # Database. None means storage is not configured: reads degrade, writes fail.
    database_url: Optional[str] = None
    db_echo: bool = False

    # Role-assignment policy: identities that are granted the admin role on upsert.
    admin_open_ids: List[str] = []

    # Tokens are issued by the external identity provider and verified here.
    jwt_secret_key: str = "insecure-default-change-me"
    jwt_algorithm: str = "HS256"

    # Observability
    log_level: str = "INFO"
    tracing_enabled: bool = True
    otlp_endpoint: str = "http://localhost:4317"
    metrics_enabled: bool = True

    # Rate limiting
    rate_limit_enabled: bool = True
    order_rate_limit: str = "30/minute"

    @field_validator("admin_open_ids", mode="before")
    @classmethod
    def split_open_ids(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            service_name=os.getenv("SERVICE_NAME", "marketplace"),
            database_url=_database_url_from_env(),
            db_echo=_env_flag("DB_ECHO", False),
            admin_open_ids=os.getenv("ADMIN_OPEN_IDS", ""),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", "insecure-default-change-me"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            tracing_enabled=_env_flag("TRACING_ENABLED", True),
            otlp_endpoint=os.getenv("OTLP_ENDPOINT", "http://localhost:4317"),
            metrics_enabled=_env_flag("METRICS_ENABLED", True),
            rate_limit_enabled=_env_flag("RATE_LIMIT_ENABLED", True),
            order_rate_limit=os.getenv("ORDER_RATE_LIMIT", "30/minute"),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
