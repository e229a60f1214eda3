"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "LaunchPad"
    debug: bool = False
    public_base_url: str = "http://localhost:3000"

    # Database (postgresql+psycopg for psycopg3; sqlite is accepted for local runs and tests)
    database_url: str = "postgresql+psycopg://localhost:5432/launchpad_dev"
    db_connect_timeout: int = 10  # seconds

    # Security: tokens are issued by the external identity provider and signed with secret_key
    secret_key: str = ""
    jwt_audience: Optional[str] = None
    internal_job_token: str = ""  # Required for /internal/* endpoints

    # Blob storage
    storage_backend: str = "local"  # local | supabase
    storage_bucket: str = "startups"
    storage_local_root: str = "./var/uploads"
    storage_public_base_url: str = "http://localhost:8000/uploads"
    supabase_url: str = ""
    supabase_service_key: str = ""
    storage_timeout: float = 30.0
    max_upload_bytes: int = 10 * 1024 * 1024

    # Public page cache (seconds); 0 disables caching. Each worker holds its own
    # copy and only the worker serving a write revalidates, so this TTL bounds
    # how stale the other workers can be.
    page_cache_ttl_seconds: int = 60
    page_cache_max_entries: int = 1000

    # Moderation notifications
    admin_notify_email: str = ""

    # SMTP / Email
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.public_base_url = os.getenv("PUBLIC_BASE_URL", self.public_base_url).rstrip("/")

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'launchpad_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")
        self.jwt_audience = os.getenv("JWT_AUDIENCE") or None
        self.internal_job_token = os.getenv("INTERNAL_JOB_TOKEN", "")

        self.storage_backend = os.getenv("STORAGE_BACKEND", self.storage_backend).lower()
        self.storage_bucket = os.getenv("STORAGE_BUCKET", self.storage_bucket)
        self.storage_local_root = os.getenv("STORAGE_LOCAL_ROOT", self.storage_local_root)
        self.storage_public_base_url = os.getenv(
            "STORAGE_PUBLIC_BASE_URL", self.storage_public_base_url
        ).rstrip("/")
        self.supabase_url = os.getenv("SUPABASE_URL", "").rstrip("/")
        self.supabase_service_key = os.getenv("SUPABASE_SERVICE_KEY", "")
        self.storage_timeout = float(os.getenv("STORAGE_TIMEOUT", str(self.storage_timeout)))
        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", str(self.max_upload_bytes)))

        self.page_cache_ttl_seconds = int(
            os.getenv("PAGE_CACHE_TTL_SECONDS", str(self.page_cache_ttl_seconds))
        )
        self.page_cache_max_entries = int(
            os.getenv("PAGE_CACHE_MAX_ENTRIES", str(self.page_cache_max_entries))
        )

        self.admin_notify_email = os.getenv("ADMIN_NOTIFY_EMAIL", "")

        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from = os.getenv("SMTP_FROM", "")
