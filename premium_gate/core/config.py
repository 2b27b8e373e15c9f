"""
Application configuration.
All settings are loaded from environment variables.
Use env.example as a reference for required variables.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    IMPORTANT: Connection strings have no defaults - they MUST be set in .env file.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    # CORS: comma-separated (e.g. http://localhost:3000,http://admin-ui:80). Empty = built-in list.
    cors_origins: str = ""

    # ===========================================
    # DATABASE (PostgreSQL)
    # ===========================================
    database_url: str  # Required, no default

    # ===========================================
    # REDIS & CELERY
    # ===========================================
    redis_url: str  # Required, no default
    celery_broker_url: str  # Required, no default
    celery_result_backend: str  # Required, no default

    # ===========================================
    # ACCESS EVALUATION
    # ===========================================
    # Roles that pass gated content of their own zone without a subscription (ADMIN passes any zone).
    # Comma-separated, e.g. "ADMIN,COACH". Empty = no role bypass.
    role_bypass_roles: str = ""
    upgrade_url_anonymous: str = "/auth/register"
    upgrade_url_member: str = "/pricing"
    bulk_access_max_ids: int = 50

    # ===========================================
    # PREVIEW
    # ===========================================
    preview_words_anonymous: int = 40
    preview_words_member: int = 60
    reading_words_per_minute: int = 200

    # ===========================================
    # ACCESS DECISION CACHE (Redis)
    # ===========================================
    access_cache_enabled: bool = True
    access_cache_ttl: int = 60  # seconds

    # ===========================================
    # RELEASE SCHEDULING
    # ===========================================
    scheduled_list_default_limit: int = 20
    scheduled_list_max_limit: int = 100
    batch_schedule_max_ids: int = 100
    release_batch_limit: int = 500  # max items per process_due run
    release_beat_minutes: int = 5

    # ===========================================
    # ADMIN API
    # ===========================================
    admin_api_key: str | None = None  # Optional, but recommended

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    request_id_header: str = "X-Request-Id"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("role_bypass_roles")
    @classmethod
    def normalize_roles(cls, v: str) -> str:
        """Store as upper-case comma-separated string, parse when needed."""
        return v.upper().strip()

    @field_validator("reading_words_per_minute", "preview_words_anonymous", "preview_words_member")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @property
    def role_bypass_set(self) -> set[str]:
        """Get bypass roles as a set."""
        return {r.strip() for r in self.role_bypass_roles.split(",") if r.strip()}

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
