"""PlanWise configuration management."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "PlanWise"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # CORS - comma-separated list of allowed origins ("*" echoes any origin)
    cors_origins: str = "*"

    # Upstream AI workflow (n8n webhook)
    n8n_webhook_url: str | None = None
    n8n_timeout_ms: int = 60000

    # Curriculum snippets injected into the system prompt
    curriculum_path: Path = Path("./data/curriculum.json")

    # Firestore service account, tried in this order: file, raw JSON, base64 JSON
    firebase_service_account_path: str | None = None
    firebase_service_account: str | None = None
    firebase_service_account_json: str | None = None
    firebase_service_account_b64: str | None = None

    # Assessment lookup
    assessments_collection: str = "assessments"
    assessments_fallback_limit: int = 200

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def n8n_timeout_seconds(self) -> float:
        """Webhook timeout in seconds, as httpx expects it."""
        return max(self.n8n_timeout_ms, 0) / 1000

    @property
    def has_firebase_credentials(self) -> bool:
        """Check if any service account source is configured."""
        return any(
            (
                self.firebase_service_account_path,
                self.firebase_service_account,
                self.firebase_service_account_json,
                self.firebase_service_account_b64,
            )
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
