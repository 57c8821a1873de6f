from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_artifact_dir() -> str:
    # Resolve to repository root (parent of `accordo`) on the current machine.
    return str(Path(__file__).resolve().parents[1] / "temp")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="ACCORDO_", extra="ignore")

    app_name: str = "Accordo Contract Negotiation"
    log_level: str = "INFO"

    llm_provider: str = "openai_compatible"
    llm_model: str = "gpt-4-turbo"
    llm_api_base: str | None = "https://api.openai.com/v1"
    llm_api_key: str | None = None
    llm_temperature: float = 0.2
    llm_timeout_seconds: float = 60.0

    negotiation_max_workers: int = 3

    artifact_dir: str = _default_artifact_dir()
    download_route: str = "/api/download"
    max_upload_bytes: int = 16 * 1024 * 1024

    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    def assert_llm_configured(self) -> None:
        if self.llm_provider.lower() != "openai_compatible":
            raise ValueError("ACCORDO_LLM_PROVIDER must be openai_compatible.")
        if not self.llm_api_base:
            raise ValueError("ACCORDO_LLM_API_BASE is required.")

    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
