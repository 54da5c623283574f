"""Runtime settings loaded from the environment or a .env file."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

HF_ROUTER_URL = "https://router.huggingface.co/v1"


class Settings(BaseSettings):
    """FinCoach settings.

    The text-generation collaborator is considered unavailable unless both
    hf_token and hf_model_id are set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FINCOACH_",
        extra="ignore",
        populate_by_name=True,
    )

    # Text-generation collaborator (OpenAI-compatible chat completions)
    hf_token: str | None = Field(default=None, alias="HF_TOKEN")
    hf_model_id: str | None = Field(default=None, alias="HF_MODEL_ID")
    llm_base_url: str = HF_ROUTER_URL
    llm_timeout_seconds: float = Field(default=30.0, gt=0)

    insight_max_tokens: int = Field(default=400, ge=1)
    insight_temperature: float = Field(default=0.5, ge=0, le=2)

    categorize_max_tokens: int = Field(default=400, ge=1)
    categorize_temperature: float = Field(default=0.3, ge=0, le=2)
    categorize_max_items: int = Field(default=25, ge=1)

    log_level: str = "INFO"
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @property
    def llm_configured(self) -> bool:
        """True when credentials for the collaborator are present."""
        return bool(self.hf_token and self.hf_model_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
