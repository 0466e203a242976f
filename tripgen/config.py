from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List
from dotenv import load_dotenv
load_dotenv()

# Tried in this order; first model that answers wins
DEFAULT_CANDIDATE_MODELS = [
    "gemini-2.0-flash",        # fast and reliable
    "gemini-2.0-flash-001",    # stable version
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash-lite",
    "gemini-2.5-flash-lite",
]


class Settings(BaseSettings):
    # Upstream model
    gemini_api_key: str = ""
    candidate_models: List[str] = list(DEFAULT_CANDIDATE_MODELS)
    attempt_timeout_ms: int = 10000

    # Mock fallback keeps a consistent perceived latency
    mock_delay_ms: int = 800

    # Application Settings
    allowed_origins: List[str] = ["*"]
    port: int = 3000
    log_level: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"  # Allow extra environment variables without validation errors
    )

    @property
    def api_key_configured(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


settings = Settings()
