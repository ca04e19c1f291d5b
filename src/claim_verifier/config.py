from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # LLM gateway (OpenAI-compatible chat completions with tool calling)
    LLM_API_KEY: Optional[str] = Field(None, description="API key for the chat-completion gateway")
    LLM_BASE_URL: str = Field("https://ai.gateway.lovable.dev/v1", description="OpenAI-compatible base URL")
    MODEL_VERDICT: str = "google/gemini-2.5-flash"
    MODEL_TRANSLATION: str = "google/gemini-2.5-flash-lite"
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Speech-to-text
    OPENAI_API_KEY: Optional[str] = Field(None, description="OpenAI API Key (transcription)")
    TRANSCRIPTION_MODEL: str = "whisper-1"

    # Evidence retrieval
    WIKI_API_URL: str = Field("https://{language}.wikipedia.org/w/api.php", description="MediaWiki API endpoint template")
    WIKI_PAGE_URL: str = Field("https://{language}.wikipedia.org/?curid={page_id}", description="Citation URL template")
    WIKI_USER_AGENT: str = "ClaimVerifier/1.0 (fact-checking assistant)"
    SEARCH_LIMIT: int = Field(3, ge=1, le=5, description="Search hits turned into evidence")
    CONTENT_MAX_CHARS: int = Field(1000, ge=1, description="Per-item content budget")
    HTTP_TIMEOUT_SECONDS: float = 15.0

    LOG_LEVEL: str = "INFO"

    # MLflow settings
    MLFLOW_TRACKING_URI: str = Field("http://127.0.0.1:5000", description="MLflow tracking server URI")
    MLFLOW_ENABLE_TRACING: bool = Field(False, description="Enable MLflow tracing")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()
