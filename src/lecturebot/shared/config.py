"""
Configuration Module - Load and validate application settings.
==============================================================

Loads configuration from:
1. config/settings.yaml (defaults)
2. Environment variables from .env file
3. Environment variables from system

Environment variables override YAML defaults. Provider credentials and
endpoints are read from the environment only.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file early
load_dotenv()


def _find_project_root() -> Path:
    """Find the project root directory by looking for pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    # Fallback to current working directory
    return Path.cwd()


PROJECT_ROOT = _find_project_root()
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "settings.yaml"


# ─────────────────────────────────────────────────────────────────────────────
# Nested Configuration Models
# ─────────────────────────────────────────────────────────────────────────────


class AssistantConfig(BaseModel):
    """Persona used by the behavior policy."""

    academy_name: str = "자사몰사관학교"
    subject: str = "메타 광고"
    audience: str = "수강생"
    channel: str = "카카오톡"


class EmbeddingsConfig(BaseModel):
    """Gemini embeddings settings."""

    model_name: str = "text-embedding-004"
    dimensions: int = 768
    task_type: str = "RETRIEVAL_QUERY"
    timeout_seconds: float = 10.0


class RetrievalConfig(BaseModel):
    """Similarity search settings."""

    top_k: int = Field(default=3, ge=1)
    similarity_threshold: Optional[float] = None
    rpc_function: str = "search_lecture_chunks"
    timeout_seconds: float = 10.0


class GenerationConfig(BaseModel):
    """LLM generation settings."""

    model_name: str = "gemini-2.0-flash"
    temperature: float = 0.3
    max_output_tokens: int = 512
    max_context_chars: int = 12000
    include_sources: bool = True
    timeout_seconds: float = 20.0


class ResilienceConfig(BaseModel):
    """Retry policy shared by every remote call."""

    max_attempts: int = Field(default=2, ge=1)
    retry_min_wait: float = 0.5
    retry_max_wait: float = 4.0


class MessagesConfig(BaseModel):
    """User-facing fixed messages."""

    empty_input: str = "질문을 입력해 주세요."
    invalid_request: str = "요청 형식이 올바르지 않습니다. 질문을 다시 입력해 주세요."
    not_found: str = (
        "해당 질문과 관련된 강의 내용을 찾지 못했습니다. "
        "보다 정확한 답변을 위해 질문을 구체적으로 남겨주시면 강사님이 직접 답변드리겠습니다."
    )
    apology: str = "죄송합니다, 일시적인 오류가 발생했습니다. 잠시 후 다시 시도해 주세요."
    empty_answer: str = "답변을 생성하지 못했습니다. 질문을 조금 더 구체적으로 남겨주세요."
    method_not_allowed: str = "Method not allowed"


class ServerConfig(BaseModel):
    """Webhook server settings."""

    host: str = "0.0.0.0"
    port: int = 8000
    path: str = "/api/chat"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    rich_console: bool = True
    file: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Main Settings Class
# ─────────────────────────────────────────────────────────────────────────────


class Settings(BaseSettings):
    """
    Main application settings.

    Loads from:
    1. config/settings.yaml (defaults)
    2. Environment variables

    Environment variables override YAML settings. A Settings instance is
    passed explicitly into the pipeline and providers, so tests can build
    one directly instead of touching process-wide state.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Credentials and endpoints (from environment only)
    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")
    supabase_url: str = Field(default="", validation_alias="SUPABASE_URL")
    supabase_service_key: str = Field(default="", validation_alias="SUPABASE_SERVICE_KEY")

    # Top-level environment overrides
    top_k: Optional[int] = Field(default=None, validation_alias="TOP_K")
    similarity_threshold: Optional[float] = Field(
        default=None, validation_alias="SIMILARITY_THRESHOLD"
    )
    log_level: Optional[str] = Field(default=None, validation_alias="LOG_LEVEL")

    # Nested configurations (from YAML)
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)
    embeddings: EmbeddingsConfig = Field(default_factory=EmbeddingsConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("gemini_api_key", "supabase_url", "supabase_service_key", mode="before")
    @classmethod
    def validate_credential(cls, v: Any) -> str:
        """Allow empty credentials; providers complain when they are used."""
        if v is None:
            return ""
        return str(v).strip()

    def get_effective_top_k(self) -> int:
        """Get the effective top-k value (env override or config)."""
        if self.top_k is not None:
            return self.top_k
        return self.retrieval.top_k

    def get_effective_threshold(self) -> Optional[float]:
        """Get the effective similarity threshold (env override or config)."""
        if self.similarity_threshold is not None:
            return self.similarity_threshold
        return self.retrieval.similarity_threshold

    def get_effective_log_level(self) -> str:
        """Get the effective log level (env override or config)."""
        if self.log_level:
            return self.log_level.upper()
        return self.logging.level.upper()


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def _create_settings(config_path: Optional[Path] = None) -> Settings:
    """Create settings instance by merging YAML defaults with environment."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    yaml_config = _load_yaml_config(config_path)

    # Credentials and TOP_K-style overrides never come from YAML
    return Settings(**yaml_config)


def load_settings(config_path: Path) -> Settings:
    """
    Build a fresh Settings instance from a specific YAML file.

    Unlike get_settings(), the result is not cached.
    """
    return _create_settings(config_path)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the singleton settings instance.

    Only entrypoints (webhook app, CLI) should call this; library code
    receives its Settings explicitly.

    Returns:
        Settings instance with merged configuration

    Example:
        >>> settings = get_settings()
        >>> print(settings.retrieval.top_k)
        3
    """
    return _create_settings()


def reload_settings() -> Settings:
    """
    Force reload of settings (clears cache).

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
