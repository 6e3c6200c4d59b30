"""
Configuration management using Pydantic Settings.
Reads from environment variables (and an optional .env file).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # LLM Configuration
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    litellm_model: str = Field(default="gpt-4o-mini", alias="LITELLM_MODEL")

    # Rule oracle (step visibility rules are judged by an LLM)
    rule_oracle_model: str = Field(default="gpt-4o-mini", alias="RULE_ORACLE_MODEL")
    rule_oracle_timeout_seconds: float = Field(default=30.0, alias="RULE_ORACLE_TIMEOUT_SECONDS")

    # Wizard
    default_wizard_id: str = Field(default="leave-intake-v1", alias="DEFAULT_WIZARD_ID")

    # Session store controls
    max_sessions: int = Field(default=1000, alias="MAX_SESSIONS")
    session_ttl_seconds: int = Field(default=1800, alias="SESSION_TTL_SECONDS")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Circuit Breaker Configuration (guards the rule oracle)
    circuit_breaker_failure_threshold: int = Field(
        default=5, alias="CIRCUIT_BREAKER_FAILURE_THRESHOLD"
    )
    circuit_breaker_timeout: int = Field(default=60, alias="CIRCUIT_BREAKER_TIMEOUT")


# Global settings instance
settings = Settings()
