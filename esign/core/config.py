from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    PROJECT_NAME: str = "E-Signature User Manager"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    # Signing Token Configuration
    SIGNING_TOKEN_LENGTH: int = Field(
        default=10,
        ge=4,
        description="Number of characters in a generated signing token",
    )

    SIGNING_TOKEN_MAX_ATTEMPTS: int = Field(
        default=100,
        ge=1,
        description="Maximum generation attempts before giving up on a unique token",
    )

    # Signing page date rendering (fr-FR numeric date)
    DOC_DATE_FORMAT: str = "%d/%m/%Y"

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and text renderers are supported."""
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be either 'json' or 'text'")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        """Check if the application is running in development mode."""
        return self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production mode."""
        return self.ENVIRONMENT.lower() in ["production", "prod"]


# Global settings instance
settings = Settings()
