"""
Configuration settings loaded from environment variables.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, Any, List
from dotenv import load_dotenv
from pathlib import Path

# Determine .env file path (backend/.env)
_env_path = Path(__file__).parent.parent / ".env"

# Use override=True so values in .env win over stale shell exports
load_dotenv(dotenv_path=_env_path, override=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # AWS Textract settings
    aws_region: str = Field(
        default="eu-west-2",
        alias="AWS_REGION",
        description="AWS region for Textract service (e.g., eu-west-2, us-east-1)"
    )
    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID",
        description="AWS access key ID used for Textract"
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY",
        description="AWS secret access key used for Textract"
    )
    aws_session_token: Optional[str] = Field(
        default=None,
        alias="AWS_SESSION_TOKEN",
        description="AWS session token (optional, for temporary credentials)"
    )

    # Image download settings
    image_fetch_timeout_seconds: float = Field(
        default=30.0,
        alias="IMAGE_FETCH_TIMEOUT_SECONDS",
        description="Timeout in seconds for downloading each receipt image"
    )

    # Application settings
    env: str = Field(
        default="local",
        alias="ENV",
        description="Environment (local, staging, production)"
    )
    log_level: str = Field(
        default="info",
        alias="LOG_LEVEL",
        description="Logging level"
    )
    cors_allow_origins: str = Field(
        default=(
            "http://localhost:3000,http://localhost:5173,"
            "http://127.0.0.1:3000,http://127.0.0.1:5173"
        ),
        alias="CORS_ALLOW_ORIGINS",
        description="Comma separated list of origins allowed to call the API"
    )

    @field_validator('image_fetch_timeout_seconds', mode='before')
    @classmethod
    def parse_timeout_from_string(cls, v: Any) -> Any:
        """Treat an empty environment value as the default timeout."""
        if isinstance(v, str) and not v.strip():
            return 30.0
        return v

    @property
    def cors_origins(self) -> List[str]:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.cors_allow_origins.split(',') if origin.strip()]

    @property
    def has_textract_credentials(self) -> bool:
        """True when region, access key ID and secret are all configured."""
        return bool(self.aws_region and self.aws_access_key_id and self.aws_secret_access_key)

    model_config = {
        "env_file": str(_env_path),  # Use explicit .env file path
        "case_sensitive": False,
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }


# Create a singleton settings instance
settings = Settings()
