"""
Environment configuration loader with validation for the order desk.
"""

import os
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv


class AppConfig(BaseModel):
    """Configuration model for the order desk API with validation."""

    # Database Configuration
    database_url: Optional[str] = Field(
        default=None,
        description="Database connection URL (None builds it from DB_* variables)",
    )
    db_pool_size: int = Field(default=10, ge=1, description="Pooled connection capacity")
    db_max_overflow: int = Field(
        default=0, ge=0, description="Connections allowed beyond the pool capacity"
    )
    db_pool_timeout: int = Field(
        default=30, ge=1, description="Seconds a request waits for a pooled connection"
    )
    db_pool_recycle: int = Field(
        default=3600, ge=1, description="Seconds before a pooled connection is replaced"
    )
    db_echo: bool = Field(default=False, description="Log every SQL statement")

    # Session Tokens
    jwt_secret: str = Field(default="change-me", min_length=1, description="HS256 signing secret")
    token_ttl_seconds: int = Field(default=3600, ge=1, description="Session token lifetime")

    # HTTP Server
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, ge=1, le=65535, description="Listen port")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        pydantic.ValidationError: If configuration values are invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    config_data: Dict[str, Any] = {
        "database_url": os.getenv("DATABASE_URL") or None,
        "db_pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
        "db_max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "0")),
        "db_pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", "30")),
        "db_pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "3600")),
        "db_echo": _flag("DB_ECHO"),
        "jwt_secret": os.getenv("JWT_SECRET", "change-me"),
        "token_ttl_seconds": int(os.getenv("TOKEN_TTL_SECONDS", "3600")),
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "3001")),
        "cors_origins": os.getenv("CORS_ORIGINS", "*"),
        "debug": _flag("APP_DEBUG"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
    }

    return AppConfig(**config_data)


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        AppConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config
