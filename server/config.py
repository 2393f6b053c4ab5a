"""
Configuration settings for the AI Learning Service backend.

This module handles all configuration settings including API keys,
database connections, and other environment variables for the project
analysis and plugin generation service.
"""

import os
import logging
from typing import Optional, Dict, Any
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """
    Application settings with environment variable support.
    """

    # OpenAI API Configuration
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for code analysis"
    )
    openai_model: str = Field(
        default="gpt-4.1",
        description="OpenAI model used to analyze source code"
    )
    openai_max_tokens: int = Field(
        default=4000,
        description="Maximum tokens for OpenAI responses"
    )
    openai_temperature: float = Field(
        default=0.2,
        description="Temperature setting for OpenAI responses (0.0-2.0)"
    )
    openai_timeout: int = Field(
        default=60,
        description="Timeout for OpenAI API calls (seconds)"
    )
    openai_max_retries: int = Field(
        default=2,
        description="Maximum retries for OpenAI API calls"
    )

    # FastAPI Configuration
    app_name: str = Field(
        default="AI Learning Service API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # API Configuration
    api_host: str = Field(
        default="localhost",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )

    # CORS Configuration
    cors_origins: str = Field(
        default="*",
        description="Comma separated CORS origins (configure for production)"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./data/ai_learning.db",
        description="SQLAlchemy database URL"
    )
    database_query_timeout: int = Field(
        default=15,
        description="Per-query timeout for database statements (seconds)"
    )
    database_connect_retries: int = Field(
        default=3,
        description="Connection attempts made when the server starts"
    )
    database_retry_delay: float = Field(
        default=2.0,
        description="Initial delay between startup connection attempts (seconds)"
    )

    # Analysis Configuration
    content_fetch_timeout: int = Field(
        default=30,
        description="Timeout for fetching website content (seconds)"
    )
    analysis_max_code_chars: int = Field(
        default=8000,
        description="Maximum number of source characters sent to the LLM"
    )
    activity_window_days: int = Field(
        default=7,
        description="How far back the recent activity feed looks (days)"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    @field_validator('openai_temperature')
    def validate_temperature(cls, v):
        """Validate OpenAI temperature is within valid range."""
        if not 0.0 <= v <= 2.0:
            raise ValueError('OpenAI temperature must be between 0.0 and 2.0')
        return v

    @field_validator('openai_max_tokens', 'database_query_timeout', 'content_fetch_timeout', 'analysis_max_code_chars')
    def validate_positive(cls, v):
        """Validate limits and timeouts are positive."""
        if v <= 0:
            raise ValueError('Value must be positive')
        return v

    @field_validator('database_connect_retries')
    def validate_retries(cls, v):
        """At least one connection attempt is always made."""
        if v < 1:
            raise ValueError('Connection retries must be at least 1')
        return v

    @field_validator('log_level')
    def validate_log_level(cls, v):
        """Validate log level is valid."""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def validate_required_settings() -> list[str]:
    """
    Validate that required settings are configured.

    Returns:
        List of missing required settings
    """
    missing = []
    settings = get_settings()

    # Check for OpenAI API key
    if not settings.openai_api_key:
        missing.append("OpenAI API key (OPENAI_API_KEY environment variable)")

    return missing


def get_cors_origins() -> list[str]:
    """Split the configured CORS origins into a list."""
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]


def initialize_logging() -> None:
    """Initialize logging configuration based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    # Set specific loggers
    logging.getLogger('uvicorn').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    if settings.debug:
        logging.getLogger('langchain').setLevel(logging.DEBUG)
        logging.getLogger('sqlalchemy.engine').setLevel(logging.INFO)
    else:
        logging.getLogger('langchain').setLevel(logging.INFO)


def create_llm_instance():
    """
    Create and configure an OpenAI LLM instance for code analysis.

    Returns:
        Configured ChatOpenAI instance

    Raises:
        ValueError: If OpenAI API key is not configured
    """
    from langchain_openai import ChatOpenAI

    settings = get_settings()

    if not settings.openai_api_key:
        raise ValueError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")

    os.environ.setdefault("OPENAI_API_KEY", settings.openai_api_key)

    llm = ChatOpenAI(
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
        timeout=settings.openai_timeout,
        max_retries=settings.openai_max_retries,
        api_key=settings.openai_api_key
    )

    return llm


def get_system_info() -> Dict[str, Any]:
    """
    Get system configuration information for debugging.

    Returns:
        Dictionary with system configuration details
    """
    settings = get_settings()
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "openai_model": settings.openai_model,
        "openai_temperature": settings.openai_temperature,
        "debug": settings.debug,
        "log_level": settings.log_level,
        "database_backend": settings.database_url.split(":", 1)[0],
        "analysis_max_code_chars": settings.analysis_max_code_chars,
        "has_openai_key": bool(settings.openai_api_key)
    }
