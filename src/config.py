"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
Provides centralized configuration management with type safety and validation.

Features:
- Environment variable loading and validation
- Secure credential management
- GitHub Actions runner integration (event name and payload path)
- Mergeability polling budget
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import os
from logger import LogManager


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    Manages and validates all application settings including:
    - Application identification
    - GitHub authentication and API location
    - Inbound webhook event
    - Logging settings
    - Mergeability resolution budget

    Attributes:
        app_name (str): Name of the application
        dev (bool): Debug mode flag
        log_dir (str): Directory for log files
        log_level (int): Logging level (default: info)
        github_token (SecretStr): GitHub API authentication token
        github_api_url (str): GitHub REST API base URL
        github_event_name (str): Name of the webhook event that triggered the run
        github_event_path (str): Path to the webhook event JSON payload
        github_actions (bool): Whether the process runs inside GitHub Actions
        resolver_min_wait (float): First wait between mergeability fetches, seconds
        resolver_max_wait (float): Longest wait between mergeability fetches, seconds
        resolver_max_delay (float): Total time allowed for mergeability to settle, seconds
        resolver_max_attempts (int): Maximum number of mergeability fetches
        dry_run (bool): Log merge/update decisions without executing them
    """

    # Application settings
    app_name: str = Field(default="Autosquash", description="Application name")
    dev: bool = Field(default=False, description="Debug mode")
    log_dir: str = Field(default="logs", description="Logging directory")
    log_level: int = Field(default=20, description="Logging level, default info")

    # GitHub configuration
    github_token: SecretStr = Field(..., description="GitHub token")
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )

    # Set by the GitHub Actions runner
    github_event_name: str = Field(default="", description="Webhook event name")
    github_event_path: str = Field(default="", description="Webhook payload path")
    github_actions: bool = Field(default=False, description="Running in Actions")

    # Mergeability resolution
    resolver_min_wait: float = Field(default=0.25, ge=0, description="First wait")
    resolver_max_wait: float = Field(default=8.0, ge=0, description="Longest wait")
    resolver_max_delay: float = Field(default=120.0, gt=0, description="Time budget")
    resolver_max_attempts: int = Field(default=30, ge=1, description="Fetch budget")

    dry_run: bool = Field(default=False, description="Do not merge or update")

    @field_validator("log_dir")
    def ensure_absolute_path(cls, v: str) -> str:
        """
        Ensure log directory path is absolute.

        Converts relative paths to absolute paths based on current working directory.
        An empty value disables file logging and is kept as is.

        Args:
            v (str): Directory path to validate

        Returns:
            str: Absolute path to log directory
        """
        if v and not os.path.isabs(v):
            return os.path.abspath(v)
        return v

    @field_validator("github_api_url")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )


# Create global settings instance
settings = Settings()

# Initialize logging configuration
log_manager = LogManager(
    app_name=settings.app_name.lower(),
    log_dir=settings.log_dir,
    development=settings.dev,
    level=settings.log_level,
    workflow_commands=settings.github_actions,
)
logger = log_manager.logger
