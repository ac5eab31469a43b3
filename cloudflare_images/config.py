"""Configuration management for the Cloudflare Images provider."""

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_IMAGES_DOMAIN = "https://imagedelivery.net"
DEFAULT_API_BASE_URL = "https://api.cloudflare.com"

# Host plugin options use camelCase keys
_OPTION_KEYS = {
    "accessToken": "access_token",
    "accountId": "account_id",
    "imagesDomain": "images_domain",
    "requireSignedURLs": "require_signed_urls",
    "apiBaseUrl": "api_base_url",
    "requestTimeout": "request_timeout",
}


def _normalize_options(options: Mapping[str, Any]) -> dict[str, Any]:
    return {_OPTION_KEYS.get(key, key): value for key, value in options.items()}


class ProviderConfig(BaseSettings):
    """Cloudflare Images provider configuration."""

    access_token: str = Field(default="", description="Cloudflare API token with Images:Edit")
    account_id: str = Field(default="", description="Cloudflare account ID")
    images_domain: str = Field(
        default=DEFAULT_IMAGES_DOMAIN,
        description="Image delivery base URL, optionally including the account hash",
    )
    require_signed_urls: bool = Field(
        default=False, description="Upload images as private (signed URLs only)"
    )
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Cloudflare API base URL")
    request_timeout: float = Field(default=30.0, description="HTTP client timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="CLOUDFLARE_IMAGES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("access_token", "account_id", mode="before")
    @classmethod
    def strip_credentials(cls, v: Any) -> str:
        return str(v or "").strip()

    @field_validator("images_domain", "api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop trailing slashes so derived URLs never contain '//'."""
        return v.strip().rstrip("/")

    @model_validator(mode="after")
    def require_credentials(self) -> "ProviderConfig":
        if not self.access_token:
            raise ValueError("Cloudflare Images access token is required!")
        if not self.account_id:
            raise ValueError("Cloudflare account ID is required!")
        return self

    @property
    def account_hash(self) -> str:
        """Last path segment of the delivery domain (the account hash when present)."""
        return self.images_domain.split("/")[-1]

    @property
    def images_endpoint(self) -> str:
        return f"{self.api_base_url}/client/v4/accounts/{self.account_id}/images/v1"

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ProviderConfig":
        """
        Build configuration from the host's provider options.

        Accepts the host's camelCase keys (accessToken, accountId, imagesDomain,
        requireSignedURLs) as well as the snake_case field names. Only the
        given options are used; environment variables and .env are ignored.
        """
        return HostOptionsConfig(**_normalize_options(options))

    @classmethod
    def from_yaml(cls, config_path: Path) -> "ProviderConfig":
        """Load configuration from YAML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        return cls(**_normalize_options(data if data else {}))

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "ProviderConfig":
        """
        Load configuration from file or environment variables.

        Priority (highest to lowest):
        1. Specified config_path
        2. CLOUDFLARE_IMAGES_CONFIG_PATH environment variable
        3. Environment variables
        4. Default values
        """
        if config_path is None:
            env_config_path = os.getenv("CLOUDFLARE_IMAGES_CONFIG_PATH")
            if env_config_path:
                config_path = Path(env_config_path)

        if config_path is not None:
            logger.debug(f"Loading configuration from: {config_path}")
            return cls.from_yaml(config_path)

        logger.debug("No config file given, using environment variables")
        return cls()

    def safe_dump(self) -> dict[str, Any]:
        """Configuration as a dict, without the access token."""
        return self.model_dump(exclude={"access_token"})


class HostOptionsConfig(ProviderConfig):
    """Configuration built only from the options the host passes in."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (init_settings,)
