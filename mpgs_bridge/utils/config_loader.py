"""
Configuration loader for the 3DS bridge server
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5173",  # Vite dev server
    "http://localhost:3000",
    "https://flow-3-ds.vercel.app",
]

_ENV_OVERRIDES = {
    "PORT": "port",
    "FRONTEND_URL": "frontend_url",
    "ALLOWED_ORIGINS": "allowed_origins",
    "UPSTREAM_TIMEOUT_SECONDS": "upstream_timeout_seconds",
    "DEFAULT_API_VERSION": "default_api_version",
    "INTEGRATIONS_MODE": "integrations_mode",
    "LOG_LEVEL": "log_level",
}


class ServerConfig(BaseModel):
    """Server configuration"""

    port: int = Field(default=3005, ge=1, le=65535)
    frontend_url: Optional[str] = None
    allowed_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    upstream_timeout_seconds: float = Field(default=30.0, gt=0)
    default_api_version: str = "73"
    integrations_mode: str = "real"
    log_level: str = "INFO"

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("integrations_mode")
    @classmethod
    def _check_mode(cls, value: str) -> str:
        mode = value.strip().lower()
        if mode in {"live"}:
            mode = "real"
        if mode in {"test"}:
            mode = "mock"
        if mode not in {"real", "mock"}:
            raise ValueError("integrations_mode must be 'real' or 'mock'")
        return mode

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def cors_origins(self) -> List[str]:
        """Configured origins plus the front-end URL, without duplicates."""
        origins = list(self.allowed_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins

    @property
    def upstream_timeout_ms(self) -> int:
        return int(self.upstream_timeout_seconds * 1000)


def load_server_config(config_path: Optional[Path] = None) -> ServerConfig:
    """
    Load and validate server configuration

    Values come from the YAML file (if present), then environment variables
    (including a local .env file) override them.

    Args:
        config_path: Path to config file. Defaults to config/server_config.yml

    Returns:
        Validated ServerConfig object

    Raises:
        ValidationError: If config doesn't match schema
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "server_config.yml"

    config_data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No server config file at %s, using defaults", config_path)

    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value.strip():
            config_data[field_name] = value

    try:
        config = ServerConfig(**config_data)
        logger.info("Loaded server config (port=%s, mode=%s)", config.port, config.integrations_mode)
        return config
    except ValidationError as e:
        logger.error(f"Server config validation failed: {e}")
        raise
