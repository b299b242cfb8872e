"""Configuration management from environment variables."""

import os
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

from app.infra.error_handler import ConfigurationError

# Load .env file from project root
# override=False means existing environment variables take precedence
project_root = Path(__file__).parent.parent.parent
env_file = project_root / ".env"

load_dotenv(dotenv_path=env_file, override=False)


def _optional_float(name: str) -> Optional[float]:
    """Read an optional float setting; empty or unset means None."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}")


class Config:
    """Application configuration."""

    def __init__(self):
        # Backend (VPS API) - required, no default
        self.VPS_API_BASE: Optional[str] = os.getenv("VPS_API_BASE") or None
        self.VPS_API_TIMEOUT: Optional[float] = _optional_float("VPS_API_TIMEOUT")

        # HTTP carrier
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8000"))

        # Carrier selection: "http" or "stdio"
        self.MCP_TRANSPORT: str = os.getenv("MCP_TRANSPORT", "http").lower()

        # Application
        self.APP_ENV: str = os.getenv("APP_ENV", "development")
        self.DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def require_backend_url(self) -> str:
        """
        Return the backend base URL or fail.

        Raises:
            ConfigurationError: If VPS_API_BASE is not set
        """
        if not self.VPS_API_BASE:
            raise ConfigurationError("VPS_API_BASE missing. Set it in the environment or .env file.")
        return self.VPS_API_BASE


config = Config()
