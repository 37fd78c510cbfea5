"""
Configuration management: loads .env once and caches application settings.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from starter_backend.managers.config.config_models import AppSettings

logger = logging.getLogger(__name__)

# backend/starter_backend/managers/config/config_manager.py -> project root is 4 levels up
DEFAULT_PROJECT_ROOT = Path(__file__).resolve().parents[4]


class ConfigManager:
    """Loads environment configuration and hands out cached AppSettings."""

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = project_root or DEFAULT_PROJECT_ROOT
        self._app_settings: Optional[AppSettings] = None

        # Load environment variables from .env file; real env vars win
        dotenv_path = self._project_root / ".env"
        load_dotenv(dotenv_path=dotenv_path)
        logger.info(f"Loading .env from {dotenv_path.resolve()}")

    @property
    def project_root(self) -> Path:
        return self._project_root

    @property
    def app_settings(self) -> AppSettings:
        """Get application settings (cached)."""
        if self._app_settings is None:
            self._app_settings = AppSettings()
            logger.info("Application settings loaded successfully")
            if not self._app_settings.secret_key and not self._app_settings.is_development:
                logger.warning("SECRET_KEY is empty; issued tokens will not be secure")
        return self._app_settings

    def reload(self) -> AppSettings:
        """Drop the cached settings and read the environment again."""
        self._app_settings = None
        return self.app_settings

    def resolve_path(self, path_value: str) -> Path:
        """Resolve a configured path relative to the project root."""
        path = Path(path_value)
        if not path.is_absolute():
            path = self._project_root / path
        return path


# Global configuration manager instance
config_manager = ConfigManager()
