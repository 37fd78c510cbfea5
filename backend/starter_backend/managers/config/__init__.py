from .config_manager import ConfigManager, config_manager
from .config_models import AppSettings

__all__ = ["AppSettings", "ConfigManager", "config_manager"]
