"""
Config Package

User preferences and the locations of the application's state files.
"""

from .paths import get_app_data_dir, get_settings_path
from .settings import SettingsStore

__all__ = [
    "SettingsStore",
    "get_app_data_dir",
    "get_settings_path",
]
