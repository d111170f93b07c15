"""
Path utilities for locating the application's own state files.

FEEDBACK_HELPER_HOME overrides the location (used by tests and portable
installs); otherwise the platform-standard application data directory.
"""
from __future__ import annotations

import os
import platform
from pathlib import Path

APP_DIR_NAME = "Feedback Helper"
HOME_ENV_VAR = "FEEDBACK_HELPER_HOME"


def get_app_data_dir() -> Path:
    """
    Get the application data directory for internal state files.
    
    Windows: %LOCALAPPDATA%/Feedback Helper
    macOS:   ~/Library/Application Support/Feedback Helper
    Other:   ~/.local/share/Feedback Helper
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    
    system = platform.system()
    if system == "Windows":
        # Use AppData/Local, falling back to roaming APPDATA
        base = os.environ.get("LOCALAPPDATA", os.environ.get("APPDATA"))
        return Path(base) / APP_DIR_NAME if base else Path.home() / ".feedback_helper"
    elif system == "Darwin":
        return Path.home() / "Library/Application Support" / APP_DIR_NAME
    else:
        return Path.home() / ".local/share" / APP_DIR_NAME


def get_settings_path() -> Path:
    """Get the path for storing preferences."""
    return get_app_data_dir() / "settings.json"
