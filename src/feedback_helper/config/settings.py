"""
Preferences persistence.

This module handles all persistent user preferences with robust error
handling. Any malformed data results in graceful fallback to defaults,
never an exception.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from feedback_helper.core.models import FeedbackStyle

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_INTERVAL_MINUTES = 15.0


class SettingsStore:
    """Lightweight JSON-backed store for persisting preferences."""

    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.data: Dict[str, object] = {}
        self._load_error: Optional[str] = None

        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self._load_error = f"Settings file is corrupted:\n{e}"
                self.data = {}
            except Exception as e:
                self._load_error = f"Failed to read settings:\n{e}"
                self.data = {}
            if self._load_error:
                logger.warning(f"Using default settings: {self._load_error}")

        # Ensure version is set for new files
        if not isinstance(self.data, dict):
            self.data = {}
        if "version" not in self.data:
            self.data["version"] = self.CURRENT_VERSION

    @property
    def load_error(self) -> Optional[str]:
        """Why the settings file could not be read, if it could not."""
        return self._load_error

    def get_last_opened_assignment(self) -> Optional[Path]:
        value = self._get_dict().get("last_opened_assignment")
        return Path(value) if isinstance(value, str) and value else None

    def set_last_opened_assignment(self, path: Optional[Path]) -> None:
        state = self._get_dict()
        if path is None:
            state.pop("last_opened_assignment", None)
        else:
            state["last_opened_assignment"] = str(Path(path).resolve())
        self._save()

    def get_default_style(self) -> FeedbackStyle:
        """Stored default export style, normalised; FeedbackStyle() if malformed."""
        raw = self._get_dict().get("default_style")
        if not isinstance(raw, dict):
            return FeedbackStyle()
        try:
            return FeedbackStyle.normalized(
                heading_prefix=str(raw.get("heading_prefix", "")),
                underline=str(raw.get("underline", "")),
                blank_lines=self._safe_int(raw.get("blank_lines"), 1),
                line_marker=str(raw.get("line_marker", "")),
            )
        except Exception as e:
            logger.warning(f"Ignoring malformed default style: {e}")
            return FeedbackStyle()

    def set_default_style(self, style: FeedbackStyle) -> None:
        self._get_dict()["default_style"] = style.to_dict()
        self._save()

    def get_backup_interval_minutes(self) -> float:
        """Minutes between timed backups; non-positive disables them."""
        value = self._get_dict().get("backup_interval_minutes")
        if value is None or isinstance(value, bool):
            return DEFAULT_BACKUP_INTERVAL_MINUTES
        try:
            return float(value)
        except (ValueError, TypeError):
            return DEFAULT_BACKUP_INTERVAL_MINUTES

    def set_backup_interval_minutes(self, minutes: float) -> None:
        self._get_dict()["backup_interval_minutes"] = float(minutes)
        self._save()

    def _safe_int(self, value: Any, default: int) -> int:
        """Safely convert a value to int, returning default on failure."""
        if value is None:
            return default
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    def _get_dict(self) -> Dict[str, object]:
        if not isinstance(self.data, dict):
            self.data = {}
        return self.data

    def _save(self) -> None:
        """Safely write settings with atomic replacement.

        Uses a temp file to prevent corruption if write is interrupted.
        """
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # Write to temp file first
            temp_path = self.path.with_suffix('.tmp')
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")

            # Atomic rename (overwrites existing)
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to save settings: {e}")
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
