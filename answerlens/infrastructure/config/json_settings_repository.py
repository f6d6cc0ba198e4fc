#answerlens/infrastructure/config/json_settings_repository.py

"""
JSON-based implementation of the settings repository.

Stores settings in a JSON file in the application data directory.
"""
import copy
import os
import json
import threading
from typing import Dict, Any

from answerlens.domain.common.errors import PersistenceWriteFailure
from answerlens.domain.common.result import Result
from answerlens.domain.models.match_settings import MatchSettings
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_settings_repository import ISettingsRepository


DEFAULT_SETTINGS: Dict[str, Any] = {
    "categories": ["exam", "maze"],
    "fuzzy_index_threshold": 0.4,
    "fuzzy_accept_threshold": 0.5,
    "fuzzy_min_match_length": 3,
    "keyword_min_count": 2,
    "keyword_overlap_ratio": 0.5,
    "selection_settle_delay_ms": 200,
    "answer_auto_dismiss_ms": 8000,
    "ocr_language": "chi_sim",
    "tessdata_dir": "",          # empty: <data dir>/tessdata
    "ocr_preprocess": True,
    "ocr_scale_factor": 2.0,
    "knowledge_base_dir": "",    # empty: <data dir>/questions
    "hotkeys": {
        "exam": "<ctrl>+<shift>+s",
        "maze": "<ctrl>+<shift>+m",
    },
    "cancel_hotkey": "<esc>",
    "log_level": "INFO",
}

_FLOAT_KEYS = ("fuzzy_index_threshold", "fuzzy_accept_threshold", "keyword_overlap_ratio", "ocr_scale_factor")
_INT_KEYS = ("fuzzy_min_match_length", "keyword_min_count", "selection_settle_delay_ms", "answer_auto_dismiss_ms")


class JsonSettingsRepository(ISettingsRepository):
    """
    JSON-based implementation of the settings repository.

    Missing keys are filled from DEFAULT_SETTINGS and numeric values are
    coerced to their expected types; the file is rewritten when either
    happens.
    """

    def __init__(self, settings_file: str, logger: ILoggerService):
        """
        Initialize the repository.

        Args:
            settings_file: Path to the JSON settings file
            logger: Logger service
        """
        self.settings_file = settings_file
        self.logger = logger
        self._cache = None
        self._last_modified = 0.0
        self._lock = threading.RLock()

    def load_settings(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        with self._lock:
            try:
                if os.path.exists(self.settings_file):
                    mtime = os.path.getmtime(self.settings_file)
                    if mtime > self._last_modified:
                        force_reload = True
            except OSError as e:
                self.logger.debug(f"Error checking settings file modification time: {e}")

            if self._cache is not None and not force_reload:
                return Result.ok(self._cache)

            settings = None
            if os.path.exists(self.settings_file):
                try:
                    with open(self.settings_file, "r", encoding="utf-8") as f:
                        settings = json.load(f)
                    if not isinstance(settings, dict):
                        raise ValueError("settings root must be a JSON object")
                    self._last_modified = os.path.getmtime(self.settings_file)
                    self.logger.info(f"Settings loaded from {self.settings_file}")
                except (OSError, ValueError) as e:
                    self.logger.error(f"Error loading settings from {self.settings_file}: {e}")
                    settings = None

            if settings is None:
                self.logger.warning("Settings file missing or unreadable. Writing default settings.")
                settings = copy.deepcopy(DEFAULT_SETTINGS)
                save_result = self.save_settings(settings)
                if save_result.is_failure:
                    # Defaults still work without a file on disk
                    self._cache = settings
                    return Result.ok(settings)
            elif self._merge_defaults(settings):
                save_result = self.save_settings(settings)
                if save_result.is_failure:
                    self.logger.warning(f"Could not write normalized settings: {save_result.error}")

            self._cache = settings
            return Result.ok(settings)

    def _merge_defaults(self, settings: Dict[str, Any]) -> bool:
        """Fill missing keys and coerce numeric types. Returns True if anything changed."""
        updated = False
        for key, default_value in DEFAULT_SETTINGS.items():
            if key not in settings:
                settings[key] = copy.deepcopy(default_value)
                updated = True

        for key in _FLOAT_KEYS:
            if not isinstance(settings[key], float):
                try:
                    settings[key] = float(settings[key])
                except (ValueError, TypeError):
                    settings[key] = DEFAULT_SETTINGS[key]
                updated = True

        for key in _INT_KEYS:
            if isinstance(settings[key], bool) or not isinstance(settings[key], int):
                try:
                    settings[key] = int(settings[key])
                except (ValueError, TypeError):
                    settings[key] = DEFAULT_SETTINGS[key]
                updated = True

        return updated

    def save_settings(self, settings: Dict[str, Any]) -> Result[bool]:
        with self._lock:
            try:
                settings_dir = os.path.dirname(self.settings_file)
                if settings_dir:
                    os.makedirs(settings_dir, exist_ok=True)

                temp_path = f"{self.settings_file}.tmp"
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(settings, f, indent=4, ensure_ascii=False)
                os.replace(temp_path, self.settings_file)

                self._cache = settings
                self._last_modified = os.path.getmtime(self.settings_file)
                self.logger.info(f"Settings saved to {self.settings_file}")
                return Result.ok(True)
            except OSError as e:
                error = PersistenceWriteFailure(
                    message=f"Failed to save settings: {e}",
                    details={"path": self.settings_file},
                    inner_error=e
                )
                self.logger.error(str(error))
                return Result.fail(error)

    def get_setting(self, key: str, default: Any = None) -> Any:
        result = self.load_settings()
        if result.is_failure:
            self.logger.error(f"Error loading settings: {result.error}")
            return default
        return result.value.get(key, default)

    def get_match_settings(self) -> MatchSettings:
        return MatchSettings(
            fuzzy_index_threshold=self.get_setting("fuzzy_index_threshold", 0.4),
            fuzzy_accept_threshold=self.get_setting("fuzzy_accept_threshold", 0.5),
            fuzzy_min_match_length=self.get_setting("fuzzy_min_match_length", 3),
            keyword_min_count=self.get_setting("keyword_min_count", 2),
            keyword_overlap_ratio=self.get_setting("keyword_overlap_ratio", 0.5),
        )
