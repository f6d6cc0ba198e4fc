# answerlens/infrastructure/config/paths.py
"""
Application data locations.

- Windows: %APPDATA%/AnswerLens
- macOS: ~/Library/Application Support/AnswerLens
- Linux: ~/.config/AnswerLens
"""
import os
import platform
from pathlib import Path

APP_NAME = "AnswerLens"
SETTINGS_FILENAME = "settings.json"
REGION_FILE_SUFFIX = "-region-data.json"


def get_app_dir() -> Path:
    """Return the per-user data directory, creating it if needed."""
    override = os.environ.get("ANSWERLENS_HOME")
    if override:
        app_dir = Path(override)
    elif platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        app_dir = Path.home() / ".config" / APP_NAME

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def region_file_name(category: str) -> str:
    """File name of the persisted region for a category, e.g. exam-region-data.json."""
    return f"{category}{REGION_FILE_SUFFIX}"
