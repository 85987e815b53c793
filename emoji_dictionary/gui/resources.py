# emoji_dictionary/gui/resources.py

import logging
import sys
import json
from pathlib import Path

from PySide6.QtGui import QColor

from emoji_dictionary.core.emoji import Category

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> Path:
    """
    Gets the absolute path to a resource, working both from source and from a
    PyInstaller bundle.
    """
    try:
        # PyInstaller unpacks bundled files into this temporary folder.
        base_path = Path(sys._MEIPASS)
    except AttributeError:
        # Running from source: the project root is three levels up.
        base_path = Path(__file__).resolve().parent.parent.parent

    return base_path / relative_path


ASSETS_PATH = get_resource_path('assets')
THEMES_PATH = ASSETS_PATH / 'styles' / 'themes'
CONFIG_PATH = get_resource_path('config')
SETTINGS_FILE_PATH = CONFIG_PATH / 'settings.json'

DEFAULT_THEME = "dark_theme.qss"
AVAILABLE_THEMES = {"Dark Theme": "dark_theme.qss", "Light Theme": "light_theme.qss"}

# Tint used behind each category label in the list.
CATEGORY_COLORS = {
    Category.SMILEYS: QColor(235, 203, 139),
    Category.NATURE: QColor(163, 190, 140),
    Category.FOOD: QColor(208, 135, 112),
    Category.OBJECTS: QColor(129, 161, 193),
    Category.SYMBOLS: QColor(180, 142, 173),
}
FALLBACK_CATEGORY_COLOR = QColor(128, 128, 128)


def category_color(category: Category, alpha: int = 60) -> QColor:
    """Returns the translucent tint for a category."""
    color = QColor(CATEGORY_COLORS.get(category, FALLBACK_CATEGORY_COLOR))
    color.setAlpha(alpha)
    return color


def validate_assets():
    """Warns at startup when the theme files the app expects are missing."""
    logger.info("Validating GUI assets...")
    missing = [name for name in AVAILABLE_THEMES.values() if not (THEMES_PATH / name).exists()]
    if missing:
        logger.warning(f"Missing theme files in '{THEMES_PATH}': {', '.join(missing)}")
    else:
        logger.info("All theme files found.")


def _read_settings() -> dict:
    try:
        if SETTINGS_FILE_PATH.exists():
            with open(SETTINGS_FILE_PATH, 'r', encoding='utf-8') as f:
                settings = json.load(f)
            if isinstance(settings, dict):
                return settings
    except (IOError, json.JSONDecodeError):
        logger.warning("Could not read settings.json, using default settings.")
    return {}


def get_current_theme() -> str:
    """Reads settings.json to find the user's current theme choice."""
    theme = _read_settings().get("theme", DEFAULT_THEME)
    return theme if theme in AVAILABLE_THEMES.values() else DEFAULT_THEME


def set_current_theme(theme_filename: str) -> bool:
    """Saves the user's new theme choice to settings.json, keeping other settings."""
    try:
        settings = _read_settings()
        settings["theme"] = theme_filename
        CONFIG_PATH.mkdir(parents=True, exist_ok=True)
        with open(SETTINGS_FILE_PATH, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.info(f"User theme changed and saved to: {theme_filename}")
        return True
    except IOError:
        logger.error(f"Could not write to settings file at: {SETTINGS_FILE_PATH}")
        return False


def load_stylesheet() -> str:
    """Loads the stylesheet of the theme currently chosen in settings.json."""
    current_theme_file = get_current_theme()
    theme_path = THEMES_PATH / current_theme_file
    if theme_path.exists():
        logger.info(f"Loading theme: {current_theme_file}")
        return theme_path.read_text(encoding='utf-8')
    logger.error(f"Failed to load theme file: {theme_path}")
    return ""
