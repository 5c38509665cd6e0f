"""
Runtime settings for smartnotes, read from the environment.
"""
from __future__ import annotations
import os
from pathlib import Path

NOTES_KEY = "smart_notes_v1"
THEME_KEY = "smart_notes_theme"
EXPORT_FILENAME = "smart-notes-export.json"

DEFAULT_TITLE = "Untitled"
THEMES = ("light", "dark")
DEFAULT_THEME = "light"

DELETE_PROMPT = "Delete this note?"
CLEAR_ALL_PROMPT = "Clear ALL notes? This cannot be undone."


def db_path() -> Path:
    env_path = os.getenv("SMARTNOTES_DB_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".smartnotes" / "smartnotes.db"


def log_level() -> str:
    return os.getenv("SMARTNOTES_LOG_LEVEL", "WARNING").upper()
