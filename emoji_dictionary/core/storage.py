# emoji_dictionary/core/storage.py

import json
import logging
import shutil
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

# The single entry under which the whole collection is stored.
STORE_KEY = "saved_emojis"

# Where the desktop app and the CLI keep their data unless told otherwise.
DEFAULT_STORE_PATH = Path(__file__).resolve().parents[2] / 'data' / 'emoji_store.json'


# --- Errors ---

class PersistenceError(Exception):
    """Raised when the key-value store cannot be read or written."""


# --- Stores ---
# Both stores share the same two-method surface: read(key) and write(key, value).

class MemoryStore:
    """
    A key-value store that lives only as long as the object does.
    Handy for tests and for embedding the collection manager without touching disk.
    """

    def __init__(self, initial: Dict[str, str] | None = None):
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str):
        self._data[key] = value

    def delete(self, key: str):
        self._data.pop(key, None)


class JsonFileStore:
    """
    A key-value store backed by a single JSON document on disk.

    The document is an object mapping each key to a string value, so several
    entries can share one file the way settings share a preferences database.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def backup_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".bak")

    def _load_document(self) -> Dict[str, str]:
        """Reads the whole document, or an empty one if the file does not exist yet."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read store file '{self.path}': {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Store file '{self.path}' does not contain a JSON object.")
        return data

    def read(self, key: str) -> str | None:
        """Returns the value stored under `key`, or None when there is none."""
        value = self._load_document().get(key)
        if value is not None and not isinstance(value, str):
            raise PersistenceError(f"Entry '{key}' in '{self.path}' is not a string value.")
        return value

    def write(self, key: str, value: str):
        """
        Stores `value` under `key`, keeping a backup of the previous file.
        If anything goes wrong mid-write the backup is put back in place.
        """
        backup_path = None
        try:
            # --- Step 1: Make sure the folder exists and load the current document. ---
            self.path.parent.mkdir(parents=True, exist_ok=True)
            try:
                document = self._load_document()
            except PersistenceError:
                logger.warning(f"Store file '{self.path}' was unreadable. Starting a new document.")
                document = {}

            # --- Step 2: Safety first. Back up the file before touching it. ---
            if self.path.exists():
                backup_path = self.backup_path
                shutil.copy(self.path, backup_path)
                logger.debug(f"Store backup created at: {backup_path}")

            # --- Step 3: Rewrite the whole document with the new entry. ---
            document[key] = value
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            logger.debug(f"Wrote entry '{key}' ({len(value)} chars) to {self.path}")

        # If anything failed, put the backup back so the previous state survives.
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write store file: {e}", exc_info=True)
            if backup_path is not None and backup_path.exists():
                try:
                    shutil.copy(backup_path, self.path)
                    logger.warning("Restored store file from backup after a failed write.")
                except OSError:
                    logger.error(f"Could not restore '{self.path}' from its backup.", exc_info=True)
            raise PersistenceError(f"Could not write store file '{self.path}': {e}") from e
