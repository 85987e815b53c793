# emoji_dictionary/core/bulk_importer.py

import csv
import itertools
import logging
from pathlib import Path
from typing import Dict, List

from .emoji import Emoji, ValidationError, new_record, validate_fields
from .emoji_collection import EmojiCollection

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('emoji', 'description', 'category')

_TRUE_WORDS = {'true', 'yes', 'y', '1'}
_FALSE_WORDS = {'false', 'no', 'n', '0', ''}


def _parse_favorite(value: str | None) -> bool:
    word = (value or '').strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValidationError(f"Cannot read favorite flag {value!r}; use true/false.")


class BulkImporter:
    """
    Adds many emojis to a collection at once from a CSV file.

    The file needs the columns `emoji`, `description` and `category`; an optional
    `favorite` column marks favorites. Each row is validated on its own and the
    outcome is collected in `report`. Accepted rows are staged and appended with
    a single `add_all`, so the store is written once per import rather than once
    per row.
    """

    def __init__(self, collection: EmojiCollection):
        self.collection = collection
        self._pending: List[Emoji] = []
        self.report = {
            "added": [],
            "duplicates": [],
            "errors": []
        }

    def process_csv(self, csv_path: Path):
        """Reads every row of the file and adds the valid, new ones to the collection."""
        self._pending = []
        try:
            with open(csv_path, 'r', encoding='utf-8-sig', newline='') as f:
                reader = csv.DictReader(f)

                # --- Step 1: Check the header before reading any rows. ---
                missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
                if missing:
                    self.report["errors"].append(f"Missing required columns: {', '.join(missing)}.")
                    return

                # --- Step 2: Validate and stage each row. ---
                for i, row in enumerate(reader):
                    # Row numbers as shown in a spreadsheet: the header is row 1.
                    self._process_row(row, i + 2)
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            logger.error(f"Failed during bulk import process: {e}", exc_info=True)
            self.report["errors"].append(f"A critical error occurred during import: {e}")
            # A file that breaks halfway is not imported at all.
            self._pending = []
            return

        # --- Step 3: Commit the staged rows in one save. ---
        if self._pending:
            added = self.collection.add_all(self._pending)
            self.report["added"].extend(f"{e.symbol} '{e.description}' ({e.category.value})" for e in added)
            logger.info(f"Bulk import added {len(added)} emojis from '{csv_path}'.")
        self._pending = []

    def _process_row(self, row: Dict[str, str], row_num: int):
        try:
            symbol, description, category = validate_fields(row.get('emoji'), row.get('description'),
                                                            row.get('category'))
            is_favorite = _parse_favorite(row.get('favorite'))
        except ValidationError as e:
            self.report["errors"].append(f"Row {row_num}: {e}")
            return

        # Duplicates are checked against the collection and against earlier rows of this file.
        for existing in itertools.chain(self.collection.emojis, self._pending):
            if existing.symbol == symbol and existing.description == description:
                self.report["duplicates"].append(f"Row {row_num}: {symbol} '{description}' already exists.")
                return

        self._pending.append(new_record(symbol, description, category, is_favorite))
