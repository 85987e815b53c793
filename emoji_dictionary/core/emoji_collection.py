# emoji_dictionary/core/emoji_collection.py

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Tuple

from .emoji import (
    Category, Emoji, ValidationError, decode_emojis, duplicate_of, encode_emojis,
    parse_category, sample_records, validate_description, validate_fields,
)
from .storage import STORE_KEY, PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterState:
    """The search text and category currently narrowing down the list."""
    search_text: str = ""
    category: Category | None = None

    def __post_init__(self):
        # Accept category names too, so "Food" filters exactly like Category.FOOD.
        # Unknown names raise ValidationError instead of silently matching nothing.
        if self.search_text is None:
            object.__setattr__(self, "search_text", "")
        if self.category is not None:
            object.__setattr__(self, "category", parse_category(self.category))

    @property
    def is_active(self) -> bool:
        return bool(self.search_text) or self.category is not None

    def matches(self, emoji: Emoji) -> bool:
        if self.category is not None and emoji.category != self.category:
            return False
        if self.search_text:
            needle = self.search_text.casefold()
            return (needle in emoji.description.casefold()
                    or needle in emoji.symbol.casefold()
                    or needle in emoji.category.value.casefold())
        return True


def _as_uuid(value) -> uuid.UUID | None:
    """Accepts a UUID or its string form; anything unparsable yields None."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class EmojiCollection:
    """
    Owns the ordered list of emoji records and keeps it in sync with a key-value store.

    Every mutating method writes the new state to the store before it returns.
    Write failures never interrupt the caller: they are logged, remembered in
    `last_persistence_error`, and the in-memory list stays authoritative.

    Operations keyed by id quietly do nothing when the id is unknown.

    The class performs no locking; a multi-threaded host must serialize access.
    """

    def __init__(self, store, key: str = STORE_KEY):
        """
        Args:
            store: Any object with `read(key) -> str | None` and `write(key, value)`.
            key: The store entry holding the encoded collection.
        """
        self.store = store
        self.key = key
        self._emojis: List[Emoji] = []
        self.filter = FilterState()
        self.last_persistence_error: Exception | None = None

    # --- Read access ---

    @property
    def emojis(self) -> Tuple[Emoji, ...]:
        """The full, unfiltered collection in its manual order."""
        return tuple(self._emojis)

    def __len__(self) -> int:
        return len(self._emojis)

    def __iter__(self) -> Iterator[Emoji]:
        return iter(self.emojis)

    def get(self, emoji_id) -> Emoji | None:
        index = self._index_of(emoji_id)
        return self._emojis[index] if index is not None else None

    def _index_of(self, emoji_id) -> int | None:
        wanted = _as_uuid(emoji_id)
        if wanted is None:
            return None
        for index, emoji in enumerate(self._emojis):
            if emoji.id == wanted:
                return index
        return None

    # --- Filtering ---

    @property
    def is_filtering(self) -> bool:
        return self.filter.is_active

    def set_search_text(self, text: str):
        self.filter = replace(self.filter, search_text=text or "")

    def set_category(self, category):
        """Selects a category to filter by; None (or an empty string) shows all."""
        self.filter = replace(self.filter, category=parse_category(category) if category else None)

    def set_filter(self, search_text: str = "", category=None):
        """Replaces both parts of the filter at once."""
        self.filter = FilterState(search_text or "", category or None)

    def clear_filter(self):
        self.filter = FilterState()

    def filtered_view(self, filter_state: FilterState | None = None) -> Tuple[Emoji, ...]:
        """
        Returns the records passing the filter, in collection order.

        Args:
            filter_state: The filter to apply. Defaults to this collection's own
                `filter`.
        """
        active = filter_state if filter_state is not None else self.filter
        if not active.is_active:
            return tuple(self._emojis)
        return tuple(e for e in self._emojis if active.matches(e))

    # --- Persistence ---

    def load(self) -> bool:
        """
        Loads the collection from the store.

        When nothing is stored yet, or the stored entry is unreadable, the sample
        records are used instead and written back immediately.

        Returns:
            True if the stored collection was used, False if the samples were.
        """
        # --- Step 1: Read the raw entry. A broken store is treated like an empty one. ---
        try:
            payload = self.store.read(self.key)
        except (PersistenceError, OSError) as e:
            logger.warning(f"Could not read the stored collection: {e}")
            self.last_persistence_error = e
            payload = None

        # --- Step 2: Decode it. Any malformed record discards the whole entry. ---
        if payload is not None:
            try:
                self._emojis = decode_emojis(payload)
                logger.info(f"Loaded {len(self._emojis)} emojis from the store.")
                return True
            except ValueError as e:
                logger.warning(f"Stored collection could not be decoded, starting from sample data: {e}")

        # --- Step 3: First run (or unusable data). Seed and persist the samples. ---
        logger.info("No stored collection found. Seeding with sample data.")
        self._emojis = sample_records()
        self._save()
        return False

    def _save(self) -> bool:
        """Writes the current collection to the store. Returns False if the write failed."""
        try:
            self.store.write(self.key, encode_emojis(self._emojis))
        except (PersistenceError, OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not persist the collection, keeping in-memory state: {e}")
            self.last_persistence_error = e
            return False
        self.last_persistence_error = None
        return True

    # --- Mutations ---

    def _prepared(self, emoji: Emoji, pending_ids=()) -> Emoji:
        """Validates a record about to be appended and returns its normalized form."""
        symbol, description, category = validate_fields(emoji.symbol, emoji.description, emoji.category)
        if self._index_of(emoji.id) is not None or emoji.id in pending_ids:
            raise ValidationError(f"An emoji with id {emoji.id} is already in the collection.")
        # Only build a new record when trimming or parsing actually changed something.
        if (symbol, description, category) != (emoji.symbol, emoji.description, emoji.category):
            emoji = emoji.with_changes(symbol=symbol, description=description, category=category)
        return emoji

    def add(self, emoji: Emoji) -> Emoji:
        """
        Appends a record to the end of the collection.

        Raises:
            ValidationError: if the record's fields are invalid or its id is
                already in the collection.
        """
        emoji = self._prepared(emoji)
        self._emojis.append(emoji)
        logger.info(f"Added {emoji.symbol} '{emoji.description}'.")
        self._save()
        return emoji

    def add_all(self, emojis: Iterable[Emoji]) -> List[Emoji]:
        """
        Appends several records in order and saves once at the end.

        Every record is validated before any is appended, so a bad record
        leaves the collection unchanged.

        Raises:
            ValidationError: as for `add`, for the first offending record.
        """
        prepared: List[Emoji] = []
        for emoji in emojis:
            prepared.append(self._prepared(emoji, {e.id for e in prepared}))
        if not prepared:
            return []

        self._emojis.extend(prepared)
        logger.info(f"Added {len(prepared)} emojis in one batch.")
        self._save()
        return prepared

    def remove_by_id(self, emoji_id) -> bool:
        """Removes the record with this id. Returns False if there was none."""
        index = self._index_of(emoji_id)
        if index is None:
            logger.debug(f"remove_by_id: no emoji with id {emoji_id}.")
            return False
        removed = self._emojis.pop(index)
        logger.info(f"Removed {removed.symbol} '{removed.description}'.")
        self._save()
        return True

    def remove_at(self, filtered_indices: Iterable[int], filter_state: FilterState | None = None) -> int:
        """
        Removes records by their position in the *filtered* view.

        The indices are resolved against a snapshot of the filtered view taken
        with `filter_state` (or the collection's own filter), and the matching
        records are then removed from the full collection by id.

        Returns:
            The number of records removed.

        Raises:
            IndexError: if any index is outside the filtered view. Nothing is
                removed in that case.
        """
        # Snapshot the view first; the indices only make sense against it.
        view = self.filtered_view(filter_state)
        positions = set(filtered_indices)
        out_of_range = sorted(i for i in positions if not 0 <= i < len(view))
        # Validate every index before touching anything.
        if out_of_range:
            raise IndexError(f"Filtered indices {out_of_range} are out of range for a view of {len(view)} items.")
        if not positions:
            return 0

        # Remove by id from the full list. Filtered positions are never raw positions.
        doomed = {view[i].id for i in positions}
        self._emojis = [e for e in self._emojis if e.id not in doomed]
        logger.info(f"Removed {len(doomed)} emoji(s) selected in the filtered view.")
        self._save()
        return len(doomed)

    def move(self, from_indices: Iterable[int], to_index: int) -> bool:
        """
        Reorders the full collection.

        The records at `from_indices` are lifted out (keeping their relative
        order) and reinserted so they start where `to_index` pointed before
        they were removed. `to_index` may equal the collection length to move
        records to the end.

        Reordering only makes sense on the unfiltered list, so while a filter is
        active the call is ignored and returns False.

        Raises:
            IndexError: if a source index or the destination is out of range.
        """
        if self.is_filtering:
            logger.warning("Ignoring a reorder request while a filter is active.")
            return False

        count = len(self._emojis)
        sources = sorted(set(from_indices))
        out_of_range = [i for i in sources if not 0 <= i < count]
        if out_of_range:
            raise IndexError(f"Source indices {out_of_range} are out of range for {count} items.")
        if not 0 <= to_index <= count:
            raise IndexError(f"Destination index {to_index} is out of range for {count} items.")
        if not sources:
            return False

        # Lift the sources out, then shift the destination left by one for each
        # source that sat in front of it.
        source_set = set(sources)
        moving = [self._emojis[i] for i in sources]
        remaining = [e for i, e in enumerate(self._emojis) if i not in source_set]
        insert_at = to_index - sum(1 for i in sources if i < to_index)
        self._emojis = remaining[:insert_at] + moving + remaining[insert_at:]

        logger.info(f"Moved {len(moving)} emoji(s) to position {insert_at}.")
        self._save()
        return True

    def toggle_favorite(self, emoji_id) -> bool:
        """Flips the favorite flag of a record. Returns False if the id is unknown."""
        index = self._index_of(emoji_id)
        if index is None:
            return False
        current = self._emojis[index]
        self._emojis[index] = current.with_changes(is_favorite=not current.is_favorite)
        logger.info(f"{current.symbol} favorite set to {not current.is_favorite}.")
        self._save()
        return True

    def update_description(self, emoji_id, new_text: str) -> bool:
        """
        Replaces the description of a record with the trimmed `new_text`.

        Raises:
            ValidationError: if the trimmed text is empty.
        """
        description = validate_description(new_text)
        index = self._index_of(emoji_id)
        if index is None:
            return False
        current = self._emojis[index]
        self._emojis[index] = current.with_changes(description=description)
        logger.info(f"Updated the description of {current.symbol}.")
        self._save()
        return True

    def duplicate(self, emoji_id) -> Emoji | None:
        """
        Appends a copy of a record with a new id, the current time and a
        " (Copy)" suffix on its description. Returns the copy, or None if the
        id is unknown.
        """
        source = self.get(emoji_id)
        if source is None:
            return None
        copy = duplicate_of(source)
        self._emojis.append(copy)
        logger.info(f"Duplicated {source.symbol} '{source.description}'.")
        self._save()
        return copy

    def reset_to_sample(self):
        """Throws away the current collection and starts over with the sample records."""
        self._emojis = sample_records()
        logger.warning("Collection reset to sample data.")
        self._save()
