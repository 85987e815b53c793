# emoji_dictionary/gui/action_controller.py

import logging

from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtGui import QGuiApplication

from emoji_dictionary.core.emoji import ValidationError, new_record, share_text, validate_fields
from emoji_dictionary.core.emoji_collection import EmojiCollection
from emoji_dictionary.core.storage import DEFAULT_STORE_PATH, JsonFileStore

logger = logging.getLogger(__name__)


class ActionController(QObject):
    """
    The non-visual brain of the GUI.

    It owns the EmojiCollection and the active filter, turns user gestures into
    collection operations, and tells the widgets what to render. Row numbers
    coming from the view are positions in the filtered view; the controller
    passes them to the collection as such and never treats them as positions
    in the full list.
    """
    view_changed = Signal(list)
    filter_changed = Signal(bool)
    status_updated = Signal(str, bool)
    show_message_box = Signal(str, str, str)

    def __init__(self, collection: EmojiCollection | None = None, parent=None):
        super().__init__(parent)
        self.collection = collection if collection is not None else EmojiCollection(JsonFileStore(DEFAULT_STORE_PATH))

    # --- State helpers ---

    def is_filtering(self) -> bool:
        return self.collection.is_filtering

    def can_reorder(self) -> bool:
        """Reordering is only offered on the unfiltered list."""
        return not self.collection.is_filtering

    def current_view(self) -> list:
        return list(self.collection.filtered_view())

    def _refresh(self):
        self.view_changed.emit(self.current_view())
        self.filter_changed.emit(self.collection.is_filtering)

    def _report(self, message: str):
        """Publishes the outcome of a mutation, flagging a failed save."""
        error = self.collection.last_persistence_error
        if error is not None:
            self.status_updated.emit(f"{message} (not saved: {error})", True)
        else:
            self.status_updated.emit(message, False)
        self._refresh()

    # --- Startup ---

    @Slot()
    def load(self):
        """Loads the collection once at startup and renders it."""
        from_store = self.collection.load()
        if from_store:
            self._report(f"Loaded {len(self.collection)} emojis.")
        else:
            self._report(f"Welcome! Started with {len(self.collection)} sample emojis.")

    # --- Filtering ---

    @Slot(str)
    def set_search_text(self, text: str):
        self.collection.set_search_text(text)
        self._refresh()

    @Slot(str)
    def set_category(self, category: str):
        """Selects a category by name; an empty name shows every category."""
        self.collection.set_category(category or None)
        self._refresh()

    @Slot()
    def clear_filters(self):
        self.collection.clear_filter()
        self._refresh()

    # --- Mutations ---

    def add_emoji(self, symbol: str, description: str, category: str, is_favorite: bool = False) -> bool:
        """Validates the form values and appends a new emoji. Returns False if they were rejected."""
        try:
            symbol, description, parsed_category = validate_fields(symbol, description, category)
        except ValidationError as e:
            self.show_message_box.emit("critical", "Invalid Emoji", str(e))
            return False
        added = self.collection.add(new_record(symbol, description, parsed_category, is_favorite))
        self._report(f"Added {added.symbol} {added.description}.")
        return True

    @Slot(list)
    def delete_rows(self, rows: list):
        """Deletes the emojis shown at these rows of the (possibly filtered) list."""
        if not rows:
            return
        try:
            removed = self.collection.remove_at(rows)
        except IndexError as e:
            logger.error(f"Delete request referenced rows outside the view: {e}")
            self.show_message_box.emit("critical", "Delete Failed", str(e))
            return
        self._report(f"Deleted {removed} emoji(s).")

    @Slot(str)
    def delete_emoji(self, emoji_id: str):
        if self.collection.remove_by_id(emoji_id):
            self._report("Emoji deleted.")

    @Slot(str)
    def toggle_favorite(self, emoji_id: str):
        if self.collection.toggle_favorite(emoji_id):
            emoji = self.collection.get(emoji_id)
            state = "added to" if emoji.is_favorite else "removed from"
            self._report(f"{emoji.symbol} {state} favorites.")

    def update_description(self, emoji_id: str, text: str) -> bool:
        try:
            changed = self.collection.update_description(emoji_id, text)
        except ValidationError as e:
            self.show_message_box.emit("critical", "Invalid Description", str(e))
            return False
        if changed:
            self._report("Description updated.")
        return changed

    @Slot(str)
    def duplicate_emoji(self, emoji_id: str):
        copy = self.collection.duplicate(emoji_id)
        if copy is not None:
            self._report(f"Created {copy.symbol} {copy.description}.")

    def move_rows(self, rows: list, destination: int) -> bool:
        """Reorders the list. Refused while a search or category filter is active."""
        if not self.can_reorder():
            self.status_updated.emit("Clear the search and category filters to reorder emojis.", True)
            return False
        try:
            moved = self.collection.move(rows, destination)
        except IndexError as e:
            logger.error(f"Move request out of range: {e}")
            return False
        if moved:
            self._report("Order updated.")
        return moved

    @Slot(int)
    def move_up(self, row: int):
        if row > 0:
            self.move_rows([row], row - 1)

    @Slot(int)
    def move_down(self, row: int):
        if 0 <= row < len(self.collection) - 1:
            self.move_rows([row], row + 2)

    @Slot()
    def reset_to_sample(self):
        self.collection.reset_to_sample()
        self._report("Collection reset to the sample emojis.")

    # --- Sharing ---

    @Slot(str)
    def copy_to_clipboard(self, emoji_id: str) -> str | None:
        """Puts the share text of an emoji on the system clipboard and returns it."""
        emoji = self.collection.get(emoji_id)
        if emoji is None:
            return None
        text = share_text(emoji)
        clipboard = QGuiApplication.clipboard()
        if clipboard is not None:
            clipboard.setText(text)
        self.status_updated.emit(f"Copied: {text}", False)
        return text
