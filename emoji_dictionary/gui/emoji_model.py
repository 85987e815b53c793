# emoji_dictionary/gui/emoji_model.py

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from PySide6.QtGui import QFont

from emoji_dictionary.core.emoji import Emoji, share_text
from .resources import category_color

SYMBOL_COLUMN, DESCRIPTION_COLUMN, CATEGORY_COLUMN, CREATED_COLUMN = range(4)


class EmojiTableModel(QAbstractTableModel):
    """
    Table model for the rendered (filtered) list of emojis.

    The model never owns the collection. It holds the latest filtered view
    handed to it by the controller, so row N here is filtered index N.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._emojis: list[Emoji] = []
        self._headers = ["", "Description", "Category", "Created"]
        self._symbol_font = QFont()
        self._symbol_font.setPointSize(22)

    # --- Required Methods for QAbstractTableModel ---

    def rowCount(self, parent=QModelIndex()):
        # Flat table: only the invisible root has children.
        if parent.isValid():
            return 0
        return len(self._emojis)

    def columnCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid() or not 0 <= index.row() < len(self._emojis):
            return None

        emoji = self._emojis[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == SYMBOL_COLUMN:
                return emoji.symbol
            if col == DESCRIPTION_COLUMN:
                return f"{emoji.description}  ⭐" if emoji.is_favorite else emoji.description
            if col == CATEGORY_COLUMN:
                return emoji.category.value
            if col == CREATED_COLUMN:
                return emoji.created_at.astimezone().strftime("%b %d, %Y")

        if role == Qt.FontRole and col == SYMBOL_COLUMN:
            return self._symbol_font

        if role == Qt.TextAlignmentRole and col == SYMBOL_COLUMN:
            return int(Qt.AlignCenter)

        if role == Qt.BackgroundRole and col == CATEGORY_COLUMN:
            return category_color(emoji.category)

        if role == Qt.ToolTipRole:
            return share_text(emoji)

        if role == Qt.UserRole:
            return str(emoji.id)

        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            return self._headers[section]
        return None

    # --- Custom Public Methods ---

    def set_emojis(self, emojis):
        """Replaces the rendered rows with a new filtered view."""
        self.beginResetModel()
        self._emojis = list(emojis)
        self.endResetModel()

    def emoji_at(self, row: int) -> Emoji | None:
        if 0 <= row < len(self._emojis):
            return self._emojis[row]
        return None
