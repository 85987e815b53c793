# emoji_dictionary/gui/widgets.py

from PySide6.QtWidgets import (
    QWidget, QHBoxLayout, QLabel, QLineEdit, QComboBox, QSizePolicy
)
from PySide6.QtCore import Slot, Signal

from emoji_dictionary.core.emoji import categories

ALL_CATEGORIES_LABEL = "All"


class FilterBar(QWidget):
    """
    The search box and category picker above the emoji list.

    Emits `search_changed` with the raw search text and `category_changed` with
    a category name, or an empty string when "All" is selected.
    """
    search_changed = Signal(str)
    category_changed = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search emoji or description...")
        self.search_edit.setClearButtonEnabled(True)

        self.category_combo = QComboBox()
        self.category_combo.addItem(ALL_CATEGORIES_LABEL, "")
        for category in categories():
            self.category_combo.addItem(category.value, category.value)

        layout.addWidget(QLabel("🔎"))
        layout.addWidget(self.search_edit, stretch=1)
        layout.addWidget(QLabel("Category:"))
        layout.addWidget(self.category_combo)

        self.search_edit.textChanged.connect(self.search_changed)
        self.category_combo.currentIndexChanged.connect(self._on_category_index_changed)

    @Slot(int)
    def _on_category_index_changed(self, index: int):
        self.category_changed.emit(self.category_combo.itemData(index) or "")

    def clear(self):
        """Resets both filters, emitting the change signals."""
        self.search_edit.clear()
        self.category_combo.setCurrentIndex(0)


class StatusWidget(QWidget):
    """A status line that wraps long messages and turns red for errors."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 5, 10, 5)

        self.status_label = QLabel("Status:")
        self.status_label.setObjectName("StatusLabel")
        self.status_message = QLabel("Ready.")
        self.status_message.setWordWrap(True)

        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Minimum)

        layout.addWidget(self.status_label)
        layout.addWidget(self.status_message)
        layout.addStretch()

    def set_status(self, message: str, is_error: bool = False):
        self.status_message.setText(message)
        # An empty stylesheet falls back to the active theme's text color.
        self.status_message.setStyleSheet("color: #BF616A;" if is_error else "")
