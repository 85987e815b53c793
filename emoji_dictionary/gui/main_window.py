# emoji_dictionary/gui/main_window.py

import sys
from pathlib import Path

from PySide6.QtCore import Slot, Qt, QPoint
from PySide6.QtGui import QAction, QActionGroup, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QMessageBox, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QTableView, QHeaderView, QAbstractItemView, QStackedWidget, QLabel, QMenu
)

from emoji_dictionary.core.emoji_collection import EmojiCollection
from emoji_dictionary.core.storage import DEFAULT_STORE_PATH, JsonFileStore
from emoji_dictionary.utils.logger import setup_logging
from .action_controller import ActionController
from .emoji_dialogs import AddEmojiDialog, EditDescriptionDialog
from .emoji_model import EmojiTableModel, DESCRIPTION_COLUMN
from .resources import (
    AVAILABLE_THEMES, load_stylesheet, validate_assets, get_current_theme, set_current_theme
)
from .widgets import FilterBar, StatusWidget

TABLE_PAGE, EMPTY_PAGE = 0, 1


class MainWindow(QMainWindow):
    """
    The single screen of the app: filter bar, emoji table, action buttons and a
    status line. Every action is delegated to the ActionController; the window
    only renders what the controller publishes.
    """

    def __init__(self, controller: ActionController | None = None):
        super().__init__()
        self.setWindowTitle("📚 Emoji Dictionary")
        self.setGeometry(100, 100, 820, 640)

        self.action_controller = controller if controller is not None else ActionController(parent=self)

        self._create_menus()

        central = QWidget()
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(12, 12, 12, 6)

        self.filter_bar = FilterBar()

        # --- The list and its empty state ---
        self.emoji_model = EmojiTableModel(self)
        self.table_view = QTableView()
        self.table_view.setModel(self.emoji_model)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.table_view.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table_view.setAlternatingRowColors(True)
        self.table_view.setContextMenuPolicy(Qt.CustomContextMenu)
        self.table_view.verticalHeader().setVisible(False)
        self.table_view.verticalHeader().setDefaultSectionSize(48)
        header = self.table_view.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeToContents)
        header.setSectionResizeMode(DESCRIPTION_COLUMN, QHeaderView.Stretch)

        self.empty_page = QWidget()
        empty_layout = QVBoxLayout(self.empty_page)
        self.empty_label = QLabel("🔍\n\nNo emojis found\n\nTry another search term or add a new emoji.")
        self.empty_label.setObjectName("EmptyStateLabel")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setWordWrap(True)
        self.clear_filters_button = QPushButton("Clear filters")
        empty_layout.addStretch()
        empty_layout.addWidget(self.empty_label)
        empty_layout.addWidget(self.clear_filters_button, alignment=Qt.AlignCenter)
        empty_layout.addStretch()

        self.list_stack = QStackedWidget()
        self.list_stack.addWidget(self.table_view)
        self.list_stack.addWidget(self.empty_page)

        # --- Action buttons ---
        button_layout = QHBoxLayout()
        self.add_button = QPushButton("➕ Add")
        self.edit_button = QPushButton("✏️ Edit")
        self.duplicate_button = QPushButton("📄 Duplicate")
        self.favorite_button = QPushButton("⭐ Favorite")
        self.copy_button = QPushButton("📋 Copy")
        self.delete_button = QPushButton("🗑️ Delete")
        self.move_up_button = QPushButton("▲")
        self.move_down_button = QPushButton("▼")
        self.move_up_button.setToolTip("Move up (only without filters)")
        self.move_down_button.setToolTip("Move down (only without filters)")
        for button in (self.add_button, self.edit_button, self.duplicate_button, self.favorite_button,
                       self.copy_button, self.delete_button):
            button_layout.addWidget(button)
        button_layout.addStretch()
        button_layout.addWidget(self.move_up_button)
        button_layout.addWidget(self.move_down_button)

        self.status_widget = StatusWidget()

        main_layout.addWidget(self.filter_bar)
        main_layout.addWidget(self.list_stack, stretch=1)
        main_layout.addLayout(button_layout)
        main_layout.addWidget(self.status_widget)
        self.setCentralWidget(central)

        # --- Signal Connections ---
        controller = self.action_controller
        controller.view_changed.connect(self._on_view_changed)
        controller.filter_changed.connect(self._on_filter_changed)
        controller.status_updated.connect(self.status_widget.set_status)
        controller.show_message_box.connect(self._show_message_box)

        self.filter_bar.search_changed.connect(controller.set_search_text)
        self.filter_bar.category_changed.connect(controller.set_category)
        self.clear_filters_button.clicked.connect(self.filter_bar.clear)

        self.add_button.clicked.connect(self._on_add_clicked)
        self.edit_button.clicked.connect(self._on_edit_clicked)
        self.duplicate_button.clicked.connect(self._on_duplicate_clicked)
        self.favorite_button.clicked.connect(self._on_favorite_clicked)
        self.copy_button.clicked.connect(self._on_copy_clicked)
        self.delete_button.clicked.connect(self._on_delete_clicked)
        self.move_up_button.clicked.connect(self._on_move_up_clicked)
        self.move_down_button.clicked.connect(self._on_move_down_clicked)

        self.table_view.selectionModel().selectionChanged.connect(self._update_buttons)
        self.table_view.customContextMenuRequested.connect(self._show_context_menu)
        self.table_view.doubleClicked.connect(lambda _index: self._on_edit_clicked())
        QShortcut(QKeySequence.Delete, self.table_view, activated=self._on_delete_clicked)

        controller.load()
        self._update_buttons()

    def _create_menus(self):
        menu_bar = self.menuBar()

        edit_menu = menu_bar.addMenu("&Edit")
        add_action = QAction("New Emoji...", self)
        add_action.setShortcut(QKeySequence.New)
        add_action.triggered.connect(self._on_add_clicked)
        reset_action = QAction("Reset to Sample Data", self)
        reset_action.triggered.connect(self._on_reset_requested)
        edit_menu.addAction(add_action)
        edit_menu.addSeparator()
        edit_menu.addAction(reset_action)

        settings_menu = menu_bar.addMenu("&Settings")
        theme_menu = settings_menu.addMenu("Theme")
        theme_group = QActionGroup(self)
        current_theme = get_current_theme()
        for label, theme_file in AVAILABLE_THEMES.items():
            action = QAction(label, self, checkable=True)
            action.triggered.connect(lambda checked=False, f=theme_file: self._handle_theme_change(f))
            theme_menu.addAction(action)
            theme_group.addAction(action)
            action.setChecked(theme_file == current_theme)

    # --- Rendering ---

    @Slot(list)
    def _on_view_changed(self, emojis: list):
        self.emoji_model.set_emojis(emojis)
        if emojis:
            self.list_stack.setCurrentIndex(TABLE_PAGE)
        else:
            self.list_stack.setCurrentIndex(EMPTY_PAGE)
            self.clear_filters_button.setVisible(self.action_controller.is_filtering())
        self._update_buttons()

    @Slot(bool)
    def _on_filter_changed(self, is_filtering: bool):
        self._update_buttons()

    def _selected_rows(self) -> list:
        selection = self.table_view.selectionModel()
        return sorted(index.row() for index in selection.selectedRows()) if selection else []

    def _selected_emoji(self):
        rows = self._selected_rows()
        return self.emoji_model.emoji_at(rows[0]) if rows else None

    @Slot()
    def _update_buttons(self):
        rows = self._selected_rows()
        single = len(rows) == 1
        for button in (self.edit_button, self.duplicate_button, self.favorite_button, self.copy_button):
            button.setEnabled(single)
        self.delete_button.setEnabled(bool(rows))
        can_reorder = single and self.action_controller.can_reorder()
        self.move_up_button.setEnabled(can_reorder and rows[0] > 0)
        self.move_down_button.setEnabled(can_reorder and rows[0] < self.emoji_model.rowCount() - 1)

    def _select_row(self, row: int):
        if 0 <= row < self.emoji_model.rowCount():
            self.table_view.selectRow(row)

    # --- Actions ---

    @Slot()
    def _on_add_clicked(self):
        dialog = AddEmojiDialog(self)
        if dialog.exec():
            values = dialog.get_values()
            if values and self.action_controller.add_emoji(**values):
                self._select_row(self.emoji_model.rowCount() - 1)

    @Slot()
    def _on_edit_clicked(self):
        emoji = self._selected_emoji()
        if emoji is None:
            return
        dialog = EditDescriptionDialog(emoji.symbol, emoji.description, self)
        if dialog.exec():
            description = dialog.get_description()
            if description is not None:
                self.action_controller.update_description(str(emoji.id), description)

    @Slot()
    def _on_duplicate_clicked(self):
        emoji = self._selected_emoji()
        if emoji is not None:
            self.action_controller.duplicate_emoji(str(emoji.id))

    @Slot()
    def _on_favorite_clicked(self):
        rows = self._selected_rows()
        emoji = self._selected_emoji()
        if emoji is not None:
            self.action_controller.toggle_favorite(str(emoji.id))
            self._select_row(rows[0])

    @Slot()
    def _on_copy_clicked(self):
        emoji = self._selected_emoji()
        if emoji is not None:
            self.action_controller.copy_to_clipboard(str(emoji.id))

    @Slot()
    def _on_delete_clicked(self):
        # Table rows are filtered-view positions, which is exactly what delete_rows expects.
        self.action_controller.delete_rows(self._selected_rows())

    @Slot()
    def _on_move_up_clicked(self):
        rows = self._selected_rows()
        if len(rows) == 1:
            self.action_controller.move_up(rows[0])
            self._select_row(rows[0] - 1)

    @Slot()
    def _on_move_down_clicked(self):
        rows = self._selected_rows()
        if len(rows) == 1:
            self.action_controller.move_down(rows[0])
            self._select_row(rows[0] + 1)

    @Slot(QPoint)
    def _show_context_menu(self, pos: QPoint):
        index = self.table_view.indexAt(pos)
        if not index.isValid():
            return
        if index.row() not in self._selected_rows():
            self.table_view.selectRow(index.row())
        emoji = self.emoji_model.emoji_at(index.row())

        menu = QMenu(self)
        menu.addAction("✏️ Edit description", self._on_edit_clicked)
        menu.addAction("📄 Duplicate", self._on_duplicate_clicked)
        menu.addSeparator()
        menu.addAction("📋 Copy", self._on_copy_clicked)
        menu.addSeparator()
        favorite_text = "Remove from favorites" if emoji.is_favorite else "Add to favorites"
        menu.addAction(f"⭐ {favorite_text}", self._on_favorite_clicked)
        menu.addSeparator()
        menu.addAction("🗑️ Delete", self._on_delete_clicked)
        menu.exec(self.table_view.viewport().mapToGlobal(pos))

    @Slot()
    def _on_reset_requested(self):
        reply = QMessageBox.question(self, "Reset to Sample Data",
                                     "This replaces every emoji with the sample set. Continue?",
                                     QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if reply == QMessageBox.Yes:
            self.action_controller.reset_to_sample()

    @Slot(str)
    def _handle_theme_change(self, theme_file: str):
        """Applies the selected theme and saves the choice."""
        if set_current_theme(theme_file):
            QApplication.instance().setStyleSheet(load_stylesheet())
        else:
            self._show_message_box("critical", "Error", "Could not save theme setting.")

    @Slot(str, str, str)
    def _show_message_box(self, msg_type, title, message):
        if msg_type == "critical":
            QMessageBox.critical(self, title, message)
        else:
            QMessageBox.information(self, title, message)


def run_gui(store_path: Path | None = None):
    """Entry point for the desktop application."""
    setup_logging()
    validate_assets()

    app = QApplication(sys.argv)
    app.setStyleSheet(load_stylesheet())

    store = JsonFileStore(store_path if store_path is not None else DEFAULT_STORE_PATH)
    window = MainWindow(ActionController(EmojiCollection(store)))
    window.show()

    sys.exit(app.exec())
