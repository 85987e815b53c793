# emoji_dictionary/gui/emoji_dialogs.py

from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLabel, QLineEdit, QPlainTextEdit, QComboBox,
    QDialogButtonBox, QCheckBox
)

from emoji_dictionary.core.emoji import ValidationError, categories, validate_description, validate_fields

DEFAULT_SYMBOL = "😀"


class AddEmojiDialog(QDialog):
    """
    Form for a new emoji. The Save button stays disabled until the form
    holds a symbol and a non-blank description.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("New Emoji")

        self.layout = QVBoxLayout(self)
        form = QFormLayout()

        self.preview_label = QLabel(DEFAULT_SYMBOL)
        preview_font = QFont()
        preview_font.setPointSize(40)
        self.preview_label.setFont(preview_font)

        self.symbol_edit = QLineEdit(DEFAULT_SYMBOL)
        self.symbol_edit.setMaxLength(16)

        self.description_edit = QPlainTextEdit()
        self.description_edit.setPlaceholderText("What does this emoji mean?")
        self.description_edit.setFixedHeight(80)

        self.category_combo = QComboBox()
        self.category_combo.addItems([c.value for c in categories()])

        self.favorite_checkbox = QCheckBox("Mark as favorite")

        self.buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)

        form.addRow("Emoji:", self.symbol_edit)
        form.addRow("Description:", self.description_edit)
        form.addRow("Category:", self.category_combo)
        self.layout.addWidget(self.preview_label)
        self.layout.addLayout(form)
        self.layout.addWidget(self.favorite_checkbox)
        self.layout.addWidget(self.buttons)

        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        self.symbol_edit.textChanged.connect(self._update_state)
        self.description_edit.textChanged.connect(self._update_state)
        self._update_state()

    def is_form_valid(self) -> bool:
        try:
            validate_fields(self.symbol_edit.text(), self.description_edit.toPlainText(),
                            self.category_combo.currentText())
        except ValidationError:
            return False
        return True

    def _update_state(self):
        self.preview_label.setText(self.symbol_edit.text())
        self.buttons.button(QDialogButtonBox.Save).setEnabled(self.is_form_valid())

    def get_values(self) -> dict | None:
        """
        Returns the form contents with the description trimmed, or None when
        the form is not valid.
        """
        try:
            symbol, description, category = validate_fields(
                self.symbol_edit.text(), self.description_edit.toPlainText(), self.category_combo.currentText())
        except ValidationError:
            return None
        return {
            "symbol": symbol,
            "description": description,
            "category": category.value,
            "is_favorite": self.favorite_checkbox.isChecked(),
        }


class EditDescriptionDialog(QDialog):
    """Edits the description of an existing emoji."""

    def __init__(self, symbol: str, description: str, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"Edit Description - {symbol}")

        self.layout = QVBoxLayout(self)
        self.description_edit = QPlainTextEdit(description)
        self.description_edit.setFixedHeight(100)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)

        self.layout.addWidget(QLabel("Emoji description:"))
        self.layout.addWidget(self.description_edit)
        self.layout.addWidget(self.buttons)

        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        self.description_edit.textChanged.connect(self._update_state)
        self._update_state()

    def _update_state(self):
        self.buttons.button(QDialogButtonBox.Save).setEnabled(self.get_description() is not None)

    def get_description(self) -> str | None:
        try:
            return validate_description(self.description_edit.toPlainText())
        except ValidationError:
            return None
