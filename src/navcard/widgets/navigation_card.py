"""
Website navigation card widget.

Thin PyQt6 view over OrderedForest: renders the visible rows with level dots
and collapse arrows, and routes add, delete, move, collapse, rename and
page-field edits to the engine. All structural rules live in the engine;
this module only decides which actions to offer.
"""

import logging
from typing import Dict, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import (
    QComboBox, QFrame, QHBoxLayout, QLabel, QLineEdit, QListWidget,
    QListWidgetItem, QPushButton, QVBoxLayout,
)

from navcard.core import NavItem, NavLevel, OrderedForest, visible_items
from navcard.theming import NavColorScheme

logger = logging.getLogger(__name__)

ITEM_ID_ROLE = Qt.ItemDataRole.UserRole
INDENT_ROLE = Qt.ItemDataRole.UserRole + 1

_LEGEND = (
    ("PRI", NavLevel.PRIMARY),
    ("SEC", NavLevel.SECONDARY),
    ("TER", NavLevel.TERTIARY),
)

# Characters per indent step; list rows are plain text
_INDENT_UNIT = "    "


def row_text(item: NavItem, indent: int, has_children: bool) -> str:
    """Text of one list row: indent, collapse arrow, label or placeholder."""
    if has_children:
        arrow = "▸ " if item.collapsed else "▾ "
    else:
        arrow = "  "
    label = item.label or f"{item.level.value} nav..."
    return f"{_INDENT_UNIT * indent}{arrow}{label}"


class NavigationCardWidget(QFrame):
    """
    Card listing a three-level website navigation.

    Usage:
        card = NavigationCardWidget()
        card.structure_changed.connect(save_state)
        layout.addWidget(card)
    """

    structure_changed = pyqtSignal()
    selection_changed = pyqtSignal(object)  # item id or None
    card_color_changed = pyqtSignal(str)

    def __init__(self, forest: Optional[OrderedForest] = None,
                 color_scheme: Optional[NavColorScheme] = None, parent=None):
        super().__init__(parent)
        self.forest = forest if forest is not None else OrderedForest()
        self.color_scheme = color_scheme or NavColorScheme()
        self.card_color = self.color_scheme.default_card_color
        self._dot_icons: Dict[NavLevel, QIcon] = {}
        self._refreshing = False

        self.forest.ensure_initialized()
        self.setup_ui()
        self.setup_connections()
        self.refresh()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def setup_ui(self):
        """Setup the user interface."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        header_layout = QHBoxLayout()
        title = QLabel("WEBSITE NAVIGATION")
        title.setStyleSheet(
            f"color: {self.color_scheme.to_hex(self.color_scheme.card_stroke)}; "
            "font-weight: bold; font-size: 14px; font-family: 'Roboto Mono';"
        )
        header_layout.addWidget(title)
        header_layout.addStretch()

        for text, level in _LEGEND:
            legend = QLabel()
            legend.setPixmap(self._dot_icon(level).pixmap(12, 12))
            header_layout.addWidget(legend)
            legend_text = QLabel(text)
            legend_text.setStyleSheet(
                f"color: {self.color_scheme.to_hex(self.color_scheme.muted_text)}; "
                "font-weight: bold; font-size: 9px;"
            )
            header_layout.addWidget(legend_text)

        self.card_color_combo = QComboBox()
        self.card_color_combo.setToolTip("Card Color")
        for name, hex_color in self.color_scheme.card_color_options():
            self.card_color_combo.addItem(name, hex_color)
        header_layout.addWidget(self.card_color_combo)
        layout.addLayout(header_layout)

        self.item_list = QListWidget()
        self.item_list.setSelectionMode(QListWidget.SelectionMode.SingleSelection)
        layout.addWidget(self.item_list)

        # Row actions for the selected item
        action_layout = QHBoxLayout()
        self.label_edit = QLineEdit()
        action_layout.addWidget(self.label_edit)

        self.toggle_button = QPushButton("▾")
        self.toggle_button.setMaximumWidth(30)
        action_layout.addWidget(self.toggle_button)

        self.up_button = QPushButton("↑")
        self.up_button.setMaximumWidth(30)
        self.up_button.setToolTip("Move up")
        action_layout.addWidget(self.up_button)

        self.down_button = QPushButton("↓")
        self.down_button.setMaximumWidth(30)
        self.down_button.setToolTip("Move down")
        action_layout.addWidget(self.down_button)

        self.delete_button = QPushButton("✕")
        self.delete_button.setMaximumWidth(30)
        self.delete_button.setToolTip("Delete (cascades to children)")
        action_layout.addWidget(self.delete_button)
        layout.addLayout(action_layout)

        # Page fields of the richer card variant
        page_layout = QHBoxLayout()
        self.page_title_edit = QLineEdit()
        self.page_title_edit.setPlaceholderText("page title...")
        page_layout.addWidget(self.page_title_edit)
        self.url_edit = QLineEdit()
        self.url_edit.setPlaceholderText("url...")
        page_layout.addWidget(self.url_edit)
        layout.addLayout(page_layout)

        self.add_primary_button = QPushButton("+ ADD PRIMARY")
        self.add_primary_button.setToolTip("Add primary navigation")
        self.add_secondary_button = QPushButton("+ ADD SECONDARY")
        self.add_secondary_button.setToolTip("Add secondary navigation under selected primary")
        self.add_tertiary_button = QPushButton("+ ADD TERTIARY")
        self.add_tertiary_button.setToolTip("Add tertiary navigation under selected secondary")
        for button in (self.add_primary_button, self.add_secondary_button, self.add_tertiary_button):
            button.setStyleSheet(self._get_add_button_style())
            layout.addWidget(button)

    def setup_connections(self):
        self.item_list.currentItemChanged.connect(self._on_current_item_changed)
        self.item_list.itemDoubleClicked.connect(self._on_item_double_clicked)
        self.label_edit.editingFinished.connect(self.commit_label)
        self.page_title_edit.editingFinished.connect(self.commit_page_title)
        self.url_edit.editingFinished.connect(self.commit_url)
        self.toggle_button.clicked.connect(self.toggle_selected)
        self.up_button.clicked.connect(self.move_selected_up)
        self.down_button.clicked.connect(self.move_selected_down)
        self.delete_button.clicked.connect(self.delete_selected)
        self.add_primary_button.clicked.connect(lambda: self.add_item(NavLevel.PRIMARY))
        self.add_secondary_button.clicked.connect(lambda: self.add_item(NavLevel.SECONDARY))
        self.add_tertiary_button.clicked.connect(lambda: self.add_item(NavLevel.TERTIARY))
        self.card_color_combo.currentIndexChanged.connect(self._on_card_color_index_changed)

    def _get_add_button_style(self) -> str:
        scheme = self.color_scheme
        return f"""
            QPushButton {{
                background-color: {scheme.to_hex(scheme.button_bg)};
                color: {scheme.to_hex(scheme.muted_text)};
                border: 1px solid {scheme.to_hex(scheme.muted_stroke)};
                border-radius: 6px;
                padding: 6px;
                font-size: 10px;
                font-weight: bold;
            }}
            QPushButton:hover {{
                background-color: {scheme.to_hex(scheme.button_hover_bg)};
            }}
        """

    def _dot_icon(self, level: NavLevel) -> QIcon:
        icon = self._dot_icons.get(level)
        if icon is None:
            pixmap = QPixmap(16, 16)
            pixmap.fill(Qt.GlobalColor.transparent)
            painter = QPainter(pixmap)
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setPen(self.color_scheme.to_qcolor(self.color_scheme.card_stroke))
            painter.setBrush(self.color_scheme.to_qcolor(self.color_scheme.level_color(level)))
            painter.drawEllipse(2, 2, 12, 12)
            painter.end()
            icon = QIcon(pixmap)
            self._dot_icons[level] = icon
        return icon

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh(self):
        """Rebuild the rows from the forest and update action availability."""
        self.forest.drop_stale_selection()
        selected_id = self.forest.selected_id
        self._refreshing = True
        try:
            self.item_list.clear()
            for item, indent in visible_items(self.forest):
                row = QListWidgetItem(row_text(item, indent, self.forest.has_children(item.id)))
                row.setData(ITEM_ID_ROLE, item.id)
                row.setData(INDENT_ROLE, indent)
                row.setIcon(self._dot_icon(item.level))
                if not item.label:
                    row.setForeground(self.color_scheme.to_qcolor(self.color_scheme.muted_text))
                self.item_list.addItem(row)
                if item.id == selected_id:
                    self.item_list.setCurrentItem(row)
        finally:
            self._refreshing = False
        self._update_controls()
        self._apply_card_style()

    def _update_controls(self):
        selected = self.forest.selected_item()
        has_selection = selected is not None

        for editor in (self.label_edit, self.page_title_edit, self.url_edit):
            editor.setEnabled(has_selection)
        if has_selection:
            self.label_edit.setText(selected.label)
            self.label_edit.setPlaceholderText(f"{selected.level.value} nav...")
            self.page_title_edit.setText(selected.page_title)
            self.url_edit.setText(selected.url)
        else:
            self.label_edit.clear()
            self.label_edit.setPlaceholderText("")
            self.page_title_edit.clear()
            self.url_edit.clear()

        has_children = has_selection and self.forest.has_children(selected.id)
        self.toggle_button.setEnabled(has_children)
        if has_children:
            self.toggle_button.setText("▸" if selected.collapsed else "▾")
            self.toggle_button.setToolTip("Expand" if selected.collapsed else "Collapse")

        self.up_button.setEnabled(has_selection and self.forest.can_move_up(selected.id))
        self.down_button.setEnabled(has_selection and self.forest.can_move_down(selected.id))
        self.delete_button.setEnabled(has_selection)

        levels = self.forest.addable_levels()
        self.add_secondary_button.setVisible(NavLevel.SECONDARY in levels)
        self.add_tertiary_button.setVisible(NavLevel.TERTIARY in levels)

    def _apply_card_style(self):
        self.setStyleSheet(f"""
            NavigationCardWidget {{
                background-color: {self.card_color};
                border: 2px solid {self.color_scheme.to_hex(self.color_scheme.card_stroke)};
                border-radius: 10px;
            }}
        """)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _after_mutation(self):
        self.refresh()
        self.structure_changed.emit()

    def add_item(self, level: NavLevel) -> Optional[str]:
        """Add an item; child levels go under the current selection."""
        parent_id = None if level is NavLevel.PRIMARY else self.forest.selected_id
        if level is not NavLevel.PRIMARY and parent_id is None:
            logger.debug(f"No selection to add a {level.value} item under")
            return None
        new_id = self.forest.add_item(level, parent_id)
        if new_id is not None:
            self._after_mutation()
            self.selection_changed.emit(new_id)
        return new_id

    def delete_selected(self):
        selected_id = self.forest.selected_id
        if selected_id is not None and self.forest.delete_item(selected_id):
            self._after_mutation()
            self.selection_changed.emit(self.forest.selected_id)

    def move_selected_up(self):
        selected_id = self.forest.selected_id
        if selected_id is not None and self.forest.move_up(selected_id):
            self._after_mutation()

    def move_selected_down(self):
        selected_id = self.forest.selected_id
        if selected_id is not None and self.forest.move_down(selected_id):
            self._after_mutation()

    def toggle_selected(self):
        selected_id = self.forest.selected_id
        if selected_id is not None and self.forest.has_children(selected_id):
            self.forest.toggle_collapsed(selected_id)
            self._after_mutation()

    def _commit_field(self, name: str, editor: QLineEdit):
        """Write an editor's text into one payload field of the selected item."""
        selected = self.forest.selected_item()
        if selected is None or getattr(selected, name) == editor.text():
            return
        self.forest.update(selected.id, {name: editor.text()})
        self._after_mutation()

    def commit_label(self):
        self._commit_field("label", self.label_edit)

    def commit_page_title(self):
        self._commit_field("page_title", self.page_title_edit)

    def commit_url(self):
        self._commit_field("url", self.url_edit)

    def set_card_color(self, hex_color: str):
        self.card_color = hex_color
        index = self.card_color_combo.findData(hex_color)
        if index >= 0 and index != self.card_color_combo.currentIndex():
            self.card_color_combo.setCurrentIndex(index)
        self._apply_card_style()
        self.card_color_changed.emit(hex_color)

    # ------------------------------------------------------------------
    # Signal handlers
    # ------------------------------------------------------------------

    def _on_current_item_changed(self, current: Optional[QListWidgetItem], previous):
        if self._refreshing:
            return
        item_id = current.data(ITEM_ID_ROLE) if current is not None else None
        self.forest.select(item_id)
        self._update_controls()
        self.selection_changed.emit(self.forest.selected_id)

    def _on_item_double_clicked(self, row: QListWidgetItem):
        item_id = row.data(ITEM_ID_ROLE)
        if self.forest.has_children(item_id):
            self.forest.toggle_collapsed(item_id)
            self._after_mutation()

    def _on_card_color_index_changed(self, index: int):
        hex_color = self.card_color_combo.itemData(index)
        if hex_color and hex_color != self.card_color:
            self.set_card_color(hex_color)
