"""
Color scheme for the navigation card.

Level dot colors, card background choices, and the neutral tones used for
strokes, disabled arrows and selection outlines.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from PyQt6.QtGui import QColor

from navcard.core.nav_item import NavLevel

logger = logging.getLogger(__name__)


@dataclass
class NavColorScheme:
    """
    Semantic colors for the navigation card.

    Card colors are offered in the card color selector in declaration order;
    the first entry is the default background.
    """

    # ========== LEVEL DOTS ==========
    primary_dot: Tuple[int, int, int] = (74, 144, 226)     # #4a90e2 - Blue
    secondary_dot: Tuple[int, int, int] = (155, 89, 182)   # #9b59b6 - Purple
    tertiary_dot: Tuple[int, int, int] = (243, 156, 18)    # #f39c12 - Orange

    # ========== CARD BACKGROUNDS ==========
    card_colors: List[Tuple[str, Tuple[int, int, int]]] = field(default_factory=lambda: [
        ("White", (255, 255, 255)),
        ("Light Cyan", (232, 245, 245)),
        ("Light Yellow", (245, 245, 232)),
        ("Light Purple", (245, 232, 245)),
        ("Light Grey", (232, 232, 232)),
    ])

    # ========== STROKES AND TEXT ==========
    card_stroke: Tuple[int, int, int] = (51, 51, 51)        # #333333
    muted_stroke: Tuple[int, int, int] = (204, 204, 204)    # #cccccc - Disabled arrows, idle inputs
    muted_text: Tuple[int, int, int] = (102, 102, 102)      # #666666 - Legend and button text
    button_bg: Tuple[int, int, int] = (245, 245, 245)       # #f5f5f5
    button_hover_bg: Tuple[int, int, int] = (232, 232, 232) # #e8e8e8

    def level_color(self, level: NavLevel) -> Tuple[int, int, int]:
        """Dot color for a navigation level."""
        return {
            NavLevel.PRIMARY: self.primary_dot,
            NavLevel.SECONDARY: self.secondary_dot,
            NavLevel.TERTIARY: self.tertiary_dot,
        }[level]

    @property
    def default_card_color(self) -> str:
        return self.to_hex(self.card_colors[0][1])

    def card_color_options(self) -> List[Tuple[str, str]]:
        """(name, hex) pairs for the card color selector."""
        return [(name, self.to_hex(rgb)) for name, rgb in self.card_colors]

    def to_qcolor(self, color_tuple: Tuple[int, int, int]) -> QColor:
        """
        Convert RGB tuple to QColor object.

        Args:
            color_tuple: RGB color tuple (r, g, b)

        Returns:
            QColor: Qt color object
        """
        return QColor(*color_tuple)

    def to_hex(self, color_tuple: Tuple[int, int, int]) -> str:
        r, g, b = color_tuple
        return f"#{r:02x}{g:02x}{b:02x}"
