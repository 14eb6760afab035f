"""
PyQt6 widgets.

Views that bind the navigation engine to Qt.
"""

from .navigation_card import NavigationCardWidget, row_text

__all__ = [
    "NavigationCardWidget",
    "row_text",
]
