"""
Theming for the navigation card.

Level colors and card background choices.
"""

from .color_scheme import NavColorScheme

__all__ = [
    "NavColorScheme",
]
