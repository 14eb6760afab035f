"""Navigation engine exceptions."""


class NavigationError(Exception):
    """Raised when the navigation engine cannot complete a request."""


class InvalidLevelError(NavigationError, ValueError):
    """Raised when a value cannot be interpreted as a navigation level."""
