class WalkError(Exception):
    """Unrecoverable failure that ends a walk."""


class NavigationError(WalkError):
    """Navigation failed even after the relaxed retry."""
