"""Errors raised by the navigation core"""


class NavigationFailure(RuntimeError):
    """No passable neighbor leads closer to the goal; the run cannot continue"""

    def __init__(self, cell, message=None):
        self.cell = cell
        super().__init__(message or f'No route to goal from cell {tuple(cell)}')


class ConfigurationError(ValueError):
    """Configuration rejected at startup, before any motion"""
