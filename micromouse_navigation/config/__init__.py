"""Tunable parameters"""

from .parameters import NavigationConfig

__all__ = ['NavigationConfig']
