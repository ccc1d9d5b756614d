"""
Micromouse Navigation Package

Flood-fill maze solving for a differential drive robot.
"""

__version__ = "0.1.0"

from .config.parameters import NavigationConfig
from .core.navigation_loop import NavigationLoop
from .core.drive_state_machine import NavigationOutcome

def get_version():
    return __version__
