"""Core navigation logic"""

from .exceptions import ConfigurationError, NavigationFailure
from .maze_model import Cell, Direction, MazeModel
from .motion_planner import MotionPlanner
from .drive_state_machine import (DriveMode, DriveState, DriveStateMachine,
                                  NavigationOutcome, VelocityCommand)
from .navigation_loop import NavigationLoop

__all__ = ['ConfigurationError', 'NavigationFailure', 'Cell', 'Direction',
           'MazeModel', 'MotionPlanner', 'DriveMode', 'DriveState',
           'DriveStateMachine', 'NavigationOutcome', 'VelocityCommand',
           'NavigationLoop']
