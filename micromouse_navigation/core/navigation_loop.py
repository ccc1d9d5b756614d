"""
Control loop of one maze run.

Pose and scan samples are stored as they arrive (last value wins) and
consumed only inside tick(), which returns exactly one velocity command.
The loop owns the maze, the drive state and the run outcome; nothing is
shared between runs.
"""

import math

from ..utils.pose_tracker import PoseTracker
from ..utils.wall_perceiver import WallPerceiver
from .drive_state_machine import (DriveState, DriveStateMachine,
                                  NavigationOutcome, VelocityCommand)
from .exceptions import NavigationFailure
from .maze_model import MazeModel
from .motion_planner import MotionPlanner


class NavigationLoop:
    def __init__(self, config, logger=None):
        self.config = config.validate()
        self.logger = logger

        self.maze = MazeModel(config.MAZE_SIZE, logger)
        self.maze.seed(config.goal_cell)
        self.pose_tracker = PoseTracker()
        self.perceiver = WallPerceiver(config.SAFE_DISTANCE, config.range_indices, logger)
        self.planner = MotionPlanner(self.maze, logger)
        self.machine = DriveStateMachine(config, self.maze, self.perceiver, self.planner, logger)

        self.state = DriveState()
        self.outcome = None
        self.failure = None
        self.tick_count = 0

        # Latest samples and the tick they arrived on
        self.scan = None
        self.scan_limits = (0.0, math.inf)
        self._pose_tick = None
        self._scan_tick = None
        self.stale = False

        if self.logger:
            self.logger.info(
                f'Maze {config.MAZE_SIZE}x{config.MAZE_SIZE}, goal {tuple(config.goal_cell)}')
            self.logger.debug('Initial distances:\n' + self.maze.render())

    @property
    def finished(self):
        return self.outcome is not None

    @property
    def pose(self):
        return self.pose_tracker.pose

    def on_pose(self, x, y, yaw):
        if not all(math.isfinite(value) for value in (x, y, yaw)):
            if self.logger:
                self.logger.warn(f'Dropping invalid pose ({x}, {y}, {yaw})')
            return None
        pose = self.pose_tracker.update(x, y, yaw)
        self._pose_tick = self.tick_count
        return pose

    def on_scan(self, ranges, range_min=0.0, range_max=math.inf):
        self.scan = tuple(ranges)
        self.scan_limits = (range_min, range_max)
        self._scan_tick = self.tick_count

    def is_ready(self):
        return self._pose_tick is not None and self._scan_tick is not None

    def sample_age(self):
        """Ticks since the older of the latest pose and scan"""
        return self.tick_count - min(self._pose_tick, self._scan_tick)

    def tick(self):
        """Advance the run by one control period"""
        self.tick_count += 1
        if self.finished or self.pose is None:
            return VelocityCommand.stop()

        # Goal test uses the pose alone; scan freshness does not apply
        if self.machine.at_goal(self.pose):
            return self._reach_goal()

        if not self.is_ready():
            return VelocityCommand.stop()

        if self.sample_age() > self.config.stale_ticks:
            if not self.stale and self.logger:
                self.logger.warn(
                    f'No fresh pose/scan for {self.sample_age()} ticks, holding position')
            self.stale = True
            return VelocityCommand.stop()
        if self.stale and self.logger:
            self.logger.info('Sensor data fresh again, resuming')
        self.stale = False

        travelled = self.pose_tracker.distance
        self.pose_tracker.reset_distance()

        try:
            result = self.machine.step(self.state, self.pose, travelled, self.scan, *self.scan_limits)
        except NavigationFailure as e:
            self.failure = e
            self.outcome = NavigationOutcome.NAVIGATION_FAILED
            if self.logger:
                self.logger.error(f'Navigation failed: {e}')
                self.logger.debug('Distances at failure:\n' + self.maze.render())
            return VelocityCommand.stop()

        self.state = result.state
        if result.outcome is not None:
            return self._reach_goal()

        if not result.command.is_finite():
            if self.logger:
                self.logger.error(f'Dropping invalid command {result.command}')
            return VelocityCommand.stop()
        return result.command

    def _reach_goal(self):
        self.outcome = NavigationOutcome.GOAL_REACHED
        if self.logger:
            self.logger.info(f'Goal reached at ({self.pose.x:.2f}, {self.pose.y:.2f})')
            self.logger.debug('Final distances:\n' + self.maze.render())
        return VelocityCommand.stop()
