import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional

from ..utils import angle_difference, heading_from_yaw
from .maze_model import Cell


class DriveMode(Enum):
    ADVANCING = "advancing"
    SENSING = "sensing"
    TURNING = "turning"
    FINE_ALIGNING = "fine_aligning"


class NavigationOutcome(Enum):
    GOAL_REACHED = "goal_reached"
    NAVIGATION_FAILED = "navigation_failed"


@dataclass(frozen=True)
class DriveState:
    mode: DriveMode = DriveMode.ADVANCING
    distance_traveled_this_cell: float = 0.0
    target_yaw: float = 0.0
    settle_ticks_remaining: int = 0


@dataclass(frozen=True)
class VelocityCommand:
    linear: float = 0.0
    angular: float = 0.0

    @classmethod
    def stop(cls):
        return cls(0.0, 0.0)

    def is_finite(self):
        return math.isfinite(self.linear) and math.isfinite(self.angular)


class StepResult(NamedTuple):
    state: DriveState
    command: VelocityCommand
    outcome: Optional[NavigationOutcome] = None


class DriveStateMachine:
    """
    Advance one cell, stop and sense, replan, turn coarse, turn fine.

    step() maps (state, pose, sensor snapshot) to the next state and the
    command for this tick. The only side effect is on the maze, which is
    updated while sensing.
    """

    def __init__(self, config, maze, perceiver, planner, logger=None):
        self.config = config
        self.maze = maze
        self.perceiver = perceiver
        self.planner = planner
        self.logger = logger
        self.goal_center = self.cell_center(config.goal_cell)

    def cell_center(self, cell):
        return (self.config.ORIGIN_X + cell[0] * self.config.CELL_SIZE,
                self.config.ORIGIN_Y + cell[1] * self.config.CELL_SIZE)

    def cell_at(self, pose):
        """Grid cell whose center is nearest the pose, clamped into the maze"""
        last = self.maze.size - 1
        col = math.floor((pose.x - self.config.ORIGIN_X) / self.config.CELL_SIZE + 0.5)
        row = math.floor((pose.y - self.config.ORIGIN_Y) / self.config.CELL_SIZE + 0.5)
        return Cell(min(max(col, 0), last), min(max(row, 0), last))

    def at_goal(self, pose):
        half_cell = self.config.CELL_SIZE / 2
        goal_x, goal_y = self.goal_center
        return abs(pose.x - goal_x) <= half_cell and abs(pose.y - goal_y) <= half_cell

    def transition_to(self, state, mode, **changes):
        if state.mode != mode and self.logger:
            self.logger.info(f'State: -> {mode.value}')
        return replace(state, mode=mode, **changes)

    def step(self, state, pose, travelled=0.0, ranges=(), range_min=0.0, range_max=math.inf):
        if self.at_goal(pose):
            return StepResult(state, VelocityCommand.stop(), NavigationOutcome.GOAL_REACHED)

        if state.mode == DriveMode.ADVANCING:
            return self._advance(state, travelled)
        elif state.mode == DriveMode.SENSING:
            return self._sense(state, pose, ranges, range_min, range_max)
        elif state.mode == DriveMode.TURNING:
            return self._turn(state, pose)
        elif state.mode == DriveMode.FINE_ALIGNING:
            return self._fine_align(state, pose)
        raise ValueError(f'Unknown drive mode: {state.mode}')

    def _advance(self, state, travelled):
        distance = state.distance_traveled_this_cell + travelled
        if distance < self.config.CELL_TRAVEL_DISTANCE:
            return StepResult(replace(state, distance_traveled_this_cell=distance),
                              VelocityCommand(self.config.FORWARD_SPEED, 0.0))

        if self.logger:
            self.logger.info(f'{distance:.3f} m traveled. Checking for walls.')
        state = self.transition_to(state, DriveMode.SENSING,
                                   distance_traveled_this_cell=distance,
                                   settle_ticks_remaining=self.config.settle_ticks)
        return StepResult(state, VelocityCommand.stop())

    def _sense(self, state, pose, ranges, range_min, range_max):
        # Hold still until the robot has settled
        if state.settle_ticks_remaining > 0:
            return StepResult(
                replace(state, settle_ticks_remaining=state.settle_ticks_remaining - 1),
                VelocityCommand.stop())

        cell = self.cell_at(pose)
        heading = heading_from_yaw(pose.yaw)
        self.perceiver.perceive(self.maze, ranges, cell, heading, range_min, range_max)
        self.maze.recompute_distances(self.config.goal_cell)
        direction = self.planner.plan(cell, heading)

        state = self.transition_to(state, DriveMode.TURNING,
                                   target_yaw=self.planner.target_yaw(direction))
        return StepResult(state, VelocityCommand.stop())

    def _turn(self, state, pose):
        difference = angle_difference(state.target_yaw, pose.yaw)
        if abs(difference) > self.config.COARSE_TOLERANCE:
            return StepResult(state, VelocityCommand(0.0, math.copysign(self.config.TURN_SPEED, difference)))

        if self.logger:
            self.logger.info('Turn complete. Refining turn.')
        return StepResult(self.transition_to(state, DriveMode.FINE_ALIGNING), VelocityCommand.stop())

    def _fine_align(self, state, pose):
        # Slow pass removes the overshoot left by the coarse turn
        difference = angle_difference(state.target_yaw, pose.yaw)
        if abs(difference) > self.config.FINE_TOLERANCE:
            return StepResult(state, VelocityCommand(0.0, math.copysign(self.config.FINE_TURN_SPEED, difference)))

        if self.logger:
            self.logger.info('Refinement complete. Moving forward.')
        state = self.transition_to(state, DriveMode.ADVANCING, distance_traveled_this_cell=0.0)
        return StepResult(state, VelocityCommand.stop())
