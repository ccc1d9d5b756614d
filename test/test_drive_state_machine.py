import math
from unittest.mock import Mock

import pytest

from micromouse_navigation.config.parameters import NavigationConfig
from micromouse_navigation.core.drive_state_machine import (DriveMode, DriveState,
                                                            DriveStateMachine,
                                                            NavigationOutcome,
                                                            VelocityCommand)
from micromouse_navigation.core.exceptions import NavigationFailure
from micromouse_navigation.core.maze_model import Direction, MazeModel
from micromouse_navigation.core.motion_planner import MotionPlanner
from micromouse_navigation.utils.pose_tracker import Pose
from micromouse_navigation.utils.wall_perceiver import WallPerceiver

OPEN_SCAN = (5.0, 5.0, 5.0, 5.0)


def make_machine(logger=None, **overrides):
    settings = {'maze_size': 3, 'goal_col': 2, 'goal_row': 2, 'settle_pause': 0.03}
    settings.update(overrides)
    config = NavigationConfig(**settings).validate()
    maze = MazeModel(config.MAZE_SIZE)
    maze.seed(config.goal_cell)
    perceiver = WallPerceiver(config.SAFE_DISTANCE, config.range_indices)
    return DriveStateMachine(config, maze, perceiver, MotionPlanner(maze), logger)


def test_cell_at_rounds_to_nearest_center_and_clamps():
    machine = make_machine()
    assert machine.cell_at(Pose(0.0, 0.0)) == (0, 0)
    assert machine.cell_at(Pose(0.995, 0.02)) == (1, 0)
    assert machine.cell_at(Pose(1.49, 1.51)) == (1, 2)
    assert machine.cell_at(Pose(-0.7, 9.0)) == (0, 2)


def test_cell_at_honours_origin_and_cell_size():
    machine = make_machine(cell_size=0.18, origin_x=-0.18, origin_y=0.09)
    assert machine.cell_at(Pose(-0.18, 0.09)) == (0, 0)
    assert machine.cell_at(Pose(0.0, 0.27)) == (1, 1)


def test_goal_check_overrides_any_mode():
    machine = make_machine()
    for mode in DriveMode:
        state = DriveState(mode=mode, target_yaw=1.0)
        result = machine.step(state, Pose(2.3, 1.6, 0.4), 0.1, OPEN_SCAN)

        assert result.outcome == NavigationOutcome.GOAL_REACHED
        assert result.command == VelocityCommand.stop()
        assert result.state == state


def test_advancing_drives_forward_and_accumulates_distance():
    machine = make_machine()
    result = machine.step(DriveState(), Pose(0.2, 0.0, 0.0), 0.2, OPEN_SCAN)

    assert result.command == VelocityCommand(0.5, 0.0)
    assert result.state.mode == DriveMode.ADVANCING
    assert result.state.distance_traveled_this_cell == pytest.approx(0.2)
    assert result.outcome is None


def test_advancing_stops_after_one_cell():
    machine = make_machine()
    state = DriveState(distance_traveled_this_cell=0.95)

    result = machine.step(state, Pose(0.99, 0.0, 0.0), 0.05, OPEN_SCAN)

    assert result.command == VelocityCommand.stop()
    assert result.state.mode == DriveMode.SENSING
    assert result.state.settle_ticks_remaining == 3


def test_sensing_waits_for_settle_countdown_without_touching_maze():
    machine = make_machine()
    state = DriveState(mode=DriveMode.SENSING, settle_ticks_remaining=2)
    pose = Pose(1.0, 0.0, 0.0)

    first = machine.step(state, pose, 0.0, (0.3, 0.3, 0.3, 0.3))
    second = machine.step(first.state, pose, 0.0, (0.3, 0.3, 0.3, 0.3))

    assert first.state.settle_ticks_remaining == 1
    assert second.state.settle_ticks_remaining == 0
    assert second.state.mode == DriveMode.SENSING
    assert first.command == second.command == VelocityCommand.stop()
    assert not machine.maze.walls.any()


def test_sensing_with_wall_ahead_turns_left_toward_goal():
    machine = make_machine()
    state = DriveState(mode=DriveMode.SENSING)

    result = machine.step(state, Pose(1.0, 0.0, 0.0), 0.0, (0.3, 5.0, 5.0, 5.0))

    assert machine.maze.is_walled((1, 0), Direction.EAST)
    assert result.state.mode == DriveMode.TURNING
    assert result.state.target_yaw == pytest.approx(math.pi / 2)
    assert result.command == VelocityCommand.stop()
    # Chosen neighbor is strictly closer than the current cell
    assert machine.maze.distance((1, 1)) < machine.maze.distance((1, 0))


def test_sensing_recomputes_before_planning():
    machine = make_machine(maze_size=3, goal_col=2, goal_row=0)
    # Known wall between (1, 0) and the goal; seeded field still says EAST
    machine.maze.mark_wall((1, 0), (2, 0))
    state = DriveState(mode=DriveMode.SENSING)

    result = machine.step(state, Pose(1.0, 0.0, 0.0), 0.0, OPEN_SCAN)

    assert result.state.target_yaw == pytest.approx(math.pi / 2)
    assert machine.maze.distance((1, 0)) == 3


def test_sensing_in_dead_end_raises_navigation_failure():
    machine = make_machine()
    machine.maze.mark_wall((1, 1), (0, 1))
    machine.maze.mark_wall((1, 1), (1, 0))
    machine.maze.mark_wall((1, 1), (1, 2))
    state = DriveState(mode=DriveMode.SENSING)

    with pytest.raises(NavigationFailure):
        machine.step(state, Pose(1.0, 1.0, 0.0), 0.0, (0.3, 5.0, 5.0, 5.0))


@pytest.mark.parametrize('yaw, sign', [(0.0, 1.0), (math.pi, -1.0), (-math.pi / 2 + 0.2, 1.0), (2.0, -1.0)])
def test_turning_takes_shortest_direction(yaw, sign):
    machine = make_machine()
    state = DriveState(mode=DriveMode.TURNING, target_yaw=math.pi / 2)

    result = machine.step(state, Pose(1.0, 0.0, yaw), 0.0, OPEN_SCAN)

    assert result.command == VelocityCommand(0.0, sign * 1.0)
    assert result.state.mode == DriveMode.TURNING


def test_turning_wraps_across_pi():
    machine = make_machine()
    state = DriveState(mode=DriveMode.TURNING, target_yaw=math.pi)

    result = machine.step(state, Pose(1.0, 0.0, -3.0), 0.0, OPEN_SCAN)

    # -3.0 to pi is shorter clockwise
    assert result.command.angular == -1.0


def test_turning_hands_over_to_fine_alignment():
    machine = make_machine()
    state = DriveState(mode=DriveMode.TURNING, target_yaw=math.pi / 2)

    result = machine.step(state, Pose(1.0, 0.0, math.pi / 2 - 0.005), 0.0, OPEN_SCAN)

    assert result.state.mode == DriveMode.FINE_ALIGNING
    assert result.command == VelocityCommand.stop()


def test_fine_alignment_uses_slow_turn():
    machine = make_machine()
    state = DriveState(mode=DriveMode.FINE_ALIGNING, target_yaw=0.0)

    result = machine.step(state, Pose(1.0, 0.0, 0.005), 0.0, OPEN_SCAN)

    assert result.command == VelocityCommand(0.0, -0.2)
    assert result.state.mode == DriveMode.FINE_ALIGNING


def test_fine_alignment_resets_cell_distance():
    machine = make_machine()
    state = DriveState(mode=DriveMode.FINE_ALIGNING, target_yaw=0.0,
                       distance_traveled_this_cell=1.02)

    result = machine.step(state, Pose(1.0, 0.0, 0.0005), 0.0, OPEN_SCAN)

    assert result.state.mode == DriveMode.ADVANCING
    assert result.state.distance_traveled_this_cell == 0.0
    assert result.command == VelocityCommand.stop()


def test_transitions_are_logged():
    logger = Mock()
    machine = make_machine(logger)

    machine.step(DriveState(distance_traveled_this_cell=0.99), Pose(1.0, 0.0, 0.0), 0.0, OPEN_SCAN)

    messages = [call[0][0] for call in logger.info.call_args_list]
    assert 'State: -> sensing' in messages
