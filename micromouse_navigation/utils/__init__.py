"""
Utility Functions and Classes

Angle helpers shared by the pose tracker, perceiver and drive state machine.
"""

import numpy as np

from ..core.maze_model import Direction


def normalize_angle(angle):
    """Normalize angle to (-pi, pi]"""
    while angle > np.pi:
        angle -= 2 * np.pi
    while angle <= -np.pi:
        angle += 2 * np.pi
    return float(angle)


def angle_difference(target, current):
    """Shortest signed rotation from current to target"""
    return normalize_angle(target - current)


def heading_from_yaw(yaw):
    """Nearest cardinal direction for a yaw angle"""
    quarter_turns = int(round(normalize_angle(yaw) / (np.pi / 2)))
    return Direction(quarter_turns % 4)


def calculate_distance(point1, point2):
    """Calculate Euclidean distance between two points"""
    return float(np.hypot(point1[0] - point2[0], point1[1] - point2[1]))
