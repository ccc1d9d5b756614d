import math
from dataclasses import dataclass

from . import calculate_distance, normalize_angle


@dataclass(frozen=True)
class Pose:
    x: float = 0.0
    y: float = 0.0
    yaw: float = 0.0


def yaw_from_quaternion(x, y, z, w):
    """Yaw (rotation about z) of an orientation quaternion"""
    siny_cosp = 2.0 * (w * z + x * y)
    cosy_cosp = 1.0 - 2.0 * (y * y + z * z)
    return normalize_angle(math.atan2(siny_cosp, cosy_cosp))


class PoseTracker:
    """Latest 2-D pose plus straight-line distance since the last reset"""

    def __init__(self):
        self.pose = None
        self.distance = 0.0

    def update(self, x, y, yaw):
        pose = Pose(float(x), float(y), normalize_angle(yaw))
        if self.pose is not None:
            self.distance += calculate_distance((self.pose.x, self.pose.y), (pose.x, pose.y))
        self.pose = pose
        return pose

    def update_from_quaternion(self, x, y, qx, qy, qz, qw):
        return self.update(x, y, yaw_from_quaternion(qx, qy, qz, qw))

    def reset_distance(self):
        self.distance = 0.0
