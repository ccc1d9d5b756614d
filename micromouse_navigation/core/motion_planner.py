from .exceptions import NavigationFailure
from .maze_model import Direction


class MotionPlanner:
    """Chooses the next cardinal direction from the maze distance field"""

    def __init__(self, maze, logger=None):
        self.maze = maze
        self.logger = logger

    def plan(self, current_cell, heading=Direction.EAST):
        """Direction toward the neighbor closest to the goal"""
        direction = self.maze.best_neighbor(current_cell, heading)
        if direction is None:
            raise NavigationFailure(current_cell)

        if self.logger:
            self.logger.info(
                f'Cell {tuple(current_cell)} (distance {self.maze.distance(current_cell)}) '
                f'-> {direction.name}')
        return direction

    @staticmethod
    def target_yaw(direction):
        return Direction(direction).yaw
