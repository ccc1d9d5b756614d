"""
Maze Model

Distance field and wall map of an N x N maze. Distances are indexed
[col, row]; walls are stored per cell and per absolute direction, always
on both sides of an edge.
"""

import math
from collections import deque
from enum import IntEnum
from typing import NamedTuple, Optional

import numpy as np


class Cell(NamedTuple):
    col: int
    row: int


class Direction(IntEnum):
    """Absolute grid directions, counter-clockwise from +x"""
    EAST = 0
    NORTH = 1
    WEST = 2
    SOUTH = 3

    @property
    def delta(self):
        return _DELTAS[self]

    @property
    def yaw(self):
        """Cardinal yaw target in (-pi, pi]"""
        return _YAWS[self]

    @property
    def opposite(self):
        return Direction((self + 2) % 4)

    def rotate(self, quarter_turns):
        """Positive quarter turns rotate left (counter-clockwise)"""
        return Direction((self + quarter_turns) % 4)


_DELTAS = {
    Direction.EAST: (1, 0),
    Direction.NORTH: (0, 1),
    Direction.WEST: (-1, 0),
    Direction.SOUTH: (0, -1),
}

_YAWS = {
    Direction.EAST: 0.0,
    Direction.NORTH: math.pi / 2,
    Direction.WEST: math.pi,
    Direction.SOUTH: -math.pi / 2,
}

# Tie-break order relative to the current heading: forward, left, right, back
PREFERENCE_TURNS = (0, 1, -1, 2)


class MazeModel:
    def __init__(self, size, logger=None):
        if size < 1:
            raise ValueError(f'Maze size must be positive, got {size}')
        self.size = size
        self.logger = logger
        # Strictly greater than any path length inside the grid
        self.unreachable = size * size + 1
        self.goal = None
        self.distances = np.full((size, size), self.unreachable, dtype=np.int32)
        self.walls = np.zeros((size, size, 4), dtype=bool)

    def in_bounds(self, cell):
        col, row = cell
        return 0 <= col < self.size and 0 <= row < self.size

    def neighbor(self, cell, direction) -> Optional[Cell]:
        dx, dy = Direction(direction).delta
        candidate = Cell(cell[0] + dx, cell[1] + dy)
        return candidate if self.in_bounds(candidate) else None

    def distance(self, cell):
        return int(self.distances[cell[0], cell[1]])

    def seed(self, goal_cell):
        """Fill the grid with Manhattan distances to the goal"""
        goal_cell = Cell(*goal_cell)
        if not self.in_bounds(goal_cell):
            raise ValueError(f'Goal {tuple(goal_cell)} is outside the maze')
        self.goal = goal_cell
        cols, rows = np.indices((self.size, self.size))
        self.distances = (np.abs(cols - goal_cell.col) + np.abs(rows - goal_cell.row)).astype(np.int32)

    def _direction_between(self, from_cell, to_cell):
        if not (self.in_bounds(from_cell) and self.in_bounds(to_cell)):
            raise ValueError(f'Cells {tuple(from_cell)} and {tuple(to_cell)} must both lie inside the maze')
        step = (to_cell[0] - from_cell[0], to_cell[1] - from_cell[1])
        for direction, delta in _DELTAS.items():
            if step == delta:
                return direction
        raise ValueError(f'Cells {tuple(from_cell)} and {tuple(to_cell)} are not adjacent')

    def mark_wall(self, from_cell, to_cell):
        """
        Record the edge between two adjacent cells as impassable.

        Returns True if the wall is new, False if it was already known.
        """
        direction = self._direction_between(from_cell, to_cell)
        if self.walls[from_cell[0], from_cell[1], direction]:
            return False

        self.walls[from_cell[0], from_cell[1], direction] = True
        self.walls[to_cell[0], to_cell[1], direction.opposite] = True
        if self.logger:
            self.logger.debug(f'Wall between {tuple(from_cell)} and {tuple(to_cell)}')
        return True

    def is_walled(self, cell, direction):
        return bool(self.walls[cell[0], cell[1], Direction(direction)])

    def is_passable(self, from_cell, to_cell):
        direction = self._direction_between(from_cell, to_cell)
        return not self.walls[from_cell[0], from_cell[1], direction]

    def passable_neighbors(self, cell):
        for direction in Direction:
            if self.walls[cell[0], cell[1], direction]:
                continue
            neighbor = self.neighbor(cell, direction)
            if neighbor is not None:
                yield direction, neighbor

    def recompute_distances(self, goal_cell=None):
        """
        Flood fill from the goal over passable edges.

        Every cell gets its shortest passable path length to the goal;
        cells cut off from the goal get the unreachable sentinel. Returns
        the number of reachable cells.
        """
        goal_cell = Cell(*goal_cell) if goal_cell is not None else self.goal
        if goal_cell is None or not self.in_bounds(goal_cell):
            raise ValueError(f'Cannot flood fill toward goal {goal_cell}')
        self.goal = goal_cell

        distances = np.full((self.size, self.size), self.unreachable, dtype=np.int32)
        distances[goal_cell.col, goal_cell.row] = 0
        queue = deque([goal_cell])
        reached = 1

        while queue:
            cell = queue.popleft()
            next_distance = distances[cell.col, cell.row] + 1
            for _, neighbor in self.passable_neighbors(cell):
                if distances[neighbor.col, neighbor.row] > next_distance:
                    distances[neighbor.col, neighbor.row] = next_distance
                    queue.append(neighbor)
                    reached += 1

        self.distances = distances
        return reached

    def best_neighbor(self, cell, heading=Direction.EAST) -> Optional[Direction]:
        """
        Direction of the passable neighbor closest to the goal.

        Only neighbors strictly closer than the cell itself qualify. Equal
        distances are resolved forward, left, right, back relative to
        heading. Returns None at the goal or when nothing improves.
        """
        cell = Cell(*cell)
        if cell == self.goal:
            return None

        best_direction = None
        best_distance = self.distance(cell)
        for turns in PREFERENCE_TURNS:
            direction = Direction(heading).rotate(turns)
            if self.walls[cell.col, cell.row, direction]:
                continue
            neighbor = self.neighbor(cell, direction)
            if neighbor is None:
                continue
            neighbor_distance = self.distance(neighbor)
            if neighbor_distance >= self.unreachable:
                continue
            if neighbor_distance < best_distance:
                best_direction = direction
                best_distance = neighbor_distance
        return best_direction

    def render(self):
        """Distance field as text, highest row first"""
        width = len(str(self.unreachable))
        lines = []
        for row in range(self.size - 1, -1, -1):
            values = []
            for col in range(self.size):
                value = int(self.distances[col, row])
                values.append('#'.rjust(width) if value >= self.unreachable else str(value).rjust(width))
            lines.append(' '.join(values))
        return '\n'.join(lines)
