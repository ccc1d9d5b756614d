import numpy as np

# Quarter turns from the robot heading to each sensor's absolute direction
RELATIVE_TURNS = {
    'front': 0,
    'left': 1,
    'right': -1,
    'back': 2,
}


class WallPerceiver:
    def __init__(self, safe_distance, range_indices, logger=None):
        self.safe_distance = safe_distance
        self.range_indices = dict(range_indices)
        self.logger = logger

    @staticmethod
    def filter_ranges(ranges, range_min=0.0, range_max=np.inf):
        """
        Clean a raw scan the way the wall check needs it.

        Readings that cannot be trusted (nan, non-positive, under range_min)
        become nan; readings that saw nothing (inf, over range_max) become inf.
        """
        ranges = np.array(ranges, dtype=float)
        filtered = ranges.copy()
        invalid = np.isnan(ranges) | (ranges <= 0.0) | (ranges < range_min)
        out_of_range = ~invalid & (np.isinf(ranges) | (ranges > range_max))
        filtered[invalid] = np.nan
        filtered[out_of_range] = np.inf
        return filtered

    def wall_directions(self, ranges, heading, range_min=0.0, range_max=np.inf):
        """Absolute directions of the walls visible in a scan"""
        filtered = self.filter_ranges(ranges, range_min, range_max)
        walls = []
        for name, index in self.range_indices.items():
            if index >= len(filtered):
                continue
            reading = filtered[index]
            if np.isnan(reading) or reading >= self.safe_distance:
                continue
            walls.append(heading.rotate(RELATIVE_TURNS[name]))
        return walls

    def perceive(self, maze, ranges, cell, heading, range_min=0.0, range_max=np.inf):
        """
        Insert the walls seen from cell into the maze.

        Returns the absolute directions of walls that were not known before.
        Walls facing the outer boundary have no neighbor and are skipped.
        """
        added = []
        for direction in self.wall_directions(ranges, heading, range_min, range_max):
            neighbor = maze.neighbor(cell, direction)
            if neighbor is None:
                continue
            if maze.mark_wall(cell, neighbor):
                added.append(direction)

        if self.logger and added:
            names = ', '.join(direction.name for direction in added)
            self.logger.info(f'New walls at {tuple(cell)}: {names}')
        return added
