import math

from ..core.exceptions import ConfigurationError
from ..core.maze_model import Cell


class NavigationConfig:
    # Maze geometry
    MAZE_SIZE = 20          # cells per side
    GOAL_COL = 19
    GOAL_ROW = 19
    CELL_SIZE = 1.0         # meters
    ORIGIN_X = 0.0          # world position of the center of cell (0, 0)
    ORIGIN_Y = 0.0

    # Perception
    SAFE_DISTANCE = 0.75    # readings below this are walls
    RANGE_FRONT_INDEX = 0
    RANGE_LEFT_INDEX = 1
    RANGE_RIGHT_INDEX = 3
    RANGE_BACK_INDEX = -1   # -1 disables the reading

    # Motion
    CELL_TRAVEL_DISTANCE = 0.99  # slightly under one cell, stops before overshooting
    FORWARD_SPEED = 0.5     # m/s
    TURN_SPEED = 1.0        # rad/s, coarse turn
    FINE_TURN_SPEED = 0.2   # rad/s, refining turn
    COARSE_TOLERANCE = 0.01  # rad
    FINE_TOLERANCE = 0.001   # rad

    # Timing
    TICK_PERIOD = 0.01      # s (100Hz control loop)
    SETTLE_PAUSE = 1.0      # s, still time before trusting the range sensor
    STALE_SAMPLE_TIMEOUT = 0.5  # s, pose/scan older than this halts motion

    def __init__(self, **overrides):
        for name, value in overrides.items():
            attribute = name.upper()
            if not hasattr(type(self), attribute) or attribute.startswith('_'):
                raise ConfigurationError(f'Unknown parameter: {name}')
            setattr(self, attribute, value)

    @classmethod
    def defaults(cls):
        """Parameter names (lower case) mapped to their default values"""
        return {
            name.lower(): value for name, value in vars(cls).items()
            if name.isupper()
        }

    def as_dict(self):
        return {name: getattr(self, name.upper()) for name in self.defaults()}

    @property
    def goal_cell(self):
        return Cell(self.GOAL_COL, self.GOAL_ROW)

    @property
    def settle_ticks(self):
        return int(math.ceil(self.SETTLE_PAUSE / self.TICK_PERIOD - 1e-9))

    @property
    def stale_ticks(self):
        return max(1, int(math.ceil(self.STALE_SAMPLE_TIMEOUT / self.TICK_PERIOD - 1e-9)))

    @property
    def range_indices(self):
        """Relative direction name -> scan index, disabled readings omitted"""
        indices = {
            'front': self.RANGE_FRONT_INDEX,
            'left': self.RANGE_LEFT_INDEX,
            'right': self.RANGE_RIGHT_INDEX,
            'back': self.RANGE_BACK_INDEX,
        }
        return {name: index for name, index in indices.items() if index >= 0}

    def validate(self):
        """Reject malformed configuration before the robot moves"""
        if not isinstance(self.MAZE_SIZE, int) or isinstance(self.MAZE_SIZE, bool) \
                or self.MAZE_SIZE < 1:
            raise ConfigurationError(f'maze_size must be a positive integer, got {self.MAZE_SIZE!r}')

        for name in ('GOAL_COL', 'GOAL_ROW'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f'{name.lower()} must be an integer, got {value!r}')
            if not 0 <= value < self.MAZE_SIZE:
                raise ConfigurationError(
                    f'Goal cell ({self.GOAL_COL}, {self.GOAL_ROW}) is outside '
                    f'the {self.MAZE_SIZE}x{self.MAZE_SIZE} maze')

        for name in ('CELL_SIZE', 'SAFE_DISTANCE', 'CELL_TRAVEL_DISTANCE',
                     'FORWARD_SPEED', 'TURN_SPEED', 'FINE_TURN_SPEED',
                     'COARSE_TOLERANCE', 'FINE_TOLERANCE', 'TICK_PERIOD',
                     'STALE_SAMPLE_TIMEOUT'):
            value = getattr(self, name)
            if not _is_number(value) or not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f'{name.lower()} must be positive, got {value!r}')

        for name in ('ORIGIN_X', 'ORIGIN_Y', 'SETTLE_PAUSE'):
            value = getattr(self, name)
            if not _is_number(value) or not math.isfinite(value):
                raise ConfigurationError(f'{name.lower()} must be a finite number, got {value!r}')
        if self.SETTLE_PAUSE < 0:
            raise ConfigurationError(f'settle_pause must not be negative, got {self.SETTLE_PAUSE}')

        if self.FINE_TOLERANCE > self.COARSE_TOLERANCE:
            raise ConfigurationError(
                f'fine_tolerance ({self.FINE_TOLERANCE}) must not exceed '
                f'coarse_tolerance ({self.COARSE_TOLERANCE})')

        for name in ('RANGE_FRONT_INDEX', 'RANGE_LEFT_INDEX', 'RANGE_RIGHT_INDEX'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigurationError(f'{name.lower()} must be a non-negative integer, got {value!r}')
        back = self.RANGE_BACK_INDEX
        if not isinstance(back, int) or isinstance(back, bool) or back < -1:
            raise ConfigurationError(f'range_back_index must be -1 or a scan index, got {back!r}')

        indices = list(self.range_indices.values())
        if len(set(indices)) != len(indices):
            raise ConfigurationError(f'Scan indices must be distinct, got {self.range_indices}')

        return self


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)
