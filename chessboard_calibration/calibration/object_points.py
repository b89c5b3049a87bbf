"""
Chessboard Object Point Builder

Builds the board-local 3D coordinates of the inner chessboard corners.
"""

import numpy as np
from typing import List, Optional
import logging

from ..utils.config_manager import ConfigManager


class ObjectPointBuilder:
    """Generates the object point template for a planar chessboard."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize object point builder.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        pattern_config = self.config.get_pattern_params()
        calib_config = self.config.get_calibration_params()

        self.rows = int(pattern_config.get('rows', 6))
        self.cols = int(pattern_config.get('cols', 9))
        self.square_size = float(pattern_config.get('square_size', 50.0))

        # Releasing the object points lets the optimizer correct an inaccurate board
        self.use_new_method = bool(calib_config.get('use_new_method', True))
        self.measured_grid_width = float(calib_config.get('grid_width', 400.0))

    @property
    def num_points(self) -> int:
        return self.rows * self.cols

    @property
    def grid_width(self) -> float:
        """Distance between the top-left and top-right grid points."""
        if self.use_new_method:
            return self.measured_grid_width
        return self.square_size * (self.cols - 1)

    @property
    def fixed_point_index(self) -> int:
        """Index of the fixed point passed to calibrateCameraRO, -1 disables release."""
        return self.cols - 1 if self.use_new_method else -1

    @property
    def board_corner_indices(self) -> List[int]:
        """Indices of the top-left, top-right, bottom-left and bottom-right points."""
        return [0, self.cols - 1, self.cols * (self.rows - 1), self.num_points - 1]

    def build_template(self) -> np.ndarray:
        """
        Build the object point template.

        Points are laid out row-major at (col * square_size, row * square_size, 0).
        The top-right point is then moved to x = first.x + grid_width.

        Returns:
            Nx3 float32 array with N = rows * cols
        """
        grid = np.mgrid[0:self.cols, 0:self.rows].T.reshape(-1, 2)

        template = np.zeros((self.num_points, 3), dtype=np.float32)
        template[:, :2] = grid * self.square_size

        template[self.cols - 1, 0] = template[0, 0] + self.grid_width

        self.logger.debug(
            f"Object template: {self.rows}x{self.cols} points, square={self.square_size}, "
            f"grid_width={self.grid_width}"
        )

        return template

    def replicate(self, template: np.ndarray, num_views: int) -> List[np.ndarray]:
        """Independent copies of the template, one per calibration view."""
        return [template.copy() for _ in range(num_views)]
