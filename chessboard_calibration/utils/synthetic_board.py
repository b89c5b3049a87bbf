"""
Synthetic Chessboard Renderer

Renders printable chessboard images and perspective views of the board as seen
by a pinhole camera with known intrinsics.
"""

import cv2
import numpy as np
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .config_manager import ConfigManager


class ChessboardRenderer:
    """Generates chessboard boards and synthetic calibration views."""

    def __init__(self, config_manager: Optional[ConfigManager] = None, square_pixels: int = 40):
        """
        Initialize chessboard renderer.

        Args:
            config_manager: Configuration manager instance
            square_pixels: Edge length of one board square in the board image
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        pattern_config = self.config.get_pattern_params()

        # Inner corners; the board has one more square than corners in each direction
        self.rows = int(pattern_config.get('rows', 6))
        self.cols = int(pattern_config.get('cols', 9))
        self.square_size = float(pattern_config.get('square_size', 50.0))

        self.square_pixels = square_pixels
        self.margin = square_pixels  # white quiet zone around the board

    def board_image(self) -> np.ndarray:
        """
        Render the chessboard as a grayscale image.

        Returns:
            uint8 image with (cols + 1) x (rows + 1) squares and a white margin
        """
        sp = self.square_pixels
        width = (self.cols + 1) * sp + 2 * self.margin
        height = (self.rows + 1) * sp + 2 * self.margin

        board = np.full((height, width), 255, dtype=np.uint8)
        for r in range(self.rows + 1):
            for c in range(self.cols + 1):
                if (r + c) % 2 == 0:
                    y0 = self.margin + r * sp
                    x0 = self.margin + c * sp
                    board[y0:y0 + sp, x0:x0 + sp] = 0

        return board

    def _board_to_plane(self) -> np.ndarray:
        """Homography from board image pixels to board plane units (origin at the first inner corner)."""
        scale = self.square_size / self.square_pixels
        origin = self.margin + self.square_pixels - 0.5
        return np.array([
            [scale, 0, -origin * scale],
            [0, scale, -origin * scale],
            [0, 0, 1]
        ], dtype=np.float64)

    def camera_matrix(self, image_size: Tuple[int, int], focal_length: float = 800.0) -> np.ndarray:
        """Pinhole camera matrix with the principal point at the image center (pixel-center convention)."""
        width, height = image_size
        return np.array([
            [focal_length, 0, (width - 1) / 2.0],
            [0, focal_length, (height - 1) / 2.0],
            [0, 0, 1]
        ], dtype=np.float64)

    def default_poses(self,
                      num_views: int,
                      image_size: Tuple[int, int],
                      focal_length: float = 800.0,
                      max_tilt_degrees: float = 25.0) -> List[Tuple[np.ndarray, np.ndarray]]:
        """
        Board poses spread around the camera axis.

        Args:
            num_views: Number of poses
            image_size: (width, height) of the rendered views
            focal_length: Focal length in pixels
            max_tilt_degrees: Largest tilt of the board plane

        Returns:
            List of (rvec, tvec) pairs
        """
        board_width = (self.cols + 1) * self.square_size
        distance = focal_length * board_width / (0.55 * image_size[0])
        center = np.array([(self.cols - 1) * self.square_size / 2.0,
                           (self.rows - 1) * self.square_size / 2.0,
                           0.0])

        poses = []
        for i in range(num_views):
            phase = 2.0 * np.pi * i / max(num_views, 1)
            ax = np.radians(max_tilt_degrees * np.sin(phase))
            ay = np.radians(max_tilt_degrees * np.cos(phase))
            az = np.radians(5.0 * ((i % 3) - 1))

            rx, _ = cv2.Rodrigues(np.array([ax, 0.0, 0.0]))
            ry, _ = cv2.Rodrigues(np.array([0.0, ay, 0.0]))
            rz, _ = cv2.Rodrigues(np.array([0.0, 0.0, az]))
            rotation = rx @ ry @ rz

            offset = np.array([0.04 * distance * np.cos(phase), 0.04 * distance * np.sin(phase), distance])
            tvec = offset - rotation @ center
            rvec, _ = cv2.Rodrigues(rotation)

            poses.append((rvec.reshape(3), tvec.reshape(3)))

        return poses

    def render_view(self,
                    rvec: np.ndarray,
                    tvec: np.ndarray,
                    camera_matrix: np.ndarray,
                    image_size: Tuple[int, int]) -> np.ndarray:
        """
        Render the board seen from a camera.

        Args:
            rvec: Board rotation (Rodrigues vector)
            tvec: Board translation
            camera_matrix: 3x3 camera matrix
            image_size: (width, height) of the output

        Returns:
            BGR image of the projected board on a white background
        """
        rotation, _ = cv2.Rodrigues(np.asarray(rvec, dtype=np.float64))
        extrinsic = np.column_stack([rotation[:, 0], rotation[:, 1], np.asarray(tvec, dtype=np.float64)])
        homography = camera_matrix @ extrinsic @ self._board_to_plane()

        view = cv2.warpPerspective(
            self.board_image(), homography, image_size,
            flags=cv2.INTER_LINEAR, borderMode=cv2.BORDER_CONSTANT, borderValue=255
        )
        return cv2.cvtColor(view, cv2.COLOR_GRAY2BGR)

    def project_corners(self,
                        rvec: np.ndarray,
                        tvec: np.ndarray,
                        camera_matrix: np.ndarray) -> np.ndarray:
        """Ideal image positions of the inner corners (Nx2, row-major)."""
        grid = np.mgrid[0:self.cols, 0:self.rows].T.reshape(-1, 2) * self.square_size
        points = np.column_stack([grid, np.zeros(len(grid))]).astype(np.float64)
        projected, _ = cv2.projectPoints(points, rvec, tvec, camera_matrix, np.zeros(5))
        return projected.reshape(-1, 2)

    def render_views(self,
                     num_views: int,
                     image_size: Tuple[int, int] = (640, 480),
                     focal_length: float = 800.0) -> List[np.ndarray]:
        """Render num_views perspective views with default poses."""
        camera_matrix = self.camera_matrix(image_size, focal_length)
        return [
            self.render_view(rvec, tvec, camera_matrix, image_size)
            for rvec, tvec in self.default_poses(num_views, image_size, focal_length)
        ]

    def write_image_set(self,
                        directory: str,
                        prefix: str = "right",
                        num_views: int = 13,
                        extension: str = ".jpg",
                        image_size: Tuple[int, int] = (640, 480),
                        focal_length: float = 800.0) -> List[Path]:
        """
        Write a numbered synthetic calibration set (<prefix><NN><extension>).

        Returns:
            Paths of the written images
        """
        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)

        paths = []
        for index, view in enumerate(self.render_views(num_views, image_size, focal_length)):
            path = out_dir / f"{prefix}{index:02d}{extension}"
            if not cv2.imwrite(str(path), view):
                raise RuntimeError(f"Failed to write image: {path}")
            paths.append(path)

        self.logger.info(f"Wrote {len(paths)} synthetic chessboard views to {out_dir}")
        return paths
