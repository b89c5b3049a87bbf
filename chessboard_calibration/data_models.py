"""
Data Models for Chessboard Calibration

Defines all data structures used throughout the system.
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, List, Optional, Any
import numpy as np


@dataclass
class CalibrationImage:
    """A decoded calibration image and its position in the image set."""
    index: int  # index used in the file name template
    path: str
    image: np.ndarray  # BGR image (h, w, 3)

    @property
    def size(self) -> Tuple[int, int]:
        """Image size as (width, height)."""
        return (self.image.shape[1], self.image.shape[0])


@dataclass
class DetectionResult:
    """Chessboard corners found in a single image."""
    index: int
    found: bool
    corners: np.ndarray  # Nx1x2 float32, N == 0 when nothing was found
    overlay: Optional[np.ndarray]  # detection drawn on a copy of the image; None once released

    @property
    def num_corners(self) -> int:
        return int(self.corners.shape[0])


@dataclass
class CalibrationResult:
    """Camera intrinsics and per-view poses returned by the calibration call."""
    camera_matrix: np.ndarray  # 3x3 intrinsic matrix
    distortion_coeffs: np.ndarray  # 8x1 distortion coefficients
    rvecs: List[np.ndarray]  # per-view rotation vectors
    tvecs: List[np.ndarray]  # per-view translation vectors
    reprojection_error: float  # RMS reprojection error
    image_size: Tuple[int, int]  # (width, height)
    fixed_point_index: int  # -1 when object points were not released
    views_used: int
    flags: int
    new_object_points: Optional[np.ndarray] = None  # Nx3 refined board, new method only

    @property
    def object_points_released(self) -> bool:
        return self.fixed_point_index >= 0


@dataclass
class CalibrationRun:
    """Everything produced by one pass of the calibration pipeline."""
    images: List[CalibrationImage]
    detections: List[DetectionResult]
    found_count: int
    object_points: np.ndarray  # Nx3 board template handed to the calibration call
    calibration: Optional[CalibrationResult] = None
    validation: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        """True when every loaded image produced a full set of corners."""
        return bool(self.images) and self.found_count == len(self.images)
