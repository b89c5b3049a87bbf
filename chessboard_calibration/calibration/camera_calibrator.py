"""
Camera Calibrator

Runs cv2.calibrateCameraRO on the collected chessboard views. When a fixed point
index is given the board's object points are released and refined together with
the intrinsics, which compensates for inaccurately printed targets.
"""

import cv2
import numpy as np
from typing import List, Tuple, Optional
import logging

from ..data_models import CalibrationResult
from ..utils.config_manager import ConfigManager
from ..utils.cv_flags import resolve_flags


DEFAULT_CALIBRATION_FLAGS = [
    'CALIB_FIX_PRINCIPAL_POINT',
    'CALIB_FIX_ASPECT_RATIO',
    'CALIB_ZERO_TANGENT_DIST',
    'CALIB_FIX_K4',
    'CALIB_FIX_K5',
]


class CameraCalibrator:
    """Estimates camera intrinsics from chessboard object/image point pairs."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize camera calibrator.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        calib_config = self.config.get_calibration_params()

        self.flags = resolve_flags(calib_config.get('flags', DEFAULT_CALIBRATION_FLAGS))
        self.aspect_ratio = float(calib_config.get('aspect_ratio', 1.0))

        self.logger.info(f"Camera calibrator initialized: flags={self.flags}")

    def initial_camera_matrix(self) -> np.ndarray:
        """Initial intrinsic guess; fx carries the aspect ratio when it is fixed."""
        camera_matrix = np.eye(3, dtype=np.float64)
        if self.flags & cv2.CALIB_FIX_ASPECT_RATIO:
            camera_matrix[0, 0] = self.aspect_ratio
        return camera_matrix

    def initial_distortion(self) -> np.ndarray:
        return np.zeros((8, 1), dtype=np.float64)

    def calibrate(self,
                  object_points: List[np.ndarray],
                  image_points: List[np.ndarray],
                  image_size: Tuple[int, int],
                  fixed_point_index: int = -1) -> CalibrationResult:
        """
        Find intrinsic and extrinsic camera parameters.

        Inputs are passed to OpenCV as given; errors raised by calibrateCameraRO
        (mismatched or empty point sets, too few views) propagate to the caller.

        Args:
            object_points: Nx3 board points for each view
            image_points: Nx1x2 detected corners for each view
            image_size: (width, height) of the calibration images
            fixed_point_index: Index of the fixed board point, -1 keeps the board rigid

        Returns:
            Calibration result with intrinsics, poses and RMS reprojection error
        """
        self.logger.info(
            f"Starting calibration with {len(object_points)} views, image size {image_size[0]}x{image_size[1]}, "
            f"fixed point {fixed_point_index}"
        )

        flags = self.flags | cv2.CALIB_USE_LU

        rep_err, camera_matrix, dist_coeffs, rvecs, tvecs, refined_points = cv2.calibrateCameraRO(
            object_points,
            image_points,
            image_size,
            fixed_point_index,
            self.initial_camera_matrix(),
            self.initial_distortion(),
            flags=flags
        )

        released = fixed_point_index >= 0
        if released and refined_points is not None and refined_points.size > 0:
            refined_points = refined_points.reshape(-1, 3)
        else:
            refined_points = None

        self.logger.info(f"Calibration completed: RMS error = {rep_err:.4f} pixels")

        return CalibrationResult(
            camera_matrix=camera_matrix,
            distortion_coeffs=dist_coeffs,
            rvecs=list(rvecs),
            tvecs=list(tvecs),
            reprojection_error=float(rep_err),
            image_size=(int(image_size[0]), int(image_size[1])),
            fixed_point_index=fixed_point_index,
            views_used=len(object_points),
            flags=flags,
            new_object_points=refined_points
        )

    def compute_per_view_errors(self,
                                result: CalibrationResult,
                                object_points: List[np.ndarray],
                                image_points: List[np.ndarray]) -> List[float]:
        """
        Compute the RMS reprojection error of every calibration view.

        With released object points the refined board is projected instead of the
        nominal template.

        Args:
            result: Calibration result
            object_points: Object points used for calibration
            image_points: Image points used for calibration

        Returns:
            RMS error per view in pixels
        """
        errors = []

        for i, (obj_pts, img_pts) in enumerate(zip(object_points, image_points)):
            board = result.new_object_points if result.new_object_points is not None else obj_pts

            projected, _ = cv2.projectPoints(
                board.reshape(-1, 3).astype(np.float64),
                result.rvecs[i],
                result.tvecs[i],
                result.camera_matrix,
                result.distortion_coeffs
            )
            diff = img_pts.reshape(-1, 2) - projected.reshape(-1, 2)
            errors.append(float(np.sqrt(np.mean(np.sum(diff ** 2, axis=1)))))

        return errors
