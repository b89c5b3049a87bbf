"""
Chessboard Corner Detector

Finds the inner corners of a chessboard pattern with either findChessboardCornersSB
or findChessboardCorners followed by optional sub-pixel refinement.
"""

import cv2
import numpy as np
from typing import Callable, Tuple, List, Optional
import logging

from ..data_models import CalibrationImage, DetectionResult
from ..utils.config_manager import ConfigManager
from ..utils.cv_flags import resolve_flags


DEFAULT_SB_FLAGS = ['CALIB_CB_NORMALIZE_IMAGE', 'CALIB_CB_EXHAUSTIVE', 'CALIB_CB_ACCURACY']
DEFAULT_CLASSIC_FLAGS = ['CALIB_CB_ADAPTIVE_THRESH', 'CALIB_CB_NORMALIZE_IMAGE', 'CALIB_CB_FAST_CHECK']


class ChessboardCornerDetector:
    """Detects chessboard corners and draws detection overlays."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize chessboard corner detector.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        pattern_config = self.config.get_pattern_params()
        detection_config = self.config.get_detection_params()

        # OpenCV expects (points per row, points per column)
        self.pattern_size = (
            int(pattern_config.get('cols', 9)),
            int(pattern_config.get('rows', 6))
        )

        # The SB detector is more accurate than findChessboardCorners + cornerSubPix
        self.use_sb_method = bool(detection_config.get('use_sb_method', True))
        self.enable_corner_subpix = bool(detection_config.get('enable_corner_subpix', True))

        if self.use_sb_method:
            self.find_flags = resolve_flags(detection_config.get('sb_flags', DEFAULT_SB_FLAGS))
        else:
            self.find_flags = resolve_flags(detection_config.get('classic_flags', DEFAULT_CLASSIC_FLAGS))

        win_size = int(detection_config.get('subpix_window', 11))
        self.subpix_window = (win_size, win_size)
        self.subpix_criteria = (
            cv2.TERM_CRITERIA_EPS + cv2.TERM_CRITERIA_COUNT,
            int(detection_config.get('subpix_max_iter', 30)),
            float(detection_config.get('subpix_epsilon', 0.0001))
        )

        method = "findChessboardCornersSB" if self.use_sb_method else "findChessboardCorners"
        self.logger.info(
            f"Corner detector initialized: {self.pattern_size[0]}x{self.pattern_size[1]} pattern, "
            f"{method}, flags={self.find_flags}"
        )

    @property
    def refines_corners(self) -> bool:
        """Sub-pixel refinement only runs with the classic detector."""
        return not self.use_sb_method and self.enable_corner_subpix

    def detect(self, image: np.ndarray) -> Tuple[bool, np.ndarray]:
        """
        Detect chessboard corners in a single image.

        Args:
            image: BGR or grayscale image

        Returns:
            Tuple of (found, corners) where corners is Nx1x2 float32 (N == 0 if nothing was found)
        """
        if self.use_sb_method:
            found, corners = cv2.findChessboardCornersSB(image, self.pattern_size, flags=self.find_flags)
        else:
            found, corners = cv2.findChessboardCorners(image, self.pattern_size, flags=self.find_flags)

        if corners is None:
            corners = np.empty((0, 1, 2), dtype=np.float32)
        else:
            corners = corners.reshape(-1, 1, 2).astype(np.float32)

        found = bool(found)
        if found and self.refines_corners:
            corners = self.refine_corners(corners, image)

        return found, corners

    def refine_corners(self, corners: np.ndarray, image: np.ndarray) -> np.ndarray:
        """
        Refine corner positions to sub-pixel accuracy.

        Args:
            corners: Initial corner positions
            image: Input image

        Returns:
            Refined corner positions (Nx1x2)
        """
        if len(image.shape) == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image

        return cv2.cornerSubPix(
            gray, corners.reshape(-1, 1, 2), self.subpix_window, (-1, -1), self.subpix_criteria
        )

    def draw_overlay(self, image: np.ndarray, corners: np.ndarray, found: bool) -> np.ndarray:
        """
        Draw detected corners on a copy of the image.

        Args:
            image: Source image
            corners: Detected corners
            found: Whether the full pattern was found

        Returns:
            BGR overlay image
        """
        if len(image.shape) == 2:
            overlay = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        else:
            overlay = image.copy()

        if corners.size > 0:
            cv2.drawChessboardCorners(overlay, self.pattern_size, corners, found)

        return overlay

    def process(self, image: np.ndarray, index: int = 0) -> DetectionResult:
        """Detect corners in one image and draw its overlay."""
        found, corners = self.detect(image)
        overlay = self.draw_overlay(image, corners, found)

        return DetectionResult(index=index, found=found, corners=corners, overlay=overlay)

    def detect_all(self,
                   images: List[CalibrationImage],
                   on_result: Optional[Callable[[DetectionResult], None]] = None) -> List[DetectionResult]:
        """
        Detect corners in every calibration image.

        One result is returned per image, also for failed detections, so results
        stay aligned with the image list. Overlays are handed to on_result and
        released afterwards; the returned results keep only the corners.

        Args:
            images: Loaded calibration images
            on_result: Called with each result as soon as it is available

        Returns:
            Detection results in image order
        """
        results = []

        for calib_image in images:
            result = self.process(calib_image.image, calib_image.index)
            self.log_result(result)
            results.append(result)

            if on_result is not None:
                on_result(result)
            result.overlay = None

        found_count = sum(1 for r in results if r.found)
        self.logger.info(f"Found chessboard corners in {found_count}/{len(images)} images")

        if found_count != len(images):
            self.logger.warning("Calibration images are insufficient.")

        return results

    def log_result(self, result: DetectionResult) -> None:
        if result.found:
            self.logger.info(f"{result.index:02d}... ok")
        else:
            self.logger.warning(f"{result.index:02d}... fail")
