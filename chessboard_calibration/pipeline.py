"""
Chessboard Calibration Pipeline

Load images -> build object points -> detect corners per image -> calibrate once -> report.
"""

import cv2
import numpy as np
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

from .calibration import (
    CalibrationValidator, CameraCalibrator, ChessboardCornerDetector, ObjectPointBuilder
)
from .data_models import CalibrationImage, CalibrationRun, DetectionResult
from .preprocessing import ImageLoader
from .reporting import CalibrationReporter
from .utils.config_manager import ConfigManager


class CalibrationPipeline:
    """Runs a single camera calibration over a numbered chessboard image set."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize calibration pipeline.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        self.loader = ImageLoader(self.config)
        self.point_builder = ObjectPointBuilder(self.config)
        self.detector = ChessboardCornerDetector(self.config)
        self.calibrator = CameraCalibrator(self.config)
        self.validator = CalibrationValidator(self.config)
        self.reporter = CalibrationReporter(self.config)

        calib_config = self.config.get_calibration_params()
        self.exclude_failed = bool(calib_config.get('exclude_failed_detections', True))
        self.min_views = int(calib_config.get('min_views', 1))

        display_config = self.config.get_display_params()
        self.display_enabled = bool(display_config.get('enabled', False))
        self.window_name = display_config.get('window_name', 'Calibration')
        self.display_delay_ms = int(display_config.get('delay_ms', 200))

        overlay_dir = self.config.get_output_params().get('overlay_dir')
        self.overlay_dir = Path(overlay_dir) if overlay_dir else None

    @property
    def settings(self) -> Dict[str, Any]:
        """Method selection values reported alongside the calibration result."""
        return {
            'USE_FIND_CHESSBOARD_CORNERS_SB_METHOD': self.detector.use_sb_method,
            'findCornersFlags': self.detector.find_flags,
            'ENABLE_CORNER_SUB_PIX': self.detector.enable_corner_subpix,
            'USE_NEW_CALIBRATION_METHOD': self.point_builder.use_new_method,
            'calibrationFlags': self.calibrator.flags,
        }

    def _show_detection(self, result: DetectionResult) -> None:
        if self.overlay_dir is not None:
            self.overlay_dir.mkdir(parents=True, exist_ok=True)
            out_path = self.overlay_dir / f"{self.loader.prefix}{result.index:02d}_corners.jpg"
            cv2.imwrite(str(out_path), result.overlay)

        if self.display_enabled:
            cv2.imshow(self.window_name, result.overlay)
            cv2.waitKey(self.display_delay_ms)

    def select_views(self,
                     detections: List[DetectionResult],
                     template: np.ndarray) -> Dict[str, List[np.ndarray]]:
        """
        Pair the object template with the detected corners of each view.

        Failed detections are dropped unless exclude_failed_detections is off, in
        which case their empty corner sets are passed through unchanged.
        """
        if self.exclude_failed:
            used = [d for d in detections if d.found]
        else:
            used = list(detections)

        return {
            'object_points': self.point_builder.replicate(template, len(used)),
            'image_points': [d.corners for d in used],
        }

    def run(self, images: Optional[List[CalibrationImage]] = None) -> CalibrationRun:
        """
        Run the full calibration sequence.

        Args:
            images: Pre-loaded images; loaded from the configured directory if None

        Returns:
            Calibration run; its calibration is None when there were too few detections
        """
        if images is None:
            images = self.loader.load_all()

        template = self.point_builder.build_template()

        try:
            detections = self.detector.detect_all(images, on_result=self._show_detection)
        finally:
            if self.display_enabled:
                cv2.destroyWindow(self.window_name)

        found_count = sum(1 for d in detections if d.found)
        run = CalibrationRun(
            images=images,
            detections=detections,
            found_count=found_count,
            object_points=template
        )

        if found_count < self.min_views:
            self.logger.warning(
                f"Skipping calibration: {found_count} successful detections, need at least {self.min_views}"
            )
            return run

        self.validator.check_image_sizes(images)

        views = self.select_views(detections, template)
        image_size = images[0].size

        run.calibration = self.calibrator.calibrate(
            views['object_points'],
            views['image_points'],
            image_size,
            self.point_builder.fixed_point_index
        )

        per_view_errors = self.calibrator.compute_per_view_errors(
            run.calibration, views['object_points'], views['image_points']
        )
        run.validation = self.validator.validate_intrinsic_calibration(run.calibration, per_view_errors)

        self.reporter.report(run, self.settings, self.point_builder.board_corner_indices)

        return run
