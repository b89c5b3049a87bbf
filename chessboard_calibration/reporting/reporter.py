"""
Calibration Reporter

Logs calibration results and writes the camera parameter file.
"""

import cv2
import numpy as np
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

from ..data_models import CalibrationRun, CalibrationResult
from ..utils.config_manager import ConfigManager


class CalibrationReporter:
    """Reports calibration results to the log and to an OpenCV FileStorage file."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize calibration reporter.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        output_config = self.config.get_output_params()
        self.parameters_file = output_config.get('parameters_file', 'out_camera_parameters.xml')

    def log_board_corners(self, result: CalibrationResult, corner_indices: List[int]) -> None:
        """Log the refined board corners (only meaningful when object points were released)."""
        if result.new_object_points is None:
            return

        self.logger.info("New board corners: ")
        for index in corner_indices:
            self.logger.info(f"{result.new_object_points[index].tolist()}")

    def log_results(self, result: CalibrationResult, settings: Dict[str, Any]) -> None:
        """
        Log calibration values in a fixed order.

        Args:
            result: Calibration result
            settings: Detection/calibration settings used for the run
        """
        self.logger.info(f"intrinsic: {result.camera_matrix.tolist()}")
        self.logger.info(f"distortion: {result.distortion_coeffs.ravel().tolist()}")
        self.logger.info(f"repErr: {result.reprojection_error}")

        for key, value in settings.items():
            self.logger.info(f"{key}: {value}")

    def write_parameters(self,
                         result: CalibrationResult,
                         settings: Dict[str, Any],
                         output_path: Optional[str] = None) -> Path:
        """
        Write camera parameters to an OpenCV FileStorage file (.xml, .yaml or .json).

        Args:
            result: Calibration result
            settings: Detection/calibration settings used for the run
            output_path: Output file, defaults to the configured parameters file

        Returns:
            Path of the written file

        Raises:
            RuntimeError: If the file can not be opened for writing
        """
        path = Path(output_path or self.parameters_file)

        try:
            fs = cv2.FileStorage(str(path), cv2.FILE_STORAGE_WRITE)
        except cv2.error as e:
            raise RuntimeError(f"File can not be opened: {path} ({e})")

        if not fs.isOpened():
            raise RuntimeError(f"File can not be opened: {path}")

        try:
            fs.write("intrinsic", result.camera_matrix)
            fs.write("distortion", result.distortion_coeffs)
            fs.write("repErr", float(result.reprojection_error))
            for key, value in settings.items():
                fs.write(key, int(value))
            if result.new_object_points is not None:
                fs.write("newObjPoints", result.new_object_points.astype(np.float64))
        finally:
            fs.release()

        self.logger.info(f"Camera parameters saved to {path}")
        return path

    def load_parameters(self, path: str) -> Dict[str, Any]:
        """
        Read camera parameters written by write_parameters.

        Args:
            path: Parameter file path

        Returns:
            Dictionary with 'intrinsic', 'distortion' and 'repErr'
        """
        fs = cv2.FileStorage(str(path), cv2.FILE_STORAGE_READ)
        if not fs.isOpened():
            raise FileNotFoundError(f"Camera parameter file not found: {path}")

        try:
            params = {
                'intrinsic': fs.getNode("intrinsic").mat(),
                'distortion': fs.getNode("distortion").mat(),
                'repErr': fs.getNode("repErr").real(),
            }
        finally:
            fs.release()

        return params

    def report(self,
               run: CalibrationRun,
               settings: Dict[str, Any],
               corner_indices: List[int]) -> Optional[Path]:
        """
        Log the outcome of a run and write the parameter file if one is configured.

        Returns:
            Path of the parameter file, or None when nothing was written
        """
        if run.calibration is None:
            self.logger.warning("No calibration result to report")
            return None

        self.log_board_corners(run.calibration, corner_indices)
        self.log_results(run.calibration, settings)

        if not self.parameters_file:
            return None

        return self.write_parameters(run.calibration, settings)

    def format_summary(self, run: CalibrationRun) -> str:
        """
        Build a human readable summary of a calibration run.

        Args:
            run: Calibration run

        Returns:
            Formatted multi-line report
        """
        report = []
        report.append("=" * 60)
        report.append("CAMERA CALIBRATION REPORT")
        report.append("=" * 60)
        report.append(f"Images loaded:    {len(run.images)}")
        report.append(f"Corners found in: {run.found_count}/{len(run.detections)}")
        report.append("")

        result = run.calibration
        if result is None:
            report.append("Calibration skipped: insufficient detections")
            report.append("=" * 60)
            return "\n".join(report)

        fx, fy = result.camera_matrix[0, 0], result.camera_matrix[1, 1]
        cx, cy = result.camera_matrix[0, 2], result.camera_matrix[1, 2]

        report.append("CAMERA PARAMETERS")
        report.append("-" * 30)
        report.append(f"Image size:         {result.image_size[0]}x{result.image_size[1]}")
        report.append(f"Focal length:       {fx:.2f} x {fy:.2f} pixels")
        report.append(f"Principal point:    ({cx:.2f}, {cy:.2f})")
        report.append(f"Distortion:         {np.round(result.distortion_coeffs.ravel(), 6).tolist()}")
        report.append(f"Reprojection error: {result.reprojection_error:.4f} pixels")
        report.append(f"Views used:         {result.views_used}")
        report.append("")

        if run.validation:
            status = "VALID" if run.validation.get('is_valid') else "INVALID"
            report.append(f"Status: {status} (quality {run.validation.get('quality_score', 0.0):.1f}/100)")
            for error in run.validation.get('errors', []):
                report.append(f"  error: {error}")
            for warning in run.validation.get('warnings', []):
                report.append(f"  warning: {warning}")

        report.append("=" * 60)
        return "\n".join(report)
