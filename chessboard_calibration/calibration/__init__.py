"""
Camera Calibration Module

Implements chessboard corner detection and single-camera calibration with
optional object point release.
"""

from .object_points import ObjectPointBuilder
from .corner_detector import ChessboardCornerDetector
from .camera_calibrator import CameraCalibrator
from .calibration_validator import CalibrationValidator

__all__ = ['ObjectPointBuilder', 'ChessboardCornerDetector', 'CameraCalibrator', 'CalibrationValidator']
