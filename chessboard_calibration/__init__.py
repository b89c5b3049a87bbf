"""
Chessboard Camera Calibration

Calibrates a single camera from a fixed set of chessboard photographs using
OpenCV's calibration pipeline.

This package implements:
- Loading of a numbered calibration image set
- Chessboard object point templates with optional measured grid width
- Corner detection with findChessboardCornersSB or findChessboardCorners + cornerSubPix
- Calibration with calibrateCameraRO, including object point release
- Result validation, logging and OpenCV FileStorage output
"""

__version__ = "1.0.0"
__author__ = "Chessboard Calibration Team"

from .calibration import ObjectPointBuilder, ChessboardCornerDetector, CameraCalibrator, CalibrationValidator
from .preprocessing import ImageLoader
from .reporting import CalibrationReporter
from .pipeline import CalibrationPipeline
from .data_models import CalibrationImage, DetectionResult, CalibrationResult, CalibrationRun

__all__ = [
    # Calibration
    'ObjectPointBuilder', 'ChessboardCornerDetector', 'CameraCalibrator', 'CalibrationValidator',
    # Loading
    'ImageLoader',
    # Reporting
    'CalibrationReporter',
    # Pipeline
    'CalibrationPipeline',
    # Data Models
    'CalibrationImage', 'DetectionResult', 'CalibrationResult', 'CalibrationRun'
]
