"""
Reporting Module

Logs calibration results and writes camera parameter files.
"""

from .reporter import CalibrationReporter

__all__ = ['CalibrationReporter']
