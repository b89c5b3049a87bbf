"""
Utility Functions and Helpers

Common utilities for the calibration pipeline.
"""

from .config_manager import ConfigManager
from .cv_flags import resolve_flags
from .synthetic_board import ChessboardRenderer

__all__ = ['ConfigManager', 'resolve_flags', 'ChessboardRenderer']
