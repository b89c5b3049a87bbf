"""
Image Loading Module

Reads the numbered calibration image set from disk.
"""

from .image_loader import ImageLoader

__all__ = ['ImageLoader']
