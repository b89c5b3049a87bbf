"""
Calibration Image Loader

Loads the numbered calibration image set from disk.
"""

import cv2
import numpy as np
from typing import List, Optional
import logging
from pathlib import Path

from ..data_models import CalibrationImage
from ..utils.config_manager import ConfigManager


class ImageLoader:
    """Reads calibration images named <directory>/<prefix><NN><extension>."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize image loader.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        image_config = self.config.get_image_params()

        self.directory = Path(image_config.get('directory', 'calibration_images'))
        self.prefix = image_config.get('prefix', 'right')
        self.extension = image_config.get('extension', '.jpg')
        self.count = int(image_config.get('count', 13))

        self.logger.debug(f"Image loader initialized: {self.count} images from {self.directory}")

    def build_path(self, index: int) -> Path:
        """Path of the image with the given index."""
        return self.directory / f"{self.prefix}{index:02d}{self.extension}"

    def load_image(self, path: Path) -> Optional[np.ndarray]:
        """
        Decode a single image.

        Args:
            path: Image file path

        Returns:
            BGR image, or None if the file is missing or cannot be decoded
        """
        image = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if image is None or image.size == 0:
            return None
        return image

    def load_all(self) -> List[CalibrationImage]:
        """
        Load every image of the set, skipping the ones that fail to decode.

        Returns:
            Decoded images in index order
        """
        images = []

        for index in range(self.count):
            path = self.build_path(index)
            image = self.load_image(path)

            if image is None:
                self.logger.warning(f"cannot load image file : {path}")
                continue

            images.append(CalibrationImage(index=index, path=str(path), image=image))
            self.logger.debug(f"Loaded {path}: {image.shape[1]}x{image.shape[0]}")

        self.logger.info(f"Loaded {len(images)}/{self.count} calibration images from {self.directory}")

        return images
