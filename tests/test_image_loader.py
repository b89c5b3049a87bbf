"""
Tests for the calibration image loader
"""

import logging

import pytest
import numpy as np
import cv2

from chessboard_calibration.preprocessing.image_loader import ImageLoader


class TestImageLoader:
    """Test suite for image loading."""

    @pytest.fixture
    def image_dir(self, tmp_path):
        """Ten images of which 0, 4 and 7 are missing and 5 is corrupt."""
        for i in range(10):
            if i in (0, 4, 7):
                continue
            path = tmp_path / f"right{i:02d}.jpg"
            if i == 5:
                path.write_bytes(b"this is not a jpeg")
            else:
                image = np.full((48, 64, 3), i * 20, dtype=np.uint8)
                cv2.imwrite(str(path), image)
        return tmp_path

    @pytest.fixture
    def loader(self, config_manager, image_dir):
        config_manager.set('images.directory', str(image_dir))
        config_manager.set('images.count', 10)
        return ImageLoader(config_manager)

    def test_build_path(self, loader, image_dir):
        assert loader.build_path(3) == image_dir / "right03.jpg"
        assert loader.build_path(12).name == "right12.jpg"

    def test_skips_missing_and_corrupt_images(self, loader):
        images = loader.load_all()

        assert len(images) == 6
        assert [img.index for img in images] == [1, 2, 3, 6, 8, 9]

    def test_preserves_image_content(self, loader):
        images = loader.load_all()

        for img in images:
            assert img.image.shape == (48, 64, 3)
            assert img.path.endswith(f"right{img.index:02d}.jpg")
            # JPEG is lossy, but a flat image stays close to its value
            assert abs(float(img.image.mean()) - img.index * 20) < 3

    def test_logs_warning_per_failed_image(self, loader, caplog):
        with caplog.at_level(logging.WARNING):
            loader.load_all()

        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(messages) == 4
        assert all(m.startswith("cannot load image file : ") for m in messages)

    def test_empty_directory(self, config_manager, tmp_path):
        config_manager.set('images.directory', str(tmp_path / "nothing_here"))
        loader = ImageLoader(config_manager)

        assert loader.load_all() == []

    def test_load_image_missing(self, loader, tmp_path):
        assert loader.load_image(tmp_path / "nope.jpg") is None
