"""
Tests for the calibration quality validator
"""

import logging

import pytest
import numpy as np

from chessboard_calibration.calibration.calibration_validator import CalibrationValidator
from chessboard_calibration.data_models import CalibrationImage


class TestCalibrationValidator:
    """Test suite for calibration validation."""

    @pytest.fixture
    def validator(self, config_manager):
        return CalibrationValidator(config_manager)

    def test_valid_result(self, validator, sample_calibration_result):
        results = validator.validate_intrinsic_calibration(sample_calibration_result)

        assert results['is_valid']
        assert results['errors'] == []
        assert 0 <= results['quality_score'] <= 100
        assert results['metrics']['aspect_ratio'] == pytest.approx(1.0)
        assert results['metrics']['focal_length_x'] == 800.0

    def test_high_reprojection_error_invalid(self, validator, sample_calibration_result):
        sample_calibration_result.reprojection_error = 4.0

        results = validator.validate_intrinsic_calibration(sample_calibration_result)

        assert not results['is_valid']
        assert any("Reprojection error" in e for e in results['errors'])

    @pytest.mark.parametrize("error", [float('nan'), float('inf'), -1.0])
    def test_non_finite_or_negative_error_invalid(self, validator, sample_calibration_result, error):
        sample_calibration_result.reprojection_error = error

        results = validator.validate_intrinsic_calibration(sample_calibration_result)

        assert not results['is_valid']
        assert results['quality_score'] <= 80

    def test_warns_on_unusual_parameters(self, validator, sample_calibration_result):
        sample_calibration_result.camera_matrix[0, 0] = 50.0
        sample_calibration_result.camera_matrix[0, 2] = 600.0
        sample_calibration_result.distortion_coeffs[0, 0] = 2.5

        results = validator.validate_intrinsic_calibration(sample_calibration_result)

        warnings = " ".join(results['warnings'])
        assert "Unusual focal length fx" in warnings
        assert "Unusual aspect ratio" in warnings
        assert "Principal point far from center" in warnings
        assert "High radial distortion k1" in warnings

    def test_outlier_views(self, validator, sample_calibration_result):
        per_view = [0.1, 0.12, 0.11, 0.9, 0.1]

        results = validator.validate_intrinsic_calibration(sample_calibration_result, per_view)

        assert results['metrics']['outlier_views'] == [3]
        assert results['metrics']['per_view_errors'] == per_view

    def test_check_image_sizes(self, validator, caplog):
        small = CalibrationImage(0, "a.jpg", np.zeros((480, 640, 3), dtype=np.uint8))
        large = CalibrationImage(1, "b.jpg", np.zeros((720, 1280, 3), dtype=np.uint8))

        assert validator.check_image_sizes([small, small])

        with caplog.at_level(logging.WARNING):
            assert not validator.check_image_sizes([small, large])
        assert any("mixed resolutions" in r.getMessage() for r in caplog.records)
