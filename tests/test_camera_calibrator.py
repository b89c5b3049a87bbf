"""
Tests for the camera calibrator
"""

import pytest
import numpy as np
import cv2

from chessboard_calibration.calibration.camera_calibrator import CameraCalibrator
from chessboard_calibration.calibration.object_points import ObjectPointBuilder


class TestCameraCalibrator:
    """Test suite for calibrateCameraRO based calibration."""

    @pytest.fixture
    def calibrator(self, config_manager):
        return CameraCalibrator(config_manager)

    def _views(self, config_manager, projected_views):
        builder = ObjectPointBuilder(config_manager)
        template = builder.build_template()
        return builder, builder.replicate(template, len(projected_views)), list(projected_views)

    def test_default_flags(self, calibrator):
        expected = (
            cv2.CALIB_FIX_PRINCIPAL_POINT |
            cv2.CALIB_FIX_ASPECT_RATIO |
            cv2.CALIB_ZERO_TANGENT_DIST |
            cv2.CALIB_FIX_K4 |
            cv2.CALIB_FIX_K5
        )
        assert calibrator.flags == expected

    def test_initial_camera_matrix_with_fixed_aspect_ratio(self, config_manager):
        config_manager.set('calibration.aspect_ratio', 1.25)
        calibrator = CameraCalibrator(config_manager)

        camera_matrix = calibrator.initial_camera_matrix()

        assert camera_matrix.dtype == np.float64
        assert camera_matrix[0, 0] == 1.25
        assert camera_matrix[1, 1] == 1.0

    def test_initial_camera_matrix_without_fixed_aspect_ratio(self, config_manager):
        config_manager.set('calibration.flags', ['CALIB_ZERO_TANGENT_DIST'])
        config_manager.set('calibration.aspect_ratio', 1.25)
        calibrator = CameraCalibrator(config_manager)

        np.testing.assert_array_equal(calibrator.initial_camera_matrix(), np.eye(3))

    def test_initial_distortion(self, calibrator):
        dist = calibrator.initial_distortion()
        assert dist.shape == (8, 1)
        assert not dist.any()

    def test_legacy_calibration_recovers_intrinsics(self, config_manager, projected_views, true_camera_matrix):
        config_manager.set('calibration.use_new_method', False)
        builder, object_points, image_points = self._views(config_manager, projected_views)
        calibrator = CameraCalibrator(config_manager)

        result = calibrator.calibrate(object_points, image_points, (640, 480), builder.fixed_point_index)

        assert result.fixed_point_index == -1
        assert not result.object_points_released
        assert result.new_object_points is None
        assert result.views_used == len(projected_views)
        assert result.flags & cv2.CALIB_USE_LU
        assert result.camera_matrix.shape == (3, 3)
        assert result.reprojection_error == pytest.approx(0.0, abs=0.05)

        np.testing.assert_allclose(result.camera_matrix[0, 0], true_camera_matrix[0, 0], rtol=0.01)
        np.testing.assert_allclose(result.camera_matrix[1, 1], true_camera_matrix[1, 1], rtol=0.01)
        # Principal point is fixed at the image center
        assert result.camera_matrix[0, 2] == pytest.approx(319.5, abs=0.6)
        assert result.camera_matrix[1, 2] == pytest.approx(239.5, abs=0.6)

    def test_new_method_returns_refined_board(self, config_manager, projected_views, true_camera_matrix):
        config_manager.set('calibration.use_new_method', True)
        builder, object_points, image_points = self._views(config_manager, projected_views)
        calibrator = CameraCalibrator(config_manager)

        result = calibrator.calibrate(object_points, image_points, (640, 480), builder.fixed_point_index)

        assert result.fixed_point_index == 8
        assert result.object_points_released
        assert result.new_object_points.shape == (54, 3)
        assert np.isfinite(result.reprojection_error)
        assert result.reprojection_error < 0.5
        np.testing.assert_allclose(result.camera_matrix[0, 0], true_camera_matrix[0, 0], rtol=0.02)

        # The fixed top-left and top-right points stay where the template put them
        np.testing.assert_allclose(result.new_object_points[0], object_points[0][0], atol=1e-3)
        np.testing.assert_allclose(result.new_object_points[8], object_points[0][8], atol=1e-3)

    def test_per_view_errors(self, config_manager, projected_views):
        config_manager.set('calibration.use_new_method', False)
        builder, object_points, image_points = self._views(config_manager, projected_views)
        calibrator = CameraCalibrator(config_manager)
        result = calibrator.calibrate(object_points, image_points, (640, 480), builder.fixed_point_index)

        errors = calibrator.compute_per_view_errors(result, object_points, image_points)

        assert len(errors) == len(projected_views)
        assert all(0.0 <= e < 0.1 for e in errors)

    def test_empty_view_propagates_opencv_error(self, config_manager, projected_views):
        config_manager.set('calibration.use_new_method', False)
        builder, object_points, image_points = self._views(config_manager, projected_views)
        image_points[3] = np.empty((0, 1, 2), dtype=np.float32)
        calibrator = CameraCalibrator(config_manager)

        with pytest.raises(cv2.error):
            calibrator.calibrate(object_points, image_points, (640, 480), builder.fixed_point_index)
