"""
Pytest configuration and fixtures for chessboard calibration tests.
"""

import pytest
import numpy as np
import cv2
from chessboard_calibration.data_models import CalibrationImage, CalibrationResult
from chessboard_calibration.utils.config_manager import ConfigManager
from chessboard_calibration.utils.synthetic_board import ChessboardRenderer


NUM_VIEWS = 13
IMAGE_SIZE = (640, 480)
FOCAL_LENGTH = 800.0


def pytest_configure(config):
    config.addinivalue_line("markers", "property: hypothesis based property tests")


@pytest.fixture
def config_manager():
    """Fixture providing a configuration manager instance."""
    return ConfigManager()


@pytest.fixture
def quiet_config(tmp_path):
    """Configuration that writes its parameter file into the test directory."""
    config = ConfigManager()
    config.set('output.parameters_file', str(tmp_path / "out_camera_parameters.xml"))
    return config


@pytest.fixture(scope="session")
def renderer():
    """Fixture providing a chessboard renderer for the default 6x9 pattern."""
    return ChessboardRenderer(ConfigManager())


@pytest.fixture(scope="session")
def true_camera_matrix(renderer):
    return renderer.camera_matrix(IMAGE_SIZE, FOCAL_LENGTH)


@pytest.fixture(scope="session")
def board_poses(renderer):
    return renderer.default_poses(NUM_VIEWS, IMAGE_SIZE, FOCAL_LENGTH)


@pytest.fixture(scope="session")
def synthetic_views(renderer):
    """Thirteen rendered chessboard views seen by a 800px focal length camera."""
    return renderer.render_views(NUM_VIEWS, IMAGE_SIZE, FOCAL_LENGTH)


@pytest.fixture(scope="session")
def chessboard_image_dir(tmp_path_factory, renderer):
    """Directory holding right00.jpg ... right12.jpg synthetic chessboard views."""
    directory = tmp_path_factory.mktemp("chessboard_views")
    renderer.write_image_set(str(directory), prefix="right", num_views=NUM_VIEWS,
                             image_size=IMAGE_SIZE, focal_length=FOCAL_LENGTH)
    return directory


@pytest.fixture
def blank_image_dir(tmp_path):
    """Directory holding thirteen solid-color (cornerless) images."""
    directory = tmp_path / "blank_views"
    directory.mkdir()
    for i in range(NUM_VIEWS):
        color = (i * 19) % 256
        image = np.full((IMAGE_SIZE[1], IMAGE_SIZE[0], 3), color, dtype=np.uint8)
        cv2.imwrite(str(directory / f"right{i:02d}.jpg"), image)
    return directory


@pytest.fixture(scope="session")
def projected_views(renderer, board_poses, true_camera_matrix):
    """Ideal corner projections for every pose (no image rendering involved)."""
    return [
        renderer.project_corners(rvec, tvec, true_camera_matrix).reshape(-1, 1, 2).astype(np.float32)
        for rvec, tvec in board_poses
    ]


@pytest.fixture
def sample_calibration_result():
    """Fixture providing a plausible calibration result."""
    camera_matrix = np.array([
        [800.0, 0, 320.0],
        [0, 800.0, 240.0],
        [0, 0, 1]
    ], dtype=np.float64)

    return CalibrationResult(
        camera_matrix=camera_matrix,
        distortion_coeffs=np.zeros((8, 1), dtype=np.float64),
        rvecs=[np.zeros((3, 1))],
        tvecs=[np.array([[0.0], [0.0], [1000.0]])],
        reprojection_error=0.12,
        image_size=IMAGE_SIZE,
        fixed_point_index=-1,
        views_used=1,
        flags=0
    )


@pytest.fixture(scope="session")
def synthetic_images(synthetic_views):
    """Synthetic views wrapped as loaded calibration images."""
    return [
        CalibrationImage(index=i, path=f"right{i:02d}.jpg", image=view)
        for i, view in enumerate(synthetic_views)
    ]
