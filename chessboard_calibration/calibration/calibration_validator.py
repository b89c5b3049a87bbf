"""
Calibration Quality Validator

Checks a calibration result for plausibility and flags outlier views.
"""

import numpy as np
import logging
from typing import Dict, Any, List, Optional

from ..data_models import CalibrationImage, CalibrationResult
from ..utils.config_manager import ConfigManager


class CalibrationValidator:
    """Validates intrinsic calibration quality metrics against configured thresholds."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize calibration validator.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        validation_config = self.config.get_validation_params()

        self.max_reprojection_error = float(validation_config.get('max_reprojection_error', 1.0))  # pixels
        self.min_focal_length = float(validation_config.get('min_focal_length', 100))  # pixels
        self.max_focal_length = float(validation_config.get('max_focal_length', 5000))
        self.max_distortion_k1 = float(validation_config.get('max_distortion_k1', 1.0))
        self.outlier_factor = float(validation_config.get('outlier_factor', 3.0))

    def check_image_sizes(self, images: List[CalibrationImage]) -> bool:
        """
        Check that every calibration image has the same resolution.

        The calibration call is sized from the first image, so a mixed set only
        produces a warning here.
        """
        sizes = {img.size for img in images}
        if len(sizes) > 1:
            self.logger.warning(f"Calibration images have mixed resolutions: {sorted(sizes)}")
            return False
        return True

    def validate_intrinsic_calibration(self,
                                       result: CalibrationResult,
                                       per_view_errors: Optional[List[float]] = None) -> Dict[str, Any]:
        """
        Validate intrinsic calibration quality.

        Args:
            result: Calibration result to validate
            per_view_errors: Optional RMS error of each calibration view

        Returns:
            Dictionary with validation results and quality metrics
        """
        results = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'quality_score': 0.0,
            'metrics': {}
        }

        # Reprojection error
        rep_err = result.reprojection_error
        results['metrics']['reprojection_error'] = rep_err
        if not np.isfinite(rep_err) or rep_err < 0:
            results['is_valid'] = False
            results['errors'].append(f"Invalid reprojection error: {rep_err}")
        elif rep_err > self.max_reprojection_error:
            results['is_valid'] = False
            results['errors'].append(
                f"Reprojection error {rep_err:.4f} > {self.max_reprojection_error} pixels"
            )

        # Camera matrix
        fx = result.camera_matrix[0, 0]
        fy = result.camera_matrix[1, 1]
        cx = result.camera_matrix[0, 2]
        cy = result.camera_matrix[1, 2]

        results['metrics']['focal_length_x'] = fx
        results['metrics']['focal_length_y'] = fy
        results['metrics']['principal_point'] = (cx, cy)

        if fx < self.min_focal_length or fx > self.max_focal_length:
            results['warnings'].append(f"Unusual focal length fx: {fx:.1f} pixels")

        if fy < self.min_focal_length or fy > self.max_focal_length:
            results['warnings'].append(f"Unusual focal length fy: {fy:.1f} pixels")

        aspect_ratio = fx / fy if fy != 0 else float('inf')
        results['metrics']['aspect_ratio'] = aspect_ratio
        if abs(aspect_ratio - 1.0) > 0.1:
            results['warnings'].append(f"Unusual aspect ratio: {aspect_ratio:.3f}")

        image_center_x = result.image_size[0] / 2
        image_center_y = result.image_size[1] / 2

        cx_offset = abs(cx - image_center_x) / image_center_x
        cy_offset = abs(cy - image_center_y) / image_center_y

        results['metrics']['principal_point_offset'] = (cx_offset, cy_offset)

        if cx_offset > 0.2 or cy_offset > 0.2:
            results['warnings'].append(
                f"Principal point far from center: ({cx_offset:.2%}, {cy_offset:.2%})"
            )

        # Distortion
        dist = np.asarray(result.distortion_coeffs).ravel()
        if len(dist) >= 2:
            k1, k2 = dist[0], dist[1]
            results['metrics']['distortion_k1'] = k1
            results['metrics']['distortion_k2'] = k2

            if abs(k1) > self.max_distortion_k1:
                results['warnings'].append(f"High radial distortion k1: {k1:.4f}")

        # Outlier views
        if per_view_errors:
            results['metrics']['per_view_errors'] = list(per_view_errors)
            median_error = float(np.median(per_view_errors))
            outliers = [
                i for i, err in enumerate(per_view_errors)
                if median_error > 0 and err > self.outlier_factor * median_error
            ]
            results['metrics']['outlier_views'] = outliers
            if outliers:
                results['warnings'].append(f"Outlier views (by position): {outliers}")

        # Quality score (0-100)
        quality_score = 100.0
        if np.isfinite(rep_err) and rep_err > 0.1:
            quality_score -= (rep_err - 0.1) * 50
        quality_score -= len(results['warnings']) * 5
        quality_score -= len(results['errors']) * 20

        results['quality_score'] = max(0.0, min(100.0, quality_score))

        if results['is_valid']:
            self.logger.info(f"Intrinsic calibration valid: quality={results['quality_score']:.1f}%")
        else:
            self.logger.error(f"Intrinsic calibration invalid: {len(results['errors'])} errors")

        for warning in results['warnings']:
            self.logger.warning(warning)

        return results
