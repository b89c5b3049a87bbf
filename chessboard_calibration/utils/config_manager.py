"""
Configuration Management System

Handles loading, validation, and management of calibration parameters.
"""

import copy
import yaml
from typing import Dict, Any, Optional
from pathlib import Path


class ConfigManager:
    """Manages configuration parameters for the chessboard calibration pipeline."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default config.
        """
        self.config_path = config_path or self._get_default_config_path()
        self.config = self._load_config()
        self._validate_config()

    def _get_default_config_path(self) -> str:
        """Get path to default configuration file."""
        package_dir = Path(__file__).parent.parent
        return str(package_dir / "config" / "default_config.yaml")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing configuration file: {e}")
        return config or {}

    def _validate_config(self) -> None:
        """Validate configuration parameters for consistency and feasibility."""
        # Image set
        images = self.config.get('images', {})
        if int(images.get('count', 13)) <= 0:
            raise ValueError("images.count must be positive")

        # Pattern geometry
        pattern = self.config.get('pattern', {})
        rows = int(pattern.get('rows', 6))
        cols = int(pattern.get('cols', 9))
        if rows < 2 or cols < 2:
            raise ValueError("pattern rows and cols must be at least 2")
        if float(pattern.get('square_size', 50.0)) <= 0:
            raise ValueError("pattern.square_size must be positive")

        # Calibration
        calib = self.config.get('calibration', {})
        if float(calib.get('grid_width', 400.0)) <= 0:
            raise ValueError("calibration.grid_width must be positive")
        if float(calib.get('aspect_ratio', 1.0)) <= 0:
            raise ValueError("calibration.aspect_ratio must be positive")
        if int(calib.get('min_views', 1)) < 1:
            raise ValueError("calibration.min_views must be at least 1")

        # Sub-pixel window
        detection = self.config.get('detection', {})
        if int(detection.get('subpix_window', 11)) < 1:
            raise ValueError("detection.subpix_window must be positive")

        # Display pacing
        display = self.config.get('display', {})
        if int(display.get('delay_ms', 200)) < 0:
            raise ValueError("display.delay_ms must not be negative")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'pattern.rows')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'calibration.use_new_method')
            value: Value to set

        Raises:
            ValueError: If the resulting configuration is invalid; the previous
                configuration is kept
        """
        previous = copy.deepcopy(self.config)
        keys = key.split('.')
        config_ref = self.config

        for k in keys[:-1]:
            if k not in config_ref or config_ref[k] is None:
                config_ref[k] = {}
            config_ref = config_ref[k]

        config_ref[keys[-1]] = value

        try:
            self._validate_config()
        except ValueError:
            self.config = previous
            raise

    def save(self, output_path: Optional[str] = None) -> None:
        """
        Save current configuration to file.

        Args:
            output_path: Path to save configuration. If None, overwrites current file.
        """
        save_path = output_path or self.config_path

        with open(save_path, 'w') as file:
            yaml.dump(self.config, file, default_flow_style=False, indent=2)

    def get_image_params(self) -> Dict[str, Any]:
        """Get image set parameters as a dictionary."""
        return self.config.get('images') or {}

    def get_pattern_params(self) -> Dict[str, Any]:
        """Get chessboard pattern parameters as a dictionary."""
        return self.config.get('pattern') or {}

    def get_detection_params(self) -> Dict[str, Any]:
        """Get corner detection parameters as a dictionary."""
        return self.config.get('detection') or {}

    def get_calibration_params(self) -> Dict[str, Any]:
        """Get calibration parameters as a dictionary."""
        return self.config.get('calibration') or {}

    def get_validation_params(self) -> Dict[str, Any]:
        """Get calibration quality thresholds as a dictionary."""
        return self.config.get('validation') or {}

    def get_output_params(self) -> Dict[str, Any]:
        """Get output file parameters as a dictionary."""
        return self.config.get('output') or {}

    def get_display_params(self) -> Dict[str, Any]:
        """Get overlay display parameters as a dictionary."""
        return self.config.get('display') or {}
