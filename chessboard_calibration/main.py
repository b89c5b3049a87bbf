"""
Main entry point for the chessboard camera calibration
"""

import argparse
import logging
import sys

from chessboard_calibration.pipeline import CalibrationPipeline
from chessboard_calibration.utils.config_manager import ConfigManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calibrate a camera from a numbered set of chessboard images"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file"
    )

    parser.add_argument(
        "--image-dir",
        type=str,
        help="Directory containing the calibration images"
    )

    parser.add_argument(
        "--prefix",
        type=str,
        help="File name prefix of the calibration images (e.g. 'right' for right00.jpg)"
    )

    parser.add_argument(
        "--count",
        type=int,
        help="Number of calibration images to load"
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Camera parameter file (.xml, .yaml or .json)"
    )

    parser.add_argument(
        "--overlay-dir",
        type=str,
        help="Directory to write corner detection overlays to"
    )

    parser.add_argument(
        "--display",
        action="store_true",
        help="Show each detection overlay in a window"
    )

    parser.add_argument(
        "--legacy-method",
        action="store_true",
        help="Keep the board rigid instead of releasing the object points"
    )

    parser.add_argument(
        "--classic-detector",
        action="store_true",
        help="Use findChessboardCorners (+ cornerSubPix) instead of findChessboardCornersSB"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def apply_overrides(config: ConfigManager, args: argparse.Namespace) -> None:
    """Copy command line overrides into the configuration."""
    if args.image_dir:
        config.set('images.directory', args.image_dir)
    if args.prefix:
        config.set('images.prefix', args.prefix)
    if args.count is not None:
        config.set('images.count', args.count)
    if args.output:
        config.set('output.parameters_file', args.output)
    if args.overlay_dir:
        config.set('output.overlay_dir', args.overlay_dir)
    if args.display:
        config.set('display.enabled', True)
    if args.legacy_method:
        config.set('calibration.use_new_method', False)
    if args.classic_detector:
        config.set('detection.use_sb_method', False)


def main(argv=None):
    """Main entry point for the calibration pipeline."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # Load configuration
    try:
        config = ConfigManager(args.config)
        apply_overrides(config, args)
        print(f"Loaded configuration from: {config.config_path}")
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading configuration: {e}")
        return 1

    pipeline = CalibrationPipeline(config)
    run = pipeline.run()

    print(pipeline.reporter.format_summary(run))

    if run.calibration is None:
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
