#!/usr/bin/env python3
"""
Chessboard Generator

Generates a chessboard calibration target for printing and, optionally, a
synthetic set of calibration views rendered with a known camera.
"""

import argparse
import logging

import cv2

from chessboard_calibration.utils.config_manager import ConfigManager
from chessboard_calibration.utils.synthetic_board import ChessboardRenderer


def main():
    """Generate chessboard board and synthetic calibration images."""
    parser = argparse.ArgumentParser(
        description="Generate a chessboard calibration board and synthetic calibration views"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default="chessboard.png",
        help="Output file path for the board image"
    )

    parser.add_argument(
        "--square-pixels",
        type=int,
        default=100,
        help="Edge length of a board square in pixels (default: 100)"
    )

    parser.add_argument(
        "--views",
        type=int,
        default=0,
        help="Number of synthetic calibration views to render (default: none)"
    )

    parser.add_argument(
        "--views-dir",
        type=str,
        help="Directory for synthetic views (defaults to images.directory from the config)"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file"
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    config = ConfigManager(args.config) if args.config else ConfigManager()
    renderer = ChessboardRenderer(config, square_pixels=args.square_pixels)

    print("Generating chessboard calibration board...")
    print(f"Inner corners: {renderer.cols}x{renderer.rows}")
    print(f"Square size: {renderer.square_size} (configured unit)")

    cv2.imwrite(args.output, renderer.board_image())
    print(f"\nBoard saved to: {args.output}")

    if args.views > 0:
        image_config = config.get_image_params()
        views_dir = args.views_dir or image_config.get('directory', 'calibration_images')
        paths = renderer.write_image_set(
            views_dir,
            prefix=image_config.get('prefix', 'right'),
            num_views=args.views,
            extension=image_config.get('extension', '.jpg')
        )
        print(f"Wrote {len(paths)} synthetic views to: {views_dir}")

    print("\nCalibration Instructions:")
    print("1. Print the board and mount it on a flat, rigid surface")
    print("2. Measure the distance between the top-left and top-right inner corners")
    print("3. Put that value in calibration.grid_width")
    print("4. Capture images from different angles and distances")


if __name__ == "__main__":
    main()
