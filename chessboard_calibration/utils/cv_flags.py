"""
OpenCV flag helpers

Configuration files name OpenCV constants ("CALIB_FIX_K4"); resolve_flags turns
such lists into the integer bitsets the cv2 functions expect.
"""

import cv2
from typing import Iterable


def resolve_flags(names: Iterable[str]) -> int:
    """
    Combine OpenCV constant names into a single flag bitset.

    Args:
        names: OpenCV constant names, e.g. ['CALIB_CB_NORMALIZE_IMAGE']

    Returns:
        Bitwise OR of the named constants

    Raises:
        ValueError: If a name is not an OpenCV constant
    """
    flags = 0
    for name in names or []:
        value = getattr(cv2, name, None)
        if not isinstance(value, int):
            raise ValueError(f"Unknown OpenCV flag: {name}")
        flags |= value
    return flags

