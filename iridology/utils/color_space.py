"""
Color Space Conversion Utilities

RGB ↔ HSV conversion helpers used by the colour classifier.
All inputs are normalized RGB in 0~1; hue is returned in degrees (0~360).
"""

from typing import Tuple

import numpy as np


def rgb_to_hsv(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """
    Convert a single normalized RGB triple to HSV.

    Args:
        r: Red channel (0~1)
        g: Green channel (0~1)
        b: Blue channel (0~1)

    Returns:
        (hue, saturation, value): hue in degrees (0~360), saturation and value in 0~1

    Example:
        >>> rgb_to_hsv(0.0, 0.0, 1.0)
        (240.0, 1.0, 1.0)
        >>> rgb_to_hsv(0.5, 0.5, 0.5)
        (0.0, 0.0, 0.5)
    """
    max_c = max(r, g, b)
    min_c = min(r, g, b)
    delta = max_c - min_c

    hue = 0.0
    if delta != 0:
        if max_c == r:
            hue = 60.0 * (((g - b) / delta) % 6)
        elif max_c == g:
            hue = 60.0 * (((b - r) / delta) + 2)
        else:
            hue = 60.0 * (((r - g) / delta) + 4)
    if hue < 0:
        hue += 360.0

    saturation = 0.0 if max_c == 0 else delta / max_c
    return float(hue), float(saturation), float(max_c)


def rgb_array_to_hsv(rgb: np.ndarray) -> np.ndarray:
    """
    Vectorized RGB → HSV for an (N, 3) array of normalized RGB values.

    Same formula as ``rgb_to_hsv``; OpenCV's uint8 HSV (hue 0~180) is not used
    so that per-pixel and mean-colour classification share identical bands.

    Returns:
        (N, 3) float array of (hue_deg, saturation, value)
    """
    rgb = np.asarray(rgb, dtype=np.float64).reshape(-1, 3)
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    max_c = rgb.max(axis=1)
    min_c = rgb.min(axis=1)
    delta = max_c - min_c
    safe_delta = np.where(delta == 0, 1.0, delta)

    hue = np.zeros_like(max_c)
    is_r = (max_c == r) & (delta != 0)
    is_g = (max_c == g) & (delta != 0) & ~is_r
    is_b = (delta != 0) & ~is_r & ~is_g
    hue[is_r] = 60.0 * (((g - b)[is_r] / safe_delta[is_r]) % 6)
    hue[is_g] = 60.0 * (((b - r)[is_g] / safe_delta[is_g]) + 2)
    hue[is_b] = 60.0 * (((r - g)[is_b] / safe_delta[is_b]) + 4)
    hue = np.where(hue < 0, hue + 360.0, hue)

    saturation = np.where(max_c == 0, 0.0, delta / np.where(max_c == 0, 1.0, max_c))
    return np.stack([hue, saturation, max_c], axis=1)


def hue_difference(h1: float, h2: float) -> float:
    """Absolute hue difference in degrees (no wraparound folding)."""
    return abs(float(h1) - float(h2))
