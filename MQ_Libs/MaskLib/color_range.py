"""
Color similarity selection.

Colors are compared with the sum of absolute differences (SAD) over the
R, G, B and A channels. A pixel matches the target color when
SAD <= tolerance * 4, i.e. tolerance is an average per-channel difference.

Functions:
    clamp_tolerance: Clamp a tolerance value into [0, 255]
    sample_color: Read the RGBA color at a pixel
    color_match: Boolean match array for a target color
    color_range: Select every pixel similar to a sampled color
"""

import logging
from typing import Any

import numpy as np

from MQ_Libs.constants import SAD_CHANNEL_WEIGHT, TOLERANCE_MAX, TOLERANCE_MIN
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer, RgbaColor

logger = logging.getLogger(__name__)


def clamp_tolerance(value: Any) -> int:
    """
    Clamp a tolerance into [0, 255].

    Out-of-range values are clamped rather than rejected so interactive tools
    always get a usable value.
    """
    return max(TOLERANCE_MIN, min(TOLERANCE_MAX, int(round(float(value)))))


def sample_color(image: PixelBuffer, x: int, y: int) -> RgbaColor:
    """
    Return the RGBA color at (x, y).

    Raises:
        ValueError: If (x, y) lies outside the image
    """
    x = int(x)
    y = int(y)
    if not (0 <= x < image.width and 0 <= y < image.height):
        raise ValueError(
            f"Sample point ({x}, {y}) outside {image.width}x{image.height} image"
        )
    return image.pixel(x, y)


def color_match(image: PixelBuffer, target: RgbaColor, tolerance: int) -> np.ndarray:
    """
    Compute which pixels match a target color.

    Args:
        image: Source image
        target: RGBA reference color
        tolerance: Per-channel tolerance (clamped to 0-255)

    Returns:
        Boolean array (height, width)
    """
    threshold = clamp_tolerance(tolerance) * SAD_CHANNEL_WEIGHT
    reference = np.asarray(target, dtype=np.int32).reshape(1, 1, 4)
    sad = np.abs(image.data.astype(np.int32) - reference).sum(axis=2)
    return sad <= threshold


def color_range(image: PixelBuffer, x: int, y: int, tolerance: int) -> PixelBuffer:
    """
    Select pixels by color range (non-contiguous).

    Samples the color at (x, y) and selects every pixel in the image whose
    SAD from it is within tolerance * 4, wherever it is.

    Args:
        image: Source image
        x: Sample X coordinate
        y: Sample Y coordinate
        tolerance: Color tolerance (clamped to 0-255)

    Returns:
        Binary mask, 255 where the color matches

    Raises:
        ValueError: If the sample point lies outside the image
    """
    target = sample_color(image, x, y)
    matched = color_match(image, target, tolerance)
    logger.debug(
        f"Color range at ({x}, {y}) target={target} tolerance={clamp_tolerance(tolerance)} "
        f"selected {int(matched.sum())} pixels"
    )
    return PixelBuffer.from_selection(matched)
