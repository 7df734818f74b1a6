"""
Selection mask modification operations.

Pure functions for expanding, contracting, bordering, feathering, smoothing,
inverting and combining selection masks. Every function takes PixelBuffer
masks and returns a new PixelBuffer mask; inputs are never modified.
A pixel is selected when its alpha is above 127.

Expand, contract, border and feather are built on the exact Euclidean
distance transform, so their cost does not depend on the radius. Smooth is a
low-pass filter (three box blur passes) followed by a re-threshold.

Example:
    >>> from MQ_Libs.MaskLib.selection_path import RectSelection, rasterize_selection
    >>> mask = rasterize_selection(RectSelection(10, 10, 40, 30), 64, 64)
    >>> grown = expand_mask(mask, 4)
    >>> soft = feather_mask(grown, 6)
"""

import numpy as np

from MQ_Libs.constants import MASK_SELECTED, SMOOTH_PASSES, SMOOTH_THRESHOLD
from MQ_Libs.MaskLib.distance_transform import (
    compute_distance_fields,
    inside_distance,
    outside_distance,
)
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer, ensure_same_size


def _check_radius(radius: float) -> float:
    radius = float(radius)
    if radius < 0 or not np.isfinite(radius):
        raise ValueError(f"radius must be a finite value >= 0, got {radius}")
    return radius


def _check_int_radius(radius: int) -> int:
    if isinstance(radius, float) and not radius.is_integer():
        raise ValueError(f"radius must be a whole number of pixels, got {radius}")
    radius = int(radius)
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    return radius


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


# ============================================================================
# Invert
# ============================================================================

def invert_mask(mask: PixelBuffer) -> PixelBuffer:
    """Flip the selection: selected pixels become 0, all others 255."""
    return PixelBuffer.from_selection(~mask.selected())


# ============================================================================
# Distance-based operations
# ============================================================================

def expand_mask(mask: PixelBuffer, radius: float) -> PixelBuffer:
    """
    Grow the selection outward by radius pixels.

    A pixel is selected if it lies within Euclidean distance radius of any
    currently selected pixel.

    Args:
        mask: Input selection mask
        radius: Expansion radius in pixels (>= 0)

    Returns:
        New binary mask

    Raises:
        ValueError: If radius is negative
    """
    radius = _check_radius(radius)
    outside = outside_distance(mask)
    return PixelBuffer.from_selection(outside <= radius)


def contract_mask(mask: PixelBuffer, radius: float, at_canvas_bounds: bool = True) -> PixelBuffer:
    """
    Shrink the selection by eroding radius pixels from its boundary.

    A pixel stays selected only if it was selected and its distance to the
    nearest unselected pixel is greater than radius.

    Args:
        mask: Input selection mask
        radius: Contraction radius in pixels (>= 0)
        at_canvas_bounds: Also erode from the canvas edge

    Returns:
        New binary mask

    Raises:
        ValueError: If radius is negative
    """
    radius = _check_radius(radius)
    inside = inside_distance(mask, at_canvas_bounds)
    return PixelBuffer.from_selection(mask.selected() & (inside > radius))


def border_mask(mask: PixelBuffer, radius: float, at_canvas_bounds: bool = True) -> PixelBuffer:
    """
    Select the inward-facing ring of width radius along the selection edge.

    The result is always a subset of the input selection.

    Args:
        mask: Input selection mask
        radius: Border width in pixels (>= 0)
        at_canvas_bounds: Treat the canvas edge as part of the selection edge

    Returns:
        New binary mask

    Raises:
        ValueError: If radius is negative
    """
    radius = _check_radius(radius)
    inside = inside_distance(mask, at_canvas_bounds)
    return PixelBuffer.from_selection(mask.selected() & (inside <= radius))


def feather_mask(mask: PixelBuffer, radius: float, at_canvas_bounds: bool = True) -> PixelBuffer:
    """
    Feather the selection edge with a linear alpha ramp.

    Selected pixels ramp from 0 at the edge up to 255 at radius pixels
    inside; unselected pixels ramp from 255 at the edge down to 0 at radius
    pixels outside. The graded band is therefore about 2 * radius wide and
    straddles the selection boundary.

    Args:
        mask: Input selection mask
        radius: Feather radius in pixels (>= 0). 0 returns the thresholded
                binary mask.
        at_canvas_bounds: Also feather selections that touch the canvas edge

    Returns:
        New graded mask with values in [0, 255]

    Raises:
        ValueError: If radius is negative
    """
    radius = _check_radius(radius)
    selected = mask.selected()
    if radius == 0:
        return PixelBuffer.from_selection(selected)

    fields = compute_distance_fields(mask, at_canvas_bounds)
    inside = fields.inside.astype(np.float64)
    outside = fields.outside.astype(np.float64)

    inner = np.where(
        inside >= radius,
        MASK_SELECTED,
        _round_half_up(inside / radius * MASK_SELECTED),
    )
    outer = np.where(
        outside >= radius,
        0,
        _round_half_up((1.0 - outside / radius) * MASK_SELECTED),
    )
    alpha = np.where(selected, inner, outer)
    return PixelBuffer.from_alpha(alpha)


# ============================================================================
# Smooth
# ============================================================================

def _box_blur_axis(buf: np.ndarray, radius: int, axis: int) -> np.ndarray:
    # Edge padding reproduces clamp(index, 0, dim - 1) sampling.
    pad = [(0, 0), (0, 0)]
    pad[axis] = (radius + 1, radius)
    padded = np.pad(buf, pad, mode="edge")
    sums = np.cumsum(padded, axis=axis)
    kernel_size = 2 * radius + 1
    upper = np.take(sums, range(kernel_size, sums.shape[axis]), axis=axis)
    lower = np.take(sums, range(0, sums.shape[axis] - kernel_size), axis=axis)
    return (upper - lower) / kernel_size


def box_blur(buffer: np.ndarray, width: int, height: int, radius: int) -> np.ndarray:
    """
    Separable sliding-window mean filter (horizontal, then vertical).

    Samples outside the buffer are clamped to the nearest edge pixel.

    Args:
        buffer: width * height float values (flat or (height, width))
        width: Buffer width
        height: Buffer height
        radius: Window radius; kernel size is 2 * radius + 1

    Returns:
        float32 array of shape (height, width)

    Raises:
        ValueError: If the buffer size does not match width * height,
                    or radius is negative
    """
    radius = _check_int_radius(radius)
    values = np.asarray(buffer, dtype=np.float64)
    if values.size != width * height:
        raise ValueError(
            f"Buffer size {values.size} does not match {width}x{height} = {width * height}"
        )
    values = values.reshape(height, width)
    if radius == 0:
        return values.astype(np.float32)

    horizontal = _box_blur_axis(values, radius, axis=1)
    vertical = _box_blur_axis(horizontal, radius, axis=0)
    return vertical.astype(np.float32)


def smooth_mask(mask: PixelBuffer, radius: int) -> PixelBuffer:
    """
    Smooth jagged selection edges.

    Applies three box blur passes (approximating a Gaussian) to the alpha
    channel and re-thresholds at 128. Cost grows with radius, roughly
    3 * 2 * (2r + 1) operations per pixel.

    Args:
        mask: Input selection mask
        radius: Blur radius in whole pixels (>= 0). 0 leaves binary masks
                unchanged.

    Returns:
        New binary mask
    """
    radius = _check_int_radius(radius)
    buf = mask.alpha.astype(np.float32)
    for _ in range(SMOOTH_PASSES):
        buf = box_blur(buf, mask.width, mask.height, radius)
    return PixelBuffer.from_selection(buf > SMOOTH_THRESHOLD)


# ============================================================================
# Combination
# ============================================================================

def mask_union(first: PixelBuffer, second: PixelBuffer) -> PixelBuffer:
    """Pixels selected in either mask."""
    ensure_same_size(first, second)
    return PixelBuffer.from_selection(first.selected() | second.selected())


def mask_subtract(first: PixelBuffer, second: PixelBuffer) -> PixelBuffer:
    """Pixels selected in first but not in second."""
    ensure_same_size(first, second)
    return PixelBuffer.from_selection(first.selected() & ~second.selected())


def mask_intersect(first: PixelBuffer, second: PixelBuffer) -> PixelBuffer:
    """Pixels selected in both masks."""
    ensure_same_size(first, second)
    return PixelBuffer.from_selection(first.selected() & second.selected())


def mask_has_selection(mask: PixelBuffer) -> bool:
    return bool(mask.selected().any())
