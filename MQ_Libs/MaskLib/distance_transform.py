"""
Exact Euclidean distance transform (Meijster's two-pass algorithm).

For every pixel the transform returns the Euclidean distance to the nearest
"background" pixel. Cost is linear in the pixel count regardless of any
radius the caller later compares against.

Phase 1 (column pass) computes, per column, the vertical distance to the
nearest background pixel. Phase 2 (row pass) runs the exact 1D transform over
the squared column distances using the lower envelope of parabolas.
Each pass loops over one axis and processes the other as numpy vectors.

Functions:
    edt1d: Exact 1D squared distance transform of one line
    compute_distance: Distance field from a boolean background indicator
    compute_distance_from_buffer: Distance field from a byte-offset predicate
    compute_distance_fields: Inside and outside fields of a selection mask
"""

import logging
import math
from typing import Callable, List, NamedTuple, Sequence

import numpy as np

from MQ_Libs.constants import CHANNELS, DISTANCE_INF
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class DistanceFields(NamedTuple):
    """
    Distance fields of a selection mask.

    Attributes:
        inside: Distance from each pixel to the nearest unselected pixel
        outside: Distance from each pixel to the nearest selected pixel
    """
    inside: np.ndarray
    outside: np.ndarray


def edt1d(f: Sequence[float]) -> List[float]:
    """
    Exact 1D squared Euclidean distance transform.

    Args:
        f: Squared distances from the column pass (one row)

    Returns:
        List of squared distances, same length as f
    """
    n = len(f)
    if n == 0:
        return []

    # v[k] is the apex of the k-th parabola of the lower envelope,
    # z[k]..z[k+1] the range where it is the minimum.
    v = [0] * n
    z = [0.0] * (n + 1)
    k = 0
    z[0] = -math.inf
    z[1] = math.inf

    for q in range(1, n):
        fq = f[q] + q * q
        s = (fq - (f[v[k]] + v[k] * v[k])) / (2 * q - 2 * v[k])
        while s <= z[k]:
            k -= 1
            s = (fq - (f[v[k]] + v[k] * v[k])) / (2 * q - 2 * v[k])
        k += 1
        v[k] = q
        z[k] = s
        z[k + 1] = math.inf

    d = [0.0] * n
    k = 0
    for q in range(n):
        while z[k + 1] < q:
            k += 1
        dx = q - v[k]
        d[q] = dx * dx + f[v[k]]
    return d


def _edt_rows(f: np.ndarray) -> np.ndarray:
    """
    Row-batched form of edt1d: runs the parabola envelope over every row of
    f (height, width) at once, one numpy step per column.

    Returns:
        float64 array of squared distances, same shape as f
    """
    height, width = f.shape
    rows = np.arange(height)
    v = np.zeros((height, width), dtype=np.intp)
    z = np.empty((height, width + 1), dtype=np.float64)
    z[:, 0] = -np.inf
    z[:, 1] = np.inf
    k = np.zeros(height, dtype=np.intp)

    for q in range(1, width):
        fq = f[:, q] + q * q
        s = np.empty(height, dtype=np.float64)
        pending = np.ones(height, dtype=bool)
        # Pop apexes row by row until each row's intersection clears z[k].
        while True:
            vk = v[rows, k]
            candidate = (fq - (f[rows, vk] + vk * vk)) / (2 * q - 2 * vk)
            s = np.where(pending, candidate, s)
            pop = pending & (s <= z[rows, k])
            if not pop.any():
                break
            k -= pop.astype(np.intp)
            pending = pop
        k += 1
        v[rows, k] = q
        z[rows, k] = s
        z[rows, k + 1] = np.inf

    d = np.empty((height, width), dtype=np.float64)
    k = np.zeros(height, dtype=np.intp)
    for q in range(width):
        advance = z[rows, k + 1] < q
        while advance.any():
            k += advance.astype(np.intp)
            advance = z[rows, k + 1] < q
        vk = v[rows, k]
        d[:, q] = (q - vk) ** 2 + f[rows, vk]
    return d


def compute_distance(background: np.ndarray) -> np.ndarray:
    """
    Compute the exact Euclidean distance to the nearest background pixel.

    Args:
        background: Boolean array (height, width), True where distance is 0

    Returns:
        float32 array (height, width). Pixels with no background anywhere in
        the image get a large finite sentinel (about 1e9).

    Raises:
        ValueError: If background is not a non-empty 2D array
    """
    bg = np.asarray(background, dtype=bool)
    if bg.ndim != 2 or bg.size == 0:
        raise ValueError(f"Background indicator must be a non-empty 2D array, got shape {bg.shape}")

    height, width = bg.shape

    # Phase 1: column scan, all columns at once
    g = np.empty((height, width), dtype=np.float64)
    g[0] = np.where(bg[0], 0.0, DISTANCE_INF)
    for y in range(1, height):
        g[y] = np.where(bg[y], 0.0, g[y - 1] + 1.0)
    for y in range(height - 2, -1, -1):
        np.minimum(g[y], g[y + 1] + 1.0, out=g[y])
    g *= g

    # Phase 2: row scan with the parabola envelope, all rows at once
    return np.sqrt(_edt_rows(g)).astype(np.float32)


def compute_distance_from_buffer(
    buffer: PixelBuffer,
    is_background: Callable[[int], bool],
) -> np.ndarray:
    """
    Distance field from a predicate over raw RGBA byte offsets.

    Args:
        buffer: Pixel buffer the predicate indexes into
        is_background: Called with the byte offset of each pixel
                       (pixel_index * 4); True marks a background pixel

    Returns:
        float32 array (height, width) of Euclidean distances
    """
    count = buffer.width * buffer.height
    indicator = np.fromiter(
        (bool(is_background(index * CHANNELS)) for index in range(count)),
        dtype=bool,
        count=count,
    )
    return compute_distance(indicator.reshape(buffer.height, buffer.width))


def _inside_distance(selected: np.ndarray, at_canvas_bounds: bool) -> np.ndarray:
    if not at_canvas_bounds:
        return compute_distance(~selected)
    # A one-pixel unselected frame makes the canvas edge act as a boundary.
    framed = np.pad(selected, 1, mode="constant", constant_values=False)
    return compute_distance(~framed)[1:-1, 1:-1].copy()


def inside_distance(mask: PixelBuffer, at_canvas_bounds: bool = True) -> np.ndarray:
    """Distance from each pixel to the nearest unselected pixel."""
    return _inside_distance(mask.selected(), at_canvas_bounds)


def outside_distance(mask: PixelBuffer) -> np.ndarray:
    """Distance from each pixel to the nearest selected pixel."""
    return compute_distance(mask.selected())


def compute_distance_fields(mask: PixelBuffer, at_canvas_bounds: bool = True) -> DistanceFields:
    """
    Compute both inside and outside distance fields for a mask.

    Args:
        mask: Selection mask (selected where alpha > 127)
        at_canvas_bounds: Treat the area beyond the canvas edge as unselected
                          when measuring the inside field

    Returns:
        DistanceFields(inside, outside)
    """
    selected = mask.selected()
    logger.debug(f"Computing distance fields for {mask.width}x{mask.height} mask")
    return DistanceFields(
        inside=_inside_distance(selected, at_canvas_bounds),
        outside=compute_distance(selected),
    )
