"""
Flood fill algorithm for magic wand selection.

Queue-based (breadth-first) region growing over 4-connected neighbours. The
target color is sampled once at the seed and never re-sampled, so whether a
pixel joins the region depends only on that fixed color and on being
reachable through matching pixels. The result does not depend on the order
in which the queue is processed.
"""

import logging
from collections import deque

import numpy as np

from MQ_Libs.MaskLib.color_range import clamp_tolerance, color_match, sample_color
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def flood_fill(image: PixelBuffer, start_x: int, start_y: int, tolerance: int) -> PixelBuffer:
    """
    Perform flood fill from a starting point.

    Args:
        image: Source image
        start_x: Starting X coordinate
        start_y: Starting Y coordinate
        tolerance: Color tolerance (clamped to 0-255)

    Returns:
        Binary mask, 255 for pixels connected to the seed that match its color

    Raises:
        ValueError: If the start point lies outside the image
    """
    width = image.width
    height = image.height
    start_x = int(start_x)
    start_y = int(start_y)

    target = sample_color(image, start_x, start_y)
    matches = color_match(image, target, tolerance).ravel()
    selected = np.zeros(width * height, dtype=bool)

    queue = deque()
    queue.append((start_x, start_y))
    visited = {start_y * width + start_x}

    while queue:
        x, y = queue.popleft()
        index = y * width + x

        if not matches[index]:
            continue

        selected[index] = True

        for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
            if nx < 0 or nx >= width or ny < 0 or ny >= height:
                continue
            neighbour = ny * width + nx
            if neighbour in visited:
                continue
            visited.add(neighbour)
            queue.append((nx, ny))

    logger.debug(
        f"Flood fill from ({start_x}, {start_y}) tolerance={clamp_tolerance(tolerance)} "
        f"selected {int(selected.sum())} pixels"
    )
    return PixelBuffer.from_selection(selected.reshape(height, width))
