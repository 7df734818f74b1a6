"""
Pytest configuration and shared fixtures for Marquee tests.

This module provides mask and image builders used across multiple
test modules.
"""

import numpy as np
import pytest

from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer


def make_mask(width, height, selected_cells=()):
    """
    Build a binary mask with the given (x, y) cells selected.

    Args:
        width: Mask width
        height: Mask height
        selected_cells: Iterable of (x, y) coordinates to select

    Returns:
        PixelBuffer mask
    """
    selected = np.zeros((height, width), dtype=bool)
    for x, y in selected_cells:
        selected[y, x] = True
    return PixelBuffer.from_selection(selected)


def make_block_mask(width, height, left, top, block_width, block_height):
    """Binary mask with one rectangular block selected."""
    selected = np.zeros((height, width), dtype=bool)
    selected[top:top + block_height, left:left + block_width] = True
    return PixelBuffer.from_selection(selected)


def make_image(width, height, background, rects=()):
    """
    Build an RGBA image filled with background and painted rectangles.

    Args:
        background: (R, G, B, A) fill color
        rects: Iterable of (left, top, width, height, color)
    """
    data = np.zeros((height, width, 4), dtype=np.uint8)
    data[:, :] = background
    for left, top, rect_width, rect_height, color in rects:
        data[top:top + rect_height, left:left + rect_width] = color
    return PixelBuffer(width, height, data)


@pytest.fixture
def block_mask():
    """10x10 mask with a 6x6 block selected at (2, 2)."""
    return make_block_mask(10, 10, 2, 2, 6, 6)


@pytest.fixture
def rect_image():
    """
    12x10 image: dark background with a uniform red 5x4 rectangle at (3, 2).
    """
    return make_image(
        12, 10,
        (10, 20, 30, 255),
        [(3, 2, 5, 4, (200, 50, 50, 255))],
    )


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]
