"""
Selection path data model and rasterizer.


A selection path is one of five immutable variants, told apart by their
``type`` discriminant:

- RectSelection ("rect"): axis-aligned box
- OvalSelection ("oval"): ellipse from centre and radii
- LassoSelection ("lasso") / PolygonSelection ("polygon"): closed polygon
  from an ordered point list, valid with at least 3 points
- MaskSelection ("mask"): an already-rasterized selection mask


Functions:
    rasterize_selection: Convert any path to a binary mask of canvas size
    get_selection_bounds: Axis-aligned bounding box of a path
    clamp_bounds: Clip bounds to the canvas, None when empty
    has_selection: Presence check
    has_size: Whether a drawn path is large enough to keep
    contains_point: Hit test
    selection_from_drag: Rect or oval from a drag gesture
"""

import math
from dataclasses import dataclass
from typing import Any, ClassVar, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

from MQ_Libs.constants import (
    MASK_SELECTED,
    MIN_OVAL_RADIUS,
    MIN_POLYGON_POINTS,
    MIN_RECT_SIZE,
    PATH_LASSO,
    PATH_MASK,
    PATH_OVAL,
    PATH_POLYGON,
    PATH_RECT,
    TOOL_OVAL,
    TOOL_RECTANGLE,
)
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer


Point = Tuple[float, float]


class SelectionBounds(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


EMPTY_BOUNDS = SelectionBounds(0, 0, 0, 0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _normalize_point(point: Any) -> Point:
    if isinstance(point, dict):
        return float(point["x"]), float(point["y"])
    x, y = point
    return float(x), float(y)


# ============================================================================
# Path variants
# ============================================================================

@dataclass(frozen=True)
class RectSelection:
    x: float
    y: float
    width: float
    height: float

    type: ClassVar[str] = PATH_RECT


@dataclass(frozen=True)
class OvalSelection:
    cx: float
    cy: float
    rx: float
    ry: float

    type: ClassVar[str] = PATH_OVAL


@dataclass(frozen=True)
class _PointPathSelection:
    points: Tuple[Point, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "points", tuple(_normalize_point(point) for point in self.points)
        )

    @property
    def is_closed_polygon(self) -> bool:
        return len(self.points) >= MIN_POLYGON_POINTS


@dataclass(frozen=True)
class LassoSelection(_PointPathSelection):
    type: ClassVar[str] = PATH_LASSO


@dataclass(frozen=True)
class PolygonSelection(_PointPathSelection):
    type: ClassVar[str] = PATH_POLYGON


@dataclass(frozen=True)
class MaskSelection:
    data: PixelBuffer

    type: ClassVar[str] = PATH_MASK

    def __post_init__(self) -> None:
        if not isinstance(self.data, PixelBuffer):
            raise TypeError(f"MaskSelection requires a PixelBuffer, got {type(self.data)}")


SelectionPath = Union[RectSelection, OvalSelection, LassoSelection, PolygonSelection, MaskSelection]


def _unknown_path(path: Any) -> TypeError:
    return TypeError(f"Unsupported selection path: {type(path)}")


# ============================================================================
# Rasterization
# ============================================================================

def _draw_rect(path: RectSelection, width: int, height: int) -> np.ndarray:
    canvas = Image.new("L", (width, height), 0)
    # Integer coordinates avoid anti-aliased edges.
    x0 = _round_half_up(path.x)
    y0 = _round_half_up(path.y)
    w = _round_half_up(path.width)
    h = _round_half_up(path.height)
    if w > 0 and h > 0:
        ImageDraw.Draw(canvas).rectangle([x0, y0, x0 + w - 1, y0 + h - 1], fill=MASK_SELECTED)
    return np.asarray(canvas)


def _draw_oval(path: OvalSelection, width: int, height: int) -> np.ndarray:
    if path.rx <= 0 or path.ry <= 0:
        return np.zeros((height, width), dtype=np.uint8)
    ys, xs = np.mgrid[0:height, 0:width]
    dx = (xs + 0.5 - path.cx) / path.rx
    dy = (ys + 0.5 - path.cy) / path.ry
    return np.where(dx * dx + dy * dy <= 1.0, MASK_SELECTED, 0).astype(np.uint8)


def _even_odd(points: Sequence[Point], x: Any, y: Any) -> np.ndarray:
    """Even-odd rule point-in-polygon test, for scalars or coordinate arrays."""
    inside = np.zeros(np.broadcast(x, y).shape, dtype=bool)
    j = len(points) - 1
    for i in range(len(points)):
        xi, yi = points[i]
        xj, yj = points[j]
        # Horizontal edges never cross a scanline.
        if yi != yj:
            crossing = xi + (y - yi) * (xj - xi) / (yj - yi)
            inside ^= ((yi > y) != (yj > y)) & (x < crossing)
        j = i
    return inside


def _draw_polygon(path: _PointPathSelection, width: int, height: int) -> np.ndarray:
    if not path.is_closed_polygon:
        return np.zeros((height, width), dtype=np.uint8)
    ys, xs = np.mgrid[0:height, 0:width]
    inside = _even_odd(path.points, xs + 0.5, ys + 0.5)
    return np.where(inside, MASK_SELECTED, 0).astype(np.uint8)


def rasterize_selection(path: SelectionPath, width: int, height: int) -> PixelBuffer:
    """
    Rasterize a selection path to a binary mask.

    Args:
        path: Selection path of any variant
        width: Canvas width
        height: Canvas height

    Returns:
        Mask of the canvas size (mask paths are returned unchanged)

    Raises:
        ValueError: If a mask path does not match the canvas size
        TypeError: If path is not a selection path
    """
    width = int(width)
    height = int(height)

    if isinstance(path, MaskSelection):
        if path.data.size != (width, height):
            raise ValueError(
                f"Mask selection is {path.data.width}x{path.data.height}, "
                f"canvas is {width}x{height}"
            )
        return path.data

    if width <= 0 or height <= 0:
        raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")

    if isinstance(path, RectSelection):
        alpha = _draw_rect(path, width, height)
    elif isinstance(path, OvalSelection):
        alpha = _draw_oval(path, width, height)
    elif isinstance(path, _PointPathSelection):
        alpha = _draw_polygon(path, width, height)
    else:
        raise _unknown_path(path)

    return PixelBuffer.from_alpha(alpha)


# ============================================================================
# Bounds
# ============================================================================

def get_selection_bounds(path: SelectionPath) -> SelectionBounds:
    """
    Get the axis-aligned bounding box of a selection.

    Mask selections are scanned for pixels with non-zero alpha; an empty
    mask or a polygon with fewer than 3 points gives (0, 0, 0, 0).
    """
    if isinstance(path, RectSelection):
        return SelectionBounds(
            _round_half_up(path.x),
            _round_half_up(path.y),
            _round_half_up(path.width),
            _round_half_up(path.height),
        )

    if isinstance(path, OvalSelection):
        return SelectionBounds(
            _round_half_up(path.cx - path.rx),
            _round_half_up(path.cy - path.ry),
            _round_half_up(path.rx * 2),
            _round_half_up(path.ry * 2),
        )

    if isinstance(path, _PointPathSelection):
        if not path.is_closed_polygon:
            return EMPTY_BOUNDS
        xs = [point[0] for point in path.points]
        ys = [point[1] for point in path.points]
        left = math.floor(min(xs))
        top = math.floor(min(ys))
        return SelectionBounds(left, top, math.ceil(max(xs)) - left, math.ceil(max(ys)) - top)

    if isinstance(path, MaskSelection):
        rows, cols = np.nonzero(path.data.alpha)
        if rows.size == 0:
            return EMPTY_BOUNDS
        left = int(cols.min())
        top = int(rows.min())
        return SelectionBounds(left, top, int(cols.max()) + 1 - left, int(rows.max()) + 1 - top)

    raise _unknown_path(path)


def clamp_bounds(
    bounds: SelectionBounds,
    canvas_width: int,
    canvas_height: int,
) -> Optional[SelectionBounds]:
    """
    Clamp selection bounds to canvas dimensions.

    Returns:
        Clamped bounds, or None if the selection is empty or off-canvas
    """
    if bounds.is_empty:
        return None

    left = max(0, math.floor(bounds.x))
    top = max(0, math.floor(bounds.y))
    right = min(canvas_width, math.ceil(bounds.x + bounds.width))
    bottom = min(canvas_height, math.ceil(bounds.y + bounds.height))

    clamped = SelectionBounds(left, top, right - left, bottom - top)
    if clamped.is_empty:
        return None
    return clamped


# ============================================================================
# Queries
# ============================================================================

def has_selection(path: Optional[SelectionPath]) -> bool:
    return path is not None


def has_size(path: SelectionPath) -> bool:
    """Whether a drawn selection is large enough to keep rather than discard."""
    if isinstance(path, RectSelection):
        return path.width > MIN_RECT_SIZE and path.height > MIN_RECT_SIZE
    if isinstance(path, OvalSelection):
        return path.rx > MIN_OVAL_RADIUS and path.ry > MIN_OVAL_RADIUS
    if isinstance(path, _PointPathSelection):
        return path.is_closed_polygon
    if isinstance(path, MaskSelection):
        return True
    raise _unknown_path(path)


def contains_point(path: Optional[SelectionPath], x: float, y: float) -> bool:
    """Check whether canvas point (x, y) lies inside the selection."""
    if path is None:
        return False

    if isinstance(path, RectSelection):
        return path.x <= x <= path.x + path.width and path.y <= y <= path.y + path.height

    if isinstance(path, OvalSelection):
        if path.rx <= 0 or path.ry <= 0:
            return False
        dx = (x - path.cx) / path.rx
        dy = (y - path.cy) / path.ry
        return dx * dx + dy * dy <= 1

    if isinstance(path, _PointPathSelection):
        if not path.is_closed_polygon:
            return False
        return bool(_even_odd(path.points, x, y))

    if isinstance(path, MaskSelection):
        px = _round_half_up(x)
        py = _round_half_up(y)
        mask = path.data
        if px < 0 or px >= mask.width or py < 0 or py >= mask.height:
            return False
        return bool(mask.selected()[py, px])

    raise _unknown_path(path)


def selection_from_drag(
    start: Point,
    end: Point,
    tool: str = TOOL_RECTANGLE,
    constrain: bool = False,
) -> Union[RectSelection, OvalSelection]:
    """
    Build a rect or oval selection from a drag gesture.

    Args:
        start: Point where the drag began
        end: Current drag point
        tool: "rectangle" or "oval"
        constrain: Force a square / circle using the larger side

    Raises:
        ValueError: If tool is not a drag shape tool
    """
    start_x, start_y = _normalize_point(start)
    end_x, end_y = _normalize_point(end)
    width = end_x - start_x
    height = end_y - start_y

    if constrain:
        side = max(abs(width), abs(height))
        width = math.copysign(side, width) if width else side
        height = math.copysign(side, height) if height else side

    x = start_x + width if width < 0 else start_x
    y = start_y + height if height < 0 else start_y
    w = abs(width)
    h = abs(height)

    if tool == TOOL_RECTANGLE:
        return RectSelection(x, y, w, h)
    if tool == TOOL_OVAL:
        return OvalSelection(x + w / 2, y + h / 2, w / 2, h / 2)
    raise ValueError(f"Unknown drag tool: {tool}. Valid tools: {TOOL_RECTANGLE}, {TOOL_OVAL}")
