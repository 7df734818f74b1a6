"""
Selection state for the editor canvas.

SelectionState tracks the current selection of one canvas and applies the
rules the selection tools follow: drawn shapes that are too small are
discarded, new selections replace or combine with the previous one according
to the current mode, and modify operations turn the selection into a mask.
It holds no UI state; mouse handling and drawing live elsewhere.

Example:
    >>> state = SelectionState(800, 600)
    >>> state.commit(RectSelection(10, 10, 200, 100))
    >>> state.mode = "add"
    >>> state.commit(OvalSelection(300, 200, 80, 50))
    >>> state.modify("Feather", 6)
    >>> state.clamped_bounds()
"""

import logging
from typing import List, Optional

from MQ_Libs.constants import (
    DEFAULT_WAND_TOLERANCE,
    MODE_ADD,
    MODE_REPLACE,
    MODE_SUBTRACT,
    OP_COLOR_RANGE,
    OP_INVERT,
    OP_MAGIC_WAND,
    SELECTION_MODES,
)
from MQ_Libs.MaskLib.color_range import clamp_tolerance
from MQ_Libs.MaskLib.mask_morphology import mask_has_selection, mask_subtract, mask_union
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer, coerce_buffer
from MQ_Libs.MaskLib.selection_path import (
    MaskSelection,
    SelectionBounds,
    SelectionPath,
    clamp_bounds,
    contains_point,
    get_selection_bounds,
    has_size,
    rasterize_selection,
)
from MQ_Libs.SelectionLib.op_registry import SelectionOpRegistry, get_default_registry

logger = logging.getLogger(__name__)


def mode_from_modifiers(shift: bool = False, alt: bool = False) -> str:
    """Map modifier keys to a selection mode (Shift adds, Alt subtracts)."""
    if shift:
        return MODE_ADD
    if alt:
        return MODE_SUBTRACT
    return MODE_REPLACE


class SelectionState:
    """
    Current selection of a canvas.

    Attributes:
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels
        path: Current selection path, or None
        contiguous: Whether the magic wand grows a connected region
    """

    def __init__(
        self,
        canvas_width: int,
        canvas_height: int,
        registry: Optional[SelectionOpRegistry] = None,
    ):
        self.canvas_width = 0
        self.canvas_height = 0
        self.resize(canvas_width, canvas_height)

        self.path: Optional[SelectionPath] = None
        self.contiguous = True
        self._mode = MODE_REPLACE
        self._wand_tolerance = DEFAULT_WAND_TOLERANCE
        self._registry = registry

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def registry(self) -> SelectionOpRegistry:
        if self._registry is None:
            self._registry = get_default_registry()
        return self._registry

    @property
    def mode(self) -> str:
        return self._mode

    @mode.setter
    def mode(self, value: str) -> None:
        value = str(value).strip().lower()
        if value not in SELECTION_MODES:
            raise ValueError(
                f"Unknown selection mode: {value}. Valid modes: {', '.join(SELECTION_MODES)}"
            )
        self._mode = value

    @property
    def wand_tolerance(self) -> int:
        return self._wand_tolerance

    @wand_tolerance.setter
    def wand_tolerance(self, value: int) -> None:
        self._wand_tolerance = clamp_tolerance(value)

    def resize(self, width: int, height: int) -> None:
        """
        Change the canvas size.

        Raises:
            ValueError: If width or height is not positive
        """
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.canvas_width = width
        self.canvas_height = height

    # ------------------------------------------------------------------
    # Selection lifecycle
    # ------------------------------------------------------------------

    def has_selection(self) -> bool:
        return self.path is not None

    def clear(self) -> None:
        self.path = None
        logger.debug("Selection cleared")

    def set_selection(self, path: Optional[SelectionPath]) -> None:
        """Set the selection directly, bypassing mode and size rules."""
        if path is None:
            self.clear()
            return
        self.path = path
        logger.debug(f"Selection set to {path.type}")

    def commit(self, path: SelectionPath) -> Optional[SelectionPath]:
        """
        Commit a newly drawn selection.

        Paths below the minimum size clear the selection. In add or subtract
        mode the new path is combined with the current selection into a mask
        selection; an empty result clears the selection.

        Returns:
            The resulting selection path, or None
        """
        if not has_size(path):
            logger.debug(f"Discarding {path.type} selection below minimum size")
            self.clear()
            return None

        previous = self.path
        if self._mode == MODE_REPLACE or previous is None:
            self.path = path
            return self.path

        old_mask = rasterize_selection(previous, self.canvas_width, self.canvas_height)
        new_mask = rasterize_selection(path, self.canvas_width, self.canvas_height)
        if self._mode == MODE_ADD:
            combined = mask_union(old_mask, new_mask)
        else:
            combined = mask_subtract(old_mask, new_mask)

        if mask_has_selection(combined):
            self.path = MaskSelection(combined)
        else:
            self.path = None
        logger.debug(f"Combined selection with mode {self._mode}")
        return self.path

    def select_with_wand(self, image, x: float, y: float) -> Optional[SelectionPath]:
        """
        Select by color from a snapshot of the rendered canvas.

        Uses flood fill when contiguous is set, color range otherwise, with
        the current wand tolerance, then commits the result with the current
        mode.

        Raises:
            ValueError: If the image does not match the canvas size
        """
        source = coerce_buffer(image)
        if source.size != (self.canvas_width, self.canvas_height):
            raise ValueError(
                f"Source image is {source.width}x{source.height}, "
                f"canvas is {self.canvas_width}x{self.canvas_height}"
            )
        op_type = OP_MAGIC_WAND if self.contiguous else OP_COLOR_RANGE
        params = {"x": x, "y": y, "tolerance": self._wand_tolerance}
        mask = self.registry.execute(op_type, params, [source])
        return self.commit(MaskSelection(mask))

    def modify(self, op_type: str, radius: Optional[int] = None) -> Optional[SelectionPath]:
        """
        Apply a Select > Modify operation to the current selection.

        Args:
            op_type: Registered operation name ("Expand", "Feather", ...)
            radius: Operation radius; omitted for "Invert"

        Returns:
            The new mask selection, or None when nothing is selected
        """
        if self.path is None:
            return None
        mask = self.rasterize()
        params = {} if radius is None else {"radius": radius}
        result = self.registry.execute(op_type, params, [mask])
        self.path = MaskSelection(result)
        return self.path

    def modify_operations(self) -> List[str]:
        """Names of the Select > Modify operations, for building the menu."""
        return self.registry.filter_by_tag("modify")

    def invert(self) -> Optional[SelectionPath]:
        """
        Invert the selection. With nothing selected, selects the whole canvas.
        """
        if self.path is None:
            mask = PixelBuffer.blank(self.canvas_width, self.canvas_height)
            self.path = MaskSelection(self.registry.execute(OP_INVERT, {}, [mask]))
            return self.path
        return self.modify(OP_INVERT)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def rasterize(self) -> Optional[PixelBuffer]:
        """Current selection as a canvas-sized mask, or None."""
        if self.path is None:
            return None
        return rasterize_selection(self.path, self.canvas_width, self.canvas_height)

    def bounds(self) -> Optional[SelectionBounds]:
        if self.path is None:
            return None
        return get_selection_bounds(self.path)

    def clamped_bounds(self) -> Optional[SelectionBounds]:
        """Selection bounds clipped to the canvas, or None when empty."""
        bounds = self.bounds()
        if bounds is None:
            return None
        return clamp_bounds(bounds, self.canvas_width, self.canvas_height)

    def contains_point(self, x: float, y: float) -> bool:
        return contains_point(self.path, x, y)
