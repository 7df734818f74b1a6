"""
Color based selection operations (magic wand and color range).

Executors take a params dict with the sample point and tolerance, and a list
of inputs whose first element is the source image (a snapshot of the rendered
canvas).
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from MQ_Libs.constants import DEFAULT_WAND_TOLERANCE
from MQ_Libs.MaskLib.color_range import clamp_tolerance, color_range
from MQ_Libs.MaskLib.flood_fill import flood_fill
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer, coerce_buffer
from MQ_Libs.SelectionLib.modify_ops import parse_flag


@dataclass
class WandConfig:
    """Configuration for color based selection.

    Attributes:
        tolerance: Per-channel color tolerance, clamped to 0-255
        contiguous: Grow a connected region (True) or select matching
                    pixels anywhere (False)
    """
    tolerance: int = DEFAULT_WAND_TOLERANCE
    contiguous: bool = True

    def __post_init__(self) -> None:
        self.tolerance = clamp_tolerance(self.tolerance)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "tolerance": self.tolerance,
            "contiguous": self.contiguous,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WandConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        if "contiguous" in filtered:
            filtered["contiguous"] = parse_flag(filtered["contiguous"])
        return cls(**filtered)


def _sample_point(op_name: str, params: Dict[str, Any]):
    if "x" not in params or "y" not in params:
        raise ValueError(f"{op_name} requires 'x' and 'y' sample coordinates")
    return int(round(float(params["x"]))), int(round(float(params["y"])))


def _source_image(op_name: str, inputs: List[Any]) -> PixelBuffer:
    if not inputs:
        raise ValueError(f"{op_name} requires a source image input")
    return coerce_buffer(inputs[0])


def execute_magic_wand_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """
    Magic wand selection.

    Params:
        - 'x', 'y': Sample point (rounded to the nearest pixel)
        - 'tolerance': Color tolerance (default 32, clamped to 0-255)
        - 'contiguous': Flood fill (default) or global color range

    Inputs:
        - [0]: Source image (PixelBuffer or PIL Image)

    Raises:
        ValueError: If inputs or sample point are missing or out of bounds
        TypeError: If input is not an image
    """
    try:
        image = _source_image("Magic Wand", inputs)
        x, y = _sample_point("Magic Wand", params)
        config = WandConfig.from_dict(params)
        if config.contiguous:
            return flood_fill(image, x, y, config.tolerance)
        return color_range(image, x, y, config.tolerance)
    except (ValueError, TypeError) as e:
        raise type(e)(f"Magic Wand op error: {str(e)}")


def execute_color_range_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """
    Color range selection (non-contiguous).

    Params:
        - 'x', 'y': Sample point
        - 'tolerance': Color tolerance (default 32, clamped to 0-255)
    """
    try:
        image = _source_image("Color Range", inputs)
        x, y = _sample_point("Color Range", params)
        config = WandConfig.from_dict(params)
        return color_range(image, x, y, config.tolerance)
    except (ValueError, TypeError) as e:
        raise type(e)(f"Color Range op error: {str(e)}")
