"""
Select > Modify operations.

Wraps the mask morphology functions as registry executors. Each executor
takes a params dict (as produced by the modify dialog) and a list of inputs
whose first element is the selection mask.

Example:
    >>> from MQ_Libs.SelectionLib.op_registry import get_default_registry
    >>> registry = get_default_registry()
    >>> grown = registry.execute("Expand", {"radius": 8}, [mask])
    >>> soft = registry.execute("Feather", {"radius": 12}, [grown])
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import numpy as np

from MQ_Libs.constants import DEFAULT_MODIFY_RADIUS, MODIFY_RADIUS_MAX, MODIFY_RADIUS_MIN
from MQ_Libs.MaskLib.mask_morphology import (
    border_mask,
    contract_mask,
    expand_mask,
    feather_mask,
    invert_mask,
    smooth_mask,
)
from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer, coerce_buffer


_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off", "")


def parse_flag(value: Any) -> bool:
    """
    Coerce a dialog flag (bool, 0/1 or a string such as "false") to bool.

    Raises:
        ValueError: If value is not a recognizable flag
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"Expected a boolean flag, got {value!r}")


@dataclass
class ModifyOpConfig:
    """Configuration for a modify operation.

    Attributes:
        radius: Radius in whole pixels (1-100, as offered by the modify dialog)
        at_canvas_bounds: Treat the canvas edge as a selection edge
                          (contract, border and feather)
    """
    radius: int = DEFAULT_MODIFY_RADIUS
    at_canvas_bounds: bool = True

    def validate(self) -> None:
        """
        Raises:
            ValueError: If radius is outside the dialog range
        """
        if not (MODIFY_RADIUS_MIN <= self.radius <= MODIFY_RADIUS_MAX):
            raise ValueError(
                f"radius must be {MODIFY_RADIUS_MIN}-{MODIFY_RADIUS_MAX}, got {self.radius}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "radius": self.radius,
            "at_canvas_bounds": self.at_canvas_bounds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModifyOpConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        if "radius" in filtered:
            filtered["radius"] = int(filtered["radius"])
        if "at_canvas_bounds" in filtered:
            filtered["at_canvas_bounds"] = parse_flag(filtered["at_canvas_bounds"])
        return cls(**filtered)


def _input_mask(op_name: str, inputs: List[Any]) -> PixelBuffer:
    if not inputs:
        raise ValueError(f"{op_name} requires a selection mask input")
    return coerce_buffer(inputs[0])


def _run_modify(
    op_name: str,
    params: Dict[str, Any],
    inputs: List[Any],
    operation: Callable[[PixelBuffer, ModifyOpConfig], PixelBuffer],
) -> PixelBuffer:
    try:
        mask = _input_mask(op_name, inputs)
        config = ModifyOpConfig.from_dict(params)
        config.validate()
        return operation(mask, config)
    except (ValueError, TypeError) as e:
        raise type(e)(f"{op_name} op error: {str(e)}")


def execute_expand_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """
    Grow the selection by params['radius'] pixels.

    Inputs:
        - [0]: Selection mask (PixelBuffer or PIL Image)

    Raises:
        ValueError: If no input or radius out of range
        TypeError: If input is not a mask
    """
    return _run_modify(
        "Expand", params, inputs,
        lambda mask, config: expand_mask(mask, config.radius),
    )


def execute_contract_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """Shrink the selection by params['radius'] pixels."""
    return _run_modify(
        "Contract", params, inputs,
        lambda mask, config: contract_mask(mask, config.radius, config.at_canvas_bounds),
    )


def execute_border_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """Select a params['radius'] wide ring inside the selection edge."""
    return _run_modify(
        "Border", params, inputs,
        lambda mask, config: border_mask(mask, config.radius, config.at_canvas_bounds),
    )


def execute_feather_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """Feather the selection edge over params['radius'] pixels on each side."""
    return _run_modify(
        "Feather", params, inputs,
        lambda mask, config: feather_mask(mask, config.radius, config.at_canvas_bounds),
    )


def execute_smooth_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """Smooth the selection edge with a params['radius'] box blur."""
    return _run_modify(
        "Smooth", params, inputs,
        lambda mask, config: smooth_mask(mask, config.radius),
    )


def execute_invert_op(params: Dict[str, Any], inputs: List[Any]) -> PixelBuffer:
    """Invert the selection. Takes no parameters."""
    try:
        return invert_mask(_input_mask("Invert", inputs))
    except (ValueError, TypeError) as e:
        raise type(e)(f"Invert op error: {str(e)}")
