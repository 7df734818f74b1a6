"""
SelectionLib - Selection state and named operations

This module provides the headless selection state of a canvas and the
registry that dispatches Select > Modify and color selection operations
by name.
"""

from MQ_Libs.SelectionLib.op_registry import (
    SelectionOpRegistry,
    get_default_registry,
    register_default_ops,
)
from MQ_Libs.SelectionLib.modify_ops import ModifyOpConfig
from MQ_Libs.SelectionLib.wand_ops import WandConfig
from MQ_Libs.SelectionLib.selection_state import SelectionState, mode_from_modifiers

__all__ = [
    "SelectionOpRegistry",
    "get_default_registry",
    "register_default_ops",
    "ModifyOpConfig",
    "WandConfig",
    "SelectionState",
    "mode_from_modifiers",
]
