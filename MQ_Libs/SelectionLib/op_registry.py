"""
Selection Operation Registry.

This module provides a centralized registry for selection operations. The
editor's Select menu and magic wand tool look operations up by name
("Expand", "Feather", "Magic Wand", ...) and execute them with dialog
parameters, without importing the mask engine directly.

Classes:
    SelectionOpRegistry: Registry for operation executors

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_ops: Register all built-in selection operations
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from MQ_Libs.constants import (
    OP_BORDER,
    OP_COLOR_RANGE,
    OP_CONTRACT,
    OP_EXPAND,
    OP_FEATHER,
    OP_INVERT,
    OP_MAGIC_WAND,
    OP_SMOOTH,
)

logger = logging.getLogger(__name__)

# Type alias for executor function
OpExecutor = Callable[[Dict[str, Any], List[Any]], Any]


class SelectionOpRegistry:
    """
    Registry for selection operation executors.

    Example:
        >>> registry = SelectionOpRegistry()
        >>> registry.register("Expand", execute_expand_op, input_count=1)
        >>> mask = registry.execute("Expand", {"radius": 4}, [mask])
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._executors: Dict[str, OpExecutor] = {}
        self._op_metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        op_type: str,
        executor: OpExecutor,
        description: str = "",
        input_count: int = 1,
        tags: Optional[List[str]] = None,
    ) -> None:
        """
        Register an operation executor.

        Args:
            op_type: Unique operation name (e.g., "Expand")
            executor: Callable accepting (params, inputs)
            description: Human-readable description of the operation
            input_count: Expected number of inputs (mask or source image)
            tags: Optional list of tags for categorization (e.g., ["modify"])

        Raises:
            ValueError: If op_type is empty or executor is not callable
            RuntimeError: If op_type is already registered
        """
        op_type = str(op_type).strip()

        if not op_type:
            raise ValueError("op_type cannot be empty")

        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")

        if op_type in self._executors:
            raise RuntimeError(f"Operation '{op_type}' is already registered")

        self._executors[op_type] = executor
        self._op_metadata[op_type] = {
            "description": str(description),
            "input_count": int(input_count),
            "tags": list(tags) if tags else [],
        }

        logger.debug(f"Registered executor for selection operation: {op_type}")

    def get_executor(self, op_type: str) -> OpExecutor:
        """
        Get the executor for an operation.

        Raises:
            KeyError: If op_type is not registered
        """
        op_type = str(op_type).strip()

        if op_type not in self._executors:
            available = ", ".join(self.list_op_types())
            raise KeyError(
                f"No executor registered for selection operation '{op_type}'. "
                f"Available operations: {available}"
            )

        return self._executors[op_type]

    def has_executor(self, op_type: str) -> bool:
        return str(op_type).strip() in self._executors

    def execute(
        self,
        op_type: str,
        params: Dict[str, Any],
        inputs: List[Any],
    ) -> Any:
        """
        Execute an operation by looking up its executor.

        Args:
            op_type: The operation to execute
            params: Operation parameters (radius, tolerance, sample point...)
            inputs: Mask or source image inputs

        Returns:
            Result from the executor (a PixelBuffer mask)

        Raises:
            KeyError: If op_type is not registered
            Exception: Any exception raised by the executor
        """
        executor = self.get_executor(op_type)
        logger.debug(f"Executing selection operation {op_type} with {params}")
        return executor(params, inputs)

    def list_op_types(self) -> List[str]:
        """Sorted list of registered operation names."""
        return sorted(self._executors.keys())

    def get_metadata(self, op_type: str) -> Dict[str, Any]:
        """
        Get metadata for an operation.

        Raises:
            KeyError: If op_type is not registered
        """
        op_type = str(op_type).strip()

        if op_type not in self._op_metadata:
            raise KeyError(f"No metadata for selection operation: {op_type}")

        return dict(self._op_metadata[op_type])

    def filter_by_tag(self, tag: str) -> List[str]:
        """
        Get all operations with a specific tag.

        Returns:
            Sorted list of operation names with the tag
        """
        tag = str(tag).strip().lower()
        return sorted([
            op_type
            for op_type, meta in self._op_metadata.items()
            if tag in [t.lower() for t in meta.get("tags", [])]
        ])


# Global singleton registry
_default_registry: Optional[SelectionOpRegistry] = None


def get_default_registry() -> SelectionOpRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the built-in operations.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = SelectionOpRegistry()
        register_default_ops(_default_registry)

    return _default_registry


def register_default_ops(registry: SelectionOpRegistry) -> None:
    """
    Register all built-in selection operations.

    This function registers:
    - Expand, Contract, Border, Feather, Smooth, Invert (Select > Modify)
    - Magic Wand and Color Range (color based selection)
    """
    from MQ_Libs.SelectionLib.modify_ops import (
        execute_border_op,
        execute_contract_op,
        execute_expand_op,
        execute_feather_op,
        execute_invert_op,
        execute_smooth_op,
    )
    from MQ_Libs.SelectionLib.wand_ops import execute_color_range_op, execute_magic_wand_op

    registry.register(
        op_type=OP_EXPAND,
        executor=execute_expand_op,
        description="Grow the selection outward by a radius",
        tags=["modify", "distance"],
    )

    registry.register(
        op_type=OP_CONTRACT,
        executor=execute_contract_op,
        description="Shrink the selection inward by a radius",
        tags=["modify", "distance"],
    )

    registry.register(
        op_type=OP_BORDER,
        executor=execute_border_op,
        description="Select a ring of the given width inside the selection edge",
        tags=["modify", "distance"],
    )

    registry.register(
        op_type=OP_FEATHER,
        executor=execute_feather_op,
        description="Soften the selection edge into a graded alpha ramp",
        tags=["modify", "distance"],
    )

    registry.register(
        op_type=OP_SMOOTH,
        executor=execute_smooth_op,
        description="Remove jagged edges with a blur and re-threshold",
        tags=["modify", "blur"],
    )

    registry.register(
        op_type=OP_INVERT,
        executor=execute_invert_op,
        description="Invert the selection",
        tags=["modify"],
    )

    registry.register(
        op_type=OP_MAGIC_WAND,
        executor=execute_magic_wand_op,
        description="Select a contiguous region of similar color",
        tags=["color", "wand"],
    )

    registry.register(
        op_type=OP_COLOR_RANGE,
        executor=execute_color_range_op,
        description="Select all pixels of similar color anywhere in the image",
        tags=["color"],
    )

    logger.info("Registered default selection operations")
