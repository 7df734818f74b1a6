"""
MaskLib - Selection mask engine

This module provides the pixel buffer model, the exact Euclidean distance
transform, mask morphology, flood fill, color range selection and the
selection path rasterizer.
"""

from MQ_Libs.MaskLib.pixel_buffer import PixelBuffer, RgbaColor, coerce_buffer
from MQ_Libs.MaskLib.distance_transform import (
    DistanceFields,
    compute_distance,
    compute_distance_from_buffer,
    compute_distance_fields,
)
from MQ_Libs.MaskLib.mask_morphology import (
    invert_mask,
    expand_mask,
    contract_mask,
    border_mask,
    feather_mask,
    smooth_mask,
    box_blur,
    mask_union,
    mask_subtract,
    mask_intersect,
    mask_has_selection,
)
from MQ_Libs.MaskLib.flood_fill import flood_fill
from MQ_Libs.MaskLib.color_range import clamp_tolerance, color_range
from MQ_Libs.MaskLib.selection_path import (
    RectSelection,
    OvalSelection,
    LassoSelection,
    PolygonSelection,
    MaskSelection,
    SelectionPath,
    SelectionBounds,
    rasterize_selection,
    get_selection_bounds,
    clamp_bounds,
    has_selection,
    has_size,
    contains_point,
    selection_from_drag,
)

__all__ = [
    "PixelBuffer",
    "RgbaColor",
    "coerce_buffer",
    "DistanceFields",
    "compute_distance",
    "compute_distance_from_buffer",
    "compute_distance_fields",
    "invert_mask",
    "expand_mask",
    "contract_mask",
    "border_mask",
    "feather_mask",
    "smooth_mask",
    "box_blur",
    "mask_union",
    "mask_subtract",
    "mask_intersect",
    "mask_has_selection",
    "flood_fill",
    "clamp_tolerance",
    "color_range",
    "RectSelection",
    "OvalSelection",
    "LassoSelection",
    "PolygonSelection",
    "MaskSelection",
    "SelectionPath",
    "SelectionBounds",
    "rasterize_selection",
    "get_selection_bounds",
    "clamp_bounds",
    "has_selection",
    "has_size",
    "contains_point",
    "selection_from_drag",
]
