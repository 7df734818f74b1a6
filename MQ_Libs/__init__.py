"""
MQ_Libs - Marquee Library Modules

This package contains the selection engine of the Marquee image-layer
editor, organized into specialized sub-packages:

- MaskLib: Pixel buffers, distance transform, mask morphology, flood fill,
  color range selection and selection path rasterization
- SelectionLib: Selection state and the named operation registry
"""

__version__ = "0.1.0"
