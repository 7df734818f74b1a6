"""
Constants and configuration values for Marquee.

This module centralizes all constant values, thresholds and
default settings used throughout the selection engine.
"""

# Mask encoding
MASK_SELECTED = 255
MASK_UNSELECTED = 0
SELECTION_THRESHOLD = 127  # alpha > threshold means "selected"
CHANNELS = 4

# Distance transform
DISTANCE_INF = 1e9

# Smooth (3-pass box blur approximating a Gaussian)
SMOOTH_PASSES = 3
SMOOTH_THRESHOLD = 128

# Color tolerance
TOLERANCE_MIN = 0
TOLERANCE_MAX = 255
DEFAULT_WAND_TOLERANCE = 32
SAD_CHANNEL_WEIGHT = 4  # tolerance is per channel, SAD sums four channels

# Modify dialog limits (Expand/Contract/Border/Feather/Smooth)
MODIFY_RADIUS_MIN = 1
MODIFY_RADIUS_MAX = 100
DEFAULT_MODIFY_RADIUS = 10

# Minimum gesture size for a drawn selection to be kept
MIN_RECT_SIZE = 2
MIN_OVAL_RADIUS = 1
MIN_POLYGON_POINTS = 3

# Selection path discriminants
PATH_RECT = "rect"
PATH_OVAL = "oval"
PATH_LASSO = "lasso"
PATH_POLYGON = "polygon"
PATH_MASK = "mask"

# Selection combine modes
MODE_REPLACE = "replace"
MODE_ADD = "add"
MODE_SUBTRACT = "subtract"
SELECTION_MODES = (MODE_REPLACE, MODE_ADD, MODE_SUBTRACT)

# Drawing tools that produce shapes from a drag
TOOL_RECTANGLE = "rectangle"
TOOL_OVAL = "oval"

# Operation names (registry keys)
OP_EXPAND = "Expand"
OP_CONTRACT = "Contract"
OP_BORDER = "Border"
OP_FEATHER = "Feather"
OP_SMOOTH = "Smooth"
OP_INVERT = "Invert"
OP_MAGIC_WAND = "Magic Wand"
OP_COLOR_RANGE = "Color Range"
