"""
Skeleton Editor - Constants and Configuration

This module contains all constant values used by the geometry engine:
- Transform handle names and their index order
- Document element kinds understood by the element adapter
- Numeric tolerances
- Logging defaults
"""

import logging

# ======================================================================
# TRANSFORM HANDLES
# ======================================================================
# Position in each tuple is the handle index used by skeleton projection.
# Corners follow skeleton order: top-left, top-right, bottom-right, bottom-left.

CORNER_HANDLES = ('tl', 'tr', 'br', 'bl')
EDGE_HANDLES = ('t', 'r', 'b', 'l')

# Modifier that locks the aspect ratio during a drag
ASPECT_LOCK_MODIFIER = 'shift'

# ======================================================================
# DOCUMENT ELEMENT KINDS
# ======================================================================

# Elements whose box is stored as x, y, width, height
BOX_ELEMENT_KINDS = ('rectangle', 'image', 'text', 'video', 'map')

# Elements whose box is stored as x, y, radius=[rx, ry]
RADIUS_ELEMENT_KINDS = ('circle',)

# Elements that own a default slot of children
GROUP_ELEMENT_KINDS = ('group', 'mask')

# Default values for missing transform properties
DEFAULT_TRANSFORM = {
    'translateX': 0.0,
    'translateY': 0.0,
    'rotate': 0.0,
    'skewX': 0.0,
    'skewY': 0.0,
    'scaleX': 1.0,
    'scaleY': 1.0,
}

# Anchor of x/y inside the box, as a fraction of width/height
DEFAULT_POS_ORIGIN = (0.0, 0.0)

# ======================================================================
# NUMERIC TOLERANCES
# ======================================================================

# Used when comparing computed geometry (tests, change detection)
GEOMETRY_EPSILON = 1e-9

# ======================================================================
# LOGGING
# ======================================================================

DEFAULT_LOG_LEVEL = logging.WARNING  # Only show warnings and errors
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
