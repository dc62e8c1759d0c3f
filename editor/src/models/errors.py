"""Geometry engine error types.

All errors derive from ValueError so callers that already guard engine calls
with ``except ValueError`` keep working.
"""


class GeometryError(ValueError):
    """Base class for failures raised by the geometry engine"""


class InvalidHandleError(GeometryError):
    """Corner/edge index outside 0-3, or an unknown handle name"""


class SingularMatrixError(GeometryError):
    """Inversion of a matrix with zero determinant"""


class DegenerateSkeletonError(GeometryError):
    """Aspect-ratio lock requested on a skeleton with zero width or height"""


class UnsupportedElementError(GeometryError):
    """Local-bbox write on an element kind the engine does not model"""
