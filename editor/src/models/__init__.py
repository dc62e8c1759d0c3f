"""
Skeleton Editor - Data Models

This module contains the data types shared by the geometry engine:
vectors, matrices, bboxes, skeletons, the element tree and its errors.
"""

from .transform import Vec2, Matrix, ElementBBox, Skeleton
from .element import Shape, Group, SimpleElement, ElementChangeRecord, ElementTree, collect_all_elements
from .errors import (
    GeometryError, InvalidHandleError, SingularMatrixError,
    DegenerateSkeletonError, UnsupportedElementError
)

__all__ = [
    'Vec2', 'Matrix', 'ElementBBox', 'Skeleton',
    'Shape', 'Group', 'SimpleElement', 'ElementChangeRecord', 'ElementTree', 'collect_all_elements',
    'GeometryError', 'InvalidHandleError', 'SingularMatrixError',
    'DegenerateSkeletonError', 'UnsupportedElementError',
]
