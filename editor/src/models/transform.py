"""Transform data structures for coordinate and geometry representation."""
from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y pair across the engine's coordinate spaces:
    - Local space (before an element's own transform)
    - Parent space (after the element's baked transform)
    - World space (after every ancestor's transform)

    Whether a Vec2 is a position or a delta depends on context.
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))


@dataclass(frozen=True)
class Matrix:
    """2D affine matrix in (a, b, c, d, e, f) form.

    Represents:
        [x']   [a c e] [x]
        [y'] = [b d f] [y]
        [1 ]   [0 0 1] [1]
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def to_array(self) -> np.ndarray:
        """Return the full 3x3 homogeneous matrix"""
        return np.array([
            [self.a, self.c, self.e],
            [self.b, self.d, self.f],
            [0.0, 0.0, 1.0],
        ], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> 'Matrix':
        """Build from a 3x3 (or 2x3) array, ignoring the projective row"""
        return cls(
            a=float(arr[0][0]), b=float(arr[1][0]),
            c=float(arr[0][1]), d=float(arr[1][1]),
            e=float(arr[0][2]), f=float(arr[1][2]),
        )

    @property
    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c


@dataclass
class ElementBBox:
    """Axis-aligned rectangle in an element's local (untransformed) space.

    Width and height are non-negative for well-formed input but may be 0
    for degenerate geometry.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def top_left(self) -> Vec2:
        return Vec2(self.x, self.y)

    @property
    def size(self) -> Vec2:
        return Vec2(self.width, self.height)


# Four corners in fixed order: top-left, top-right, bottom-right, bottom-left.
# Everything downstream indexes positionally (0=TL, 1=TR, 2=BR, 3=BL).
Skeleton = Tuple[Vec2, Vec2, Vec2, Vec2]
