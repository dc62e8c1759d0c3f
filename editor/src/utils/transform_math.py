"""
Skeleton Editor - Affine Transform Math Utilities

Pure functions for building, composing and applying 2D affine matrices.
No UI dependencies and no state.

Composition follows the usual matrix-product convention:
compose(A, B, C) == A @ B @ C, so C acts on a point first. The canonical
local transform compose(translate, rotate, skew, scale) therefore scales
first and translates last.
"""

import math
from typing import Iterable, Sequence

import numpy as np

from constants import GEOMETRY_EPSILON
from models.errors import SingularMatrixError
from models.transform import Matrix, Skeleton, Vec2


def identity() -> Matrix:
    return Matrix()


def translate(dx: float, dy: float = 0.0) -> Matrix:
    return Matrix(e=dx, f=dy)


def scale(sx: float, sy: float = None) -> Matrix:
    """Scale matrix (uniform when sy is omitted)"""
    if sy is None:
        sy = sx
    return Matrix(a=sx, d=sy)


def rotate(angle_rad: float) -> Matrix:
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)
    return Matrix(a=cos_a, b=sin_a, c=-sin_a, d=cos_a)


def rotate_deg(angle_deg: float) -> Matrix:
    return rotate(math.radians(angle_deg))


def skew(ax_rad: float, ay_rad: float) -> Matrix:
    """Skew matrix from angles in radians (ax along X, ay along Y)"""
    return Matrix(b=math.tan(ay_rad), c=math.tan(ax_rad))


def skew_deg(ax_deg: float, ay_deg: float) -> Matrix:
    """Skew matrix from angles in degrees"""
    return skew(math.radians(ax_deg), math.radians(ay_deg))


def radians_to_degrees(rad: float) -> float:
    return rad * 180.0 / math.pi


def compose(*matrices: Matrix) -> Matrix:
    """Matrix product of the arguments, left to right.

    With no arguments the identity is returned.
    """
    result = np.identity(3)
    for m in matrices:
        result = result @ m.to_array()
    return Matrix.from_array(result)


def inverse(m: Matrix) -> Matrix:
    """Invert an affine matrix

    Raises:
        SingularMatrixError: If the determinant is zero
    """
    det = m.determinant
    if det == 0:
        raise SingularMatrixError(f"Matrix {m} is not invertible (determinant is 0)")

    return Matrix(
        a=m.d / det,
        b=-m.b / det,
        c=-m.c / det,
        d=m.a / det,
        e=(m.c * m.f - m.d * m.e) / det,
        f=(m.b * m.e - m.a * m.f) / det,
    )


def apply_to_point(m: Matrix, pt: Vec2) -> Vec2:
    """Full affine application, translation included"""
    return Vec2(
        m.a * pt.x + m.c * pt.y + m.e,
        m.b * pt.x + m.d * pt.y + m.f,
    )


def apply_linear_part_of_matrix(m: Matrix, v: Vec2) -> Vec2:
    """Apply only the 2x2 block (a, b, c, d) - for deltas, not positions"""
    return Vec2(
        m.a * v.x + m.c * v.y,
        m.b * v.x + m.d * v.y,
    )


def apply_to_points(m: Matrix, points: Sequence[Vec2]) -> list:
    """Vectorised apply_to_point over a sequence of points"""
    if not points:
        return []
    homogeneous = np.array([[pt.x, pt.y, 1.0] for pt in points], dtype=np.float64)
    transformed = homogeneous @ m.to_array().T
    return [Vec2(float(x), float(y)) for x, y, _ in transformed]


def transform_skeleton(skeleton: Skeleton, m: Matrix) -> Skeleton:
    return tuple(apply_to_points(m, skeleton))


def subtract_vec(a: Vec2, b: Vec2) -> Vec2:
    return Vec2(a.x - b.x, a.y - b.y)


def bake_origin_into_matrix(core_matrix: Matrix, origin: Vec2) -> Matrix:
    """Make core_matrix pivot around origin instead of the local (0, 0)"""
    return compose(
        translate(origin.x, origin.y),
        core_matrix,
        translate(-origin.x, -origin.y),
    )


def compute_origin_compensation_delta(core_matrix: Matrix, old_origin: Vec2, new_origin: Vec2) -> Vec2:
    """Geometry shift that keeps an element in place when its pivot moves.

    d = (M^-1 - I) . (o_old - o_new)
    """
    inv_core = inverse(core_matrix)
    origin_delta = subtract_vec(old_origin, new_origin)

    # (M^-1 - I) . v = M^-1 . v - v
    transformed = apply_linear_part_of_matrix(inv_core, origin_delta)
    return subtract_vec(transformed, origin_delta)


def extract_rotation_radians(m: Matrix) -> float:
    """Rotation angle of the linear part, robust to non-uniform scale"""
    return math.atan2(m.b - m.c, m.a + m.d)


def matrices_close(m1: Matrix, m2: Matrix, tolerance: float = GEOMETRY_EPSILON) -> bool:
    return bool(np.allclose(m1.to_array(), m2.to_array(), atol=tolerance))


def points_close(points_a: Iterable[Vec2], points_b: Iterable[Vec2], tolerance: float = GEOMETRY_EPSILON) -> bool:
    a = np.array([tuple(pt) for pt in points_a], dtype=np.float64)
    b = np.array([tuple(pt) for pt in points_b], dtype=np.float64)
    return a.shape == b.shape and bool(np.allclose(a, b, atol=tolerance))
