"""
Shared fixtures for Skeleton Editor geometry tests.

Provides reusable skeletons, matrices and element trees.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

from models.element import Group, Shape
from models.transform import Vec2
from utils.transform_math import compose, identity, rotate_deg, scale, skew_deg, translate


# ── Helpers ──────────────────────────────────────────────────────────────

def as_tuples(points):
    """Skeleton -> list of (x, y) tuples for approx comparisons"""
    return [(pt.x, pt.y) for pt in points]


def assert_points_close(actual, expected, abs_tol=1e-9):
    actual = as_tuples(actual)
    expected = [tuple(pt) for pt in expected]
    assert len(actual) == len(expected)
    for (ax, ay), (ex, ey) in zip(actual, expected):
        assert ax == pytest.approx(ex, abs=abs_tol)
        assert ay == pytest.approx(ey, abs=abs_tol)


def assert_bbox_close(bbox, x, y, width, height, abs_tol=1e-9):
    assert bbox.x == pytest.approx(x, abs=abs_tol)
    assert bbox.y == pytest.approx(y, abs=abs_tol)
    assert bbox.width == pytest.approx(width, abs=abs_tol)
    assert bbox.height == pytest.approx(height, abs=abs_tol)


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def unit_skeleton():
    """10x10 square at the origin"""
    return (Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10))


@pytest.fixture
def rotated_matrix():
    """Translate, rotate, skew and non-uniform scale"""
    return compose(translate(40, -15), rotate_deg(30), skew_deg(10, 5), scale(2, 0.5))


@pytest.fixture
def plain_shape():
    return Shape(x=10, y=20, width=40, height=30)


@pytest.fixture
def transformed_shape():
    """Shape with a non-trivial core transform and an off-center pivot"""
    return Shape(
        x=5, y=-3, width=12, height=8,
        core_transform=compose(translate(7, 2), rotate_deg(35), skew_deg(12, -4), scale(1.5, 0.75)),
        transform_origin=Vec2(3, 4),
    )


@pytest.fixture
def half_split_group():
    """Group whose two children split its bbox into left and right halves"""
    left = Shape(x=0, y=0, width=5, height=10)
    right = Shape(x=5, y=0, width=5, height=10)
    return Group(children=[left, right])


@pytest.fixture
def nested_tree():
    """outer group (rotated) > inner group (scaled) > leaf shape, plus a sibling"""
    leaf = Shape(
        x=2, y=3, width=6, height=4,
        core_transform=compose(rotate_deg(15), scale(1.2, 0.8)),
        transform_origin=Vec2(5, 5),
    )
    sibling = Shape(x=20, y=0, width=4, height=4)
    inner = Group(
        children=[leaf, sibling],
        core_transform=compose(translate(3, 1), scale(2, 1.5)),
        transform_origin=Vec2(1, 1),
    )
    outsider = Shape(x=-10, y=-10, width=3, height=3, core_transform=identity())
    outer = Group(
        children=[inner],
        core_transform=compose(translate(100, 50), rotate_deg(-20), skew_deg(5, 0)),
        transform_origin=Vec2(10, 10),
    )
    return {
        'roots': [outer, outsider],
        'outer': outer,
        'inner': inner,
        'leaf': leaf,
        'sibling': sibling,
        'outsider': outsider,
    }
