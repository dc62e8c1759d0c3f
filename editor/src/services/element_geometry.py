"""
Skeleton Editor - Element Geometry Service

Local bboxes, skeletons and world transforms for the element tree.

Coordinate spaces:
- base skeleton: corners of the local bbox, no transform applied
- element skeleton: base skeleton through the element's own baked matrix
  (i.e. as seen by its parent)
- world skeleton: base skeleton through every ancestor's baked matrix
"""

from typing import List, Union

from models.element import ElementTree, Group, Shape, SimpleElement
from models.transform import ElementBBox, Matrix, Skeleton, Vec2
from utils.transform_math import (
    bake_origin_into_matrix, compose, identity, transform_skeleton
)

TreeLike = Union[ElementTree, List[SimpleElement]]


def calc_bbox_from_skeleton(skeleton) -> ElementBBox:
    """Axis-aligned bounds of any sequence of points"""
    xs = [pt.x for pt in skeleton]
    ys = [pt.y for pt in skeleton]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    return ElementBBox(min_x, min_y, max_x - min_x, max_y - min_y)


def get_baked_transform_matrix(element: SimpleElement) -> Matrix:
    return bake_origin_into_matrix(element.core_transform, element.transform_origin)


def get_element_local_bbox(element: SimpleElement) -> ElementBBox:
    """Local bbox of an element, without its own transform.

    Shapes carry it explicitly. For groups it is the bounds of every
    child's transformed skeleton.
    """
    if isinstance(element, Shape):
        return element.local_bbox

    if not element.children:
        raise ValueError("Cannot derive the bbox of a group without children")

    all_points = []
    for child in element.children:
        all_points.extend(get_element_skeleton(child))
    return calc_bbox_from_skeleton(all_points)


def get_element_base_skeleton(element: SimpleElement) -> Skeleton:
    """The local bbox as four corners, TL, TR, BR, BL"""
    bbox = get_element_local_bbox(element)
    return (
        Vec2(bbox.x, bbox.y),
        Vec2(bbox.x + bbox.width, bbox.y),
        Vec2(bbox.x + bbox.width, bbox.y + bbox.height),
        Vec2(bbox.x, bbox.y + bbox.height),
    )


def get_element_skeleton(element: SimpleElement) -> Skeleton:
    """Base skeleton through the element's own baked matrix"""
    return transform_skeleton(get_element_base_skeleton(element), get_baked_transform_matrix(element))


def get_element_ancestry(tree: TreeLike, element: SimpleElement) -> List[SimpleElement]:
    """Element plus every enclosing group, nearest first"""
    return ElementTree.wrap(tree).get_ancestry(element)


def get_element_parent(tree: TreeLike, element: SimpleElement) -> Group:
    return ElementTree.wrap(tree).get_parent(element)


def get_element_world_matrix(tree: TreeLike, element: SimpleElement) -> Matrix:
    """Baked matrices of the ancestry composed root first"""
    ancestry = get_element_ancestry(tree, element)
    matrices = [get_baked_transform_matrix(el) for el in reversed(ancestry)]
    return compose(identity(), *matrices)


def get_element_world_skeleton(tree: TreeLike, element: SimpleElement) -> Skeleton:
    return transform_skeleton(get_element_base_skeleton(element), get_element_world_matrix(tree, element))
