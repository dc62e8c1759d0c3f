"""
Skeleton Editor - BBox Propagation Service

Writes an edited skeleton back into local bounding boxes, and relocates an
element's transform origin without moving it on screen.

Nothing here mutates an element. Every operation returns
ElementChangeRecord lists for the caller to apply in one pass.

Origin relocation relies on:
    d = (M^-1 - I) . (o_old - o_new)
Shifting the local geometry by d while baking o_new instead of o_old into
the same core matrix M leaves the rendered result unchanged.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from models.element import ElementChangeRecord, Shape, SimpleElement
from models.errors import DegenerateSkeletonError
from models.transform import ElementBBox, Matrix, Skeleton, Vec2
from services.element_geometry import (
    calc_bbox_from_skeleton, get_baked_transform_matrix,
    get_element_base_skeleton, get_element_local_bbox, get_element_skeleton
)
from utils.transform_math import (
    apply_linear_part_of_matrix, compute_origin_compensation_delta,
    identity, inverse, transform_skeleton
)

_logger = logging.getLogger('BBoxPropagation')


@dataclass
class OriginAdjustment:
    """Geometry changes plus the origin the caller should store"""
    changes: List[ElementChangeRecord] = field(default_factory=list)
    transform_origin_abs: Vec2 = None


def translate_skeleton(skeleton: Skeleton, delta: Vec2) -> Skeleton:
    return tuple(Vec2(pt.x + delta.x, pt.y + delta.y) for pt in skeleton)


def _remap_into_bbox(skeleton: Skeleton, old_bbox: ElementBBox, new_bbox: ElementBBox) -> Skeleton:
    """Keep each point's fractional position when old_bbox becomes new_bbox

    Raises:
        DegenerateSkeletonError: If old_bbox has zero width or height
    """
    if old_bbox.width == 0 or old_bbox.height == 0:
        raise DegenerateSkeletonError("Cannot remap children of a group with a zero-size bbox")

    remapped = []
    for point in skeleton:
        rel_x = (point.x - old_bbox.x) / old_bbox.width
        rel_y = (point.y - old_bbox.y) / old_bbox.height
        remapped.append(Vec2(
            new_bbox.x + rel_x * new_bbox.width,
            new_bbox.y + rel_y * new_bbox.height,
        ))
    return tuple(remapped)


def apply_skeleton_in_place(el: SimpleElement, new_skeleton: Skeleton,
                            skeleton_matrix: Matrix) -> List[ElementChangeRecord]:
    """Recover local bboxes from a skeleton expressed after skeleton_matrix.

    Shapes produce one record. Groups resize proportionally: each child's
    skeleton keeps its fractional position inside the group's bbox, then
    the child is processed with its own baked matrix.

    Args:
        el: Element the skeleton belongs to
        new_skeleton: Skeleton in the space skeleton_matrix maps to
        skeleton_matrix: Matrix from el's local space to new_skeleton's space

    Returns:
        Flat list of change records for every affected shape

    Raises:
        SingularMatrixError: If skeleton_matrix (or a child's baked matrix)
            is not invertible
    """
    inverse_matrix = inverse(skeleton_matrix)
    new_skeleton_in_local_coords = transform_skeleton(new_skeleton, inverse_matrix)
    new_local_bbox = calc_bbox_from_skeleton(new_skeleton_in_local_coords)

    if isinstance(el, Shape):
        return [ElementChangeRecord(el=el, new_local_bbox=new_local_bbox)]

    old_local_bbox = get_element_local_bbox(el)
    changes = []
    for child in el.children:
        child_skeleton_in_parent = get_element_skeleton(child)
        child_skeleton_remapped = _remap_into_bbox(child_skeleton_in_parent, old_local_bbox, new_local_bbox)
        changes.extend(apply_skeleton_in_place(child, child_skeleton_remapped, get_baked_transform_matrix(child)))

    _logger.debug(f"Group remapped into {new_local_bbox}: {len(changes)} change(s)")
    return changes


def adjust_local_bbox_for_new_transform_origin(el: SimpleElement, new_origin_abs: Vec2) -> OriginAdjustment:
    """Move el's transform origin to new_origin_abs (local coords) in place.

    Returns:
        OriginAdjustment with the compensating change records and the new
        origin

    Raises:
        SingularMatrixError: If el's core transform is not invertible
    """
    delta = compute_origin_compensation_delta(el.core_transform, el.transform_origin, new_origin_abs)

    if isinstance(el, Shape):
        # The shift is already in local space
        shifted = translate_skeleton(get_element_base_skeleton(el), delta)
        changes = apply_skeleton_in_place(el, shifted, identity())
    else:
        # Shift children in the group's local space (their parent space)
        changes = []
        for child in el.children:
            shifted = translate_skeleton(get_element_skeleton(child), delta)
            changes.extend(apply_skeleton_in_place(child, shifted, get_baked_transform_matrix(child)))

    _logger.debug(f"Origin moved to ({new_origin_abs.x:.3f}, {new_origin_abs.y:.3f}), "
                  f"compensation ({delta.x:.3f}, {delta.y:.3f})")
    return OriginAdjustment(changes=changes, transform_origin_abs=new_origin_abs)


def adjust_local_bbox_for_new_transform_origin_relative(
    el: SimpleElement, relative_origin: Sequence[float]
) -> OriginAdjustment:
    """Same as the absolute version, with the origin as a bbox fraction.

    The fraction refers to the bbox after compensation, so the new origin
    solves
        o_new = bbox.top_left + d + r * bbox.size,  d = (M^-1 - I)(o_old - o_new)
    which rearranges to
        M^-1 . o_new = bbox.top_left + (M^-1 - I) . o_old + r * bbox.size

    Args:
        el: Element to adjust
        relative_origin: (rx, ry), e.g. (0.5, 0.5) for the center
    """
    rx, ry = relative_origin

    inv_core = inverse(el.core_transform)
    a = inv_core.a - 1  # (M^-1 - I)_xx
    b = inv_core.c      # (M^-1 - I)_xy
    c = inv_core.b      # (M^-1 - I)_yx
    d = inv_core.d - 1  # (M^-1 - I)_yy

    bbox = get_element_local_bbox(el)
    origin = el.transform_origin

    rhs = Vec2(
        bbox.x + a * origin.x + b * origin.y + rx * bbox.width,
        bbox.y + c * origin.x + d * origin.y + ry * bbox.height,
    )

    # M^-1 . o_new = rhs
    new_origin_abs = apply_linear_part_of_matrix(el.core_transform, rhs)
    return adjust_local_bbox_for_new_transform_origin(el, new_origin_abs)
