"""
Skeleton Editor - Skeleton Projection Service

Turns a pointer position during a handle drag into a new world-space
skeleton. The drag is solved in the element's normalized space (the world
matrix undone), where the skeleton is an axis-aligned rectangle, and the
result is mapped back through the world matrix.

Handle indices:
    corners: 0 = top-left, 1 = top-right, 2 = bottom-right, 3 = bottom-left
    edges:   0 = top, 1 = right, 2 = bottom, 3 = left
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from models.errors import DegenerateSkeletonError, InvalidHandleError
from models.transform import Matrix, Skeleton, Vec2
from utils.transform_math import apply_to_point, inverse, transform_skeleton

_logger = logging.getLogger('SkeletonProjection')


@dataclass
class ProjectionResult:
    """Projected skeleton in world space.

    test_points is reserved for debug markers and is always empty.
    """
    skeleton: Skeleton
    test_points: List[Vec2] = field(default_factory=list)


def _sign(value: float) -> float:
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0


def _rect_skeleton(left: float, top: float, right: float, bottom: float) -> Skeleton:
    return (
        Vec2(left, top),
        Vec2(right, top),
        Vec2(right, bottom),
        Vec2(left, bottom),
    )


def _normalize(base_skeleton: Skeleton, world_transform_matrix: Matrix, handle_pos: Vec2 = None):
    inverse_matrix = inverse(world_transform_matrix)
    normalized_skeleton = transform_skeleton(base_skeleton, inverse_matrix)
    if handle_pos is None:
        return normalized_skeleton, None
    return normalized_skeleton, apply_to_point(inverse_matrix, handle_pos)


def get_aspect_ratio_of_skeleton(skeleton: Skeleton, world_transform_matrix: Matrix) -> float:
    """Width over height measured in normalized space.

    World matrices may scale anisotropically, so the world-space skeleton
    is not a reliable source for the ratio.

    Raises:
        DegenerateSkeletonError: If the normalized width or height is zero
    """
    normalized_skeleton, _ = _normalize(skeleton, world_transform_matrix)

    width = abs(normalized_skeleton[1].x - normalized_skeleton[0].x)
    height = abs(normalized_skeleton[3].y - normalized_skeleton[0].y)

    if width == 0 or height == 0:
        raise DegenerateSkeletonError("Aspect ratio of a zero-width or zero-height skeleton is undefined")
    return width / height


def _check_aspect_ratio(aspect_ratio: Optional[float]):
    if aspect_ratio is None:
        return
    if aspect_ratio <= 0 or not math.isfinite(aspect_ratio):
        raise DegenerateSkeletonError(f"Aspect ratio must be a positive finite number, got {aspect_ratio}")


def project_skeleton_from_corner(
    base_skeleton: Skeleton,
    world_transform_matrix: Matrix,
    handle_index: int,
    handle_pos: Vec2,
    aspect_ratio: Optional[float] = None,
) -> ProjectionResult:
    """Project a corner-handle drag.

    The corner opposite the dragged one, (handle_index + 2) % 4, is the
    anchor and never moves. Dragging past the anchor mirrors the box.

    With an aspect ratio the box is fitted in cover mode: only the
    under-sized dimension grows, so the requested extent stays inside.

    Args:
        base_skeleton: Skeleton at drag start (world space)
        world_transform_matrix: Element world matrix at drag start
        handle_index: Corner index 0-3
        handle_pos: Pointer position (world space)
        aspect_ratio: Width/height to keep, or None

    Returns:
        ProjectionResult with the new world-space skeleton

    Raises:
        InvalidHandleError: If handle_index is not 0-3
        SingularMatrixError: If the world matrix is not invertible
        DegenerateSkeletonError: If a locked ratio meets a drag with both
            width and height zero
    """
    if handle_index not in (0, 1, 2, 3):
        raise InvalidHandleError(f"Invalid corner handle index: {handle_index}")
    _check_aspect_ratio(aspect_ratio)

    normalized_skeleton, normalized_handle_pos = _normalize(base_skeleton, world_transform_matrix, handle_pos)

    anchor = normalized_skeleton[(handle_index + 2) % 4]
    base_width = anchor.x - normalized_handle_pos.x
    base_height = anchor.y - normalized_handle_pos.y

    width = abs(base_width)
    height = abs(base_height)

    adjusted_width = width
    adjusted_height = height

    if aspect_ratio is not None:
        if width == 0 and height == 0:
            raise DegenerateSkeletonError("Cannot keep an aspect ratio on a drag onto the anchor")

        if width > aspect_ratio * height:
            # Too wide, grow height
            adjusted_height = width / aspect_ratio
        else:
            # Too tall, grow width
            adjusted_width = height * aspect_ratio

    # On the anchor line the grown dimension keeps its unmirrored side
    handle = normalized_skeleton[handle_index]
    sign_w = _sign(base_width) or _sign(anchor.x - handle.x)
    sign_h = _sign(base_height) or _sign(anchor.y - handle.y)

    if handle_index == 0:
        bottom = normalized_skeleton[2].y
        right = normalized_skeleton[2].x
        left = right - adjusted_width * sign_w
        top = bottom - adjusted_height * sign_h
    elif handle_index == 1:
        bottom = normalized_skeleton[3].y
        left = normalized_skeleton[3].x
        right = left + adjusted_width * -sign_w
        top = bottom - adjusted_height * sign_h
    elif handle_index == 2:
        top = normalized_skeleton[0].y
        left = normalized_skeleton[0].x
        right = left + adjusted_width * -sign_w
        bottom = top + adjusted_height * -sign_h
    else:
        top = normalized_skeleton[1].y
        right = normalized_skeleton[1].x
        left = right - adjusted_width * sign_w
        bottom = top + adjusted_height * -sign_h

    new_skeleton = _rect_skeleton(left, top, right, bottom)
    _logger.debug(f"Corner {handle_index} projected to ({left:.3f}, {top:.3f}) - ({right:.3f}, {bottom:.3f})")

    return ProjectionResult(skeleton=transform_skeleton(new_skeleton, world_transform_matrix))


def project_skeleton_from_edge(
    base_skeleton: Skeleton,
    world_transform_matrix: Matrix,
    edge_index: int,
    handle_pos: Vec2,
    aspect_ratio: Optional[float] = None,
) -> ProjectionResult:
    """Project an edge-handle drag.

    Only the dimension across the dragged edge follows the pointer. Without
    an aspect ratio the other dimension is taken from the base skeleton.
    With one, the other dimension is derived from it and centered on the
    original center line of the box.

    Raises:
        InvalidHandleError: If edge_index is not 0-3
        SingularMatrixError: If the world matrix is not invertible
        DegenerateSkeletonError: If aspect_ratio is not positive and finite
    """
    if edge_index not in (0, 1, 2, 3):
        raise InvalidHandleError(f"Invalid edge handle index: {edge_index}")
    _check_aspect_ratio(aspect_ratio)

    normalized_skeleton, normalized_handle_pos = _normalize(base_skeleton, world_transform_matrix, handle_pos)

    if edge_index in (0, 2):
        if edge_index == 0:
            bottom = normalized_skeleton[2].y
            top = normalized_handle_pos.y
        else:
            top = normalized_skeleton[0].y
            bottom = normalized_handle_pos.y

        if aspect_ratio is not None:
            adjusted_width = abs(top - bottom) * aspect_ratio
            center_x = (normalized_skeleton[0].x + normalized_skeleton[1].x) / 2
            left = center_x - adjusted_width / 2
            right = center_x + adjusted_width / 2
        else:
            left = normalized_skeleton[3].x
            right = normalized_skeleton[1].x
    else:
        if edge_index == 1:
            left = normalized_skeleton[3].x
            right = normalized_handle_pos.x
        else:
            right = normalized_skeleton[1].x
            left = normalized_handle_pos.x

        if aspect_ratio is not None:
            adjusted_height = abs(right - left) / aspect_ratio
            center_y = (normalized_skeleton[1].y + normalized_skeleton[2].y) / 2
            top = center_y - adjusted_height / 2
            bottom = center_y + adjusted_height / 2
        else:
            top = normalized_skeleton[0].y
            bottom = normalized_skeleton[2].y

    new_skeleton = _rect_skeleton(left, top, right, bottom)
    _logger.debug(f"Edge {edge_index} projected to ({left:.3f}, {top:.3f}) - ({right:.3f}, {bottom:.3f})")

    return ProjectionResult(skeleton=transform_skeleton(new_skeleton, world_transform_matrix))
