"""
Skeleton Editor - Rect Drag Controller

Press/move/release state machine for resize handles. Holds only the drag
state (start position, active handle, skeleton and aspect ratio at drag
start) and threads it into the projection functions on every move.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from constants import ASPECT_LOCK_MODIFIER, CORNER_HANDLES, EDGE_HANDLES
from models.errors import DegenerateSkeletonError, InvalidHandleError
from models.transform import Matrix, Skeleton, Vec2
from services.skeleton_projection import (
    get_aspect_ratio_of_skeleton, project_skeleton_from_corner,
    project_skeleton_from_edge
)
from utils.logger import loggerRaise


def is_corner_handle(handle: str) -> bool:
    return handle in CORNER_HANDLES


def is_edge_handle(handle: str) -> bool:
    return handle in EDGE_HANDLES


@dataclass
class DragContext:
    """Drag state captured on press, cleared on release."""
    handle: str
    start_pos: Vec2
    skeleton_at_start: Skeleton
    aspect_ratio_at_start: Optional[float]
    world_matrix_at_start: Matrix
    metadata: dict = field(default_factory=dict)


class RectDrag:
    """Resize-handle drag for a single element.

    Args:
        world_skeleton_source: Callable returning the element's current
            world skeleton
        world_matrix_source: Callable returning the element's current
            world matrix
        enforce_aspect_ratio: Lock the ratio on every drag, not only with
            the modifier held
        callback: Called with each projected skeleton
    """

    _logger = logging.getLogger('RectDrag')

    def __init__(self, world_skeleton_source: Callable[[], Skeleton],
                 world_matrix_source: Callable[[], Matrix],
                 enforce_aspect_ratio: bool = False,
                 callback: Callable[[Skeleton], None] = None):
        self.world_skeleton_source = world_skeleton_source
        self.world_matrix_source = world_matrix_source
        self.enforce_aspect_ratio = enforce_aspect_ratio
        self.callback = callback
        self.context: Optional[DragContext] = None
        self.test_points: List[Vec2] = []

    @property
    def is_dragging(self) -> bool:
        return self.context is not None

    def handle_mousedown(self, x: float, y: float, handle: str):
        """Start a drag on a handle ('tl', 'tr', 'br', 'bl', 't', 'r', 'b', 'l')"""
        if not (is_corner_handle(handle) or is_edge_handle(handle)):
            loggerRaise(InvalidHandleError(f"Unknown handle '{handle}'"), "Unknown resize handle")

        skeleton = tuple(Vec2(pt.x, pt.y) for pt in self.world_skeleton_source())
        world_matrix = self.world_matrix_source()
        try:
            aspect_ratio = get_aspect_ratio_of_skeleton(skeleton, world_matrix)
        except DegenerateSkeletonError:
            # Unlocked drags still work on flat elements
            aspect_ratio = None

        self.context = DragContext(
            handle=handle,
            start_pos=Vec2(x, y),
            skeleton_at_start=skeleton,
            aspect_ratio_at_start=aspect_ratio,
            world_matrix_at_start=world_matrix,
        )
        self._logger.debug(f"Drag started on '{handle}' at ({x:.2f}, {y:.2f}), ratio {aspect_ratio}")

    def handle_mousemove(self, x: float, y: float, modifiers: Optional[Set[str]] = None) -> Optional[Skeleton]:
        """Project the drag to (x, y).

        Args:
            x, y: Pointer position in world space
            modifiers: Set of held modifier names, e.g. {'shift'}

        Returns:
            The new world skeleton, or None when no drag is active
        """
        if self.context is None:
            return None

        modifiers = modifiers or set()
        lock = self.enforce_aspect_ratio or ASPECT_LOCK_MODIFIER in modifiers
        aspect_ratio = self.context.aspect_ratio_at_start if lock else None
        if lock and aspect_ratio is None:
            loggerRaise(DegenerateSkeletonError("Cannot lock the aspect ratio of a zero-width or zero-height element"),
                        "Aspect ratio lock is unavailable for this element")
        handle_pos = Vec2(x, y)

        if is_corner_handle(self.context.handle):
            result = project_skeleton_from_corner(
                self.context.skeleton_at_start, self.context.world_matrix_at_start,
                CORNER_HANDLES.index(self.context.handle), handle_pos, aspect_ratio
            )
        else:
            result = project_skeleton_from_edge(
                self.context.skeleton_at_start, self.context.world_matrix_at_start,
                EDGE_HANDLES.index(self.context.handle), handle_pos, aspect_ratio
            )

        self.test_points = result.test_points
        if self.callback:
            self.callback(result.skeleton)
        return result.skeleton

    def handle_mouseup(self):
        self.context = None
