"""
Skeleton Editor - Element Tree Model

Simplified scene-graph consumed by the geometry engine:
- Shape: leaf with a local bbox
- Group: ordered children, bbox derived from the children
- ElementChangeRecord: the engine's only mutation output
- ElementTree: parent index over a forest of elements

Elements compare by identity. Two shapes with identical fields are still
two different nodes of the tree.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from models.transform import ElementBBox, Matrix, Vec2


@dataclass(eq=False)
class Shape:
    """Leaf geometry.

    x, y, width, height describe the local bbox. core_transform pivots
    around transform_origin (local coordinates). meta is caller data,
    passed through untouched.
    """
    x: float
    y: float
    width: float
    height: float
    core_transform: Matrix = field(default_factory=Matrix)
    transform_origin: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    meta: Dict[str, Any] = field(default_factory=dict)

    type = 'shape'

    @property
    def local_bbox(self) -> ElementBBox:
        return ElementBBox(self.x, self.y, self.width, self.height)


@dataclass(eq=False)
class Group:
    """Non-leaf element. Owns its children exclusively."""
    children: List['SimpleElement'] = field(default_factory=list)
    core_transform: Matrix = field(default_factory=Matrix)
    transform_origin: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    meta: Dict[str, Any] = field(default_factory=dict)

    type = 'group'


SimpleElement = Union[Shape, Group]


@dataclass
class ElementChangeRecord:
    """New local bbox for a shape. Callers apply these; the engine never does."""
    el: Shape
    new_local_bbox: ElementBBox


def collect_all_elements(slot: List[SimpleElement]) -> List[SimpleElement]:
    """Every element of the slot including nested ones, depth-first pre-order"""
    result = []
    stack = list(reversed(slot))
    while stack:
        element = stack.pop()
        result.append(element)
        if isinstance(element, Group):
            stack.extend(reversed(element.children))
    return result


class ElementTree:
    """Forest of elements with a parent table built once at construction.

    The table is keyed by object identity, so lookups never fall back to
    structural comparison. Trees are rebuilt per edit cycle; changes made to
    ``children`` lists after construction are not tracked.
    """

    _logger = logging.getLogger('ElementTree')

    def __init__(self, roots: List[SimpleElement]):
        self.roots = list(roots)
        self._elements: List[SimpleElement] = []
        self._parents: Dict[int, Optional[Group]] = {}

        stack = [(el, None) for el in reversed(self.roots)]
        while stack:
            element, parent = stack.pop()
            if id(element) in self._parents:
                raise ValueError("Element appears more than once in the tree")
            self._elements.append(element)
            self._parents[id(element)] = parent
            if isinstance(element, Group):
                stack.extend((child, element) for child in reversed(element.children))

        self._logger.debug(f"Indexed {len(self._elements)} elements under {len(self.roots)} roots")

    @classmethod
    def wrap(cls, tree: Union['ElementTree', List[SimpleElement]]) -> 'ElementTree':
        """Accept an existing tree or a plain list of root elements"""
        if isinstance(tree, ElementTree):
            return tree
        return cls(tree)

    def __contains__(self, element) -> bool:
        return id(element) in self._parents

    def __len__(self) -> int:
        return len(self._elements)

    def collect_all_elements(self) -> List[SimpleElement]:
        return list(self._elements)

    def find_element(self, predicate: Callable[[SimpleElement], bool]) -> Optional[SimpleElement]:
        """First element (pre-order) matching predicate, or None"""
        for element in self._elements:
            if predicate(element):
                return element
        return None

    def get_parent(self, element: SimpleElement) -> Optional[Group]:
        """Enclosing group, or None for roots and elements outside the tree"""
        return self._parents.get(id(element))

    def get_ancestry(self, element: SimpleElement) -> List[SimpleElement]:
        """Element followed by every enclosing group, nearest first"""
        ancestry = [element]
        parent = self.get_parent(element)
        while parent is not None:
            ancestry.append(parent)
            parent = self.get_parent(parent)
        return ancestry
