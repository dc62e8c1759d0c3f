"""
Skeleton Editor - Element Operations Service

Bridges plain element documents and the geometry engine:
- Builds Shape/Group trees from document nodes
- Writes ElementChangeRecords back to the nodes in a single pass

Document nodes are dicts with already-resolved values:

    {
        'name': 'rectangle',
        'properties': {'x': 10, 'y': 20, 'width': 100, 'height': 50,
                       'pos': [0.5, 0.5], 'v-transform-origin': [50, 25]},
        'transform': {'translateX': 0, 'translateY': 0, 'rotate': 0,
                      'skewX': 0, 'skewY': 0, 'scaleX': 1, 'scaleY': 1},
        'slots': {'default': [...]},   # groups and masks only
    }

'pos' anchors (x, y) inside the box as a fraction of its size. Circles
store 'radius': [rx, ry] instead of width/height.
"""

import logging
import math
from typing import List, Optional

from constants import (
    BOX_ELEMENT_KINDS, DEFAULT_POS_ORIGIN, DEFAULT_TRANSFORM,
    GROUP_ELEMENT_KINDS, RADIUS_ELEMENT_KINDS
)
from models.element import ElementChangeRecord, Group, Shape, SimpleElement
from models.errors import UnsupportedElementError
from models.transform import ElementBBox, Matrix, Vec2
from utils.logger import loggerRaise
from utils.transform_math import compose, rotate_deg, scale, skew_deg, translate

_logger = logging.getLogger('ElementOperations')


# ========================================
# Value validation
# ========================================

def is_finite_number(value) -> bool:
    """True for real, finite numbers (bools excluded)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_finite_pair(value) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 2 and all(is_finite_number(v) for v in value)


def is_non_negative_pair(value) -> bool:
    return is_finite_pair(value) and all(v >= 0 for v in value)


# ========================================
# Document -> elements
# ========================================

def build_core_transform(translate_x=0.0, translate_y=0.0, rotate=0.0,
                         skew_x=0.0, skew_y=0.0, scale_x=1.0, scale_y=1.0) -> Matrix:
    """Core transform in canonical order: translate, rotate, skew, scale.

    Angles are in degrees.
    """
    return compose(
        translate(translate_x, translate_y),
        rotate_deg(rotate),
        skew_deg(skew_x, skew_y),
        scale(scale_x, scale_y),
    )


def compose_bbox_from_values_and_origin(x, y, width, height, pos_origin) -> ElementBBox:
    """Local bbox from an anchored position ('pos' origin) and a size"""
    return ElementBBox(
        x=x - width * pos_origin[0],
        y=y - height * pos_origin[1],
        width=width,
        height=height,
    )


def _read_core_transform(node: dict) -> Optional[Matrix]:
    values = dict(DEFAULT_TRANSFORM)
    values.update(node.get('transform', {}))
    if not all(is_finite_number(values[key]) for key in DEFAULT_TRANSFORM):
        return None

    return build_core_transform(
        translate_x=values['translateX'],
        translate_y=values['translateY'],
        rotate=values['rotate'],
        skew_x=values['skewX'],
        skew_y=values['skewY'],
        scale_x=values['scaleX'],
        scale_y=values['scaleY'],
    )


def _read_local_bbox(node: dict) -> Optional[ElementBBox]:
    props = node.get('properties', {})
    pos_origin = props.get('pos', DEFAULT_POS_ORIGIN)
    x = props.get('x')
    y = props.get('y')
    if not (is_finite_pair(pos_origin) and is_finite_number(x) and is_finite_number(y)):
        return None

    if node['name'] in RADIUS_ELEMENT_KINDS:
        radius = props.get('radius')
        if not is_non_negative_pair(radius):
            return None
        width = radius[0] * 2
        height = radius[1] * 2
    else:
        width = props.get('width')
        height = props.get('height')
        if not (is_finite_number(width) and is_finite_number(height)):
            return None

    return compose_bbox_from_values_and_origin(x, y, width, height, pos_origin)


def convert_node_to_element(node: dict) -> Optional[SimpleElement]:
    """Convert one document node (and its children) to an engine element.

    Returns:
        Shape or Group, or None when the node is skipped (unsupported kind
        such as 'path', non-finite values, or a group left without
        children)
    """
    name = node.get('name')

    origin = node.get('properties', {}).get('v-transform-origin', (0.0, 0.0))
    core_transform = _read_core_transform(node)
    if core_transform is None or not is_finite_pair(origin):
        _logger.warning(f"Skipping '{name}' node: invalid transform values")
        return None
    transform_origin = Vec2(origin[0], origin[1])

    if name in GROUP_ELEMENT_KINDS:
        children = convert_document_to_elements(node.get('slots', {}).get('default', []))
        if not children:
            # No bbox can be derived for a group without children
            _logger.warning(f"Skipping '{name}' node: no convertible children")
            return None
        return Group(
            children=children,
            core_transform=core_transform,
            transform_origin=transform_origin,
            meta={'node': node},
        )

    if name in BOX_ELEMENT_KINDS or name in RADIUS_ELEMENT_KINDS:
        bbox = _read_local_bbox(node)
        if bbox is None:
            _logger.warning(f"Skipping '{name}' node: invalid geometry values")
            return None
        return Shape(
            x=bbox.x, y=bbox.y, width=bbox.width, height=bbox.height,
            core_transform=core_transform,
            transform_origin=transform_origin,
            meta={'node': node},
        )

    # TODO: derive a bbox for 'path' nodes once path geometry is supported
    _logger.info(f"Skipping unsupported '{name}' node")
    return None


def convert_document_to_elements(nodes: List[dict]) -> List[SimpleElement]:
    """Convert a slot of document nodes, dropping skipped nodes"""
    elements = []
    for node in nodes:
        element = convert_node_to_element(node)
        if element is not None:
            elements.append(element)
    return elements


# ========================================
# Change records -> document
# ========================================

def set_element_local_bbox(node: dict, new_local_bbox: ElementBBox) -> bool:
    """Write a local bbox into a document node, honoring its 'pos' origin.

    Args:
        node: Document node to update in place
        new_local_bbox: Box in the node's local space

    Returns:
        bool: False if the node's 'pos' origin is invalid and nothing was
        written

    Raises:
        UnsupportedElementError: If the node kind has no local bbox
    """
    name = node.get('name')
    if name not in BOX_ELEMENT_KINDS and name not in RADIUS_ELEMENT_KINDS:
        loggerRaise(UnsupportedElementError(f"Element type '{name}' not supported for setting local bbox"),
                    f"Cannot resize '{name}' elements")

    props = node.setdefault('properties', {})
    pos_origin = props.get('pos', DEFAULT_POS_ORIGIN)
    if not is_finite_pair(pos_origin):
        _logger.warning(f"Not writing bbox to '{name}' node: invalid pos origin {pos_origin!r}")
        return False

    props['x'] = new_local_bbox.x + new_local_bbox.width * pos_origin[0]
    props['y'] = new_local_bbox.y + new_local_bbox.height * pos_origin[1]

    if name in RADIUS_ELEMENT_KINDS:
        props['radius'] = [new_local_bbox.width / 2, new_local_bbox.height / 2]
    else:
        props['width'] = new_local_bbox.width
        props['height'] = new_local_bbox.height
    return True


def set_element_transform_origin(node: dict, origin: Vec2):
    node.setdefault('properties', {})['v-transform-origin'] = [origin.x, origin.y]


def apply_change_records(records: List[ElementChangeRecord]) -> int:
    """Apply a batch of change records to the nodes they came from.

    Returns:
        int: Number of nodes updated
    """
    updated = 0
    for record in records:
        node = record.el.meta.get('node')
        if node is None:
            raise ValueError("Change record element has no source node in meta")
        if set_element_local_bbox(node, record.new_local_bbox):
            updated += 1

    _logger.debug(f"Applied {updated}/{len(records)} change record(s)")
    return updated
