"""
Tests for the element document adapter.

Covers:
- Value validation helpers
- Core transform construction order
- Document -> element conversion (boxes, circles, groups, skipped nodes)
- Writing change records back to documents
- End-to-end: drag a grouped rectangle and write the result back
"""
import math

import pytest

from conftest import assert_bbox_close, assert_points_close
from models.element import ElementChangeRecord, Group, Shape
from models.errors import UnsupportedElementError
from models.transform import ElementBBox, Vec2
from services.bbox_propagation import apply_skeleton_in_place
from services.element_geometry import (
    get_element_local_bbox, get_element_world_matrix, get_element_world_skeleton
)
from services.element_operations import (
    apply_change_records, build_core_transform, compose_bbox_from_values_and_origin,
    convert_document_to_elements, is_finite_number, is_finite_pair,
    is_non_negative_pair, set_element_local_bbox, set_element_transform_origin
)
from services.skeleton_projection import project_skeleton_from_corner
from utils.transform_math import (
    apply_to_point, compose, matrices_close, rotate_deg, scale, skew_deg, translate
)


def rect_node(x=0, y=0, width=10, height=10, pos=(0, 0), origin=(0, 0), **transform):
    return {
        'name': 'rectangle',
        'properties': {'x': x, 'y': y, 'width': width, 'height': height,
                       'pos': list(pos), 'v-transform-origin': list(origin)},
        'transform': transform,
    }


# ══════════════════════════════════════════════════════════════════════════
# Validation
# ══════════════════════════════════════════════════════════════════════════

class TestValidation:

    @pytest.mark.parametrize("value", [0, 1.5, -3])
    def test_finite_numbers(self, value):
        assert is_finite_number(value)

    @pytest.mark.parametrize("value", [math.nan, math.inf, '1', None, True])
    def test_non_numbers(self, value):
        assert not is_finite_number(value)

    def test_pairs(self):
        assert is_finite_pair([1, 2])
        assert is_finite_pair((0.5, 0.5))
        assert not is_finite_pair([1])
        assert not is_finite_pair([1, math.nan])
        assert is_non_negative_pair([0, 3])
        assert not is_non_negative_pair([-1, 3])


# ══════════════════════════════════════════════════════════════════════════
# Conversion
# ══════════════════════════════════════════════════════════════════════════

class TestConversion:

    def test_core_transform_order(self):
        m = build_core_transform(translate_x=5, translate_y=6, rotate=30, skew_x=10, skew_y=4, scale_x=2, scale_y=3)
        expected = compose(translate(5, 6), rotate_deg(30), skew_deg(10, 4), scale(2, 3))
        assert matrices_close(m, expected)

    def test_pos_origin_anchors_box(self):
        bbox = compose_bbox_from_values_and_origin(50, 40, 20, 10, (0.5, 0.5))
        assert_bbox_close(bbox, 40, 35, 20, 10)

    def test_rectangle_node(self):
        node = rect_node(x=50, y=40, width=20, height=10, pos=(0.5, 0.5), origin=(3, 4), rotate=90)
        [shape] = convert_document_to_elements([node])
        assert isinstance(shape, Shape)
        assert_bbox_close(shape.local_bbox, 40, 35, 20, 10)
        assert tuple(shape.transform_origin) == (3, 4)
        assert shape.meta['node'] is node
        assert apply_to_point(shape.core_transform, Vec2(1, 0)).y == pytest.approx(1)

    def test_circle_node(self):
        node = {'name': 'circle', 'properties': {'x': 10, 'y': 10, 'radius': [5, 3], 'pos': [0.5, 0.5]}}
        [shape] = convert_document_to_elements([node])
        assert_bbox_close(shape.local_bbox, 5, 7, 10, 6)

    def test_missing_transform_defaults_to_identity(self):
        [shape] = convert_document_to_elements([rect_node()])
        assert matrices_close(shape.core_transform, compose())

    def test_group_node(self):
        child = rect_node(x=1)
        group_node = {'name': 'group', 'properties': {}, 'transform': {'translateX': 4},
                      'slots': {'default': [child, {'name': 'path', 'properties': {}}]}}
        [group] = convert_document_to_elements([group_node])
        assert isinstance(group, Group)
        assert len(group.children) == 1
        assert group.children[0].meta['node'] is child

    def test_group_without_convertible_children_is_skipped(self):
        empty = {'name': 'group', 'properties': {}, 'slots': {'default': [{'name': 'path', 'properties': {}}]}}
        outer = {'name': 'group', 'properties': {}, 'slots': {'default': [empty, rect_node(x=3)]}}
        [group] = convert_document_to_elements([outer])
        assert len(group.children) == 1
        assert group.children[0].x == 3
        assert_bbox_close(get_element_local_bbox(group), 3, 0, 10, 10)

    def test_group_with_only_empty_groups_is_skipped(self):
        nested = {'name': 'mask', 'properties': {},
                  'slots': {'default': [{'name': 'group', 'properties': {}}]}}
        assert convert_document_to_elements([nested]) == []

    def test_invalid_nodes_are_skipped(self):
        nodes = [
            rect_node(width=math.nan),
            rect_node(rotate=math.inf),
            {'name': 'path', 'properties': {}},
            {'name': 'circle', 'properties': {'x': 0, 'y': 0, 'radius': [-1, 2]}},
            rect_node(x=7),
        ]
        elements = convert_document_to_elements(nodes)
        assert len(elements) == 1
        assert elements[0].x == 7


# ══════════════════════════════════════════════════════════════════════════
# Write-back
# ══════════════════════════════════════════════════════════════════════════

class TestWriteBack:

    def test_rectangle_honors_pos_origin(self):
        node = rect_node(pos=(0.5, 1))
        assert set_element_local_bbox(node, ElementBBox(10, 20, 30, 40))
        props = node['properties']
        assert (props['x'], props['y'], props['width'], props['height']) == (25, 60, 30, 40)

    def test_circle_writes_radius(self):
        node = {'name': 'circle', 'properties': {'x': 0, 'y': 0, 'radius': [1, 1], 'pos': [0.5, 0.5]}}
        set_element_local_bbox(node, ElementBBox(0, 0, 8, 4))
        assert node['properties']['radius'] == [4, 2]
        assert (node['properties']['x'], node['properties']['y']) == (4, 2)

    def test_invalid_pos_origin_writes_nothing(self):
        node = rect_node()
        node['properties']['pos'] = [math.nan, 0]
        assert not set_element_local_bbox(node, ElementBBox(1, 2, 3, 4))
        assert node['properties']['x'] == 0

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedElementError):
            set_element_local_bbox({'name': 'path', 'properties': {}}, ElementBBox(0, 0, 1, 1))

    def test_transform_origin_write(self):
        node = rect_node()
        set_element_transform_origin(node, Vec2(2, 3))
        assert node['properties']['v-transform-origin'] == [2, 3]

    def test_record_without_node(self):
        record = ElementChangeRecord(el=Shape(x=0, y=0, width=1, height=1), new_local_bbox=ElementBBox(0, 0, 2, 2))
        with pytest.raises(ValueError):
            apply_change_records([record])

    def test_drag_round_trip_through_document(self):
        child = rect_node(x=0, y=0, width=10, height=10, scaleX=2)
        group_node = {'name': 'group', 'properties': {}, 'transform': {'translateX': 100},
                      'slots': {'default': [child]}}
        roots = convert_document_to_elements([group_node])
        shape = roots[0].children[0]

        world_matrix = get_element_world_matrix(roots, shape)
        base = get_element_world_skeleton(roots, shape)
        assert_points_close(base, [(100, 0), (120, 0), (120, 10), (100, 10)])

        result = project_skeleton_from_corner(base, world_matrix, 2, Vec2(140, 5), None)
        updated = apply_change_records(apply_skeleton_in_place(shape, result.skeleton, world_matrix))

        assert updated == 1
        props = child['properties']
        assert props['width'] == pytest.approx(20)
        assert props['height'] == pytest.approx(5)

        rebuilt = convert_document_to_elements([group_node])
        rebuilt_shape = rebuilt[0].children[0]
        assert_points_close(get_element_world_skeleton(rebuilt, rebuilt_shape), [tuple(p) for p in result.skeleton])
