"""Coordinate composition utilities for canvas rendering.

Adapts absolute canvas pixel geometry into a caller-chosen relative
coordinate system (e.g. viewBox-relative) for embedding into a target
canvas:
- Absolute pixels are divided by the canvas size (0-1 range)
- The pluggable compose function maps (x_rel, y_rel) -> (x, y)
"""

from models.transform import ElementBBox


def _compose_abs(canvas_width, canvas_height, x, y, compose):
	"""Map an absolute canvas pixel through the relative compose function."""
	x_rel = x / canvas_width
	y_rel = y / canvas_height
	return compose(x_rel, y_rel)


def _format_number(value):
	"""Render a coordinate without a trailing '.0' for whole numbers."""
	value = float(value)
	if value.is_integer():
		return str(int(value))
	return repr(value)


def compose_bbox(canvas_width, canvas_height, bbox, compose):
	"""Convert an absolute bbox to the compose function's coordinate system.
	
	Args:
		canvas_width, canvas_height: Canvas size in pixels
		bbox: ElementBBox in absolute canvas pixels
		compose: Callable (x_rel, y_rel) -> (x, y)
		
	Returns:
		ElementBBox spanning the composed top-left and bottom-right corners
	"""
	x, y = _compose_abs(canvas_width, canvas_height, bbox.x, bbox.y, compose)
	x_max, y_max = _compose_abs(canvas_width, canvas_height, bbox.x + bbox.width, bbox.y + bbox.height, compose)
	return ElementBBox(x, y, x_max - x, y_max - y)


def pathify_skeleton(canvas_width, canvas_height, points, compose):
	"""Build a closed SVG path string through composed skeleton points.
	
	Args:
		canvas_width, canvas_height: Canvas size in pixels
		points: Sequence of Vec2 in absolute canvas pixels
		compose: Callable (x_rel, y_rel) -> (x, y)
		
	Returns:
		str: 'M x,y L x,y ... Z' style path, or '' for no points
	"""
	if not points:
		return ''
	
	segments = []
	for pt in points:
		x, y = _compose_abs(canvas_width, canvas_height, pt.x, pt.y, compose)
		segments.append(f"{_format_number(x)},{_format_number(y)}")
	
	return f"M{' L'.join(segments)} Z"


def compose_circle(canvas_width, canvas_height, pt, compose):
	"""Convert an absolute circle center to the compose function's system.
	
	Args:
		canvas_width, canvas_height: Canvas size in pixels
		pt: (x, y) center in absolute canvas pixels
		compose: Callable (x_rel, y_rel) -> (x, y)
		
	Returns:
		tuple: (cx, cy)
	"""
	cx, cy = _compose_abs(canvas_width, canvas_height, pt[0], pt[1], compose)
	return (cx, cy)
