
from .raster_detector import (
    DetectionConfig,
    approximate_contour,
    approximate_shapes,
    detect_edges,
    detect_shapes,
    extract_contours,
    to_grayscale,
)
from .visualize import draw_shapes, shapes_image_path
from .primitives import BoundingBox, ContourSet, Shape, shape_label

__all__ = [
    "DetectionConfig",
    "approximate_contour",
    "approximate_shapes",
    "detect_edges",
    "detect_shapes",
    "extract_contours",
    "to_grayscale",
    "draw_shapes",
    "shapes_image_path",
    "BoundingBox",
    "ContourSet",
    "Shape",
    "shape_label",
]
