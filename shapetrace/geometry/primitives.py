# shapetrace/geometry/primitives.py

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np


_LABELS = {
    3: "triangle",
    4: "quadrilateral",
    5: "pentagon",
    6: "hexagon",
}


def shape_label(vertex_count: int) -> str:
    return _LABELS.get(vertex_count, f"polygon with {vertex_count} vertices")


class BoundingBox:
    """
    Axis-aligned rectangle in pixel coordinates.
    Covers columns x .. x+width-1 and rows y .. y+height-1.
    """

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self) -> str:
        return f"BoundingBox(x={self.x}, y={self.y}, width={self.width}, height={self.height})"

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


class Shape:
    """
    A single retained contour with its simplified vertex count.
    """

    def __init__(
        self,
        vertex_count: int,
        bounding_box: BoundingBox,
        contour: np.ndarray,
    ):
        self.vertex_count = vertex_count
        self.bounding_box = bounding_box
        self.contour = contour  # (N, 1, 2) int32, read-only

    @property
    def label(self) -> str:
        return shape_label(self.vertex_count)

    def __repr__(self) -> str:
        return f"Shape({self.vertex_count} vertices @ ({self.bounding_box.x}, {self.bounding_box.y}))"

    def to_dict(self, include_contour: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "vertex_count": self.vertex_count,
            "label": self.label,
            "bounding_box": self.bounding_box.to_dict(),
        }
        if include_contour:
            data["contour"] = self.contour.reshape(-1, 2).tolist()
        return data


class ContourSet:
    """
    Traced contours in extraction order plus, for each one, the index of its
    parent contour (None for top-level contours).
    """

    def __init__(
        self,
        contours: Sequence[np.ndarray],
        hierarchy: Sequence[Optional[int]],
    ):
        if len(contours) != len(hierarchy):
            raise ValueError("hierarchy must have one entry per contour")
        self.contours = tuple(contours)
        self.hierarchy = tuple(hierarchy)

    def __len__(self) -> int:
        return len(self.contours)

    def top_level(self) -> Iterator[np.ndarray]:
        for contour, parent in zip(self.contours, self.hierarchy):
            if parent is None:
                yield contour


def shapes_to_dicts(shapes: List[Shape], include_contour: bool = False) -> List[Dict[str, Any]]:
    return [s.to_dict(include_contour=include_contour) for s in shapes]
