"""Shared fixtures: synthetic images drawn with OpenCV."""

import math
from pathlib import Path
from typing import List, Sequence, Tuple

import cv2
import numpy as np
import pytest


def regular_polygon(center: Tuple[int, int], radius: int, sides: int) -> np.ndarray:
    cx, cy = center
    pts = []
    for i in range(sides):
        angle = -math.pi / 2 + 2 * math.pi * i / sides
        pts.append((int(round(cx + radius * math.cos(angle))), int(round(cy + radius * math.sin(angle)))))
    return np.array(pts, dtype=np.int32)


def canvas(width: int = 300, height: int = 300, value: int = 0) -> np.ndarray:
    return np.full((height, width, 3), value, dtype=np.uint8)


def draw_filled(img: np.ndarray, polygons: Sequence[np.ndarray]) -> np.ndarray:
    for poly in polygons:
        cv2.fillPoly(img, [poly.reshape(-1, 1, 2)], (255, 255, 255))
    # Hard-edged fills break Canny outlines apart at acute corners, leaving
    # open fragments. Scanned or exported maps always carry some edge
    # softening, so blur the same way before detection.
    return cv2.GaussianBlur(img, (5, 5), 0)


def write_png(path: Path, img: np.ndarray) -> Path:
    assert cv2.imwrite(str(path), img)
    return path


def single_shape_image(sides: int) -> np.ndarray:
    img = canvas()
    if sides == 4:
        poly = np.array([(90, 100), (210, 100), (210, 200), (90, 200)], dtype=np.int32)
    else:
        poly = regular_polygon((150, 150), 80, sides)
    return draw_filled(img, [poly])


def mixed_shapes_image() -> np.ndarray:
    img = canvas(width=800, height=250)
    polygons: List[np.ndarray] = [
        regular_polygon((110, 125), 80, 3),
        np.array([(240, 60), (370, 60), (370, 190), (240, 190)], dtype=np.int32),
        regular_polygon((500, 125), 75, 5),
        regular_polygon((680, 125), 75, 6),
    ]
    return draw_filled(img, polygons)


@pytest.fixture
def triangle_png(tmp_path: Path) -> Path:
    return write_png(tmp_path / "triangle.png", single_shape_image(3))


@pytest.fixture
def mixed_png(tmp_path: Path) -> Path:
    return write_png(tmp_path / "map.png", mixed_shapes_image())


@pytest.fixture
def blank_png(tmp_path: Path) -> Path:
    return write_png(tmp_path / "blank.png", canvas(value=128))
