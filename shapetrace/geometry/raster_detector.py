# shapetrace/geometry/raster_detector.py

import logging
from dataclasses import dataclass
from typing import List, Optional

import cv2  # type: ignore
import numpy as np

from ..errors import ConfigError, DecodeError, ProcessingError
from ..raster import Image
from .primitives import BoundingBox, ContourSet, Shape

logger = logging.getLogger(__name__)


@dataclass
class DetectionConfig:
    canny_low: float = 50.0
    canny_high: float = 150.0
    aperture: int = 3
    l2_gradient: bool = False
    min_area: float = 100.0
    approx_epsilon_factor: float = 0.04

    def validate(self) -> "DetectionConfig":
        if not 0 <= self.canny_low <= self.canny_high:
            raise ConfigError(
                f"canny thresholds must satisfy 0 <= low <= high (got {self.canny_low}, {self.canny_high})"
            )
        if self.aperture not in (3, 5, 7):
            raise ConfigError(f"aperture must be 3, 5 or 7 (got {self.aperture})")
        if self.min_area < 0:
            raise ConfigError(f"min_area must be >= 0 (got {self.min_area})")
        if not 0 < self.approx_epsilon_factor < 1:
            raise ConfigError(
                f"approx_epsilon_factor must be in (0, 1) (got {self.approx_epsilon_factor})"
            )
        return self


def to_grayscale(image: Image) -> np.ndarray:
    pixels = image.pixels
    if pixels.dtype != np.uint8 or pixels.ndim not in (2, 3):
        raise DecodeError(f"Unsupported pixel layout: dtype={pixels.dtype}, shape={pixels.shape}")

    channels = image.channels
    try:
        if channels == 1:
            return pixels.reshape(pixels.shape[:2]).copy()
        if channels == 3:
            return cv2.cvtColor(pixels, cv2.COLOR_BGR2GRAY)
        if channels == 4:
            return cv2.cvtColor(pixels, cv2.COLOR_BGRA2GRAY)
    except cv2.error as exc:
        raise ProcessingError("grayscale", str(exc)) from exc
    raise DecodeError(f"Unsupported channel count: {channels}")


def detect_edges(gray: np.ndarray, config: Optional[DetectionConfig] = None) -> np.ndarray:
    config = config or DetectionConfig()
    try:
        return cv2.Canny(
            gray,
            config.canny_low,
            config.canny_high,
            apertureSize=config.aperture,
            L2gradient=config.l2_gradient,
        )
    except cv2.error as exc:
        raise ProcessingError("edges", str(exc)) from exc


def extract_contours(edges: np.ndarray) -> ContourSet:
    """
    Outer boundaries of the edge mask, in OpenCV border-following order.
    Straight runs are compressed to their end points.
    """
    try:
        contours, hierarchy = cv2.findContours(
            edges.copy(),
            cv2.RETR_EXTERNAL,
            cv2.CHAIN_APPROX_SIMPLE,
        )
    except cv2.error as exc:
        raise ProcessingError("contours", str(exc)) from exc

    parents = []
    if hierarchy is not None:
        # rows are [next, previous, first_child, parent]
        parents = [int(p) if p >= 0 else None for p in hierarchy[0][:, 3]]

    for contour in contours:
        contour.flags.writeable = False
    return ContourSet(contours, parents)


def approximate_contour(contour: np.ndarray, epsilon_factor: float = 0.04) -> np.ndarray:
    perimeter = cv2.arcLength(contour, True)
    return cv2.approxPolyDP(contour, epsilon_factor * perimeter, True)


def approximate_shapes(contour_set: ContourSet, config: Optional[DetectionConfig] = None) -> List[Shape]:
    config = config or DetectionConfig()
    total = len(contour_set)
    shapes: List[Shape] = []

    for contour in contour_set.top_level():
        try:
            area = cv2.contourArea(contour)
            if area <= config.min_area:
                continue
            approx = approximate_contour(contour, config.approx_epsilon_factor)
            x, y, w, h = cv2.boundingRect(contour)
        except cv2.error as exc:
            raise ProcessingError("approximate", str(exc)) from exc

        n = len(approx)
        if n < 3:
            logger.debug(
                "Skipping degenerate contour at (%d, %d): area %.1f simplifies to %d vertices",
                x, y, area, n,
            )
            continue

        shape = Shape(
            vertex_count=n,
            bounding_box=BoundingBox(int(x), int(y), int(w), int(h)),
            contour=contour,
        )
        shapes.append(shape)
        logger.debug(
            "[%d / %d] Shape detected at (%d, %d) with width: %d and height %d (%s)",
            len(shapes), total, x, y, w, h, shape.label,
        )

    return shapes


def detect_shapes(image: Image, config: Optional[DetectionConfig] = None) -> List[Shape]:
    """Grayscale -> edges -> outer contours -> filtered, simplified shapes."""
    config = config or DetectionConfig()
    gray = to_grayscale(image)
    edges = detect_edges(gray, config)
    contour_set = extract_contours(edges)
    logger.info("Detected %d contours", len(contour_set))
    return approximate_shapes(contour_set, config)
