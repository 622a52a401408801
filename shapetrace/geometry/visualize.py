
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import cv2  # type: ignore
import numpy as np

from ..errors import DecodeError, ProcessingError
from ..raster import Image, image_from_array
from .primitives import Shape

SHAPE_COLOR = (0, 255, 0)  # green
SHAPE_THICKNESS = 2


def shapes_image_path(image_path: Union[str, Path]) -> Path:
    """
    map.png -> map.shapes.png, scan.v2.jpg -> scan.v2.shapes.png.
    Only the final extension is replaced; the directory is kept.
    """
    path = Path(image_path)
    return path.with_name(f"{path.stem}.shapes.png")


def _drawable_copy(pixels: np.ndarray) -> np.ndarray:
    if pixels.ndim == 2 or (pixels.ndim == 3 and pixels.shape[2] == 1):
        return cv2.cvtColor(pixels.reshape(pixels.shape[:2]), cv2.COLOR_GRAY2BGR)
    if pixels.ndim == 3 and pixels.shape[2] in (3, 4):
        return pixels.copy()
    raise DecodeError(f"Cannot draw on pixel layout {pixels.shape}")


def draw_shapes(
    image: Image,
    shapes: Sequence[Shape],
    color: Tuple[int, int, int] = SHAPE_COLOR,
    thickness: int = SHAPE_THICKNESS,
) -> Image:
    """
    Return a new Image with every shape's contour drawn as a closed polyline.
    The input image is left untouched.
    """
    canvas = _drawable_copy(image.pixels)
    scalar = tuple(color) + (255,) if canvas.shape[2] == 4 else tuple(color)

    contours: List[np.ndarray] = [s.contour for s in shapes]
    if contours:
        try:
            cv2.drawContours(canvas, contours, -1, scalar, thickness, cv2.LINE_8)
        except cv2.error as exc:
            raise ProcessingError("render", str(exc)) from exc

    return image_from_array(canvas, path=image.path)
