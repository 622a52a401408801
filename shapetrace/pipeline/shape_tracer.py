
import logging
from pathlib import Path
from typing import List, Optional, Union

from ..config import ShapetraceConfig
from ..geometry.primitives import Shape
from ..geometry.raster_detector import detect_shapes
from ..geometry.visualize import draw_shapes, shapes_image_path
from ..raster import Image, encode_png, load_image, write_bytes_atomic

logger = logging.getLogger(__name__)


class ShapeTracer:
    """
    Runs the detection stages for one image per call. Holds configuration
    only, so one instance can be shared by independent callers.
    """

    def __init__(self, config: Optional[ShapetraceConfig] = None):
        self.config = config or ShapetraceConfig()

    def analyze_image(self, image: Image) -> List[Shape]:
        return detect_shapes(image, self.config.detection)

    def analyze(self, image_path: Union[str, Path]) -> List[Shape]:
        logger.debug("Finding contours and tracing shapes in %s", image_path)
        return self.analyze_image(load_image(image_path))

    def trace(
        self,
        image_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
    ) -> Path:
        """
        Detect shapes, draw them over a copy of the image and write the result
        as PNG. Nothing is written unless every stage succeeded.
        """
        logger.debug("Finding contours and tracing shapes in %s", image_path)
        image = load_image(image_path)
        shapes = self.analyze_image(image)
        destination = Path(output_path) if output_path else shapes_image_path(image_path)
        return self.write_overlay(image, shapes, destination)

    def write_overlay(self, image: Image, shapes: List[Shape], destination: Union[str, Path]) -> Path:
        """Render already detected shapes and persist the overlay atomically."""
        traced = draw_shapes(image, shapes)
        data = encode_png(traced)
        logger.debug("Generating shapes image %s", destination)
        return write_bytes_atomic(destination, data)


def analyze(image_path: Union[str, Path], config: Optional[ShapetraceConfig] = None) -> List[Shape]:
    return ShapeTracer(config).analyze(image_path)


def analyze_and_trace(image_path: Union[str, Path], config: Optional[ShapetraceConfig] = None) -> Path:
    return ShapeTracer(config).trace(image_path)
