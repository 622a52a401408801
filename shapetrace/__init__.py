from .config import ShapetraceConfig
from .errors import ConfigError, DecodeError, IoError, ProcessingError, ShapetraceError
from .geometry import DetectionConfig, Shape, BoundingBox
from .pipeline import ShapeTracer, analyze, analyze_and_trace

__version__ = "0.1.0"

__all__ = [
    "ShapetraceConfig",
    "DetectionConfig",
    "Shape",
    "BoundingBox",
    "ShapeTracer",
    "analyze",
    "analyze_and_trace",
    "ShapetraceError",
    "IoError",
    "DecodeError",
    "ProcessingError",
    "ConfigError",
]
