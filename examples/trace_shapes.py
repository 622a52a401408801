
import argparse
import sys
import os

# Ensure project root is on sys.path when running this file directly
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from shapetrace.config import ShapetraceConfig
from shapetrace.geometry.raster_detector import DetectionConfig
from shapetrace.pipeline import ShapeTracer


def main():
    parser = argparse.ArgumentParser(description="Detect shapes and render a contour overlay.")
    parser.add_argument("--image", required=True, help="Path to input image")
    parser.add_argument("--out", default=None, help="Overlay path (default: <image>.shapes.png)")
    parser.add_argument("--min-area", type=float, default=100.0, help="Minimum contour area")
    args = parser.parse_args()

    tracer = ShapeTracer(ShapetraceConfig(detection=DetectionConfig(min_area=args.min_area)))
    out_path = tracer.trace(args.image, args.out)
    print("Saved:", out_path)


if __name__ == "__main__":
    main()
