
import argparse
import json
import sys
import os

# Ensure project root is on sys.path when running this file directly
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from shapetrace.geometry.primitives import shapes_to_dicts
from shapetrace.pipeline import analyze


def main():
    parser = argparse.ArgumentParser(description="Run the shape detector and print shapes JSON.")
    parser.add_argument("--image", required=True, help="Path to an image")
    parser.add_argument("--out", default=None, help="Optional path to save shapes JSON")
    parser.add_argument("--contours", action="store_true", help="Include contour points")
    args = parser.parse_args()

    shapes = analyze(args.image)
    data = {"image": args.image, "shapes": shapes_to_dicts(shapes, include_contour=args.contours)}
    text = json.dumps(data, indent=2, ensure_ascii=False)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Wrote {len(shapes)} shapes to {args.out}")
    else:
        print(text)


if __name__ == "__main__":
    main()
