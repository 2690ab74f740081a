"""CLI for extracting extrema ROIs from images."""

import argparse
import json
import logging
import sys
from glob import glob

from ..core.analysis import analyze_image_file
from ..core.options import ExtremaOptions, parse_crop_string, save_options
from ..utils.file_io import create_output_directory, save_batch_summary, validate_image_file

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser for the extract command."""
    parser = argparse.ArgumentParser(
        description="Label the regions of interest grown from the local extrema of images.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Regions around the bright spots of an image
  roi-extract image.png

  # Dark spots, 4-connected, plateau tops only
  roi-extract image.png --invert --no-corner --only-top

  # Smooth noisy images first and reuse the settings for a batch
  roi-extract first.png --blur-size 5 --save-options roi_options.json
  roi-extract *.png --options-from roi_options.json
        """,
    )

    # Input/Output
    parser.add_argument("images", nargs="+", help="Path(s) to input images. Supports wildcards.")
    parser.add_argument("--out-dir", default="out", help="Output directory for results (default: ./out)")

    # Extraction
    extract_group = parser.add_argument_group("Extraction")
    extract_group.add_argument(
        "--no-corner",
        action="store_true",
        help="Use 4-connected neighbourhoods instead of 8-connected",
    )
    extract_group.add_argument(
        "--only-top",
        action="store_true",
        help="Only label plateau tops, do not grow into the slopes",
    )
    extract_group.add_argument(
        "--invert",
        action="store_true",
        help="Search for minima (negative region IDs) instead of maxima",
    )
    extract_group.add_argument(
        "--max-queue-size",
        type=int,
        help="Capacity of each traversal queue in pixels (default: image pixel count)",
    )

    # Options file
    options_group = parser.add_argument_group("Options File")
    options_group.add_argument("--save-options", help="Save extraction options to JSON file for reuse")
    options_group.add_argument(
        "--options-from",
        help="Load extraction options from existing JSON file (overrides extraction flags)",
    )

    # Image processing
    process_group = parser.add_argument_group("Image Processing")
    process_group.add_argument("--crop", help="Crop region as 'x,y,width,height' before extraction")
    process_group.add_argument("--blur-size", type=int, help="Box blur kernel size in pixels")
    process_group.add_argument("--gaussian-sigma", type=float, help="Gaussian blur standard deviation")
    process_group.add_argument("--clahe", action="store_true", help="Apply CLAHE contrast enhancement")

    # Output options
    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--no-overlay",
        action="store_true",
        help="Skip generating overlay visualization images",
    )
    output_group.add_argument(
        "--save-debug",
        action="store_true",
        help="Save debug images (filtered grey image, raw label map)",
    )
    output_group.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output, only show final summary",
    )
    output_group.add_argument("--verbose", action="store_true", help="Enable debug logging")

    return parser


def expand_image_paths(patterns: list[str], quiet: bool = False) -> list[str]:
    """Expand wildcard patterns, keeping plain paths as given."""
    image_paths = []
    for pattern in patterns:
        if "*" in pattern or "?" in pattern:
            matches = sorted(glob(pattern))
            if matches:
                image_paths.extend(matches)
            elif not quiet:
                print(f"Warning: No files match pattern '{pattern}'")
        else:
            image_paths.append(pattern)
    return image_paths


def validate_arguments(args, image_paths: list[str]) -> None:
    """Validate command line arguments."""
    try:
        args.crop = parse_crop_string(args.crop)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.max_queue_size is not None and args.max_queue_size < 1:
        print("Error: --max-queue-size must be positive")
        sys.exit(1)

    missing_images = [img for img in image_paths if not validate_image_file(img)]
    if missing_images:
        print("Error: The following image files were not found or are invalid:")
        for img in missing_images:
            print(f"  {img}")
        sys.exit(1)


def extract_single_image(image_path: str, args) -> dict:
    """Extract ROIs from a single image and return results."""
    try:
        if not args.quiet:
            print(f"Extracting: {image_path}")

        kwargs = {
            "output_dir": args.out_dir,
            "crop": args.crop,
            "blur_size": args.blur_size,
            "gaussian_sigma": args.gaussian_sigma,
            "clahe": args.clahe,
            "allow_corner": not args.no_corner,
            "only_top": args.only_top,
            "invert": args.invert,
            "max_queue_size": args.max_queue_size,
            "options_from": args.options_from,
            "no_overlay": args.no_overlay,
            "save_debug": args.save_debug,
        }

        results = analyze_image_file(image_path, **kwargs)
        results["success"] = True

        if args.save_options:
            save_options(args.save_options, ExtremaOptions(**results["options"]), source_image=image_path)
            if not args.quiet:
                print(f"Saved options to: {args.save_options}")

        return results

    except Exception as e:
        logging.getLogger(__name__).debug("Extraction of %s failed", image_path, exc_info=True)
        error_result = {"image_path": image_path, "error": str(e), "success": False}
        if not args.quiet:
            print(f"Error extracting {image_path}: {e}")
        return error_result


def print_summary(all_results: list[dict]) -> None:
    """Print extraction summary."""
    total = len(all_results)
    successful = [r for r in all_results if not r.get("error")]

    print("\nExtraction Summary:")
    print(f"  Total images: {total}")
    print(f"  Successful: {len(successful)}")
    print(f"  Failed: {total - len(successful)}")

    if successful:
        maxima = sum(r["positive_count"] for r in successful)
        minima = sum(r["negative_count"] for r in successful)
        print(f"  Regions: {maxima} maxima, {minima} minima")


def main(argv: list[str] | None = None):
    """Main entry point for the extract command."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    image_paths = expand_image_paths(args.images, quiet=args.quiet)
    if not image_paths:
        print("Error: No valid image files specified")
        sys.exit(1)

    validate_arguments(args, image_paths)

    create_output_directory(args.out_dir)

    all_results = [extract_single_image(image_path, args) for image_path in image_paths]

    if len(all_results) > 1:
        summary_path = save_batch_summary(all_results, args.out_dir)
        if not args.quiet:
            print(f"Batch summary saved to: {summary_path}")

    if not args.quiet:
        print_summary(all_results)

    # JSON output for a single image (for scripting)
    if len(all_results) == 1 and not all_results[0].get("error") and args.quiet:
        print(json.dumps(all_results[0], indent=2, default=str))

    failed_count = len([r for r in all_results if r.get("error")])
    if failed_count > 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
