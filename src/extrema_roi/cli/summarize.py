"""CLI for summarizing ROI extraction results and generating plots."""

import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..utils.file_io import find_metrics_files, load_metrics_json

SUMMARY_COLUMNS = [
    "name",
    "polarity",
    "width",
    "height",
    "positive_count",
    "negative_count",
    "region_count",
    "labelled_fraction",
    "mean_area_px",
    "largest_area_px",
    "border_region_count",
]


def create_argument_parser():
    """Create argument parser for the summarize command."""
    parser = argparse.ArgumentParser(description="Summarize ROI extraction results and generate plots.")
    parser.add_argument("--in-dir", default="out", help="Directory containing *_metrics.json files (default: ./out)")
    parser.add_argument("--out-dir", default="out", help="Output directory for summaries and plots (default: ./out)")
    parser.add_argument("--make-plots", action="store_true", help="Generate region area and count plots")
    return parser


def load_case_data(metrics_files) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Load per-image metrics and their region tables.

    Returns:
        Tuple of (one row per image, one row per region with an 'image' column)
    """
    image_rows = []
    region_tables = []

    for metrics_file in metrics_files:
        try:
            metrics = load_metrics_json(metrics_file)
        except (OSError, ValueError) as e:
            print(f"Error loading {metrics_file}: {e}")
            continue

        name = Path(metrics_file).stem.replace("_metrics", "")
        image_rows.append({"name": name, **{key: metrics.get(key) for key in SUMMARY_COLUMNS[1:]}})

        # Find corresponding CSV file
        csv_path = metrics.get("csv_regions")
        if not csv_path or not Path(csv_path).exists():
            csv_path = str(metrics_file).replace("_metrics.json", "_regions.csv")

        if not Path(csv_path).exists():
            print(f"Warning: CSV file not found for {metrics_file}")
            continue

        regions = pd.read_csv(csv_path)
        if not regions.empty:
            regions.insert(0, "image", name)
            region_tables.append(regions)

    images = pd.DataFrame(image_rows, columns=SUMMARY_COLUMNS)
    regions = pd.concat(region_tables, ignore_index=True) if region_tables else pd.DataFrame()
    return images, regions


def print_summary_stats(images: pd.DataFrame, regions: pd.DataFrame) -> None:
    """Print summary statistics to console."""
    if images.empty:
        print("No data to summarize")
        return

    print(f"\nSummary Statistics (n={len(images)} images):")
    print("=" * 50)

    counts = images["region_count"].astype(float)
    print("Regions per image:")
    print(f"  Mean: {counts.mean():.2f} ± {counts.std(ddof=0):.2f}")
    print(f"  Range: {counts.min():.0f} - {counts.max():.0f}")
    print(f"  Total: {images['positive_count'].sum():.0f} maxima, {images['negative_count'].sum():.0f} minima")

    fractions = images["labelled_fraction"].astype(float)
    print("\nLabelled fraction:")
    print(f"  Mean: {fractions.mean():.3f} ± {fractions.std(ddof=0):.3f}")
    print(f"  Range: {fractions.min():.3f} - {fractions.max():.3f}")

    if not regions.empty:
        areas = regions["area_px"]
        print("\nRegion area (px):")
        print(f"  Mean: {areas.mean():.1f} ± {areas.std(ddof=0):.1f}")
        print(f"  Range: {areas.min()} - {areas.max()}")
        print(f"  Median: {areas.median():.1f}")
        print(f"  Touching border: {int(regions['touches_border'].sum())} of {len(regions)}")


def create_area_histogram(regions: pd.DataFrame, output_path) -> None:
    """Histogram of region areas, split by polarity."""
    plt.figure(figsize=(8, 6))

    for polarity, color in (("maxima", "tab:red"), ("minima", "tab:blue")):
        areas = regions.loc[regions["polarity"] == polarity, "area_px"]
        if not areas.empty:
            plt.hist(areas, bins=min(30, len(areas)), alpha=0.7, edgecolor="black", color=color, label=polarity)

    mean_area = regions["area_px"].mean()
    plt.axvline(mean_area, color="black", linestyle="--", alpha=0.8)
    plt.text(
        0.98,
        0.98,
        f"Mean: {mean_area:.1f} px\nMedian: {regions['area_px'].median():.1f} px",
        transform=plt.gca().transAxes,
        verticalalignment="top",
        horizontalalignment="right",
        bbox={"boxstyle": "round", "facecolor": "white", "alpha": 0.8},
    )

    plt.xlabel("Region area (px)")
    plt.ylabel("Count")
    plt.title(f"Region Area Distribution (n={len(regions)})")
    plt.grid(True, alpha=0.3)
    plt.legend()

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"  Created: {output_path}")


def create_regions_per_image_plot(images: pd.DataFrame, output_path) -> None:
    """Stacked bar chart of maxima and minima counts per image."""
    positions = np.arange(len(images))

    plt.figure(figsize=(max(8, 0.4 * len(images)), 6))
    plt.bar(positions, images["positive_count"], color="tab:red", label="maxima")
    plt.bar(positions, images["negative_count"], bottom=images["positive_count"], color="tab:blue", label="minima")

    plt.xticks(positions, images["name"], rotation=90, fontsize="small")
    plt.ylabel("Regions")
    plt.title(f"Regions per Image ({len(images)} images)")
    plt.grid(True, axis="y", alpha=0.3)
    plt.legend()

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"  Created: {output_path}")


def main(argv: list[str] | None = None):
    """Main entry point for the summarize command."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    in_dir = Path(args.in_dir)
    if not in_dir.exists():
        print(f"Error: Input directory '{args.in_dir}' does not exist")
        sys.exit(1)

    metrics_files = find_metrics_files(in_dir)
    if not metrics_files:
        print(f"No *_metrics.json files found in '{args.in_dir}'")
        return

    print(f"Found {len(metrics_files)} metrics files in {in_dir}")

    images, regions = load_case_data(metrics_files)
    if images.empty:
        print("Error: No valid data could be loaded from metrics files")
        return

    print_summary_stats(images, regions)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    summary_path = out_dir / "roi_summary.csv"
    images.to_csv(summary_path, index=False)
    print(f"\nSummary table saved to: {summary_path}")

    if args.make_plots:
        print("\nGenerating plots...")
        plots_dir = out_dir / "plots"
        plots_dir.mkdir(parents=True, exist_ok=True)

        create_regions_per_image_plot(images, plots_dir / "regions_per_image.png")
        if not regions.empty:
            create_area_histogram(regions, plots_dir / "region_area_histogram.png")

        print(f"\nAll plots saved to: {plots_dir}")
    else:
        print("\nUse --make-plots to generate visualization plots")


if __name__ == "__main__":
    main()
