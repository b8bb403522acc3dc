"""Command-line interface for Icon Capture Tools batch icon generation.

This module provides a command-line tool for generating icons for a list of
objects. The CLI wraps the Python API and provides progress reporting,
validation, and output formatting.

Usage:
    # Render sprites live and crop 256x256 icons from 512x512 frames
    icon-capture live objects.csv --frame-size 512x512 --size 256x256

    # Recolor pre-rendered thumbnails onto a transparent background
    icon-capture recolor objects.csv --thumbnails thumbs/ --background-color 0,0,0,0

    # Validate configuration
    icon-capture validate objects.csv --format jpeg --background transparent

    # Display jobs and settings
    icon-capture info objects.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from icon_capture_tools import __version__
from icon_capture_tools.api import (
    generate_live_icons,
    generate_preview_icons,
    load_jobs,
    make_jobs,
)
from icon_capture_tools.batch.config import BatchResult
from icon_capture_tools.batch.models import BatchConfig, IconSpec, ImageFormat
from icon_capture_tools.batch.orchestrator import IconBatchOrchestrator
from icon_capture_tools.common_functions import (
    DEFAULT_PREVIEW_BACKGROUND,
    parse_rgba_color,
    parse_size,
    rgba_to_hex,
)
from icon_capture_tools.services.capture_service import LiveCaptureStrategy
from icon_capture_tools.services.software_renderer import SoftwareRenderHost


def _add_output_arguments(parser: argparse.ArgumentParser, base_name: str) -> None:
    parser.add_argument(
        "jobs",
        nargs="+",
        help="Jobs CSV file, or one or more object references",
    )
    parser.add_argument(
        "--format",
        "-f",
        default="png",
        choices=["jpeg", "jpg", "png", "tga"],
        help="Output image format (default: png)",
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=75,
        help="JPEG quality 1-95 (default: 75)",
    )
    parser.add_argument(
        "--output-folder",
        default="Generated Icons",
        help="Output folder name, created next to the project root "
        "(default: 'Generated Icons')",
    )
    parser.add_argument(
        "--base-name",
        default=base_name,
        help=f"Prefix of every output file name (default: '{base_name}')",
    )
    parser.add_argument(
        "--project-root",
        default=".",
        help="Project root directory (default: current directory)",
    )
    parser.add_argument(
        "--stop-on-first-failure",
        action="store_true",
        help="Do not start remaining jobs after a job fails",
    )
    parser.add_argument(
        "--summary",
        help="Write a per-job summary CSV to this path",
    )
    parser.add_argument(
        "--log",
        help="Write the batch log to this file",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress progress output",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="icon-capture",
        description="Batch icon generation from renderable objects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Live capture from a jobs CSV
  icon-capture live objects.csv --frame-size 512x512 --size 256x256

  # Live capture of individual sprites with a transparent background
  icon-capture live sword.png shield.png --background transparent

  # Recolor preview thumbnails
  icon-capture recolor objects.csv --thumbnails thumbs/ --background-color "#000000"

  # Validate configuration
  icon-capture validate objects.csv --format jpeg

  # Display jobs
  icon-capture info objects.csv
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Icon Capture Tools {__version__}",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # ========================================
    # Command: live
    # ========================================
    live_parser = subparsers.add_parser(
        "live",
        help="Render objects and crop icons from the captured frames",
        description="Render each object, capture the frame and center crop it",
    )
    _add_output_arguments(live_parser, "Live Icon")
    live_parser.add_argument(
        "--size",
        default="256x256",
        help="Icon size WxH or N (default: 256x256)",
    )
    live_parser.add_argument(
        "--frame-size",
        default="512x512",
        help="Render target size WxH or N (default: 512x512)",
    )
    live_parser.add_argument(
        "--supersample",
        type=int,
        default=1,
        help="Capture resolution multiplier (default: 1)",
    )
    live_parser.add_argument(
        "--background",
        default="solid",
        choices=["solid", "transparent"],
        help="Background mode (default: solid)",
    )
    live_parser.add_argument(
        "--background-color",
        default="0,0,0,255",
        help="Solid background color, '#RRGGBB[AA]' or 'r,g,b[,a]' "
        "(default: 0,0,0,255)",
    )
    live_parser.add_argument(
        "--depth",
        type=float,
        default=10.0,
        help="Spawn depth in front of the camera (default: 10.0)",
    )

    # ========================================
    # Command: recolor
    # ========================================
    recolor_parser = subparsers.add_parser(
        "recolor",
        help="Recolor the background of preview thumbnails",
        description="Copy each object's preview thumbnail and replace its "
        "background color",
    )
    _add_output_arguments(recolor_parser, "Preview Icon")
    recolor_parser.add_argument(
        "--thumbnails",
        "-t",
        help="Directory containing preview thumbnails (default: object "
        "references are thumbnail paths)",
    )
    recolor_parser.add_argument(
        "--key-color",
        default=rgba_to_hex(DEFAULT_PREVIEW_BACKGROUND),
        help=f"Preview background color to replace "
        f"(default: {rgba_to_hex(DEFAULT_PREVIEW_BACKGROUND)})",
    )
    recolor_parser.add_argument(
        "--background-color",
        default="0,0,0,255",
        help="Replacement color (default: 0,0,0,255)",
    )

    # ========================================
    # Command: validate
    # ========================================
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate configuration",
        description="Validate icon settings and an optional jobs CSV",
    )
    validate_parser.add_argument(
        "csv",
        nargs="?",
        help="Optional path to jobs CSV file",
    )
    validate_parser.add_argument(
        "--format",
        "-f",
        default="png",
        choices=["jpeg", "jpg", "png", "tga"],
        help="Output image format (default: png)",
    )
    validate_parser.add_argument(
        "--size",
        default="256x256",
        help="Icon size WxH or N (default: 256x256)",
    )
    validate_parser.add_argument(
        "--frame-size",
        default="512x512",
        help="Live capture frame size WxH or N (default: 512x512)",
    )
    validate_parser.add_argument(
        "--supersample",
        type=int,
        default=1,
        help="Frame supersample factor (default: 1)",
    )
    validate_parser.add_argument(
        "--background",
        default="solid",
        choices=["solid", "transparent"],
        help="Background mode (default: solid)",
    )
    validate_parser.add_argument(
        "--background-color",
        default="0,0,0,255",
        help="Background color (default: 0,0,0,255)",
    )
    validate_parser.add_argument(
        "--key-color",
        default=rgba_to_hex(DEFAULT_PREVIEW_BACKGROUND),
        help="Preview background color replaced by recolor "
        f"(default: {rgba_to_hex(DEFAULT_PREVIEW_BACKGROUND)})",
    )
    validate_parser.add_argument(
        "--output-folder",
        default="Generated Icons",
        help="Output folder name (default: 'Generated Icons')",
    )
    validate_parser.add_argument(
        "--project-root",
        default=".",
        help="Project root directory (default: current directory)",
    )

    # ========================================
    # Command: info
    # ========================================
    info_parser = subparsers.add_parser(
        "info",
        help="Display jobs and supported formats",
        description="Display the jobs of a CSV file and the supported formats",
    )
    info_parser.add_argument(
        "csv",
        nargs="?",
        help="Optional path to jobs CSV file",
    )

    return parser


def _jobs_input(paths):
    """A single .csv argument is a jobs file, anything else object references."""
    if len(paths) == 1 and paths[0].lower().endswith(".csv"):
        return paths[0]
    return make_jobs(paths)


def _make_progress_callback(quiet: bool):
    last_percent = -1

    def progress_callback(percent, message):
        nonlocal last_percent
        if not quiet and percent != last_percent:
            print(f"[{percent:3d}%] {message}")
            last_percent = percent

    return progress_callback


def _print_batch_result(batch_result: BatchResult) -> None:
    print("\n" + "=" * 60)
    if batch_result.aborted:
        print("Batch stopped after a failed job.\n")
    else:
        print("Batch complete!\n")
    print("Summary:")
    print(f"  Total jobs:      {batch_result.total_jobs}")
    print(f"  Successful:      {batch_result.successful}")
    print(f"  Failed:          {batch_result.failed}")
    print(f"  Not started:     {batch_result.skipped}")
    print(f"  Processing time: {batch_result.processing_time_seconds:.1f}s")
    print(f"  Output:          {batch_result.output_directory}")

    print("\nIndividual results:")
    for result in batch_result.job_results:
        if result.success:
            print(f"  ✓ {result.name}: {Path(result.output_path).name}")
        else:
            print(f"  ✗ {result.name}: {result.error_stage} - {result.error_message}")

    if batch_result.summary_csv_path:
        print(f"\nBatch summary: {batch_result.summary_csv_path}")


def command_live(args) -> int:
    """Execute 'live' command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        batch_result = generate_live_icons(
            jobs=_jobs_input(args.jobs),
            frame_size=parse_size(args.frame_size),
            icon_size=parse_size(args.size),
            image_format=args.format,
            background_mode=args.background,
            background_color=parse_rgba_color(args.background_color),
            supersample=args.supersample,
            jpeg_quality=args.quality,
            output_folder_name=args.output_folder,
            base_file_name=args.base_name,
            project_root=args.project_root,
            anchor_position=(0.0, 0.0, args.depth),
            stop_on_first_failure=args.stop_on_first_failure,
            summary_csv_path=args.summary,
            log_path=args.log,
            progress_callback=_make_progress_callback(args.quiet),
        )
    except Exception as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        return 1

    _print_batch_result(batch_result)
    return 0 if batch_result.failed == 0 else 1


def command_recolor(args) -> int:
    """Execute 'recolor' command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        batch_result = generate_preview_icons(
            jobs=_jobs_input(args.jobs),
            thumbnail_dir=args.thumbnails,
            image_format=args.format,
            key_color=parse_rgba_color(args.key_color),
            background_color=parse_rgba_color(args.background_color),
            jpeg_quality=args.quality,
            output_folder_name=args.output_folder,
            base_file_name=args.base_name,
            project_root=args.project_root,
            stop_on_first_failure=args.stop_on_first_failure,
            summary_csv_path=args.summary,
            log_path=args.log,
            progress_callback=_make_progress_callback(args.quiet),
        )
    except Exception as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        return 1

    _print_batch_result(batch_result)
    return 0 if batch_result.failed == 0 else 1


def command_validate(args) -> int:
    """Execute 'validate' command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 = valid, 1 = invalid)
    """
    print("Validating configuration...\n")

    valid = True

    print("Icon settings:")
    try:
        width, height = parse_size(args.size)
        frame_width, frame_height = parse_size(args.frame_size)
        spec = IconSpec(
            width=width,
            height=height,
            image_format=args.format,
            background_mode=args.background,
            background_color=parse_rgba_color(args.background_color),
            key_color=parse_rgba_color(args.key_color),
            supersample=args.supersample,
        )
        config = BatchConfig(
            output_folder_name=args.output_folder,
            project_root=args.project_root,
        )
        host = SoftwareRenderHost(width=frame_width, height=frame_height)
        orchestrator = IconBatchOrchestrator(LiveCaptureStrategy(spec, host), config)
        errors = orchestrator.validate()
        if errors:
            for error in errors:
                print(f"  ✗ {error}")
            valid = False
        else:
            print(f"  ✓ {spec.width}x{spec.height} {spec.image_format.value}, "
                  f"background {spec.background_mode.value}")
            print(f"    Frame:  {frame_width}x{frame_height} "
                  f"(supersample {spec.supersample})")
            print(f"    Key:    {rgba_to_hex(spec.key_color)}")
            print(f"    Output: {config.output_dir_resolved}")
    except ValueError as e:
        print(f"  ✗ Settings invalid: {e}")
        valid = False

    if args.csv:
        print("\nJobs CSV:")
        try:
            jobs = load_jobs(args.csv)
            print(f"  ✓ CSV loaded: {args.csv}")
            print(f"    Jobs: {len(jobs)}")

            missing = [
                job.object_ref for job in jobs
                if isinstance(job.object_ref, str) and not Path(job.object_ref).exists()
            ]
            if missing:
                print(f"  ⚠ Warning: {len(missing)} object references are not files")
                for ref in missing[:3]:
                    print(f"    - {ref}")
                if len(missing) > 3:
                    print(f"    ... and {len(missing) - 3} more")
        except Exception as e:
            print(f"  ✗ CSV invalid: {e}")
            valid = False

    print("\n" + "=" * 60)
    if valid:
        print("✓ Configuration is valid")
        return 0
    else:
        print("✗ Configuration has errors")
        return 1


def command_info(args) -> int:
    """Execute 'info' command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 = success, 1 = error)
    """
    print("Supported formats:")
    for image_format in ImageFormat:
        alpha = "alpha" if image_format.supports_alpha else "no alpha"
        print(f"  {image_format.value:5s} .{image_format.extension} ({alpha})")

    print(f"\nDefault preview key color: {rgba_to_hex(DEFAULT_PREVIEW_BACKGROUND)}")

    if not args.csv:
        return 0

    print(f"\nJobs: {args.csv}\n")
    try:
        jobs = load_jobs(args.csv)
    except Exception as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        return 1

    for job in jobs:
        print(f"  {job.job_id}: {job.name}")
        print(f"    object_ref:   {job.object_ref}")
        print(f"    spawn_offset: {job.spawn_offset}")

    return 0


def main(argv=None) -> int:
    """Main entry point for CLI.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "live":
        return command_live(args)
    elif args.command == "recolor":
        return command_recolor(args)
    elif args.command == "validate":
        return command_validate(args)
    elif args.command == "info":
        return command_info(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
