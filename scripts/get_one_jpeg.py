"""Capture one JPEG frame from the local capture device."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from shipcam.camera import DEFAULT_DEVICE, DEFAULT_INPUT_FORMAT, capture_frame_to_file
from shipcam.camera.exceptions import CameraModuleError


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Capture one JPEG frame from the attached camera."
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Path to output JPEG file.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Capture timeout in seconds (default: 30).",
    )
    parser.add_argument(
        "--device",
        default=DEFAULT_DEVICE,
        help=f"ffmpeg input device (default: {DEFAULT_DEVICE}).",
    )
    parser.add_argument(
        "--input-format",
        default=DEFAULT_INPUT_FORMAT,
        help=f"ffmpeg input format, empty to let ffmpeg guess (default: {DEFAULT_INPUT_FORMAT}).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the script and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    output_path = str(Path(args.output).expanduser().resolve())
    try:
        result = capture_frame_to_file(
            output_path=output_path,
            device=args.device,
            input_format=args.input_format,
            timeout_sec=args.timeout,
        )
    except CameraModuleError as exc:
        print(f"Camera capture error: {exc}", file=sys.stderr)
        return 2

    dimensions = f"{result.width}x{result.height}" if result.width and result.height else "unknown"
    print(f"Saved JPEG: {result.output_path} ({dimensions})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
