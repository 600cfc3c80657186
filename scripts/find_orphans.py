"""Report artifacts and index records that have lost their counterpart.

Read-only: nothing is deleted or re-indexed. Artifacts show up here after
their record is pruned by retention or when an index update failed after
the artifact was written.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from shipcam.storage import ArtifactStore, CaptureIndex, StorageError


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="List artifacts missing from the capture index and records missing their artifact."
    )
    parser.add_argument(
        "--captures-dir",
        default="captures",
        help="Artifact directory (default: captures).",
    )
    parser.add_argument(
        "--index-path",
        default="captures.json",
        help="Capture index file (default: captures.json).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON.",
    )
    return parser


def find_orphans(artifacts: ArtifactStore, index: CaptureIndex) -> dict[str, list[str]]:
    indexed = [record.artifact_name for record in index.snapshot().items]
    indexed_set = set(indexed)
    stored = artifacts.list_names()
    return {
        "unindexed_artifacts": [name for name in stored if name not in indexed_set],
        "missing_artifacts": [name for name in indexed if not artifacts.exists(name)],
    }


def main(argv: list[str] | None = None) -> int:
    """Run the script and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    captures_dir = Path(args.captures_dir).expanduser()
    if not captures_dir.is_dir():
        print(f"Captures directory not found: {captures_dir}", file=sys.stderr)
        return 2

    try:
        report = find_orphans(ArtifactStore(captures_dir), CaptureIndex(args.index_path))
    except StorageError as exc:
        print(f"Index error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(report, indent=2))
        return 0

    print(f"Unindexed artifacts: {len(report['unindexed_artifacts'])}")
    for name in report["unindexed_artifacts"]:
        print(f"  {name}")
    print(f"Index records without artifact: {len(report['missing_artifacts'])}")
    for name in report["missing_artifacts"]:
        print(f"  {name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
