# -*- coding: utf-8 -*-
"""
xodindex CLI - Run the catalog sync or the artifact mirror.

Usage::

    python -m xodindex sync
    python -m xodindex --root /path/to/repo mirror
    python -m xodindex mirror --swagger-url https://pm.xod.io/swagger/

License
-------
MIT License
Copyright (c) 2026 xod-library-index contributors
See LICENSE file for full text.

Created
-------
2026-10-17

Modified
--------
2026-10-17
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from xodindex.core.config import load_config
from xodindex.core.errors import FatalSyncError, FetchError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xodindex",
        description="Synchronize the XOD library catalog and artifact mirror.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Repository root holding index/ and mirror/ (default: cwd).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON config file.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for page extraction and downloads.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("sync", help="Crawl the registry and write index/index.json.")
    mirror = commands.add_parser("mirror", help="Download missing library artifacts.")
    mirror.add_argument(
        "--swagger-url",
        default=None,
        help="Base URL of the package-manager service description.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(
        path=args.config,
        root_dir=args.root,
        max_workers=args.workers,
        swagger_url=getattr(args, "swagger_url", None),
    )

    try:
        if args.command == "sync":
            from xodindex.catalog.sync import CatalogSync
            report = CatalogSync(config).run()
            print(
                f"Wrote {report.processed} libraries to {report.output_path} "
                f"(skipped {len(report.skipped)})"
            )
        else:
            from xodindex.mirror.engine import ArtifactMirror
            report = ArtifactMirror(config).run()
            stats = report.stats
            print(
                f"Mirror complete: downloaded={stats.downloaded}, "
                f"skippedExisting={stats.skipped_existing}, failed={stats.failed}, "
                f"totalArtifacts={report.total_artifacts}"
            )
    except (FatalSyncError, FetchError) as e:
        label = "Sync" if args.command == "sync" else "Mirror"
        print(f"{label} failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
