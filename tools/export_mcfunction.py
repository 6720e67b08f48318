"""Convert a saved project into a Minecraft ``.mcfunction`` build script."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from editor.mcfunction import export_mcfunction
from editor.project import Project
from editor.project_io import ProjectFormatError
from engine.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export a project as setblock/fill commands")
    parser.add_argument("--project", required=True, help="Project json file")
    parser.add_argument("--out", required=True, help="Destination .mcfunction file")
    parser.add_argument("--offset", nargs=3, type=int, metavar=("X", "Y", "Z"), default=[0, 0, 0])
    parser.add_argument("--max-volume", type=int, default=None, help="Largest fill volume per command")
    parser.add_argument("--log-level", default=None, help="Override logging.level from config")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level)

    project = Project()
    try:
        project.load_from_file(args.project)
    except OSError as exc:
        logger.error("cannot read %s: %s", args.project, exc)
        return 1
    except ProjectFormatError as exc:
        logger.error("invalid project %s: %s", args.project, exc)
        return 2

    t_start = time.perf_counter()
    regions = project.regions()
    merge_time = time.perf_counter() - t_start

    text = export_mcfunction(regions, tuple(args.offset), args.max_volume)
    with open(args.out, "w", encoding="utf-8") as handle:
        handle.write(text)

    print("Project:", args.project)
    print("Dimensions:", project.dimensions)
    print("Voxels:", len(project.store))
    print("Content bounds:", project.store.bounds_of_content())
    for block, count in sorted(project.store.count_by_type().items()):
        print(f"  {block}: {count}")
    print("Regions:", len(regions))
    print(f"Merge time: {merge_time:.3f} s")
    print("Wrote:", args.out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
