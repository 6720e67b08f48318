"""Render merged fill regions as Minecraft function commands."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from engine.config import get as config_get
from world.regions import FillRegion

HEADER = "# Generated by BlockPlanner"


def split_region(region: FillRegion, max_volume: int) -> List[FillRegion]:
    """Halve a region along its longest axis until every piece fits ``max_volume``."""
    if max_volume <= 0:
        raise ValueError("max_volume must be positive")
    pending = [region]
    pieces: List[FillRegion] = []
    while pending:
        current = pending.pop()
        if current.volume <= max_volume:
            pieces.append(current)
            continue
        size = current.size
        axis = max(range(3), key=lambda i: size[i])
        mid = current.start[axis] + size[axis] // 2 - 1
        first_end = list(current.end)
        first_end[axis] = mid
        second_start = list(current.start)
        second_start[axis] = mid + 1
        # Push the second half first so pieces come out in scan order.
        pending.append(FillRegion(tuple(second_start), current.end, current.block_type))
        pending.append(FillRegion(current.start, tuple(first_end), current.block_type))
    return pieces


def region_command(region: FillRegion, offset: Sequence[int] = (0, 0, 0)) -> str:
    ox, oy, oz = offset
    x0, y0, z0 = region.start[0] + ox, region.start[1] + oy, region.start[2] + oz
    if region.volume == 1:
        return f"setblock {x0} {y0} {z0} {region.block_type}"
    x1, y1, z1 = region.end[0] + ox, region.end[1] + oy, region.end[2] + oz
    return f"fill {x0} {y0} {z0} {x1} {y1} {z1} {region.block_type}"


def build_commands(
    regions: Iterable[FillRegion],
    offset: Sequence[int] = (0, 0, 0),
    max_volume: Optional[int] = None,
) -> List[str]:
    if max_volume is None:
        max_volume = int(config_get("export.max_fill_volume", 32768))
    commands: List[str] = []
    for region in regions:
        for piece in split_region(region, max_volume):
            commands.append(region_command(piece, offset))
    return commands


def export_mcfunction(
    regions: Iterable[FillRegion],
    offset: Sequence[int] = (0, 0, 0),
    max_volume: Optional[int] = None,
) -> str:
    """Return the text of a ``.mcfunction`` file placing every region at ``offset``."""
    regions = list(regions)
    commands = build_commands(regions, offset, max_volume)
    lines = [
        HEADER,
        f"# {len(regions)} regions, {len(commands)} commands, origin {offset[0]} {offset[1]} {offset[2]}",
    ]
    lines.extend(commands)
    return "\n".join(lines) + "\n"
