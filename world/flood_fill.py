"""Bucket fill over face-connected cells of one value."""
from __future__ import annotations

import logging
from collections import deque
from typing import Optional, Sequence, Tuple

from engine.config import get as config_get
from world.blocks import BlockId
from world.voxel_grid import ChangeMap, Position, VoxelStore, neighbors

logger = logging.getLogger(__name__)


class FloodFillLimitExceeded(Exception):
    def __init__(self, limit: int) -> None:
        super().__init__(f"flood fill would touch more than {limit} cells")
        self.limit = limit


def plan_flood_fill(
    store: VoxelStore,
    start: Sequence[int],
    replacement: str,
    limit: Optional[int] = None,
) -> Tuple[ChangeMap, ChangeMap]:
    """Return ``(before, after)`` maps replacing the component containing ``start``.

    The component is every in-bounds cell reachable through face neighbors
    that holds the same value as ``start`` (air included). Raises
    :class:`FloodFillLimitExceeded` if it grows past ``limit`` cells.
    """
    replacement = BlockId(replacement)
    if limit is None:
        limit = int(config_get("world.flood_fill_limit", 65536))

    sx, sy, sz = (int(v) for v in start)
    if not store.in_bounds(sx, sy, sz):
        return {}, {}
    target = store.get_block(sx, sy, sz)
    if target == replacement:
        return {}, {}

    before: ChangeMap = {}
    seen = {(sx, sy, sz)}
    queue = deque([(sx, sy, sz)])
    while queue:
        pos: Position = queue.popleft()
        before[pos] = target
        if len(before) > limit:
            raise FloodFillLimitExceeded(limit)
        for nx, ny, nz in neighbors(*pos):
            npos = (nx, ny, nz)
            if npos in seen:
                continue
            seen.add(npos)
            if store.in_bounds(nx, ny, nz) and store.get_block(nx, ny, nz) == target:
                queue.append(npos)

    after: ChangeMap = {pos: replacement for pos in before}
    logger.debug("flood fill from %s covers %d cells", (sx, sy, sz), len(before))
    return before, after
