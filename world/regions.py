from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from world.blocks import BlockId
from world.voxel_grid import Position, VoxelStore, world_y_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FillRegion:
    """Inclusive axis-aligned box of a single block type."""
    start: Position
    end: Position
    block_type: BlockId

    @property
    def size(self) -> Tuple[int, int, int]:
        return (
            self.end[0] - self.start[0] + 1,
            self.end[1] - self.start[1] + 1,
            self.end[2] - self.start[2] + 1,
        )

    @property
    def volume(self) -> int:
        sx, sy, sz = self.size
        return sx * sy * sz

    def cells(self) -> Iterator[Position]:
        for x in range(self.start[0], self.end[0] + 1):
            for y in range(self.start[1], self.end[1] + 1):
                for z in range(self.start[2], self.end[2] + 1):
                    yield x, y, z


class _SparseLookup:
    """Occupied cells plus the set already claimed by an emitted region."""

    __slots__ = ("blocks", "claimed")

    def __init__(self, voxels: Dict[Position, BlockId]) -> None:
        self.blocks = voxels
        self.claimed: Set[Position] = set()

    def free_match(self, pos: Position, block: BlockId) -> bool:
        return pos not in self.claimed and self.blocks.get(pos) == block

    def claim(self, lo: Position, hi: Position) -> None:
        for x in range(lo[0], hi[0] + 1):
            for y in range(lo[1], hi[1] + 1):
                for z in range(lo[2], hi[2] + 1):
                    self.claimed.add((x, y, z))


def _collect_in_bounds(
    voxels: Mapping[Position, str],
    dimensions: Sequence[int],
    y_range: Tuple[int, int],
) -> Dict[Position, BlockId]:
    width, _, depth = dimensions
    y_min, y_max = y_range
    kept: Dict[Position, BlockId] = {}
    dropped = 0
    for (x, y, z), block in voxels.items():
        if 0 <= x < width and y_min <= y <= y_max and 0 <= z < depth:
            kept[(x, y, z)] = BlockId(block)
        else:
            dropped += 1
    if dropped:
        logger.warning("ignoring %d voxels outside the build area", dropped)
    return kept


def optimize_voxel_regions(
    voxels: Mapping[Position, str],
    dimensions: Sequence[int],
    y_range: Optional[Tuple[int, int]] = None,
) -> List[FillRegion]:
    """
    Greedily merge voxels into homogeneous boxes for bulk placement.

    Strategy:
      1) Visit the occupied cells sorted by (x, y, z), the same order as a
         dense scan with x outer and z inner, so work scales with the voxel
         count rather than the bounding box.
      2) At each unclaimed cell grow a box along X, then along Y while the
         whole X-span matches, then along Z while the whole X-Y plane matches.
      3) Claim the box and emit it.

    Greedy in scan order with no backtracking; the output is deterministic
    and ordered by each region's minimum corner in scan order.
    """
    if y_range is None:
        y_range = world_y_range()
    cells = _collect_in_bounds(voxels, dimensions, y_range)
    if not cells:
        return []

    lookup = _SparseLookup(cells)
    regions: List[FillRegion] = []
    for pos in sorted(cells):
        if pos in lookup.claimed:
            continue
        block = cells[pos]
        x, y, z = pos

        end_x = x
        while lookup.free_match((end_x + 1, y, z), block):
            end_x += 1

        end_y = y
        while all(
            lookup.free_match((ix, end_y + 1, z), block) for ix in range(x, end_x + 1)
        ):
            end_y += 1

        end_z = z
        while all(
            lookup.free_match((ix, iy, end_z + 1), block)
            for ix in range(x, end_x + 1)
            for iy in range(y, end_y + 1)
        ):
            end_z += 1

        lookup.claim(pos, (end_x, end_y, end_z))
        regions.append(FillRegion(start=pos, end=(end_x, end_y, end_z), block_type=block))

    logger.debug("merged %d voxels into %d regions", len(cells), len(regions))
    return regions


def optimize_store(store: VoxelStore) -> List[FillRegion]:
    """Public API: optimize the current contents of a store."""
    return optimize_voxel_regions(
        store.snapshot(), store.dimensions, (store.y_min, store.y_max)
    )
