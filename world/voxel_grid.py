"""Sparse voxel storage with fixed world-height bounds."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from engine.config import get as config_get
from world.blocks import BlockId

logger = logging.getLogger(__name__)

Position = Tuple[int, int, int]
Dimensions = Tuple[int, int, int]
# Value of a cell before/after an edit; None means air.
CellValue = Optional[BlockId]
ChangeMap = Dict[Position, CellValue]

FACE_DIRECTIONS: Tuple[Position, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


def world_y_range() -> Tuple[int, int]:
    """Return the inclusive ``(y_min, y_max)`` build range."""
    return int(config_get("world.y_min", -64)), int(config_get("world.y_max", 319))


def display_height() -> int:
    y_min, y_max = world_y_range()
    return y_max - y_min + 1


def neighbors(x: int, y: int, z: int) -> Iterator[Position]:
    """Yield face-adjacent neighbor coordinates for ``(x, y, z)``."""
    for dx, dy, dz in FACE_DIRECTIONS:
        yield x + dx, y + dy, z + dz


def position_key(pos: Sequence[int]) -> str:
    """Format a position as the ``"x,y,z"`` key used in project files."""
    x, y, z = pos
    return f"{int(x)},{int(y)},{int(z)}"


def parse_position_key(key: str) -> Position:
    parts = key.split(",")
    if len(parts) != 3:
        raise ValueError(f"position key {key!r} must have three components")
    try:
        x, y, z = (int(part) for part in parts)
    except ValueError as exc:
        raise ValueError(f"position key {key!r} must contain base-10 integers") from exc
    return x, y, z


def normalize_box(start: Sequence[int], end: Sequence[int]) -> Tuple[Position, Position]:
    """Order two unordered corners into ``(min_corner, max_corner)``."""
    lo = (min(start[0], end[0]), min(start[1], end[1]), min(start[2], end[2]))
    hi = (max(start[0], end[0]), max(start[1], end[1]), max(start[2], end[2]))
    return lo, hi


def iter_box(lo: Position, hi: Position) -> Iterator[Position]:
    """Yield every integer position of an inclusive box, x outer and z inner."""
    for x in range(lo[0], hi[0] + 1):
        for y in range(lo[1], hi[1] + 1):
            for z in range(lo[2], hi[2] + 1):
                yield x, y, z


class VoxelStore:
    """Sparse map from integer positions to block ids.

    X and Z are bounded by the project dimensions; Y always spans the game's
    build range and ignores ``dimensions[1]``, which is display-only.
    """

    __slots__ = ("width", "height_display", "depth", "y_min", "y_max", "_voxels")

    def __init__(
        self,
        dimensions: Optional[Sequence[int]] = None,
        *,
        y_min: Optional[int] = None,
        y_max: Optional[int] = None,
    ) -> None:
        default_min, default_max = world_y_range()
        self.y_min = default_min if y_min is None else int(y_min)
        self.y_max = default_max if y_max is None else int(y_max)
        if self.y_min > self.y_max:
            raise ValueError("y_min must not exceed y_max")
        self._voxels: Dict[Position, BlockId] = {}
        self.reset(dimensions)

    def reset(self, dimensions: Optional[Sequence[int]] = None) -> None:
        """Empty the store and adopt new dimensions."""
        if dimensions is None:
            dimensions = config_get("world.default_dimensions", [1000, 384, 1000])
        if len(dimensions) != 3:
            raise ValueError("dimensions must contain three integers")
        width, height, depth = (int(axis) for axis in dimensions)
        if width <= 0 or depth <= 0:
            raise ValueError("width and depth must be positive")
        self.width = width
        self.height_display = height
        self.depth = depth
        self._voxels = {}

    # Bounds -------------------------------------------------------------
    @property
    def dimensions(self) -> Dimensions:
        return self.width, self.height_display, self.depth

    def in_bounds(self, x: int, y: int, z: int) -> bool:
        return (
            0 <= x < self.width
            and self.y_min <= y <= self.y_max
            and 0 <= z < self.depth
        )

    def check_bounds(self, x: int, y: int, z: int) -> bool:
        """Like :meth:`in_bounds` but logs a notice for rejected positions."""
        if self.in_bounds(x, y, z):
            return True
        logger.warning("position (%d, %d, %d) is outside the build area", x, y, z)
        return False

    def clamp_box(
        self, start: Sequence[int], end: Sequence[int]
    ) -> Optional[Tuple[Position, Position]]:
        """Clamp an unordered box to the store bounds; None when nothing remains."""
        (x0, y0, z0), (x1, y1, z1) = normalize_box(start, end)
        lo = (max(0, x0), max(self.y_min, y0), max(0, z0))
        hi = (min(self.width - 1, x1), min(self.y_max, y1), min(self.depth - 1, z1))
        if lo[0] > hi[0] or lo[1] > hi[1] or lo[2] > hi[2]:
            return None
        return lo, hi

    # Queries ------------------------------------------------------------
    def get_block(self, x: int, y: int, z: int) -> CellValue:
        if not self.in_bounds(x, y, z):
            return None
        return self._voxels.get((x, y, z))

    def __len__(self) -> int:
        return len(self._voxels)

    def __contains__(self, pos: object) -> bool:
        return pos in self._voxels

    def items(self) -> Iterable[Tuple[Position, BlockId]]:
        return self._voxels.items()

    def snapshot(self) -> Dict[Position, BlockId]:
        return dict(self._voxels)

    def count_by_type(self) -> Dict[str, int]:
        return dict(Counter(str(block) for block in self._voxels.values()))

    def bounds_of_content(self) -> Optional[Tuple[Position, Position]]:
        if not self._voxels:
            return None
        xs, ys, zs = zip(*self._voxels.keys())
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    # Validated edits ----------------------------------------------------
    def set_block(self, x: int, y: int, z: int, block: str) -> bool:
        """Assign a block; returns False for out-of-bounds or unchanged cells."""
        if not self.check_bounds(x, y, z):
            return False
        block = BlockId(block)
        if self._voxels.get((x, y, z)) == block:
            return False
        self._voxels[(x, y, z)] = block
        return True

    def remove_block(self, x: int, y: int, z: int) -> CellValue:
        """Delete a block and return the removed id, or None if nothing changed."""
        if not self.in_bounds(x, y, z):
            return None
        return self._voxels.pop((x, y, z), None)

    # Planned edits ------------------------------------------------------
    def plan_fill(
        self, start: Sequence[int], end: Sequence[int], block: str
    ) -> Tuple[ChangeMap, ChangeMap]:
        """Return ``(before, after)`` maps for filling the clamped box."""
        block = BlockId(block)
        before: ChangeMap = {}
        after: ChangeMap = {}
        box = self.clamp_box(start, end)
        if box is None:
            return before, after
        for pos in iter_box(*box):
            before[pos] = self._voxels.get(pos)
            after[pos] = block
        return before, after

    def plan_clear(
        self, start: Sequence[int], end: Sequence[int]
    ) -> Tuple[ChangeMap, ChangeMap]:
        """Return ``(before, after)`` maps covering only the occupied cells of the box."""
        before: ChangeMap = {}
        after: ChangeMap = {}
        box = self.clamp_box(start, end)
        if box is None:
            return before, after
        (x0, y0, z0), (x1, y1, z1) = box
        box_volume = (x1 - x0 + 1) * (y1 - y0 + 1) * (z1 - z0 + 1)
        if box_volume > len(self._voxels):
            # Sparse content: scan the voxels instead of the box.
            candidates = sorted(
                pos for pos in self._voxels
                if x0 <= pos[0] <= x1 and y0 <= pos[1] <= y1 and z0 <= pos[2] <= z1
            )
        else:
            candidates = [pos for pos in iter_box(*box) if pos in self._voxels]
        for pos in candidates:
            before[pos] = self._voxels[pos]
            after[pos] = None
        return before, after

    # Raw access (history replay, group transforms, loading) -------------
    def write(self, pos: Position, value: CellValue) -> None:
        """Store ``value`` at ``pos`` without bounds checks; None deletes."""
        if value is None:
            self._voxels.pop(pos, None)
        else:
            self._voxels[pos] = BlockId(value)

    def apply(self, changes: Mapping[Position, CellValue]) -> None:
        for pos, value in changes.items():
            self.write(pos, value)

    def replace_contents(self, voxels: Mapping[Position, str]) -> None:
        self._voxels = {pos: BlockId(block) for pos, block in voxels.items()}

    def clear(self) -> None:
        self._voxels.clear()
