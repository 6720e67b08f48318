"""Group extraction and rigid transforms over a voxel store."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence, Tuple

from editor.transform import AXES, Vec3i, is_zero, rotate_about, translate
from engine.config import get as config_get
from world.groups import BlockGroup, GroupRegistry
from world.history import BatchAction, GroupAction, HistoryLog, MoveGroupAction, UngroupAction
from world.voxel_grid import ChangeMap, VoxelStore, iter_box, normalize_box

logger = logging.getLogger(__name__)


class GroupManager:
    """Creates, removes, moves and rotates groups, recording each edit.

    The store, registry and history are injected; the manager holds no
    voxel state of its own.
    """

    def __init__(
        self,
        store: VoxelStore,
        registry: GroupRegistry,
        history: HistoryLog,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.registry = registry
        self.history = history
        self._clock = clock

    # ------------------------------------------------------------------
    def get_group_by_id(self, group_id: str) -> Optional[BlockGroup]:
        return self.registry.get(group_id)

    def set_active_group(self, group_id: Optional[str]) -> None:
        self.registry.set_active(group_id)

    # ------------------------------------------------------------------
    def create_group(
        self,
        start: Sequence[int],
        end: Sequence[int],
        name: Optional[str] = None,
    ) -> str:
        """Capture the occupied cells of a box into a new group.

        X and Z are not clamped here; Y is clamped to the build range.
        Returns the new id, or ``""`` when the box holds no blocks.
        """
        if name is None:
            name = config_get("project.default_group_name", "Group")
        (x0, y0, z0), (x1, y1, z1) = normalize_box(start, end)
        lo = (x0, max(self.store.y_min, y0), z0)
        hi = (x1, min(self.store.y_max, y1), z1)

        blocks = {}
        if lo[1] <= hi[1]:
            box_volume = (hi[0] - lo[0] + 1) * (hi[1] - lo[1] + 1) * (hi[2] - lo[2] + 1)
            if box_volume > len(self.store):
                positions = sorted(
                    pos for pos, _ in self.store.items()
                    if lo[0] <= pos[0] <= hi[0] and lo[1] <= pos[1] <= hi[1] and lo[2] <= pos[2] <= hi[2]
                )
            else:
                positions = iter_box(lo, hi)
            for pos in positions:
                block = self.store.get_block(*pos)
                if block is not None:
                    blocks[pos] = block

        if not blocks:
            logger.warning("no blocks found in selection %s..%s; group not created", lo, hi)
            return ""

        group = BlockGroup(id=self._new_id(), name=name, blocks=blocks, origin=lo)
        self.history.record(GroupAction(group_id=group.id, group=group.copy()))
        self.registry.set_active(group.id)
        logger.info("created group '%s' with %d blocks", name, len(blocks))
        return group.id

    def remove_group(self, group_id: str) -> bool:
        """Forget a group; its voxels stay in the store."""
        group = self.registry.get(group_id)
        if group is None:
            logger.error("group %s not found", group_id)
            return False
        self.history.record(UngroupAction(group_id=group_id, group=group.copy()))
        logger.info("removed group '%s'", group.name)
        return True

    def move_group(self, group_id: str, offset: Sequence[int]) -> bool:
        """Translate a group's blocks; members landing out of bounds are dropped."""
        offset = (int(offset[0]), int(offset[1]), int(offset[2]))
        group = self.registry.get(group_id)
        if group is None:
            logger.error("group %s not found", group_id)
            return False
        if is_zero(offset):
            return False

        before, after, moved = self._plan_transform(group, lambda pos: translate(pos, offset))
        moved.origin = translate(group.origin, offset)

        self.history.record(MoveGroupAction(
            group_id=group_id,
            group=group.copy(),
            old_origin=group.origin,
            new_origin=moved.origin,
            affected_blocks=before,
            after=after,
            moved_group=moved.copy(),
        ))
        logger.info("moved group '%s' by %s", group.name, offset)
        return True

    def rotate_group(self, group_id: str, axis: str, degrees: float) -> bool:
        """Rotate a group about its origin; recorded as a batch edit."""
        if axis not in AXES:
            raise ValueError(f"axis must be one of {AXES}, got {axis!r}")
        group = self.registry.get(group_id)
        if group is None:
            logger.error("group %s not found", group_id)
            return False
        if degrees % 360 == 0:
            return False

        pivot = group.origin
        before, after, rotated = self._plan_transform(
            group, lambda pos: rotate_about(pos, pivot, axis, degrees)
        )

        self.history.record(BatchAction(
            before=before,
            after=after,
            label=f"Rotate group '{group.name}'",
            group_id=group_id,
            group_before=group.copy(),
            group_after=rotated.copy(),
        ))
        logger.info("rotated group '%s' around %s by %s degrees", group.name, axis, degrees)
        return True

    # ------------------------------------------------------------------
    def _plan_transform(
        self, group: BlockGroup, mapping: Callable[[Vec3i], Vec3i]
    ) -> Tuple[ChangeMap, ChangeMap, BlockGroup]:
        """Return ``(before, after, new_group)`` for lifting and re-placing every member.

        ``before`` holds the pre-edit value of every vacated and overwritten
        cell, read before anything changes, so overlapping source and
        destination cells restore correctly.
        """
        before: ChangeMap = {}
        after: ChangeMap = {}
        for pos in group.blocks:
            before[pos] = self.store.get_block(*pos)
            after[pos] = None

        new_blocks = {}
        for pos, block in group.blocks.items():
            dest = mapping(pos)
            if not self.store.in_bounds(*dest):
                logger.warning("position %s is outside the build area; block dropped", dest)
                continue
            if dest not in before:
                before[dest] = self.store.get_block(*dest)
            after[dest] = block
            new_blocks[dest] = block

        new_group = BlockGroup(id=group.id, name=group.name, blocks=new_blocks, origin=group.origin)
        return before, after, new_group

    def _new_id(self) -> str:
        stamp = int(self._clock() * 1000)
        suffix = len(self.registry)
        group_id = f"group_{stamp}_{suffix}"
        while group_id in self.registry:
            suffix += 1
            group_id = f"group_{stamp}_{suffix}"
        return group_id
