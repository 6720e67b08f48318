"""Editing session: the entry point UI collaborators call into.

A :class:`Project` wires one voxel store, group registry, history log and
group manager together and owns the transient editor state (pending range
selection, active group). Every mutator commits through the history log.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from editor import project_io
from editor.group_ops import GroupManager
from editor.mcfunction import export_mcfunction
from editor.project_io import ProjectSnapshot
from engine.event_bus import PROJECT_LOADED, SELECTION_CHANGED, EventBus
from world.blocks import BlockId
from world.flood_fill import FloodFillLimitExceeded, plan_flood_fill
from world.groups import BlockGroup, GroupRegistry
from world.history import BatchAction, HistoryLog, RemoveAction, SetAction
from world.regions import FillRegion, optimize_store
from world.voxel_grid import CellValue, ChangeMap, Dimensions, VoxelStore, display_height

logger = logging.getLogger(__name__)

Selection = Optional[Tuple[int, int, int]]


class Project:
    def __init__(
        self,
        dimensions: Optional[Sequence[int]] = None,
        *,
        bus: Optional[EventBus] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.bus = bus if bus is not None else EventBus()
        self.store = VoxelStore(self._normalize_dimensions(dimensions))
        self.groups = GroupRegistry(self.bus)
        self.history = HistoryLog(self.store, self.groups, self.bus)
        self.group_manager = GroupManager(self.store, self.groups, self.history, clock=clock)
        self.selection_start: Selection = None
        self.selection_end: Selection = None

    @staticmethod
    def _normalize_dimensions(dimensions: Optional[Sequence[int]]) -> Optional[Dimensions]:
        # The display height always spans the full build range.
        if dimensions is None:
            return None
        if len(dimensions) != 3:
            raise ValueError("dimensions must contain three integers")
        return int(dimensions[0]), display_height(), int(dimensions[2])

    # ---- Project lifecycle -------------------------------------------
    @property
    def dimensions(self) -> Dimensions:
        return self.store.dimensions

    def initialize(self, dimensions: Optional[Sequence[int]] = None) -> None:
        """Start an empty project, dropping voxels, groups, selection and history."""
        self.store.reset(self._normalize_dimensions(dimensions))
        self.groups.clear()
        self.history.clear()
        self.clear_selection()
        self.bus.emit(PROJECT_LOADED, self.dimensions)

    # ---- Single voxels -----------------------------------------------
    def get_block(self, x: int, y: int, z: int) -> CellValue:
        return self.store.get_block(x, y, z)

    def set_block(self, x: int, y: int, z: int, block: str) -> bool:
        if not self.store.check_bounds(x, y, z):
            return False
        block = BlockId(block)
        if self.store.get_block(x, y, z) == block:
            logger.debug("skipping duplicate block at (%d, %d, %d)", x, y, z)
            return False
        self.history.record(SetAction(position=(x, y, z), block_type=block))
        return True

    def remove_block(self, x: int, y: int, z: int) -> bool:
        if not self.store.check_bounds(x, y, z):
            return False
        existing = self.store.get_block(x, y, z)
        if existing is None:
            return False
        self.history.record(RemoveAction(position=(x, y, z), block_type=existing))
        return True

    # ---- Areas -------------------------------------------------------
    def _commit_batch(self, before: ChangeMap, after: ChangeMap, label: str) -> int:
        if not before:
            return 0
        self.history.record(BatchAction(before=before, after=after, label=label))
        return len(before)

    def fill_area(self, start: Sequence[int], end: Sequence[int], block: str) -> int:
        """Fill the clamped box; returns the number of cells touched."""
        before, after = self.store.plan_fill(start, end, block)
        return self._commit_batch(before, after, f"Fill {block}")

    def clear_area(self, start: Sequence[int], end: Sequence[int]) -> int:
        """Empty the clamped box; returns the number of blocks removed."""
        before, after = self.store.plan_clear(start, end)
        return self._commit_batch(before, after, "Clear area")

    def flood_fill(self, start: Sequence[int], block: str) -> int:
        try:
            before, after = plan_flood_fill(self.store, start, block)
        except FloodFillLimitExceeded as exc:
            logger.warning("flood fill aborted: %s", exc)
            return 0
        return self._commit_batch(before, after, f"Flood fill {block}")

    # ---- Groups ------------------------------------------------------
    def create_group(
        self, start: Sequence[int], end: Sequence[int], name: Optional[str] = None
    ) -> str:
        group_id = self.group_manager.create_group(start, end, name)
        if group_id:
            self.clear_selection()
        return group_id

    def remove_group(self, group_id: str) -> bool:
        return self.group_manager.remove_group(group_id)

    def move_group(self, group_id: str, offset: Sequence[int]) -> bool:
        return self.group_manager.move_group(group_id, offset)

    def rotate_group(self, group_id: str, axis: str, degrees: float) -> bool:
        return self.group_manager.rotate_group(group_id, axis, degrees)

    def get_group_by_id(self, group_id: str) -> Optional[BlockGroup]:
        return self.group_manager.get_group_by_id(group_id)

    def set_active_group(self, group_id: Optional[str]) -> None:
        self.group_manager.set_active_group(group_id)

    @property
    def active_group_id(self) -> Optional[str]:
        return self.groups.active_id

    # ---- Selection ---------------------------------------------------
    def set_selection(self, start: Selection, end: Selection) -> None:
        self.selection_start = tuple(start) if start is not None else None
        self.selection_end = tuple(end) if end is not None else None
        self.bus.emit(SELECTION_CHANGED, self.selection_start, self.selection_end)

    def clear_selection(self) -> None:
        if self.selection_start is None and self.selection_end is None:
            return
        self.set_selection(None, None)

    # ---- History -----------------------------------------------------
    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        return self.history.undo() is not None

    def redo(self) -> bool:
        return self.history.redo() is not None

    # ---- Export ------------------------------------------------------
    def regions(self) -> List[FillRegion]:
        return optimize_store(self.store)

    def export_commands(self, offset: Sequence[int] = (0, 0, 0)) -> str:
        """Render the merged regions as ``.mcfunction`` text anchored at ``offset``."""
        return export_mcfunction(self.regions(), offset)

    # ---- Save / load -------------------------------------------------
    def snapshot(self) -> ProjectSnapshot:
        return ProjectSnapshot(
            version=project_io.current_version(),
            dimensions=self.dimensions,
            voxels=self.store.snapshot(),
            groups={gid: group.copy() for gid, group in self.groups.as_dict().items()},
        )

    def save(self) -> Dict[str, Any]:
        return project_io.snapshot_to_dict(self.snapshot())

    def save_json(self, *, indent: int = 2) -> str:
        return project_io.dumps(self.snapshot(), indent=indent)

    def save_to_file(self, path: str) -> None:
        project_io.save_to_file(self.snapshot(), path)

    def load(self, data: Union[Dict[str, Any], ProjectSnapshot]) -> None:
        """Replace the whole project; never incremental.

        Raises :class:`ProjectFormatError` for malformed data, in which case
        nothing is changed.
        """
        snapshot = data if isinstance(data, ProjectSnapshot) else project_io.snapshot_from_dict(data)

        dimensions = self._normalize_dimensions(snapshot.dimensions)
        bounds = VoxelStore(dimensions, y_min=self.store.y_min, y_max=self.store.y_max)
        voxels = {pos: block for pos, block in snapshot.voxels.items() if bounds.in_bounds(*pos)}
        dropped = len(snapshot.voxels) - len(voxels)
        if dropped:
            logger.warning("dropped %d voxels outside the project bounds", dropped)

        self.store.reset(dimensions)
        self.store.replace_contents(voxels)
        self.groups.replace_all({gid: group.copy() for gid, group in snapshot.groups.items()})
        self.history.clear()
        self.clear_selection()
        logger.info("loaded project with %d voxels and %d groups", len(voxels), len(snapshot.groups))
        self.bus.emit(PROJECT_LOADED, self.dimensions)

    def load_json(self, text: str) -> None:
        self.load(project_io.loads(text))

    def load_from_file(self, path: str) -> None:
        self.load(project_io.load_from_file(path))
