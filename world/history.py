"""Undo/redo log over voxel and group mutations.

Every mutator commits through :meth:`HistoryLog.record`. Actions know how to
revert themselves (undo) and how to re-apply their forward effect (redo)
against a :class:`VoxelStore` and a :class:`GroupRegistry`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from engine.event_bus import HISTORY_CHANGED, EventBus
from world.blocks import BlockId
from world.groups import BlockGroup, GroupRegistry
from world.voxel_grid import ChangeMap, Position, VoxelStore


class HistoryAction(ABC):
    """Abstract base class for recorded actions"""

    @abstractmethod
    def revert(self, store: VoxelStore, groups: GroupRegistry) -> None:
        """Apply the inverse of this action."""

    @abstractmethod
    def reapply(self, store: VoxelStore, groups: GroupRegistry) -> None:
        """Apply the forward effect of this action again."""

    @abstractmethod
    def describe(self) -> str:
        """Get a human-readable description of the action"""


@dataclass
class SetAction(HistoryAction):
    """Single-voxel assignment.

    The previous value is not kept: undo always clears the cell, even when
    the set overwrote an existing block.
    """
    position: Position
    block_type: BlockId

    def revert(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.write(self.position, None)

    def reapply(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.write(self.position, self.block_type)

    def describe(self) -> str:
        return f"Place {self.block_type} at {self.position}"


@dataclass
class RemoveAction(HistoryAction):
    """Single-voxel deletion carrying the removed value."""
    position: Position
    block_type: BlockId

    def revert(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.write(self.position, self.block_type)

    def reapply(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.write(self.position, None)

    def describe(self) -> str:
        return f"Remove {self.block_type} at {self.position}"


@dataclass
class BatchAction(HistoryAction):
    """Many-cell edit (fill, clear, flood fill, rotate).

    ``before`` and ``after`` cover the same positions; None means air. A
    rotation also carries the group's state on both sides.
    """
    before: ChangeMap = field(default_factory=dict)
    after: ChangeMap = field(default_factory=dict)
    label: str = "Batch edit"
    group_id: Optional[str] = None
    group_before: Optional[BlockGroup] = None
    group_after: Optional[BlockGroup] = None

    @property
    def affected_blocks(self) -> ChangeMap:
        return self.before

    def revert(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.apply(self.before)
        if self.group_before is not None:
            groups.put(self.group_before.copy())

    def reapply(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.apply(self.after)
        if self.group_after is not None:
            groups.put(self.group_after.copy())

    def describe(self) -> str:
        return f"{self.label} ({len(self.before)} blocks)"


@dataclass
class GroupAction(HistoryAction):
    """Group creation."""
    group_id: str
    group: BlockGroup

    def revert(self, store: VoxelStore, groups: GroupRegistry) -> None:
        groups.pop(self.group_id)

    def reapply(self, store: VoxelStore, groups: GroupRegistry) -> None:
        groups.put(self.group.copy())

    def describe(self) -> str:
        return f"Create group '{self.group.name}'"


@dataclass
class UngroupAction(HistoryAction):
    """Group removal; ``group`` is the deleted group, kept for restoration."""
    group_id: str
    group: BlockGroup

    def revert(self, store: VoxelStore, groups: GroupRegistry) -> None:
        groups.put(self.group.copy())

    def reapply(self, store: VoxelStore, groups: GroupRegistry) -> None:
        groups.pop(self.group_id)

    def describe(self) -> str:
        return f"Remove group '{self.group.name}'"


@dataclass
class MoveGroupAction(HistoryAction):
    """Group translation.

    ``affected_blocks`` holds the pre-move value of every vacated and every
    overwritten cell; ``after`` holds their post-move values.
    """
    group_id: str
    group: BlockGroup
    old_origin: Position
    new_origin: Position
    affected_blocks: ChangeMap = field(default_factory=dict)
    after: ChangeMap = field(default_factory=dict)
    moved_group: Optional[BlockGroup] = None

    def revert(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.apply(self.affected_blocks)
        if self.group_id in groups:
            groups.put(self.group.copy())

    def reapply(self, store: VoxelStore, groups: GroupRegistry) -> None:
        store.apply(self.after)
        if self.moved_group is not None and self.group_id in groups:
            groups.put(self.moved_group.copy())

    def describe(self) -> str:
        offset = tuple(n - o for n, o in zip(self.new_origin, self.old_origin))
        return f"Move group '{self.group.name}' by {offset}"


class HistoryLog:
    """Ordered action log with a cursor at the most recently applied entry.

    ``record`` truncates everything past the cursor before appending, so a
    new mutation always discards the redo tail. It then commits the action
    and only afterwards emits ``history_changed``, so listeners always see
    the post-edit store.
    """

    def __init__(
        self,
        store: VoxelStore,
        groups: GroupRegistry,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.store = store
        self.groups = groups
        self._bus = bus
        self._log: List[HistoryAction] = []
        self._cursor = -1

    # State --------------------------------------------------------------
    @property
    def history_index(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor >= 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._log) - 1

    def __len__(self) -> int:
        return len(self._log)

    def entries(self) -> Tuple[HistoryAction, ...]:
        return tuple(self._log)

    def undo_description(self) -> Optional[str]:
        if self.can_undo:
            return self._log[self._cursor].describe()
        return None

    def redo_description(self) -> Optional[str]:
        if self.can_redo:
            return self._log[self._cursor + 1].describe()
        return None

    # Mutation -----------------------------------------------------------
    def record(self, action: HistoryAction) -> None:
        """Log ``action`` and apply its forward effect."""
        del self._log[self._cursor + 1:]
        self._log.append(action)
        self._cursor += 1
        action.reapply(self.store, self.groups)
        self._notify()

    def undo(self) -> Optional[HistoryAction]:
        if self._cursor < 0:
            return None
        action = self._log[self._cursor]
        action.revert(self.store, self.groups)
        self._cursor -= 1
        self._notify()
        return action

    def redo(self) -> Optional[HistoryAction]:
        if self._cursor >= len(self._log) - 1:
            return None
        action = self._log[self._cursor + 1]
        action.reapply(self.store, self.groups)
        self._cursor += 1
        self._notify()
        return action

    def clear(self) -> None:
        self._log.clear()
        self._cursor = -1
        self._notify()

    def _notify(self) -> None:
        if self._bus is not None:
            self._bus.emit(HISTORY_CHANGED, self.can_undo, self.can_redo)
