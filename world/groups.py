"""Named block groups and the registry that owns them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from engine.event_bus import ACTIVE_GROUP_CHANGED, EventBus
from world.blocks import BlockId
from world.voxel_grid import Position


@dataclass
class BlockGroup:
    """A named copy of voxel values treated as one rigid body.

    ``blocks`` is a snapshot, not a live view of the store; group operations
    keep it in sync. ``origin`` is the pivot for rotation.
    """
    id: str
    name: str
    blocks: Dict[Position, BlockId] = field(default_factory=dict)
    origin: Position = (0, 0, 0)

    def copy(self) -> "BlockGroup":
        return BlockGroup(
            id=self.id,
            name=self.name,
            blocks=dict(self.blocks),
            origin=tuple(self.origin),
        )

    def __len__(self) -> int:
        return len(self.blocks)


class GroupRegistry:
    """Holds every group by id plus the single active-group selection."""

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self._groups: Dict[str, BlockGroup] = {}
        self._active_id: Optional[str] = None
        self._bus = bus

    def __contains__(self, group_id: object) -> bool:
        return group_id in self._groups

    def __iter__(self) -> Iterator[BlockGroup]:
        return iter(list(self._groups.values()))

    def __len__(self) -> int:
        return len(self._groups)

    def get(self, group_id: str) -> Optional[BlockGroup]:
        return self._groups.get(group_id)

    def put(self, group: BlockGroup) -> None:
        self._groups[group.id] = group

    def pop(self, group_id: str) -> Optional[BlockGroup]:
        group = self._groups.pop(group_id, None)
        if group is not None and self._active_id == group_id:
            self.set_active(None)
        return group

    def as_dict(self) -> Dict[str, BlockGroup]:
        return dict(self._groups)

    def replace_all(self, groups: Dict[str, BlockGroup]) -> None:
        self._groups = dict(groups)
        self.set_active(None)

    def clear(self) -> None:
        self._groups.clear()
        self.set_active(None)

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    def set_active(self, group_id: Optional[str]) -> None:
        if group_id == self._active_id:
            return
        self._active_id = group_id
        if self._bus is not None:
            self._bus.emit(ACTIVE_GROUP_CHANGED, group_id)
