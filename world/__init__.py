"""Voxel data model: block ids, sparse storage, groups, history and region merging."""
from .blocks import BLOCK_REGISTRY, DEFAULT_BLOCK, BlockId, blocks_in_category, category_of
from .groups import BlockGroup, GroupRegistry
from .history import (
    BatchAction,
    GroupAction,
    HistoryAction,
    HistoryLog,
    MoveGroupAction,
    RemoveAction,
    SetAction,
    UngroupAction,
)
from .regions import FillRegion, optimize_store, optimize_voxel_regions
from .voxel_grid import VoxelStore, parse_position_key, position_key

__all__ = [
    "BLOCK_REGISTRY",
    "DEFAULT_BLOCK",
    "BlockId",
    "blocks_in_category",
    "category_of",
    "BlockGroup",
    "GroupRegistry",
    "HistoryAction",
    "HistoryLog",
    "SetAction",
    "RemoveAction",
    "BatchAction",
    "GroupAction",
    "UngroupAction",
    "MoveGroupAction",
    "FillRegion",
    "optimize_voxel_regions",
    "optimize_store",
    "VoxelStore",
    "position_key",
    "parse_position_key",
]
