"""Block identifiers and the palette catalog."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

DEFAULT_NAMESPACE = "minecraft"

# Disallow whitespace and the position-key separator; everything else is opaque.
_BLOCK_ID_RE = re.compile(r"^[^\s,]+$")


class BlockId(str):
    """Validated block identifier such as ``minecraft:stone``.

    Ids absent from the catalog are still accepted; they are the custom
    variant and report ``is_known == False``.
    """

    __slots__ = ()

    def __new__(cls, value: str) -> "BlockId":
        if isinstance(value, BlockId):
            return value
        if not isinstance(value, str):
            raise TypeError(f"block id must be a string, got {type(value).__name__}")
        if not value or not _BLOCK_ID_RE.match(value):
            raise ValueError(f"invalid block id {value!r}")
        return super().__new__(cls, value)

    @property
    def namespace(self) -> str:
        head, sep, _ = self.partition(":")
        return head if sep else DEFAULT_NAMESPACE

    @property
    def path(self) -> str:
        _, sep, tail = self.partition(":")
        return tail if sep else str(self)

    @property
    def is_known(self) -> bool:
        return str(self) in BLOCK_REGISTRY


@dataclass(frozen=True)
class BlockDef:
    block_id: str
    category: str


BlockRegistry = Dict[str, BlockDef]

CATEGORIES: Tuple[str, ...] = (
    "Building",
    "Decoration",
    "Redstone",
    "Natural",
    "Ores",
    "Liquids",
    "Special",
)

_CATEGORY_BLOCKS: Dict[str, Tuple[str, ...]] = {
    "Building": (
        "stone", "granite", "polished_granite", "diorite", "polished_diorite",
        "andesite", "polished_andesite", "cobblestone", "oak_planks",
        "spruce_planks", "birch_planks", "jungle_planks", "acacia_planks",
        "dark_oak_planks", "bricks", "stone_bricks", "mossy_stone_bricks",
        "cracked_stone_bricks", "chiseled_stone_bricks", "sandstone",
        "chiseled_sandstone", "cut_sandstone", "nether_bricks", "quartz_block",
        "chiseled_quartz_block", "quartz_pillar", "terracotta", "prismarine",
        "prismarine_bricks", "dark_prismarine",
    ),
    "Decoration": (
        "white_wool", "orange_wool", "magenta_wool", "light_blue_wool",
        "yellow_wool", "lime_wool", "pink_wool", "gray_wool", "light_gray_wool",
        "cyan_wool", "purple_wool", "blue_wool", "brown_wool", "green_wool",
        "red_wool", "black_wool", "glass", "white_stained_glass",
        "orange_stained_glass", "magenta_stained_glass",
        "light_blue_stained_glass", "yellow_stained_glass",
        "lime_stained_glass", "pink_stained_glass", "gray_stained_glass",
        "light_gray_stained_glass", "cyan_stained_glass",
        "purple_stained_glass", "blue_stained_glass", "brown_stained_glass",
        "green_stained_glass", "red_stained_glass", "black_stained_glass",
        "bookshelf", "crafting_table", "furnace", "jack_o_lantern",
        "sea_lantern", "hay_block",
    ),
    "Redstone": (
        "redstone_ore", "redstone_block", "redstone_lamp", "tnt", "command_block",
    ),
    "Natural": (
        "grass_block", "dirt", "coarse_dirt", "podzol", "sand", "red_sand",
        "gravel", "oak_log", "spruce_log", "birch_log", "jungle_log",
        "acacia_log", "dark_oak_log", "oak_wood", "spruce_wood", "birch_wood",
        "jungle_wood", "acacia_wood", "dark_oak_wood", "oak_leaves",
        "spruce_leaves", "birch_leaves", "jungle_leaves", "acacia_leaves",
        "dark_oak_leaves", "snow_block", "ice", "packed_ice", "clay", "pumpkin",
        "melon", "mycelium", "netherrack", "soul_sand", "end_stone", "sponge",
        "wet_sponge", "mossy_cobblestone",
    ),
    "Ores": (
        "coal_ore", "iron_ore", "gold_ore", "lapis_ore", "diamond_ore",
        "emerald_ore", "quartz_ore",
    ),
    "Liquids": ("water", "lava"),
    "Special": (
        "gold_block", "iron_block", "diamond_block", "emerald_block",
        "lapis_block", "coal_block", "obsidian", "glowstone", "beacon",
        "slime_block", "barrier", "bedrock", "air",
    ),
}


def _build_registry() -> BlockRegistry:
    registry: BlockRegistry = {}
    for category in CATEGORIES:
        for name in _CATEGORY_BLOCKS[category]:
            block_id = f"{DEFAULT_NAMESPACE}:{name}"
            registry[block_id] = BlockDef(block_id=block_id, category=category)
    return registry


BLOCK_REGISTRY: BlockRegistry = _build_registry()

DEFAULT_BLOCK = BlockId("minecraft:stone")


def blocks_in_category(category: str) -> Tuple[BlockId, ...]:
    """Return the catalogued ids of a palette category, in palette order."""
    names = _CATEGORY_BLOCKS.get(category)
    if names is None:
        raise KeyError(f"unknown block category {category!r}")
    return tuple(BlockId(f"{DEFAULT_NAMESPACE}:{name}") for name in names)


def category_of(block: str) -> Optional[str]:
    block_def = BLOCK_REGISTRY.get(str(block))
    return block_def.category if block_def else None
