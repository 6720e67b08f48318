# editor/project_io.py
"""Project snapshot encoding to and from the JSON project file format.

History is never part of a snapshot.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from engine.config import get as config_get
from world.blocks import BlockId
from world.groups import BlockGroup
from world.voxel_grid import Dimensions, Position, parse_position_key, position_key


class ProjectFormatError(ValueError):
    """Raised when project data is missing required fields or is malformed."""


@dataclass
class ProjectSnapshot:
    version: str
    dimensions: Dimensions
    voxels: Dict[Position, BlockId] = field(default_factory=dict)
    groups: Dict[str, BlockGroup] = field(default_factory=dict)


def current_version() -> str:
    return str(config_get("project.version", "1.0.0"))


# ---------- Field helpers ----------

def _to_int_tuple(values: Any, expected_len: int, name: str) -> Tuple[int, ...]:
    """Convert a JSON array into a tuple of ints of the given length."""
    if not isinstance(values, (list, tuple)) or len(values) != expected_len:
        raise ProjectFormatError(f"Field '{name}' must be a sequence of length {expected_len}")
    result = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
            raise ProjectFormatError(f"Field '{name}' must contain integers")
        result.append(int(value))
    return tuple(result)


def _encode_blocks(blocks: Mapping[Position, str]) -> Dict[str, str]:
    return {position_key(pos): str(block) for pos, block in blocks.items()}


def _decode_blocks(data: Any, name: str) -> Dict[Position, BlockId]:
    if not isinstance(data, dict):
        raise ProjectFormatError(f"Field '{name}' must be an object")
    blocks: Dict[Position, BlockId] = {}
    for key, block in data.items():
        try:
            blocks[parse_position_key(key)] = BlockId(block)
        except (TypeError, ValueError) as exc:
            raise ProjectFormatError(f"{name}[{key!r}]: {exc}") from exc
    return blocks


def _decode_group(group_id: str, data: Any) -> BlockGroup:
    path = f"groups[{group_id!r}]"
    if not isinstance(data, dict):
        raise ProjectFormatError(f"{path} must be an object")
    name = data.get("name", group_id)
    if not isinstance(name, str):
        raise ProjectFormatError(f"{path}.name must be a string")
    # Groups are keyed by id everywhere else; the two must agree.
    if str(data.get("id", group_id)) != group_id:
        raise ProjectFormatError(f"{path}.id {data.get('id')!r} does not match its key")
    return BlockGroup(
        id=group_id,
        name=name,
        blocks=_decode_blocks(data.get("blocks", {}), f"{path}.blocks"),
        origin=_to_int_tuple(data.get("origin"), 3, f"{path}.origin"),
    )


# ---------- Snapshot <-> dict ----------

def snapshot_to_dict(snapshot: ProjectSnapshot) -> Dict[str, Any]:
    """Convert a snapshot into a JSON-serializable dictionary."""
    return {
        "version": snapshot.version,
        "dimensions": [int(v) for v in snapshot.dimensions],
        "voxels": _encode_blocks(snapshot.voxels),
        "groups": {
            group_id: {
                "id": group.id,
                "name": group.name,
                "blocks": _encode_blocks(group.blocks),
                "origin": [int(v) for v in group.origin],
            }
            for group_id, group in snapshot.groups.items()
        },
    }


def snapshot_from_dict(data: Any) -> ProjectSnapshot:
    """Create a snapshot from a dictionary (inverse of snapshot_to_dict)."""
    if not isinstance(data, dict):
        raise ProjectFormatError("Project data must be a JSON object")
    if not data.get("dimensions") or "voxels" not in data or data["voxels"] is None:
        raise ProjectFormatError("Invalid project file: 'dimensions' and 'voxels' are required")

    dimensions = _to_int_tuple(data["dimensions"], 3, "dimensions")
    if dimensions[0] <= 0 or dimensions[2] <= 0:
        raise ProjectFormatError("Field 'dimensions' must have positive width and depth")

    voxels = _decode_blocks(data["voxels"], "voxels")

    groups_data = data.get("groups") or {}
    if not isinstance(groups_data, dict):
        raise ProjectFormatError("Field 'groups' must be an object")
    groups = {str(gid): _decode_group(str(gid), gdata) for gid, gdata in groups_data.items()}

    return ProjectSnapshot(
        version=str(data.get("version", current_version())),
        dimensions=dimensions,
        voxels=voxels,
        groups=groups,
    )


# ---------- Text / file ----------

def dumps(snapshot: ProjectSnapshot, *, indent: int = 2) -> str:
    return json.dumps(snapshot_to_dict(snapshot), indent=indent)


def loads(text: str) -> ProjectSnapshot:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ProjectFormatError(f"Project file is not valid JSON: {exc}") from exc
    return snapshot_from_dict(data)


def save_to_file(snapshot: ProjectSnapshot, path: str, *, indent: int = 2) -> None:
    """Serialize a snapshot to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps(snapshot, indent=indent))


def load_from_file(path: str) -> ProjectSnapshot:
    """Load a snapshot from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return loads(f.read())
