import json

from editor.project import Project
from editor.project_io import ProjectFormatError, load_from_file, loads, snapshot_from_dict

import pytest

STONE = "minecraft:stone"


def _build(project):
    project.set_block(0, -64, 0, STONE)
    project.set_block(1, 319, 2, "minecraft:glass")
    project.set_block(3, 0, 3, "mymod:custom_block")
    return project.create_group((0, -64, 0), (0, -64, 0), "Floor")


def test_saved_format(project):
    group_id = _build(project)
    data = project.save()
    assert data["version"] == "1.0.0"
    assert data["dimensions"] == [16, 384, 16]
    assert data["voxels"]["0,-64,0"] == STONE
    assert data["voxels"]["3,0,3"] == "mymod:custom_block"
    assert data["groups"][group_id] == {
        "id": group_id,
        "name": "Floor",
        "blocks": {"0,-64,0": STONE},
        "origin": [0, -64, 0],
    }
    assert "history" not in data
    json.dumps(data)


def test_round_trip(project):
    group_id = _build(project)
    other = Project()
    other.load(project.save())
    assert other.dimensions == project.dimensions
    assert other.store.snapshot() == project.store.snapshot()
    assert other.get_group_by_id(group_id) == project.get_group_by_id(group_id)
    assert other.save() == project.save()


def test_file_round_trip(project, tmp_path):
    _build(project)
    path = tmp_path / "house.json"
    project.save_to_file(str(path))
    assert load_from_file(str(path)).voxels == project.store.snapshot()
    other = Project()
    other.load_from_file(str(path))
    assert other.save() == project.save()


def test_load_resets_session(project, recorder):
    _build(project)
    project.set_selection((0, 0, 0), (1, 1, 1))
    project.load({"dimensions": [8, 384, 8], "voxels": {"1,2,3": STONE}})
    assert project.dimensions == (8, 384, 8)
    assert project.store.snapshot() == {(1, 2, 3): STONE}
    assert len(project.groups) == 0
    assert project.active_group_id is None
    assert not project.can_undo and not project.can_redo
    assert project.selection_start is None
    assert recorder[-1] == ("project_loaded", ((8, 384, 8),))


def test_load_drops_out_of_bounds_voxels(project):
    project.load({"dimensions": [4, 384, 4], "voxels": {"0,0,0": STONE, "9,0,0": STONE, "0,400,0": STONE}})
    assert project.store.snapshot() == {(0, 0, 0): STONE}


@pytest.mark.parametrize(
    "data",
    [
        {"voxels": {}},
        {"dimensions": [4, 384, 4]},
        {"dimensions": [4, 384, 4], "voxels": None},
        {"dimensions": [4, 384], "voxels": {}},
        {"dimensions": [0, 384, 4], "voxels": {}},
        {"dimensions": [4, 384, 4], "voxels": {"1,2": STONE}},
        {"dimensions": [4, 384, 4], "voxels": {"0,0,0": ""}},
        {"dimensions": [4, 384, 4], "voxels": {}, "groups": {"g": {"name": "x", "origin": [0, 0]}}},
        {"dimensions": [4, 384, 4], "voxels": {}, "groups": {"g": {"id": "h", "name": "x", "origin": [0, 0, 0]}}},
        [],
    ],
)
def test_malformed_data_leaves_project_untouched(project, data):
    _build(project)
    before = project.save()
    history_len = len(project.history)
    with pytest.raises(ProjectFormatError):
        project.load(data)
    assert project.save() == before
    assert len(project.history) == history_len


def test_invalid_json_text():
    with pytest.raises(ProjectFormatError):
        loads("{not json")
    with pytest.raises(ValueError):
        loads("[1, 2")


def test_groups_are_optional():
    snapshot = snapshot_from_dict({"dimensions": [2, 384, 2], "voxels": {}})
    assert snapshot.groups == {}
    assert snapshot.version == "1.0.0"


def test_group_keys_match_ids_after_load(project):
    project.load({
        "dimensions": [8, 384, 8],
        "voxels": {"1,0,1": STONE},
        "groups": {"g": {"name": "Pillar", "blocks": {"1,0,1": STONE}, "origin": [1, 0, 1]}},
    })
    assert project.get_group_by_id("g").id == "g"
    assert project.move_group("g", (1, 0, 0))
    assert list(project.save()["groups"]) == ["g"]


def test_load_forces_display_height(project):
    project.load({"dimensions": [4, 10, 4], "voxels": {"0,200,0": STONE}})
    assert project.dimensions == (4, 384, 4)
    assert project.get_block(0, 200, 0) == STONE
