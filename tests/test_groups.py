from world.history import BatchAction, MoveGroupAction

import pytest

STONE = "minecraft:stone"
DIRT = "minecraft:dirt"
GRASS = "minecraft:grass_block"


def _group_two(project):
    project.set_block(0, 0, 0, STONE)
    project.set_block(1, 0, 0, DIRT)
    return project.create_group((0, 0, 0), (1, 0, 0), "Pair")


def test_create_group_captures_blocks(project):
    group_id = _group_two(project)
    assert group_id == "group_1700000000000_0"
    group = project.get_group_by_id(group_id)
    assert group.name == "Pair"
    assert group.blocks == {(0, 0, 0): STONE, (1, 0, 0): DIRT}
    assert group.origin == (0, 0, 0)
    assert project.active_group_id == group_id


def test_default_group_name(project):
    project.set_block(3, 3, 3, STONE)
    group_id = project.create_group((3, 3, 3), (3, 3, 3))
    assert project.get_group_by_id(group_id).name == "Group"


def test_empty_selection_creates_nothing(project):
    assert project.create_group((0, 0, 0), (4, 4, 4)) == ""
    assert len(project.groups) == 0
    assert len(project.history) == 0


def test_group_ids_stay_unique(project):
    project.set_block(0, 0, 0, STONE)
    project.set_block(5, 0, 0, STONE)
    first = project.create_group((0, 0, 0), (0, 0, 0))
    second = project.create_group((5, 0, 0), (5, 0, 0))
    assert first != second
    project.remove_group(first)
    third = project.create_group((0, 0, 0), (0, 0, 0))
    assert third not in (first, second)


def test_move_then_undo_scenario(project):
    group_id = _group_two(project)
    assert project.move_group(group_id, (0, 1, 0))
    assert project.get_block(0, 0, 0) is None
    assert project.get_block(1, 0, 0) is None
    assert project.get_block(0, 1, 0) == STONE
    assert project.get_block(1, 1, 0) == DIRT
    group = project.get_group_by_id(group_id)
    assert group.origin == (0, 1, 0)
    assert set(group.blocks) == {(0, 1, 0), (1, 1, 0)}
    assert isinstance(project.history.entries()[-1], MoveGroupAction)

    assert project.undo()
    assert project.get_block(0, 0, 0) == STONE
    assert project.get_block(1, 0, 0) == DIRT
    assert project.get_block(0, 1, 0) is None
    assert project.get_block(1, 1, 0) is None
    assert project.get_group_by_id(group_id).origin == (0, 0, 0)

    assert project.redo()
    assert project.get_block(0, 1, 0) == STONE
    assert project.get_group_by_id(group_id).origin == (0, 1, 0)


def test_move_drops_blocks_leaving_the_build_range(project):
    project.set_block(0, 319, 0, STONE)
    group_id = project.create_group((0, 319, 0), (0, 319, 0))
    assert project.move_group(group_id, (0, 1, 0))
    assert len(project.store) == 0
    assert project.get_group_by_id(group_id).blocks == {}
    project.undo()
    assert project.get_block(0, 319, 0) == STONE


def test_move_keeps_in_range_members(project):
    project.set_block(2, 318, 2, STONE)
    project.set_block(2, 319, 2, DIRT)
    group_id = project.create_group((2, 318, 2), (2, 319, 2))
    project.move_group(group_id, (0, 1, 0))
    assert project.store.snapshot() == {(2, 319, 2): STONE}
    assert project.get_group_by_id(group_id).blocks == {(2, 319, 2): STONE}


def test_move_drops_blocks_leaving_the_footprint(project):
    project.set_block(15, 0, 0, STONE)
    group_id = project.create_group((15, 0, 0), (15, 0, 0))
    project.move_group(group_id, (1, 0, 0))
    assert len(project.store) == 0


def test_overlapping_move_undo_restores_exactly(project):
    for x in range(3):
        project.set_block(x, 0, 0, STONE)
    initial = project.store.snapshot()
    group_id = project.create_group((0, 0, 0), (2, 0, 0))
    project.move_group(group_id, (1, 0, 0))
    assert sorted(project.store.snapshot()) == [(1, 0, 0), (2, 0, 0), (3, 0, 0)]
    project.undo()
    assert project.store.snapshot() == initial


def test_move_overwrite_is_restored(project):
    project.set_block(4, 0, 0, STONE)
    project.set_block(5, 0, 0, GRASS)
    group_id = project.create_group((4, 0, 0), (4, 0, 0))
    project.move_group(group_id, (1, 0, 0))
    assert project.get_block(5, 0, 0) == STONE
    project.undo()
    assert project.get_block(5, 0, 0) == GRASS
    assert project.get_block(4, 0, 0) == STONE


def test_move_rejections(project):
    group_id = _group_two(project)
    assert not project.move_group("missing", (1, 0, 0))
    assert not project.move_group(group_id, (0, 0, 0))
    assert len(project.history) == 3


def test_remove_group_keeps_voxels(project):
    group_id = _group_two(project)
    assert project.remove_group(group_id)
    assert project.get_group_by_id(group_id) is None
    assert project.active_group_id is None
    assert len(project.store) == 2
    project.undo()
    assert project.get_group_by_id(group_id).name == "Pair"
    assert not project.remove_group("missing")


def test_undo_create_removes_group(project):
    group_id = _group_two(project)
    project.undo()
    assert project.get_group_by_id(group_id) is None
    assert project.active_group_id is None
    project.redo()
    assert project.get_group_by_id(group_id) is not None


def test_rotate_about_origin(project):
    project.set_block(5, 0, 5, STONE)
    project.set_block(6, 0, 5, DIRT)
    group_id = project.create_group((5, 0, 5), (6, 0, 5))
    assert project.rotate_group(group_id, "y", 90)
    assert project.get_block(5, 0, 5) == STONE
    assert project.get_block(5, 0, 4) == DIRT
    assert project.get_block(6, 0, 5) is None
    assert isinstance(project.history.entries()[-1], BatchAction)
    assert set(project.get_group_by_id(group_id).blocks) == {(5, 0, 5), (5, 0, 4)}

    project.undo()
    assert project.get_block(6, 0, 5) == DIRT
    assert project.get_block(5, 0, 4) is None
    assert set(project.get_group_by_id(group_id).blocks) == {(5, 0, 5), (6, 0, 5)}


def test_rotate_around_z_lifts_blocks(project):
    project.set_block(5, 0, 5, STONE)
    project.set_block(6, 0, 5, DIRT)
    group_id = project.create_group((5, 0, 5), (6, 0, 5))
    project.rotate_group(group_id, "z", 90)
    assert project.get_block(5, 1, 5) == DIRT


def test_rotate_rejections(project):
    group_id = _group_two(project)
    assert not project.rotate_group(group_id, "y", 360)
    assert not project.rotate_group(group_id, "y", 0)
    assert not project.rotate_group("missing", "y", 90)
    with pytest.raises(ValueError):
        project.rotate_group(group_id, "q", 90)


def test_active_group_events(project, recorder):
    group_id = _group_two(project)
    project.set_active_group(None)
    changes = [args for name, args in recorder if name == "active_group_changed"]
    assert changes == [(group_id,), (None,)]


def test_rotate_redo_restores_group_blocks(project):
    project.set_block(5, 0, 5, STONE)
    project.set_block(6, 0, 5, DIRT)
    group_id = project.create_group((5, 0, 5), (6, 0, 5))
    project.rotate_group(group_id, "y", 90)
    project.undo()
    assert project.redo()
    assert project.get_block(5, 0, 4) == DIRT
    assert project.get_block(6, 0, 5) is None
    assert project.get_group_by_id(group_id).blocks == {(5, 0, 5): STONE, (5, 0, 4): DIRT}
