from world.history import BatchAction, RemoveAction, SetAction

STONE = "minecraft:stone"
DIRT = "minecraft:dirt"


def test_fresh_log(project):
    assert not project.can_undo
    assert not project.can_redo
    assert project.history.history_index == -1
    assert not project.undo()
    assert not project.redo()


def test_set_undo_redo(project):
    assert project.set_block(1, 2, 3, STONE)
    assert project.can_undo and not project.can_redo
    assert project.undo()
    assert project.get_block(1, 2, 3) is None
    assert project.can_redo
    assert project.redo()
    assert project.get_block(1, 2, 3) == STONE


def test_undoing_an_overwrite_clears_the_cell(project):
    project.set_block(0, 0, 0, STONE)
    project.set_block(0, 0, 0, DIRT)
    project.undo()
    assert project.get_block(0, 0, 0) is None


def test_rejected_edits_are_not_recorded(project):
    assert not project.set_block(0, 320, 0, STONE)
    project.set_block(0, 0, 0, STONE)
    assert not project.set_block(0, 0, 0, STONE)
    assert not project.remove_block(5, 5, 5)
    assert len(project.history) == 1


def test_remove_undo_restores_value(project):
    project.set_block(2, 2, 2, DIRT)
    assert project.remove_block(2, 2, 2)
    assert isinstance(project.history.entries()[-1], RemoveAction)
    project.undo()
    assert project.get_block(2, 2, 2) == DIRT
    project.redo()
    assert project.get_block(2, 2, 2) is None


def test_new_edit_truncates_redo_tail(project):
    project.set_block(0, 0, 0, STONE)
    project.set_block(1, 0, 0, STONE)
    project.undo()
    project.set_block(2, 0, 0, DIRT)
    assert not project.can_redo
    assert len(project.history) == 2
    assert [type(a) for a in project.history.entries()] == [SetAction, SetAction]
    assert project.history.entries()[-1].position == (2, 0, 0)


def test_fill_is_one_batch(project):
    project.set_block(1, 0, 1, DIRT)
    assert project.fill_area((0, 0, 0), (2, 1, 2), STONE) == 18
    assert len(project.history) == 2
    action = project.history.entries()[-1]
    assert isinstance(action, BatchAction)
    assert action.affected_blocks[(1, 0, 1)] == DIRT

    project.undo()
    assert project.get_block(1, 0, 1) == DIRT
    assert project.get_block(0, 0, 0) is None
    assert len(project.store) == 1

    project.redo()
    assert project.get_block(1, 0, 1) == STONE
    assert len(project.store) == 18


def test_clear_area_undo(project):
    project.fill_area((0, 0, 0), (1, 1, 1), STONE)
    assert project.clear_area((0, 0, 0), (0, 5, 5)) == 4
    assert len(project.store) == 4
    project.undo()
    assert len(project.store) == 8
    assert project.clear_area((10, 0, 10), (12, 2, 12)) == 0
    assert project.can_redo


def test_descriptions(project):
    project.set_block(0, 0, 0, STONE)
    assert project.history.undo_description() == "Place minecraft:stone at (0, 0, 0)"
    assert project.history.redo_description() is None
    project.undo()
    assert project.history.redo_description().startswith("Place")


def test_history_events(project, recorder):
    project.set_block(0, 0, 0, STONE)
    project.undo()
    project.redo()
    changes = [args for name, args in recorder if name == "history_changed"]
    assert changes == [(True, False), (False, True), (True, False)]


def test_chained_batches_undo_and_redo_step_by_step(project):
    project.fill_area((0, 0, 0), (2, 0, 0), STONE)
    filled = project.store.snapshot()
    project.clear_area((1, 0, 0), (4, 0, 0))
    cleared = project.store.snapshot()
    assert cleared == {(0, 0, 0): STONE}

    project.undo()
    assert project.store.snapshot() == filled
    project.undo()
    assert project.store.snapshot() == {}
    project.redo()
    assert project.store.snapshot() == filled
    project.redo()
    assert project.store.snapshot() == cleared
    assert not project.can_redo


def test_history_listeners_see_committed_edits(project, bus):
    seen = []
    bus.subscribe("history_changed", lambda *_: seen.append(project.get_block(0, 0, 0)))
    project.set_block(0, 0, 0, STONE)
    project.remove_block(0, 0, 0)
    project.fill_area((0, 0, 0), (0, 0, 0), DIRT)
    assert seen == [STONE, None, DIRT]
