import pytest

from editor.project import Project
from engine import config
from engine.event_bus import SESSION_EVENTS, EventBus
from world.voxel_grid import VoxelStore

FIXED_TIME = 1700000000.0


@pytest.fixture(autouse=True)
def _fresh_config():
    config.reload()
    yield
    config.reload()


@pytest.fixture
def store():
    return VoxelStore((8, 384, 8))


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def project(bus):
    return Project((16, 384, 16), bus=bus, clock=lambda: FIXED_TIME)


@pytest.fixture
def recorder(bus):
    """Collect (event, args) tuples for the session events."""
    seen = []
    for name in SESSION_EVENTS:
        bus.subscribe(name, lambda *args, _name=name: seen.append((_name, args)))
    return seen
