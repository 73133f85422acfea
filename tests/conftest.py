import pytest

from ideamap.config import ENV_DATA_DIR, ENV_HISTORY_CAPACITY, ENV_ID_PREFIX
from ideamap.engine import EditEngine
from ideamap.storage import MapStore


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the user's data dir and IDEAMAP_* overrides."""
    monkeypatch.setenv(ENV_DATA_DIR, str(tmp_path / "data"))
    monkeypatch.delenv(ENV_HISTORY_CAPACITY, raising=False)
    monkeypatch.delenv(ENV_ID_PREFIX, raising=False)


@pytest.fixture
def engine():
    """A fresh engine whose root is {id: "r", label: "Central Idea"}."""
    return EditEngine(data={"id": "r", "label": "Central Idea", "children": []})


@pytest.fixture
def store(tmp_path):
    store = MapStore(tmp_path / "maps.db")
    yield store
    store.close()
