from __future__ import annotations

from pathlib import Path
import sys

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection,
# even without an editable install.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


from rasa_store.kv_store import MemoryKeyValueStore  # noqa: E402
from rasa_store.local_store import LocalStore  # noqa: E402
from rasa_store.remote import RemoteFirstAccessor  # noqa: E402
from rasa_store.resources import ResourceAPI  # noqa: E402

API_BASE = "http://api.test/api"


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import rasa_store.paths as paths

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        p = tmp_path / "data"
        p.mkdir(parents=True, exist_ok=True)
        return p

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    return tmp_path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(storage: MemoryKeyValueStore, clock: FakeClock) -> LocalStore:
    return LocalStore(storage, clock=clock)


@pytest.fixture
def api(store: LocalStore) -> ResourceAPI:
    return ResourceAPI(RemoteFirstAccessor(API_BASE, timeout_s=1.0), store)
