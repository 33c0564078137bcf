from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    # rasa_store/paths.py -> rasa_store -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return ensure_dir(project_root() / "data")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def store_dir(base: Path) -> Path:
    return ensure_dir(base / "store")
