from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import ptdb...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """
    Database path inside a temp directory so tests never touch real ./data.
    """
    return tmp_path / "testDb"


@pytest.fixture
def registry():
    """
    A private open-instance registry per test.
    """
    from ptdb.locks import OpenInstanceRegistry

    return OpenInstanceRegistry()


@pytest.fixture
def make_db(db_path: Path, registry):
    from ptdb import DocumentDB

    def _make(**kwargs):
        kwargs.setdefault("registry", registry)
        kwargs.setdefault("sync_interval", 60000)
        return DocumentDB(db_path, **kwargs)

    return _make
