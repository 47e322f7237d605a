"""Fixtures for CLI command tests."""

import pytest
from click.testing import CliRunner

from flatc4.core.storage import SQLiteStorage
from flatc4.core.types import ContainerBlock, OriginalRef, ViewLevel


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every command from an empty directory without a config file."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def seeded_db(tmp_path, model):
    """Database holding the sample model plus a clone of the Auth API in sys-1."""
    model.containers.append(ContainerBlock(
        id="clone-auth",
        name="Auth API",
        system_id="sys-1",
        original=OriginalRef(id="cont-3", name="Auth API", type=ViewLevel.CONTAINER),
    ))
    db = tmp_path / "model.db"
    SQLiteStorage(db).save_model(model)
    return str(db)
