"""Shared fixtures for flatc4 tests."""

import itertools

import pytest

from flatc4.core.store import FlatC4Store
from flatc4.core.types import (
    CodeBlock,
    ComponentBlock,
    Connection,
    ContainerBlock,
    FlatC4Model,
    SystemBlock,
)


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def sample_model() -> FlatC4Model:
    """Two systems with a small tree under each."""
    return FlatC4Model(
        systems=[
            SystemBlock(
                id="sys-1",
                name="Payments Platform",
                connections=[Connection(target_id="sys-2", label="authenticates with")],
            ),
            SystemBlock(id="sys-2", name="Identity Service"),
        ],
        containers=[
            ContainerBlock(
                id="cont-1",
                name="Payments API",
                system_id="sys-1",
                technology="FastAPI",
                connections=[Connection(target_id="cont-2", technology="sql")],
            ),
            ContainerBlock(id="cont-2", name="Ledger DB", system_id="sys-1"),
            ContainerBlock(id="cont-3", name="Auth API", system_id="sys-2"),
        ],
        components=[
            ComponentBlock(id="comp-1", name="Charge Controller", container_id="cont-1", system_id="sys-1"),
            ComponentBlock(id="comp-2", name="Refund Controller", container_id="cont-1", system_id="sys-1"),
            ComponentBlock(id="comp-3", name="Token Issuer", container_id="cont-3", system_id="sys-2"),
        ],
        code_elements=[
            CodeBlock(id="code-1", name="ChargeService", component_id="comp-1"),
            CodeBlock(id="code-2", name="ChargeRepository", component_id="comp-1"),
            CodeBlock(id="code-3", name="TokenSigner", component_id="comp-3"),
        ],
    )


@pytest.fixture
def store():
    """Empty store with predictable ids."""
    return FlatC4Store(id_factory=sequential_ids())


@pytest.fixture
def populated_store():
    """Store holding ``sample_model()``."""
    return FlatC4Store(model=sample_model(), id_factory=sequential_ids("new"))


@pytest.fixture
def model():
    """A fresh ``sample_model()``."""
    return sample_model()
