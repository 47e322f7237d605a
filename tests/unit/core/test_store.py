"""
Unit tests for the flat model store.
"""

from unittest.mock import MagicMock

import pytest

from flatc4.core.store import FlatC4Store
from flatc4.core.types import (
    CodeType,
    Connection,
    ContainerPatch,
    FlatC4Model,
    Position,
    SystemBlock,
    ViewLevel,
)


class TestAdd:
    """Tests for adding blocks at each level."""

    def test_add_system_assigns_id_and_type(self, store):
        system = store.add_system({"name": "Payments"})

        assert system.id == "id-1"
        assert system.type == ViewLevel.SYSTEM
        assert store.model.systems == [system]

    def test_get_block_by_id_after_add(self, store):
        system = store.add_system({"name": "Payments"})
        container = store.add_container(system.id, {"name": "API"})
        component = store.add_component(container.id, {"name": "Controller"})
        code = store.add_code_element(component.id, {"name": "Handler"})

        for block, level in [
            (system, ViewLevel.SYSTEM),
            (container, ViewLevel.CONTAINER),
            (component, ViewLevel.COMPONENT),
            (code, ViewLevel.CODE),
        ]:
            found = store.get_block_by_id(block.id)
            assert found is not None
            assert found.id == block.id
            assert found.type == level

    def test_add_stamps_parent_links(self, store):
        system = store.add_system({"name": "Payments"})
        container = store.add_container(system.id, {"name": "API"})
        component = store.add_component(container.id, {"name": "Controller"})
        code = store.add_code_element(component.id, {"name": "Handler"})

        assert container.system_id == system.id
        assert component.container_id == container.id
        assert component.system_id == system.id
        assert code.component_id == component.id

    def test_add_component_with_missing_container(self, store):
        component = store.add_component("ghost", {"name": "Orphan"})

        assert component.container_id == "ghost"
        assert component.system_id is None

    def test_add_ignores_supplied_id(self, store):
        system = store.add_system({"id": "chosen", "name": "Payments"})
        assert system.id == "id-1"

    def test_add_uses_default_name(self, store):
        system = store.add_system({})
        code = store.add_code_element("comp", {})

        assert system.name == "New System"
        assert code.name == "New Code Element"
        assert code.code_type == CodeType.CLASS

    def test_add_keeps_connections_and_camel_case_fields(self, store):
        system = store.add_system({
            "name": "Payments",
            "position": {"x": 10, "y": 20},
            "connections": [{"targetId": "other", "label": "calls"}],
        })

        assert system.position == Position(x=10, y=20)
        assert system.connections == [Connection(target_id="other", label="calls")]

    def test_add_accepts_block_model(self, store):
        system = store.add_system(SystemBlock(id="ignored", name="From Model"))

        assert system.name == "From Model"
        assert system.id == "id-1"


class TestUpdate:
    """Tests for partial updates."""

    def test_update_merges_only_given_fields(self, populated_store):
        populated_store.update_container("cont-1", {"name": "Checkout API"})

        container = populated_store.get_block_by_id("cont-1")
        assert container.name == "Checkout API"
        assert container.technology == "FastAPI"
        assert container.system_id == "sys-1"

    def test_update_with_patch_model(self, populated_store):
        populated_store.update_container("cont-1", ContainerPatch(technology=None))

        assert populated_store.get_block_by_id("cont-1").technology is None

    def test_update_position(self, populated_store):
        populated_store.update_system("sys-1", {"position": {"x": 5, "y": 6}})

        assert populated_store.get_block_by_id("sys-1").position == Position(x=5, y=6)

    def test_update_missing_id_is_noop(self, populated_store):
        before = populated_store.model
        version = populated_store.version

        populated_store.update_component("ghost", {"name": "x"})

        assert populated_store.model is before
        assert populated_store.version == version

    def test_update_cannot_change_id(self, populated_store):
        populated_store.update_system("sys-2", {"name": "Accounts", "id": "other"})

        assert populated_store.get_block_by_id("sys-2").name == "Accounts"


class TestRemove:
    """Tests for cascading removal."""

    def test_remove_container_cascades(self, populated_store):
        populated_store.remove_container("cont-1")
        model = populated_store.model

        assert [c.id for c in model.containers] == ["cont-2", "cont-3"]
        assert [c.id for c in model.components] == ["comp-3"]
        assert [c.id for c in model.code_elements] == ["code-3"]

    def test_remove_component_cascades(self, populated_store):
        populated_store.remove_component("comp-1")
        model = populated_store.model

        assert [c.id for c in model.components] == ["comp-2", "comp-3"]
        assert [c.id for c in model.code_elements] == ["code-3"]

    def test_remove_system_cascades(self, populated_store):
        populated_store.remove_system("sys-1")
        model = populated_store.model

        assert [s.id for s in model.systems] == ["sys-2"]
        assert [c.id for c in model.containers] == ["cont-3"]
        assert [c.id for c in model.components] == ["comp-3"]
        assert [c.id for c in model.code_elements] == ["code-3"]

    def test_remove_code_element(self, populated_store):
        populated_store.remove_code_element("code-2")

        assert [c.id for c in populated_store.model.code_elements] == ["code-1", "code-3"]

    @pytest.mark.parametrize("level", list(ViewLevel))
    def test_remove_missing_id_is_noop(self, populated_store, level):
        before = populated_store.model
        listener = MagicMock()
        populated_store.subscribe(listener)

        populated_store.remove_block(level, "does-not-exist")

        assert populated_store.model is before
        assert populated_store.version == 0
        listener.assert_not_called()

    def test_remove_leaves_dangling_connections(self, populated_store):
        populated_store.remove_system("sys-2")

        payments = populated_store.get_block_by_id("sys-1")
        assert [c.target_id for c in payments.connections] == ["sys-2"]

    def test_prune_dangling_connections(self, populated_store):
        populated_store.remove_system("sys-2")

        assert populated_store.prune_dangling_connections() == 1
        assert populated_store.get_block_by_id("sys-1").connections == []
        assert populated_store.prune_dangling_connections() == 0


class TestConnections:
    """Tests for connect/update/remove of connections."""

    def test_connect_twice_keeps_first(self, populated_store):
        assert populated_store.connect_containers("cont-2", {"targetId": "cont-1", "label": "first"})
        assert not populated_store.connect_containers("cont-2", {"targetId": "cont-1", "label": "second"})

        connections = populated_store.get_block_by_id("cont-2").connections
        assert len(connections) == 1
        assert connections[0].label == "first"

    def test_connect_missing_source_is_noop(self, populated_store):
        version = populated_store.version

        assert not populated_store.connect_systems("ghost", {"targetId": "sys-1"})
        assert populated_store.version == version

    def test_connect_empty_target_is_rejected(self, populated_store):
        assert not populated_store.connect_components("comp-1", Connection(target_id=""))
        assert populated_store.get_block_by_id("comp-1").connections == []

    def test_connect_code_elements(self, populated_store):
        assert populated_store.connect_code_elements("code-1", {"targetId": "code-2"})
        assert populated_store.get_block_by_id("code-1").connections[0].target_id == "code-2"

    def test_update_connection(self, populated_store):
        populated_store.update_connection(ViewLevel.SYSTEM, "sys-1", "sys-2", {"technology": "OIDC"})

        conn = populated_store.get_block_by_id("sys-1").connections[0]
        assert conn.technology == "OIDC"
        assert conn.label == "authenticates with"

    def test_remove_connection(self, populated_store):
        populated_store.remove_connection(ViewLevel.CONTAINER, "cont-1", "cont-2")

        assert populated_store.get_block_by_id("cont-1").connections == []


class TestNavigationPointers:
    """Tests for active pointers and view level."""

    def test_set_active_system(self, populated_store):
        populated_store.set_active_system("sys-1")
        model = populated_store.model

        assert model.view_level == ViewLevel.CONTAINER
        assert model.active_system_id == "sys-1"

    def test_set_active_system_none_clears_everything(self, populated_store):
        populated_store.set_active_system("sys-1")
        populated_store.set_active_container("cont-1")
        populated_store.set_active_component("comp-1")

        populated_store.set_active_system(None)
        model = populated_store.model

        assert model.view_level == ViewLevel.SYSTEM
        assert model.active_system_id is None
        assert model.active_container_id is None
        assert model.active_component_id is None

    def test_set_active_container_and_component(self, populated_store):
        populated_store.set_active_system("sys-1")
        populated_store.set_active_container("cont-1")
        assert populated_store.model.view_level == ViewLevel.COMPONENT

        populated_store.set_active_component("comp-1")
        assert populated_store.model.view_level == ViewLevel.CODE
        assert populated_store.model.active_component_id == "comp-1"

        populated_store.set_active_component(None)
        assert populated_store.model.view_level == ViewLevel.COMPONENT
        assert populated_store.model.active_component_id is None

    def test_set_view_level_clears_deeper_pointers(self, populated_store):
        populated_store.set_active_system("sys-1")
        populated_store.set_active_container("cont-1")
        populated_store.set_active_component("comp-1")

        populated_store.set_view_level("container")
        model = populated_store.model

        assert model.view_level == ViewLevel.CONTAINER
        assert model.active_system_id == "sys-1"
        assert model.active_container_id is None
        assert model.active_component_id is None

    def test_repeating_current_position_is_noop(self, populated_store):
        populated_store.set_active_system("sys-1")
        populated_store.set_active_container("cont-1")
        before = populated_store.model
        version = populated_store.version

        populated_store.set_active_container("cont-1")
        populated_store.set_view_level(ViewLevel.COMPONENT)

        assert populated_store.model is before
        assert populated_store.version == version

    def test_set_view_level_at_system_is_noop(self, populated_store):
        before = populated_store.model

        populated_store.set_view_level(ViewLevel.SYSTEM)
        populated_store.set_active_system(None)

        assert populated_store.model is before
        assert populated_store.version == 0


class TestSnapshots:
    """Tests for publication, subscription and bulk loads."""

    def test_mutation_publishes_new_snapshot(self, populated_store):
        before = populated_store.model
        populated_store.update_system("sys-1", {"name": "Renamed"})

        assert populated_store.model is not before
        assert before.systems[0].name == "Payments Platform"
        assert populated_store.version == 1

    def test_subscribe_and_unsubscribe(self, populated_store):
        listener = MagicMock()
        unsubscribe = populated_store.subscribe(listener)

        populated_store.set_active_system("sys-1")
        listener.assert_called_once()
        new, old = listener.call_args.args
        assert new.active_system_id == "sys-1"
        assert old.active_system_id is None

        unsubscribe()
        populated_store.set_active_system(None)
        listener.assert_called_once()

    def test_failing_listener_does_not_block_others(self, populated_store):
        failing = MagicMock(side_effect=RuntimeError("boom"))
        other = MagicMock()
        populated_store.subscribe(failing)
        populated_store.subscribe(other)

        populated_store.remove_code_element("code-1")

        other.assert_called_once()
        assert populated_store.get_block_by_id("code-1") is None

    def test_set_model_same_snapshot_is_noop(self, populated_store):
        version = populated_store.version
        populated_store.set_model(populated_store.model)

        assert populated_store.version == version

    def test_set_model_partial_merges(self, populated_store):
        populated_store.set_model({"viewLevel": "container", "activeSystemId": "sys-2"})
        model = populated_store.model

        assert model.view_level == ViewLevel.CONTAINER
        assert model.active_system_id == "sys-2"
        assert len(model.systems) == 2

    def test_set_model_full_replaces(self, populated_store):
        populated_store.set_model(FlatC4Model())
        assert populated_store.model.systems == []

    def test_reset(self, populated_store):
        populated_store.set_active_system("sys-1")
        populated_store.reset()
        model = populated_store.model

        assert model == FlatC4Model()
        assert model.view_level == ViewLevel.SYSTEM
        assert model.active_system_id is None

    def test_get_state_round_trips_through_wire_format(self, populated_store):
        wire = populated_store.get_state().to_wire()

        assert "codeElements" in wire
        assert wire["containers"][0]["systemId"] == "sys-1"
        assert FlatC4Model.model_validate(wire) == populated_store.model

    def test_store_instances_are_independent(self):
        a, b = FlatC4Store(), FlatC4Store()
        a.add_system({"name": "Only in A"})

        assert b.model.systems == []
