"""
Unit tests for in-memory storage and store binding.
"""

from flatc4.core.storage import MemoryStorage, bind_storage
from flatc4.core.store import FlatC4Store
from flatc4.core.types import FlatC4Model


class TestMemoryStorage:
    def test_round_trip(self, model):
        storage = MemoryStorage()
        storage.save_model(model)

        assert storage.load_model() == model
        assert '"activeSystemId"' in storage.payload

    def test_clear(self, model):
        storage = MemoryStorage()
        storage.save_model(model)
        storage.clear()

        assert storage.load_model() is None

    def test_invalid_payload(self):
        assert MemoryStorage("not json").load_model() is None


class TestBindStorage:
    """Tests for keeping a store and an adapter in sync."""

    def test_hydrates_from_storage(self, model):
        storage = MemoryStorage()
        storage.save_model(model)
        store = FlatC4Store()

        bind_storage(store, storage)

        assert store.model == model

    def test_empty_storage_keeps_store(self):
        store = FlatC4Store()
        bind_storage(store, MemoryStorage())

        assert store.model == FlatC4Model()
        assert store.version == 0

    def test_persists_every_mutation(self):
        storage = MemoryStorage()
        store = FlatC4Store()
        bind_storage(store, storage)

        store.add_system({"name": "Payments"})
        store.set_active_system(store.model.systems[0].id)

        assert storage.saves == 2
        assert storage.load_model() == store.model

    def test_unbind_stops_persistence(self):
        storage = MemoryStorage()
        store = FlatC4Store()
        unbind = bind_storage(store, storage)
        unbind()

        store.add_system({"name": "Payments"})

        assert storage.saves == 0
