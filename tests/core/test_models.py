"""
Tests for operant.core.models.

Tests cover:
- Record attribute bag and equality
- MemoryStore find_or_new / put isolation
- Protocol conformance
"""

import threading

import pytest

from operant.core.errors import RecordNotFoundError
from operant.core.models import Record
from operant.core.protocols import BackingModel, ModelProvider
from operant.framework.contracts import Contract, Property, Schema


class TestRecord:
    def test_attributes(self):
        record = Record(title="Hi", body="hello")
        assert record.title == "Hi"
        assert record.id is None
        assert record.id is None
        assert record.to_dict() == {"id": None, "title": "Hi", "body": "hello"}

    def test_save_without_store_is_noop(self):
        record = Record(body="hello")
        assert record.save() is True
        assert record.id is None

    def test_equality_by_values(self):
        assert Record(body="a") == Record(body="a")
        assert Record(body="a") != Record(body="b")

    def test_repr(self):
        assert repr(Record(body="a")) == "Record(id=None, body='a')"

    def test_satisfies_backing_model(self):
        assert isinstance(Record(), BackingModel)

    @pytest.mark.parametrize("name", ["save", "to_dict", "_store"])
    def test_reserved_names_rejected(self, name):
        with pytest.raises(AttributeError, match="reserved"):
            setattr(Record(), name, "x")

    def test_internal_names_free_for_attributes(self):
        record = Record(store="shelf", errors=["late"], persisted="yes")
        assert record.to_dict() == {"id": None, "store": "shelf", "errors": ["late"], "persisted": "yes"}



class TestMemoryStore:
    def test_find_or_new_without_identifier_is_new(self, store):
        record = store.find_or_new()
        assert isinstance(record, Record)
        assert record.id is None
        assert len(store) == 0

    def test_save_assigns_id(self, store):
        record = store.find_or_new()
        record.body = "hello"
        record.save()
        assert record.id == 1
        assert len(store) == 1

    def test_found_record_is_fresh_copy(self, store):
        record = store.find_or_new()
        record.tags = ["a"]
        record.save()

        first = store.find_or_new(record.id)
        second = store.find_or_new(record.id)
        assert first == second == record
        assert first is not second
        first.tags.append("b")
        assert store.find_or_new(record.id).tags == ["a"]

    def test_unsaved_mutation_does_not_leak(self, store):
        record = store.find_or_new()
        record.body = "v1"
        record.save()
        record.body = "v2"
        assert store.find_or_new(record.id).body == "v1"

    def test_unknown_identifier_raises(self, store):
        with pytest.raises(RecordNotFoundError) as exc_info:
            store.find_or_new(99)
        assert exc_info.value.identifier == 99
        assert exc_info.value.context.metadata["store"] == "test"

    def test_all(self, store):
        for body in ("a", "b"):
            record = store.find_or_new()
            record.body = body
            record.save()
        assert sorted(r.body for r in store.all()) == ["a", "b"]

    def test_concurrent_saves_get_unique_ids(self, store):
        def save_many():
            for _ in range(50):
                store.find_or_new().save()

        threads = [threading.Thread(target=save_many) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store) == 200

    def test_satisfies_model_provider(self, store):
        assert isinstance(store, ModelProvider)

    def test_attribute_named_store_round_trips(self, store):
        class ShelfContract(Contract):
            schema = Schema([Property("store", str), Property("errors", list), Property("persisted", bool)])

        record = store.find_or_new()
        contract = ShelfContract(record)
        assert contract.validate({"store": "north", "errors": ["torn"], "persisted": "yes"})
        contract.save()

        found = store.find_or_new(record.id)
        assert found.store == "north"
        assert found.errors == ["torn"]
        assert found.persisted is True
        assert found == record

