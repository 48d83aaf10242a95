import pytest

from app.store import PROJECTS, VOLUNTEERS, DocumentNotFound, Write


def test_create_stamps_timestamps(store):
    doc_id = store.create(PROJECTS, {"name": "Tree Planting"})

    doc = store.get(PROJECTS, doc_id)
    assert doc["id"] == doc_id
    assert doc["name"] == "Tree Planting"
    assert doc["createdAt"] is not None
    assert doc["updatedAt"] == doc["createdAt"]


def test_create_with_explicit_id(store):
    store.create(VOLUNTEERS, {"name": "Juan"}, doc_id="juan-id")
    assert store.get(VOLUNTEERS, "juan-id")["name"] == "Juan"


def test_get_missing_returns_none(store):
    assert store.get(PROJECTS, "nope") is None


def test_set_merge_keeps_other_fields(store):
    store.set(VOLUNTEERS, "v1", {"name": "Ana", "chapter": "Cebu"})
    store.set(VOLUNTEERS, "v1", {"name": "Ana Cruz"})

    doc = store.get(VOLUNTEERS, "v1")
    assert doc["name"] == "Ana Cruz"
    assert doc["chapter"] == "Cebu"


def test_set_without_merge_replaces(store):
    store.set(VOLUNTEERS, "v1", {"name": "Ana", "chapter": "Cebu"})
    store.set(VOLUNTEERS, "v1", {"name": "Ana"}, merge=False)

    assert "chapter" not in store.get(VOLUNTEERS, "v1")


def test_update_bumps_updated_at(store):
    doc_id = store.create(PROJECTS, {"name": "A", "status": "open"})
    before = store.get(PROJECTS, doc_id)

    store.update(PROJECTS, doc_id, {"status": "closed"})

    after = store.get(PROJECTS, doc_id)
    assert after["status"] == "closed"
    assert after["name"] == "A"
    assert after["createdAt"] == before["createdAt"]
    assert after["updatedAt"] >= before["updatedAt"]


def test_update_missing_raises(store):
    with pytest.raises(DocumentNotFound):
        store.update(PROJECTS, "ghost", {"status": "closed"})


def test_list_returns_collection_only(store):
    store.create(PROJECTS, {"name": "A"})
    store.create(PROJECTS, {"name": "B"})
    store.create(VOLUNTEERS, {"name": "C"})

    names = {d["name"] for d in store.list(PROJECTS)}
    assert names == {"A", "B"}


def test_apply_is_all_or_nothing(store):
    p = store.create(PROJECTS, {"applicants": []})
    store.create(VOLUNTEERS, {"appliedProjects": []}, doc_id="v1")

    with pytest.raises(DocumentNotFound):
        store.apply([
            Write(VOLUNTEERS, "v1", {"appliedProjects": [p]}),
            Write(PROJECTS, "missing", {"applicants": ["v1"]}),
        ])

    assert store.get(VOLUNTEERS, "v1")["appliedProjects"] == []


def test_transaction_rolls_back_on_error(store):
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.create(PROJECTS, {"name": "half-written"})
            raise RuntimeError("boom")

    assert store.list(PROJECTS) == []


class TestSubscribe:
    def test_receives_initial_snapshot(self, store):
        store.create(PROJECTS, {"name": "A"})
        received = []

        store.subscribe(PROJECTS, received.append)

        assert len(received) == 1
        assert [d["name"] for d in received[0]] == ["A"]

    def test_receives_snapshot_after_write(self, store):
        received = []
        store.subscribe(PROJECTS, received.append)

        store.create(PROJECTS, {"name": "A"})

        assert len(received) == 2
        assert [d["name"] for d in received[-1]] == ["A"]

    def test_other_collection_not_notified(self, store):
        received = []
        store.subscribe(PROJECTS, received.append)

        store.create(VOLUNTEERS, {"name": "V"})

        assert len(received) == 1

    def test_one_notification_per_transaction(self, store):
        received = []
        store.subscribe(PROJECTS, received.append)

        with store.transaction():
            store.create(PROJECTS, {"name": "A"})
            store.create(PROJECTS, {"name": "B"})

        assert len(received) == 2
        assert len(received[-1]) == 2

    def test_no_notification_after_rollback(self, store):
        received = []
        store.subscribe(PROJECTS, received.append)

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.create(PROJECTS, {"name": "A"})
                raise RuntimeError("boom")

        assert len(received) == 1

    def test_unsubscribe_stops_delivery(self, store):
        received = []
        unsubscribe = store.subscribe(PROJECTS, received.append)

        unsubscribe()
        store.create(PROJECTS, {"name": "A"})

        assert len(received) == 1

    def test_failing_subscriber_does_not_block_write(self, store):
        def broken(snapshot):
            if snapshot:
                raise ValueError("render failed")

        store.subscribe(PROJECTS, broken)
        doc_id = store.create(PROJECTS, {"name": "A"})

        assert store.get(PROJECTS, doc_id) is not None
