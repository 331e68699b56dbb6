"""Unit tests for the in-memory store."""

import threading

import pytest
from docgen.core.errors import PersistenceFailed
from docgen.storage import InMemoryStore, DOCUMENTS, PROFILES, WIREFRAMES_HTML


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    @pytest.fixture
    def store(self):
        return InMemoryStore()

    def test_insert_assigns_id(self, store):
        record = store.insert(DOCUMENTS, {"project_id": "p1", "type": "user_stories"})
        assert record["id"]
        assert store.get(DOCUMENTS, record["id"])["project_id"] == "p1"

    def test_records_are_copies(self, store):
        record = store.insert(DOCUMENTS, {"id": "d1", "content": "a"})
        record["content"] = "changed"
        assert store.get(DOCUMENTS, "d1")["content"] == "a"

    def test_get_missing(self, store):
        assert store.get(DOCUMENTS, "nope") is None

    def test_find_one(self, store):
        store.insert(DOCUMENTS, {"project_id": "p1", "type": "user_flows"})
        assert store.find_one(DOCUMENTS, project_id="p1", type="user_flows") is not None
        assert store.find_one(DOCUMENTS, project_id="p2") is None

    def test_list_ordering(self, store):
        for at in ["2024-01-02", "2024-01-03", "2024-01-01"]:
            store.insert(DOCUMENTS, {"project_id": "p1", "generated_at": at})
        ascending = [r["generated_at"] for r in store.list(DOCUMENTS, order_by="generated_at")]
        descending = [r["generated_at"] for r in store.list(DOCUMENTS, order_by="-generated_at")]
        assert ascending == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert descending == list(reversed(ascending))

    def test_update(self, store):
        store.insert(PROFILES, {"id": "u1", "plan": "free"})
        assert store.update(PROFILES, "u1", {"plan": "pro"})["plan"] == "pro"

    def test_update_missing(self, store):
        with pytest.raises(PersistenceFailed):
            store.update(PROFILES, "ghost", {"plan": "pro"})

    def test_delete(self, store):
        store.insert(DOCUMENTS, {"project_id": "p1"})
        store.insert(DOCUMENTS, {"project_id": "p2"})
        assert store.delete(DOCUMENTS, project_id="p1") == 1
        assert len(store.list(DOCUMENTS)) == 1

    def test_replace_supersedes(self, store):
        key = ("project_id", "type")
        store.replace(DOCUMENTS, {"project_id": "p1", "type": "user_stories", "content": "v1"}, key)
        store.replace(DOCUMENTS, {"project_id": "p1", "type": "user_flows", "content": "flows"}, key)
        store.replace(DOCUMENTS, {"project_id": "p1", "type": "user_stories", "content": "v2"}, key)

        stories = store.list(DOCUMENTS, project_id="p1", type="user_stories")
        assert [r["content"] for r in stories] == ["v2"]
        assert len(store.list(DOCUMENTS, project_id="p1")) == 2

    def test_upsert(self, store):
        key = ("project_id", "screen_index")
        first = store.upsert(WIREFRAMES_HTML, {"project_id": "p1", "screen_index": 2, "html_content": "a"}, key)
        second = store.upsert(WIREFRAMES_HTML, {"project_id": "p1", "screen_index": 2, "html_content": "b"}, key)
        assert first["id"] == second["id"]
        rows = store.list(WIREFRAMES_HTML, project_id="p1", screen_index=2)
        assert len(rows) == 1
        assert rows[0]["html_content"] == "b"

    def test_fail_writes(self, store):
        store.fail_writes(DOCUMENTS)
        with pytest.raises(PersistenceFailed):
            store.insert(DOCUMENTS, {"project_id": "p1"})
        store.fail_writes(DOCUMENTS, failing=False)
        store.insert(DOCUMENTS, {"project_id": "p1"})


class TestDebitCredit:
    """Tests for the atomic credit debit and refund."""

    @pytest.fixture
    def store(self):
        store = InMemoryStore()
        store.insert(PROFILES, {"id": "u1", "credits_remaining": 2})
        store.insert(PROFILES, {"id": "vip", "credits_remaining": -1})
        return store

    def test_decrements(self, store):
        assert store.debit_credit("u1") == 1
        assert store.debit_credit("u1") == 0
        assert store.debit_credit("u1") is None
        assert store.get(PROFILES, "u1")["credits_remaining"] == 0

    def test_unlimited(self, store):
        for _ in range(5):
            assert store.debit_credit("vip") == -1
        assert store.get(PROFILES, "vip")["credits_remaining"] == -1

    def test_missing_profile(self, store):
        assert store.debit_credit("ghost") is None

    def test_refund(self, store):
        store.debit_credit("u1")
        assert store.refund_credit("u1") == 2
        assert store.refund_credit("vip") == -1
        assert store.refund_credit("ghost") is None
        assert store.get(PROFILES, "u1")["credits_remaining"] == 2

    def test_concurrent_debits_never_go_negative(self):
        store = InMemoryStore()
        store.insert(PROFILES, {"id": "u1", "credits_remaining": 10})
        results = []

        def debit():
            results.append(store.debit_credit("u1"))

        threads = [threading.Thread(target=debit) for _ in range(25)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.get(PROFILES, "u1")["credits_remaining"] == 0
        assert len([r for r in results if r is not None]) == 10
