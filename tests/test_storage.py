"""Tests for the in-memory document store."""

from concurrent.futures import ThreadPoolExecutor

from banknoti.storage import InMemoryStore


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    def test_create_and_get(self, store: InMemoryStore) -> None:
        """Test that created documents can be read back."""
        doc_id = store.create("items", {"name": "a"})

        assert doc_id
        assert store.get("items", doc_id) == {"name": "a"}

    def test_create_with_existing_id(self, store: InMemoryStore) -> None:
        """Test that an existing id is not overwritten."""
        assert store.create("items", {"n": 1}, doc_id="x") == "x"
        assert store.create("items", {"n": 2}, doc_id="x") is None
        assert store.get("items", "x") == {"n": 1}

    def test_create_if_absent(self, store: InMemoryStore) -> None:
        """Test the boolean helper."""
        assert store.create_if_absent("items", "x", {})
        assert not store.create_if_absent("items", "x", {})

    def test_get_missing(self, store: InMemoryStore) -> None:
        """Test that missing documents yield None."""
        assert store.get("items", "nope") is None

    def test_returned_documents_are_copies(self, store: InMemoryStore) -> None:
        """Test that callers cannot mutate stored state."""
        source = {"tags": ["a"]}
        store.create("items", source, doc_id="x")
        source["tags"].append("b")

        fetched = store.get("items", "x")
        assert fetched == {"tags": ["a"]}
        assert fetched is not None
        fetched["tags"].append("c")
        assert store.get("items", "x") == {"tags": ["a"]}

    def test_update_merges(self, store: InMemoryStore) -> None:
        """Test that update merges fields."""
        store.create("items", {"a": 1, "b": 2}, doc_id="x")

        assert store.update("items", "x", {"b": 3})
        assert store.get("items", "x") == {"a": 1, "b": 3}
        assert not store.update("items", "missing", {"b": 3})

    def test_delete(self, store: InMemoryStore) -> None:
        """Test that deleting twice is harmless."""
        store.create("items", {}, doc_id="x")

        assert store.delete("items", "x")
        assert not store.delete("items", "x")

    def test_query(self, store: InMemoryStore) -> None:
        """Test equality filters."""
        store.create("items", {"group": "g", "kind": "a"}, doc_id="1")
        store.create("items", {"group": "g", "kind": "b"}, doc_id="2")
        store.create("items", {"group": "h", "kind": "a"}, doc_id="3")

        assert {doc_id for doc_id, _ in store.query("items", group="g")} == {"1", "2"}
        assert [doc_id for doc_id, _ in store.query("items", group="g", kind="a")] == ["1"]
        assert store.query("empty") == []

    def test_increment(self, store: InMemoryStore) -> None:
        """Test increments with extra fields."""
        store.create("items", {"count": 1}, doc_id="x")

        data = store.increment("items", "x", "count", 2, extra={"last": "now"})

        assert data == {"count": 3, "last": "now"}
        assert store.increment("items", "missing", "count") is None

    def test_increment_non_numeric_starts_at_zero(self, store: InMemoryStore) -> None:
        """Test that a missing or invalid counter is treated as zero."""
        store.create("items", {"count": "many"}, doc_id="x")
        assert store.increment("items", "x", "count") == {"count": 1}

    def test_concurrent_increments(self, store: InMemoryStore) -> None:
        """Test that no increment is lost under contention."""
        store.create("items", {"count": 0}, doc_id="x")
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: store.increment("items", "x", "count"), range(200)))

        assert store.get("items", "x") == {"count": 200}

    def test_compare_and_update(self, store: InMemoryStore) -> None:
        """Test that only a matching precondition applies the update."""
        store.create("items", {"done": False}, doc_id="x")

        assert store.compare_and_update("items", "x", {"done": False}, {"done": True})
        assert not store.compare_and_update("items", "x", {"done": False}, {"done": True})
        assert not store.compare_and_update("items", "missing", {}, {"done": True})
        assert store.get("items", "x") == {"done": True}
