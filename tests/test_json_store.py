"""
JSON file store tests.
"""

import json
import os
import stat
import threading

import pytest

from solidsteel.core.json_store import JSONStore, StoreError


@pytest.fixture
def store(tmp_data_dir):
    return JSONStore(os.path.join(tmp_data_dir, "records.json"))


def test_missing_file_reads_empty(store):
    assert store.read_entities() == []


def test_write_then_read_preserves_order(store):
    records = [{"id": "2", "title": "B"}, {"id": "1", "title": "A"}]
    store.write_entities(records)

    assert store.read_entities() == records


def test_write_creates_parent_directory(tmp_data_dir):
    store = JSONStore(os.path.join(tmp_data_dir, "nested", "dir", "records.json"))
    store.write_entities([{"id": "1"}])

    assert os.path.exists(store.path)


def test_invalid_json_raises(store):
    with open(store.path, "w") as f:
        f.write("{not json")

    with pytest.raises(StoreError):
        store.read_entities()


def test_non_list_top_level_raises(store):
    with open(store.path, "w") as f:
        json.dump({"id": "1"}, f)

    with pytest.raises(StoreError):
        store.read_entities()


def test_write_leaves_no_temp_files(store, tmp_data_dir):
    store.write_entities([{"id": "1"}])
    store.write_entities([{"id": "2"}])

    leftovers = [name for name in os.listdir(tmp_data_dir) if name.endswith(".tmp")]
    assert leftovers == []


def test_unserialisable_record_keeps_old_file(store):
    store.write_entities([{"id": "1"}])

    with pytest.raises(StoreError):
        store.write_entities([{"id": object()}])

    assert store.read_entities() == [{"id": "1"}]


def test_transaction_writes_on_success(store):
    with store.transaction() as records:
        records.append({"id": "1"})

    assert store.read_entities() == [{"id": "1"}]


def test_transaction_discards_on_error(store):
    store.write_entities([{"id": "1"}])

    with pytest.raises(RuntimeError):
        with store.transaction() as records:
            records.append({"id": "2"})
            raise RuntimeError("abort")

    assert store.read_entities() == [{"id": "1"}]


def test_transaction_on_corrupt_file_raises(store):
    with open(store.path, "w") as f:
        f.write("[")

    with pytest.raises(StoreError):
        with store.transaction():
            pass

    with open(store.path) as f:
        assert f.read() == "["


def test_non_object_records_raise(store):
    with open(store.path, "w") as f:
        json.dump([{"id": "1"}, "oops"], f)

    with pytest.raises(StoreError):
        store.read_entities()


def test_non_object_records_return_500(app, admin_client, client):
    with open(app.config["PROJECTS_JSON"], "w") as f:
        json.dump(["oops"], f)

    response = admin_client.get("/api/admin/projects/1")
    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to fetch project"}
    assert client.get("/api/projects").status_code == 500


def test_write_preserves_file_mode(store):
    store.write_entities([{"id": "1"}])
    os.chmod(store.path, 0o640)

    store.write_entities([{"id": "2"}])

    assert stat.S_IMODE(os.stat(store.path).st_mode) == 0o640


def test_new_file_is_world_readable(store):
    store.write_entities([{"id": "1"}])
    assert stat.S_IMODE(os.stat(store.path).st_mode) == 0o644


def test_concurrent_transactions_keep_every_record(store):
    count = 20
    barrier = threading.Barrier(count)
    errors = []

    def append(n):
        try:
            barrier.wait()
            with store.transaction() as records:
                records.append({"id": str(n)})
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=append, args=(n,)) for n in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(int(r["id"]) for r in store.read_entities()) == list(range(count))


def test_concurrent_admin_creates(app):
    count = 10
    statuses = []

    def create(n):
        with app.test_client() as c:
            with c.session_transaction() as sess:
                sess["is_logged_in"] = True
            statuses.append(c.post("/api/admin/projects", json={"title": f"Project {n}"}).status_code)

    threads = [threading.Thread(target=create, args=(n,)) for n in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert statuses == [201] * count
    with open(app.config["PROJECTS_JSON"]) as f:
        stored = json.load(f)
    assert len(stored) == count
    assert len({p["id"] for p in stored}) == count
