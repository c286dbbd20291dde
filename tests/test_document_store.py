# tests/test_document_store.py

import json
import threading
from datetime import datetime
from pathlib import Path

import pytest
import pytz

from wavenote.database import (
    DocumentNotFoundError,
    DocumentStoreError,
    JsonDocumentStore,
    Timestamp,
    collection_path
)

TASKS = collection_path("users", "u1", "to-do-tasks")


@pytest.mark.asyncio
async def test_insert_assigns_ids_and_list_keeps_insertion_order(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)

    first = await store.insert(TASKS, {"title": "b"})
    second = await store.insert(TASKS, {"title": "a"})

    assert first != second
    assert len(first) == 20 and first.isalnum()
    assert await store.list(TASKS) == [(first, {"title": "b"}), (second, {"title": "a"})]
    assert (tmp_path / "users" / "u1" / "to-do-tasks.json").exists()


@pytest.mark.asyncio
async def test_datetimes_are_stored_as_timestamps(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    deadline = pytz.UTC.localize(datetime(2025, 7, 1, 9, 30, 15, 250000))

    doc_id = await store.insert(TASKS, {"deadline": deadline})

    raw = json.loads((tmp_path / "users" / "u1" / "to-do-tasks.json").read_text(encoding="utf-8"))
    assert raw[doc_id]["deadline"]["__type__"] == "timestamp"

    stored = (await store.get(TASKS, doc_id))["deadline"]
    assert isinstance(stored, Timestamp)
    assert stored.nanoseconds == 250_000_000
    assert stored.to_datetime() == deadline


@pytest.mark.asyncio
async def test_update_merges_fields(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    doc_id = await store.insert(TASKS, {"title": "old", "completed": True})

    await store.update(TASKS, doc_id, {"title": "new"})

    assert await store.get(TASKS, doc_id) == {"title": "new", "completed": True}


@pytest.mark.asyncio
async def test_update_of_missing_document_fails(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)

    with pytest.raises(DocumentNotFoundError):
        await store.update(TASKS, "missing", {"title": "x"})


@pytest.mark.asyncio
async def test_delete_is_permanent_and_tolerates_missing_documents(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    doc_id = await store.insert(TASKS, {"title": "x"})

    await store.delete(TASKS, doc_id)
    await store.delete(TASKS, doc_id)

    assert await store.get(TASKS, doc_id) is None
    assert await store.list(TASKS) == []


@pytest.mark.asyncio
async def test_collections_are_isolated(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    await store.insert(TASKS, {"title": "mine"})

    assert await store.list(collection_path("users", "u2", "to-do-tasks")) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["users/u1", "users/../etc", "users//to-do-tasks", ""])
async def test_invalid_collection_paths_are_refused(tmp_path: Path, path: str) -> None:
    store = JsonDocumentStore(tmp_path)

    with pytest.raises(DocumentStoreError):
        await store.list(path)


@pytest.mark.asyncio
async def test_corrupted_collection_file_raises(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    (tmp_path / "accounts.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(DocumentStoreError):
        await store.list("accounts")


def test_timestamp_before_epoch() -> None:
    moment = pytz.UTC.localize(datetime(1969, 12, 31, 23, 59, 59, 500000))
    ts = Timestamp.from_datetime(moment)

    assert ts == Timestamp(seconds=-1, nanoseconds=500_000_000)
    assert ts.to_datetime() == moment


@pytest.mark.asyncio
async def test_file_work_runs_outside_the_event_loop_thread(tmp_path: Path,
                                                            monkeypatch: pytest.MonkeyPatch) -> None:
    store = JsonDocumentStore(tmp_path)
    threads = []
    load_json = store._load_json

    def recording_load(file_path: Path):
        threads.append(threading.current_thread())
        return load_json(file_path)

    monkeypatch.setattr(store, "_load_json", recording_load)

    doc_id = await store.insert(TASKS, {"title": "x"})
    await store.update(TASKS, doc_id, {"title": "y"})
    await store.list(TASKS)
    await store.get(TASKS, doc_id)
    await store.delete(TASKS, doc_id)

    assert len(threads) == 5
    assert threading.main_thread() not in threads
