# database/document_store.py

import asyncio
import json
import logging
import os
import secrets
import string
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from wavenote.database.timestamp import Timestamp

logger = logging.getLogger(__name__)

AUTO_ID_ALPHABET = string.ascii_letters + string.digits
AUTO_ID_LENGTH = 20


class DocumentStoreError(Exception):
    """Base error of the document store"""


class DocumentNotFoundError(DocumentStoreError):
    def __init__(self, path: str, doc_id: str):
        super().__init__(f"No document to update: {path}/{doc_id}")
        self.path = path
        self.doc_id = doc_id


def collection_path(*segments: str) -> str:
    """Join path segments into a collection path, e.g. users/<uid>/to-do-tasks"""
    return "/".join(segments)


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return Timestamp.from_datetime(value).to_dict()
    if isinstance(value, Timestamp):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def _decode(value: Any) -> Any:
    if Timestamp.is_encoded(value):
        return Timestamp.from_dict(value)
    if isinstance(value, dict):
        return {k: _decode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode(v) for v in value]
    return value


class JsonDocumentStore:
    """
    Document store kept in JSON files under a data directory.

    Every collection lives in its own file: the collection path
    "users/<uid>/to-do-tasks" maps to "<data_dir>/users/<uid>/to-do-tasks.json",
    holding an object of document id -> fields. Documents keep insertion order.
    datetime values are written as store-native timestamps and come back as
    Timestamp objects.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self.total_operations = 0

    # ===== FILES =====

    def _collection_file(self, path: str) -> Path:
        segments = path.split("/")
        if len(segments) % 2 == 0:
            raise DocumentStoreError(f"Not a collection path: {path!r}")
        for segment in segments:
            if not segment or segment in (".", "..") or "\\" in segment:
                raise DocumentStoreError(f"Invalid path segment in {path!r}")
        *parents, name = segments
        return self.data_dir.joinpath(*parents, f"{name}.json")

    def _load_json(self, file_path: Path) -> Dict[str, Dict[str, Any]]:
        if not file_path.exists():
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DocumentStoreError(f"Corrupted collection file {file_path}: {e}") from e
        if not isinstance(data, dict):
            raise DocumentStoreError(f"Corrupted collection file {file_path}: expected an object")
        return data

    def _save_json(self, file_path: Path, data: Dict[str, Dict[str, Any]]) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = file_path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, file_path)

    def _new_id(self, existing: Dict[str, Any]) -> str:
        while True:
            doc_id = "".join(secrets.choice(AUTO_ID_ALPHABET) for _ in range(AUTO_ID_LENGTH))
            if doc_id not in existing:
                return doc_id

    # ===== SYNC OPERATIONS =====

    def _list_sync(self, file_path: Path) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            data = self._load_json(file_path)
            self.total_operations += 1
        return data

    def _insert_sync(self, file_path: Path, fields: Dict[str, Any]) -> str:
        with self._lock:
            data = self._load_json(file_path)
            doc_id = self._new_id(data)
            data[doc_id] = _encode(dict(fields))
            self._save_json(file_path, data)
            self.total_operations += 1
        return doc_id

    def _update_sync(self, file_path: Path, path: str, doc_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            data = self._load_json(file_path)
            if doc_id not in data:
                raise DocumentNotFoundError(path, doc_id)
            data[doc_id].update(_encode(dict(fields)))
            self._save_json(file_path, data)
            self.total_operations += 1

    def _delete_sync(self, file_path: Path, doc_id: str) -> None:
        with self._lock:
            data = self._load_json(file_path)
            if data.pop(doc_id, None) is not None:
                self._save_json(file_path, data)
            self.total_operations += 1

    # ===== DOCUMENTS =====
    # File work runs in the default executor

    async def list(self, path: str) -> List[Tuple[str, Dict[str, Any]]]:
        """All documents of a collection as (id, fields) pairs"""
        file_path = self._collection_file(path)
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, self._list_sync, file_path)
        return [(doc_id, _decode(fields)) for doc_id, fields in data.items()]

    async def get(self, path: str, doc_id: str) -> Optional[Dict[str, Any]]:
        file_path = self._collection_file(path)
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, self._list_sync, file_path)
        fields = data.get(doc_id)
        return _decode(fields) if fields is not None else None

    async def insert(self, path: str, fields: Dict[str, Any]) -> str:
        """Add a document under a fresh id and return the id"""
        file_path = self._collection_file(path)
        loop = asyncio.get_running_loop()
        doc_id = await loop.run_in_executor(None, self._insert_sync, file_path, fields)
        logger.debug(f"Document {path}/{doc_id} created")
        return doc_id

    async def update(self, path: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Merge fields into an existing document"""
        file_path = self._collection_file(path)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._update_sync, file_path, path, doc_id, fields)
        logger.debug(f"Document {path}/{doc_id} updated")

    async def delete(self, path: str, doc_id: str) -> None:
        """Remove a document; removing a missing document is not an error"""
        file_path = self._collection_file(path)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._delete_sync, file_path, doc_id)
        logger.debug(f"Document {path}/{doc_id} deleted")
