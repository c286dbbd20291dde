# database/__init__.py

from .document_store import (
    DocumentNotFoundError,
    DocumentStoreError,
    JsonDocumentStore,
    collection_path
)
from .timestamp import Timestamp

__all__ = [
    'DocumentNotFoundError',
    'DocumentStoreError',
    'JsonDocumentStore',
    'Timestamp',
    'collection_path'
]
