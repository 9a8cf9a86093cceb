"""Repositories for live items and archive records."""

from .archive_store import ArchiveStore
from .item_store import ITEM_MODELS, ItemStore, ItemStoreAdapter, resolve_item_type

__all__ = [
    "ArchiveStore",
    "ITEM_MODELS",
    "ItemStore",
    "ItemStoreAdapter",
    "resolve_item_type",
]
