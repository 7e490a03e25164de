"""Store layer - provides persistence for the application.

This module re-exports the persistence port, its adapters and the
typed workspace helpers for easy importing.
"""

from ledgerdesk.store.blobs import BlobStore, MemoryBlobStore, SqliteBlobStore, open_store
from ledgerdesk.store.schema import database_exists, get_db_path, init_database
from ledgerdesk.store.workspace import (
    load_book,
    load_clipboard,
    load_ledger_cursor,
    load_members,
    load_notes,
    load_schedules,
    load_title,
    load_undo,
    save_book,
    save_clipboard,
    save_ledger_cursor,
    save_members,
    save_notes,
    save_schedules,
    save_title,
    save_undo,
)

__all__ = [
    # Port and adapters
    "BlobStore",
    "MemoryBlobStore",
    "SqliteBlobStore",
    "open_store",
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Workspace
    "load_book",
    "load_clipboard",
    "load_ledger_cursor",
    "load_members",
    "load_notes",
    "load_schedules",
    "load_title",
    "load_undo",
    "save_book",
    "save_clipboard",
    "save_ledger_cursor",
    "save_members",
    "save_notes",
    "save_schedules",
    "save_title",
    "save_undo",
]
