"""
Storage Services Package

Provides abstract interfaces to the external stores the parse flow reads
from and writes to, plus in-memory implementations.
"""

from moneybook.services.storage.interface import (
    AccountStore,
    AuditStorageInterface,
    CategorySource,
    NotFoundError,
    StorageError,
)
from moneybook.services.storage.memory import (
    InMemoryAccountStore,
    InMemoryAuditStorage,
    InMemoryCategorySource,
)

__all__ = [
    # Interfaces
    "AccountStore",
    "AuditStorageInterface",
    "CategorySource",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAccountStore",
    "InMemoryAuditStorage",
    "InMemoryCategorySource",
]
