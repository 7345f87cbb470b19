# contentledger/registry/__init__.py
"""
Ledger registry primitives.

The stores here hold state but enforce no authorization; every mutation
goes through RegistryService, which owns the lock and the rules.

Example:
    store = ContentStore()
    permissions = PermissionStore()
    access = AccessController(permissions)

    store.insert(1, record)
    permissions.grant_read(1, record.owner)
    access.can_read(store.get(1), "alice")
"""

from .access import AccessController
from .content import ContentRecord, ContentStore
from .permissions import PermissionStore
from .sequence import LedgerHeight, SequenceAllocator

__all__ = [
    "AccessController",
    "ContentRecord",
    "ContentStore",
    "PermissionStore",
    "LedgerHeight",
    "SequenceAllocator",
]
