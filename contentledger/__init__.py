# contentledger - Permissioned content-registration ledger
#
# Records immutable metadata about content items, tracks a single owner
# per item and enforces per-item, per-principal read permissions.
#
# Core concepts:
# - ContentRecord: metadata for one registered item
# - Principal: an opaque, already-authenticated identity string
# - Explicit grant: a stored read permission for (content id, principal)
# - Effective access: owner OR explicit grant
# - RegistryService: the only way to change ledger state

from .config import LedgerConfig
from .errors import (
    LedgerError,
    NotFound,
    DuplicateId,
    InvalidInput,
    StorageOverflow,
    DataFormatInvalid,
    Unauthorized,
    AccessDenied,
    ConfigError,
    StateError,
)
from .identity import Identity
from .journal import Journal, JournalEntry
from .registry import (
    AccessController,
    ContentRecord,
    ContentStore,
    LedgerHeight,
    PermissionStore,
    SequenceAllocator,
)
from .service import AccessStatus, RegistryService, RegistryStats
from .signatures import sign_entry, verify_entry, verify_entry_signer

__all__ = [
    # Service
    "RegistryService",
    "AccessStatus",
    "RegistryStats",
    "LedgerConfig",
    # Registry
    "ContentRecord",
    "ContentStore",
    "PermissionStore",
    "AccessController",
    "SequenceAllocator",
    "LedgerHeight",
    # Journal and receipts
    "Journal",
    "JournalEntry",
    "Identity",
    "sign_entry",
    "verify_entry",
    "verify_entry_signer",
    # Errors
    "LedgerError",
    "NotFound",
    "DuplicateId",
    "InvalidInput",
    "StorageOverflow",
    "DataFormatInvalid",
    "Unauthorized",
    "AccessDenied",
    "ConfigError",
    "StateError",
]

__version__ = "0.1.0"
