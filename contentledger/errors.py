# contentledger/errors.py
"""
Typed failures raised by the ledger.

Every business failure carries a stable ``code`` and the numeric ``status``
used by the on-chain contract the ledger mirrors, so a transport layer can
surface them verbatim.
"""


class LedgerError(Exception):
    """Base class for all ledger failures."""

    code = "ledger-error"
    status = 100

    def __init__(self, message: str = None):
        super().__init__(message or self.code)

    def to_dict(self):
        return {"code": self.code, "status": self.status, "message": str(self)}


class NotFound(LedgerError):
    """Referenced content id has no record."""
    code = "not-found"
    status = 101


class DuplicateId(LedgerError):
    """Insert attempted on an id that already holds a record."""
    code = "duplicate-id"
    status = 102


class InvalidInput(LedgerError):
    """Title or summary length out of bounds."""
    code = "invalid-input"
    status = 103


class StorageOverflow(LedgerError):
    """Size field out of bounds."""
    code = "storage-overflow"
    status = 104


class DataFormatInvalid(LedgerError):
    """Label collection violates count or length rules."""
    code = "data-format-invalid"
    status = 105


class Unauthorized(LedgerError):
    """Caller is not the content owner for a mutating operation."""
    code = "unauthorized"
    status = 106


class AccessDenied(LedgerError):
    """Caller lacks both explicit grant and ownership on a read."""
    code = "access-denied"
    status = 107


class ConfigError(LedgerError):
    """Ledger configuration is missing or malformed."""
    code = "config-error"
    status = 110


class StateError(LedgerError):
    """Persisted ledger state could not be read."""
    code = "state-error"
    status = 111
