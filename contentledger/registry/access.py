# contentledger/registry/access.py
"""Effective read access: explicit grant OR ownership."""

from .content import ContentRecord
from .permissions import PermissionStore


class AccessController:
    """
    Evaluates read access for a principal on a content record.

    Pure with respect to the stores it reads; never mutates anything.
    """

    def __init__(self, permissions: PermissionStore):
        self.permissions = permissions

    def has_explicit_grant(self, record: ContentRecord, principal: str) -> bool:
        return self.permissions.has_explicit_grant(record.id, principal)

    def is_owner(self, record: ContentRecord, principal: str) -> bool:
        return record.owner == principal

    def can_read(self, record: ContentRecord, principal: str) -> bool:
        return self.has_explicit_grant(record, principal) or self.is_owner(record, principal)
