# contentledger/registry/permissions.py
"""
Explicit read grants keyed by (content id, principal).

A missing entry means "not granted". Owners are not tracked here beyond
the self-grant written at registration; ownership is read from the
content record itself.
"""

import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

GrantKey = Tuple[int, str]


class PermissionStore:
    """Keyed table of explicit viewer grants."""

    def __init__(self):
        self._grants: Dict[GrantKey, bool] = {}

    def grant_read(self, content_id: int, principal: str) -> None:
        """Mark principal as an explicit reader. Idempotent."""
        self._grants[(content_id, principal)] = True
        logger.debug(f"Granted read on {content_id} to {principal}")

    def has_explicit_grant(self, content_id: int, principal: str) -> bool:
        return self._grants.get((content_id, principal), False)

    def revoke(self, content_id: int, principal: str) -> None:
        # Rollback only; callers have no way to revoke a grant.
        self._grants.pop((content_id, principal), None)

    def list(self) -> List[GrantKey]:
        """All keys currently granted, sorted."""
        return sorted(key for key, granted in self._grants.items() if granted)

    def __len__(self) -> int:
        return len(self._grants)
