# contentledger/journal.py
"""
Append-only journal of committed ledger operations.

Every successful register, transfer and delete leaves exactly one entry.
Rejected operations leave nothing. Entries are never edited or removed.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

REGISTER = "register"
TRANSFER = "transfer"
DELETE = "delete"


def _now() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


@dataclass
class JournalEntry:
    """
    One committed operation.

    Attributes:
        seq: Position in the journal, starting at 1
        operation: register, transfer or delete
        content_id: Content the operation touched
        actor: Principal that performed it
        height: Sequence height the operation was committed at
        details: Operation-specific data (e.g. new owner)
        recorded_at: ISO timestamp
        signature: Receipt signature, when the ledger signs entries
    """
    seq: int
    operation: str
    content_id: int
    actor: str
    height: int
    details: Dict[str, Any] = field(default_factory=dict)
    recorded_at: str = field(default_factory=_now)
    signature: Optional[Dict[str, Any]] = None

    def payload(self) -> Dict[str, Any]:
        """The signed portion of the entry."""
        return {
            "seq": self.seq,
            "operation": self.operation,
            "content_id": self.content_id,
            "actor": self.actor,
            "height": self.height,
            "details": self.details,
            "recorded_at": self.recorded_at,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.payload()
        data["signature"] = self.signature
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JournalEntry":
        return cls(
            seq=data["seq"],
            operation=data["operation"],
            content_id=data["content_id"],
            actor=data["actor"],
            height=data["height"],
            details=data.get("details", {}),
            recorded_at=data.get("recorded_at", ""),
            signature=data.get("signature"),
        )


class Journal:
    """In-memory append-only log of JournalEntry objects."""

    def __init__(self, entries: List[JournalEntry] = None):
        self._entries: List[JournalEntry] = list(entries or [])

    def next_seq(self) -> int:
        return self._entries[-1].seq + 1 if self._entries else 1

    def append(self, entry: JournalEntry) -> None:
        if entry.seq != self.next_seq():
            raise ValueError(f"Journal out of order: expected {self.next_seq()}, got {entry.seq}")
        self._entries.append(entry)
        logger.debug(f"Journal {entry.seq}: {entry.operation} {entry.content_id} by {entry.actor}")

    def pop(self) -> JournalEntry:
        """Remove the newest entry; only used to undo a failed commit."""
        return self._entries.pop()

    def list(self) -> List[JournalEntry]:
        return list(self._entries)

    def find_by_content(self, content_id: int) -> List[JournalEntry]:
        return [e for e in self._entries if e.content_id == content_id]

    def find_by_actor(self, actor: str) -> List[JournalEntry]:
        return [e for e in self._entries if e.actor == actor]

    def __len__(self) -> int:
        return len(self._entries)
