# contentledger/registry/content.py
"""
Content records and the keyed table that holds them.

Only metadata is stored: title, size, summary, labels, owner and the
height the record was registered at. The content bytes live elsewhere.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Tuple

from ..errors import DuplicateId, NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentRecord:
    """
    Metadata for one registered content item.

    Attributes:
        id: Ledger-assigned identifier, never reused
        title: Short title (1-64 chars)
        owner: Principal currently owning the item
        size_bytes: Declared size of the content
        registered_at: Sequence height at registration
        summary: Short description (1-128 chars)
        labels: Ordered labels (1-10 entries, 1-32 chars each)
    """
    id: int
    title: str
    owner: str
    size_bytes: int
    registered_at: int
    summary: str
    labels: Tuple[str, ...] = field(default_factory=tuple)

    def with_owner(self, owner: str) -> "ContentRecord":
        return replace(self, owner=owner)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "owner": self.owner,
            "size_bytes": self.size_bytes,
            "registered_at": self.registered_at,
            "summary": self.summary,
            "labels": list(self.labels),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentRecord":
        return cls(
            id=data["id"],
            title=data["title"],
            owner=data["owner"],
            size_bytes=data["size_bytes"],
            registered_at=data["registered_at"],
            summary=data["summary"],
            labels=tuple(data.get("labels", [])),
        )


class ContentStore:
    """Keyed table of content records."""

    def __init__(self):
        self._records: Dict[int, ContentRecord] = {}

    def exists(self, content_id: int) -> bool:
        return content_id in self._records

    def get(self, content_id: int) -> ContentRecord:
        """Get a record by id, raising NotFound if absent."""
        record = self._records.get(content_id)
        if record is None:
            raise NotFound(f"Content {content_id} not found")
        return record

    def insert(self, content_id: int, record: ContentRecord) -> None:
        if content_id in self._records:
            raise DuplicateId(f"Content {content_id} already exists")
        self._records[content_id] = record
        logger.debug(f"Inserted content {content_id}")

    def set_owner(self, content_id: int, new_owner: str) -> ContentRecord:
        """Replace the owner field only; returns the previous record."""
        previous = self.get(content_id)
        self._records[content_id] = previous.with_owner(new_owner)
        logger.debug(f"Content {content_id} owner set to {new_owner}")
        return previous

    def remove(self, content_id: int) -> ContentRecord:
        """Permanently erase a record; returns what was removed."""
        record = self.get(content_id)
        del self._records[content_id]
        logger.debug(f"Removed content {content_id}")
        return record

    def restore(self, record: ContentRecord) -> None:
        """Put back a record exactly as it was, used to undo a failed commit."""
        self._records[record.id] = record

    def discard(self, content_id: int) -> None:
        self._records.pop(content_id, None)

    def list(self) -> List[ContentRecord]:
        return [self._records[k] for k in sorted(self._records)]

    def __contains__(self, content_id: int) -> bool:
        return content_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ContentRecord]:
        return iter(self.list())
