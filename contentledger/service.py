# contentledger/service.py
"""
The public operation surface of the ledger.

RegistryService owns the sequence, the content and permission stores and
the journal, and guards them with one lock. Each operation either applies
all of its changes or none of them.

Operations:
    register          - record new content, owner self-grant, advance sequence
    transfer          - hand ownership to another principal (owner only)
    delete            - erase a record permanently (owner only)
    get_content       - full record, for owners and explicit readers
    get_owner         - public owner lookup
    get_access_status - public view of a principal's rights on an item
    get_stats         - total registered and the administrator
"""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .config import LedgerConfig
from .errors import (
    AccessDenied,
    DataFormatInvalid,
    DuplicateId,
    InvalidInput,
    StateError,
    StorageOverflow,
    Unauthorized,
)
from .identity import Identity
from .journal import DELETE, REGISTER, TRANSFER, Journal, JournalEntry
from .registry import (
    AccessController,
    ContentRecord,
    ContentStore,
    LedgerHeight,
    PermissionStore,
    SequenceAllocator,
)
from .signatures import sign_entry, verify_entry

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 64
MAX_SUMMARY_LENGTH = 128
MAX_SIZE_BYTES = 1_000_000_000  # exclusive
MAX_LABELS = 10
MAX_LABEL_LENGTH = 32

SNAPSHOT_VERSION = "1.0"


@dataclass(frozen=True)
class AccessStatus:
    """A principal's rights on one content item."""
    has_explicit_grant: bool
    is_owner: bool
    has_effective_access: bool

    def to_dict(self) -> Dict[str, bool]:
        return {
            "has_explicit_grant": self.has_explicit_grant,
            "is_owner": self.is_owner,
            "has_effective_access": self.has_effective_access,
        }


@dataclass(frozen=True)
class RegistryStats:
    """Ledger-wide counters."""
    total_registered: int
    administrator: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_registered": self.total_registered,
            "administrator": self.administrator,
        }


def _bounded_text(value: Any, max_length: int) -> bool:
    return isinstance(value, str) and 0 < len(value) <= max_length


def validate_registration(
    title: str,
    size_bytes: int,
    summary: str,
    labels: Sequence[str],
) -> tuple:
    """
    Check registration inputs in order; the first failure wins.

    Returns:
        The labels as a tuple

    Raises:
        InvalidInput: title or summary length out of bounds
        StorageOverflow: size not in (0, 1_000_000_000)
        DataFormatInvalid: label count or a label length out of bounds
    """
    if not _bounded_text(title, MAX_TITLE_LENGTH):
        raise InvalidInput(f"Title must be 1-{MAX_TITLE_LENGTH} characters")

    if (
        not isinstance(size_bytes, int)
        or isinstance(size_bytes, bool)
        or not 0 < size_bytes < MAX_SIZE_BYTES
    ):
        raise StorageOverflow(f"Size must be between 1 and {MAX_SIZE_BYTES - 1} bytes")

    if not _bounded_text(summary, MAX_SUMMARY_LENGTH):
        raise InvalidInput(f"Summary must be 1-{MAX_SUMMARY_LENGTH} characters")

    # A bare string is a sequence too, but not a label collection
    if isinstance(labels, (str, bytes)) or not isinstance(labels, (list, tuple)):
        raise DataFormatInvalid("Labels must be a list of strings")
    if not 1 <= len(labels) <= MAX_LABELS:
        raise DataFormatInvalid(f"Expected 1-{MAX_LABELS} labels, got {len(labels)}")
    for label in labels:
        if not _bounded_text(label, MAX_LABEL_LENGTH):
            raise DataFormatInvalid(f"Labels must be 1-{MAX_LABEL_LENGTH} characters: {label!r}")

    return tuple(labels)


class RegistryService:
    """
    Permissioned content registry.

    Usage:
        ledger = RegistryService(administrator="admin")
        content_id = ledger.register("Report", 100, "Q1 report", ["finance"], caller="alice")
        ledger.get_content(content_id, caller="alice")

    With state_dir set, the full ledger state is written to
    state_dir/ledger.json after every committed operation and read back
    on construction.
    """

    def __init__(
        self,
        administrator: str,
        state_dir: Optional[Path | str] = None,
        height_source: Optional[Callable[[], int]] = None,
        permissions: Optional[PermissionStore] = None,
        signer: Optional[Identity] = None,
    ):
        """
        Args:
            administrator: Principal reported by get_stats
            state_dir: Directory for the JSON snapshot (None keeps state in memory)
            height_source: Supplies the sequence height recorded as registered_at;
                defaults to a LedgerHeight advanced on every committed mutation
            permissions: Grant table shared with an external collaborator that
                inserts grants directly
            signer: Identity used to sign journal entries (None disables receipts)
        """
        self.administrator = administrator
        self.state_dir = Path(state_dir) if state_dir else None
        self.signer = signer

        self._lock = threading.RLock()
        self._sequence = SequenceAllocator()
        self._content = ContentStore()
        self._permissions = permissions if permissions is not None else PermissionStore()
        self._access = AccessController(self._permissions)
        self._journal = Journal()
        self._height = height_source or LedgerHeight()

        if self.state_dir:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            self._load()

    @classmethod
    def from_config(
        cls,
        config: LedgerConfig,
        height_source: Optional[Callable[[], int]] = None,
        permissions: Optional[PermissionStore] = None,
    ) -> "RegistryService":
        """
        Build a service from a LedgerConfig.

        Administrator, state_dir and signer come from the config; only the
        host-supplied collaborators are passed alongside it.
        """
        signer = None
        if config.sign_receipts:
            if config.key_dir:
                signer = Identity.load_or_create(config.key_dir, config.administrator)
            else:
                signer = Identity.create(config.administrator)
        return cls(
            administrator=config.administrator,
            state_dir=config.state_dir,
            height_source=height_source,
            permissions=permissions,
            signer=signer,
        )

    # -- operations ---------------------------------------------------------

    def register(
        self,
        title: str,
        size_bytes: int,
        summary: str,
        labels: Sequence[str],
        caller: str,
    ) -> int:
        """
        Register new content owned by caller.

        Returns:
            The new content id
        """
        labels = validate_registration(title, size_bytes, summary, labels)

        with self._lock:
            content_id = self._sequence.next_id()
            height = self._height()
            record = ContentRecord(
                id=content_id,
                title=title,
                owner=caller,
                size_bytes=size_bytes,
                registered_at=height,
                summary=summary,
                labels=labels,
            )

            with self._transaction() as undo:
                self._content.insert(content_id, record)
                undo.append(lambda: self._content.discard(content_id))

                if not self._permissions.has_explicit_grant(content_id, caller):
                    self._permissions.grant_read(content_id, caller)
                    undo.append(lambda: self._permissions.revoke(content_id, caller))

                self._sequence.commit(content_id)
                undo.append(lambda: self._sequence.rollback(content_id))

                self._record(undo, REGISTER, content_id, caller, {"title": title}, height=height)

        logger.info(f"Registered content {content_id} for {caller}")
        return content_id

    def transfer(self, content_id: int, new_owner: str, caller: str) -> None:
        """Hand ownership of content to new_owner. Only the owner may do this."""
        with self._lock:
            record = self._content.get(content_id)
            self._require_owner(record, caller, "transfer")

            with self._transaction() as undo:
                previous = self._content.set_owner(content_id, new_owner)
                undo.append(lambda: self._content.restore(previous))
                self._record(undo, TRANSFER, content_id, caller,
                             {"from": previous.owner, "to": new_owner})

        logger.info(f"Transferred content {content_id} from {caller} to {new_owner}")

    def delete(self, content_id: int, caller: str) -> None:
        """Erase content permanently. Only the owner may do this."""
        with self._lock:
            record = self._content.get(content_id)
            self._require_owner(record, caller, "delete")

            with self._transaction() as undo:
                removed = self._content.remove(content_id)
                undo.append(lambda: self._content.restore(removed))
                self._record(undo, DELETE, content_id, caller, {})

        logger.info(f"Deleted content {content_id}")

    def get_content(self, content_id: int, caller: str) -> ContentRecord:
        """Full record, for the owner or an explicitly granted reader."""
        with self._lock:
            record = self._content.get(content_id)
            if not self._access.can_read(record, caller):
                logger.warning(f"Read of content {content_id} denied for {caller}")
                raise AccessDenied(f"{caller} may not read content {content_id}")
            return record

    def get_owner(self, content_id: int) -> str:
        """Owner of content. Public; no access check."""
        with self._lock:
            return self._content.get(content_id).owner

    def get_access_status(self, content_id: int, principal: str) -> AccessStatus:
        """
        Rights principal holds on content.

        Public: any caller may ask about any principal.
        """
        with self._lock:
            record = self._content.get(content_id)
            return AccessStatus(
                has_explicit_grant=self._access.has_explicit_grant(record, principal),
                is_owner=self._access.is_owner(record, principal),
                has_effective_access=self._access.can_read(record, principal),
            )

    def get_stats(self) -> RegistryStats:
        with self._lock:
            return RegistryStats(
                total_registered=self._sequence.current,
                administrator=self.administrator,
            )

    # -- journal ------------------------------------------------------------

    def journal(self) -> List[JournalEntry]:
        """Committed operations, oldest first."""
        with self._lock:
            return self._journal.list()

    def verify_receipt(self, entry: JournalEntry) -> bool:
        """Check a journal entry against this ledger's signing key."""
        if self.signer is None:
            return False
        return verify_entry(entry, self.signer.public_key)

    # -- internals ----------------------------------------------------------

    def _require_owner(self, record: ContentRecord, caller: str, action: str) -> None:
        if record.owner != caller:
            logger.warning(f"{caller} attempted to {action} content {record.id} owned by {record.owner}")
            raise Unauthorized(f"{caller} does not own content {record.id}")

    def _record(
        self,
        undo: List[Callable[[], None]],
        operation: str,
        content_id: int,
        actor: str,
        details: Dict[str, Any],
        height: Optional[int] = None,
    ) -> None:
        """
        Append the journal entry for a commit and advance the height.

        Pass height when the operation already read it, so one commit never
        sees two values from a live height source.
        """
        entry = JournalEntry(
            seq=self._journal.next_seq(),
            operation=operation,
            content_id=content_id,
            actor=actor,
            height=self._height() if height is None else height,
            details=details,
        )
        if self.signer is not None:
            sign_entry(entry, self.signer)
        self._journal.append(entry)
        undo.append(self._journal.pop)

        if isinstance(self._height, LedgerHeight):
            previous = self._height.height
            self._height.advance()
            undo.append(lambda: setattr(self._height, "height", previous))

    @contextmanager
    def _transaction(self):
        """
        Apply a group of mutations as one unit.

        The body appends an undo action after each mutation. If anything in
        the body or the snapshot write fails, the undo actions run in reverse
        and the error propagates.
        """
        undo: List[Callable[[], None]] = []
        try:
            yield undo
            self._save()
        except Exception:
            for action in reversed(undo):
                action()
            raise

    def _snapshot_path(self) -> Path:
        return self.state_dir / "ledger.json"

    def snapshot(self) -> Dict[str, Any]:
        """Serializable copy of the full ledger state."""
        with self._lock:
            data = {
                "version": SNAPSHOT_VERSION,
                "administrator": self.administrator,
                "sequence": self._sequence.current,
                "records": [r.to_dict() for r in self._content.list()],
                "grants": [[cid, principal] for cid, principal in self._permissions.list()],
                "journal": [e.to_dict() for e in self._journal.list()],
            }
            if isinstance(self._height, LedgerHeight):
                data["height"] = self._height.height
            return data

    def _save(self):
        """Write the snapshot atomically (temp file, then rename)."""
        if not self.state_dir:
            return
        fd, tmp_path = tempfile.mkstemp(dir=self.state_dir, prefix=".ledger-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(self.snapshot(), f, indent=2)
            os.replace(tmp_path, self._snapshot_path())
        except Exception as e:
            logger.warning(f"Failed to write ledger snapshot: {e}")
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _load(self):
        """Load state from disk, if a snapshot exists."""
        path = self._snapshot_path()
        if not path.exists():
            return
        try:
            with open(path) as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise StateError(f"Ledger state in {path} is not an object")

            records = [ContentRecord.from_dict(r) for r in data.get("records", [])]
            grants = [(int(cid), principal) for cid, principal in data.get("grants", [])]
            entries = [JournalEntry.from_dict(e) for e in data.get("journal", [])]
            sequence = SequenceAllocator(int(data.get("sequence", 0)))
            height = data.get("height")
            height = int(height) if height is not None else None

            content = ContentStore()
            for record in records:
                content.insert(record.id, record)
            journal = Journal(entries)
        except DuplicateId as e:
            raise StateError(f"Ledger state in {path} repeats a content id: {e}") from e
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            raise StateError(f"Failed to load ledger state from {path}: {e}") from e

        highest = max((r.id for r in records), default=0)
        if sequence.current < highest:
            raise StateError(
                f"Ledger state in {path} has sequence {sequence.current} below content id {highest}"
            )

        self._sequence = sequence
        self._content = content
        self._journal = journal
        for content_id, principal in grants:
            self._permissions.grant_read(content_id, principal)
        if height is not None and isinstance(self._height, LedgerHeight):
            self._height.height = height

        logger.debug(f"Loaded {len(records)} records from {path}")
