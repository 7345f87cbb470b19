# contentledger/signatures.py
"""
Signed receipts for journal entries.

Uses RSA-SHA256 (PKCS#1 v1.5) over canonical JSON of the entry payload.
"""

import base64
import json
import time
from typing import Any, Dict

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding

from .identity import Identity
from .journal import JournalEntry

SIGNATURE_TYPE = "RsaSignature2017"


def _canonicalize(data: Dict[str, Any]) -> bytes:
    """Sorted keys, no whitespace."""
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")


def _signing_input(entry: JournalEntry, options: Dict[str, Any]) -> bytes:
    return _canonicalize({"options": options, "entry": entry.payload()})


def sign_entry(entry: JournalEntry, identity: Identity) -> JournalEntry:
    """
    Sign a journal entry with the identity's private key.

    Returns:
        The same entry with ``signature`` attached
    """
    private_key = serialization.load_pem_private_key(identity.private_key, password=None)

    options = {
        "type": SIGNATURE_TYPE,
        "creator": identity.key_id,
        "created": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
    }
    signature_bytes = private_key.sign(
        _signing_input(entry, options),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )

    entry.signature = dict(options, signatureValue=base64.b64encode(signature_bytes).decode("utf-8"))
    return entry


def verify_entry(entry: JournalEntry, public_key_pem: bytes) -> bool:
    """
    Verify a journal entry's signature.

    Returns:
        True if the signature is present and valid
    """
    if not entry.signature:
        return False

    try:
        public_key = serialization.load_pem_public_key(public_key_pem)
        options = {
            "type": entry.signature["type"],
            "creator": entry.signature["creator"],
            "created": entry.signature["created"],
        }
        signature_bytes = base64.b64decode(entry.signature["signatureValue"])
        public_key.verify(
            signature_bytes,
            _signing_input(entry, options),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
        return True

    except (InvalidSignature, KeyError, ValueError):
        return False


def verify_entry_signer(entry: JournalEntry, identity: Identity) -> bool:
    """Verify that an entry was signed by the given identity."""
    if not entry.signature:
        return False
    if entry.signature.get("creator") != identity.key_id:
        return False
    return verify_entry(entry, identity.public_key)
