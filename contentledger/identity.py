# contentledger/identity.py
"""
Administrator identity for signing ledger receipts.

An Identity is a principal name plus an RSA key pair. Callers of the
ledger are trusted principals and never need one; only the ledger's own
administrator holds keys, so it can attest to what it committed.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)


def _generate_keypair() -> tuple[bytes, bytes]:
    """Generate RSA key pair for signing."""
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=2048,
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


@dataclass
class Identity:
    """
    A signing identity.

    Attributes:
        principal: Principal name the keys belong to
        public_key: PEM-encoded public key
        private_key: PEM-encoded private key (kept secret)
        created_at: Timestamp of creation
    """
    principal: str
    public_key: bytes
    private_key: bytes
    created_at: float = field(default_factory=time.time)

    @property
    def key_id(self) -> str:
        return f"{self.principal}#main-key"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "principal": self.principal,
            "public_key": self.public_key.decode("utf-8"),
            "created_at": self.created_at,
        }

    @classmethod
    def create(cls, principal: str) -> "Identity":
        """Create a new identity with generated keys."""
        private_pem, public_pem = _generate_keypair()
        return cls(principal=principal, public_key=public_pem, private_key=private_pem)

    @classmethod
    def load_or_create(cls, key_dir: Path | str, principal: str) -> "Identity":
        """
        Load keys for a principal from key_dir, generating them on first use.

        Structure:
            key_dir/
                <principal>.private.pem
                <principal>.public.pem
        """
        key_dir = Path(key_dir)
        key_dir.mkdir(parents=True, exist_ok=True)
        private_path = key_dir / f"{principal}.private.pem"
        public_path = key_dir / f"{principal}.public.pem"

        if private_path.exists() and public_path.exists():
            return cls(
                principal=principal,
                public_key=public_path.read_bytes(),
                private_key=private_path.read_bytes(),
                created_at=private_path.stat().st_mtime,
            )

        identity = cls.create(principal)
        private_path.write_bytes(identity.private_key)
        private_path.chmod(0o600)
        public_path.write_bytes(identity.public_key)
        logger.info(f"Generated signing key for {principal} in {key_dir}")
        return identity
