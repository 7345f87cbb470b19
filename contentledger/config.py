# contentledger/config.py
"""
Ledger configuration.

Example ledger.yaml:

    administrator: admin
    state_dir: ./ledger-state
    sign_receipts: true
    key_dir: ./ledger-keys
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class LedgerConfig:
    """
    Settings for one RegistryService instance.

    Attributes:
        administrator: Principal reported by get_stats and used to sign receipts
        state_dir: Directory holding the JSON snapshot; None keeps state in memory
        sign_receipts: Sign every journal entry with the administrator's key
        key_dir: Where the administrator key pair lives; None keeps keys in memory
    """
    administrator: str
    state_dir: Optional[Path] = None
    sign_receipts: bool = False
    key_dir: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerConfig":
        if not isinstance(data, dict):
            raise ConfigError("Ledger config must be a mapping")

        administrator = data.get("administrator")
        if not isinstance(administrator, str) or not administrator:
            raise ConfigError("Ledger config requires a non-empty 'administrator'")

        sign_receipts = data.get("sign_receipts", False)
        if not isinstance(sign_receipts, bool):
            raise ConfigError(f"'sign_receipts' must be true or false, got {sign_receipts!r}")

        state_dir = data.get("state_dir")
        key_dir = data.get("key_dir")
        return cls(
            administrator=administrator,
            state_dir=Path(state_dir) if state_dir else None,
            sign_receipts=sign_receipts,
            key_dir=Path(key_dir) if key_dir else None,
        )

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "LedgerConfig":
        """Parse config from YAML string."""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid ledger config: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Path | str) -> "LedgerConfig":
        """Load config from YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Ledger config not found: {path}")
        with open(path, "r") as f:
            config = cls.from_yaml(f.read())
        logger.debug(f"Loaded ledger config from {path}")
        return config
