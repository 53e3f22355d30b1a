"""
ECDSA / secp256k1 signing capability for Oraculum.

The capability provider is the only place that knows where the operator's
key lives. The rest of the client consumes a ``Capability``: either a
signing one (local key) or a read-only one (no key available).

Keys are stored in ~/.oraculum/.env as PRIVATE_KEY (hex format).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import NotInitialized


# Default config directory
ORACULUM_DIR = Path.home() / ".oraculum"
ORACULUM_ENV = ORACULUM_DIR / ".env"


def load_env(env_path: Optional[Path] = None) -> None:
    """Load ~/.oraculum/.env into the process environment (no override)."""
    env_path = env_path or ORACULUM_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.oraculum/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or ORACULUM_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set PRIVATE_KEY in {env_path}")

    # Ensure 0x prefix
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from .env.
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


@dataclass(frozen=True, eq=False)
class Capability:
    """
    What the current session is allowed to do remotely.

    Attributes:
        account: Signing account, or None for a read-only capability
    """
    account: Optional[LocalAccount] = None

    @property
    def address(self) -> Optional[str]:
        return self.account.address if self.account else None

    @property
    def can_sign(self) -> bool:
        return self.account is not None

    def sign_transaction(self, tx: dict[str, Any]) -> str:
        """
        Sign a transaction dict.

        Returns:
            0x-prefixed hex raw transaction
        """
        if self.account is None:
            raise NotInitialized("A signing capability is required for write operations.")
        signed = self.account.sign_transaction(tx)
        return "0x" + bytes(signed.raw_transaction).hex()


class CapabilityProvider(Protocol):
    def get_active_account(self) -> Optional[str]:
        ...

    async def request_connection(self) -> str:
        ...

    def capability(self) -> Capability:
        ...


class LocalKeyProvider:
    """
    Capability provider backed by a local private key.

    Args:
        private_key: Explicit key; when None the key is looked up in the
                     environment / ~/.oraculum/.env on demand
        env_path: Alternate .env location
    """

    def __init__(self, private_key: Optional[str] = None, env_path: Optional[Path] = None) -> None:
        self._private_key = private_key
        self._env_path = env_path

    def _account(self) -> Optional[LocalAccount]:
        try:
            return get_account(self._private_key or load_private_key(self._env_path))
        except ValueError:
            return None

    def get_active_account(self) -> Optional[str]:
        account = self._account()
        return account.address if account else None

    async def request_connection(self) -> str:
        account = self._account()
        if account is None:
            raise NotInitialized(
                "No wallet found. Set PRIVATE_KEY in the environment or in "
                f"{self._env_path or ORACULUM_ENV}."
            )
        return account.address

    def capability(self) -> Capability:
        return Capability(account=self._account())
