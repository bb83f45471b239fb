"""Operator wallet holding the faucet's signing key."""

import re
from abc import ABC, abstractmethod
from pathlib import Path

from eth_account import Account
from eth_account.datastructures import SignedTransaction
from eth_account.signers.local import LocalAccount
from pydantic import SecretStr

PRIVATE_KEY_LENGTH = 32

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


class WalletError(ValueError):
    """Raised when the operator key cannot be loaded."""


def decode_private_key(value: str) -> bytes:
    """Decode a hex private key, with or without ``0x`` prefix.

    Parameters
    ----------
    value : str
        The hex-encoded key.

    Returns
    -------
    bytes
        The 32 raw key bytes.

    Raises
    ------
    WalletError
        If the value is not hex or does not decode to exactly 32 bytes.
    """
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not _HEX_DIGITS.fullmatch(text):
        raise WalletError("Invalid private key: not a hex string")
    try:
        key = bytes.fromhex(text)
    except ValueError as e:
        raise WalletError(f"Invalid private key: {e}") from None
    if len(key) != PRIVATE_KEY_LENGTH:
        raise WalletError("Invalid private key length")
    return key


class WalletProvider(ABC):
    """Abstract wallet provider for signing transactions."""

    @abstractmethod
    def get_account(self) -> LocalAccount:
        """Get the wallet account for signing.

        Returns
        -------
        LocalAccount
            The account instance for transaction signing.
        """
        ...

    @property
    def address(self) -> str:
        """Get the wallet address.

        Returns
        -------
        str
            The checksummed wallet address.
        """
        return self.get_account().address

    def sign_transaction(self, tx: dict) -> SignedTransaction:
        """Sign a transaction dict with the wallet key."""
        return self.get_account().sign_transaction(tx)


class EnvironmentWallet(WalletProvider):
    """Load private key from environment variable or file.

    Parameters
    ----------
    private_key : SecretStr, optional
        The private key as a SecretStr (from env var or flag).
    private_key_file : str, optional
        Path to a file containing the private key.

    Raises
    ------
    WalletError
        If neither source is provided, or the key is malformed.
    FileNotFoundError
        If private_key_file does not exist.
    """

    def __init__(
        self,
        private_key: SecretStr | None = None,
        private_key_file: str | None = None,
    ):
        if private_key is not None:
            key_content = private_key.get_secret_value()
        elif private_key_file is not None:
            key_path = Path(private_key_file).expanduser()
            if not key_path.exists():
                raise FileNotFoundError(f"Private key file not found: {private_key_file}")
            key_content = key_path.read_text()
        else:
            raise WalletError("Either private_key or private_key_file must be provided")

        key = decode_private_key(key_content)
        try:
            self._account = Account.from_key(key)
        except Exception as e:
            # zero or out-of-range scalars are rejected by eth_keys
            raise WalletError(f"Invalid private key: {e}") from e

    def get_account(self) -> LocalAccount:
        return self._account
