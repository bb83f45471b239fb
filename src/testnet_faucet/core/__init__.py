"""Core faucet components."""

from .wallet import EnvironmentWallet, WalletError, WalletProvider, decode_private_key

__all__ = [
    "EnvironmentWallet",
    "WalletError",
    "WalletProvider",
    "decode_private_key",
]
