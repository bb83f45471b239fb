"""Blockchain integration for the faucet."""

from .client import ChainClient

__all__ = ["ChainClient"]
