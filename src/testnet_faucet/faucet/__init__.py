"""Faucet components."""

from .service import (
    DispenseResult,
    DispenseStatus,
    FaucetService,
    build_transfer_transaction,
    validate_address,
)

__all__ = [
    "DispenseResult",
    "DispenseStatus",
    "FaucetService",
    "build_transfer_transaction",
    "validate_address",
]
