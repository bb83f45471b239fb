"""Faucet Service.

Runs the dispense workflow for one recipient:
- Checksummed address validation
- Operator and recipient balance checks against live chain state
- Transaction assembly, signing and submission

Balance checks and submission are not atomic against the chain; two
concurrent requests for the same unfunded recipient may both pass the
zero-balance check.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from web3 import Web3

from testnet_faucet.blockchain.client import ChainClient
from testnet_faucet.observability.logging import get_logger
from testnet_faucet.observability.metrics import (
    OPERATOR_BALANCE,
    REQUEST_DURATION,
    REQUESTS,
    TOKENS_DISPENSED,
)

logger = get_logger(__name__)


class DispenseStatus(str, Enum):
    """Dispense outcome."""

    SUCCESS = "success"
    INVALID_ADDRESS = "invalid_address"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    ALREADY_FUNDED = "already_funded"
    UPSTREAM_ERROR = "upstream_error"
    BUILD_ERROR = "build_error"
    SUBMISSION_ERROR = "submission_error"

    @property
    def http_status(self) -> int:
        """HTTP status code the outcome maps to."""
        if self is DispenseStatus.SUCCESS:
            return 200
        if self in _CLIENT_ERRORS:
            return 400
        return 500


_CLIENT_ERRORS = frozenset(
    {
        DispenseStatus.INVALID_ADDRESS,
        DispenseStatus.INSUFFICIENT_BALANCE,
        DispenseStatus.ALREADY_FUNDED,
    }
)


@dataclass
class DispenseResult:
    """Result of a dispense attempt."""

    success: bool
    status: DispenseStatus
    tx_hash: str | None
    amount: int
    message: str

    @classmethod
    def failure(cls, status: DispenseStatus, amount: int, message: str) -> "DispenseResult":
        return cls(success=False, status=status, tx_hash=None, amount=amount, message=message)


def validate_address(address: Any) -> bool:
    """Check that a value is an EIP-55 checksummed address.

    Parameters
    ----------
    address : Any
        Value to validate; non-strings are rejected.

    Returns
    -------
    bool
        True if the value is a ``0x``-prefixed address with a valid checksum.
    """
    return isinstance(address, str) and Web3.is_checksum_address(address)


def build_transfer_transaction(
    to: str,
    value: int,
    nonce: int,
    chain_id: int,
    gas_limit: int,
    gas_price: int,
) -> dict:
    """Assemble an EIP-1559 value transfer.

    Max fee and priority fee are both set to ``gas_price``.
    """
    return {
        "type": 2,
        "to": to,
        "value": value,
        "gas": gas_limit,
        "maxFeePerGas": gas_price,
        "maxPriorityFeePerGas": gas_price,
        "nonce": nonce,
        "chainId": chain_id,
    }


class FaucetService:
    """Dispenses a fixed amount of native tokens to unfunded addresses.

    Parameters
    ----------
    client : ChainClient
        Chain client bound to the operator wallet.
    tokens_per_request : int
        Amount sent per dispense, in wei.
    gas_price : int
        Max fee and priority fee per gas, in wei.
    gas_limit : int
        Gas limit for the transfer.
    """

    def __init__(
        self,
        client: ChainClient,
        tokens_per_request: int,
        gas_price: int,
        gas_limit: int = 21000,
    ):
        self._client = client
        self._tokens_per_request = tokens_per_request
        self._gas_price = gas_price
        self._gas_limit = gas_limit

    @property
    def tokens_per_request(self) -> int:
        """Amount dispensed per request, in wei."""
        return self._tokens_per_request

    @property
    def operator_address(self) -> str:
        """Checksummed address of the operator wallet."""
        return self._client.wallet_address

    async def dispense(self, address: Any) -> DispenseResult:
        """Send the configured amount to ``address`` if it is eligible.

        Parameters
        ----------
        address : Any
            Recipient address as received from the caller.

        Returns
        -------
        DispenseResult
            Success with the transaction hash, or the failure status and message.
        """
        started = time.perf_counter()
        try:
            result = await self._dispense(address)
        finally:
            REQUEST_DURATION.observe(time.perf_counter() - started)

        REQUESTS.labels(status=result.status.value).inc()
        if result.success:
            TOKENS_DISPENSED.inc(result.amount)
            logger.info(
                "Tokens dispensed",
                amount=str(result.amount),
                recipient=address,
                tx_hash=result.tx_hash,
            )
        elif result.status.http_status >= 500:
            logger.error("Dispense failed", status=result.status.value, error=result.message)
        else:
            logger.warning("Dispense rejected", status=result.status.value, error=result.message)
        return result

    async def _dispense(self, address: Any) -> DispenseResult:
        amount = self._tokens_per_request

        if not validate_address(address):
            return DispenseResult.failure(
                DispenseStatus.INVALID_ADDRESS, amount, "Invalid address"
            )

        operator = self._client.wallet_address

        try:
            operator_balance = await self._call(self._client.get_balance, operator)
        except Exception as e:
            return DispenseResult.failure(
                DispenseStatus.UPSTREAM_ERROR, amount, f"Failed to get balance: {e}"
            )
        OPERATOR_BALANCE.set(operator_balance)
        if operator_balance < amount:
            return DispenseResult.failure(
                DispenseStatus.INSUFFICIENT_BALANCE, amount, "Insufficient balance"
            )

        try:
            recipient_balance = await self._call(self._client.get_balance, address)
        except Exception as e:
            return DispenseResult.failure(
                DispenseStatus.UPSTREAM_ERROR, amount, f"Failed to get balance: {e}"
            )
        if recipient_balance > 0:
            return DispenseResult.failure(
                DispenseStatus.ALREADY_FUNDED,
                amount,
                "Receiver already has a balance greater than 0",
            )

        try:
            nonce = await self._call(self._client.get_transaction_count, operator)
        except Exception as e:
            return DispenseResult.failure(
                DispenseStatus.UPSTREAM_ERROR, amount, f"Failed to get nonce: {e}"
            )

        try:
            chain_id = await self._call(self._client.get_chain_id)
        except Exception as e:
            return DispenseResult.failure(
                DispenseStatus.UPSTREAM_ERROR, amount, f"Failed to get chain ID: {e}"
            )

        tx = build_transfer_transaction(
            to=address,
            value=amount,
            nonce=nonce,
            chain_id=chain_id,
            gas_limit=self._gas_limit,
            gas_price=self._gas_price,
        )

        try:
            signed = self._client.sign_transaction(tx)
        except Exception as e:
            return DispenseResult.failure(
                DispenseStatus.BUILD_ERROR, amount, f"Failed to build transaction: {e}"
            )

        try:
            tx_hash = await self._call(self._client.send_raw_transaction, signed.raw_transaction)
        except Exception as e:
            return DispenseResult.failure(
                DispenseStatus.SUBMISSION_ERROR, amount, f"Failed to send transaction: {e}"
            )

        return DispenseResult(
            success=True,
            status=DispenseStatus.SUCCESS,
            tx_hash=tx_hash,
            amount=amount,
            message=f"Successfully sent {amount} wei",
        )

    @staticmethod
    async def _call(func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking chain call in a worker thread."""
        return await asyncio.to_thread(func, *args)
