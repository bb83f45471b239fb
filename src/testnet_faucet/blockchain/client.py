"""web3 client wrapper for faucet operations."""

import logging

from eth_account.datastructures import SignedTransaction
from web3 import Web3

from testnet_faucet.core.wallet import WalletProvider

logger = logging.getLogger(__name__)


class ChainClient:
    """Wrapper around web3.py exposing the calls the faucet needs.

    Every method is a blocking round trip to the node (except signing,
    which is local). Exceptions raised by web3 propagate to the caller.

    Parameters
    ----------
    rpc_url : str
        The node's JSON-RPC endpoint URL.
    wallet : WalletProvider
        The wallet provider for signing transactions.
    """

    def __init__(self, rpc_url: str, wallet: WalletProvider):
        self._w3 = Web3(Web3.HTTPProvider(rpc_url))
        self._wallet = wallet

    @property
    def connected(self) -> bool:
        """Check if connected to the RPC endpoint.

        Returns
        -------
        bool
            True if connected, False otherwise.
        """
        return self._w3.is_connected()

    @property
    def wallet_address(self) -> str:
        """Get the operator wallet address.

        Returns
        -------
        str
            The checksummed wallet address.
        """
        return self._wallet.address

    def get_balance(self, address: str) -> int:
        """Get the native balance of an address, in wei.

        Parameters
        ----------
        address : str
            Checksummed address to query.

        Returns
        -------
        int
            Balance in wei.
        """
        return int(self._w3.eth.get_balance(address))

    def get_transaction_count(self, address: str) -> int:
        """Get the next nonce for an address."""
        return int(self._w3.eth.get_transaction_count(address))

    def get_chain_id(self) -> int:
        """Get the chain ID from the connected network."""
        return int(self._w3.eth.chain_id)

    def sign_transaction(self, tx: dict) -> SignedTransaction:
        """Sign a transaction with the operator wallet.

        Parameters
        ----------
        tx : dict
            Fully populated transaction fields.

        Returns
        -------
        SignedTransaction
            The signed transaction, including its raw bytes and hash.
        """
        return self._wallet.sign_transaction(tx)

    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction.

        Parameters
        ----------
        raw_transaction : bytes
            The RLP-encoded signed transaction.

        Returns
        -------
        str
            The ``0x``-prefixed transaction hash reported by the node.
        """
        tx_hash = self._w3.eth.send_raw_transaction(raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.debug("Transaction submitted", extra={"tx_hash": tx_hash_hex})
        return tx_hash_hex
