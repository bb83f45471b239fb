"""Tests for wallet provider module."""

import pytest
from pydantic import SecretStr

from testnet_faucet.core.wallet import (
    EnvironmentWallet,
    WalletError,
    WalletProvider,
    decode_private_key,
)

# Test private key (DO NOT USE IN PRODUCTION - this is a well-known test key)
TEST_PRIVATE_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_ADDRESS = "0xFCAd0B19bB29D4674531d6f115237E16AfCE377c"


class TestDecodePrivateKey:
    """Tests for decode_private_key."""

    def test_with_prefix(self):
        """0x-prefixed key decodes to 32 bytes."""
        key = decode_private_key(TEST_PRIVATE_KEY)
        assert len(key) == 32
        assert key.hex() == TEST_PRIVATE_KEY[2:]

    def test_without_prefix(self):
        """Key without prefix decodes to the same bytes."""
        assert decode_private_key(TEST_PRIVATE_KEY[2:]) == decode_private_key(TEST_PRIVATE_KEY)

    def test_uppercase_prefix_and_whitespace(self):
        """Surrounding whitespace and 0X prefix are accepted."""
        assert decode_private_key(f"  0X{TEST_PRIVATE_KEY[2:]}\n") == decode_private_key(
            TEST_PRIVATE_KEY
        )

    @pytest.mark.parametrize(
        "key",
        [
            "0x" + "zz" * 32,
            " ".join(["11"] * 32),
            "0x" + "11" * 16 + "\n" + "11" * 16,
            "+0x" + "11" * 32,
        ],
    )
    def test_not_hex(self, key):
        """Anything but hex digits after the prefix is rejected."""
        with pytest.raises(WalletError, match="Invalid private key: not a hex string"):
            decode_private_key(key)

    @pytest.mark.parametrize("key", ["0x1234", "0x" + "11" * 33, ""])
    def test_wrong_length(self, key):
        """Key must be exactly 32 bytes."""
        with pytest.raises(WalletError, match="Invalid private key length"):
            decode_private_key(key)

    def test_wallet_error_is_value_error(self):
        """WalletError can be handled as ValueError."""
        assert issubclass(WalletError, ValueError)


class TestWalletProvider:
    """Tests for WalletProvider abstract class."""

    def test_wallet_provider_is_abstract(self):
        """WalletProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            WalletProvider()  # type: ignore


class TestEnvironmentWallet:
    """Tests for EnvironmentWallet."""

    def test_load_from_secret_str(self):
        """Load wallet from SecretStr (simulating env var)."""
        wallet = EnvironmentWallet(private_key=SecretStr(TEST_PRIVATE_KEY))

        assert wallet.address == TEST_ADDRESS
        assert wallet.get_account().address == TEST_ADDRESS

    def test_load_without_prefix(self):
        """Key without 0x prefix loads the same account."""
        wallet = EnvironmentWallet(private_key=SecretStr(TEST_PRIVATE_KEY[2:]))
        assert wallet.address == TEST_ADDRESS

    def test_load_from_file(self, tmp_path):
        """Load wallet from key file."""
        key_file = tmp_path / "wallet.key"
        key_file.write_text(f"{TEST_PRIVATE_KEY}\n  \n")

        wallet = EnvironmentWallet(private_key_file=str(key_file))
        assert wallet.address == TEST_ADDRESS

    def test_missing_key_raises_error(self):
        """Neither key nor file provided should raise WalletError."""
        with pytest.raises(WalletError, match="Either private_key or private_key_file"):
            EnvironmentWallet()

    def test_missing_file_raises_error(self):
        """Non-existent key file should raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Private key file not found"):
            EnvironmentWallet(private_key_file="/nonexistent/path/key.txt")

    def test_private_key_takes_precedence(self, tmp_path):
        """If both provided, private_key takes precedence over file."""
        key_file = tmp_path / "other.key"
        key_file.write_text("0x" + "de" * 32)

        wallet = EnvironmentWallet(
            private_key=SecretStr(TEST_PRIVATE_KEY),
            private_key_file=str(key_file),
        )
        assert wallet.address == TEST_ADDRESS

    def test_short_key_rejected(self):
        """Key of the wrong length fails at load time."""
        with pytest.raises(WalletError, match="length"):
            EnvironmentWallet(private_key=SecretStr("0xdeadbeef"))

    def test_zero_key_rejected(self):
        """All-zero key is not a valid signer."""
        with pytest.raises(WalletError, match="Invalid private key"):
            EnvironmentWallet(private_key=SecretStr("0x" + "00" * 32))

    def test_sign_transaction(self):
        """Wallet signs an EIP-1559 transaction."""
        wallet = EnvironmentWallet(private_key=SecretStr(TEST_PRIVATE_KEY))
        signed = wallet.sign_transaction(
            {
                "type": 2,
                "to": "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
                "value": 1,
                "gas": 21000,
                "maxFeePerGas": 10**9,
                "maxPriorityFeePerGas": 10**9,
                "nonce": 0,
                "chainId": 1337,
            }
        )

        # typed transaction envelope starts with its type byte
        assert bytes(signed.raw_transaction)[0] == 2
        assert len(bytes(signed.hash)) == 32
