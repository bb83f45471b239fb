"""CLI subcommands for faucet operations.

Provides command-line interface for:
- Wallet operations (address, balance)
- Faucet operations (status, send)
- Running the HTTP service
"""

import argparse
import asyncio
import json
import sys

from testnet_faucet.blockchain.client import ChainClient
from testnet_faucet.config import FaucetConfig, load_config
from testnet_faucet.core.wallet import EnvironmentWallet
from testnet_faucet.faucet.service import FaucetService, validate_address
from testnet_faucet.observability.logging import configure_logging

# Parser destinations that map onto FaucetConfig fields
CONFIG_FLAGS = (
    "rpc_url",
    "private_key",
    "private_key_file",
    "tokens_per_request",
    "port",
    "host",
    "gas_price_gwei",
    "gas_limit",
    "log_level",
    "log_format",
)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="testnet-faucet",
        description="Token faucet for EVM test networks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Global flags
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would happen without executing",
    )
    parser.add_argument(
        "--generate-wallet",
        metavar="FILE",
        help="Generate a new wallet and save private key to FILE, then exit",
    )

    # Config overrides (environment variables are used when omitted)
    config_group = parser.add_argument_group("configuration")
    config_group.add_argument("--rpc-url", help="RPC URL of the network node")
    config_group.add_argument("--private-key", help="Operator private key (hex, 0x optional)")
    config_group.add_argument("--private-key-file", help="File containing the operator key")
    config_group.add_argument(
        "--tokens-per-request", help="Amount of tokens to send per request (in wei)"
    )
    config_group.add_argument("--port", type=int, help="Server port to listen on")
    config_group.add_argument("--host", help="Server host to bind to")
    config_group.add_argument("--gas-price-gwei", type=int, help="Gas price in gwei")
    config_group.add_argument("--gas-limit", type=int, help="Gas limit for transactions")
    config_group.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    config_group.add_argument("--log-format", choices=["json", "text"], help="Log output format")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Wallet subcommand
    wallet_parser = subparsers.add_parser("wallet", help="Wallet operations")
    wallet_sub = wallet_parser.add_subparsers(dest="wallet_command")

    wallet_sub.add_parser("address", help="Show operator wallet address")
    wallet_sub.add_parser("balance", help="Show operator wallet balance")

    # Faucet subcommand
    faucet_parser = subparsers.add_parser("faucet", help="Faucet operations")
    faucet_sub = faucet_parser.add_subparsers(dest="faucet_command")

    faucet_sub.add_parser("status", help="Show faucet balance and dispense settings")

    send_parser = faucet_sub.add_parser("send", help="Dispense tokens to an address")
    send_parser.add_argument("address", type=str, help="Recipient address (checksummed)")

    # Run subcommand (start service)
    subparsers.add_parser("run", help="Start the faucet HTTP service")

    return parser


def config_overrides(args: argparse.Namespace) -> dict:
    """Collect config values given on the command line."""
    return {name: getattr(args, name, None) for name in CONFIG_FLAGS}


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(self, config: FaucetConfig, dry_run: bool = False, json_output: bool = False):
        self.config = config
        self.dry_run = dry_run
        self.json_output = json_output
        self._wallet: EnvironmentWallet | None = None
        self._client: ChainClient | None = None
        self._service: FaucetService | None = None

    @property
    def wallet(self) -> EnvironmentWallet:
        """Get wallet (lazy loaded)."""
        if self._wallet is None:
            self._wallet = EnvironmentWallet(
                private_key=self.config.private_key,
                private_key_file=self.config.private_key_file,
            )
        return self._wallet

    @property
    def client(self) -> ChainClient:
        """Get chain client (lazy loaded)."""
        if self._client is None:
            self._client = ChainClient(self.config.rpc_url, self.wallet)
        return self._client

    @property
    def service(self) -> FaucetService:
        """Get faucet service (lazy loaded)."""
        if self._service is None:
            self._service = FaucetService(
                client=self.client,
                tokens_per_request=self.config.tokens_per_request,
                gas_price=self.config.gas_price_wei,
                gas_limit=self.config.gas_limit,
            )
        return self._service

    def output(self, data: dict) -> None:
        """Output data in the appropriate format."""
        if self.json_output:
            print(json.dumps(data, indent=2))
        else:
            self._print_formatted(data)

    def _print_formatted(self, data: dict, indent: int = 0) -> None:
        """Print data in human-readable format."""
        prefix = "  " * indent
        for key, value in data.items():
            if isinstance(value, dict):
                print(f"{prefix}{key}:")
                self._print_formatted(value, indent + 1)
            else:
                print(f"{prefix}{key}: {value}")


# Wallet commands


def cmd_wallet_address(ctx: CLIContext) -> int:
    """Show wallet address."""
    try:
        ctx.output({"address": ctx.wallet.address})
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


def cmd_wallet_balance(ctx: CLIContext) -> int:
    """Show wallet balance."""
    try:
        if not ctx.client.connected:
            ctx.output({"error": "Not connected to RPC endpoint"})
            return 1

        ctx.output(
            {
                "address": ctx.wallet.address,
                # wei values exceed JSON-safe integers in most consumers
                "balance_wei": str(ctx.client.get_balance(ctx.wallet.address)),
                "rpc": ctx.config.rpc_url,
                "chain_id": ctx.client.get_chain_id(),
            }
        )
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


# Faucet commands


def cmd_faucet_status(ctx: CLIContext) -> int:
    """Show faucet balance and dispense settings."""
    try:
        if not ctx.client.connected:
            ctx.output({"error": "Not connected to RPC endpoint"})
            return 1

        balance = ctx.client.get_balance(ctx.wallet.address)
        ctx.output(
            {
                "address": ctx.wallet.address,
                "balance_wei": str(balance),
                "tokens_per_request_wei": str(ctx.config.tokens_per_request),
                "gas_price_wei": str(ctx.config.gas_price_wei),
                "gas_limit": ctx.config.gas_limit,
                "can_dispense": balance >= ctx.config.tokens_per_request,
                "chain_id": ctx.client.get_chain_id(),
            }
        )
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


def cmd_faucet_send(ctx: CLIContext, address: str) -> int:
    """Dispense tokens to an address."""
    try:
        if ctx.dry_run:
            if not validate_address(address):
                ctx.output({"error": "Invalid address"})
                return 1
            ctx.output(
                {
                    "dry_run": True,
                    "action": "dispense",
                    "to": address,
                    "amount_wei": str(ctx.config.tokens_per_request),
                    "message": f"Would send {ctx.config.tokens_per_request} wei to {address}",
                }
            )
            return 0

        result = asyncio.run(ctx.service.dispense(address))
        if not result.success:
            ctx.output({"error": result.message, "status": result.status.value})
            return 1

        ctx.output(
            {
                "success": True,
                "action": "dispense",
                "to": address,
                "amount_wei": str(result.amount),
                "tx_hash": result.tx_hash,
            }
        )
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


def run_cli(args: argparse.Namespace) -> int:
    """Execute CLI command based on parsed arguments.

    Returns
    -------
    int
        Exit code: 0 for success, positive for error, -1 signals caller
        to show help or start service mode (no CLI command specified).
    """
    try:
        config = load_config(**config_overrides(args))
        # stdout is reserved for command output
        configure_logging(
            level=config.log_level, log_format=config.log_format, stream=sys.stderr
        )
    except ValueError as e:
        if args.json:
            print(json.dumps({"error": f"Configuration error: {e}"}))
        else:
            print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    ctx = CLIContext(config, dry_run=args.dry_run, json_output=args.json)

    if args.command == "wallet":
        if args.wallet_command == "address":
            return cmd_wallet_address(ctx)
        elif args.wallet_command == "balance":
            return cmd_wallet_balance(ctx)
        else:
            print("Usage: testnet-faucet wallet [address|balance]", file=sys.stderr)
            return 1

    elif args.command == "faucet":
        if args.faucet_command == "status":
            return cmd_faucet_status(ctx)
        elif args.faucet_command == "send":
            return cmd_faucet_send(ctx, args.address)
        else:
            print("Usage: testnet-faucet faucet [status|send]", file=sys.stderr)
            return 1

    else:
        return -1
