#!/usr/bin/env python3
"""testnet-faucet - token faucet for EVM test networks.

Entry point for the faucet service.
"""

import asyncio
import logging
import os
import signal
import sys
import tempfile
from pathlib import Path

from eth_account import Account
from pydantic import ValidationError

from testnet_faucet.api.server import FaucetServer
from testnet_faucet.blockchain.client import ChainClient
from testnet_faucet.cli import config_overrides, create_parser, run_cli
from testnet_faucet.config import FaucetConfig, load_config
from testnet_faucet.core.wallet import EnvironmentWallet
from testnet_faucet.faucet.service import FaucetService
from testnet_faucet.observability.health import RpcHealthCheck
from testnet_faucet.observability.logging import configure_logging


def generate_wallet(output_path: str) -> None:
    """Generate a new wallet and save the private key to a file.

    Parameters
    ----------
    output_path : str
        Path to save the private key file.
    """
    account = Account.create()

    # Temp file in the target directory so the rename stays on one filesystem
    key_path = Path(output_path)
    key_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=key_path.parent, prefix=".faucet-key-")
    fd_closed = False
    try:
        os.fchmod(fd, 0o600)
        os.write(fd, account.key.hex().encode())
        os.close(fd)
        fd_closed = True
        os.rename(temp_path, key_path)
    except Exception:
        if not fd_closed:
            os.close(fd)
        Path(temp_path).unlink(missing_ok=True)
        raise

    print(f"""
Wallet generated successfully!

  Address:     {account.address}
  Private Key: {key_path.absolute()}

Next steps:

  1. Fund this address on your test network

  2. Launch the faucet with this wallet:

     export FAUCET_PRIVATE_KEY_FILE={key_path.absolute()}
     testnet-faucet run

IMPORTANT: Keep this private key secure. Anyone with access can control the wallet.
""")


def parse_args(argv: list[str] | None = None):
    """Parse command line arguments."""
    return create_parser().parse_args(argv)


def build_wallet(config: FaucetConfig) -> EnvironmentWallet:
    """Load the operator wallet from the configured key or key file.

    Raises
    ------
    WalletError
        If no key is configured or the key is malformed.
    OSError
        If the key file is missing or unreadable.
    """
    if config.private_key and config.private_key_file:
        logging.getLogger(__name__).warning(
            "Both FAUCET_PRIVATE_KEY and FAUCET_PRIVATE_KEY_FILE set; using FAUCET_PRIVATE_KEY"
        )
    return EnvironmentWallet(
        private_key=config.private_key,
        private_key_file=config.private_key_file,
    )


async def run_service(config: FaucetConfig) -> None:
    """Run the faucet service until SIGINT or SIGTERM.

    Wires up and starts all service components:
    - Operator wallet and chain client
    - FaucetService with the configured dispense parameters
    - FaucetServer exposing /faucet, /health, /ready and /metrics
    """
    try:
        configure_logging(level=config.log_level, log_format=config.log_format)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    logger = logging.getLogger(__name__)
    logger.info("Faucet starting")
    logger.info("RPC endpoint: %s", config.rpc_url)
    logger.info(
        "Dispense: %s wei per request, gas price %s wei, gas limit %s",
        config.tokens_per_request,
        config.gas_price_wei,
        config.gas_limit,
    )

    try:
        wallet = build_wallet(config)
    except (ValueError, OSError) as e:
        logger.error("Failed to load operator wallet: %s", e)
        sys.exit(1)

    logger.info("Wallet loaded: %s", wallet.address)

    client = ChainClient(config.rpc_url, wallet)
    faucet = FaucetService(
        client=client,
        tokens_per_request=config.tokens_per_request,
        gas_price=config.gas_price_wei,
        gas_limit=config.gas_limit,
    )

    server = FaucetServer(faucet, host=config.host, port=config.port)
    server.add_check(RpcHealthCheck(client))

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def on_shutdown_signal(sig_name: str) -> None:
        logger.info("Received signal %s, initiating shutdown", sig_name)
        shutdown_event.set()

    loop.add_signal_handler(signal.SIGTERM, lambda: on_shutdown_signal("SIGTERM"))
    loop.add_signal_handler(signal.SIGINT, lambda: on_shutdown_signal("SIGINT"))

    await server.start()
    logger.info("Faucet listening on %s:%d", config.host, config.port)

    await shutdown_event.wait()

    logger.info("Faucet shutting down...")
    await server.stop()
    logger.info("Faucet shutdown complete")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the faucet."""
    args = parse_args(argv)

    if args.generate_wallet:
        generate_wallet(args.generate_wallet)
        return

    if args.command and args.command != "run":
        exit_code = run_cli(args)
        if exit_code >= 0:
            sys.exit(exit_code)
        create_parser().print_help()
        sys.exit(0)

    try:
        config = load_config(**config_overrides(args))
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    asyncio.run(run_service(config))


if __name__ == "__main__":
    main()
