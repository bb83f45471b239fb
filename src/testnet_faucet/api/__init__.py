"""HTTP API for the faucet."""

from .server import FaucetServer, request_id_middleware

__all__ = ["FaucetServer", "request_id_middleware"]
