"""Observability module for the faucet."""

from .health import (
    CheckResult,
    HealthCheck,
    HealthResult,
    HealthStatus,
    RpcHealthCheck,
    check_readiness,
    liveness_payload,
)
from .logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)
from .metrics import OPERATOR_BALANCE, REQUEST_DURATION, REQUESTS, TOKENS_DISPENSED

__all__ = [
    # Health
    "CheckResult",
    "HealthCheck",
    "HealthResult",
    "HealthStatus",
    "RpcHealthCheck",
    "check_readiness",
    "liveness_payload",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
    # Metrics
    "OPERATOR_BALANCE",
    "REQUEST_DURATION",
    "REQUESTS",
    "TOKENS_DISPENSED",
]
