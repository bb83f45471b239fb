"""Liveness and readiness checks for the faucet.

- Liveness: fixed payload with the current time, never touches the chain.
- Readiness: runs registered checks, e.g. RPC connectivity.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from testnet_faucet.blockchain.client import ChainClient

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Health check status values."""

    OK = "ok"
    ERROR = "error"
    NOT_READY = "not_ready"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str | None = None


@dataclass
class HealthResult:
    """Combined health check result."""

    status: HealthStatus
    checks: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        result = {"status": self.status.value}
        if self.checks:
            result["checks"] = self.checks
        return result


class HealthCheck(ABC):
    """Abstract base class for health checks."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the health check."""
        ...

    @abstractmethod
    async def check(self) -> CheckResult:
        """Perform the health check.

        Returns
        -------
        CheckResult
            The result of the health check.
        """
        ...


class RpcHealthCheck(HealthCheck):
    """Reports whether the node RPC endpoint answers."""

    def __init__(self, client: ChainClient):
        self._client = client

    @property
    def name(self) -> str:
        return "rpc"

    async def check(self) -> CheckResult:
        connected = await asyncio.to_thread(lambda: self._client.connected)
        if connected:
            return CheckResult(name=self.name, status=HealthStatus.OK)
        return CheckResult(
            name=self.name,
            status=HealthStatus.ERROR,
            message="RPC endpoint unreachable",
        )


def liveness_payload(now: datetime | None = None) -> dict[str, str]:
    """Build the ``/health`` response body.

    Parameters
    ----------
    now : datetime | None
        Timestamp to report; defaults to the current UTC time.

    Returns
    -------
    dict[str, str]
        ``{"status": "healthy", "timestamp": <RFC 3339>}``.
    """
    now = now or datetime.now(timezone.utc)
    return {"status": "healthy", "timestamp": now.isoformat()}


async def check_readiness(checks: list[HealthCheck]) -> HealthResult:
    """Run all readiness checks.

    Parameters
    ----------
    checks : list[HealthCheck]
        Checks to run, in order.

    Returns
    -------
    HealthResult
        Combined result of all checks.
    """
    if not checks:
        return HealthResult(status=HealthStatus.OK)

    results: dict[str, str] = {}
    all_ok = True

    for check in checks:
        try:
            result = await check.check()
            if result.status == HealthStatus.OK:
                results[result.name] = "ok"
            else:
                results[result.name] = result.message or "error"
                all_ok = False
        except Exception as e:
            logger.exception("Health check failed", extra={"check": check.name})
            results[check.name] = f"error: {type(e).__name__}: {e}"
            all_ok = False

    return HealthResult(
        status=HealthStatus.OK if all_ok else HealthStatus.NOT_READY,
        checks=results,
    )
