"""Prometheus metrics for the faucet.

Metrics:
- faucet_requests_total: Counter of dispense requests by outcome status
- faucet_tokens_dispensed_wei_total: Counter of wei sent to recipients
- faucet_operator_balance_wei: Gauge of the operator balance last observed
- faucet_request_duration_seconds: Histogram of dispense duration
"""

from prometheus_client import Counter, Gauge, Histogram

# Counters
REQUESTS = Counter(
    "faucet_requests_total",
    "Total number of dispense requests",
    ["status"],
)

TOKENS_DISPENSED = Counter(
    "faucet_tokens_dispensed_wei_total",
    "Total wei dispensed",
)

# Gauges
OPERATOR_BALANCE = Gauge(
    "faucet_operator_balance_wei",
    "Operator wallet balance in wei at the last check",
)

# Histograms
REQUEST_DURATION = Histogram(
    "faucet_request_duration_seconds",
    "Dispense request processing duration",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
