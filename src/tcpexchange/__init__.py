from __future__ import annotations

from .client import Transaction, TransactionClient, trim_padding
from .config import ClientConfig, load_client_config
from .reporter import AlertReporter, LogReporter, Reporter, format_diagnostic, make_reporter
from .transport import (
    ConnectTimeoutError,
    Endpoint,
    InvalidInputError,
    Phase,
    PhaseTimeoutError,
    ReceiveTimeoutError,
    SendTimeoutError,
    TransactionError,
    TransportError,
    parse_endpoint,
)

__all__ = [
    "AlertReporter",
    "ClientConfig",
    "ConnectTimeoutError",
    "Endpoint",
    "InvalidInputError",
    "LogReporter",
    "Phase",
    "PhaseTimeoutError",
    "ReceiveTimeoutError",
    "Reporter",
    "SendTimeoutError",
    "Transaction",
    "TransactionClient",
    "TransactionError",
    "TransportError",
    "format_diagnostic",
    "load_client_config",
    "make_reporter",
    "parse_endpoint",
    "trim_padding",
]
