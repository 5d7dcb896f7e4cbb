from .base import (
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
from .tcp import TcpConnection

__all__ = [
    "ConnectTimeoutError",
    "Endpoint",
    "InvalidInputError",
    "Phase",
    "PhaseTimeoutError",
    "ReceiveTimeoutError",
    "SendTimeoutError",
    "TcpConnection",
    "TransactionError",
    "TransportError",
    "parse_endpoint",
]
