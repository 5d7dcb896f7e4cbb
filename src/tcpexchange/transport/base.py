from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class Phase(str, Enum):
    CONNECT = "connect"
    SEND = "send"
    RECEIVE = "receive"


class TransactionError(Exception):
    """Base class for every failure a transaction can report."""

    category = "transaction error"


class InvalidInputError(TransactionError):
    category = "invalid input"


class TransportError(TransactionError):
    category = "transport error"


class PhaseTimeoutError(TransactionError):
    """Abstract; raise one of the per-phase subclasses."""

    category = "timeout"
    phase: ClassVar[Phase | None] = None

    def __init__(self, timeout: float, endpoint: Endpoint | None = None) -> None:
        self.timeout = float(timeout)
        self.endpoint = endpoint
        where = f" ({endpoint})" if endpoint is not None else ""
        what = f"{self.phase.value.capitalize()} timed out" if self.phase else "Timed out"
        super().__init__(f"{what} after {self.timeout}s{where}")


class ConnectTimeoutError(PhaseTimeoutError):
    category = "connect timeout"
    phase = Phase.CONNECT


class SendTimeoutError(PhaseTimeoutError):
    category = "send timeout"
    phase = Phase.SEND


class ReceiveTimeoutError(PhaseTimeoutError):
    category = "receive timeout"
    phase = Phase.RECEIVE


@dataclass(frozen=True, slots=True)
class Endpoint:
    host: str
    port: int

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


def parse_endpoint(address: str, port: int) -> Endpoint:
    """
    Validate a textual IP literal and port.

    Hostnames are rejected; only IPv4/IPv6 literals are accepted.
    """
    if not isinstance(address, str):
        raise InvalidInputError(f"Invalid IP address: {address!r}")
    try:
        ip = ipaddress.ip_address(address.strip())
    except ValueError as e:
        raise InvalidInputError(f"Invalid IP address: {address!r}") from e
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidInputError(f"Invalid port: {port!r}")
    if not 1 <= port <= 65535:
        raise InvalidInputError(f"Port out of range (1-65535): {port}")
    return Endpoint(host=str(ip), port=port)
