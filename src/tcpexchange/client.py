from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from tcpexchange.config import ClientConfig
from tcpexchange.reporter import (
    AlertCallback,
    LogCallback,
    Reporter,
    format_diagnostic,
    make_reporter,
)
from tcpexchange.transport.base import (
    Endpoint,
    InvalidInputError,
    TransactionError,
    TransportError,
    parse_endpoint,
)
from tcpexchange.transport.tcp import TcpConnection

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Transaction:
    """Outcome of one connect/send/receive cycle. Never reused."""

    endpoint: Endpoint | None
    send_payload: bytes
    receive_buffer: Any
    received: int = 0
    error: TransactionError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def error_detail(self) -> str | None:
        if self.error is None:
            return None
        return format_diagnostic(self.error)

    @property
    def reply(self) -> bytes:
        if not self.success:
            return b""
        return bytes(self.receive_buffer[: self.received])


def trim_padding(buffer: bytes | bytearray) -> bytes:
    """Strip the trailing zero bytes a fixed-size receive buffer is padded with."""
    return bytes(buffer).rstrip(b"\x00")


def _check_payload(send_payload: Any) -> bytes:
    if send_payload is None:
        raise InvalidInputError("No data to send.")
    if not isinstance(send_payload, (bytes, bytearray, memoryview)):
        raise InvalidInputError(
            f"Send payload must be bytes, got {type(send_payload).__name__}."
        )
    payload = bytes(send_payload)
    if not payload:
        raise InvalidInputError("No data to send.")
    return payload


def _check_buffer(receive_buffer: Any) -> None:
    if not isinstance(receive_buffer, bytearray):
        raise InvalidInputError(
            f"Receive buffer must be a bytearray, got {type(receive_buffer).__name__}."
        )
    if len(receive_buffer) == 0:
        raise InvalidInputError("Receive buffer has no capacity.")


class TransactionClient:
    """
    Bounded TCP request/response exchange.

    Each call opens a fresh connection, sends the payload, reads one reply into
    the caller's buffer and closes the connection. Connect, send and receive
    each run under their own timeout. Failures are reported through the
    reporter and turned into a `False` result; they never propagate.

    By default the payload is written as part of the connect phase. Set
    `ClientConfig.separate_send_phase` to give the send its own phase and
    deadline.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        reporter: Reporter | None = None,
        *,
        log: LogCallback | None = None,
        alert: AlertCallback | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        if reporter is None:
            reporter = make_reporter(log=log, show_alert=self.config.show_alert, alert=alert)
        self._reporter = reporter

    def new_receive_buffer(self) -> bytearray:
        return bytearray(self.config.receive_buffer_size)

    def _fail(self, txn: Transaction, error: TransactionError) -> Transaction:
        txn.error = error
        logger.debug("Transaction with %s failed", txn.endpoint, exc_info=error)
        self._reporter.report(error)
        return txn

    async def transact(
        self,
        address: str,
        port: int,
        send_payload: bytes,
        receive_buffer: bytearray,
    ) -> Transaction:
        try:
            endpoint = parse_endpoint(address, port)
            payload = _check_payload(send_payload)
            _check_buffer(receive_buffer)
        except InvalidInputError as e:
            return self._fail(Transaction(None, b"", receive_buffer), e)

        txn = Transaction(endpoint, payload, receive_buffer)
        cfg = self.config
        try:
            async with TcpConnection(endpoint, close_timeout=cfg.close_timeout) as conn:
                if cfg.separate_send_phase:
                    await conn.connect(timeout=cfg.connect_timeout)
                    await conn.send(payload, timeout=cfg.send_timeout)
                else:
                    await conn.connect_and_send(payload, timeout=cfg.connect_timeout)
                txn.received = await conn.receive_into(receive_buffer, timeout=cfg.receive_timeout)
        except TransactionError as e:
            return self._fail(txn, e)
        except OSError as e:
            err = TransportError(f"{endpoint}: {e}")
            err.__cause__ = e
            return self._fail(txn, err)

        logger.debug(
            "Transaction with %s done: sent=%s received=%s", endpoint, len(payload), txn.received
        )
        return txn

    async def execute(
        self,
        address: str,
        port: int,
        send_payload: bytes,
        receive_buffer: bytearray,
    ) -> bool:
        """
        Run one transaction and return whether it succeeded.

        On success `receive_buffer` holds the reply padded with zero bytes up
        to its capacity. On failure its contents are meaningless.
        """
        txn = await self.transact(address, port, send_payload, receive_buffer)
        return txn.success

    def execute_blocking(
        self,
        address: str,
        port: int,
        send_payload: bytes,
        receive_buffer: bytearray,
    ) -> bool:
        """Synchronous `execute` for callers without a running event loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.execute(address, port, send_payload, receive_buffer))
        raise RuntimeError(
            "execute_blocking() cannot be called from a running event loop; "
            "await execute() or execute_in_worker() instead"
        )

    async def execute_in_worker(
        self,
        address: str,
        port: int,
        send_payload: bytes,
        receive_buffer: bytearray,
    ) -> bool:
        """Run the whole transaction on a worker thread so the calling loop stays free."""
        return await asyncio.to_thread(
            self.execute_blocking, address, port, send_payload, receive_buffer
        )
