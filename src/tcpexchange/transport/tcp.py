from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from types import TracebackType
from typing import TypeVar

from .base import (
    ConnectTimeoutError,
    Endpoint,
    Phase,
    PhaseTimeoutError,
    ReceiveTimeoutError,
    SendTimeoutError,
    TransportError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TIMEOUT_ERRORS: dict[Phase, type[PhaseTimeoutError]] = {
    Phase.CONNECT: ConnectTimeoutError,
    Phase.SEND: SendTimeoutError,
    Phase.RECEIVE: ReceiveTimeoutError,
}


@dataclass(slots=True)
class TcpConnection:
    """
    One TCP connection, used for exactly one transaction.

    Every phase is a single awaited operation bounded by its own deadline.
    Use as `async with TcpConnection(...)` so the socket is shut down and
    closed on every exit path.
    """

    endpoint: Endpoint
    close_timeout: float = 10.0

    _reader: asyncio.StreamReader | None = None
    _writer: asyncio.StreamWriter | None = None

    @property
    def connected(self) -> bool:
        return self._writer is not None

    async def __aenter__(self) -> TcpConnection:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _phase(self, phase: Phase, aw: Awaitable[T], timeout: float) -> T:
        logger.debug("%s phase started (%s, timeout=%ss)", phase.value, self.endpoint, timeout)
        try:
            out = await asyncio.wait_for(aw, timeout=timeout)
        except TimeoutError as e:
            raise _TIMEOUT_ERRORS[phase](timeout, self.endpoint) from e
        except OSError as e:
            raise TransportError(f"{phase.value} to {self.endpoint} failed: {e}") from e
        logger.debug("%s phase done (%s)", phase.value, self.endpoint)
        return out

    async def _open(self) -> None:
        if self._writer is not None:
            return
        reader, writer = await asyncio.open_connection(self.endpoint.host, self.endpoint.port)
        self._reader, self._writer = reader, writer

    async def _write(self, payload: bytes) -> None:
        writer = self._require_writer()
        writer.write(payload)
        await writer.drain()

    def _require_writer(self) -> asyncio.StreamWriter:
        if self._writer is None:
            raise TransportError("Not connected.")
        return self._writer

    async def connect(self, *, timeout: float) -> None:
        await self._phase(Phase.CONNECT, self._open(), timeout)

    async def connect_and_send(self, payload: bytes, *, timeout: float) -> None:
        """
        Connect and write the payload as one phase under the connect deadline.
        """

        async def _bundled() -> None:
            await self._open()
            await self._write(payload)

        await self._phase(Phase.CONNECT, _bundled(), timeout)

    async def send(self, payload: bytes, *, timeout: float) -> None:
        self._require_writer()
        await self._phase(Phase.SEND, self._write(payload), timeout)

    async def receive_into(self, buffer: bytearray, *, timeout: float) -> int:
        """
        Read once into `buffer` and zero-fill the rest of it.

        Reply bytes beyond the buffer capacity are never read. Returns the
        number of bytes received (0 if the peer closed without replying).
        """
        if self._reader is None:
            raise TransportError("Not connected.")
        data = await self._phase(Phase.RECEIVE, self._reader.read(len(buffer)), timeout)
        n = len(data)
        buffer[:n] = data
        buffer[n:] = bytes(len(buffer) - n)
        if n == 0:
            logger.debug("Peer %s closed the connection without a reply", self.endpoint)
        return n

    async def close(self) -> None:
        writer = self._writer
        if writer is None:
            return
        self._writer = None
        self._reader = None
        try:
            if not writer.is_closing() and writer.can_write_eof():
                writer.write_eof()
        except OSError as e:
            logger.debug("Shutdown of %s failed: %s", self.endpoint, e)
        writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=self.close_timeout)
        except Exception as e:  # noqa: BLE001
            logger.debug("Close of %s did not finish cleanly", self.endpoint, exc_info=e)
