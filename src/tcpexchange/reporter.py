from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from tcpexchange.transport.base import (
    ConnectTimeoutError,
    InvalidInputError,
    ReceiveTimeoutError,
    SendTimeoutError,
    TransactionError,
    TransportError,
)

logger = logging.getLogger(__name__)

LogCallback = Callable[[str], None]
AlertCallback = Callable[[str, str], None]

_ALERT_TITLES: dict[type[TransactionError], str] = {
    InvalidInputError: "Invalid input",
    ConnectTimeoutError: "Connection timeout",
    SendTimeoutError: "Send timeout",
    ReceiveTimeoutError: "Receive timeout",
    TransportError: "Transport error",
}


class Reporter(Protocol):
    def report(self, error: TransactionError) -> None: ...


def format_diagnostic(error: TransactionError) -> str:
    return f"{error.category}: {error}"


def alert_title(error: TransactionError) -> str:
    for cls in type(error).__mro__:
        title = _ALERT_TITLES.get(cls)
        if title is not None:
            return title
    return "Transaction error"


class LogReporter:
    """Logs every failure and forwards it to an optional callback."""

    def __init__(self, log: LogCallback | None = None) -> None:
        self._log = log

    def report(self, error: TransactionError) -> None:
        message = format_diagnostic(error)
        logger.warning("%s", message)
        if self._log is None:
            return
        try:
            self._log(message)
        except Exception as ex:  # noqa: BLE001
            logger.exception("log callback failed; ignoring", exc_info=ex)


class AlertReporter(LogReporter):
    """
    LogReporter that also raises a blocking user alert.

    `alert(title, message)` is expected to block until the user dismisses it.
    It runs on whatever thread executes the transaction.
    """

    def __init__(self, alert: AlertCallback, log: LogCallback | None = None) -> None:
        super().__init__(log)
        self._alert = alert

    def report(self, error: TransactionError) -> None:
        super().report(error)
        try:
            self._alert(alert_title(error), str(error))
        except Exception as ex:  # noqa: BLE001
            logger.exception("alert callback failed; ignoring", exc_info=ex)


def make_reporter(
    *,
    log: LogCallback | None = None,
    show_alert: bool = False,
    alert: AlertCallback | None = None,
) -> Reporter:
    if not show_alert:
        return LogReporter(log)
    if alert is None:
        raise ValueError("show_alert requires an alert callable")
    return AlertReporter(alert, log)
