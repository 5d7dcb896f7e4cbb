from __future__ import annotations

import io

import pytest

from tcpexchange import cli
from tcpexchange.client import TransactionClient
from tcpexchange.config import ClientConfig


def _fake_execute(reply: bytes | None):
    seen: dict[str, object] = {}

    def _execute(
        self: TransactionClient, address: str, port: int, payload: bytes, buf: bytearray
    ) -> bool:
        seen.update(address=address, port=port, payload=payload, size=len(buf), config=self.config)
        if reply is None:
            return False
        buf[: len(reply)] = reply
        return True

    return _execute, seen


def test_cli_prints_trimmed_reply(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    fake, seen = _fake_execute(b"PONG")
    monkeypatch.setattr(TransactionClient, "execute_blocking", fake)
    monkeypatch.setattr(cli, "load_client_config", lambda path=None: ClientConfig())

    rc = cli.main(["127.0.0.1", "50000", "PING", "--timeout", "2", "--buffer-size", "64"])

    assert rc == 0
    assert capsys.readouterr().out == "PONG\n"
    assert seen["payload"] == b"PING"
    assert seen["size"] == 64
    cfg = seen["config"]
    assert isinstance(cfg, ClientConfig)
    assert cfg.connect_timeout == cfg.receive_timeout == 2.0
    assert cfg.show_alert is False


def test_cli_reads_stdin_and_reports_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    fake, seen = _fake_execute(None)
    monkeypatch.setattr(TransactionClient, "execute_blocking", fake)
    monkeypatch.setattr(cli, "load_client_config", lambda path=None: ClientConfig())
    monkeypatch.setattr("sys.stdin", io.StringIO("HELLO\n"))

    rc = cli.main(["127.0.0.1", "50000", "--separate-send"])

    assert rc == 1
    assert capsys.readouterr().out == ""
    assert seen["payload"] == b"HELLO"
    cfg = seen["config"]
    assert isinstance(cfg, ClientConfig)
    assert cfg.separate_send_phase is True


@pytest.mark.parametrize(
    "argv",
    [
        ["127.0.0.1", "notaport", "x"],
        ["127.0.0.1", "80", "x", "--buffer-size", "0"],
        ["127.0.0.1", "80", "café"],
        ["127.0.0.1", "80", "x", "--timeout", "inf"],
        ["127.0.0.1", "80", "x", "--connect-timeout", "nan"],
        ["127.0.0.1", "80", "x", "--receive-timeout", "0"],
        ["127.0.0.1", "80", "x", "--send-timeout", "soon"],
    ],
)
def test_cli_usage_errors_exit_2(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as ei:
        cli.main(argv)
    assert ei.value.code == 2
