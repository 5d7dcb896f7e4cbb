from __future__ import annotations

import argparse
import logging
import math
import sys
from dataclasses import replace

from tcpexchange.client import TransactionClient, trim_padding
from tcpexchange.config import ClientConfig, load_client_config


def _seconds(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise argparse.ArgumentTypeError(f"must be a finite number of seconds > 0: {raw!r}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tcpexchange",
        description="Send one payload over TCP and print the single reply.",
    )
    p.add_argument("host", help="Server IP address (IPv4 or IPv6 literal)")
    p.add_argument("port", type=int, help="Server port")
    p.add_argument(
        "payload",
        nargs="?",
        default=None,
        help="Text to send (default: read stdin, trailing newline stripped)",
    )
    p.add_argument("--config", type=str, default=None, help="JSON config file")
    p.add_argument("--encoding", type=str, default="ascii", help="Payload/reply text encoding")
    p.add_argument(
        "--timeout", type=_seconds, default=None, help="Set every phase timeout (seconds)"
    )
    p.add_argument(
        "--connect-timeout", type=_seconds, default=None, help="Connect timeout (seconds)"
    )
    p.add_argument("--send-timeout", type=_seconds, default=None, help="Send timeout (seconds)")
    p.add_argument(
        "--receive-timeout", type=_seconds, default=None, help="Receive timeout (seconds)"
    )
    p.add_argument("--buffer-size", type=int, default=None, help="Receive buffer capacity (bytes)")
    p.add_argument(
        "--separate-send",
        action="store_true",
        help="Send in its own phase instead of together with connect",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def _apply_args(cfg: ClientConfig, args: argparse.Namespace) -> ClientConfig:
    if args.timeout is not None:
        cfg = cfg.with_timeout(args.timeout)
    changes: dict[str, object] = {}
    if args.connect_timeout is not None:
        changes["connect_timeout"] = float(args.connect_timeout)
    if args.send_timeout is not None:
        changes["send_timeout"] = float(args.send_timeout)
    if args.receive_timeout is not None:
        changes["receive_timeout"] = float(args.receive_timeout)
    if args.buffer_size is not None:
        changes["receive_buffer_size"] = int(args.buffer_size)
    if args.separate_send:
        changes["separate_send_phase"] = True
    # No alert window in a terminal.
    changes["show_alert"] = False
    return replace(cfg, **changes)


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.buffer_size is not None and args.buffer_size < 1:
        p.error("--buffer-size must be at least 1")

    text = args.payload if args.payload is not None else sys.stdin.read().rstrip("\r\n")
    try:
        payload = text.encode(args.encoding)
    except (LookupError, UnicodeEncodeError) as e:
        p.error(f"cannot encode payload: {e}")

    cfg = _apply_args(load_client_config(args.config), args)
    client = TransactionClient(cfg)
    buf = client.new_receive_buffer()
    if not client.execute_blocking(args.host, args.port, payload, buf):
        return 1
    print(trim_padding(buf).decode(args.encoding, errors="replace"))
    return 0
