from __future__ import annotations

import pytest

from tcpexchange.transport.base import (
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


def test_parse_endpoint_ipv4() -> None:
    ep = parse_endpoint("127.0.0.1", 50000)
    assert ep == Endpoint(host="127.0.0.1", port=50000)
    assert str(ep) == "127.0.0.1:50000"


def test_parse_endpoint_ipv6_is_normalized_and_bracketed() -> None:
    ep = parse_endpoint(" 0:0:0:0:0:0:0:1 ", 8080)
    assert ep.host == "::1"
    assert str(ep) == "[::1]:8080"


@pytest.mark.parametrize(
    "address",
    ["", "localhost", "example.com", "256.1.1.1", "1.2.3", "127.0.0.1:80", "::g", None, 1234],
)
def test_parse_endpoint_rejects_malformed_address(address: object) -> None:
    with pytest.raises(InvalidInputError):
        parse_endpoint(address, 80)  # type: ignore[arg-type]


@pytest.mark.parametrize("port", [0, -1, 65536, True, "80", 80.0])
def test_parse_endpoint_rejects_bad_port(port: object) -> None:
    with pytest.raises(InvalidInputError):
        parse_endpoint("127.0.0.1", port)  # type: ignore[arg-type]


def test_error_taxonomy() -> None:
    for cls in (InvalidInputError, TransportError, ConnectTimeoutError, ReceiveTimeoutError):
        assert issubclass(cls, TransactionError)
    assert InvalidInputError.category == "invalid input"
    assert TransportError.category == "transport error"


def test_phase_timeout_message_names_phase_and_endpoint() -> None:
    ep = Endpoint(host="10.0.0.1", port=9)
    e = ReceiveTimeoutError(0.5, ep)
    assert e.phase is Phase.RECEIVE
    assert e.timeout == 0.5
    assert str(e) == "Receive timed out after 0.5s (10.0.0.1:9)"
    assert SendTimeoutError(1).phase is Phase.SEND
    assert str(ConnectTimeoutError(10)) == "Connect timed out after 10.0s"


def test_base_phase_timeout_does_not_claim_a_phase() -> None:
    e = PhaseTimeoutError(2)
    assert e.phase is None
    assert str(e) == "Timed out after 2.0s"
    assert ConnectTimeoutError(2).phase is Phase.CONNECT
