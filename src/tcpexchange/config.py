from __future__ import annotations

import json
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, cast

ENV_PREFIX = "TCPEXCHANGE_"

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_RECEIVE_BUFFER_SIZE = 1024


@dataclass(slots=True, frozen=True)
class ClientConfig:
    connect_timeout: float = DEFAULT_TIMEOUT_SECONDS
    # Only used when separate_send_phase is set; otherwise the payload is
    # written inside the connect phase.
    send_timeout: float = DEFAULT_TIMEOUT_SECONDS
    receive_timeout: float = DEFAULT_TIMEOUT_SECONDS
    close_timeout: float = DEFAULT_TIMEOUT_SECONDS
    receive_buffer_size: int = DEFAULT_RECEIVE_BUFFER_SIZE
    show_alert: bool = False
    separate_send_phase: bool = False

    def with_timeout(self, seconds: float) -> ClientConfig:
        s = float(seconds)
        return replace(self, connect_timeout=s, send_timeout=s, receive_timeout=s)


def _as_bool(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return default


def _as_float(value: Any, *, default: float, min_value: float | None = None) -> float:
    if value is None:
        out = default
    elif isinstance(value, bool):
        out = float(value)
    elif isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, str):
        try:
            out = float(value.strip())
        except ValueError:
            out = default
    else:
        out = default
    if not math.isfinite(out):
        out = default
    if min_value is not None and out < min_value:
        return min_value
    return out


def _as_int(value: Any, *, default: int, min_value: int | None = None) -> int:
    if value is None:
        out = default
    elif isinstance(value, bool):
        out = int(value)
    elif isinstance(value, (int, float)):
        out = int(value)
    elif isinstance(value, str):
        try:
            out = int(value.strip())
        except ValueError:
            out = default
    else:
        out = default
    if min_value is not None and out < min_value:
        return min_value
    return out


def _from_mapping(data: Mapping[str, Any], base: ClientConfig) -> ClientConfig:
    return ClientConfig(
        connect_timeout=_as_float(
            data.get("connect_timeout"), default=base.connect_timeout, min_value=0.001
        ),
        send_timeout=_as_float(
            data.get("send_timeout"), default=base.send_timeout, min_value=0.001
        ),
        receive_timeout=_as_float(
            data.get("receive_timeout"), default=base.receive_timeout, min_value=0.001
        ),
        close_timeout=_as_float(
            data.get("close_timeout"), default=base.close_timeout, min_value=0.001
        ),
        receive_buffer_size=_as_int(
            data.get("receive_buffer_size"), default=base.receive_buffer_size, min_value=1
        ),
        show_alert=_as_bool(data.get("show_alert"), default=base.show_alert),
        separate_send_phase=_as_bool(
            data.get("separate_send_phase"), default=base.separate_send_phase
        ),
    )


def _env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        out[key[len(ENV_PREFIX) :].lower()] = value
    return out


def load_client_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """
    Load client config with safe defaults.

    Sources, later wins:
    - built-in defaults
    - JSON object at `path` (a missing file is ignored)
    - TCPEXCHANGE_* environment variables, e.g. TCPEXCHANGE_CONNECT_TIMEOUT=2.5
    """
    cfg = ClientConfig()

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            payload = json.loads(p.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError(f"Invalid client config at {p}: root must be an object")
            cfg = _from_mapping(cast(dict[str, Any], payload), cfg)

    env = os.environ if environ is None else environ
    overrides = _env_overrides(env)
    if overrides:
        cfg = _from_mapping(overrides, cfg)
    return cfg
