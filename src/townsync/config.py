"""Sync configuration for townsync."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from townsync._constants import (
    DEFAULT_ADVISORY_FOREIGN,
    DEFAULT_ADVISORY_LOCAL,
    DEFAULT_DISTANCE_LABEL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SOURCE_URL,
    URL_SENTINEL,
    USER_AGENT,
)
from townsync.exceptions import TownSyncConfigError


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise TownSyncConfigError(f"{name} must be a number, got {value!r}") from exc


def _env_optional_float(name: str, value: str) -> float | None:
    normalized = value.strip().lower()
    if normalized in {"", "none", "off", "0"}:
        return None
    return _env_float(name, value)


@dataclasses.dataclass(frozen=True)
class ColumnMap:
    """Zero-based column positions of each record field in the sheet.

    Positions are fixed by contract; header text is never used to find
    a column. The defaults match the published tourism sheet (column A
    holds a row number, so the town name sits in column B).
    """

    name: int = 1
    latitude: int = 2
    longitude: int = 3
    security_advisory_local: int = 4
    distance_label: int = 5
    route_url: int = 6
    tourism_url: int = 7
    security_advisory_foreign: int = 8

    def __post_init__(self) -> None:
        for field in dataclasses.fields(self):
            index = getattr(self, field.name)
            if not isinstance(index, int) or isinstance(index, bool) or index < 0:
                raise TownSyncConfigError(f"column index for {field.name} must be a non-negative int, got {index!r}")

    def as_dict(self) -> dict[str, int]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True)
class RecordDefaults:
    """Values used when an optional cell is empty."""

    security_advisory_local: str = DEFAULT_ADVISORY_LOCAL
    security_advisory_foreign: str = DEFAULT_ADVISORY_FOREIGN
    distance_label: str = DEFAULT_DISTANCE_LABEL
    route_url: str = URL_SENTINEL
    tourism_url: str = URL_SENTINEL


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Sync configuration.

    Parameters
    ----------
    source_url : str
        CSV export URL of the spreadsheet.
    poll_interval : float
        Seconds between polling cycles. Defaults to 5 seconds.
    request_timeout : float or None
        Total timeout of one fetch in seconds. ``None`` (the default)
        disables the timeout, so a hung request keeps its cycle in flight
        until the server answers.
    user_agent : str
        ``User-Agent`` header sent with every fetch.
    encoding : str
        Text encoding of the CSV export.
    columns : ColumnMap
        Fixed column positions of the record fields.
    defaults : RecordDefaults
        Fallback values for optional fields.
    """

    source_url: str = DEFAULT_SOURCE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float | None = None
    user_agent: str = USER_AGENT
    encoding: str = "utf-8"
    columns: ColumnMap = dataclasses.field(default_factory=ColumnMap)
    defaults: RecordDefaults = dataclasses.field(default_factory=RecordDefaults)

    def __post_init__(self) -> None:
        if not self.source_url.strip():
            raise TownSyncConfigError("source_url must be non-empty")
        if not math.isfinite(self.poll_interval) or self.poll_interval <= 0:
            raise TownSyncConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise TownSyncConfigError(f"request_timeout must be positive or None, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads ``TOWNSYNC_SOURCE_URL``, ``TOWNSYNC_POLL_INTERVAL``,
        ``TOWNSYNC_REQUEST_TIMEOUT``, ``TOWNSYNC_USER_AGENT``,
        ``TOWNSYNC_ENCODING`` and ``TOWNSYNC_COLUMN_<FIELD>`` (for example
        ``TOWNSYNC_COLUMN_NAME=0``). Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SyncConfig
            Populated configuration.
        """
        env = os.environ

        column_kwargs: dict[str, int] = {}
        for field in dataclasses.fields(ColumnMap):
            env_key = f"TOWNSYNC_COLUMN_{field.name.upper()}"
            val = env.get(env_key)
            if val is None:
                continue
            try:
                column_kwargs[field.name] = int(val)
            except ValueError as exc:
                raise TownSyncConfigError(f"{env_key} must be an integer, got {val!r}") from exc

        # Allow overriding columns via a nested dict
        column_overrides = overrides.pop("columns", None)
        if isinstance(column_overrides, dict):
            column_kwargs.update(column_overrides)
        elif isinstance(column_overrides, ColumnMap):
            column_kwargs = column_overrides.as_dict()

        config_kwargs: dict[str, Any] = {"columns": ColumnMap(**column_kwargs)}

        _ENV_CONFIG_MAP = {
            "TOWNSYNC_SOURCE_URL": "source_url",
            "TOWNSYNC_USER_AGENT": "user_agent",
            "TOWNSYNC_ENCODING": "encoding",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("TOWNSYNC_POLL_INTERVAL")
        if interval_env is not None and "poll_interval" not in overrides:
            config_kwargs["poll_interval"] = _env_float("TOWNSYNC_POLL_INTERVAL", interval_env)

        timeout_env = env.get("TOWNSYNC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_optional_float("TOWNSYNC_REQUEST_TIMEOUT", timeout_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
