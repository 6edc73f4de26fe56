"""
Remote access models — persisted settings and live status.

Settings live under the ``remote`` key of ``~/.config/jterrazz/jrc.json``.
Legacy values written by older releases (``mode: "system"``,
``auth_method: "none"``) are migrated on read.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RemoteMode(str, Enum):
    AUTO = "auto"
    USERSPACE = "userspace"


class RemoteAuthMethod(str, Enum):
    OAUTH = "oauth"
    AUTHKEY = "authkey"


_LEGACY_MODES = {"": RemoteMode.USERSPACE.value, "system": RemoteMode.USERSPACE.value}
_LEGACY_AUTH = {"": RemoteAuthMethod.OAUTH.value, "none": RemoteAuthMethod.OAUTH.value}


class RemoteSettings(BaseModel):
    """How ``j remote up`` brings the node onto the tailnet."""

    mode: RemoteMode = RemoteMode.USERSPACE
    auth_method: RemoteAuthMethod = RemoteAuthMethod.OAUTH
    secret: str = ""
    hostname: str = ""

    @field_validator("mode", mode="before")
    @classmethod
    def _migrate_mode(cls, v: Any) -> Any:
        if v is None:
            return RemoteMode.USERSPACE.value
        if isinstance(v, str):
            v = v.strip().lower()
            return _LEGACY_MODES.get(v, v)
        return v

    @field_validator("auth_method", mode="before")
    @classmethod
    def _migrate_auth_method(cls, v: Any) -> Any:
        if v is None:
            return RemoteAuthMethod.OAUTH.value
        if isinstance(v, str):
            v = v.strip().lower()
            return _LEGACY_AUTH.get(v, v)
        return v

    @field_validator("secret", "hostname", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _require_secret(self) -> RemoteSettings:
        if self.auth_method is RemoteAuthMethod.AUTHKEY and not self.secret:
            raise ValueError("auth key is required when auth_method is authkey")
        return self


class JRCConfig(BaseModel):
    """Root of ``jrc.json``.  Unknown top-level keys are preserved."""

    model_config = ConfigDict(extra="allow")

    remote: RemoteSettings = Field(default_factory=RemoteSettings)


class RemoteStatus(BaseModel):
    """Snapshot from ``tailscale status --json`` plus helper liveness.

    ``error`` is set when the client could not be queried; only ``mode``
    and the helper flags are meaningful then.
    """

    mode: RemoteMode = RemoteMode.USERSPACE
    backend_state: str = ""
    hostname: str = ""
    ip: str = ""
    connected: bool = False
    keep_awake: bool = False
    daemon_running: bool = False
    error: str = ""
