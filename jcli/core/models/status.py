"""
Status item model — one row of ``j status``.

Every row has a stable ``id`` (``tool-git``, ``cache-npm cache`` …) that
the UI keys on; probe results arrive in any order and replace the row
in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from jcli.core.models.catalog import CheckResult, ResourceResult, Style


class ItemKind(str, Enum):
    SYSINFO = "sysinfo"
    HEADER = "header"
    SETUP = "setup"
    SECURITY = "security"
    IDENTITY = "identity"
    TOOL = "tool"
    NETWORK = "network"
    DISK = "disk"
    CACHE = "cache"


# Kinds whose probe returns a ResourceResult instead of a CheckResult
RESOURCE_KINDS = frozenset({ItemKind.NETWORK, ItemKind.DISK, ItemKind.CACHE})


@dataclass
class StatusItem:
    """A row in the status view.

    Check-style rows (setup/security/identity/tool) fill ``installed``,
    ``version``, ``status`` and ``detail``; resource rows
    (network/disk/cache) fill ``value``, ``style`` and ``available``.
    """

    id: str
    kind: ItemKind
    name: str
    section: str = ""
    subsection: str = ""
    description: str = ""
    loaded: bool = False

    installed: bool = False
    version: str = ""
    status: str = ""
    detail: str = ""
    good_when: bool = True
    method: str = ""

    value: str = ""
    style: Style = Style.MUTED
    available: bool = False

    @property
    def is_header(self) -> bool:
        return self.kind is ItemKind.HEADER

    @property
    def healthy(self) -> bool:
        """For security/identity rows: ``installed`` matches ``good_when``."""
        return self.installed == self.good_when

    def with_check(self, result: CheckResult) -> StatusItem:
        return replace(
            self,
            loaded=True,
            installed=result.installed,
            version=result.version,
            status=result.status,
            detail=result.detail,
        )

    def with_resource(self, result: ResourceResult) -> StatusItem:
        return replace(
            self,
            loaded=True,
            value=result.value,
            style=result.style,
            available=result.available,
        )

    def as_failed(self) -> StatusItem:
        """Loaded with every result field empty; used when a probe raises."""
        return replace(
            self,
            loaded=True,
            installed=False,
            version="",
            status="",
            detail="",
            value="",
            available=False,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "section": self.section,
            "loaded": self.loaded,
        }
        if self.subsection:
            d["subsection"] = self.subsection
        if self.description:
            d["description"] = self.description
        if self.kind in RESOURCE_KINDS:
            d.update(value=self.value, style=self.style.value, available=self.available)
        elif self.kind is ItemKind.SYSINFO:
            d["detail"] = self.detail
        elif not self.is_header:
            d.update(
                installed=self.installed,
                version=self.version,
                status=self.status,
                detail=self.detail,
            )
            if self.kind in (ItemKind.SECURITY, ItemKind.IDENTITY):
                d["healthy"] = self.healthy
            if self.method:
                d["method"] = self.method
        return d


# ── Engine events ───────────────────────────────────────────────


@dataclass(frozen=True)
class StatusUpdate:
    """A probe finished; ``item`` replaces the row with the same id."""

    id: str
    item: StatusItem


@dataclass(frozen=True)
class AllLoaded:
    """Terminator: every probe has published its update."""

    total: int = 0
    elapsed_ms: int = 0


StatusEvent = StatusUpdate | AllLoaded
