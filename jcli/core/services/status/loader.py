"""
Status probe engine — the data behind ``j status``.

``build_items()`` lays out every row (system info, section headers,
probed scripts, security and identity checks, tools by category,
network, disk and cache checks) in a fixed order.  ``StatusLoader``
then fans one probe per non-header row out to a thread pool:

    loader = StatusLoader()
    loader.start()
    for event in loader.iter_updates():
        ...  # StatusUpdate per row, then one AllLoaded

Thread safety model
-------------------
Probe threads only ever put events on a bounded ``queue.Queue``; the
consumer is the only one applying them to the row table.  A merger
thread waits for every probe future and then enqueues the single
``AllLoaded`` terminator, so the terminator always follows the last
update.  Probes are blocking (subprocess, filesystem walks, curl) and
never raise into the engine: a failing probe yields an empty, loaded
row.
"""

from __future__ import annotations

import logging
import os
import queue
import socket
import threading
import time
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import replace

from jcli.core.models.catalog import TOOL_CATEGORIES
from jcli.core.models.status import (
    AllLoaded,
    ItemKind,
    StatusEvent,
    StatusItem,
    StatusUpdate,
)
from jcli.core.services import probes
from jcli.core.services.catalog.identity import all_identity_checks
from jcli.core.services.catalog.resources import (
    all_cache_checks,
    all_disk_checks,
    all_network_checks,
)
from jcli.core.services.catalog.scripts import checkable_scripts, script_by_name
from jcli.core.services.catalog.security import all_security_checks
from jcli.core.services.catalog.tools import tool_by_name, tools_by_category

logger = logging.getLogger(__name__)

# Headroom on top of one slot per probe
EVENT_SLACK = 16

_MAX_HOSTNAME = 20

SECTION_SYSTEM = "System"
SECTION_SETUP = "Setup"
SECTION_SECURITY = "Security"
SECTION_IDENTITY = "Identity"
SECTION_TOOLS = "Tools"
SECTION_NETWORK = "Network"
SECTION_DISK = "Disk"
SECTION_CACHE = "Cache"


def _slug(text: str) -> str:
    return "-".join(text.lower().replace("&", " ").split())


def _header(section: str, name: str = "", *, key: str = "") -> StatusItem:
    return StatusItem(
        id=f"header-{key or _slug(section)}",
        kind=ItemKind.HEADER,
        name=name or section,
        section=section,
        loaded=True,
    )


def _row(kind: ItemKind, name: str, section: str, **fields) -> StatusItem:
    return StatusItem(id=f"{kind.value}-{name}", kind=kind, name=name, section=section, **fields)


# ── Layout ──────────────────────────────────────────────────────


def build_items() -> list[StatusItem]:
    """Every status row in render order; headers come pre-loaded."""
    items: list[StatusItem] = [
        StatusItem(id="sysinfo", kind=ItemKind.SYSINFO, name="system", section=SECTION_SYSTEM),
    ]

    items.append(_header(SECTION_SETUP))
    for script in checkable_scripts():
        items.append(_row(
            ItemKind.SETUP, script.name, SECTION_SETUP,
            subsection=script.category.value, description=script.description,
        ))

    items.append(_header(SECTION_SECURITY))
    for check in all_security_checks():
        items.append(_row(
            ItemKind.SECURITY, check.name, SECTION_SECURITY,
            description=check.description, good_when=check.good_when,
        ))

    items.append(_header(SECTION_IDENTITY))
    for check in all_identity_checks():
        items.append(_row(
            ItemKind.IDENTITY, check.name, SECTION_IDENTITY,
            description=check.description, good_when=check.good_when,
        ))

    for category in TOOL_CATEGORIES:
        tools = tools_by_category(category)
        if not tools:
            continue
        items.append(_header(SECTION_TOOLS, category.value, key=f"tools-{_slug(category.value)}"))
        for tool in tools:
            items.append(_row(
                ItemKind.TOOL, tool.name, SECTION_TOOLS,
                subsection=category.value, description=tool.description,
                method=tool.method.label,
            ))

    for section, kind, checks in (
        (SECTION_NETWORK, ItemKind.NETWORK, all_network_checks()),
        (SECTION_DISK, ItemKind.DISK, all_disk_checks()),
        (SECTION_CACHE, ItemKind.CACHE, all_cache_checks()),
    ):
        items.append(_header(section))
        for check in checks:
            items.append(_row(kind, check.name, section))

    return items


# ── Probes ──────────────────────────────────────────────────────


def system_info() -> str:
    """``Darwin 24.1.0 arm64 • macbook • jb • zsh``."""
    kernel = probes.read_command_output_line("uname", "-sr")
    arch = probes.read_command_output_line("uname", "-m")
    host = socket.gethostname().split(".")[0][:_MAX_HOSTNAME]
    user = os.environ.get("USER", "")
    shell = os.path.basename(os.environ.get("SHELL", ""))
    platform_part = " ".join(p for p in (kernel, arch) if p)
    return " • ".join(p for p in (platform_part, host, user, shell) if p)


def _by_name(checks, name: str):
    for check in checks:
        if check.name == name:
            return check
    return None


def probe_item(item: StatusItem) -> StatusItem:
    """Run the probe behind *item* and return the loaded row.

    Raises ``LookupError`` when the row names nothing in the catalog;
    the loader turns that (and any probe failure) into an empty row.
    """
    kind = item.kind
    if kind is ItemKind.HEADER:
        return item
    if kind is ItemKind.SYSINFO:
        return replace(item, detail=system_info(), loaded=True)

    if kind is ItemKind.SETUP:
        target = script_by_name(item.name)
    elif kind is ItemKind.SECURITY:
        target = _by_name(all_security_checks(), item.name)
    elif kind is ItemKind.IDENTITY:
        target = _by_name(all_identity_checks(), item.name)
    elif kind is ItemKind.TOOL:
        target = tool_by_name(item.name)
    elif kind is ItemKind.NETWORK:
        target = _by_name(all_network_checks(), item.name)
    elif kind is ItemKind.DISK:
        target = _by_name(all_disk_checks(), item.name)
    else:
        target = _by_name(all_cache_checks(), item.name)

    if target is None:
        raise LookupError(f"no {kind.value} named {item.name!r}")

    result = target.check()
    if kind in (ItemKind.NETWORK, ItemKind.DISK, ItemKind.CACHE):
        return item.with_resource(result)
    if result is None:
        return item.as_failed()
    return item.with_check(result)


# ── Engine ──────────────────────────────────────────────────────


class StatusLoader:
    """Concurrent prober over a list of status rows.

    Args:
        items: Rows to probe, defaults to ``build_items()``.
        probe: Row → loaded row.  Defaults to ``probe_item``.
    """

    def __init__(
        self,
        items: list[StatusItem] | None = None,
        *,
        probe: Callable[[StatusItem], StatusItem] = probe_item,
    ) -> None:
        self._items = list(items) if items is not None else build_items()
        self._index = {item.id: i for i, item in enumerate(self._items)}
        self._probe = probe
        self._lock = threading.Lock()
        self._started = False
        self._done: AllLoaded | None = None
        self._started_at = 0.0
        probe_count = sum(1 for item in self._items if not item.is_header)
        self._events: queue.Queue[StatusEvent] = queue.Queue(maxsize=probe_count + EVENT_SLACK)

    # ── Lifecycle ──

    def start(self) -> None:
        """Submit every probe.  Calling again is a no-op."""
        with self._lock:
            if self._started:
                return
            self._started = True
            self._started_at = time.monotonic()

        targets = [item for item in self._items if not item.is_header]
        logger.debug("Starting %d status probes", len(targets))

        pool = ThreadPoolExecutor(
            max_workers=max(len(targets), 1),
            thread_name_prefix="status-probe",
        )
        futures = [pool.submit(self._run_probe, item) for item in targets]

        merger = threading.Thread(
            target=self._merge,
            args=(pool, futures, len(targets)),
            name="status-merger",
            daemon=True,
        )
        merger.start()

    @property
    def started(self) -> bool:
        return self._started

    def _run_probe(self, item: StatusItem) -> None:
        try:
            loaded = self._probe(item)
            if not loaded.loaded:
                loaded = item.as_failed()
        except Exception as e:
            logger.debug("Probe %s failed: %s", item.id, e)
            loaded = item.as_failed()
        self._events.put(StatusUpdate(id=item.id, item=loaded))

    def _merge(self, pool: ThreadPoolExecutor, futures: list, total: int) -> None:
        wait(futures)
        pool.shutdown(wait=False)
        elapsed_ms = int((time.monotonic() - self._started_at) * 1000)
        logger.debug("All %d status probes finished in %dms", total, elapsed_ms)
        self._events.put(AllLoaded(total=total, elapsed_ms=elapsed_ms))

    # ── Consumption ──

    def wait_for_update(self, timeout: float | None = None) -> StatusEvent | None:
        """Next event, applied to the row table before it is returned.

        Returns ``None`` on timeout.  After the terminator has been
        consumed every call returns it again immediately.
        """
        if self._done is not None:
            return self._done
        if not self._started:
            self.start()
        try:
            event = self._events.get(timeout=timeout)
        except queue.Empty:
            return None

        if isinstance(event, AllLoaded):
            self._done = event
            return event

        with self._lock:
            idx = self._index.get(event.id)
            if idx is not None:
                self._items[idx] = event.item
        return event

    def iter_updates(self) -> Iterator[StatusEvent]:
        """Yield every event up to and including ``AllLoaded``."""
        while True:
            event = self.wait_for_update()
            if event is None:
                continue
            yield event
            if isinstance(event, AllLoaded):
                return

    def run(self) -> list[StatusItem]:
        """Probe everything and return the loaded rows."""
        for _ in self.iter_updates():
            pass
        return self.items()

    # ── State ──

    def items(self) -> list[StatusItem]:
        with self._lock:
            return list(self._items)

    def item(self, item_id: str) -> StatusItem | None:
        with self._lock:
            idx = self._index.get(item_id)
            return self._items[idx] if idx is not None else None

    @property
    def total_count(self) -> int:
        return sum(1 for item in self._items if not item.is_header)

    @property
    def loaded_count(self) -> int:
        with self._lock:
            return sum(1 for item in self._items if not item.is_header and item.loaded)

    def pending_count(self) -> int:
        """Probed rows still waiting for a result."""
        return self.total_count - self.loaded_count

    @property
    def all_loaded(self) -> bool:
        return self._done is not None
