"""
Remote lifecycle — ``j remote up | down | status``.

``auto`` currently always resolves to userspace; the mode is kept in
the settings so a system-daemon path can be selected later.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from jcli.core.models.remote import RemoteMode, RemoteSettings, RemoteStatus
from jcli.core.persistence.jrc_file import jrc_path, load_jrc, save_jrc
from jcli.core.services import probes
from jcli.core.services.remote import daemon, tailscale
from jcli.core.services.remote.errors import ConfigError, RemoteCommandError, RemoteError

logger = logging.getLogger(__name__)


# ── Settings ────────────────────────────────────────────────────


def load_remote_settings() -> RemoteSettings:
    return load_jrc().remote


def save_remote_settings(settings: RemoteSettings) -> None:
    """Replace the ``remote`` section, keeping the rest of ``jrc.json``."""
    config = load_jrc()
    config.remote = settings
    save_jrc(config)


def has_remote_settings() -> bool:
    if not jrc_path().is_file():
        return False
    try:
        load_remote_settings()
    except ConfigError:
        return False
    return True


def validate_settings(settings: RemoteSettings) -> RemoteSettings:
    """Normalized copy of *settings*, or ``ConfigError``."""
    try:
        return RemoteSettings.model_validate(settings.model_dump(mode="json"))
    except ValidationError as e:
        errors = e.errors()
        msg = errors[0].get("msg", str(e)) if errors else str(e)
        raise ConfigError(msg) from e


def resolve_mode(mode: RemoteMode) -> RemoteMode:
    if mode is RemoteMode.AUTO:
        return RemoteMode.USERSPACE
    return mode


# ── Lifecycle ───────────────────────────────────────────────────


def remote_up(settings: RemoteSettings) -> RemoteMode:
    """Bring the node onto the tailnet.

    Returns:
        The mode actually used.

    Raises:
        ConfigError: Invalid settings.
        RemoteError: Daemon or client failure.
    """
    settings = validate_settings(settings)
    mode = resolve_mode(settings.mode)

    if not probes.command_exists(tailscale.TAILSCALE):
        raise RemoteError("tailscale CLI not found. Run: j install tailscale")

    if mode is RemoteMode.USERSPACE:
        daemon.ensure_userspace_daemon()

    tailscale.tailscale_up(mode, settings)
    logger.info("Remote up (mode=%s)", mode.value)

    if mode is RemoteMode.USERSPACE:
        try:
            daemon.ensure_keep_awake()
        except RemoteError as e:
            logger.warning("Keep-awake not started: %s", e)
    return mode


def remote_down(settings: RemoteSettings) -> RemoteMode:
    """Disconnect, then stop keep-awake and the userspace daemon.

    The stops always run; a failing ``tailscale down`` is raised after.
    """
    mode = resolve_mode(settings.mode)

    result = tailscale.run_tailscale(mode, "down")
    daemon.stop_keep_awake()
    daemon.stop_userspace_daemon()

    if not result["ok"]:
        raise RemoteCommandError(tailscale.format_command_error(result["output"], result["error"]))
    logger.info("Remote down (mode=%s)", mode.value)
    return mode


def parse_status(
    data: dict,
    mode: RemoteMode,
    keep_awake: bool,
    daemon_running: bool = False,
) -> RemoteStatus:
    backend = str(data.get("BackendState") or "")
    me = data.get("Self")
    if not isinstance(me, dict):
        me = {}
    hostname = me.get("HostName") or me.get("DNSName") or ""
    ips = me.get("TailscaleIPs") or []
    return RemoteStatus(
        mode=mode,
        backend_state=backend,
        hostname=hostname,
        ip=ips[0] if ips else "",
        connected=backend == "Running",
        keep_awake=keep_awake,
        daemon_running=daemon_running,
    )


def remote_status(settings: RemoteSettings) -> RemoteStatus:
    """Current tailnet state.

    When the client cannot be reached the result is partial: ``mode``,
    ``keep_awake`` and ``daemon_running`` are filled in and ``error``
    says why the rest is empty.
    """
    mode = resolve_mode(settings.mode)
    keep_awake = daemon.is_keep_awake_running()
    daemon_running = mode is RemoteMode.USERSPACE and daemon.is_daemon_running()

    data = tailscale.tailscale_status(mode)
    if data is None:
        logger.debug("tailscale status unavailable (mode=%s)", mode.value)
        return RemoteStatus(
            mode=mode,
            keep_awake=keep_awake,
            daemon_running=daemon_running,
            error="tailscale is not running (run: j remote up)",
        )
    return parse_status(data, mode, keep_awake, daemon_running)
