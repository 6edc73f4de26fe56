"""
CLI commands: ``j remote setup | up | down | status``.

Settings live in ``~/.config/jterrazz/jrc.json`` under ``remote``.
``setup``, ``up`` and ``down`` turn a ``RemoteError`` into a red line and
exit code 1.  ``status`` (also bare ``j remote``) falls back to the
configured settings when the client cannot be queried.
"""

from __future__ import annotations

import json
import sys

import click

from jcli.ui.cli import output


def _fail(e: Exception) -> None:
    output.error(str(e))
    sys.exit(1)


def _settings():
    from jcli.core.services.remote.errors import RemoteError
    from jcli.core.services.remote.lifecycle import load_remote_settings

    try:
        return load_remote_settings()
    except RemoteError as e:
        _fail(e)


@click.group(invoke_without_command=True)
@click.pass_context
def remote(ctx: click.Context) -> None:
    """Reach this machine over Tailscale.  Without a subcommand, shows status."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(remote_status_cmd)


# ── setup ───────────────────────────────────────────────────────


@remote.command("setup")
def remote_setup() -> None:
    """Interactively configure mode, auth and hostname."""
    from jcli.core.models.remote import RemoteAuthMethod, RemoteMode
    from jcli.core.services.remote.errors import RemoteError
    from jcli.core.services.remote.lifecycle import (
        has_remote_settings,
        save_remote_settings,
    )

    current = _settings() if has_remote_settings() else None
    defaults = current.model_dump() if current else {}

    mode = click.prompt(
        "Mode",
        type=click.Choice([m.value for m in RemoteMode]),
        default=(current.mode.value if current else RemoteMode.USERSPACE.value),
    )
    auth_method = click.prompt(
        "Auth method",
        type=click.Choice([a.value for a in RemoteAuthMethod]),
        default=(current.auth_method.value if current else RemoteAuthMethod.OAUTH.value),
    )

    secret = ""
    if auth_method == RemoteAuthMethod.AUTHKEY.value:
        existing = defaults.get("secret", "")
        secret = click.prompt(
            "Auth key" + (" (leave empty to keep current)" if existing else ""),
            hide_input=True,
            default=existing or None,
            show_default=False,
        )

    hostname = click.prompt(
        "Hostname (optional)",
        default=defaults.get("hostname", ""),
        show_default=bool(defaults.get("hostname")),
    )

    try:
        settings = _new_settings(mode, auth_method, secret, hostname)
        save_remote_settings(settings)
    except RemoteError as e:
        _fail(e)

    output.success("Remote settings saved")
    output.dim("Run 'j remote up' to connect")


def _new_settings(mode: str, auth_method: str, secret: str, hostname: str):
    from pydantic import ValidationError

    from jcli.core.models.remote import RemoteSettings
    from jcli.core.services.remote.errors import ConfigError

    try:
        return RemoteSettings(mode=mode, auth_method=auth_method, secret=secret, hostname=hostname)
    except ValidationError as e:
        errors = e.errors()
        raise ConfigError(errors[0].get("msg", str(e)) if errors else str(e)) from e


# ── up / down ───────────────────────────────────────────────────


@remote.command("up")
def remote_up_cmd() -> None:
    """Start the daemon and join the tailnet."""
    from jcli.core.services.remote.errors import RemoteError
    from jcli.core.services.remote.lifecycle import remote_up

    settings = _settings()
    output.action("🌐", "Connecting to tailnet...")
    try:
        mode = remote_up(settings)
    except RemoteError as e:
        _fail(e)
    output.success(f"Remote up ({mode.value})")


@remote.command("down")
def remote_down_cmd() -> None:
    """Leave the tailnet and stop background processes."""
    from jcli.core.services.remote.errors import RemoteError
    from jcli.core.services.remote.lifecycle import remote_down

    settings = _settings()
    try:
        remote_down(settings)
    except RemoteError as e:
        _fail(e)
    output.success("Remote down")


# ── status ──────────────────────────────────────────────────────


@remote.command("status")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def remote_status_cmd(as_json: bool) -> None:
    """Show connection state, address and keep-awake."""
    from jcli.core.services.remote.lifecycle import remote_status

    settings = _settings()
    status = remote_status(settings)

    if as_json:
        click.echo(json.dumps(status.model_dump(mode="json"), indent=2))
        return

    if status.error:
        output.warning("Unable to query remote runtime status")
        output.dim(status.error)
        output.row(True, "Configured mode", settings.mode.value)
        output.row(True, "Auth method", settings.auth_method.value)
        if settings.hostname:
            output.row(True, "Hostname", settings.hostname)
        output.row(status.keep_awake, "Keep awake", "on" if status.keep_awake else "off")
        return

    output.row(status.connected, "Connected", status.backend_state or "unknown")
    output.row(True, "Mode", status.mode.value)
    if status.hostname:
        output.row(True, "Hostname", status.hostname)
    if status.ip:
        output.row(True, "IP", status.ip)
    output.row(status.keep_awake, "Keep awake", "on" if status.keep_awake else "off")
