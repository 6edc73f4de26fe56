"""
Resource probes — network, disk and cache checks for ``j status``.

Each check returns a ``ResourceResult`` (value, style token, available).
Parsing is split from probing so the output formats can be tested
without a Mac.
"""

from __future__ import annotations

import json

from jcli.core.models.catalog import UNAVAILABLE, DiskCheck, ResourceCheck, ResourceResult, Style
from jcli.core.services import probes
from jcli.core.services.version_parsers import format_bytes

PUBLIC_IP_TIMEOUT = 2

COMMON_PORTS: dict[str, str] = {
    "22": "ssh", "80": "http", "443": "https", "3000": "dev",
    "5432": "postgres", "3306": "mysql", "6379": "redis", "27017": "mongo",
    "8080": "http-alt", "9000": "php-fpm", "5000": "flask",
}

_MAX_LISTENING_SHOWN = 4
_MAX_DNS_SERVERS = 3
_DISK_WARN_CAPACITY = 90


# ── Parsers ─────────────────────────────────────────────────────


def parse_vpn_list(text: str) -> str | None:
    """Name of the first connected VPN in ``scutil --nc list``.

    Returns ``"connected"`` when the line has no quoted name, ``None``
    when nothing is connected.
    """
    for line in text.split("\n"):
        if "(Connected)" not in line:
            continue
        end = line.rfind('"')
        if end > 0:
            start = line.rfind('"', 0, end)
            if 0 <= start < end:
                return line[start + 1:end]
        return "connected"
    return None


def parse_dns_servers(text: str, limit: int = _MAX_DNS_SERVERS) -> list[str]:
    """Unique non-loopback ``nameserver[N] : X`` entries of ``scutil --dns``."""
    servers: list[str] = []
    for line in text.split("\n"):
        if "nameserver[" not in line:
            continue
        idx = line.find("] : ")
        if idx == -1:
            continue
        server = line[idx + 4:].strip()
        if server in ("", "127.0.0.1", "::1") or server in servers:
            continue
        if len(servers) < limit:
            servers.append(server)
    return servers


def parse_listening_ports(text: str) -> str:
    """Summarize ``lsof -iTCP -sTCP:LISTEN -P -n`` as ``"ssh:22, dev:3000 +2"``."""
    lines = text.strip().split("\n")
    ports: dict[str, str] = {}
    for line in lines[1:]:
        fields = line.split()
        if len(fields) < 9:
            continue
        command, addr = fields[0], fields[8]
        idx = addr.rfind(":")
        if idx >= 0:
            ports.setdefault(addr[idx + 1:], command)

    if not ports:
        return "none"

    ordered = sorted(ports, key=lambda p: (not p.isdigit(), int(p) if p.isdigit() else 0, p))
    shown = [
        f"{COMMON_PORTS.get(port, ports[port])}:{port}"
        for port in ordered[:_MAX_LISTENING_SHOWN]
    ]
    extra = len(ports) - len(shown)
    return ", ".join(shown) + (f" +{extra}" if extra > 0 else "")


def parse_df(text: str) -> ResourceResult:
    """``df -k /`` → ``"143.9 GB free of 460.4 GB"``, warning when nearly full."""
    lines = text.strip().split("\n")
    if len(lines) < 2:
        return UNAVAILABLE
    fields = lines[1].split()
    try:
        size = int(fields[1]) * 1024
        avail = int(fields[3]) * 1024
        capacity = int(fields[4].rstrip("%"))
    except (IndexError, ValueError):
        return UNAVAILABLE
    style = Style.WARNING if capacity >= _DISK_WARN_CAPACITY else Style.MUTED
    return ResourceResult(
        value=f"{format_bytes(avail)} free of {format_bytes(size)}",
        style=style,
        available=True,
    )


def parse_tailscale_backend(raw: str) -> bool:
    """True when ``tailscale status --json`` reports ``BackendState == "Running"``."""
    try:
        data = json.loads(raw)
    except ValueError:
        return False
    return isinstance(data, dict) and data.get("BackendState") == "Running"


# ── Network checks ──────────────────────────────────────────────


def _check_local_ip() -> ResourceResult:
    ip = probes.read_command_output_line("ipconfig", "getifaddr", "en0")
    return ResourceResult(value=ip, available=True) if ip else UNAVAILABLE


def _check_public_ip() -> ResourceResult:
    ip = probes.read_command_output_line(
        "curl", "-s", "--max-time", str(PUBLIC_IP_TIMEOUT), "-4", "ifconfig.me",
        timeout=PUBLIC_IP_TIMEOUT + 1,
    )
    return ResourceResult(value=ip, available=True) if ip else UNAVAILABLE


def _check_tailscale() -> ResourceResult:
    if not probes.command_exists("tailscale"):
        return UNAVAILABLE
    result = probes.capture("tailscale", "status", "--json")
    if not result["ok"]:
        return UNAVAILABLE
    if not parse_tailscale_backend(result["output"]):
        return ResourceResult(value="disconnected", style=Style.MUTED, available=True)
    ip = probes.read_command_output_line("tailscale", "ip", "-4")
    return ResourceResult(value=ip or "connected", style=Style.SUCCESS, available=True)


def _check_vpn() -> ResourceResult:
    name = parse_vpn_list(probes.capture("scutil", "--nc", "list")["output"])
    if name is None:
        return UNAVAILABLE
    return ResourceResult(value=name, style=Style.SUCCESS, available=True)


def _check_dns() -> ResourceResult:
    servers = parse_dns_servers(probes.capture("scutil", "--dns")["output"])
    if not servers:
        return UNAVAILABLE
    return ResourceResult(value=", ".join(servers), available=True)


def _check_listening() -> ResourceResult:
    out = probes.capture("lsof", "-iTCP", "-sTCP:LISTEN", "-P", "-n")["output"]
    return ResourceResult(value=parse_listening_ports(out), available=True)


NETWORK_CHECKS: tuple[ResourceCheck, ...] = (
    ResourceCheck(name="local ip", check_fn=_check_local_ip),
    ResourceCheck(name="public ip", check_fn=_check_public_ip),
    ResourceCheck(name="tailscale", check_fn=_check_tailscale),
    ResourceCheck(name="vpn", check_fn=_check_vpn),
    ResourceCheck(name="dns", check_fn=_check_dns),
    ResourceCheck(name="listening", check_fn=_check_listening),
)


# ── Disk checks ─────────────────────────────────────────────────


def _check_root_volume() -> ResourceResult:
    result = probes.capture("df", "-k", "/")
    if not result["ok"]:
        return UNAVAILABLE
    return parse_df(result["output"])


DISK_CHECKS: tuple[DiskCheck, ...] = (
    DiskCheck(name="macintosh hd", check_fn=_check_root_volume),
    DiskCheck(name="downloads", path="~/Downloads"),
    DiskCheck(name="developer", path="~/Developer"),
)


# ── Cache checks ────────────────────────────────────────────────


def _check_docker_cache() -> ResourceResult:
    if not probes.command_exists("docker"):
        return UNAVAILABLE
    out = probes.read_command_output_line("docker", "system", "df", "--format", "{{.Size}}")
    sizes = [line.strip() for line in out.split("\n") if line.strip()]
    if not sizes:
        return UNAVAILABLE
    return ResourceResult(value=" + ".join(sizes), available=True)


def _check_multipass_cache() -> ResourceResult:
    if not probes.command_exists("multipass"):
        return UNAVAILABLE
    size = probes.directory_size(probes.expand_home("~/Library/Application Support/multipassd"))
    if size <= 0:
        return UNAVAILABLE
    return ResourceResult(value=format_bytes(size), available=True)


CACHE_CHECKS: tuple[DiskCheck, ...] = (
    DiskCheck(name="docker", check_fn=_check_docker_cache),
    DiskCheck(name="xcode derived", path="~/Library/Developer/Xcode/DerivedData"),
    DiskCheck(name="xcode archives", path="~/Library/Developer/Xcode/Archives"),
    DiskCheck(name="ios device support", path="~/Library/Developer/Xcode/iOS DeviceSupport"),
    DiskCheck(name="cocoapods cache", path="~/Library/Caches/CocoaPods"),
    DiskCheck(name="homebrew cache", path="~/Library/Caches/Homebrew"),
    DiskCheck(name="multipass", check_fn=_check_multipass_cache),
    DiskCheck(name="npm cache", path="~/.npm"),
    DiskCheck(name="pnpm cache", path="~/Library/pnpm"),
    DiskCheck(name="yarn cache", path="~/Library/Caches/Yarn"),
    DiskCheck(name="go modules", path="~/go/pkg/mod"),
    DiskCheck(name="gradle cache", path="~/.gradle/caches"),
    DiskCheck(name="system logs", path="/var/log"),
    DiskCheck(name="user logs", path="~/Library/Logs"),
    DiskCheck(name="trash", path="~/.Trash"),
)


def all_network_checks() -> list[ResourceCheck]:
    return list(NETWORK_CHECKS)


def all_disk_checks() -> list[DiskCheck]:
    return list(DISK_CHECKS)


def all_cache_checks() -> list[DiskCheck]:
    return list(CACHE_CHECKS)
