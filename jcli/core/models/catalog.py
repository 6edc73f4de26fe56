"""
Catalog record types — tools, scripts, cleanables and checks.

Each record carries its own detection/install/clean callables, so a new
entry is declared in exactly one place (``jcli.core.services.catalog``)
and no central switch needs updating.  Records are frozen: the catalog
is built once at import and never mutated.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class InstallMethod(str, Enum):
    """How a tool gets onto the machine."""

    BREW_FORMULA = "brew"
    BREW_CASK = "cask"
    NPM = "npm"
    BUN = "bun"
    NVM = "nvm"
    XCODE = "xcode"
    MANUAL = "manual"
    MAS = "mas"

    @property
    def label(self) -> str:
        """Short label shown next to a tool in listings."""
        if self in (InstallMethod.BREW_FORMULA, InstallMethod.BREW_CASK):
            return "brew"
        if self is InstallMethod.MANUAL:
            return "sh"
        return self.value


# Methods the install executor can drive without a custom action
AUTO_INSTALL_METHODS = frozenset({
    InstallMethod.BREW_FORMULA,
    InstallMethod.BREW_CASK,
    InstallMethod.NPM,
    InstallMethod.BUN,
})


class ToolCategory(str, Enum):
    PACKAGE_MANAGERS = "Package Managers"
    RUNTIMES = "Runtimes"
    DEVOPS = "DevOps"
    AI = "AI"
    TERMINAL_GIT = "Terminal & Git"
    GUI_APPS = "GUI Apps"
    MAC_APP_STORE = "Mac App Store"


# Rendering order for status and listings
TOOL_CATEGORIES: tuple[ToolCategory, ...] = tuple(ToolCategory)


class ScriptCategory(str, Enum):
    TERMINAL = "Terminal"
    SECURITY = "Security"
    EDITOR = "Editor"
    SYSTEM = "System"


class Style(str, Enum):
    """Semantic color token, resolved to real colors by the UI."""

    SUCCESS = "success"
    WARNING = "warning"
    MUTED = "muted"
    SPECIAL = "special"


# ── Probe results ───────────────────────────────────────────────


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a tool/script/security/identity probe.

    ``status`` carries runtime state ("running", "stopped") or counts
    ("199 formulae, 6 casks"); ``detail`` carries paths.
    """

    installed: bool = False
    version: str = ""
    status: str = ""
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


NOT_INSTALLED = CheckResult()


@dataclass(frozen=True)
class ResourceResult:
    """Outcome of a network/disk/cache probe."""

    value: str = ""
    style: Style = Style.MUTED
    available: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "style": self.style.value, "available": self.available}


UNAVAILABLE = ResourceResult()


# ── Tools ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Tool:
    """A developer tool the CLI can detect, install and upgrade.

    Detection is either ``command`` on PATH (plus ``version_fn``) or a
    custom ``check_fn``.  Installation is ``method`` + ``formula`` or a
    custom ``install_fn``; custom actions raise ``ActionError`` on
    failure.
    """

    name: str
    category: ToolCategory
    description: str = ""
    command: str = ""
    version_fn: Callable[[], str] | None = None
    check_fn: Callable[[], CheckResult] | None = None
    method: InstallMethod = InstallMethod.MANUAL
    formula: str = ""
    install_fn: Callable[[], None] | None = None
    upgrade_fn: Callable[[], None] | None = None
    dependencies: tuple[str, ...] = ()
    scripts: tuple[str, ...] = ()

    @property
    def installable(self) -> bool:
        return self.method in AUTO_INSTALL_METHODS or self.install_fn is not None

    def check(self) -> CheckResult:
        if self.check_fn is not None:
            return self.check_fn()
        if not self.command:
            return NOT_INSTALLED

        from jcli.core.services import probes

        if not probes.command_exists(self.command):
            return NOT_INSTALLED
        version = self.version_fn() if self.version_fn else ""
        return CheckResult(installed=True, version=version)


# ── Scripts ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Script:
    """A setup/configuration task.

    A script without ``check_fn`` is run-once without state and is
    always presented as runnable.  ``run_fn`` returns a completion
    message and raises ``ActionError`` on failure.
    """

    name: str
    description: str
    category: ScriptCategory
    run_fn: Callable[[], str]
    check_fn: Callable[[], CheckResult] | None = None
    requires_tool: str = ""

    def check(self) -> CheckResult | None:
        return self.check_fn() if self.check_fn else None


# ── Cleanables ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Cleanable:
    name: str
    description: str
    clean_fn: Callable[[], None]
    size_fn: Callable[[], int] | None = None
    requires_command: str = ""


# ── Security / identity checks ──────────────────────────────────


@dataclass(frozen=True)
class SecurityCheck:
    """A posture check.  ``good_when`` picks which ``installed`` value is healthy."""

    name: str
    description: str
    check_fn: Callable[[], CheckResult]
    good_when: bool = True

    def check(self) -> CheckResult:
        return self.check_fn()

    def is_healthy(self, result: CheckResult) -> bool:
        return result.installed == self.good_when


@dataclass(frozen=True)
class IdentityCheck(SecurityCheck):
    """Same contract as ``SecurityCheck``, rendered under Identity."""


# ── Network / disk / cache checks ───────────────────────────────


@dataclass(frozen=True)
class ResourceCheck:
    name: str
    check_fn: Callable[[], ResourceResult]

    def check(self) -> ResourceResult:
        return self.check_fn()


@dataclass(frozen=True)
class DiskCheck:
    """Size probe for a path (``~`` allowed) or a custom ``check_fn``."""

    name: str
    path: str = ""
    style: Style = Style.MUTED
    check_fn: Callable[[], ResourceResult] | None = None

    def check(self) -> ResourceResult:
        if self.check_fn is not None:
            return self.check_fn()

        from jcli.core.services import probes
        from jcli.core.services.version_parsers import format_bytes

        size = probes.directory_size(probes.expand_home(self.path))
        if size > 0:
            return ResourceResult(value=format_bytes(size), style=self.style, available=True)
        return UNAVAILABLE


# ── Package managers ────────────────────────────────────────────


@dataclass(frozen=True)
class PackageManager:
    """A package manager whose global packages ``upgrade --<flag>`` refreshes."""

    name: str
    flag: str
    requires_command: str
    upgrade_fn: Callable[[], None]


# ── Skills ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class SkillRepo:
    repo: str  # owner/name
    description: str = ""


@dataclass(frozen=True)
class Skill:
    repo: str
    skill_name: str


# ── Run shortcuts ───────────────────────────────────────────────


@dataclass(frozen=True)
class RunSubcommand:
    name: str
    description: str
    run_fn: Callable[[list[str]], str | None]
    min_args: int = 0
    usage: str = ""


@dataclass(frozen=True)
class RunCommand:
    name: str
    description: str
    subcommands: tuple[RunSubcommand, ...] = field(default_factory=tuple)

    def subcommand(self, name: str) -> RunSubcommand | None:
        for sub in self.subcommands:
            if sub.name == name:
                return sub
        return None
