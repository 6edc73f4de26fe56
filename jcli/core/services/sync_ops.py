"""
Template sync — wraps ``copier`` to keep projects in line with the
shared project template.

A project is "linked" when it has a ``.copier-answers.yml``.  Every
copier call runs with ``--trust`` (the template runs tasks) and is
attached to the terminal so copier can ask its questions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from jcli.core.services import probes
from jcli.core.services.catalog.user import repo_config_path
from jcli.core.services.tool_install.subprocess_runner import run_interactive

logger = logging.getLogger(__name__)

COPIER = "copier"
ANSWERS_FILE = ".copier-answers.yml"
TEMPLATE_RELATIVE = "dotfiles/templates"
DEVELOPER_DIR = "Developer"

# First match wins
_LANGUAGE_MARKERS: tuple[tuple[str, str], ...] = (
    ("go.mod", "go"),
    ("package.json", "typescript"),
    ("pyproject.toml", "python"),
    ("setup.py", "python"),
)


def copier_available() -> bool:
    return probes.command_exists(COPIER)


def has_answers(project: Path) -> bool:
    return (project / ANSWERS_FILE).is_file()


def detect_language(project: Path) -> str:
    """``go`` / ``typescript`` / ``python`` from marker files, ``""`` if unknown."""
    for marker, language in _LANGUAGE_MARKERS:
        if (project / marker).exists():
            return language
    return ""


def template_path() -> Path:
    """Local checkout of the template.  Raises ``FileNotFoundError``."""
    return repo_config_path(TEMPLATE_RELATIVE)


def _copier(args: list[str], project: Path) -> dict[str, Any]:
    if not copier_available():
        return {"ok": False, "error": "copier not installed. Run: j install copier"}
    return run_interactive([COPIER, *args], cwd=str(project))


# ── Operations ──────────────────────────────────────────────────


def sync_update(project: Path) -> dict[str, Any]:
    if not has_answers(project):
        return {"ok": False, "error": f"No {ANSWERS_FILE} found in {project}", "unlinked": True}
    return _copier(["update", "--trust"], project)


def sync_diff(project: Path) -> dict[str, Any]:
    if not has_answers(project):
        return {"ok": False, "error": f"No {ANSWERS_FILE} found in {project}", "unlinked": True}
    return _copier(["update", "--pretend", "--diff", "--trust"], project)


def init_args(template: Path, language: str) -> list[str]:
    args = ["copy", "--trust"]
    if language:
        args += ["--data", f"language={language}"]
    return args + [str(template), "."]


def sync_init(project: Path) -> dict[str, Any]:
    """Generate *project* from the template.

    Returns:
        ``{"ok": True, "language": ..., "template": ...}`` or error dict.
    """
    if has_answers(project):
        return {"ok": False, "error": f"Project already linked to a template ({ANSWERS_FILE} exists)"}
    try:
        template = template_path()
    except FileNotFoundError as e:
        return {"ok": False, "error": f"Template not found: {e}"}

    language = detect_language(project)
    result = _copier(init_args(template, language), project)
    if not result["ok"]:
        return result
    return {"ok": True, "language": language, "template": str(template)}


def read_answers(project: Path) -> dict[str, Any]:
    """Parsed ``.copier-answers.yml``.

    Returns:
        ``{"ok": True, "answers": {...}}`` or ``{"ok": False, "error": ...}``.
    """
    path = project / ANSWERS_FILE
    if not path.is_file():
        return {"ok": False, "error": f"No {ANSWERS_FILE} found", "unlinked": True}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        return {"ok": False, "error": f"Failed to read {ANSWERS_FILE}: {e}"}
    except yaml.YAMLError as e:
        return {"ok": False, "error": f"Invalid YAML in {ANSWERS_FILE}: {e}"}
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return {"ok": False, "error": f"Expected a YAML mapping in {ANSWERS_FILE}"}
    return {"ok": True, "answers": data}


def linked_projects(root: Path | None = None) -> list[Path]:
    """Direct children of ``~/Developer`` that carry copier answers."""
    root = root or probes.home_dir() / DEVELOPER_DIR
    if not root.is_dir():
        return []
    return sorted(p for p in root.iterdir() if p.is_dir() and has_answers(p))


def sync_all(root: Path | None = None) -> list[dict[str, Any]]:
    """``copier update`` in every linked project, continuing past failures."""
    results = []
    for project in linked_projects(root):
        logger.info("Syncing %s", project)
        result = sync_update(project)
        results.append({"project": str(project), **result})
    return results
