"""
User identity and repository locations shared by catalog entries.
"""

from __future__ import annotations

import os
from pathlib import Path

from jcli.core.services import probes

USER_EMAIL = "admin@jterrazz.com"
USER_NAME = "Jean-Baptiste Music"


def repo_config_roots() -> list[Path]:
    """Places the jterrazz-cli repository (and its config files) may live."""
    return [
        probes.home_dir() / "Developer" / "jterrazz-cli",
        Path("/usr/local/share/jterrazz-cli"),
    ]


def repo_config_path(relative_path: str) -> Path:
    """Absolute path of a file shipped in the repository.

    Raises:
        FileNotFoundError: No known root contains *relative_path*.
    """
    for root in repo_config_roots():
        candidate = root / relative_path
        if os.path.exists(candidate):
            return candidate
    raise FileNotFoundError(f"config file not found: {relative_path}")
