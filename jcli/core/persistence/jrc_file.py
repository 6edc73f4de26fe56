"""
jrc.json persistence — atomic read/write for ``JRCConfig``.

The file holds secrets (Tailscale auth keys), so it is written ``0600``
inside a ``0700`` directory.  Writes go to ``jrc.json.tmp`` first and
are renamed over the final path; a crash mid-write never leaves a
half-written config behind.

Unlike the status caches, a broken config is never papered over:
invalid JSON or a failed validation raises ``ConfigError``.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from jcli.core.models.remote import JRCConfig
from jcli.core.services import probes
from jcli.core.services.remote.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = ".config/jterrazz"
CONFIG_FILE = "jrc.json"

DIR_MODE = 0o700
FILE_MODE = 0o600


def config_dir() -> Path:
    return probes.home_dir() / CONFIG_DIR


def jrc_path() -> Path:
    """``~/.config/jterrazz/jrc.json``."""
    return config_dir() / CONFIG_FILE


def load_jrc(path: Path | None = None) -> JRCConfig:
    """Load the config file.

    Args:
        path: Override for the default location.

    Returns:
        Validated config.  A missing or blank file yields defaults.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object,
            or fails validation.
    """
    path = path or jrc_path()
    if not path.is_file():
        logger.debug("No config at %s, using defaults", path)
        return JRCConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config {path}: {e}") from e

    if not raw.strip():
        return JRCConfig()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"failed to parse config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"invalid config {path}: expected a JSON object")

    try:
        config = JRCConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {_first_error(e)}") from e

    logger.debug("Loaded config from %s", path)
    return config


def save_jrc(config: JRCConfig, path: Path | None = None) -> Path:
    """Validate and atomically write the config.

    Returns:
        The path written.

    Raises:
        ConfigError: If the config is invalid or the write fails.
    """
    path = path or jrc_path()

    # Re-validate: callers may have mutated fields after construction
    try:
        config = JRCConfig.model_validate(config.model_dump(mode="json"))
    except ValidationError as e:
        raise ConfigError(f"invalid config: {_first_error(e)}") from e

    content = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    tmp = path.with_name(path.name + ".tmp")

    try:
        path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        os.chmod(path.parent, DIR_MODE)

        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            # O_CREAT mode is masked by umask and ignored for an existing tmp
            os.chmod(tmp, FILE_MODE)
            os.replace(tmp, path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise ConfigError(f"failed to write config {path}: {e}") from e

    logger.debug("Config saved to %s", path)
    return path


def _first_error(e: ValidationError) -> str:
    errors = e.errors()
    if not errors:
        return str(e)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    msg = first.get("msg", "")
    return f"{loc}: {msg}" if loc else msg
