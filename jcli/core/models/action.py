"""
Action result — the outcome of one install / upgrade / clean / script run.

Executors never raise for a single item: failures are captured here so
list operations can report each one and carry on.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class ActionResult:
    name: str
    ok: bool = True
    message: str = ""
    error: str = ""
    skipped: bool = False

    @classmethod
    def success(cls, name: str, message: str = "") -> ActionResult:
        return cls(name=name, ok=True, message=message)

    @classmethod
    def failure(cls, name: str, error: str) -> ActionResult:
        return cls(name=name, ok=False, error=error)

    @classmethod
    def skip(cls, name: str, message: str) -> ActionResult:
        return cls(name=name, ok=True, message=message, skipped=True)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
