"""
Shell completion for positional arguments.

Candidates already given on the command line are not offered again.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import click
from click.shell_completion import CompletionItem


def _complete(names: Callable[[], Iterable[tuple[str, str]]]):
    def _callback(ctx: click.Context, param: click.Parameter, incomplete: str) -> list[CompletionItem]:
        given = set(ctx.params.get(param.name or "", None) or ())
        return [
            CompletionItem(name, help=help_text)
            for name, help_text in names()
            if name.startswith(incomplete) and name not in given
        ]

    return _callback


def _installable_tools() -> Iterable[tuple[str, str]]:
    from jcli.core.services.catalog.tools import installable_tools

    return ((t.name, t.description) for t in installable_tools())


def _all_tools() -> Iterable[tuple[str, str]]:
    from jcli.core.services.catalog.tools import all_tools

    return ((t.name, t.description) for t in all_tools())


def _cleanables() -> Iterable[tuple[str, str]]:
    from jcli.core.services.catalog.cleanables import available_cleanables

    return ((c.name, c.description) for c in available_cleanables())


def _scripts() -> Iterable[tuple[str, str]]:
    from jcli.core.services.catalog.scripts import all_scripts

    return ((s.name, s.description) for s in all_scripts())


complete_installable_tools = _complete(_installable_tools)
complete_tools = _complete(_all_tools)
complete_cleanables = _complete(_cleanables)
complete_scripts = _complete(_scripts)
