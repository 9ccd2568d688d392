"""Colorized console output for devai-lab commands.

Thin wrapper around :mod:`rich` that degrades gracefully when stdout
is not a TTY (e.g. piped, CI, make).  All user-facing status messages
should flow through this module; ``logger.*`` calls are kept for
diagnostics.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Shared console — auto-detects TTY; force_terminal=None lets Rich decide.
console = Console(stderr=False, force_terminal=None)

# Errors go to stderr so generated output on stdout stays clean.
err_console = Console(stderr=True, force_terminal=None)

# ── Symbols ────────────────────────────────────────────────────────────────

_PASS = "[bold green]✓[/]"
_FAIL = "[bold red]✗[/]"
_WARN = "[bold yellow]⚠[/]"
_DOT = "[dim]·[/]"

# ── Phase headers ──────────────────────────────────────────────────────────


def phase(title: str) -> None:
    """Print a bold phase header (e.g. ``GENERATE``, ``PUSH``)."""
    console.print()
    console.print(f"[bold blue]── {title} ──[/]")


# ── Status lines ───────────────────────────────────────────────────────────


def ok(msg: str) -> None:
    """Green checkmark + message."""
    console.print(f"  {_PASS} {escape(msg)}")


def fail(msg: str) -> None:
    """Red cross + message."""
    err_console.print(f"  {_FAIL} [red]{escape(msg)}[/]")


def warn(msg: str) -> None:
    """Yellow warning + message."""
    console.print(f"  {_WARN} [yellow]{escape(msg)}[/]")


def info(msg: str) -> None:
    """Dim dot + informational message."""
    console.print(f"  {_DOT} [dim]{escape(msg)}[/]")


def detail(key: str, value: str) -> None:
    """Key-value pair, indented."""
    console.print(f"    [bold]{escape(key)}[/]: {escape(str(value))}")


def error_msg(msg: str) -> None:
    """Bold red error message on stderr (not indented)."""
    err_console.print(f"[bold red]ERROR:[/] {escape(msg)}")


# ── Tables ────────────────────────────────────────────────────────────────


def table(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    highlight_row: Optional[int] = None,
) -> None:
    """Print a simple table; *highlight_row* (0-based) is shown in green."""
    tbl = Table(title=title, title_justify="left")
    for col in columns:
        tbl.add_column(col)
    for idx, row in enumerate(rows):
        style = "green" if idx == highlight_row else None
        tbl.add_row(*row, style=style)
    console.print()
    console.print(tbl)
