#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Console output helpers for hostsweep (rich rules and tables).
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple, Union

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich import box

from hostsweep.constants import PROJECT_URL, TAGLINE

console = Console(highlight=False)

Cell = Union[str, Text]


def p(text: str = "") -> None:
    console.print(text, highlight=False)


def print_header() -> None:
    console.print("hostsweep", style="bold green", highlight=False)
    console.print(f"{TAGLINE} {PROJECT_URL}", style="dim", highlight=False)


def section(s: str) -> None:
    console.print(f"\n\n[bold cyan]➤ {s}[/bold cyan]")
    console.rule("", style="bold cyan")


def line_ok(s: str) -> None:
    console.print(f"[bold green]✓[/bold green] {s}", highlight=False)


def line_do(s: str) -> None:
    console.print(f"[cyan]→[/cyan] {s}", highlight=False)


def line_skip(s: str) -> None:
    console.print(f"[dim]○ {s}[/dim]", highlight=False)


def line_warn(s: str) -> None:
    console.print(f"[bold yellow]! {s}[/bold yellow]", highlight=False)


def kv_table(title_str: str, rows: Sequence[Tuple[str, Cell]]) -> None:
    t = Table(title=title_str, box=box.SIMPLE_HEAVY, show_header=False, title_style="bold")
    t.add_column("Key", style="bold")
    t.add_column("Value")
    for k, v in rows:
        t.add_row(k, v)
    console.print(t)


def table(title_str: str, headers: List[str], rows: Sequence[Sequence[Cell]],
          caption: Optional[str] = None) -> None:
    t = Table(title=title_str, box=box.SIMPLE_HEAVY, header_style="bold", title_style="bold",
              caption=caption)
    for h in headers:
        t.add_column(h, overflow="fold")
    for r in rows:
        t.add_row(*r)
    console.print(t)
