"""Console-friendly output helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


@dataclass
class StepOutcome:
    description: str
    ok: bool
    detail: str = ""


def heading(console: Console, title: str) -> None:
    console.print()
    console.print(Panel(Text(title), style="bold cyan", box=box.ROUNDED))


def info(console: Console, message: str) -> None:
    console.print(Text(message))


def success(console: Console, message: str) -> None:
    console.print(Text(message, style="green"))


def warn(console: Console, message: str) -> None:
    console.print(Text(f"Warning: {message}", style="yellow"))


def error(console: Console, message: str) -> None:
    console.print(Text(f"Error: {message}", style="bold red"))


def outcome_table(title: str, outcomes: Iterable[StepOutcome]) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("Step", style="bold")
    table.add_column("Result", justify="center")
    table.add_column("Detail")

    for outcome in outcomes:
        result = Text("ok", style="green") if outcome.ok else Text("failed", style="red")
        table.add_row(outcome.description, result, outcome.detail)
    return table
