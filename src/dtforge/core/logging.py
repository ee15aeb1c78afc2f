# src/dtforge/core/logging.py
"""Console logging built on rich, shared by every dtforge module."""

import os
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from rich.console import Console
from rich.table import Table

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}

# Markup helpers used inside log messages, e.g. color_palette['table']('users')
color_palette: Dict[str, Callable[[Any], str]] = {
    "table": lambda text: f"[bold blue]{text}[/bold blue]",
    "column": lambda text: f"[cyan]{text}[/cyan]",
    "query": lambda text: f"[dim]{text}[/dim]",
    "value": lambda text: f"[magenta]{text}[/magenta]",
    "source": lambda text: f"[green]{text}[/green]",
}


class Logger:
    """Leveled logger that prints rich markup with section and indent support."""

    def __init__(self, console: Optional[Console] = None, level: Optional[str] = None):
        self.console = console or Console(stderr=True)
        self.level = LEVELS.get(
            (level or os.getenv("DTFORGE_LOG_LEVEL", "INFO")).upper(), LEVELS["INFO"]
        )
        self._indent = 0

    def set_level(self, level: str) -> None:
        self.level = LEVELS.get(level.upper(), self.level)

    def is_enabled(self, level: str) -> bool:
        return LEVELS[level] >= self.level

    def _emit(self, level: str, prefix: str, message: str) -> None:
        if not self.is_enabled(level):
            return
        pad = "  " * self._indent
        self.console.print(f"{pad}{prefix} {message}", highlight=False)

    def debug(self, message: str) -> None:
        self._emit("DEBUG", "[dim]·[/dim]", message)

    def info(self, message: str) -> None:
        self._emit("INFO", "[blue]ℹ[/blue]", message)

    def success(self, message: str) -> None:
        self._emit("INFO", "[green]✓[/green]", message)

    def warn(self, message: str) -> None:
        self._emit("WARNING", "[yellow]⚠[/yellow]", message)

    def section(self, title: str) -> None:
        if self.is_enabled("INFO"):
            self.console.rule(f"[bold]{title}[/bold]")

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._indent += 1
        try:
            yield
        finally:
            self._indent -= 1

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log how long the wrapped block took, at debug level."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            self.debug(f"{label} took {color_palette['value'](f'{elapsed:.2f}ms')}")

    def table(self, headers: List[str], rows: List[List[Any]]) -> None:
        if not self.is_enabled("INFO"):
            return
        table = Table(box=None, padding=(0, 1))
        for header in headers:
            table.add_column(header, style="cyan")
        for row in rows:
            table.add_row(*[str(cell) for cell in row])
        self.console.print(table)


log = Logger()
