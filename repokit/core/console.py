"""
User-facing status output.

Every command reports progress as short glyph-prefixed lines; this module
keeps the glyphs and colors in one place.
"""

from typing import Iterable, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table


class StatusConsole:
    """
    Thin wrapper around a rich Console.

    Args:
        console: The rich console to write to. A new one is created if omitted.
        assume_yes: Answer every confirmation prompt with "yes".
        step_glyph: Glyph printed in front of step messages.
    """

    def __init__(
        self,
        console: Console | None = None,
        assume_yes: bool = False,
        step_glyph: str = "🔧",
    ):
        self.console = console or Console()
        self.assume_yes = assume_yes
        self.step_glyph = step_glyph

    def status(self, message: str) -> None:
        self.console.print(f"[blue]{self.step_glyph}[/blue] {message}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✅[/green] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]❌[/red] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[magenta]ℹ️[/magenta] {message}")

    def line(self, message: str = "") -> None:
        self.console.print(message, highlight=False)

    def lines(self, messages: Iterable[str], indent: str = "  ") -> None:
        for message in messages:
            self.console.print(f"{indent}{message}", highlight=False)

    def header(self, title: str) -> None:
        self.console.print(Panel(f"[bold blue]{title}[/]", expand=False))

    def section(self, title: str) -> None:
        self.status(f"=== {title} ===")

    def flag(self, label: str, enabled: bool) -> None:
        self.line(f"  {label}: {'✅' if enabled else '❌'}")

    def table(
        self, title: str, columns: Sequence[str], rows: Iterable[Sequence[str]]
    ) -> None:
        table = Table(title=title, show_header=True, header_style="bold magenta")
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*[str(cell) for cell in row])
        self.console.print(table)

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question; `assume_yes` short-circuits to True."""
        if self.assume_yes:
            return True
        return Confirm.ask(question, default=default, console=self.console)
