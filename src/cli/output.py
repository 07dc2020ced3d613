"""Rich-based terminal rendering for the bitbucket-client CLI.

Status lines, webhook tables and project/repository listings all go through
OutputHandler, which honours --verbosity and --no-color.
"""

from typing import Iterable, Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner
from rich.table import Table

from src.models.project import Project, Repository
from src.models.webhook import Webhook


class OutputHandler:
    """Writes CLI status messages and listings to a Rich console.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Webhook registered")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Show a spinner while a single request is in flight.

        Example:
            >>> with handler.spinner("Registering webhook..."):
            ...     client.register_webhook(request)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_webhooks(self, webhooks: Iterable[Webhook]) -> int:
        """Render webhooks as a table, consuming the iterable once.

        Returns:
            Number of webhooks printed
        """
        table = Table(title="Webhooks")
        table.add_column("ID", justify="right")
        table.add_column("Name")
        table.add_column("URL")
        table.add_column("Events")
        table.add_column("Active")

        count = 0
        for webhook in webhooks:
            table.add_row(
                str(webhook.id) if webhook.id is not None else "-",
                webhook.name or "",
                webhook.url or "",
                ", ".join(sorted(webhook.events)),
                "yes" if webhook.active else "no",
            )
            count += 1

        if count == 0:
            self.console.print("[yellow]No webhooks found[/yellow]")
        else:
            self.console.print(table)
        return count

    def print_repositories(self, repositories: Iterable[Repository]) -> int:
        """Render repositories, one per line. Returns the number printed."""
        count = 0
        for repository in repositories:
            self.console.print(
                f"  {repository.project.key}/{repository.slug}  [dim]{repository.name}[/dim]"
            )
            count += 1
        if count == 0:
            self.console.print("[yellow]No repositories found[/yellow]")
        return count

    def print_projects(self, projects: Iterable[Project]) -> int:
        """Render projects, one per line. Returns the number printed."""
        count = 0
        for project in projects:
            self.console.print(f"  {project.key}  [dim]{project.name}[/dim]")
            count += 1
        if count == 0:
            self.console.print("[yellow]No projects found[/yellow]")
        return count
