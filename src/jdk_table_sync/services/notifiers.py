"""
Notification channels for reconciliation results.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel

from ..logging_config import configure_logger_for_sync_trace
from .host import Notifier, Project

logger = configure_logger_for_sync_trace(__name__)


class LoggingNotifier(Notifier):
    """
    Writes notifications to the trace log.

    ::: This is-in-layer Presentation-Layer.
    ::: This is a handler.
    ::: This is stateless.
    """

    def notify(self, project: Project, title: str, message: str) -> None:
        logger.info(f"[Notify] {project.name}: {title} - {message}")


class ConsoleNotifier(Notifier):
    """
    Renders notifications as a rich panel.

    ::: This is-in-layer Presentation-Layer.
    ::: This is a handler.
    ::: This is stateless.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def notify(self, project: Project, title: str, message: str) -> None:
        self.console.print(Panel(
            message,
            title=f"[bold green]{title}[/bold green]",
            subtitle=f"[dim]{project.name}[/dim]",
            border_style="green",
            expand=False,
        ))
