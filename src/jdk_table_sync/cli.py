"""
Command line entry point.

    jdk-table-sync watch --project DIR    run the loop until interrupted
    jdk-table-sync check --project DIR    run one cycle and print the result
    jdk-table-sync show  --project DIR    print the resolved table file and its entries

The registry defaults to <project>/.jdk_table_sync/jdks.json.
"""

import argparse
import logging
import os
import signal
import sys
import threading
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .logging_config import (
    configure_logger_for_sync_trace,
    reconfigure_log_directory,
    restore_stderr_logging,
    suppress_stderr_logging,
)
from .models import CycleReport, JdkEntry
from .sync_exceptions import JdkSyncError
from .services.config_loader import SyncConfig, get_config_loader, load_config
from .services.host import Project
from .services.jdk_registry import JsonFileJdkRegistry
from .services.notifiers import ConsoleNotifier, LoggingNotifier
from .services.poll_scheduler import PollScheduler, start_background_checker
from .services.settings_comparator import is_valid_jdk
from .services.table_reader import JdkTableReader

logger = configure_logger_for_sync_trace(__name__)

DEFAULT_REGISTRY_FILE = Path(".jdk_table_sync") / "jdks.json"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jdk-table-sync",
        description="Keep a JDK registry in line with a project's jdk.table.xml",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--project", "-p", type=Path, default=Path.cwd(),
                        help="Project root directory (default: current directory)")
    common.add_argument("--registry", "-r", type=Path,
                        help="Registry JSON file (default: <project>/.jdk_table_sync/jdks.json)")
    common.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    watch = subparsers.add_parser("watch", parents=[common], help="Run the sync loop until interrupted")
    watch.add_argument("--interval", type=float, help="Poll interval in seconds")
    watch.add_argument("--no-notify", action="store_true", help="Log update notifications instead of printing them")

    subparsers.add_parser("check", parents=[common], help="Run one sync cycle")
    subparsers.add_parser("show", parents=[common], help="Show the table file entries")
    return parser


def _resolve_registry_path(project: Project, config: SyncConfig, override: Optional[Path]) -> Path:
    if override is not None:
        return override
    if config.registry_file:
        path = Path(config.registry_file)
        return path if path.is_absolute() else project.base_path / path
    return project.base_path / DEFAULT_REGISTRY_FILE


def _entries_table(title: str, file_entries: List[JdkEntry], registry: JsonFileJdkRegistry) -> Table:
    table = Table(title=title)
    table.add_column("JDK", style="cyan")
    table.add_column("Table file home", style="magenta")
    table.add_column("Registry home", style="green")
    table.add_column("Status", style="blue")

    for entry in file_entries:
        registered = registry.find_jdk(entry.name)
        if registered is None:
            status = "missing"
            registry_home = "-"
        else:
            registry_home = registered.home_path
            if registered.home_path == entry.home_path:
                status = "in sync"
            elif is_valid_jdk(registered):
                status = "differs"
            else:
                status = "registry path missing"
        table.add_row(entry.name, entry.home_path, registry_home, status)
    return table


def _print_report(console: Console, report: CycleReport) -> None:
    console.print(f"Change: [bold]{report.change_status.value}[/bold]  "
                  f"Diverged: {report.diverged}  Reconciled: {report.reconciled}")
    if report.applied:
        console.print(f"Applied: {', '.join(report.applied)}")
    for error in report.errors:
        console.print(f"[red]Error: {error}[/red]")


def _cmd_show(console: Console, project: Project, reader: JdkTableReader, registry: JsonFileJdkRegistry) -> int:
    table_file = reader.table_file(project)
    console.print(f"Table file: {table_file}")
    if not reader.has_settings(project):
        console.print("[yellow]No project JDK table found[/yellow]")
        return EXIT_OK
    entries = reader.read(project)
    console.print(_entries_table(f"{len(entries)} JDKs", entries, registry))
    return EXIT_OK


def _cmd_check(console: Console, project: Project, registry: JsonFileJdkRegistry, config: SyncConfig) -> int:
    scheduler = PollScheduler(project, registry, notifier=ConsoleNotifier(console), config=config)
    report = scheduler.run_cycle()
    if scheduler.reader.has_settings(project) and not report.errors:
        entries = scheduler.reader.read(project)
        console.print(_entries_table("JDK table vs registry", entries, registry))
    _print_report(console, report)
    return EXIT_ERROR if report.errors else EXIT_OK


def _cmd_watch(console: Console, project: Project, registry: JsonFileJdkRegistry,
               config: SyncConfig, notify: bool, verbose: bool) -> int:
    stop = threading.Event()

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        stop.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    notifier = ConsoleNotifier(console) if notify else LoggingNotifier()
    scheduler = start_background_checker(project, registry, notifier=notifier, config=config)
    console.print(f"[cyan]Watching {scheduler.reader.table_file(project)} "
                  f"every {config.poll_interval_seconds}s (Ctrl+C to stop)[/cyan]")

    # stderr stays quiet under the status line; sync_trace.log still gets everything
    if not verbose:
        suppress_stderr_logging()
    try:
        with console.status(f"Polling {project.name}...", spinner="dots"):
            stop.wait()
    finally:
        restore_stderr_logging(logging.DEBUG if verbose else logging.INFO)

    scheduler.cancel()
    scheduler.join(timeout=config.poll_interval_seconds + 5)

    status = scheduler.status
    console.print(f"[green]Stopped after {status.cycles} cycles, "
                  f"{status.reconciliations} reconciliations, {status.errors} errors[/green]")
    return EXIT_INTERRUPTED


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for jdk-table-sync."""
    args = _build_parser().parse_args(argv)

    project_root = args.project.resolve()
    os.environ["JDK_SYNC_PROJECT_ROOT"] = str(project_root)
    reconfigure_log_directory()
    if args.verbose:
        restore_stderr_logging(logging.DEBUG)

    load_config(project_root)
    config = get_config_loader().get_sync_config()
    if getattr(args, "interval", None) is not None:
        config = replace(config, poll_interval_seconds=args.interval)

    console = Console()
    project = Project(project_root)

    try:
        registry = JsonFileJdkRegistry(_resolve_registry_path(project, config, args.registry))
        reader = JdkTableReader(config)

        if args.command == "show":
            return _cmd_show(console, project, reader, registry)
        if args.command == "check":
            return _cmd_check(console, project, registry, config)
        return _cmd_watch(console, project, registry, config,
                          notify=not args.no_notify, verbose=args.verbose)
    except JdkSyncError as e:
        console.print(f"[red]{e}[/red]")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
