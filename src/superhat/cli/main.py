"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from superhat import __version__

from .commands import bindings_group, config_group, decode, devices, monitor

logger = logging.getLogger(__name__)

LOG_DIR = Path.home() / ".superhat" / "logs"
DEBUG_LOG_NAME = "superhat-debug.log"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Where setup_logging() writes, for error messages pointing at the log."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / DEBUG_LOG_NAME
    return LOG_DIR / "superhat.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging in the current directory
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # An explicit log file uses the explicit level
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Keeps the last 5 files, 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=10 * 1024 * 1024, backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__, prog_name="superhat")
@click.option(
    "--headless",
    is_flag=True,
    help="Run without the TUI, printing switch activity to the console",
)
@click.option(
    "--backend",
    "-b",
    type=click.Choice(["gamepad", "midi"], case_sensitive=False),
    default=None,
    help="Input backend (default: from config)",
)
@click.option("--rebind", is_flag=True, help="Start by capturing new hat bindings")
@click.option("--dry-run", is_flag=True, help="Log switch activations instead of pressing keys")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.superhat/config.json)",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v: INFO, -vv: DEBUG)")
@click.option(
    "--debug",
    is_flag=True,
    help=f"Enable debug mode (DEBUG level, logs to ./{DEBUG_LOG_NAME})",
)
@click.option(
    "--log-file", type=click.Path(path_type=Path), default=None, help="Custom log file path"
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Log level for file logging (default: INFO)",
)
def cli(
    ctx,
    headless: bool,
    backend: Optional[str],
    rebind: bool,
    dry_run: bool,
    config_path: Optional[Path],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str,
):
    """
    superhat - reach 40 cockpit switches with a single 4-way hat.

    \b
    Tap a direction to pick a side of the current panel, then tap to pick
    one of its five switches:
      side          middle switch
      left, left    first switch
      left, side    second switch
      right, side   fourth switch
      right, right  fifth switch
    (left and right are seen from the centre of the panel, facing the side)

    Hold Left or Right to switch between the left and right panel.
    The switch stays pressed until you release the hat.

    \b
    Examples:
      # Start the TUI with the configured backend
      superhat

    \b
      # Capture new hat bindings first
      superhat --rebind

    \b
      # Headless, MIDI input, nothing actually pressed
      superhat --headless --backend midi --dry-run

    \b
      # Where is switch 23?
      superhat decode 23
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    # If a subcommand was invoked, don't run the app
    if ctx.invoked_subcommand is not None:
        return

    # Lazy imports keep `superhat --help` and the utility commands light
    from superhat.console import ConsoleUI
    from superhat.exceptions import format_error_for_display
    from superhat.models import DEFAULT_CONFIG_PATH, AppConfig, InputBackend
    from superhat.orchestration import Orchestrator

    # The TUI owns stdout, so logs go to a file
    setup_logging(verbose, debug, log_file, log_level)
    log_path = resolve_log_path(debug, log_file)

    logger.info("Starting superhat")

    orchestrator = None
    try:
        path = config_path or DEFAULT_CONFIG_PATH
        config_obj = AppConfig.load_or_default(path)

        orchestrator = Orchestrator(
            config=config_obj,
            config_path=path,
            backend=InputBackend(backend.lower()) if backend else None,
            headless=headless,
            rebind=rebind,
            dry_run=dry_run,
        )

        if headless:
            orchestrator.register_ui(ConsoleUI(orchestrator, verbose=verbose > 0))
        else:
            from superhat.tui import SuperhatApp

            orchestrator.register_ui(SuperhatApp(orchestrator))

        orchestrator.run()

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        click.echo("\nShutting down...", err=True)
    except SystemExit as e:
        if e.code != 0:
            logger.error(f"Application exited with error code: {e.code}")
        sys.exit(e.code)
    except click.Abort:
        raise
    except Exception as e:
        logger.exception("Error running application")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "=" * 70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("=" * 70, err=True)

        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)

        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
        click.echo("For logging options, run: superhat --help", err=True)

        sys.exit(1)
    finally:
        if orchestrator is not None:
            orchestrator.shutdown()


cli.add_command(bindings_group)
cli.add_command(config_group)
cli.add_command(devices)
cli.add_command(monitor)
cli.add_command(decode)

if __name__ == "__main__":
    cli()
