#!/usr/bin/env python3
"""
Application Entry Script.

Usage:
    python run.py --help
    python run.py --action server --reload --verbose
    python run.py --action config
    python run.py --action test --test-type unit
"""

import subprocess
import sys
from pathlib import Path

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notedesk.backend.core.logging import get_logger, log_with_source, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "config", "test", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host (for server action).")
@click.option("--port", default=None, type=int, help="Server port (for server action).")
@click.option("--reload", is_flag=True, help="Enable auto-reload (for server action).")
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run (for test action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
) -> None:
    """
    Notedesk entry point.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # View loaded configuration
        python run.py --action config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server under uvicorn."""
    from notedesk.backend.core.config import get_app_config

    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    log_with_source(
        logger, "cli", "info", "Starting server",
        host=server_host, port=server_port, reload=reload,
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notedesk.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 40)
    _echo_values(values, indent)


def _echo_values(values: dict, indent: int) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_values(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:")

    try:
        from notedesk.backend.core.config import get_app_config

        app_config = get_app_config()
        _echo_section("Application Settings", app_config.application.model_dump())
        _echo_section("Database Settings", app_config.database.model_dump())
        _echo_section("Logging Settings", app_config.logging.model_dump())
        _echo_section("Feature Flags", app_config.features.model_dump())
        _echo_section("Security Settings", app_config.security.model_dump())

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def run_tests(logger, test_type: str) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type})

    cmd = [sys.executable, "-m", "pytest"]
    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")
    cmd.append("-v")

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd)
        sys.exit(result.returncode)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    from notedesk.backend.core.config import get_app_config

    app_settings = get_app_config().application
    click.echo(app_settings.name)
    click.echo("=" * 40)
    click.echo(f"Version: {app_settings.version}")
    click.echo(f"Description: {app_settings.description}")
    click.echo(f"Environment: {app_settings.environment}")
    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server   Start the API server")
    click.echo("  --action config   Display configuration")
    click.echo("  --action test     Run test suite")
    click.echo("  --action info     Show this information")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
