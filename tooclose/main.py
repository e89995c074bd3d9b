"""
tooclose command line entry point.

Reads a BaseStation feed from stdin, a file, or a TCP port and prints every
pair of aircraft that comes too close.

    nc localhost 30003 | tooclose -l
    tooclose --connect localhost:30003 --notify
"""
import logging
import socket
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

import click
from rich.console import Console

from tooclose.core.config import get_settings
from tooclose.core.exceptions import AircraftTableFullError, CredentialFileError
from tooclose.services.alerts import AlertLog, AlertReporter
from tooclose.services.notifications import NotificationManager
from tooclose.services.pipeline import ProximityPipeline
from tooclose.services.stats import RunningStats, StatsReporter
from tooclose.services.weather_cache import MetarClient

logger = logging.getLogger(__name__)

EXIT_TABLE_FULL = 2


def _parse_endpoint(value: str) -> tuple[str, int]:
    host, sep, port = value.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise click.BadParameter("expected HOST:PORT", param_hint="--connect")
    return host, int(port)


@contextmanager
def open_feed(stream: TextIO, connect: Optional[str]) -> Iterator[TextIO]:
    """Yield a line source: the given stream, or a TCP connection."""
    if not connect:
        yield stream
        return

    host, port = _parse_endpoint(connect)
    try:
        sock = socket.create_connection((host, port))
    except OSError as e:
        raise click.ClickException(f"Cannot connect to {host}:{port}: {e}")
    logger.info(f"Connected to {host}:{port}")
    with sock, sock.makefile("r", encoding="ascii", errors="replace", newline="") as feed:
        yield feed


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-l", "--log", "enable_log", is_flag=True, help="Enable conflict log files")
@click.option("--notify", is_flag=True, help="Send conflicts via Apprise (needs credential file)")
@click.option(
    "--credentials", default=None, type=click.Path(dir_okay=False),
    help="Notification credential file (default from TOOCLOSE_NOTIFY_CREDENTIALS_FILE)",
)
@click.option(
    "--input", "input_file", default="-", type=click.File("r", errors="replace"),
    help="Feed file (default stdin)",
)
@click.option("--connect", default=None, metavar="HOST:PORT", help="Read a BaseStation TCP feed")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
def cli(enable_log, notify, credentials, input_file, connect, verbose):
    """
    Detect aircraft flying too close to each other.

    Consumes SBS-1 (port 30003) lines and prints an alert for every pair
    inside the separation limits at the same instant.

    Example:
      nc localhost 30003 | tooclose -l
    """
    log_level = logging.WARNING
    if verbose == 1:
        log_level = logging.INFO
    elif verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    settings = get_settings()
    console = Console(highlight=False)

    notifier = None
    if notify:
        path = credentials or settings.notify_credentials_file
        try:
            notifier = NotificationManager.from_credentials(path, cooldown=settings.notification_cooldown)
        except CredentialFileError as e:
            raise click.ClickException(str(e))

    alert_log = AlertLog(settings.log_dir, settings.log_basename) if enable_log else None
    reporter = AlertReporter(settings, console=console, alert_log=alert_log, notifier=notifier)
    stats_reporter = StatsReporter(RunningStats(), settings, console=console)
    pipeline = ProximityPipeline(
        settings,
        reporter=reporter,
        stats_reporter=stats_reporter,
        weather=MetarClient.from_settings(settings),
    )

    try:
        with open_feed(input_file, connect) as feed:
            pipeline.run(feed)
    except AircraftTableFullError as e:
        logger.critical(f"Stopping: {e}")
        sys.exit(EXIT_TABLE_FULL)
    except KeyboardInterrupt:
        pass


def main():
    """Console script entry point. Usage errors exit with status 1."""
    try:
        rv = cli.main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except click.exceptions.Abort:
        sys.exit(1)
    sys.exit(rv or 0)


if __name__ == "__main__":
    main()
