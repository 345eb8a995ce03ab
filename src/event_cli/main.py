"""Command line entry point for the event client."""
from __future__ import annotations

import logging
import signal
import threading
from contextlib import contextmanager
from ipaddress import IPv4Address, ip_address
from typing import Iterator, Optional

import click
from colorama import just_fix_windows_console

from analysis.exceptions import FindingsError
from analysis.findings import Findings
from capture.config import (
    DEFAULT_CACHE_MB,
    DEFAULT_DATAGRAMS,
    MAX_DATAGRAM_BYTES,
    MIN_DATAGRAM_BYTES,
    IngestConfig,
)
from capture.exceptions import CaptureError
from capture.pipeline import collect_events
from capture.udp_connection import UdpConnection
from protocol.exceptions import EventError
from utils.config import ConfigError, ConfigManager
from utils.logger import setup_logging

from .progress import ProgressBar
from .report import render_report

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Initiate communication with an event emitter server and parse a finite
number of events. After parsing all events, print a report of findings
answering the following questions:

\b
  * What are the top 5 SSH passwords?
  * What are the top 5 SSH usernames?
  * What are the top 5 TELNET passwords?
  * What are the top 5 TELNET usernames?
  * What are the top 30 user-agents in HTTP events?
  * What are the top 20 emails in SMTP?
  * Who are the top 15 submitters?
  * What events did <ip-detail> submit?
"""

# client.<key> in the YAML file -> command option
_CONFIG_OPTIONS = {
    "address": "address",
    "cache": "cache",
    "datagrams": "datagrams",
    "datagram_size": "datagram_size",
    "ip_detail": "ip_detail",
    "verbose": "verbose",
}


class ClientError(Exception):
    """A client run failed; the message carries the cause chain."""
    pass


@contextmanager
def cancel_on_signals(cancel: threading.Event) -> Iterator[None]:
    """Set ``cancel`` on SIGINT/SIGTERM for the duration of the block."""
    def handler(signum, frame):
        logger.debug("received signal %d; cancelling", signum)
        cancel.set()

    previous = {}
    if threading.current_thread() is threading.main_thread():
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, handler)
    try:
        yield
    finally:
        for signum, old in previous.items():
            signal.signal(signum, old)


def parse_detail_address(value: Optional[str]) -> Optional[IPv4Address]:
    """Parse the drill-down address; warn and disable it when invalid."""
    if not value:
        return None
    try:
        addr = ip_address(value)
    except ValueError as e:
        logger.warning("parsing detail IP: %s", e)
        return None
    if not isinstance(addr, IPv4Address):
        logger.warning("parsing detail IP: %s is not an IPv4 address", value)
        return None
    return addr


def run(address: str,
        datagrams: int,
        size: int,
        cache: int,
        ip_detail: Optional[IPv4Address],
        cancel: Optional[threading.Event] = None,
        show_progress: Optional[bool] = None) -> str:
    """
    Connect to the event server, collect events and render the report.

    Raises:
        ClientError: with the failing stage and its cause
    """
    if not address:
        raise ClientError("server address is required")

    cancel = cancel or threading.Event()
    config = IngestConfig(datagrams=datagrams, datagram_size=size, cache_mb=cache)

    try:
        conn = UdpConnection.dial(address)
    except (OSError, ValueError) as e:
        raise ClientError(f"dialing {address!r}: {e}") from e

    progress = ProgressBar(disable=None if show_progress is None else not show_progress)
    with conn, cancel_on_signals(cancel):
        logger.info("collecting events from %r", address)
        try:
            events = collect_events(conn, config, cancel=cancel, progress=progress)
        except (CaptureError, EventError) as e:
            raise ClientError(f"collecting events: {e}") from e
        finally:
            progress.close()

    logger.info("received %d events", len(events))

    try:
        return render_report(Findings.from_events(events), ip_detail)
    except FindingsError as e:
        raise ClientError(f"generating report: {e}") from e


def _load_config(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> None:
    if not value:
        return
    try:
        config = ConfigManager.load(value)
    except ConfigError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)

    defaults = dict(ctx.default_map or {})
    for key, option in _CONFIG_OPTIONS.items():
        setting = config.get(f"client.{key}")
        if setting is not None:
            defaults[option] = setting
    ctx.default_map = defaults
    ctx.meta["log_level"] = config.get("logging.level")
    ctx.meta["log_file"] = config.get("logging.file")


@click.command(help=DESCRIPTION)
@click.option("--config", type=click.Path(exists=True, dir_okay=False),
              callback=_load_config, is_eager=True, expose_value=False,
              help="YAML file with defaults for these options")
@click.option("--address", default="localhost:1035", show_default=True,
              help="event server host:port")
@click.option("--cache", type=int, default=DEFAULT_CACHE_MB, show_default=True,
              help="MB of RAM to use for caching datagrams (min 1)")
@click.option("--datagrams", type=int, default=DEFAULT_DATAGRAMS, show_default=True,
              help="datagrams to read from event server")
@click.option("--ip-detail", "ip_detail", default="1.2.3.4", show_default=True,
              help="detail events submitted by a given IP")
@click.option("--datagram-size", "datagram_size", type=int, default=MIN_DATAGRAM_BYTES,
              show_default=True,
              help=f"maximum UDP datagram size (min {MIN_DATAGRAM_BYTES}; max {MAX_DATAGRAM_BYTES})")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="enable verbose (debug) output")
@click.pass_context
def cli(ctx: click.Context,
        address: str,
        cache: int,
        datagrams: int,
        ip_detail: str,
        datagram_size: int,
        verbose: bool):
    level = "DEBUG" if verbose else (ctx.meta.get("log_level") or "INFO")
    setup_logging(level, log_file=ctx.meta.get("log_file"))
    just_fix_windows_console()

    detail = parse_detail_address(ip_detail)

    try:
        report = run(address, datagrams, datagram_size, cache, detail)
    except ClientError as e:
        logger.error("%s", e)
        raise click.ClickException(str(e))

    click.echo(f"\n\n{report}\n")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
