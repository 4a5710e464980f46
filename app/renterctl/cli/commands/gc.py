"""Garbage collection command.

Deletes sectors that hosts store but that no metafile in a folder
references anymore.
"""

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

from renterctl.cli.display import ConsoleReporter, PromptConfirmation, create_plan_table
from renterctl.cli.types import get_config
from renterctl.core.config import ConfigError, require_setting
from renterctl.core.state import record_gc_deletions
from renterctl.gc.confirm import AlwaysConfirm, Confirmation
from renterctl.gc.engine import GarbageCollector
from renterctl.gc.models import GCState
from renterctl.host.backends import SessionBackendError, load_session_opener
from renterctl.host.muse import MuseClient
from renterctl.host.service import ServiceError
from renterctl.host.shard import ShardClient
from renterctl.metafile.codec import MetaFileUnreadableError
from renterctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_warning,
)


@contextmanager
def _interrupt_guard(collector: GarbageCollector, cancel: threading.Event) -> Iterator[None]:
    """Turn the first Ctrl+C during deletion into a graceful stop.

    While hosts are being written to, the first interrupt only stops new
    hosts from being started. Any other interrupt raises KeyboardInterrupt
    out of the run.

    Args:
        collector: Collector whose state decides how an interrupt is handled.
        cancel: Event set on the first interrupt during deletion.
    """

    def _handler(signum: int, frame: object) -> None:
        if collector.state == GCState.DELETING and not cancel.is_set():
            cancel.set()
            print_warning("Interrupted; finishing the current host, then stopping.")
            return
        raise KeyboardInterrupt

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def gc(
    ctx: typer.Context,
    metafolder: Annotated[
        Path,
        typer.Argument(
            help="Folder whose metafiles define which sectors are still in use.",
            file_okay=False,
        ),
    ],
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Delete without asking for confirmation.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show the swap and trim plan per host without deleting.",
        ),
    ] = False,
) -> None:
    """Delete sectors that no metafile references.

    SHARD must be synchronized with the blockchain. Every metafile under
    METAFOLDER is read first; if any of them cannot be read, nothing is
    deleted. Each contracted host is then listed and the sectors it stores
    but that no metafile references are removed. A host that cannot be
    reached is reported and skipped.

    Examples:
        renterctl gc ~/storage/meta            # Confirm, then delete
        renterctl gc ~/storage/meta --dry-run  # Show the plan only
        renterctl gc ~/storage/meta -y         # No confirmation prompt
    """
    config = get_config(ctx)

    try:
        muse_addr = require_setting(config, "muse_addr")
        shard_addr = require_setting(config, "shard_addr")
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    with (
        MuseClient(muse_addr, timeout=config.http_timeout_seconds) as muse,
        ShardClient(shard_addr, timeout=config.http_timeout_seconds) as shard,
    ):
        try:
            current_height = shard.current_height()
        except ServiceError as e:
            print_error(f"Could not determine current height: {e}")
            raise typer.Exit(code=1) from e

        try:
            opener = load_session_opener(config, current_height)
        except SessionBackendError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

        try:
            contracts = muse.contracts(config.host_set)
        except ServiceError as e:
            print_error(f"Could not get contracts: {e}")
            raise typer.Exit(code=1) from e

        if not contracts:
            print_info(f"No contracts in host set '{config.host_set}'. Nothing to collect.")
            return

        cancel = threading.Event()
        confirmation: Confirmation = AlwaysConfirm() if yes else PromptConfirmation()
        collector = GarbageCollector(
            contracts,
            shard,
            opener,
            confirmation,
            reporter=ConsoleReporter(),
            dry_run=dry_run,
            should_cancel=cancel.is_set,
        )

        interrupted = False
        try:
            with _interrupt_guard(collector, cancel):
                result = collector.run(metafolder)
        except MetaFileUnreadableError as e:
            print_error(f"Garbage collection failed: {e}")
            raise typer.Exit(code=1) from e
        except KeyboardInterrupt:
            result = collector.interrupted()
            interrupted = True

    if dry_run and any(o.actions for o in result.outcomes):
        console.print()
        console.print(create_plan_table(result.outcomes))

    if result.deleted:
        try:
            record_gc_deletions(
                result.deleted,
                str(metafolder),
                command=f"renterctl gc {metafolder}",
            )
        except (OSError, RuntimeError) as e:
            print_warning(f"Could not record history: {e}")

    if interrupted:
        raise typer.Exit(code=130)
    if result.failures:
        raise typer.Exit(code=1)
