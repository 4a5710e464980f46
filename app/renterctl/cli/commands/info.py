"""Info command implementation.

Displays the size, redundancy, and host set recorded in a metafile.
"""

from pathlib import Path
from typing import Annotated

import typer

from renterctl.metafile.codec import MetaFileUnreadableError, read_meta_file
from renterctl.models.metafile import MetaFile
from renterctl.utils.formatting import console, filesize_units, print_error


def info(
    path: Annotated[
        Path,
        typer.Argument(
            help="Metafile to inspect.",
            dir_okay=False,
        ),
    ],
) -> None:
    """Display information about a metafile.

    Examples:
        renterctl info ~/storage/meta/photo.jpg.usa
    """
    try:
        meta = read_meta_file(path)
    except MetaFileUnreadableError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    _print_info(meta)


def _print_info(meta: MetaFile) -> None:
    """Print the metafile summary followed by its host set."""
    index = meta.index
    console.print(f"[muted]Filesize:[/muted]   {filesize_units(index.filesize)}")
    console.print(
        f"[muted]Redundancy:[/muted] {index.min_shards}-of-{len(index.hosts)} "
        f"({meta.redundancy:.2g}x replication)"
    )
    console.print(
        f"[muted]Uploaded:[/muted]   {filesize_units(meta.uploaded_bytes)} "
        f"({meta.percent_full_redundancy:.2f}% of full redundancy)"
    )
    console.print("[muted]Hosts:[/muted]")
    for host_key in index.hosts:
        console.print(f"    [host]{host_key}[/host]")
