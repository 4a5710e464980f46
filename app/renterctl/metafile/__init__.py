"""Metafile codec.

Reads and writes the ``.usa`` archives that describe where each file's
shards are stored.
"""

from renterctl.metafile.codec import (
    MetaFileError,
    MetaFileUnreadableError,
    read_meta_file,
    write_meta_file,
)

__all__ = [
    "MetaFileError",
    "MetaFileUnreadableError",
    "read_meta_file",
    "write_meta_file",
]
