"""Metafile archive reading and writing.

A metafile is a gzip-compressed tar archive holding:

- ``index``: JSON-encoded :class:`MetaIndex`.
- ``<i>.shard``: packed sector slices for ``hosts[i]``, one 40-byte
  record per slice (32-byte merkle root, little-endian uint32 segment
  index, little-endian uint32 segment count).
"""

import io
import logging
import os
import struct
import tarfile
from pathlib import Path
from tempfile import NamedTemporaryFile

from pydantic import ValidationError

from renterctl.models.metafile import MetaFile, MetaIndex, SectorSlice

logger = logging.getLogger(__name__)

INDEX_NAME = "index"
SHARD_SUFFIX = ".shard"

_SLICE_FORMAT = struct.Struct("<32sII")
SLICE_SIZE = _SLICE_FORMAT.size


class MetaFileError(Exception):
    """Base exception for metafile errors."""


class MetaFileUnreadableError(MetaFileError):
    """Raised when a metafile cannot be read or decoded.

    Attributes:
        path: Path of the offending metafile.
        reason: Description of what went wrong.
    """

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not read metafile {self.path}: {reason}")


def shard_name(i: int) -> str:
    """Archive member name for the shard of host ``i``."""
    return f"{i}{SHARD_SUFFIX}"


def decode_shard(data: bytes) -> tuple[SectorSlice, ...]:
    """Decode packed sector slices.

    Args:
        data: Raw shard member contents.

    Returns:
        Tuple of SectorSlice in stored order.

    Raises:
        ValueError: If the data length is not a multiple of the record size.
    """
    if len(data) % SLICE_SIZE:
        msg = f"shard length {len(data)} is not a multiple of {SLICE_SIZE}"
        raise ValueError(msg)
    return tuple(
        SectorSlice(merkle_root=root, segment_index=seg, num_segments=num)
        for root, seg, num in _SLICE_FORMAT.iter_unpack(data)
    )


def encode_shard(slices: tuple[SectorSlice, ...] | list[SectorSlice]) -> bytes:
    """Pack sector slices into shard member contents."""
    return b"".join(
        _SLICE_FORMAT.pack(s.merkle_root, s.segment_index, s.num_segments) for s in slices
    )


def read_meta_file(path: Path | str) -> MetaFile:
    """Read and decode a metafile.

    Args:
        path: Path to the ``.usa`` archive.

    Returns:
        The decoded MetaFile.

    Raises:
        MetaFileUnreadableError: If the file is missing, is not a valid
            archive, or any of its members fails to decode.
    """
    path = Path(path)
    members: dict[str, bytes] = {}
    try:
        with tarfile.open(path, mode="r:gz") as tar:
            for member in tar:
                if not member.isfile():
                    continue
                extracted = tar.extractfile(member)
                if extracted is None:
                    continue
                members[member.name] = extracted.read()
    except (OSError, tarfile.TarError, EOFError) as e:
        raise MetaFileUnreadableError(path, str(e)) from e

    raw_index = members.get(INDEX_NAME)
    if raw_index is None:
        raise MetaFileUnreadableError(path, "missing index")

    try:
        index = MetaIndex.model_validate_json(raw_index)
    except (ValueError, ValidationError) as e:
        raise MetaFileUnreadableError(path, f"invalid index: {e}") from e

    shards: list[tuple[SectorSlice, ...]] = []
    for i in range(len(index.hosts)):
        data = members.get(shard_name(i))
        if data is None:
            raise MetaFileUnreadableError(path, f"missing shard {i}")
        try:
            shards.append(decode_shard(data))
        except ValueError as e:
            raise MetaFileUnreadableError(path, f"shard {i}: {e}") from e

    logger.debug("Read metafile %s (%d hosts)", path, len(index.hosts))
    return MetaFile(index=index, shards=tuple(shards))


def write_meta_file(meta: MetaFile, path: Path | str) -> Path:
    """Write a metafile archive atomically.

    Args:
        meta: Metafile to encode.
        path: Destination path.

    Returns:
        Path where the metafile was written.

    Raises:
        MetaFileError: If the file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(mode="wb", dir=path.parent, delete=False, suffix=".tmp") as f:
            tmp_path = Path(f.name)
            with tarfile.open(fileobj=f, mode="w:gz") as tar:
                index = meta.index.model_dump_json(by_alias=True).encode()
                _add_member(tar, INDEX_NAME, index, meta.index.mode)
                for i, shard in enumerate(meta.shards):
                    _add_member(tar, shard_name(i), encode_shard(shard), meta.index.mode)
        os.replace(str(tmp_path), str(path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise MetaFileError(f"Failed to write metafile {path}: {e}") from e

    return path


def _add_member(tar: tarfile.TarFile, name: str, data: bytes, mode: int) -> None:
    info = tarfile.TarInfo(name=name)
    info.size = len(data)
    info.mode = mode & 0o777
    tar.addfile(info, io.BytesIO(data))
