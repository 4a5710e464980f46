"""Metafolder scanner.

Walks a metafolder recursively and collects, per host, every sector root
still referenced by a metafile. Any unreadable metafile aborts the scan:
a sector can only be called unreferenced against a complete picture of
what is referenced.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from renterctl.core.paths import METAFILE_EXT
from renterctl.gc.models import ScanResult
from renterctl.metafile.codec import MetaFileUnreadableError, read_meta_file
from renterctl.models.host import HostPublicKey, SectorRoot

logger = logging.getLogger(__name__)


class MetadataScanner:
    """Collects referenced sector roots from a metafolder.

    Args:
        root: Metafolder to scan.
        extension: Suffix identifying metafiles. Other files are ignored.
    """

    def __init__(self, root: Path | str, *, extension: str = METAFILE_EXT) -> None:
        self._root = Path(root)
        self._extension = extension

    @property
    def root(self) -> Path:
        """Metafolder being scanned."""
        return self._root

    def iter_metafiles(self) -> Iterator[Path]:
        """Yield every metafile under the root in sorted order.

        Raises:
            MetaFileUnreadableError: If the root is not a readable directory.
        """
        if not self._root.is_dir():
            raise MetaFileUnreadableError(self._root, "not a directory")

        try:
            candidates = sorted(self._root.rglob(f"*{self._extension}"))
        except OSError as e:
            raise MetaFileUnreadableError(self._root, str(e)) from e

        for path in candidates:
            if path.is_file():
                yield path

    def scan(self) -> ScanResult:
        """Read every metafile and aggregate referenced roots per host.

        Returns:
            ScanResult with referenced roots and reporting counters.

        Raises:
            MetaFileUnreadableError: On the first metafile that cannot be read.
        """
        referenced: dict[HostPublicKey, set[SectorRoot]] = {}
        files_scanned = 0
        shard_references = 0

        for path in self.iter_metafiles():
            meta = read_meta_file(path)
            for host_key, roots in meta.host_roots().items():
                shard_references += len(roots)
                referenced.setdefault(host_key, set()).update(roots)
            files_scanned += 1

        logger.info(
            "Scanned %d metafile(s) in %s referencing %d host(s)",
            files_scanned,
            self._root,
            len(referenced),
        )
        return ScanResult(
            referenced=referenced,
            files_scanned=files_scanned,
            shard_references=shard_references,
        )
