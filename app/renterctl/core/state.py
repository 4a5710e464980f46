"""State management for history tracking.

This module provides the StateManager class for persisting and querying
history entries in a JSONL file format, plus a helper that records the
outcome of a garbage collection run.
"""

import json
import logging
from pathlib import Path

from renterctl.core.paths import ensure_state_dir, get_state_dir
from renterctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)
from renterctl.models.host import HostPublicKey

logger = logging.getLogger(__name__)


class StateManager:
    """Manages history state in JSONL file.

    Storage location: ~/.local/state/renterctl/history.jsonl

    Each line is a complete JSON object representing a HistoryEntry,
    which keeps writes append-only.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/renterctl
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        """Path to history.jsonl file."""
        return self._state_dir / self.HISTORY_FILENAME

    def record_action(self, entry: HistoryEntry) -> None:
        """Append an entry to the history file.

        Creates file and parent directories if they don't exist.

        Args:
            entry: The history entry to record.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        line = entry.to_json_line()

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Read history entries, newest first.

        Corrupt lines are skipped with a warning.

        Args:
            limit: Maximum number of entries to return.
                  If None, returns all entries.

        Returns:
            List of HistoryEntry, newest first.
            Returns empty list if file doesn't exist.
        """
        if not self.history_path.exists():
            return []

        entries: list[HistoryEntry] = []

        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entries.append(HistoryEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, str(e))
                    continue

        entries.reverse()

        if limit is not None:
            return entries[:limit]

        return entries


def record_gc_deletions(
    deleted: dict[HostPublicKey, int],
    metafolder: str,
    command: str = "renterctl gc",
    state: StateManager | None = None,
) -> HistoryEntry | None:
    """Record the hosts a garbage collection run deleted sectors from.

    Args:
        deleted: Sectors deleted per host; hosts with zero are omitted.
        metafolder: Metafolder the run was cross-referenced against.
        command: Command that triggered the deletions.
        state: StateManager to write to. Defaults to the user state dir.

    Returns:
        The recorded entry, or None if nothing was deleted.

    Raises:
        RuntimeError: If the state directory cannot be created.
        OSError: If the history file cannot be written.
    """
    items = [HistoryItem(host=host, sectors=n) for host, n in deleted.items() if n > 0]
    if not items:
        return None

    entry = create_history_entry(
        action_type=HistoryActionType.GC_DELETE,
        items=items,
        metadata={"command": command, "metafolder": metafolder},
    )
    (state or StateManager()).record_action(entry)
    logger.debug("Recorded gc deletion on %d host(s) to history", len(items))
    return entry
