"""Confirmation capability.

The engine blocks on a :class:`Confirmation` between reconciliation and
deletion. The CLI provides an interactive prompt; these implementations
cover non-interactive use.
"""

from abc import ABC, abstractmethod

from renterctl.gc.models import GCSummary


class Confirmation(ABC):
    """Decides whether a garbage collection cycle may delete."""

    @abstractmethod
    def confirm(self, summary: GCSummary) -> bool:
        """Return True to proceed with deletion, False to abort.

        Args:
            summary: Totals of the pending deletion.
        """


class AlwaysConfirm(Confirmation):
    """Proceeds without asking."""

    def confirm(self, summary: GCSummary) -> bool:
        return True


class NeverConfirm(Confirmation):
    """Always aborts."""

    def confirm(self, summary: GCSummary) -> bool:
        return False
