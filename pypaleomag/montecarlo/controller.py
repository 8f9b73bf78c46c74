"""
Run controller: at most one live bootstrap run per estimator type.

The controller is an explicit object handed to every BootstrapEngine
that should share the exclusion, rather than a module-level flag. Two
engines built on the same controller cannot run the same estimator
concurrently; engines with separate controllers are independent.
"""

from __future__ import annotations

from pypaleomag.core.exceptions import AlreadyRunningError


class RunController:
    """
    Owns one running flag per estimator name.

    acquire() is check-and-set in one step and raises without changing
    anything when the flag is already set. release() is idempotent so
    that every exit path (completion, cancellation, failure) can call it
    unconditionally.
    """

    def __init__(self):
        self._running: set[str] = set()

    def acquire(self, estimator: str) -> None:
        """
        Mark `estimator` as running.

        Raises:
            AlreadyRunningError: If a run of this estimator is active.
        """
        if estimator in self._running:
            raise AlreadyRunningError(
                f"A {estimator!r} bootstrap is already running; wait for it "
                f"to finish or cancel it",
                estimator=estimator,
            )
        self._running.add(estimator)

    def release(self, estimator: str) -> None:
        """Clear the running flag for `estimator`."""
        self._running.discard(estimator)

    def is_running(self, estimator: str) -> bool:
        return estimator in self._running

    def active(self) -> frozenset[str]:
        """Names of all estimators with a live run."""
        return frozenset(self._running)

    def __repr__(self) -> str:
        return f"RunController(active={sorted(self._running)})"
