"""
Core protocols for pypaleomag.

These define structural interfaces that estimator implementations and
host applications must satisfy. We use Protocol (structural typing)
rather than ABC (nominal typing) so that a plain function object, a GUI
progress bar or a test double can take part without inheriting
anything.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Capability-driven: use supports() for optional features
    - The engine owns no presentation state; it only calls back
"""

from typing import Any, Callable, Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from pypaleomag.directions.design import DirectionSet
    from pypaleomag.montecarlo._common import KernelOutcome


@runtime_checkable
class DataSource(Protocol):
    """
    Minimal protocol for any data container used by the estimators.

    DirectionSet implements this protocol. It exists to establish a
    common interface for tooling without forcing every container to
    share the same structure.
    """

    @property
    def n_observations(self) -> int:
        """Number of statistical units (directions, samples, etc.)."""
        ...

    @property
    def metadata(self) -> dict[str, Any]:
        """
        Container-specific metadata.

        Example:
            {'n': 24, 'has_bedding': True, 'has_names': False}
        """
        ...

    def supports(self, capability: str) -> bool:
        """
        Check if this data source supports a given capability.

        Note:
            Unknown capabilities MUST return False, never raise.
        """
        ...


@runtime_checkable
class EstimatorKernel(Protocol):
    """
    Protocol for single-estimator kernels.

    A kernel maps one direction set to one scalar outcome plus an
    auxiliary curve. It never resamples and holds no run state, so the
    same instance may be called for the actual data and for every
    bootstrap replicate.

    Attributes:
        name: Estimator identifier, also the mutual-exclusion key
            used by RunController ('ei', 'foldtest').
        min_directions: Smallest direction set the kernel accepts.
        yield_every: Default number of iterations per batch between
            cooperative yields to the host.
    """

    name: str
    min_directions: int
    yield_every: int

    def __call__(self, directions: 'DirectionSet') -> 'KernelOutcome':
        ...


@runtime_checkable
class ProgressSink(Protocol):
    """
    Presentation-layer callbacks.

    update() is called after every bootstrap iteration, done() once on
    normal completion with the finished Result. A sink may additionally
    define failed(error) and cancelled(); the engine calls them when
    present.
    """

    def update(self, current: int, total: int) -> None:
        ...

    def done(self, summary: Any) -> None:
        ...


@runtime_checkable
class Scheduler(Protocol):
    """
    Host task mechanism used by the engine to defer the next batch.

    Implementations decide when the callback runs: immediately on the
    caller's stack, on an event loop, or when a test asks for it.
    """

    def defer(self, callback: Callable[[], None]) -> None:
        ...
