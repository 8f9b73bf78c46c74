"""
Exception hierarchy for pypaleomag.

All exceptions inherit from PyPaleomagError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyPaleomagError(Exception):
    """Base exception for all pypaleomag errors."""
    pass


class ValidationError(PyPaleomagError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class InsufficientDirectionsError(ValidationError):
    """
    Direction set is too small for the requested estimator.

    Fisher statistics and the orientation-matrix eigenvalues are
    undefined below two directions, so every estimator declares a
    minimum and refuses to start below it.

    Attributes:
        n_directions: Number of directions supplied
        min_directions: Minimum the estimator requires
    """

    def __init__(
        self,
        message: str,
        n_directions: int | None = None,
        min_directions: int | None = None,
    ):
        super().__init__(message)
        self.n_directions = n_directions
        self.min_directions = min_directions


class EmptyInputError(InsufficientDirectionsError):
    """Direction set contains no directions at all."""
    pass


class AlreadyRunningError(PyPaleomagError):
    """
    A bootstrap run of the same estimator type is still active.

    Recoverable: wait for the active run to finish (or cancel it)
    and start again.

    Attributes:
        estimator: Name of the estimator whose run is active
    """

    def __init__(self, message: str, estimator: str | None = None):
        super().__init__(message)
        self.estimator = estimator


class NumericalError(PyPaleomagError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class KernelError(NumericalError):
    """
    An estimator kernel raised during a bootstrap run.

    The run is aborted and no partial statistics are produced. The
    original exception is chained as __cause__.

    Attributes:
        iteration: Iteration at which the kernel failed (0 = actual data)
        estimator: Name of the failing estimator
    """

    def __init__(
        self,
        message: str,
        iteration: int,
        estimator: str | None = None,
    ):
        super().__init__(message)
        self.iteration = iteration
        self.estimator = estimator


class RunCancelledError(PyPaleomagError):
    """Result requested from a bootstrap run that was cancelled."""
    pass


class RunNotFinishedError(PyPaleomagError):
    """Result requested from a bootstrap run that is still running."""
    pass
