"""
Core infrastructure for pypaleomag.

This module provides shared abstractions and utilities used by all
estimator subpackages (inclination, foldtest) and by the Monte Carlo
engine that drives them.

Key components:
    protocols: DataSource, EstimatorKernel, ProgressSink, Scheduler
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing utilities
"""

from pypaleomag.core.protocols import (
    DataSource,
    EstimatorKernel,
    ProgressSink,
    Scheduler,
)
from pypaleomag.core.result import Result
from pypaleomag.core.exceptions import (
    PyPaleomagError,
    ValidationError,
    DimensionError,
    InsufficientDirectionsError,
    EmptyInputError,
    AlreadyRunningError,
    NumericalError,
    KernelError,
    RunCancelledError,
    RunNotFinishedError,
)

__all__ = [
    # Protocols
    "DataSource",
    "EstimatorKernel",
    "ProgressSink",
    "Scheduler",
    # Result
    "Result",
    # Exceptions
    "PyPaleomagError",
    "ValidationError",
    "DimensionError",
    "InsufficientDirectionsError",
    "EmptyInputError",
    "AlreadyRunningError",
    "NumericalError",
    "KernelError",
    "RunCancelledError",
    "RunNotFinishedError",
]
