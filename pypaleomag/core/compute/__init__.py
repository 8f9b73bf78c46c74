"""
Shared compute infrastructure for pypaleomag.

Estimator kernels live in their estimator packages (inclination/_unflatten,
foldtest/_unfold). This module contains shared utilities only.

Submodules:
    timing: Execution timing utilities
"""

from pypaleomag.core.compute.timing import Timer

__all__ = [
    "Timer",
]
