"""
pypaleomag: bootstrapped paleomagnetic statistics for Python.

Elongation/inclination correction of inclination shallowing and the
eigenvalue fold test, both driven by a chunked, cancellable bootstrap
engine that never blocks its host for more than one batch.

Submodules:
    directions: Direction sets, geometry and Fisher/eigen statistics
    montecarlo: Bootstrap engine, schedulers and run controller
    inclination: Elongation/inclination (E/I) analysis
    foldtest: Eigenvalue fold test
"""

__version__ = "0.1.0"

from pypaleomag import directions
from pypaleomag import montecarlo
from pypaleomag import inclination
from pypaleomag import foldtest

__all__ = [
    "__version__",
    "directions",
    "montecarlo",
    "inclination",
    "foldtest",
]
