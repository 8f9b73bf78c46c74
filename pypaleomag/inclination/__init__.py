"""
pypaleomag elongation/inclination (E/I) analysis.

Corrects sedimentary inclination shallowing by finding the flattening
factor at which the data's elongation/inclination path meets the
TK03.GAD model curve (Tauxe & Kent, 2004), with a bootstrap interval on
the corrected inclination.

Usage:
    from pypaleomag.inclination import ei

    result = ei(directions, n_bootstraps=5000, seed=42)
    print(result.summary())
"""

from pypaleomag.inclination._unflatten import (
    FLATTENING_FACTORS,
    NO_INTERSECTION,
    TK03_COEFFICIENTS,
    FlatteningCurve,
    UnflattenKernel,
    elongation_path,
    tk03_elongation,
    unflatten_directions,
)
from pypaleomag.inclination.design import EIDesign
from pypaleomag.inclination.solution import EISolution
from pypaleomag.inclination.solvers import ei, start_ei

__all__ = [
    "EIDesign",
    "EISolution",
    "FLATTENING_FACTORS",
    "FlatteningCurve",
    "NO_INTERSECTION",
    "TK03_COEFFICIENTS",
    "UnflattenKernel",
    "ei",
    "elongation_path",
    "start_ei",
    "tk03_elongation",
    "unflatten_directions",
]
