"""
Algebra module: Sparse factors, dense potentials and normalization.
"""

from bnve.algebra.factor import Factor, join_all
from bnve.algebra.potential import Potential
from bnve.algebra.normalize import normalize, DEFAULT_PRECISION

__all__ = [
    "Factor",
    "join_all",
    "Potential",
    "normalize",
    "DEFAULT_PRECISION",
]
