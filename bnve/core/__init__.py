"""
Core module: Variables, CPT tables, the network container and errors.
"""

from bnve.core.exceptions import (
    BNVEError,
    NetworkIntegrityError,
    BIFParseError,
    QueryError,
    ContradictoryEvidenceError,
)
from bnve.core.variable import Variable, ProbRow, Table
from bnve.core.network import BayesianNetwork

__all__ = [
    "BNVEError",
    "NetworkIntegrityError",
    "BIFParseError",
    "QueryError",
    "ContradictoryEvidenceError",
    "Variable",
    "ProbRow",
    "Table",
    "BayesianNetwork",
]
