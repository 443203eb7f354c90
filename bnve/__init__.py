"""
bnve: Bayesian Network Variable Elimination

Exact posterior inference on discrete Bayesian networks by variable
elimination over sparse factor tables.

Key components:
- core: Variables, CPT tables, the network container and errors
- algebra: Factors (restrict, join, marginalize), dense potentials, normalization
- inference: Elimination scheduler, ordering heuristics, brute-force enumeration
- io: .bif and JSON network loaders
- api: High-level posterior queries and text reports
"""

__version__ = "1.0.0"
__author__ = "bnve Team"

from bnve.core.exceptions import (
    BNVEError,
    NetworkIntegrityError,
    BIFParseError,
    QueryError,
    ContradictoryEvidenceError,
)
from bnve.core.variable import Variable, ProbRow, Table
from bnve.core.network import BayesianNetwork
from bnve.algebra.factor import Factor, join_all
from bnve.algebra.potential import Potential
from bnve.algebra.normalize import normalize
from bnve.inference.elimination import (
    EliminationState,
    EliminationTrace,
    InferenceConfig,
    Posterior,
    VariableElimination,
    eliminate,
)
from bnve.inference.enumeration import enumerate_posterior
from bnve.io import load_network, read_bif, parse_bif
from bnve.api.query import posterior, posteriors, probability

__all__ = [
    # Errors
    "BNVEError",
    "NetworkIntegrityError",
    "BIFParseError",
    "QueryError",
    "ContradictoryEvidenceError",
    # Network
    "Variable",
    "ProbRow",
    "Table",
    "BayesianNetwork",
    # Algebra
    "Factor",
    "join_all",
    "Potential",
    "normalize",
    # Inference
    "EliminationState",
    "EliminationTrace",
    "InferenceConfig",
    "Posterior",
    "VariableElimination",
    "eliminate",
    "enumerate_posterior",
    # IO
    "load_network",
    "read_bif",
    "parse_bif",
    # Queries
    "posterior",
    "posteriors",
    "probability",
]
