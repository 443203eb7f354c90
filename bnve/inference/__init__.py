"""
Inference module: Elimination scheduler, ordering heuristics, brute force.
"""

from bnve.inference.ordering import (
    ORDERINGS,
    DEFAULT_ORDERING,
    least_incoming,
    fewest_factors,
    get_ordering,
)
from bnve.inference.elimination import (
    EliminationState,
    EliminationStep,
    EliminationTrace,
    InferenceConfig,
    Posterior,
    VariableElimination,
    eliminate,
)
from bnve.inference.enumeration import joint_potential, enumerate_posterior

__all__ = [
    "ORDERINGS",
    "DEFAULT_ORDERING",
    "least_incoming",
    "fewest_factors",
    "get_ordering",
    "EliminationState",
    "EliminationStep",
    "EliminationTrace",
    "InferenceConfig",
    "Posterior",
    "VariableElimination",
    "eliminate",
    "joint_potential",
    "enumerate_posterior",
]
