"""
bnve/inference/enumeration.py

Brute-force inference by enumerating the full joint distribution.

Exponential in the number of variables; meant for verifying elimination
results on small networks.
"""

from __future__ import annotations

from typing import Mapping, Optional

import numpy as np

from bnve.algebra.potential import Potential
from bnve.core.exceptions import QueryError
from bnve.core.network import BayesianNetwork


def joint_potential(network: BayesianNetwork) -> Potential:
    """Product of every CPT over all variables, in declaration order."""
    network.validate()
    names = tuple(network.variables)
    joint = Potential.unit((), ())
    for name in names:
        joint = joint.star(Potential.from_table(network.table(name), network.variables))
    return joint.restrict(names)


def enumerate_posterior(
    network: BayesianNetwork,
    query: str,
    evidence: Optional[Mapping[str, str]] = None,
) -> np.ndarray:
    """
    P(query | evidence) by summing the joint.

    Args:
        network: The network (its own evidence is ignored)
        query: Query variable name
        evidence: Observed values by variable name

    Returns:
        Probabilities aligned to the query's domain (unrounded)

    Raises:
        QueryError: unknown query or observed query
        ContradictoryEvidenceError: evidence with zero probability
    """
    evidence = dict(evidence or {})
    if query not in network:
        raise QueryError(f"Query variable {query!r} is not in the network")
    if query in evidence:
        raise QueryError(f"Query variable {query!r} is observed")
    annotated = network.with_evidence(evidence)

    pot = joint_potential(annotated)
    for name, value in evidence.items():
        pot = pot.slice(name, annotated.variable(name).index_of(value))
    return pot.restrict((query,)).normalize().data
