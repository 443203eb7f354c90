"""
bnve/api/query.py

High-level query functions.

This is the main entry point for answering posterior queries.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Union

from bnve.algebra.normalize import DEFAULT_PRECISION
from bnve.core.network import BayesianNetwork
from bnve.inference.elimination import InferenceConfig, Observer, Posterior, VariableElimination
from bnve.inference.ordering import DEFAULT_ORDERING, OrderingStrategy


def posterior(
    network: BayesianNetwork,
    query: str,
    evidence: Optional[Mapping[str, str]] = None,
    *,
    ordering: Union[str, OrderingStrategy] = DEFAULT_ORDERING,
    precision: Optional[int] = DEFAULT_PRECISION,
    prune_zeros: bool = False,
    observer: Optional[Observer] = None,
) -> Posterior:
    """
    Compute P(query | evidence) by variable elimination.

    Args:
        network: Loaded network (left unmodified)
        query: Query variable name
        evidence: Observed values by variable name
        ordering: Elimination-order strategy name or callable
        precision: Decimal places of the result
        prune_zeros: Drop zero-probability rows during joins
        observer: Called with (state, artifact) during the run

    Returns:
        Posterior with its elimination trace

    Example:
        >>> net = BayesianNetwork("chain")
        >>> _ = net.add_variable("A", ["true", "false"])
        >>> _ = net.add_variable("B", ["true", "false"], ["A"])
        >>> _ = net.add_cpt("A", [0.3, 0.7])
        >>> _ = net.add_cpt("B", [[0.9, 0.1], [0.2, 0.8]])
        >>> posterior(net, "A", {"B": "true"}).as_dict()
        {'true': 0.65854, 'false': 0.34146}
    """
    config = InferenceConfig(ordering=ordering, precision=precision, prune_zeros=prune_zeros)
    ve = VariableElimination(network, config, observer=observer)
    return ve.query(query, evidence or {})


def posteriors(
    network: BayesianNetwork,
    variables: Optional[Iterable[str]] = None,
    evidence: Optional[Mapping[str, str]] = None,
    **kwargs
) -> Dict[str, Posterior]:
    """
    Posterior of several variables under the same evidence.

    Args:
        network: Loaded network
        variables: Names to query (default: every unobserved variable)
        evidence: Observed values by variable name
        **kwargs: Passed to posterior

    Returns:
        Map from variable name to Posterior
    """
    evidence = dict(evidence or {})
    if variables is None:
        variables = [n for n in network.variables if n not in evidence]
    return {name: posterior(network, name, evidence, **kwargs) for name in variables}


def probability(
    network: BayesianNetwork,
    query: str,
    value: str,
    evidence: Optional[Mapping[str, str]] = None,
    **kwargs
) -> float:
    """P(query = value | evidence)."""
    return posterior(network, query, evidence, **kwargs)[value]
