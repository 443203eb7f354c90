"""
bnve/inference/ordering.py

Elimination-order heuristics.

An ordering strategy takes the candidate variables (in declaration order)
and the active factors, and returns the candidates in elimination order.
Both built-in heuristics are cheap greedy rules, not tree-width
optimizers: dense networks may see larger intermediate factors than an
optimal order would produce.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Union

from bnve.algebra.factor import Factor
from bnve.core.variable import Variable

OrderingStrategy = Callable[[Sequence[Variable], Sequence[Factor]], List[Variable]]


def least_incoming(candidates: Sequence[Variable], factors: Sequence[Factor]) -> List[Variable]:
    """Fewest parents first; ties keep declaration order."""
    return sorted(candidates, key=lambda v: v.num_parents)


def fewest_factors(candidates: Sequence[Variable], factors: Sequence[Factor]) -> List[Variable]:
    """Fewest active factors mentioning the variable first; ties keep declaration order."""
    counts = {v.name: sum(1 for f in factors if f.contains(v)) for v in candidates}
    return sorted(candidates, key=lambda v: counts[v.name])


ORDERINGS: Dict[str, OrderingStrategy] = {
    "least-incoming": least_incoming,
    "fewest-factors": fewest_factors,
}

DEFAULT_ORDERING = "least-incoming"


def get_ordering(ordering: Union[str, OrderingStrategy, None]) -> OrderingStrategy:
    """
    Resolve an ordering strategy by name, or pass a callable through.

    Raises:
        ValueError: for an unknown name.
    """
    if ordering is None:
        return ORDERINGS[DEFAULT_ORDERING]
    if callable(ordering):
        return ordering
    try:
        return ORDERINGS[ordering]
    except KeyError:
        raise ValueError(
            f"Unknown ordering {ordering!r}; available: {', '.join(ORDERINGS)}"
        ) from None
