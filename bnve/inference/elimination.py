"""
bnve/inference/elimination.py

Variable elimination scheduler.

The run moves through INIT -> FACTORIZED -> ELIMINATING -> RESIDUAL_MERGE
(only when several factors survive) -> NORMALIZED -> DONE. Every run owns
its working set of factors; the network and its tables are only read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

from bnve.algebra.factor import Factor, join_all
from bnve.algebra.normalize import DEFAULT_PRECISION, normalize
from bnve.core.exceptions import ContradictoryEvidenceError, QueryError
from bnve.core.network import BayesianNetwork
from bnve.core.variable import Variable
from bnve.inference.ordering import DEFAULT_ORDERING, OrderingStrategy, get_ordering

logger = logging.getLogger(__name__)


class EliminationState(Enum):
    INIT = 0
    FACTORIZED = 1
    ELIMINATING = 2
    RESIDUAL_MERGE = 3
    NORMALIZED = 4
    DONE = 5


@dataclass(frozen=True)
class InferenceConfig:
    """
    Scheduler settings.

    Attributes:
        ordering: Strategy name ("least-incoming", "fewest-factors") or callable
        precision: Decimal places of the reported probabilities (None: no rounding)
        prune_zeros: Drop zero-probability rows produced by joins
    """
    ordering: Union[str, OrderingStrategy] = DEFAULT_ORDERING
    precision: Optional[int] = DEFAULT_PRECISION
    prune_zeros: bool = False


@dataclass(frozen=True)
class EliminationStep:
    """One summed-out variable: the factors merged, their product, the result."""
    variable: Variable
    inputs: Tuple[Factor, ...]
    product: Factor
    result: Factor


@dataclass
class EliminationTrace:
    """Diagnostic record of a run. Never read back by the scheduler."""
    initial_factors: List[Factor] = field(default_factory=list)
    dropped: List[Factor] = field(default_factory=list)
    order: List[Variable] = field(default_factory=list)
    steps: List[EliminationStep] = field(default_factory=list)
    residual: List[Factor] = field(default_factory=list)
    final: Optional[Factor] = None
    normalized: Optional[Factor] = None
    states: List[EliminationState] = field(default_factory=list)


@dataclass
class Posterior:
    """
    Posterior distribution of the query variable.

    Attributes:
        variable: The query variable
        evidence: Evidence the posterior is conditioned on
        probabilities: One probability per value of variable.domain
        trace: Elimination trace, if recorded
    """
    variable: Variable
    evidence: Dict[str, str]
    probabilities: np.ndarray
    trace: Optional[EliminationTrace] = None

    @property
    def values(self) -> Tuple[str, ...]:
        return self.variable.domain

    def items(self) -> List[Tuple[str, float]]:
        return [(v, float(p)) for v, p in zip(self.values, self.probabilities)]

    def as_dict(self) -> Dict[str, float]:
        return dict(self.items())

    def __getitem__(self, value: str) -> float:
        return float(self.probabilities[self.variable.index_of(value)])

    def __len__(self) -> int:
        return len(self.values)


Observer = Callable[[EliminationState, object], None]


def eliminate(
    network: BayesianNetwork,
    query: Union[str, Variable],
    config: Optional[InferenceConfig] = None,
    *,
    observer: Optional[Observer] = None,
    record_trace: bool = True,
) -> Posterior:
    """
    Run variable elimination on an evidence-annotated network.

    Args:
        network: Network whose variables carry the evidence
        query: Query variable (or its name)
        config: Scheduler settings
        observer: Called with (state, artifact) at every transition and step
        record_trace: Keep an EliminationTrace on the result

    Returns:
        Posterior over the query's domain

    Raises:
        NetworkIntegrityError: malformed network or CPT
        QueryError: unknown or observed query, empty working set
        ContradictoryEvidenceError: evidence with zero probability
    """
    if config is None:
        config = InferenceConfig()
    order_fn = get_ordering(config.ordering)

    qname = query if isinstance(query, str) else query.name
    if qname not in network:
        raise QueryError(f"Query variable {qname!r} is not in the network")
    qvar = network.variable(qname)
    if qvar.is_observed:
        raise QueryError(f"Query variable {qname!r} is observed ({qvar.observed_value!r})")

    trace = EliminationTrace() if record_trace else None

    def emit(state: EliminationState, artifact: object) -> None:
        if trace is not None and (not trace.states or trace.states[-1] != state):
            trace.states.append(state)
        if observer is not None:
            observer(state, artifact)

    emit(EliminationState.INIT, network)
    network.validate()

    # INIT -> FACTORIZED
    factors: List[Factor] = []
    for var in network.all_variables():
        f = Factor.from_table(network.table(var.name), network.variables, validate=False)
        if trace is not None:
            trace.initial_factors.append(f)
        if f.is_fully_observed:
            if f.total() == 0.0:
                raise ContradictoryEvidenceError(
                    f"Evidence has zero probability under the CPT of {var.name!r}"
                )
            logger.debug("Dropping fully observed factor %s", f.names)
            if trace is not None:
                trace.dropped.append(f)
            continue
        factors.append(f)
    logger.debug("Factorized %d variables into %d active factors", len(network), len(factors))
    emit(EliminationState.FACTORIZED, list(factors))

    candidates = [v for v in network.all_variables() if not v.is_observed and v.name != qname]
    order = list(order_fn(candidates, factors))
    if sorted(v.name for v in order) != sorted(v.name for v in candidates):
        raise ValueError("Ordering strategy must return a permutation of its candidates")
    if trace is not None:
        trace.order = order
    logger.debug("Elimination order: %s", [v.name for v in order])

    # ELIMINATING
    for var in order:
        concerning = [f for f in factors if f.contains(var)]
        if not concerning:
            continue
        factors = [f for f in factors if not f.contains(var)]
        if len(concerning) == 1:
            product = concerning[0]
        else:
            product = join_all(concerning, prune_zeros=config.prune_zeros)
        result = product.marginalize(var)
        factors.append(result)

        step = EliminationStep(var, tuple(concerning), product, result)
        if trace is not None:
            trace.steps.append(step)
        logger.debug(
            "Eliminated %s: merged %d factors into %s -> %s",
            var.name, len(concerning), product.names, result.names,
        )
        emit(EliminationState.ELIMINATING, step)

    if not factors:
        raise QueryError(f"No factors left to answer the query on {qname!r}")

    # RESIDUAL_MERGE
    if len(factors) > 1:
        if trace is not None:
            trace.residual = list(factors)
        logger.debug("Residual merge of %d factors: %s", len(factors), [f.names for f in factors])
        final = join_all(factors, prune_zeros=config.prune_zeros)
        emit(EliminationState.RESIDUAL_MERGE, final)
    else:
        final = factors[0]
    if not final.contains(qname):
        raise QueryError(f"Final factor {final.names} does not mention the query {qname!r}")
    if trace is not None:
        trace.final = final

    # NORMALIZED
    answer = normalize(final.project([qname]), precision=config.precision)
    if trace is not None:
        trace.normalized = answer
    emit(EliminationState.NORMALIZED, answer)

    by_value = {r.assignment[0]: r.probability for r in answer.rows}
    probs = np.array([by_value.get(v, 0.0) for v in qvar.domain], dtype=np.float64)
    posterior = Posterior(variable=qvar, evidence=network.evidence, probabilities=probs, trace=trace)
    logger.info("P(%s | %s) = %s", qname, network.evidence, posterior.as_dict())
    emit(EliminationState.DONE, posterior)
    return posterior


class VariableElimination:
    """
    Query interface over one loaded network.

    The network is shared between queries; evidence is applied to a copy for
    each call, so queries with different evidence do not interfere.
    """

    def __init__(
        self,
        network: BayesianNetwork,
        config: Optional[InferenceConfig] = None,
        observer: Optional[Observer] = None,
    ):
        self.network = network
        self.config = config or InferenceConfig()
        self.observer = observer

    def query(
        self,
        variable: Union[str, Variable],
        evidence: Optional[Mapping[str, str]] = None,
        *,
        record_trace: bool = True,
    ) -> Posterior:
        """Posterior of variable given evidence (None keeps the network's own evidence)."""
        net = self.network if evidence is None else self.network.with_evidence(evidence)
        return eliminate(
            net, variable, self.config, observer=self.observer, record_trace=record_trace
        )
