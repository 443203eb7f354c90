"""
bnve/algebra/factor.py

A Factor is a table of probability rows over an ordered scope of variables.

Key operations:
  - from_table: evidence factor built from a CPT (copy-on-restrict)
  - restrict:   keep rows where a variable has a given value
  - join:       product on the union scope, matching on all shared variables
  - marginalize: sum one variable out
  - unit:       identity factor (all ones)

Design constraints:
  - Scope ordering is *semantic*: row values correspond 1-1 to scope entries.
  - Rows may be pruned (evidence, zero pruning): a missing row means zero.
  - Factors are immutable; every operation returns a new Factor.
"""

from __future__ import annotations

import heapq
import itertools
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import numpy as np

from bnve.core.exceptions import ContradictoryEvidenceError
from bnve.core.variable import ProbRow, Table, Variable

VarRef = Union[Variable, str]


def _name(v: VarRef) -> str:
    return v if isinstance(v, str) else v.name


@dataclass(frozen=True)
class Factor:
    """
    A probability table over an ordered scope.

    Attributes:
        scope: Ordered, distinct variables (column labels).
        rows: ProbRows whose assignments are aligned to scope.
    """
    scope: Tuple[Variable, ...]
    rows: Tuple[ProbRow, ...]

    def __post_init__(self):
        object.__setattr__(self, "scope", tuple(self.scope))
        object.__setattr__(self, "rows", tuple(self.rows))
        names = self.names
        if len(set(names)) != len(names):
            raise ValueError(f"Factor scope has duplicates: {names}")
        seen = set()
        for row in self.rows:
            if len(row.assignment) != len(names):
                raise ValueError(
                    f"Factor row {row.assignment} does not match scope {names}"
                )
            if row.assignment in seen:
                raise ValueError(f"Factor has duplicate assignment {row.assignment}")
            seen.add(row.assignment)

    @staticmethod
    def unit(scope: Sequence[Variable] = ()) -> "Factor":
        """
        Unit factor 1_U: constant one on every assignment of scope.
        """
        scope = tuple(scope)
        rows = tuple(
            ProbRow(combo, 1.0) for combo in itertools.product(*(v.domain for v in scope))
        )
        return Factor(scope, rows)

    @staticmethod
    def constant(value: float) -> "Factor":
        """Factor with empty scope holding a single number."""
        return Factor((), (ProbRow((), value),))

    @staticmethod
    def from_table(table: Table, variables: Mapping[str, Variable], validate: bool = True) -> "Factor":
        """
        Evidence factor of one variable.

        The scope starts as [variable, parents...]. Rows disagreeing with an
        observed scope member are discarded, and the columns of observed
        parents are removed. The variable's own column stays even when it is
        observed, restricted to the observed value.

        Args:
            table: CPT of the variable (left untouched)
            variables: Evidence-annotated network variables by name
            validate: Check the table is complete first

        Raises:
            NetworkIntegrityError: if the table is incomplete or malformed.
            ContradictoryEvidenceError: if no row survives restriction.
        """
        if validate:
            table.validate(variables)
        subject = variables[table.variable.name]
        scope = [subject] + [variables[p] for p in subject.parents]

        rows: Iterable[ProbRow] = table.rows
        keep = []
        for i, var in enumerate(scope):
            if var.is_observed:
                rows = [r for r in rows if r.assignment[i] == var.observed_value]
            if i == 0 or not var.is_observed:
                keep.append(i)

        out_rows = tuple(
            ProbRow(tuple(r.assignment[i] for i in keep), r.probability) for r in rows
        )
        if not out_rows:
            raise ContradictoryEvidenceError(
                f"Evidence leaves no rows in the CPT of {subject.name!r}"
            )
        return Factor(tuple(scope[i] for i in keep), out_rows)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.scope)

    @property
    def width(self) -> int:
        return len(self.scope)

    @property
    def is_constant(self) -> bool:
        return not self.scope

    @property
    def is_fully_observed(self) -> bool:
        """True when every scope variable is evidence (degenerate factor)."""
        return all(v.is_observed for v in self.scope)

    def __len__(self) -> int:
        return len(self.rows)

    def contains(self, v: VarRef) -> bool:
        return _name(v) in self.names

    def column(self, v: VarRef) -> int:
        """Returns the column index of variable v in self.scope."""
        n = _name(v)
        try:
            return self.names.index(n)
        except ValueError:
            raise ValueError(f"Variable {n!r} not in factor scope {self.names}") from None

    def probabilities(self) -> np.ndarray:
        return np.fromiter((r.probability for r in self.rows), dtype=np.float64, count=len(self.rows))

    def total(self) -> float:
        """Sum of all row probabilities."""
        return float(np.sum(self.probabilities()))

    def as_dict(self) -> Dict[Tuple[str, ...], float]:
        return {r.assignment: r.probability for r in self.rows}

    def restrict(self, v: VarRef, value: str, drop: bool = True) -> "Factor":
        """
        Keep rows where v == value, optionally removing v's column.

        Raises:
            ContradictoryEvidenceError: if no row matches.
        """
        i = self.column(v)
        rows = [r for r in self.rows if r.assignment[i] == value]
        if not rows:
            raise ContradictoryEvidenceError(
                f"No row of factor over {self.names} has {self.names[i]}={value!r}"
            )
        if not drop:
            return Factor(self.scope, tuple(rows))
        scope = self.scope[:i] + self.scope[i + 1:]
        return Factor(
            scope,
            tuple(ProbRow(r.assignment[:i] + r.assignment[i + 1:], r.probability) for r in rows),
        )

    def join(self, other: "Factor", prune_zeros: bool = False) -> "Factor":
        """
        Product on the union scope.

        (f * g)(x_{U+W}) = f(x_U) * g(x_W)

        Scope order: self.scope, then the members of other.scope not already
        present. Rows pair when they agree on every shared variable. When
        one scope contains the other, the smaller factor only filters and
        scales the larger one; no column is duplicated.
        """
        pos = {n: i for i, n in enumerate(self.names)}
        shared = [n for n in other.names if n in pos]
        idx_self = [pos[n] for n in shared]
        idx_other = [other.column(n) for n in shared]
        extra = [j for j, n in enumerate(other.names) if n not in pos]

        index: Dict[Tuple[str, ...], List[ProbRow]] = defaultdict(list)
        for r2 in other.rows:
            index[tuple(r2.assignment[j] for j in idx_other)].append(r2)

        rows = []
        for r1 in self.rows:
            key = tuple(r1.assignment[i] for i in idx_self)
            for r2 in index.get(key, ()):
                p = r1.probability * r2.probability
                if prune_zeros and p == 0.0:
                    continue
                rows.append(ProbRow(r1.assignment + tuple(r2.assignment[j] for j in extra), p))

        scope = self.scope + tuple(other.scope[j] for j in extra)
        return Factor(scope, tuple(rows))

    def marginalize(self, v: VarRef) -> "Factor":
        """
        Sum v out.

        (sum_v f)(x_{U\\v}) = sum over the rows present for x_{U\\v}

        Each distinct remaining assignment appears once, in order of first
        occurrence. Absent combinations count as zero.
        """
        i = self.column(v)
        groups: Dict[Tuple[str, ...], float] = {}
        for r in self.rows:
            key = r.assignment[:i] + r.assignment[i + 1:]
            groups[key] = groups.get(key, 0.0) + r.probability
        scope = self.scope[:i] + self.scope[i + 1:]
        return Factor(scope, tuple(ProbRow(k, p) for k, p in groups.items()))

    def project(self, keep: Sequence[VarRef]) -> "Factor":
        """Marginalize every variable not in keep."""
        keep_names = {_name(v) for v in keep}
        out = self
        for n in self.names:
            if n not in keep_names:
                out = out.marginalize(n)
        return out

    def drop_zeros(self) -> "Factor":
        return Factor(self.scope, tuple(r for r in self.rows if r.probability != 0.0))

    def to_potential(self):
        """Dense numpy rendering; absent rows become zero."""
        from bnve.algebra.potential import Potential

        data = np.zeros(tuple(v.card for v in self.scope), dtype=np.float64)
        for r in self.rows:
            idx = tuple(v.index_of(a) for v, a in zip(self.scope, r.assignment))
            data[idx] = r.probability
        return Potential(self.names, data)

    def __repr__(self) -> str:
        return f"Factor(scope={self.names}, rows={len(self.rows)})"


def join_all(factors: Sequence[Factor], prune_zeros: bool = False) -> Factor:
    """
    Join factors pairwise, always combining the two smallest scopes.

    The product is pushed back into the heap, so intermediate factors stay as
    small as the inputs allow. Ties keep insertion order.

    Raises:
        ValueError: if factors is empty.
    """
    if not factors:
        raise ValueError("join_all needs at least one factor")
    counter = itertools.count()
    heap = [(f.width, next(counter), f) for f in factors]
    heapq.heapify(heap)
    while len(heap) > 1:
        _, _, a = heapq.heappop(heap)
        _, _, b = heapq.heappop(heap)
        ab = a.join(b, prune_zeros=prune_zeros)
        heapq.heappush(heap, (ab.width, next(counter), ab))
    return heap[0][2]
