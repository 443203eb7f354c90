"""
bnve/algebra/potential.py

A Potential is a dense numpy tensor over a *named* domain (ordered variables).

It is the brute-force counterpart of Factor: every assignment has an entry,
so products and sums are plain broadcasting and axis reductions. It is used
to cross-check elimination results against full joint enumeration.

Key operations:
  - star:     aligned pointwise product on U+W
  - restrict: sum onto a target domain, axes in exactly target order
  - slice:    fix one variable to a value index (evidence)
  - normalize: divide by the total mass
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from bnve.core.exceptions import ContradictoryEvidenceError
from bnve.core.variable import Table, Variable


@dataclass(frozen=True)
class Potential:
    """
    A nonnegative tensor over an ordered domain.

    Attributes:
        domain: Ordered variable names (axis labels).
        data: ndarray shaped by the variable cardinalities in the *same order*.
    """
    domain: Tuple[str, ...]
    data: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "domain", tuple(self.domain))
        if len(self.domain) != self.data.ndim:
            raise ValueError(
                f"Potential domain rank mismatch: |domain|={len(self.domain)} "
                f"but data.ndim={self.data.ndim}"
            )
        if len(set(self.domain)) != len(self.domain):
            raise ValueError(f"Potential domain has duplicates: {self.domain}")

    @staticmethod
    def unit(domain: Sequence[str], shape: Sequence[int]) -> "Potential":
        return Potential(tuple(domain), np.ones(tuple(shape), dtype=np.float64))

    @staticmethod
    def from_table(table: Table, variables: Dict[str, Variable]) -> "Potential":
        """Dense CPT tensor with axes (variable, parent_1, ..., parent_k)."""
        cols = [variables[c] for c in table.columns]
        data = np.zeros(tuple(v.card for v in cols), dtype=np.float64)
        for row in table.rows:
            data[tuple(v.index_of(a) for v, a in zip(cols, row.assignment))] = row.probability
        return Potential(table.columns, data)

    def axis_of(self, v: str) -> int:
        """Returns the axis index of variable v in self.domain."""
        return self.domain.index(v)

    def dim_of(self, v: str) -> int:
        return self.data.shape[self.axis_of(v)]

    def _aligned_view(self, target_domain: Tuple[str, ...], target_shape: Tuple[int, ...]) -> np.ndarray:
        """
        Broadcast view of data aligned to target_domain.

        Existing axes are permuted into target order and missing axes become
        singleton dimensions before broadcasting.
        """
        src_pos = {v: i for i, v in enumerate(self.domain)}
        perm = [src_pos[v] for v in target_domain if v in src_pos]

        data = self.data
        if perm and perm != list(range(data.ndim)):
            data = np.transpose(data, axes=perm)

        shape = []
        j = 0
        for v in target_domain:
            if v in src_pos:
                shape.append(data.shape[j])
                j += 1
            else:
                shape.append(1)

        return np.broadcast_to(data.reshape(shape), target_shape)

    def star(self, other: "Potential", union_domain: Optional[Sequence[str]] = None) -> "Potential":
        """
        Pointwise product on the union domain.

        If union_domain is None, the union keeps self's order followed by
        other's new variables, matching Factor.join.
        """
        if union_domain is None:
            union = self.domain + tuple(v for v in other.domain if v not in self.domain)
        else:
            union = tuple(union_domain)

        target_shape = []
        for v in union:
            if v in self.domain:
                target_shape.append(self.dim_of(v))
            elif v in other.domain:
                target_shape.append(other.dim_of(v))
            else:
                raise RuntimeError(f"Variable {v} not in either domain")
        target_shape = tuple(target_shape)

        a = self._aligned_view(union, target_shape)
        b = other._aligned_view(union, target_shape)
        return Potential(union, a * b)

    def restrict(self, target_domain: Sequence[str]) -> "Potential":
        """
        Sum onto exactly the variables in target_domain, in that order.

        target_domain must be a subset of self.domain.
        """
        T = tuple(target_domain)
        U = self.domain
        for v in T:
            if v not in U:
                raise ValueError(f"restrict target var {v} not in potential domain {U}")
        if T == U:
            return self
        if not T:
            return Potential((), np.asarray(np.sum(self.data)).reshape(()))

        kept_axes = [U.index(v) for v in T]
        elim_axes = [i for i, v in enumerate(U) if v not in T]
        data = np.transpose(self.data, axes=kept_axes + elim_axes)
        if elim_axes:
            data = np.sum(data, axis=tuple(range(len(kept_axes), len(U))))
        return Potential(T, data)

    def slice(self, v: str, index: int) -> "Potential":
        """Fix v to the value at index and drop its axis."""
        ax = self.axis_of(v)
        data = np.take(self.data, index, axis=ax)
        return Potential(self.domain[:ax] + self.domain[ax + 1:], data)

    def normalize(self) -> "Potential":
        """
        Divide by the total mass.

        Raises:
            ContradictoryEvidenceError: if the total is zero.
        """
        s = float(np.sum(self.data))
        if s == 0.0:
            raise ContradictoryEvidenceError("Potential has zero total mass")
        return Potential(self.domain, self.data / s)

    def items(self, variables: Dict[str, Variable]):
        """Yield (assignment labels, value) for every entry."""
        cols = [variables[v] for v in self.domain]
        for combo in itertools.product(*(range(v.card) for v in cols)):
            yield tuple(v.domain[i] for v, i in zip(cols, combo)), float(self.data[combo])

    def __repr__(self) -> str:
        return f"Potential(domain={self.domain}, shape={self.data.shape})"
