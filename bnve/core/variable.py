"""
bnve/core/variable.py

Network building blocks: variables, probability rows and CPT tables.

Variables are value objects keyed by name. Equality and hashing only look at
the name, so an observed copy of a variable is still "the same" variable for
scope membership tests.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, Optional, Sequence, Tuple

import numpy as np

from bnve.core.exceptions import NetworkIntegrityError, QueryError


@dataclass(frozen=True)
class Variable:
    """
    A discrete random variable.

    Attributes:
        name: Identity key
        domain: Ordered, distinct value labels
        parents: Ordered parent names (column order of the CPT)
        observed_value: Evidence value, or None when unobserved
    """
    name: str
    domain: Tuple[str, ...] = field(compare=False)
    parents: Tuple[str, ...] = field(default=(), compare=False)
    observed_value: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "domain", tuple(self.domain))
        object.__setattr__(self, "parents", tuple(self.parents))
        if not self.domain:
            raise NetworkIntegrityError(f"Variable {self.name!r} has an empty domain")
        if len(set(self.domain)) != len(self.domain):
            raise NetworkIntegrityError(f"Variable {self.name!r} has duplicate values: {self.domain}")
        if len(set(self.parents)) != len(self.parents):
            raise NetworkIntegrityError(f"Variable {self.name!r} lists a parent twice: {self.parents}")
        if self.name in self.parents:
            raise NetworkIntegrityError(f"Variable {self.name!r} is its own parent")
        if self.observed_value is not None and self.observed_value not in self.domain:
            raise QueryError(
                f"Observed value {self.observed_value!r} not in domain of {self.name!r}: {self.domain}"
            )

    @property
    def is_observed(self) -> bool:
        return self.observed_value is not None

    @property
    def card(self) -> int:
        return len(self.domain)

    @property
    def num_parents(self) -> int:
        return len(self.parents)

    def index_of(self, value: str) -> int:
        """Position of value in the domain."""
        try:
            return self.domain.index(value)
        except ValueError:
            raise ValueError(f"{value!r} is not a value of {self.name!r}") from None

    def observe(self, value: str) -> "Variable":
        """Return a copy of this variable fixed to value."""
        return replace(self, observed_value=value)

    def unobserve(self) -> "Variable":
        """Return a copy of this variable without evidence."""
        if self.observed_value is None:
            return self
        return replace(self, observed_value=None)

    def __str__(self) -> str:
        return f"{self.name} - {', '.join(self.domain)}"


@dataclass(frozen=True)
class ProbRow:
    """One table row: a positional assignment and its probability."""
    assignment: Tuple[str, ...]
    probability: float

    def __post_init__(self):
        object.__setattr__(self, "assignment", tuple(self.assignment))
        object.__setattr__(self, "probability", float(self.probability))

    def __str__(self) -> str:
        return f"{', '.join(self.assignment)} | {self.probability:g}"


@dataclass(frozen=True)
class Table:
    """
    Conditional probability table of one variable.

    Rows are aligned to ``columns`` = (variable, parent_1, ..., parent_k).
    """
    variable: Variable
    rows: Tuple[ProbRow, ...]

    def __post_init__(self):
        object.__setattr__(self, "rows", tuple(self.rows))
        width = len(self.columns)
        for row in self.rows:
            if len(row.assignment) != width:
                raise NetworkIntegrityError(
                    f"CPT of {self.variable.name!r}: row {row.assignment} has "
                    f"{len(row.assignment)} values, expected {width}"
                )

    @property
    def columns(self) -> Tuple[str, ...]:
        return (self.variable.name,) + self.variable.parents

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[ProbRow]:
        return iter(self.rows)

    def lookup(self) -> Dict[Tuple[str, ...], float]:
        """Map from assignment to probability."""
        return {row.assignment: row.probability for row in self.rows}

    def validate(self, variables: Dict[str, Variable]) -> None:
        """
        Check the table enumerates every (value x parent values) combination once.

        Args:
            variables: Network variables by name (must contain all parents)

        Raises:
            NetworkIntegrityError: on unknown parents, foreign labels,
                duplicate or missing rows.
        """
        name = self.variable.name
        cols = []
        for col in self.columns:
            if col not in variables:
                raise NetworkIntegrityError(f"CPT of {name!r} references unknown variable {col!r}")
            cols.append(variables[col])

        expected = 1
        for v in cols:
            expected *= v.card

        seen = set()
        for row in self.rows:
            for v, value in zip(cols, row.assignment):
                if value not in v.domain:
                    raise NetworkIntegrityError(
                        f"CPT of {name!r}: value {value!r} not in domain of {v.name!r}"
                    )
            if row.assignment in seen:
                raise NetworkIntegrityError(f"CPT of {name!r}: duplicate row {row.assignment}")
            seen.add(row.assignment)

        if len(seen) != expected:
            missing = next(
                combo for combo in itertools.product(*(v.domain for v in cols)) if combo not in seen
            )
            raise NetworkIntegrityError(
                f"CPT of {name!r} has {len(seen)} rows, expected {expected}; "
                f"no row for assignment {missing}"
            )

    @staticmethod
    def from_array(variable: Variable, parents: Sequence[Variable], values) -> "Table":
        """
        Build a table from a dense array.

        The array is shaped ``(|parent_1|, ..., |parent_k|, |variable|)``: one
        distribution over the variable per parent configuration, first parent
        varying slowest. A flat list of the right length is accepted too.
        """
        if tuple(p.name for p in parents) != variable.parents:
            raise NetworkIntegrityError(
                f"CPT of {variable.name!r}: parents {[p.name for p in parents]} "
                f"do not match declared parents {list(variable.parents)}"
            )
        shape = tuple(p.card for p in parents) + (variable.card,)
        arr = np.asarray(values, dtype=np.float64)
        if arr.size != int(np.prod(shape)):
            raise NetworkIntegrityError(
                f"CPT of {variable.name!r}: got {arr.size} values, expected shape {shape}"
            )
        arr = arr.reshape(shape)

        rows = []
        for combo in itertools.product(*(range(p.card) for p in parents)):
            parent_values = tuple(p.domain[i] for p, i in zip(parents, combo))
            for k, value in enumerate(variable.domain):
                rows.append(ProbRow((value,) + parent_values, arr[combo + (k,)]))
        return Table(variable, tuple(rows))

    def __str__(self) -> str:
        header = self.variable.name
        if self.variable.parents:
            header += " | " + ", ".join(self.variable.parents)
        return "\n".join([header] + [str(r) for r in self.rows])
