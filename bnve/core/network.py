"""
bnve/core/network.py

Bayesian network structure with CPTs.

A network consists of:
- Variables with ordered domains and ordered parent lists
- One CPT table per variable
- A directed parent -> child graph (networkx), which must be acyclic
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from bnve.core.exceptions import NetworkIntegrityError, QueryError
from bnve.core.variable import Table, Variable


class BayesianNetwork:
    """
    Discrete Bayesian network.

    Maintains:
    - Variables in declaration order (the tie-break order for elimination)
    - CPT tables by variable name
    - Evidence annotations carried on the variables themselves

    Evidence is never set in place by the inference code: ``with_evidence``
    returns an annotated copy sharing the (immutable) tables.
    """

    def __init__(self, name: str = "network"):
        self.name = name
        self.variables: Dict[str, Variable] = {}
        self.tables: Dict[str, Table] = {}

    def add_variable(self, name: str, domain: Sequence[str], parents: Sequence[str] = ()) -> Variable:
        """Add a variable. Parents may be declared before or after it."""
        if name in self.variables:
            raise NetworkIntegrityError(f"Variable {name!r} declared twice")
        var = Variable(name, tuple(domain), tuple(parents))
        self.variables[name] = var
        return var

    def set_parents(self, name: str, parents: Sequence[str]) -> Variable:
        """Replace the parent list of a variable that has no table yet."""
        if name in self.tables:
            raise NetworkIntegrityError(f"Cannot change parents of {name!r} after its CPT is set")
        var = Variable(name, self.variable(name).domain, tuple(parents))
        self.variables[name] = var
        return var

    def add_table(self, table: Table) -> None:
        name = table.variable.name
        if name not in self.variables:
            raise NetworkIntegrityError(f"CPT given for undeclared variable {name!r}")
        if name in self.tables:
            raise NetworkIntegrityError(f"CPT of {name!r} given twice")
        declared = self.variables[name]
        if table.variable.parents != declared.parents or table.variable.domain != declared.domain:
            raise NetworkIntegrityError(f"CPT of {name!r} does not match its declaration")
        self.tables[name] = table

    def add_cpt(self, name: str, values) -> Table:
        """
        Attach a CPT given as a dense array.

        Args:
            name: Variable name
            values: Array shaped (|parent_1|, ..., |parent_k|, |name|)

        Returns:
            The created Table
        """
        var = self.variable(name)
        parents = [self.variable(p) for p in var.parents]
        table = Table.from_array(var, parents, values)
        self.add_table(table)
        return table

    def variable(self, name: str) -> Variable:
        try:
            return self.variables[name]
        except KeyError:
            raise NetworkIntegrityError(f"Unknown variable {name!r}") from None

    def table(self, name: str) -> Table:
        try:
            return self.tables[name]
        except KeyError:
            raise NetworkIntegrityError(f"Variable {name!r} has no CPT") from None

    def all_variables(self) -> List[Variable]:
        """Variables in declaration order."""
        return list(self.variables.values())

    def __contains__(self, name: str) -> bool:
        return name in self.variables

    def __len__(self) -> int:
        return len(self.variables)

    @property
    def graph(self) -> nx.DiGraph:
        """Parent -> child graph."""
        g = nx.DiGraph()
        for name, var in self.variables.items():
            g.add_node(name)
            for p in var.parents:
                g.add_edge(p, name)
        return g

    def children(self, name: str) -> List[str]:
        return [v.name for v in self.variables.values() if name in v.parents]

    def topological_order(self) -> List[str]:
        """Variable names with every parent before its children."""
        self._check_acyclic()
        index = {n: i for i, n in enumerate(self.variables)}
        return list(nx.lexicographical_topological_sort(self.graph, key=index.__getitem__))

    def _check_acyclic(self) -> None:
        for name, var in self.variables.items():
            for p in var.parents:
                if p not in self.variables:
                    raise NetworkIntegrityError(f"Variable {name!r} has unknown parent {p!r}")
        g = self.graph
        if not nx.is_directed_acyclic_graph(g):
            cycle = nx.find_cycle(g)
            path = " -> ".join([u for u, _ in cycle] + [cycle[0][0]])
            raise NetworkIntegrityError(f"Parent relation is cyclic: {path}")

    def validate(self) -> None:
        """
        Check the network is complete and consistent.

        Raises:
            NetworkIntegrityError: unknown parents, cycles, missing or
                malformed CPTs.
        """
        if not self.variables:
            raise NetworkIntegrityError("Network has no variables")
        self._check_acyclic()
        for name in self.variables:
            self.table(name).validate(self.variables)

    @property
    def evidence(self) -> Dict[str, str]:
        return {n: v.observed_value for n, v in self.variables.items() if v.is_observed}

    def with_evidence(self, evidence: Optional[Mapping[str, str]]) -> "BayesianNetwork":
        """
        Return a copy annotated with exactly the given evidence.

        Any evidence already on this network is replaced. Tables are shared.

        Raises:
            QueryError: unknown variable or value outside its domain.
        """
        evidence = dict(evidence or {})
        for name, value in evidence.items():
            if name not in self.variables:
                raise QueryError(f"Evidence on unknown variable {name!r}")
            if value not in self.variables[name].domain:
                raise QueryError(
                    f"Evidence {name}={value!r} not in domain {self.variables[name].domain}"
                )

        out = BayesianNetwork(self.name)
        for name, var in self.variables.items():
            out.variables[name] = var.observe(evidence[name]) if name in evidence else var.unobserve()
        out.tables = dict(self.tables)
        return out

    @classmethod
    def from_tables(cls, tables: Iterable[Table], name: str = "network") -> "BayesianNetwork":
        """Build a network from tables; variables are declared in table order."""
        net = cls(name)
        tables = list(tables)
        for t in tables:
            v = t.variable
            net.add_variable(v.name, v.domain, v.parents)
        for t in tables:
            net.add_table(t)
        return net

    def product_formula(self) -> List[Tuple[str, Tuple[str, ...]]]:
        """(variable, parents) pairs of the chain-rule factorization."""
        return [(v.name, v.parents) for v in self.variables.values()]

    def __repr__(self) -> str:
        return f"BayesianNetwork(name={self.name!r}, vars={len(self.variables)}, tables={len(self.tables)})"
