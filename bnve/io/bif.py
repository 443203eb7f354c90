"""
bnve/io/bif.py

Reader and writer for the Bayesian Interchange Format (.bif).

Supported subset:

    network NAME { }
    variable A {
      type discrete [ 2 ] { true, false };
    }
    probability ( A ) {
      table 0.3, 0.7;
    }
    probability ( B | A ) {
      (true) 0.9, 0.1;
      (false) 0.2, 0.8;
    }

Each conditional row lists the distribution of the child for one parent
configuration. ``property`` lines are ignored, ``//`` starts a comment.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Tuple, Union

from bnve.core.exceptions import BIFParseError, NetworkIntegrityError
from bnve.core.network import BayesianNetwork
from bnve.core.variable import ProbRow, Table

# Regex patterns for parsing
network_pattern = re.compile(r"^network\s+(.*?)\s*\{\s*\}?$")
variable_pattern = re.compile(r"^variable\s+(\S+)\s*\{$")
type_pattern = re.compile(r"^type\s+discrete\s*\[\s*(\d+)\s*\]\s*\{\s*(.+?)\s*\}\s*;$")
probability_pattern = re.compile(r"^probability\s*\(\s*([^|)]+?)\s*(?:\|\s*([^)]*?)\s*)?\)\s*\{$")
table_pattern = re.compile(r"^table\s+(.+?)\s*;$")
row_pattern = re.compile(r"^\(\s*(.+?)\s*\)\s*(.+?)\s*;$")


def _split(s: str) -> List[str]:
    return [p.strip() for p in s.split(",") if p.strip()]


def _floats(s: str, lineno: int, line: str) -> List[float]:
    try:
        return [float(x) for x in _split(s)]
    except ValueError:
        raise BIFParseError("Expected a list of numbers", line=lineno, line_text=line) from None


def parse_bif(text: str) -> BayesianNetwork:
    """
    Parse BIF text into a validated network.

    Raises:
        BIFParseError: unrecognised syntax
        NetworkIntegrityError: incomplete CPTs, unknown parents, cycles
    """
    net = BayesianNetwork()
    # (name, parents, rows, line where the block opened)
    pending: List[Tuple[str, Tuple[str, ...], List[ProbRow], int]] = []

    block = None  # ("variable", name) | ("probability", name, parents, rows)
    var_has_type = False

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue

        if block is None:
            m = network_pattern.match(line)
            if m:
                net.name = m.group(1) or net.name
                if not line.endswith("}"):
                    block = ("network",)
                continue
            m = variable_pattern.match(line)
            if m:
                block = ("variable", m.group(1))
                var_has_type = False
                continue
            m = probability_pattern.match(line)
            if m:
                child = m.group(1)
                parents = tuple(_split(m.group(2) or ""))
                if child not in net:
                    raise BIFParseError(f"Probability for undeclared variable {child!r}", line=lineno, line_text=raw)
                block = ("probability", child, parents, [], lineno)
                continue
            raise BIFParseError("Unrecognised declaration", line=lineno, line_text=raw)

        kind = block[0]
        if line == "}" or line == "};":
            if kind == "variable" and not var_has_type:
                raise BIFParseError(f"Variable {block[1]!r} has no type", line=lineno, line_text=raw)
            if kind == "probability":
                _, child, parents, rows, opened = block
                pending.append((child, parents, rows, opened))
            block = None
            continue

        if kind == "network" or line.startswith("property"):
            continue

        if kind == "variable":
            m = type_pattern.match(line)
            if not m:
                raise BIFParseError("Unrecognised variable declaration", line=lineno, line_text=raw)
            values = _split(m.group(2))
            if int(m.group(1)) != len(values):
                raise BIFParseError(
                    f"Declared {m.group(1)} values but listed {len(values)}", line=lineno, line_text=raw
                )
            try:
                net.add_variable(block[1], values)
            except NetworkIntegrityError as e:
                raise BIFParseError(str(e), line=lineno, line_text=raw) from None
            var_has_type = True
            continue

        _, child, parents, rows, _ = block
        domain = net.variable(child).domain
        m = table_pattern.match(line)
        if m:
            if parents:
                raise BIFParseError(
                    "'table' is only supported for variables without parents", line=lineno, line_text=raw
                )
            probs = _floats(m.group(1), lineno, raw)
            if len(probs) != len(domain):
                raise BIFParseError(f"Expected {len(domain)} probabilities", line=lineno, line_text=raw)
            rows.extend(ProbRow((v,), p) for v, p in zip(domain, probs))
            continue
        m = row_pattern.match(line)
        if m:
            parent_values = tuple(_split(m.group(1)))
            if len(parent_values) != len(parents):
                raise BIFParseError(
                    f"Expected {len(parents)} parent values", line=lineno, line_text=raw
                )
            probs = _floats(m.group(2), lineno, raw)
            if len(probs) != len(domain):
                raise BIFParseError(f"Expected {len(domain)} probabilities", line=lineno, line_text=raw)
            rows.extend(ProbRow((v,) + parent_values, p) for v, p in zip(domain, probs))
            continue
        raise BIFParseError("Unrecognised probability entry", line=lineno, line_text=raw)

    if block is not None:
        raise BIFParseError(f"Unterminated {block[0]} block at end of input")

    for child, parents, rows, opened in pending:
        try:
            net.set_parents(child, parents)
            var = net.variable(child)
            net.add_table(Table(var, tuple(rows)))
        except NetworkIntegrityError as e:
            raise BIFParseError(str(e), line=opened) from None

    net.validate()
    return net


def read_bif(path: Union[str, Path]) -> BayesianNetwork:
    """Load a network from a .bif file; the file stem names the network."""
    path = Path(path)
    net = parse_bif(path.read_text(encoding="utf-8"))
    if net.name == "network":
        net.name = path.stem
    return net


def dumps_bif(network: BayesianNetwork) -> str:
    """Serialize a network to BIF text."""
    lines = [f"network {network.name} {{", "}"]
    for var in network.all_variables():
        lines.append(f"variable {var.name} {{")
        lines.append(f"  type discrete [ {var.card} ] {{ {', '.join(var.domain)} }};")
        lines.append("}")

    for var in network.all_variables():
        table = network.table(var.name)
        probs: Dict[Tuple[str, ...], Dict[str, float]] = {}
        for row in table.rows:
            probs.setdefault(row.assignment[1:], {})[row.assignment[0]] = row.probability
        if var.parents:
            lines.append(f"probability ( {var.name} | {', '.join(var.parents)} ) {{")
            for parent_values, dist in probs.items():
                values = ", ".join(repr(dist[v]) for v in var.domain)
                lines.append(f"  ({', '.join(parent_values)}) {values};")
        else:
            lines.append(f"probability ( {var.name} ) {{")
            lines.append(f"  table {', '.join(repr(probs[()][v]) for v in var.domain)};")
        lines.append("}")
    return "\n".join(lines) + "\n"
