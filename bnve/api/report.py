"""
bnve/api/report.py

Text rendering of networks, factors, elimination traces and answers.

Nothing here feeds back into inference; the CLI and examples print these.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from bnve.algebra.factor import Factor
from bnve.core.network import BayesianNetwork
from bnve.core.variable import Variable
from bnve.inference.elimination import EliminationStep, EliminationTrace, Posterior


def _cond(name: str, parents: Sequence[str]) -> str:
    if parents:
        return f"P({name} | {', '.join(parents)})"
    return f"P({name})"


def format_product_formula(network: BayesianNetwork) -> str:
    """Chain-rule factorization, e.g. ``P(A) P(B | A) P(C | B)``."""
    return " ".join(_cond(n, ps) for n, ps in network.product_formula())


def factor_label(factor: Factor) -> str:
    return f"f({', '.join(factor.names)})"


def format_factor_formula(factors: Iterable[Factor]) -> str:
    return " ".join(factor_label(f) for f in factors) or "1"


def format_factor(factor: Factor, digits: int = 5) -> str:
    """Aligned table: one line per row, probability last."""
    header = list(factor.names) + ["P"]
    body = [list(r.assignment) + [f"{r.probability:.{digits}f}"] for r in factor.rows]
    widths = [max(len(str(c)) for c in col) for col in zip(header, *body)] if body else [len(h) for h in header]
    lines = [" | ".join(h.ljust(w) for h, w in zip(header, widths))]
    lines.append("-+-".join("-" * w for w in widths))
    for cells in body:
        lines.append(" | ".join(c.ljust(w) for c, w in zip(cells, widths)))
    return "\n".join(lines)


def format_elimination_order(order: Sequence[Variable]) -> str:
    return ", ".join(v.name for v in order) or "(empty)"


def format_step(step: EliminationStep) -> str:
    inputs = format_factor_formula(step.inputs)
    return f"sum_{step.variable.name} {inputs} = {factor_label(step.result)}"


def format_posterior(post: Posterior, digits: int = 5) -> str:
    """``P(A | C=true)`` header followed by one line per value."""
    ev = ", ".join(f"{k}={v}" for k, v in post.evidence.items())
    head = f"P({post.variable.name} | {ev})" if ev else f"P({post.variable.name})"
    lines = [head]
    for value, p in post.items():
        lines.append(f"  {post.variable.name}={value}: {p:.{digits}f}")
    return "\n".join(lines)


def format_trace(trace: EliminationTrace, network: BayesianNetwork) -> str:
    """Step-by-step account of an elimination run."""
    lines: List[str] = []
    lines.append(f"Product formula: {format_product_formula(network)}")
    lines.append(f"Initial factors: {format_factor_formula(trace.initial_factors)}")
    if trace.dropped:
        lines.append(f"Dropped (fully observed): {format_factor_formula(trace.dropped)}")
    lines.append(f"Elimination order: {format_elimination_order(trace.order)}")
    for i, step in enumerate(trace.steps, start=1):
        lines.append(f"Step {i}: {format_step(step)}")
    if trace.residual:
        lines.append(f"Residual merge: {format_factor_formula(trace.residual)}")
    if trace.final is not None:
        lines.append(f"Final factor: {factor_label(trace.final)}")
        lines.append(format_factor(trace.final))
    if trace.normalized is not None:
        lines.append("Normalized:")
        lines.append(format_factor(trace.normalized))
    return "\n".join(lines)
