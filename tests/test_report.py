"""
Tests for text reports.
"""

from bnve.algebra.factor import Factor
from bnve.api.query import posterior
from bnve.api.report import (
    factor_label,
    format_factor,
    format_posterior,
    format_product_formula,
    format_trace,
)


def test_product_formula(chain):
    assert format_product_formula(chain) == "P(A) P(B | A) P(C | B)"


def test_factor_label(chain):
    f = Factor.from_table(chain.table("B"), chain.variables)
    assert factor_label(f) == "f(B, A)"


def test_format_factor(chain):
    f = Factor.from_table(chain.table("A"), chain.variables)
    lines = format_factor(f).splitlines()

    assert lines[0].split(" | ") == ["A    ", "P      "]
    assert "0.30000" in lines[2]
    assert len(lines) == 4


def test_format_posterior(chain):
    text = format_posterior(posterior(chain, "A", {"C": "true"}))
    assert text.splitlines() == [
        "P(A | C=true)",
        "  A=true: 0.54098",
        "  A=false: 0.45902",
    ]


def test_format_posterior_without_evidence(chain):
    assert format_posterior(posterior(chain, "A")).splitlines()[0] == "P(A)"


def test_format_trace(chain):
    post = posterior(chain, "A", {"C": "true"})
    text = format_trace(post.trace, chain)

    assert "Elimination order: B" in text
    assert "Step 1: sum_B f(B, A) f(C, B) = f(A, C)" in text
    assert "Residual merge: f(A) f(A, C)" in text
