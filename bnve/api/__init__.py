"""
API module: High-level posterior queries and text reports.
"""

from bnve.api.query import posterior, posteriors, probability
from bnve.api.report import (
    format_product_formula,
    format_factor,
    format_factor_formula,
    format_elimination_order,
    format_step,
    format_posterior,
    format_trace,
)

__all__ = [
    "posterior",
    "posteriors",
    "probability",
    "format_product_formula",
    "format_factor",
    "format_factor_formula",
    "format_elimination_order",
    "format_step",
    "format_posterior",
    "format_trace",
]
