"""
bnve/algebra/normalize.py

Final-factor post-processing: sum-to-one rescaling with fixed rounding.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from bnve.algebra.factor import Factor
from bnve.core.exceptions import ContradictoryEvidenceError
from bnve.core.variable import ProbRow

DEFAULT_PRECISION = 5


def normalize(factor: Factor, precision: Optional[int] = DEFAULT_PRECISION) -> Factor:
    """
    Divide every row by the factor's total and round.

    Args:
        factor: Unnormalized final factor
        precision: Decimal places kept (None disables rounding)

    Returns:
        Factor with the same scope and rows summing to one (within rounding)

    Raises:
        ContradictoryEvidenceError: if the factor is empty or sums to zero,
            i.e. the evidence is impossible.
    """
    if not factor.rows:
        raise ContradictoryEvidenceError(f"Final factor over {factor.names} has no rows")

    probs = factor.probabilities()
    s = float(np.sum(probs))
    if s == 0.0 or not np.isfinite(s):
        raise ContradictoryEvidenceError(
            f"Evidence has zero probability (final mass {s}); the posterior is undefined"
        )

    out = probs / s
    if precision is not None:
        out = np.round(out, precision)
    return Factor(
        factor.scope,
        tuple(ProbRow(r.assignment, float(p)) for r, p in zip(factor.rows, out)),
    )
