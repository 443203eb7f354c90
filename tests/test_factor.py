"""
Tests for Factor operations.
"""

import numpy as np
import pytest

from bnve.algebra.factor import Factor, join_all
from bnve.algebra.normalize import normalize
from bnve.core.exceptions import ContradictoryEvidenceError
from bnve.core.variable import ProbRow, Variable

A = Variable("A", ("t", "f"))
B = Variable("B", ("t", "f"), ("A",))
C = Variable("C", ("t", "f"))


def factor(scope, values):
    return Factor(tuple(scope), tuple(ProbRow(k, p) for k, p in values.items()))


class TestFactor:
    def test_creation(self):
        f = factor([A, B], {("t", "t"): 0.1, ("t", "f"): 0.2})
        assert f.names == ("A", "B")
        assert len(f) == 2
        assert f.contains("A") and f.contains(B)
        assert not f.contains(C)

    def test_row_width_mismatch_raises(self):
        with pytest.raises(ValueError):
            factor([A, B], {("t",): 0.1})

    def test_duplicate_scope_raises(self):
        with pytest.raises(ValueError):
            factor([A, A], {("t", "t"): 0.1})

    def test_duplicate_assignment_raises(self):
        with pytest.raises(ValueError):
            Factor((A,), (ProbRow(("t",), 0.1), ProbRow(("t",), 0.2)))

    def test_unit(self):
        u = Factor.unit([A, C])
        assert len(u) == 4
        assert all(r.probability == 1.0 for r in u.rows)

    def test_constant(self):
        c = Factor.constant(0.25)
        assert c.is_constant
        assert c.total() == pytest.approx(0.25)


class TestFromTable:
    def test_no_evidence(self, chain):
        f = Factor.from_table(chain.table("B"), chain.variables)
        assert f.names == ("B", "A")
        assert len(f) == 4

    def test_observed_parent_is_projected_out(self, chain):
        net = chain.with_evidence({"A": "true"})
        f = Factor.from_table(net.table("B"), net.variables)

        assert f.names == ("B",)
        assert f.as_dict() == {("true",): pytest.approx(0.9), ("false",): pytest.approx(0.1)}

    def test_observed_subject_stays_in_scope(self, chain):
        net = chain.with_evidence({"B": "true"})
        f = Factor.from_table(net.table("B"), net.variables)

        assert f.names == ("B", "A")
        assert f.as_dict() == {
            ("true", "true"): pytest.approx(0.9),
            ("true", "false"): pytest.approx(0.2),
        }
        assert not f.is_fully_observed

    def test_fully_observed_is_degenerate(self, chain):
        net = chain.with_evidence({"A": "true", "B": "false"})
        f = Factor.from_table(net.table("B"), net.variables)

        assert f.names == ("B",)
        assert f.is_fully_observed
        assert f.total() == pytest.approx(0.1)

    def test_table_is_not_mutated(self, chain):
        before = chain.table("B").rows
        net = chain.with_evidence({"A": "true", "B": "true"})
        Factor.from_table(net.table("B"), net.variables)

        assert chain.table("B").rows == before
        assert len(chain.table("B")) == 4


class TestRestrict:
    def test_restrict_drops_column(self):
        f = factor([A, C], {("t", "t"): 0.1, ("t", "f"): 0.2, ("f", "t"): 0.3, ("f", "f"): 0.4})
        r = f.restrict("C", "f")
        assert r.names == ("A",)
        assert r.as_dict() == {("t",): 0.2, ("f",): 0.4}

    def test_restrict_keep_column(self):
        f = factor([A, C], {("t", "t"): 0.1, ("t", "f"): 0.2})
        r = f.restrict(C, "t", drop=False)
        assert r.names == ("A", "C")
        assert len(r) == 1

    def test_restrict_matching_nothing_is_contradictory(self):
        # Rows for C=f were pruned earlier
        f = factor([A, C], {("t", "t"): 0.1, ("f", "t"): 0.3})
        with pytest.raises(ContradictoryEvidenceError):
            f.restrict("C", "f")


class TestJoin:
    def test_disjoint_scopes(self):
        fa = factor([A], {("t",): 0.3, ("f",): 0.7})
        fc = factor([C], {("t",): 0.5, ("f",): 0.5})
        j = fa.join(fc)

        assert j.names == ("A", "C")
        assert len(j) == 4
        assert j.total() == pytest.approx(1.0)

    def test_matches_on_every_shared_variable(self):
        f1 = factor([A, C], {("t", "t"): 2.0, ("t", "f"): 3.0, ("f", "t"): 5.0, ("f", "f"): 7.0})
        f2 = factor([C, A], {("t", "t"): 1.0, ("f", "t"): 10.0, ("t", "f"): 100.0, ("f", "f"): 1000.0})
        j = f1.join(f2)

        assert j.names == ("A", "C")
        assert j.as_dict() == {
            ("t", "t"): 2.0,
            ("t", "f"): 30.0,
            ("f", "t"): 500.0,
            ("f", "f"): 7000.0,
        }

    def test_scope_order_and_new_columns(self, chain):
        fb = Factor.from_table(chain.table("B"), chain.variables)
        fc = Factor.from_table(chain.table("C"), chain.variables)
        j = fb.join(fc)

        assert j.names == ("B", "A", "C")
        assert len(j) == 8
        assert j.as_dict()[("true", "false", "true")] == pytest.approx(0.2 * 0.6)

    def test_subset_scope_filters(self):
        big = factor([A, C], {("t", "t"): 0.1, ("t", "f"): 0.2, ("f", "t"): 0.3, ("f", "f"): 0.4})
        small = factor([C], {("t",): 2.0})
        j = big.join(small)

        assert j.names == ("A", "C")
        assert j.as_dict() == {("t", "t"): pytest.approx(0.2), ("f", "t"): pytest.approx(0.6)}

    def test_unit_is_identity(self, chain):
        f = Factor.from_table(chain.table("B"), chain.variables)

        assert f.join(Factor.constant(1.0)).as_dict() == f.as_dict()
        sub_unit = Factor.unit([chain.variable("A")])
        j = f.join(sub_unit)
        assert j.names == f.names
        assert j.as_dict() == f.as_dict()

    def test_zeros_are_kept_unless_pruned(self):
        f1 = factor([A], {("t",): 0.0, ("f",): 1.0})
        f2 = factor([C], {("t",): 0.5, ("f",): 0.5})

        assert len(f1.join(f2)) == 4
        assert len(f1.join(f2, prune_zeros=True)) == 2


class TestMarginalize:
    def test_sum_out(self):
        f = factor([A, C], {("t", "t"): 0.1, ("t", "f"): 0.2, ("f", "t"): 0.3, ("f", "f"): 0.4})
        m = f.marginalize("C")

        assert m.names == ("A",)
        assert m.as_dict() == {("t",): pytest.approx(0.3), ("f",): pytest.approx(0.7)}

    def test_missing_combinations_count_as_zero(self):
        f = factor([A, C], {("t", "t"): 0.2, ("f", "t"): 0.3, ("f", "f"): 0.4})

        assert f.marginalize("C").as_dict() == {("t",): pytest.approx(0.2), ("f",): pytest.approx(0.7)}
        assert f.marginalize("A").as_dict() == {("t",): pytest.approx(0.5), ("f",): pytest.approx(0.4)}

    def test_sum_out_last_variable(self):
        f = factor([A], {("t",): 0.3, ("f",): 0.7})
        m = f.marginalize(A)
        assert m.is_constant
        assert m.total() == pytest.approx(1.0)

    def test_variable_not_in_scope_raises(self):
        f = factor([A], {("t",): 0.3, ("f",): 0.7})
        with pytest.raises(ValueError):
            f.marginalize("C")

    def test_project(self, chain):
        fb = Factor.from_table(chain.table("B"), chain.variables)
        fc = Factor.from_table(chain.table("C"), chain.variables)
        p = fb.join(fc).project(["A"])

        assert p.names == ("A",)
        # sum_{b,c} P(b|a) P(c|b) = 1 for every a
        assert all(r.probability == pytest.approx(1.0) for r in p.rows)

    def test_total_mass_independent_of_order(self, sprinkler):
        factors = [Factor.from_table(t, sprinkler.variables) for t in sprinkler.tables.values()]
        joint = join_all(factors)

        first = joint.marginalize("Cloudy").marginalize("Rain")
        second = joint.marginalize("Rain").marginalize("Cloudy")
        a = first.as_dict()
        b = second.project(first.names).as_dict()
        for key in a:
            assert a[key] == pytest.approx(b[key])
        assert joint.total() == pytest.approx(1.0)


class TestJoinAll:
    def test_smallest_scopes_first(self):
        big = factor([C, B, A], {("t", "t", "t"): 1.0})
        fa = factor([A], {("t",): 0.5})
        fb = factor([B], {("t",): 0.5})
        j = join_all([big, fa, fb])

        # A and B are joined first, so their columns lead
        assert j.names == ("A", "B", "C")
        assert j.as_dict() == {("t", "t", "t"): pytest.approx(0.25)}

    def test_single_factor(self):
        fa = factor([A], {("t",): 0.5})
        assert join_all([fa]) is fa

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            join_all([])


class TestNormalize:
    def test_normalize_rounds(self):
        f = factor([A], {("t",): 1.0, ("f",): 2.0})
        n = normalize(f)
        assert n.as_dict() == {("t",): 0.33333, ("f",): 0.66667}

    def test_no_rounding(self):
        f = factor([A], {("t",): 1.0, ("f",): 2.0})
        n = normalize(f, precision=None)
        assert n.as_dict()[("t",)] == pytest.approx(1.0 / 3.0, abs=1e-12)

    def test_zero_mass_is_contradictory(self):
        f = factor([A], {("t",): 0.0, ("f",): 0.0})
        with pytest.raises(ContradictoryEvidenceError):
            normalize(f)

    def test_empty_factor_is_contradictory(self):
        with pytest.raises(ContradictoryEvidenceError):
            normalize(Factor((A,), ()))


class TestToPotential:
    def test_dense_rendering(self):
        f = factor([A, C], {("t", "t"): 0.1, ("f", "f"): 0.4})
        p = f.to_potential()

        assert p.domain == ("A", "C")
        assert np.allclose(p.data, [[0.1, 0.0], [0.0, 0.4]])
