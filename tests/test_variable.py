"""
Tests for variables, probability rows and CPT tables.
"""

import numpy as np
import pytest

from bnve.core.exceptions import NetworkIntegrityError, QueryError
from bnve.core.variable import ProbRow, Table, Variable


class TestVariable:
    def test_equality_by_name(self):
        a1 = Variable("A", ("t", "f"))
        a2 = Variable("A", ("x", "y", "z"), ("B",))
        assert a1 == a2
        assert hash(a1) == hash(a2)
        assert a1 != Variable("B", ("t", "f"))

    def test_observe_returns_copy(self):
        a = Variable("A", ("t", "f"))
        obs = a.observe("f")

        assert obs.is_observed
        assert obs.observed_value == "f"
        assert not a.is_observed
        assert obs == a
        assert obs.unobserve().observed_value is None

    def test_observe_value_outside_domain_raises(self):
        with pytest.raises(QueryError):
            Variable("A", ("t", "f")).observe("maybe")

    def test_empty_domain_raises(self):
        with pytest.raises(NetworkIntegrityError):
            Variable("A", ())

    def test_duplicate_values_raise(self):
        with pytest.raises(NetworkIntegrityError):
            Variable("A", ("t", "t"))

    def test_self_parent_raises(self):
        with pytest.raises(NetworkIntegrityError):
            Variable("A", ("t", "f"), ("A",))

    def test_index_of(self):
        a = Variable("A", ("low", "mid", "high"))
        assert a.index_of("high") == 2
        with pytest.raises(ValueError):
            a.index_of("none")


class TestTable:
    @pytest.fixture
    def variables(self):
        a = Variable("A", ("t", "f"))
        b = Variable("B", ("t", "f"), ("A",))
        return {"A": a, "B": b}

    def test_from_array_column_order(self, variables):
        t = Table.from_array(variables["B"], [variables["A"]], np.array([[0.9, 0.1], [0.2, 0.8]]))

        assert t.columns == ("B", "A")
        assert len(t) == 4
        lookup = t.lookup()
        assert lookup[("t", "t")] == pytest.approx(0.9)
        assert lookup[("f", "t")] == pytest.approx(0.1)
        assert lookup[("t", "f")] == pytest.approx(0.2)
        assert lookup[("f", "f")] == pytest.approx(0.8)

    def test_from_array_flat_list(self, variables):
        t = Table.from_array(variables["B"], [variables["A"]], [0.9, 0.1, 0.2, 0.8])
        assert t.lookup()[("t", "f")] == pytest.approx(0.2)

    def test_from_array_wrong_size_raises(self, variables):
        with pytest.raises(NetworkIntegrityError):
            Table.from_array(variables["B"], [variables["A"]], [0.9, 0.1, 0.2])

    def test_from_array_wrong_parents_raises(self, variables):
        with pytest.raises(NetworkIntegrityError):
            Table.from_array(variables["B"], [], [0.5, 0.5])

    def test_validate_complete(self, variables):
        t = Table.from_array(variables["B"], [variables["A"]], [0.9, 0.1, 0.2, 0.8])
        t.validate(variables)

    def test_validate_missing_row(self, variables):
        rows = (
            ProbRow(("t", "t"), 0.9),
            ProbRow(("f", "t"), 0.1),
            ProbRow(("t", "f"), 0.2),
        )
        t = Table(variables["B"], rows)
        with pytest.raises(NetworkIntegrityError, match="no row for assignment"):
            t.validate(variables)

    def test_validate_duplicate_row(self, variables):
        rows = (
            ProbRow(("t", "t"), 0.9),
            ProbRow(("t", "t"), 0.1),
            ProbRow(("t", "f"), 0.2),
            ProbRow(("f", "f"), 0.8),
        )
        with pytest.raises(NetworkIntegrityError, match="duplicate"):
            Table(variables["B"], rows).validate(variables)

    def test_validate_foreign_value(self, variables):
        rows = (
            ProbRow(("t", "t"), 0.9),
            ProbRow(("f", "t"), 0.1),
            ProbRow(("t", "x"), 0.2),
            ProbRow(("f", "f"), 0.8),
        )
        with pytest.raises(NetworkIntegrityError):
            Table(variables["B"], rows).validate(variables)

    def test_row_width_mismatch(self, variables):
        with pytest.raises(NetworkIntegrityError):
            Table(variables["B"], (ProbRow(("t",), 1.0),))
