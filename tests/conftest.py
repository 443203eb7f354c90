"""
Shared networks for the test suite.
"""

import pytest

from bnve import BayesianNetwork

TF = ["true", "false"]


def make_chain():
    """A -> B -> C."""
    net = BayesianNetwork("chain")
    net.add_variable("A", TF)
    net.add_variable("B", TF, ["A"])
    net.add_variable("C", TF, ["B"])
    net.add_cpt("A", [0.3, 0.7])
    net.add_cpt("B", [[0.9, 0.1], [0.2, 0.8]])
    net.add_cpt("C", [[0.6, 0.4], [0.1, 0.9]])
    return net


def make_fork():
    """B <- A -> C: A is an ancestor of two independent children."""
    net = BayesianNetwork("fork")
    net.add_variable("A", TF)
    net.add_variable("B", TF, ["A"])
    net.add_variable("C", TF, ["A"])
    net.add_cpt("A", [0.4, 0.6])
    net.add_cpt("B", [[0.7, 0.3], [0.2, 0.8]])
    net.add_cpt("C", [[0.9, 0.1], [0.5, 0.5]])
    return net


def make_sprinkler():
    """Cloudy -> {Sprinkler, Rain} -> WetGrass."""
    net = BayesianNetwork("sprinkler")
    net.add_variable("Cloudy", TF)
    net.add_variable("Sprinkler", TF, ["Cloudy"])
    net.add_variable("Rain", TF, ["Cloudy"])
    net.add_variable("WetGrass", TF, ["Sprinkler", "Rain"])
    net.add_cpt("Cloudy", [0.5, 0.5])
    net.add_cpt("Sprinkler", [[0.1, 0.9], [0.5, 0.5]])
    net.add_cpt("Rain", [[0.8, 0.2], [0.2, 0.8]])
    net.add_cpt("WetGrass", [[[0.99, 0.01], [0.9, 0.1]], [[0.9, 0.1], [0.0, 1.0]]])
    return net


def make_earthquake():
    net = BayesianNetwork("earthquake")
    tf = ["True", "False"]
    net.add_variable("Burglary", tf)
    net.add_variable("Earthquake", tf)
    net.add_variable("Alarm", tf, ["Burglary", "Earthquake"])
    net.add_variable("JohnCalls", tf, ["Alarm"])
    net.add_variable("MaryCalls", tf, ["Alarm"])
    net.add_cpt("Burglary", [0.01, 0.99])
    net.add_cpt("Earthquake", [0.02, 0.98])
    net.add_cpt("Alarm", [[[0.95, 0.05], [0.94, 0.06]], [[0.29, 0.71], [0.001, 0.999]]])
    net.add_cpt("JohnCalls", [[0.9, 0.1], [0.05, 0.95]])
    net.add_cpt("MaryCalls", [[0.7, 0.3], [0.01, 0.99]])
    return net


@pytest.fixture
def chain():
    return make_chain()


@pytest.fixture
def fork():
    return make_fork()


@pytest.fixture
def sprinkler():
    return make_sprinkler()


@pytest.fixture
def earthquake():
    return make_earthquake()
