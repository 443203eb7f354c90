"""
bnve/io/json_network.py

JSON network format.

Expected format:
{
    "name": "chain",
    "variables": {
        "A": {"domain": ["true", "false"]},
        "B": {"domain": ["true", "false"], "parents": ["A"]}
    },
    "cpts": {
        "A": [0.3, 0.7],
        "B": [[0.9, 0.1], [0.2, 0.8]]
    },
    "evidence": {"B": "true"}
}

Each CPT is shaped (|parent_1|, ..., |parent_k|, |variable|). The optional
"evidence" object is returned separately; the network itself stays
unobserved.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import numpy as np

from bnve.core.exceptions import NetworkIntegrityError
from bnve.core.network import BayesianNetwork


def network_from_dict(data: Dict[str, Any]) -> Tuple[BayesianNetwork, Dict[str, str]]:
    """
    Build a validated network from the JSON structure.

    Returns:
        (network, evidence)
    """
    try:
        variables = data["variables"]
        cpts = data["cpts"]
    except KeyError as e:
        raise NetworkIntegrityError(f"Network description lacks {e.args[0]!r}") from None

    net = BayesianNetwork(data.get("name", "network"))
    for name, vdata in variables.items():
        net.add_variable(name, [str(v) for v in vdata["domain"]], vdata.get("parents", ()))
    for name in variables:
        if name not in cpts:
            raise NetworkIntegrityError(f"Variable {name!r} has no CPT")
        net.add_cpt(name, cpts[name])
    net.validate()

    evidence = {k: str(v) for k, v in data.get("evidence", {}).items()}
    return net, evidence


def network_to_dict(network: BayesianNetwork, include_evidence: bool = True) -> Dict[str, Any]:
    """Inverse of network_from_dict."""
    out: Dict[str, Any] = {"name": network.name, "variables": {}, "cpts": {}}
    for var in network.all_variables():
        entry: Dict[str, Any] = {"domain": list(var.domain)}
        if var.parents:
            entry["parents"] = list(var.parents)
        out["variables"][var.name] = entry

        parents = [network.variable(p) for p in var.parents]
        shape = tuple(p.card for p in parents) + (var.card,)
        arr = np.zeros(shape, dtype=np.float64)
        for row in network.table(var.name).rows:
            idx = tuple(p.index_of(a) for p, a in zip(parents, row.assignment[1:]))
            arr[idx + (var.index_of(row.assignment[0]),)] = row.probability
        out["cpts"][var.name] = arr.tolist()

    if include_evidence and network.evidence:
        out["evidence"] = network.evidence
    return out


def load_network_json(filepath: Union[str, Path]) -> Tuple[BayesianNetwork, Dict[str, str]]:
    """Load a network (and optional evidence) from a JSON file."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return network_from_dict(data)


def save_network_json(filepath: Union[str, Path], network: BayesianNetwork) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(network_to_dict(network), f, indent=2)
