"""
IO module: Network loaders and writers (.bif and JSON).
"""

from pathlib import Path
from typing import Dict, Tuple, Union

from bnve.core.network import BayesianNetwork
from bnve.io.bif import parse_bif, read_bif, dumps_bif
from bnve.io.json_network import (
    network_from_dict,
    network_to_dict,
    load_network_json,
    save_network_json,
)


def load_network(path: Union[str, Path]) -> Tuple[BayesianNetwork, Dict[str, str]]:
    """Load a .bif or .json network by extension; returns (network, evidence)."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        return load_network_json(path)
    return read_bif(path), {}


__all__ = [
    "parse_bif",
    "read_bif",
    "dumps_bif",
    "network_from_dict",
    "network_to_dict",
    "load_network_json",
    "save_network_json",
    "load_network",
]
