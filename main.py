#!/usr/bin/env python3
"""
bnve: Bayesian Network Variable Elimination

Exact posterior inference on discrete Bayesian networks.

Usage:
    # Query a network file
    python main.py query --network examples/networks/earthquake.bif --query Burglary \
        --evidence JohnCalls=True,MaryCalls=True

    # Show the elimination trace and cross-check by enumeration
    python main.py query -n net.json -q A --trace --verify

    # Run demos
    python main.py demo --example chain

    # Run tests
    python main.py test
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict

import numpy as np

from bnve import (
    BayesianNetwork,
    BNVEError,
    enumerate_posterior,
    load_network,
    posterior,
    __version__,
)
from bnve.api.report import format_posterior, format_trace
from bnve.inference.ordering import ORDERINGS


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] [%(name)s] - %(message)s",
    )
    logging.getLogger("networkx").setLevel(logging.WARNING)


def parse_evidence_string(evidence_str: str) -> Dict[str, str]:
    """Parse an evidence string: 'A=true,B=false'"""
    evidence = {}
    for part in evidence_str.split(','):
        part = part.strip()
        if not part:
            continue
        if '=' not in part:
            raise ValueError(f"Evidence entry {part!r} is not NAME=VALUE")
        name, value = part.split('=', 1)
        evidence[name.strip()] = value.strip()
    return evidence


def save_result_to_json(filepath: str, post, reference=None) -> None:
    """Save a posterior to JSON file."""
    output = {
        "query": post.variable.name,
        "evidence": post.evidence,
        "posterior": post.as_dict(),
        "elimination_order": [v.name for v in post.trace.order] if post.trace else None,
    }
    if reference is not None:
        output["enumeration"] = dict(zip(post.values, (float(p) for p in reference)))

    with open(filepath, 'w') as f:
        json.dump(output, f, indent=2)


def cmd_query(args):
    """Execute the query command."""
    try:
        network, evidence = load_network(args.network)
        if args.evidence:
            evidence.update(parse_evidence_string(args.evidence))
    except (OSError, ValueError) as e:
        print(f"Error loading network: {e}")
        return 1

    print(f"Network {network.name}: {len(network)} variables")
    try:
        post = posterior(
            network,
            args.query,
            evidence,
            ordering=args.ordering,
            precision=args.precision,
            prune_zeros=args.prune_zeros,
        )
    except BNVEError as e:
        print(f"Error: {e}")
        return 1

    if args.trace:
        print()
        print(format_trace(post.trace, network.with_evidence(evidence)))
    print()
    print(format_posterior(post, digits=args.precision))

    reference = None
    if args.verify:
        reference = enumerate_posterior(network, args.query, evidence)
        match = np.allclose(post.probabilities, reference, atol=10.0 ** -args.precision)
        print(f"\nVerification (enumeration): {np.round(reference, args.precision).tolist()}")
        print(f"Match: {match}")
        if not match:
            return 1

    if args.output:
        save_result_to_json(args.output, post, reference)
        print(f"\nResults saved to: {args.output}")

    return 0


def _chain_network() -> BayesianNetwork:
    net = BayesianNetwork("chain")
    tf = ["true", "false"]
    net.add_variable("A", tf)
    net.add_variable("B", tf, ["A"])
    net.add_variable("C", tf, ["B"])
    net.add_cpt("A", [0.3, 0.7])
    net.add_cpt("B", [[0.9, 0.1], [0.2, 0.8]])
    net.add_cpt("C", [[0.6, 0.4], [0.1, 0.9]])
    return net


def _earthquake_network() -> BayesianNetwork:
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


def _run_demo(title: str, network: BayesianNetwork, query: str, evidence: Dict[str, str]) -> bool:
    print("=" * 60)
    print(f"Demo: {title}")
    print("=" * 60)

    post = posterior(network, query, evidence)
    print(format_trace(post.trace, network.with_evidence(evidence)))
    print()
    print(format_posterior(post))

    reference = enumerate_posterior(network, query, evidence)
    print(f"\nVerification (enumeration): {np.round(reference, 5).tolist()}")
    match = bool(np.allclose(post.probabilities, reference, atol=1e-5))
    print(f"Match: {match}")
    return match


def demo_chain():
    """Demo: chain A -> B -> C, observe C"""
    net = _chain_network()
    match = _run_demo("Chain A -> B -> C, C=true", net, "A", {"C": "true"})

    # P(A=t | C=t) by hand: sum_b P(A) P(b|A) P(C=t|b)
    num = 0.3 * (0.9 * 0.6 + 0.1 * 0.1)
    den = num + 0.7 * (0.2 * 0.6 + 0.8 * 0.1)
    print(f"Hand computation: P(A=true | C=true) = {num / den:.5f}")
    return match


def demo_earthquake():
    """Demo: burglary alarm network"""
    net = _earthquake_network()
    return _run_demo(
        "Burglary alarm", net, "Burglary", {"JohnCalls": "True", "MaryCalls": "True"}
    )


def demo_residual():
    """Demo: query between observed parents and observed children (residual merge)"""
    net = _earthquake_network()
    return _run_demo(
        "Residual merge", net, "Alarm", {"JohnCalls": "True", "MaryCalls": "False",
                                          "Burglary": "False", "Earthquake": "False"}
    )


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "chain": demo_chain,
        "earthquake": demo_earthquake,
        "residual": demo_residual,
    }

    if args.example == "all":
        results = []
        for name, func in demos.items():
            try:
                passed = func()
            except BNVEError as e:
                print(f"Error in {name}: {e}")
                passed = False
            results.append((name, passed))
            print()

        print("=" * 60)
        print("Summary")
        print("=" * 60)
        all_passed = True
        for name, passed in results:
            status = "PASS" if passed else "FAIL"
            print(f"  {name}: {status}")
            if not passed:
                all_passed = False

        return 0 if all_passed else 1

    try:
        passed = demos[args.example]()
    except BNVEError as e:
        print(f"Error: {e}")
        return 1
    return 0 if passed else 1


def cmd_test(args):
    """Execute the test command."""
    import subprocess

    test_dir = Path(__file__).parent / "tests"
    if not test_dir.exists():
        print(f"Test directory not found: {test_dir}")
        return 1

    cmd = [sys.executable, "-m", "pytest", str(test_dir)]
    if args.verbose:
        cmd.append("-v")
    if args.coverage:
        cmd.extend(["--cov=bnve", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def cmd_info(args):
    """Display system information."""
    import networkx

    print(f"bnve v{__version__}")
    print("Exact inference on discrete Bayesian networks by variable elimination")
    print()
    print("Elimination orderings:")
    for name in ORDERINGS:
        print(f"  {name}")
    print()
    print("Network formats: .bif, .json")
    print()
    print("Python:", sys.version.split()[0])
    print("NumPy:", np.__version__)
    print("NetworkX:", networkx.__version__)
    return 0


def main():
    parser = argparse.ArgumentParser(
        prog="bnve",
        description="bnve: Bayesian Network Variable Elimination",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Query a network
  bnve query -n alarm.bif -q Burglary -e JohnCalls=True,MaryCalls=True

  # Show the elimination trace, verify by enumeration, save JSON
  bnve query -n net.json -q A --trace --verify -o result.json

  # Run demos
  bnve demo --example chain
  bnve demo --example all

  # Run tests
  bnve test -v
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"bnve {__version__}"
    )
    parser.add_argument("--debug", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Query command
    query_parser = subparsers.add_parser("query", help="Compute a posterior distribution")
    query_parser.add_argument("--network", "-n", required=True, help="Network file (.bif or .json)")
    query_parser.add_argument("--query", "-q", required=True, help="Query variable")
    query_parser.add_argument("--evidence", "-e", type=str, help="Evidence: 'A=true,B=false'")
    query_parser.add_argument(
        "--ordering",
        choices=sorted(ORDERINGS),
        default="least-incoming",
        help="Elimination-order heuristic (default: least-incoming)"
    )
    query_parser.add_argument("--precision", "-p", type=int, default=5, help="Decimal places (default: 5)")
    query_parser.add_argument("--prune-zeros", action="store_true", help="Drop zero rows during joins")
    query_parser.add_argument("--trace", "-t", action="store_true", help="Print the elimination trace")
    query_parser.add_argument("--verify", action="store_true", help="Cross-check by full enumeration")
    query_parser.add_argument("--output", "-o", type=str, help="Output JSON file")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-x",
        choices=["chain", "earthquake", "residual", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run test suite")
    test_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    test_parser.add_argument("--coverage", "-c", action="store_true", help="With coverage")

    # Info command
    subparsers.add_parser("info", help="Show system information")

    args = parser.parse_args()
    setup_logging(args.debug)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "query":
        return cmd_query(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "test":
        return cmd_test(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
