"""
Example: Simple chain Bayesian network.

A -> B -> C with binary variables, observe C and query A.
"""

from bnve import BayesianNetwork, posterior, enumerate_posterior
from bnve.api.report import format_posterior, format_trace


def main():
    # Define variables
    net = BayesianNetwork("chain")
    net.add_variable("A", ["true", "false"])
    net.add_variable("B", ["true", "false"], ["A"])
    net.add_variable("C", ["true", "false"], ["B"])

    # Prior on A
    net.add_cpt("A", [0.3, 0.7])

    # P(B | A): one row per value of A
    net.add_cpt("B", [
        [0.9, 0.1],
        [0.2, 0.8],
    ])

    # P(C | B)
    net.add_cpt("C", [
        [0.6, 0.4],
        [0.1, 0.9],
    ])

    evidence = {"C": "true"}

    # Solve
    print("Running variable elimination on chain A -> B -> C...")
    post = posterior(net, "A", evidence)

    print()
    print(format_trace(post.trace, net.with_evidence(evidence)))
    print()
    print(format_posterior(post))

    # Verify by hand
    print("\n--- Verification by hand ---")
    num = 0.3 * (0.9 * 0.6 + 0.1 * 0.1)
    den = num + 0.7 * (0.2 * 0.6 + 0.8 * 0.1)
    print(f"P(A=true | C=true) (hand)        = {num / den:.5f}")
    print(f"P(A=true | C=true) (elimination) = {post['true']:.5f}")

    reference = enumerate_posterior(net, "A", evidence)
    print(f"P(A=true | C=true) (enumeration) = {reference[0]:.5f}")


if __name__ == "__main__":
    main()
