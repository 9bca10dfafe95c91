"""
trust_graph/config.py: All tunable parameters for the trust graph engine.

No scoring coefficient or naming default should be hardcoded in a builder or
metric module. Weights, role defaults and display limits live here so that
calibration changes are a single-file diff.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoreWeights:
    """
    Coefficients of the trust score formula.

        score = incoming × incoming_credential
              + unique_issuers × unique_issuer
              + bidirectional × bidirectional_relation
              - depth × depth_penalty          (only when depth >= 0)
              + org_issued_bonus               (once, if the root issued to the node)

    Override by constructing a new ScoreWeights with the desired values.
    """

    incoming_credential: float = 1.0
    # Each credential received counts once.

    unique_issuer: float = 2.0
    # Diversity of vouching: many issuers beat many credentials from one issuer.

    bidirectional_relation: float = 3.0
    # Mutual relationships (a→b and b→a) weigh heaviest.

    depth_penalty: float = 0.1
    # Subtracted per hop of undirected distance from the organization root.
    # Never applied to unreachable nodes (depth -1).

    org_issued_bonus: float = 2.0
    # Flat bonus when at least one incoming credential was issued by the root.


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass(frozen=True)
class TrustGraphConfig:
    """
    Immutable configuration for the trust graph engine.

    All fields have documented defaults. Override by constructing a new
    TrustGraphConfig with the desired values.
    """

    # ── Scoring ───────────────────────────────────────────────────────────────
    weights: ScoreWeights = field(default_factory=ScoreWeights)

    # ── Node defaults ─────────────────────────────────────────────────────────
    default_role: str = "member"
    # Role given to a subject whose credentials carry no role hint, and to
    # issuers that never appear as a subject.

    root_role: str = "organization"
    # Role of the seeded root node. Credentials never overwrite it.

    alias_prefix_length: int = 8
    # Nodes without any display name are labelled with this many leading
    # characters of their identifier followed by "...".

    # ── Query defaults ────────────────────────────────────────────────────────
    default_neighborhood_depth: int = 2
    # Hops used by the CLI when --aid is given without --depth.

    default_top_n: int = 10
    # Number of rows returned by the top-scores listing when -n is omitted.


# Singleton default: import this everywhere instead of constructing anew.
DEFAULT_CONFIG = TrustGraphConfig()
