"""
trust_graph/metrics/score.py: Trust Score calculator.

A member's standing is read from the structure of the credentials pointing at
them, not from any single credential:

    incoming credentials    how often they have been vouched for
    unique issuers          by how many different identities
    bidirectional relations how many of those vouches are mutual
    depth from root         how far they sit from the organization
    org-issued bonus        whether the organization vouched for them directly

Formula (weights from ScoreWeights):
    score = incoming × w_incoming
          + unique_issuers × w_unique
          + bidirectional × w_bidirectional
          - depth × w_depth            (skipped when depth is UNREACHABLE)
          + w_org_bonus                (once, if any incoming edge is from root)

The calculator is stateless between calls and never mutates the graph.
"""

import logging
import math
from dataclasses import asdict, dataclass, fields

import numpy as np
import pandas as pd

from trust_graph.config import DEFAULT_WEIGHTS, ScoreWeights
from trust_graph.graph.model import TrustGraph
from trust_graph.metrics.depth import UNREACHABLE, depth_from_root, depths_from_root

logger = logging.getLogger(__name__)


@dataclass
class TrustScore:
    """
    Trust score of a single identity.

    Fields:
        aid:                     Node id.
        alias:                   Node alias (None if the id is not in the graph).
        role:                    Node role ('' if the id is not in the graph).
        incoming_credentials:    Edges ending at this node.
        outgoing_credentials:    Edges starting at this node.
        unique_issuers:          Distinct sources among incoming edges.
        bidirectional_relations: Incoming edges flagged bidirectional.
        graph_depth:             Undirected hops from root, or -1 if unreachable.
        score:                   Final weighted score (unrounded).
        org_issued:              True if the org-issued bonus was applied.
    """

    aid: str
    alias: str | None
    role: str
    incoming_credentials: int
    outgoing_credentials: int
    unique_issuers: int
    bidirectional_relations: int
    graph_depth: int
    score: float
    org_issued: bool = False


@dataclass
class ScoreSummary:
    """
    Aggregate over every node's TrustScore.

    Fields:
        total_nodes:         Nodes in the graph.
        total_edges:         Edges in the graph.
        average_score:       Arithmetic mean score.
        max_score:           Highest score.
        min_score:           Lowest score.
        median_depth:        Median depth over reachable nodes (depth >= 0).
        bidirectional_count: Edges flagged bidirectional, graph-wide.
    """

    total_nodes: int = 0
    total_edges: int = 0
    average_score: float = 0.0
    max_score: float = 0.0
    min_score: float = 0.0
    median_depth: float = 0.0
    bidirectional_count: int = 0


class TrustScoreCalculator:
    """
    Computes TrustScores and ScoreSummaries over a built TrustGraph.

    Args:
        weights: ScoreWeights coefficients. Defaults to DEFAULT_WEIGHTS.
    """

    def __init__(self, weights: ScoreWeights = DEFAULT_WEIGHTS):
        self.weights = weights

    def calculate_score(self, G: TrustGraph, aid: str) -> TrustScore:
        """
        Score a single identity.

        An id absent from the graph is a valid "not participating" state: it
        yields a zero-valued TrustScore with graph_depth = -1, not an error.
        """
        if aid not in G:
            return TrustScore(
                aid=aid,
                alias=None,
                role="",
                incoming_credentials=0,
                outgoing_credentials=0,
                unique_issuers=0,
                bidirectional_relations=0,
                graph_depth=UNREACHABLE,
                score=0.0,
            )
        return self._score_node(G, aid, depth_from_root(G, aid))

    def calculate_all_scores(self, G: TrustGraph) -> list[TrustScore]:
        """
        Score every node in the graph (one BFS shared by all nodes).

        Returns:
            scores: One TrustScore per node, in node insertion order.
        """
        depths = depths_from_root(G)
        scores = [self._score_node(G, aid, depths[aid]) for aid in G.nodes]

        logger.debug(
            "Trust scores computed for %d nodes. Max score: %.3f.",
            len(scores),
            max((s.score for s in scores), default=0.0),
        )
        return scores

    def get_top_scores(self, G: TrustGraph, n: int) -> list[TrustScore]:
        """
        Highest-scoring identities, at most n of them.

        Ordering: score descending, then depth ascending (unreachable nodes
        after every reachable depth), then identifier ascending.
        """
        if n <= 0:
            return []
        ranked = sorted(self.calculate_all_scores(G), key=_rank_key)
        return ranked[:n]

    def calculate_summary(self, G: TrustGraph) -> ScoreSummary:
        """
        Aggregate statistics over all node scores.

        A graph with no node besides the root yields all-zero score and depth
        aggregates; node, edge and bidirectional counts are still reported.
        """
        summary = ScoreSummary(
            total_nodes=G.node_count(),
            total_edges=G.edge_count(),
            bidirectional_count=sum(1 for e in G.edges if e.bidirectional),
        )
        if not any(aid != G.root for aid in G.nodes):
            return summary

        scores = self.calculate_all_scores(G)
        values = np.array([s.score for s in scores], dtype=float)
        reachable_depths = [s.graph_depth for s in scores if s.graph_depth >= 0]

        summary.average_score = float(values.mean())
        summary.max_score = float(values.max())
        summary.min_score = float(values.min())
        summary.median_depth = float(np.median(reachable_depths)) if reachable_depths else 0.0

        logger.info(
            "Trust summary: %d nodes, %d edges, mean score %.3f, median depth %.1f.",
            summary.total_nodes,
            summary.total_edges,
            summary.average_score,
            summary.median_depth,
        )
        return summary

    def _score_node(self, G: TrustGraph, aid: str, depth: int) -> TrustScore:
        node = G.nodes[aid]
        incoming = G.incoming_edges(aid)
        outgoing = G.outgoing_edges(aid)

        if aid == G.root:
            depth = 0

        unique_issuers = len({e.source for e in incoming})
        bidirectional = sum(1 for e in incoming if e.bidirectional)
        org_issued = any(e.source == G.root for e in incoming)

        w = self.weights
        score = (
            len(incoming) * w.incoming_credential
            + unique_issuers * w.unique_issuer
            + bidirectional * w.bidirectional_relation
        )
        if depth >= 0:
            score -= depth * w.depth_penalty
        if org_issued:
            score += w.org_issued_bonus

        return TrustScore(
            aid=aid,
            alias=node.alias,
            role=node.role,
            incoming_credentials=len(incoming),
            outgoing_credentials=len(outgoing),
            unique_issuers=unique_issuers,
            bidirectional_relations=bidirectional,
            graph_depth=depth,
            score=float(score),
            org_issued=org_issued,
        )


def _rank_key(score: TrustScore) -> tuple:
    depth = score.graph_depth if score.graph_depth >= 0 else math.inf
    return (-score.score, depth, score.aid)


def scores_to_dataframe(scores: list[TrustScore]) -> pd.DataFrame:
    """
    Tabulate TrustScores, one row per identity, columns in field order.

    An empty input yields an empty frame that still carries every column.
    """
    columns = [f.name for f in fields(TrustScore)]
    return pd.DataFrame([asdict(s) for s in scores], columns=columns)
