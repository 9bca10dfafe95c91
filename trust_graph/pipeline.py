"""
trust_graph/pipeline.py: Single-call build-and-score orchestrator.

Provides run_trust_pipeline(), which builds a trust graph (full or around one
identity) and computes every score, the top-N ranking and the summary in one
pass, returning all of them together.

Usage:
    from trust_graph.pipeline import run_trust_pipeline
    report = run_trust_pipeline(store, "EOrg...")
    print(report.summary.average_score)
"""

import logging
from dataclasses import dataclass

from trust_graph.config import DEFAULT_CONFIG, TrustGraphConfig
from trust_graph.graph.builder import TrustGraphBuilder
from trust_graph.graph.model import TrustGraph
from trust_graph.metrics.score import ScoreSummary, TrustScore, TrustScoreCalculator
from trust_graph.storage.base import CredentialStore

logger = logging.getLogger(__name__)


@dataclass
class TrustReport:
    """Everything computed by one pipeline run, built from one store snapshot."""

    graph: TrustGraph
    scores: list[TrustScore]
    top_scores: list[TrustScore]
    summary: ScoreSummary


def run_trust_pipeline(
    store: CredentialStore,
    root_aid: str,
    config: TrustGraphConfig = DEFAULT_CONFIG,
    aid: str | None = None,
    depth: int | None = None,
    top_n: int | None = None,
) -> TrustReport:
    """
    Build a trust graph and score it.

    Args:
        store:    Credential store collaborator.
        root_aid: Organization root identifier.
        config:   TrustGraphConfig (weights, defaults).
        aid:      If given, restrict the graph to this identity's neighborhood.
        depth:    Neighborhood depth; defaults to config.default_neighborhood_depth.
        top_n:    Size of the ranking; defaults to config.default_top_n.

    Returns:
        TrustReport with the graph, all scores, the top scores and the summary.

    Raises:
        CredentialStoreError: if the store cannot be read.
    """
    builder = TrustGraphBuilder(store, root_aid, config)
    if aid is None:
        graph = builder.build()
    else:
        if depth is None:
            depth = config.default_neighborhood_depth
        graph = builder.build_for_aid(aid, depth)

    calculator = TrustScoreCalculator(config.weights)
    scores = calculator.calculate_all_scores(graph)
    top_scores = calculator.get_top_scores(
        graph, config.default_top_n if top_n is None else top_n
    )
    summary = calculator.calculate_summary(graph)

    logger.info(
        "Trust pipeline complete (%s graph): %d scores, top %d returned.",
        graph.source,
        len(scores),
        len(top_scores),
    )
    return TrustReport(graph=graph, scores=scores, top_scores=top_scores, summary=summary)
