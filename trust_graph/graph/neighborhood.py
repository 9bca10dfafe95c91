"""
trust_graph/graph/neighborhood.py: Neighborhood projection around one identity.

Used to answer "who is this member connected to?" without shipping the whole
organization graph. The projection is the induced subgraph over every node
within `depth` hops of the focus identity, where hops ignore edge direction:
a credential links issuer and subject whichever way it points.
"""

import logging

import networkx as nx

from trust_graph.config import DEFAULT_CONFIG, TrustGraphConfig
from trust_graph.graph.model import TrustGraph, default_alias

logger = logging.getLogger(__name__)


def neighborhood_projection(
    graph: TrustGraph,
    aid: str,
    depth: int,
    config: TrustGraphConfig = DEFAULT_CONFIG,
) -> TrustGraph:
    """
    Project a full trust graph onto the neighborhood of `aid`.

    Rules:
        - depth == 0: only the focus node, with no edges (self-claims included).
        - depth >= 1: induced subgraph over nodes within `depth` undirected hops;
          every edge between two retained nodes is kept.
        - aid not in graph: a graph holding a single bare node for aid, so
          callers can render "no relationships found" instead of failing.

    The root id is carried over as graph.root, but the root node itself is
    only present when it lies inside the neighborhood.

    Args:
        graph:  Full graph from TrustGraphBuilder.build().
        aid:    Focus identifier.
        depth:  Maximum hop count (>= 0).
        config: TrustGraphConfig. Uses default_role and alias_prefix_length
                for the bare node of an unknown aid.

    Returns:
        A new TrustGraph with source='neighborhood'. The input is not modified.

    Raises:
        ValueError: if depth is negative.
    """
    if depth < 0:
        raise ValueError(f"depth must be >= 0, got {depth}")

    if aid not in graph:
        sub = TrustGraph(graph.root, built_at=graph.built_at, default_role=config.default_role)
        sub.add_node(aid, alias=default_alias(aid, config.alias_prefix_length))
        sub.skipped_credentials = list(graph.skipped_credentials)
        logger.info("Neighborhood of unknown identity '%s': bare node only.", aid)
    elif depth == 0:
        sub = graph.induced_subgraph([aid], include_edges=False)
    else:
        reachable = nx.single_source_shortest_path_length(
            graph.undirected_view(), aid, cutoff=depth
        )
        sub = graph.induced_subgraph(reachable)

    sub.source = "neighborhood"
    logger.debug(
        "Neighborhood of '%s' (depth=%d): %d nodes, %d edges.",
        aid, depth, sub.node_count(), sub.edge_count(),
    )
    return sub
