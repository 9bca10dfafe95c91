"""
trust_graph/metrics/depth.py: Graph depth from the organization root.

Depth is the breadth-first shortest path length from the root, walking edges
as undirected: a credential makes issuer and subject adjacent whichever way it
points. Nodes with no path to the root get the UNREACHABLE sentinel.

The root is at depth 0 by definition and is never looked up through BFS.
"""

import logging

import networkx as nx

from trust_graph.graph.model import TrustGraph

logger = logging.getLogger(__name__)

UNREACHABLE = -1


def depths_from_root(G: TrustGraph) -> dict[str, int]:
    """
    Depth of every node in one BFS from the root (O(V + E)).

    Args:
        G: A built TrustGraph.

    Returns:
        depths: Dict mapping node id → hop count, or UNREACHABLE (-1).
                If the root is not part of G (a neighborhood projection that
                does not reach it) every node is UNREACHABLE.
    """
    depths: dict[str, int] = {aid: UNREACHABLE for aid in G.nodes}
    if G.root not in G:
        return depths

    depths.update(nx.single_source_shortest_path_length(G.undirected_view(), G.root))
    depths[G.root] = 0

    logger.debug(
        "Depths computed for %d nodes: %d reachable from root.",
        len(depths),
        sum(1 for d in depths.values() if d >= 0),
    )
    return depths


def depth_from_root(G: TrustGraph, aid: str) -> int:
    """Depth of a single node; UNREACHABLE if it or the root is absent."""
    if aid == G.root:
        return 0
    if aid not in G or G.root not in G:
        return UNREACHABLE
    try:
        return nx.shortest_path_length(G.undirected_view(), G.root, aid)
    except nx.NetworkXNoPath:
        return UNREACHABLE
