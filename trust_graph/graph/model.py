"""
trust_graph/graph/model.py: Node, Edge and TrustGraph containers.

The graph keeps two views of the same data:
    nodes  dict[str, Node]   keyed by identifier, the record of each identity
    edges  list[Edge]        ordered, one per credential, for traceability
and mirrors the topology in a NetworkX MultiDiGraph keyed by credential id so
that adjacency queries and breadth-first search run on NetworkX.

Invariants:
    - Nodes are unique by id; re-adding an id updates it in place.
    - Edges are unique by (source, target, credential_id).
    - An edge may only be added once both of its endpoints exist.
"""

import logging
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Iterable

import networkx as nx

from trust_graph.exceptions import GraphIntegrityError

logger = logging.getLogger(__name__)


class EdgeType(str, Enum):
    """Closed set of relationship kinds an edge can carry."""

    MEMBERSHIP = "membership"
    STEWARD = "steward"
    INVITATION = "invitation"
    SELF_CLAIM = "self_claim"
    OTHER = "other"


@dataclass
class Node:
    """
    One identity participating in the organization.

    Fields:
        id:                  Externally assigned identifier (unique key).
        alias:               Human-readable label, if one is known.
        role:                Free-text role tag ('member', 'steward', ...).
        joined_at:           Issuance time of the earliest credential involving
                             this identity.
        credential_count:    Credentials naming this identity as issuer or subject.
        verification_status: Status carried by the latest membership credential.
    """

    id: str
    alias: str | None = None
    role: str = "member"
    joined_at: datetime | None = None
    credential_count: int = 0
    verification_status: str | None = None


@dataclass
class Edge:
    """
    Directed relationship issuer → subject derived from exactly one credential.

    `bidirectional` is derived: it is only meaningful after
    TrustGraph.mark_bidirectional_edges() has run.
    """

    source: str
    target: str
    edge_type: EdgeType
    credential_id: str
    issued_at: datetime | None = None
    bidirectional: bool = False

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source, self.target, self.credential_id)


def default_alias(aid: str, prefix_length: int = 8) -> str:
    """Truncated identifier used as a label when no display name is known."""
    if len(aid) <= prefix_length:
        return aid
    return aid[:prefix_length] + "..."


class TrustGraph:
    """
    The trust graph for one organization.

    Built fresh per request by TrustGraphBuilder and treated as read-only once
    returned. Audit metadata:
        skipped_credentials  one warning string per record the builder dropped
        source               'full' or 'neighborhood'
    """

    def __init__(
        self,
        root: str,
        built_at: datetime | None = None,
        default_role: str = "member",
    ):
        self.root = root
        self.built_at = built_at
        self.default_role = default_role
        self.nodes: dict[str, Node] = {}
        self.edges: list[Edge] = []
        self.skipped_credentials: list[str] = []
        self.source = "full"
        self._g = nx.MultiDiGraph()

    def __contains__(self, aid: object) -> bool:
        return aid in self.nodes

    def __repr__(self) -> str:
        return (
            f"TrustGraph(root={self.root!r}, nodes={self.node_count()}, "
            f"edges={self.edge_count()})"
        )

    # ── Nodes ─────────────────────────────────────────────────────────────────

    def add_node(
        self,
        aid: str,
        alias: str | None = None,
        role: str | None = None,
        joined_at: datetime | None = None,
        credentials: int = 0,
        verification_status: str | None = None,
    ) -> Node:
        """
        Add a node, or update it in place if the id is already present.

        None arguments never overwrite existing values. joined_at only ever
        moves earlier; credentials is added to the running count.
        """
        node = self.nodes.get(aid)
        if node is None:
            node = Node(
                id=aid,
                alias=alias,
                role=role or self.default_role,
                joined_at=joined_at,
                credential_count=credentials,
                verification_status=verification_status,
            )
            self.nodes[aid] = node
            self._g.add_node(aid)
            return node

        if alias:
            node.alias = alias
        if role:
            node.role = role
        if verification_status:
            node.verification_status = verification_status
        if joined_at is not None and (node.joined_at is None or joined_at < node.joined_at):
            node.joined_at = joined_at
        node.credential_count += credentials
        return node

    def get_node(self, aid: str) -> Node | None:
        return self.nodes.get(aid)

    def node_count(self) -> int:
        return len(self.nodes)

    # ── Edges ─────────────────────────────────────────────────────────────────

    def has_edge(self, source: str, target: str, credential_id: str) -> bool:
        return self._g.has_edge(source, target, key=credential_id)

    def add_edge(self, edge: Edge) -> bool:
        """
        Append edge unless its (source, target, credential_id) triple exists.

        Returns:
            True if the edge was added, False if it was already present.

        Raises:
            GraphIntegrityError: if either endpoint is not a node yet.
        """
        for endpoint in (edge.source, edge.target):
            if endpoint not in self.nodes:
                raise GraphIntegrityError(
                    f"edge {edge.source} -> {edge.target} ({edge.credential_id}) "
                    f"references unknown node '{endpoint}'"
                )
        if self.has_edge(edge.source, edge.target, edge.credential_id):
            return False
        self.edges.append(edge)
        self._g.add_edge(edge.source, edge.target, key=edge.credential_id, edge=edge)
        return True

    def outgoing_edges(self, aid: str) -> list[Edge]:
        if aid not in self._g:
            return []
        return [e for _, _, e in self._g.out_edges(aid, data="edge")]

    def incoming_edges(self, aid: str) -> list[Edge]:
        if aid not in self._g:
            return []
        return [e for _, _, e in self._g.in_edges(aid, data="edge")]

    def edge_count(self) -> int:
        return len(self.edges)

    # ── Bidirectional relations ───────────────────────────────────────────────

    def has_bidirectional_relation(self, a: str, b: str) -> bool:
        """True if edges exist both a → b and b → a, of any type."""
        if a == b:
            return False
        return self._g.has_edge(a, b) and self._g.has_edge(b, a)

    def mark_bidirectional_edges(self) -> int:
        """
        Flag every edge that has a reverse counterpart. Single pass over edges.

        Flags are recomputed from scratch, so an edge without a reverse is
        reset to False. Self-loops are never bidirectional.

        Returns:
            Number of edges flagged.
        """
        flagged = 0
        for edge in self.edges:
            edge.bidirectional = self.has_bidirectional_relation(edge.source, edge.target)
            flagged += edge.bidirectional
        return flagged

    # ── Views and projections ─────────────────────────────────────────────────

    def undirected_view(self) -> nx.MultiGraph:
        """Read-only undirected view of the topology, used for distances."""
        return self._g.to_undirected(as_view=True)

    def induced_subgraph(self, aids: Iterable[str], include_edges: bool = True) -> "TrustGraph":
        """
        Copy of the graph restricted to `aids` (ids not in the graph are ignored).

        Nodes and edges are copied, so mutating the result leaves this graph
        untouched. Bidirectional flags are recomputed on the copy.
        """
        keep = {aid for aid in aids if aid in self.nodes}
        sub = TrustGraph(self.root, built_at=self.built_at, default_role=self.default_role)
        for aid, node in self.nodes.items():
            if aid in keep:
                sub.nodes[aid] = replace(node)
                sub._g.add_node(aid)
        if include_edges:
            for edge in self.edges:
                if edge.source in keep and edge.target in keep:
                    sub.add_edge(replace(edge))
        sub.mark_bidirectional_edges()
        sub.skipped_credentials = list(self.skipped_credentials)
        return sub

    def to_dict(self) -> dict:
        """Plain-dict form for JSON output (datetimes left for the encoder)."""
        return {
            "root": self.root,
            "built_at": self.built_at,
            "source": self.source,
            "node_count": self.node_count(),
            "edge_count": self.edge_count(),
            "nodes": [asdict(n) for n in self.nodes.values()],
            "edges": [asdict(e) for e in self.edges],
            "skipped_credentials": list(self.skipped_credentials),
        }
