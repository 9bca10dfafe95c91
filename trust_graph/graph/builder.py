"""
trust_graph/graph/builder.py: Trust graph construction layer.

Turns the flat, unordered credential collection held by a credential store
into a TrustGraph:

    store.list_all_credentials()
        └─► decode_credential()      (malformed records skipped + recorded)
            └─► chronological sort   (issued_at, credential_id)
                └─► issuer node, subject node, issuer → subject edge
                    └─► mark_bidirectional_edges()

The graph is rebuilt from the full collection on every call; nothing is
cached between builds and no graph is shared between callers.
"""

import logging
from datetime import datetime, timezone

from trust_graph.config import DEFAULT_CONFIG, TrustGraphConfig
from trust_graph.exceptions import CredentialStoreError, MalformedCredentialError
from trust_graph.graph.credentials import (
    DecodedCredential,
    MembershipCredential,
    decode_credential,
)
from trust_graph.graph.model import Edge, TrustGraph, default_alias
from trust_graph.graph.neighborhood import neighborhood_projection
from trust_graph.storage.base import CredentialStore

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TrustGraphBuilder:
    """
    Builds trust graphs for one organization from a credential store.

    Args:
        store:    Credential store collaborator (see storage.base.CredentialStore).
        root_aid: The organization's own identifier; origin of depth-from-root.
        config:   TrustGraphConfig. Uses default_role, root_role and
                  alias_prefix_length.
    """

    def __init__(
        self,
        store: CredentialStore,
        root_aid: str,
        config: TrustGraphConfig = DEFAULT_CONFIG,
    ):
        if not root_aid:
            raise ValueError("root_aid must be a non-empty identifier")
        self.store = store
        self.root_aid = root_aid
        self.config = config

    def build(self) -> TrustGraph:
        """
        Build the full organization graph.

        Algorithm (O(C log C + N + E) for C credentials):
            1. Seed the root node with config.root_role.
            2. Read the whole collection from the store in one call.
            3. Decode every record; malformed ones are logged and recorded in
               graph.skipped_credentials, never fatal.
            4. Process valid credentials oldest first, so the earliest
               credential sets joined_at and the latest sets role and alias,
               whatever order the store returned them in.
            5. Mark bidirectional edges, label unnamed nodes, stamp built_at.

        Returns:
            A freshly built TrustGraph owned by the caller.

        Raises:
            CredentialStoreError: if the store cannot be read. No partial
                                  graph is returned.
        """
        graph = TrustGraph(self.root_aid, default_role=self.config.default_role)
        graph.add_node(self.root_aid, role=self.config.root_role)

        records = self._fetch_records()

        decoded: list[DecodedCredential] = []
        for record in records:
            try:
                decoded.append(decode_credential(record))
            except MalformedCredentialError as exc:
                logger.warning("Skipping malformed credential: %s", exc)
                graph.skipped_credentials.append(str(exc))

        decoded.sort(key=_chronological)

        edges_added = 0
        for credential in decoded:
            edges_added += self._apply_credential(graph, credential)

        bidirectional = graph.mark_bidirectional_edges()
        self._label_unnamed_nodes(graph)
        graph.built_at = datetime.now(timezone.utc)

        logger.info(
            "Trust graph built: %d nodes, %d edges (%d bidirectional), "
            "%d credentials read, %d skipped.",
            graph.node_count(),
            edges_added,
            bidirectional,
            len(records),
            len(graph.skipped_credentials),
        )
        return graph

    def build_for_aid(self, aid: str, depth: int) -> TrustGraph:
        """
        Build the full graph, then project it onto the neighborhood of `aid`.

        See neighborhood.neighborhood_projection() for the projection rules.
        An unknown aid yields a graph holding only a bare node for it.

        Raises:
            CredentialStoreError: if the store cannot be read.
            ValueError:           if depth is negative.
        """
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")
        return neighborhood_projection(self.build(), aid, depth, self.config)

    # ── Internals ─────────────────────────────────────────────────────────────

    def _fetch_records(self) -> list:
        try:
            # Materialise in full: the store call is the single blocking point.
            return list(self.store.list_all_credentials())
        except CredentialStoreError:
            logger.error("Credential store unavailable; trust graph build aborted.")
            raise

    def _apply_credential(self, graph: TrustGraph, credential: DecodedCredential) -> int:
        """Add one credential's nodes and edge. Returns 1 if an edge was added."""
        issuer, subject = credential.issuer, credential.subject

        if graph.has_edge(issuer, subject, credential.credential_id):
            logger.debug(
                "Duplicate credential %s (%s -> %s) ignored.",
                credential.credential_id, issuer, subject,
            )
            return 0

        # The root keeps its organization role whatever credentials say.
        subject_role = credential.role if subject != self.root_aid else None
        verification_status = (
            credential.verification_status
            if isinstance(credential, MembershipCredential)
            else None
        )

        if issuer != subject:
            graph.add_node(issuer, joined_at=credential.issued_at, credentials=1)
        graph.add_node(
            subject,
            alias=credential.display_name,
            role=subject_role,
            joined_at=credential.issued_at,
            credentials=1,
            verification_status=verification_status,
        )

        graph.add_edge(
            Edge(
                source=issuer,
                target=subject,
                edge_type=credential.edge_type,
                credential_id=credential.credential_id,
                issued_at=credential.issued_at,
            )
        )
        return 1

    def _label_unnamed_nodes(self, graph: TrustGraph) -> None:
        for node in graph.nodes.values():
            if not node.alias:
                node.alias = default_alias(node.id, self.config.alias_prefix_length)


def _chronological(credential: DecodedCredential) -> tuple:
    # Undated credentials sort after every dated one.
    issued_at = credential.issued_at
    return (issued_at is None, issued_at or _EPOCH, credential.credential_id)
