"""
trust_graph.graph: Trust graph data model and construction layer.

Modules:
    model         Node, Edge, EdgeType and the TrustGraph container.
    credentials   Schema-aware decoding of raw credential records.
    builder       TrustGraphBuilder: full build from a credential store.
    neighborhood  Induced subgraph around one identity (build_for_aid).

Graph schema:
    Node : one identity (the organization root is seeded with role 'organization')
    Edge : issuer → subject, one per credential, typed as
           membership | steward | invitation | self_claim | other
"""
