"""
trust_graph: Trust graph engine for credential-based communities.

Aggregates membership and role credentials into a directed trust graph and
derives a per-member trust score used to rank standing within the
organization.

Entry points:
    trust_graph.graph.builder.TrustGraphBuilder     build() / build_for_aid()
    trust_graph.metrics.score.TrustScoreCalculator  calculate_score() /
                                                    calculate_all_scores() /
                                                    get_top_scores() /
                                                    calculate_summary()
    trust_graph.pipeline.run_trust_pipeline         both in one call
"""

__version__ = "0.1.0"
