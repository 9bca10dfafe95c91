"""
trust_graph.metrics: Trust score computation.

Modules:
    depth  BFS depth from the organization root (undirected, -1 = unreachable).
    score  TrustScoreCalculator, TrustScore, ScoreSummary, scores_to_dataframe.

All metrics take a built TrustGraph and never re-read credentials.
All weights live in trust_graph.config.ScoreWeights.
"""
