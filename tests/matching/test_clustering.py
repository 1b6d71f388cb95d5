"""Tests for single-pass topic clustering."""

from datetime import datetime, timezone

from crossmarket.matching import MarketMatcher, SimilarityScorer, cluster_key, cluster_markets
from crossmarket.models import MarketCategory, MatchConfig


def test_clusters_similar_markets(make_market):
    matcher = MarketMatcher(min_similarity=0.7)
    markets = [
        make_market(id="poly-1", question="Bitcoin to $100k?"),
        make_market(id="kalshi-1", platform="KALSHI", question="Will Bitcoin hit $100k?"),
        make_market(id="poly-2", question="Ethereum to $5k?"),
    ]

    clusters = matcher.cluster_markets(markets)

    assert list(clusters) == ["bitcoin to 100k"]
    assert [m.id for m in clusters["bitcoin to 100k"]] == ["poly-1", "kalshi-1"]


def test_min_cluster_size_filters(make_market):
    matcher = MarketMatcher(min_similarity=0.7)
    markets = [
        make_market(id="poly-1", question="Bitcoin to $100k?"),
        make_market(id="kalshi-1", platform="KALSHI", question="Will Bitcoin hit $100k?"),
    ]

    assert matcher.cluster_markets(markets, min_cluster_size=3) == {}


def test_same_platform_markets_can_cluster(make_market):
    markets = [make_market(id="a"), make_market(id="b")]

    clusters = MarketMatcher().cluster_markets(markets)

    assert [m.id for m in next(iter(clusters.values()))] == ["a", "b"]


def test_no_market_in_two_clusters(make_market):
    matcher = MarketMatcher(min_similarity=0.5)
    questions = [
        "Bitcoin to $100k?",
        "Will Bitcoin hit $100k?",
        "Fed cut rates in March?",
        "Will the Fed cut rates?",
        "Bitcoin above $100k in 2024?",
    ]
    markets = [make_market(id=f"m{i}", question=q) for i, q in enumerate(questions)]

    clusters = matcher.cluster_markets(markets)

    members = [m.key for cluster in clusters.values() for m in cluster]
    assert len(members) == len(set(members))
    assert all(len(cluster) >= 2 for cluster in clusters.values())


def test_eager_assignment_locks_out_later_clusters(make_market):
    # Against A only B clears 0.65; against C only D does. Both clusters are
    # too small, and B, C, D can no longer form the cluster they would alone.
    scorer = SimilarityScorer(MatchConfig(min_similarity=0.65))
    a = make_market(id="a", question="red blue")
    b = make_market(id="b", question="red blue green pink")
    c = make_market(id="c", question="green pink blue")
    d = make_market(id="d", question="green pink red")

    assert cluster_markets([a, b, c, d], scorer, min_cluster_size=3) == {}

    clusters = cluster_markets([b, c, d], scorer, min_cluster_size=3)
    assert list(clusters) == ["red blue green pink"]
    assert [m.id for m in clusters["red blue green pink"]] == ["b", "c", "d"]


def test_key_collision_keeps_later_cluster(make_market):
    scorer = SimilarityScorer(MatchConfig(min_similarity=0.9))
    far = datetime(2025, 6, 1, tzinfo=timezone.utc)
    markets = [
        make_market(id="c1", question="Bitcoin to $100k?"),
        make_market(id="c2", question="Bitcoin to $100k?"),
        make_market(id="s1", question="Bitcoin to $100k?", category=MarketCategory.SPORTS, closes_at=far),
        make_market(id="s2", question="Bitcoin to $100k?", category=MarketCategory.SPORTS, closes_at=far),
    ]

    clusters = cluster_markets(markets, scorer)

    assert list(clusters) == ["bitcoin to 100k"]
    assert [m.id for m in clusters["bitcoin to 100k"]] == ["s1", "s2"]


def test_cluster_key_truncates_normalized_question(make_market):
    question = "Will the Democratic candidate win the 2028 U.S. presidential election by more than 5 points?"
    key = cluster_key(make_market(question=question))

    assert len(key) == 50
    assert key == "will the democratic candidate win the 2028 u s pre"


def test_empty_input():
    assert cluster_markets([], SimilarityScorer()) == {}
