"""
Single-pass market clustering.

Each unassigned market seeds a cluster and pulls in every other unassigned
market that scores at or above the threshold against the seed. Membership is
assigned eagerly, before the size check, so members of an undersized cluster
stay unassigned for the rest of the run. Results depend on input order.

Clusters are keyed by the first 50 characters of the seed's normalized
question. Two clusters with the same key collide and the later one replaces
the earlier one in the result.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Set, Tuple

from ..models import MarketRecord
from .scorer import SimilarityScorer
from .text import normalize_text

logger = logging.getLogger(__name__)

DEFAULT_MIN_CLUSTER_SIZE = 2
CLUSTER_KEY_LENGTH = 50


def cluster_key(market: MarketRecord) -> str:
    return normalize_text(market.question)[:CLUSTER_KEY_LENGTH]


def cluster_markets(
    markets: Sequence[MarketRecord],
    scorer: SimilarityScorer,
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
) -> Dict[str, List[MarketRecord]]:
    """
    Partition markets into same-topic clusters.

    Args:
        markets: Markets from any mix of platforms, processed in order.
        scorer: Scorer whose config supplies the similarity threshold.
        min_cluster_size: Clusters smaller than this are discarded.

    Returns:
        Ordered mapping of cluster key to member markets, seed first.
    """
    threshold = scorer.config.min_similarity
    clusters: Dict[str, List[MarketRecord]] = {}
    assigned: Set[Tuple[str, str]] = set()

    for seed in markets:
        if seed.key in assigned:
            continue

        cluster = [seed]
        assigned.add(seed.key)

        for candidate in markets:
            if candidate.key in assigned:
                continue
            similarity, _ = scorer.similarity(seed, candidate)
            if similarity >= threshold:
                cluster.append(candidate)
                assigned.add(candidate.key)

        if len(cluster) >= min_cluster_size:
            key = cluster_key(seed)
            if key in clusters:
                logger.debug("Cluster key collision, replacing %r", key)
            clusters[key] = cluster

    logger.debug("Formed %d clusters from %d markets", len(clusters), len(markets))
    return clusters
