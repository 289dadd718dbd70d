"""
Database calculators - centralized logic for the non-trivial audit algorithms.

This package holds the pieces of the consistency audit that are more than a
single comparison: interval overlap detection, per-night price outliers and
duplicate clustering. Rules call into these so the algorithms can be tested
in isolation.
"""

from database.calculators.interval_overlap import intervals_overlap, find_overlapping_pairs
from database.calculators.price_outliers import price_per_night, find_price_outliers, OutlierResult
from database.calculators.duplicate_clusters import cluster_duplicates, DuplicateCluster

__all__ = [
    "intervals_overlap",
    "find_overlapping_pairs",
    "price_per_night",
    "find_price_outliers",
    "OutlierResult",
    "cluster_duplicates",
    "DuplicateCluster",
]
