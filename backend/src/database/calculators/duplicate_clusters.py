"""
Duplicate booking clustering.

Bookings sharing (property, contact email, check-in, check-out) form a
cluster. The smallest booking id is canonical; every other member is a
suspected duplicate of it.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from database.repositories.booking_store import BookingGroup

DUPLICATE_KEY_FIELDS = ("property_id", "contact_email", "date_from", "date_to")


@dataclass(frozen=True)
class DuplicateCluster:
    key: Tuple[Any, ...]
    canonical_id: str
    duplicate_ids: Tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.duplicate_ids) + 1


def cluster_duplicates(groups: Iterable[BookingGroup]) -> List[DuplicateCluster]:
    """Turn grouped aggregates into clusters, dropping groups of one."""
    clusters = []
    for group in groups:
        if group.count <= 1:
            continue
        ordered = sorted(group.booking_ids)
        clusters.append(DuplicateCluster(
            key=group.key,
            canonical_id=ordered[0],
            duplicate_ids=tuple(ordered[1:]),
        ))
    return clusters
