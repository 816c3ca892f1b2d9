"""Split fetched issues into Notion creates and updates."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from ..github_client.models import TrackedItem
from ..notion.index import IdentityIndex


@dataclass
class SyncPlan:
    """Writes needed to bring Notion in line with GitHub."""

    to_create: list[TrackedItem] = field(default_factory=list)
    to_update: list[tuple[str, TrackedItem]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_create and not self.to_update

    def counts_by_collection(self) -> dict[str, tuple[int, int]]:
        """Return (creates, updates) per repository, in plan order."""
        counts: dict[str, tuple[int, int]] = {}
        for item in self.to_create:
            creates, updates = counts.get(item.collection, (0, 0))
            counts[item.collection] = (creates + 1, updates)
        for _, item in self.to_update:
            creates, updates = counts.get(item.collection, (0, 0))
            counts[item.collection] = (creates, updates + 1)
        return counts


def diff(
    items: Mapping[str, Sequence[TrackedItem]], index: IdentityIndex
) -> SyncPlan:
    """Classify every issue as a create or an update.

    An issue whose (repository, number) has a row in ``index`` becomes an
    update carrying that row id, anything else a create. Output order
    follows repository order, then issue order within each repository.
    """
    plan = SyncPlan()
    for collection, collection_items in items.items():
        for item in collection_items:
            row_id = index.lookup(collection, item.number)
            if row_id is None:
                plan.to_create.append(item)
            else:
                plan.to_update.append((row_id, item))
    return plan
