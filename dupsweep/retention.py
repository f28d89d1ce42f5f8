"""
Retention rules for duplicate sets.

Selects which file to keep among duplicates:
- first: earliest discovered (no metadata needed)
- newest / oldest: latest / earliest modification time
- smallest / largest: smallest / largest size

Every tie goes to the member discovered first.
"""

from __future__ import annotations

from typing import Callable, Union

import structlog

from dupsweep.exceptions import InvalidPolicy
from dupsweep.models import DuplicateSet, FileRecord, RetentionPolicy

logger = structlog.get_logger(__name__)


def parse_policy(name: Union[str, RetentionPolicy]) -> RetentionPolicy:
    """Validate a policy name, raising InvalidPolicy if it is unknown."""
    try:
        return RetentionPolicy(str(getattr(name, "value", name)).strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in RetentionPolicy)
        raise InvalidPolicy(f"Invalid keep policy: {name!r} (expected one of: {choices})") from None


def _pick(members: list[FileRecord], key: Callable[[FileRecord], object], largest: bool) -> FileRecord:
    # Strict comparison keeps the earliest member on ties
    best = members[0]
    for member in members[1:]:
        value, best_value = key(member), key(best)
        if (value > best_value) if largest else (value < best_value):
            best = member
    return best


class RetentionSelector:
    """Choose exactly one keeper per duplicate set."""

    def __init__(self, policy: Union[str, RetentionPolicy] = RetentionPolicy.first):
        self.policy = parse_policy(policy)

    def select_keeper(self, duplicate_set: DuplicateSet) -> FileRecord:
        """
        Select the file to KEEP and store it on the set.

        Args:
            duplicate_set: Set of two or more members

        Returns:
            The keeper (always one of duplicate_set.members)
        """
        members = duplicate_set.members

        if self.policy == RetentionPolicy.newest:
            keeper = _pick(members, lambda m: m.modified_at, largest=True)
        elif self.policy == RetentionPolicy.oldest:
            keeper = _pick(members, lambda m: m.modified_at, largest=False)
        elif self.policy == RetentionPolicy.smallest:
            keeper = _pick(members, lambda m: m.size_bytes, largest=False)
        elif self.policy == RetentionPolicy.largest:
            keeper = _pick(members, lambda m: m.size_bytes, largest=True)
        else:
            keeper = members[0]

        duplicate_set.keeper = keeper

        logger.debug(
            "dedup_keeper_selected",
            set_id=duplicate_set.set_id,
            policy=self.policy.value,
            keeper=str(keeper.path),
            members=len(members),
        )

        return keeper
