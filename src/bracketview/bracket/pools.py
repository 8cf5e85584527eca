"""Pool grouping for multi-pool displays."""

from __future__ import annotations

import logging

from bracketview.core.models import MatchRecord

logger = logging.getLogger(__name__)

UNNAMED_POOL = ""


class PoolIndex:
    """Records grouped by pool identifier.

    Identifiers keep the order in which they first appear in the dataset.
    An index is built once per dataset; callers replace it whenever a new
    dataset arrives.
    """

    def __init__(self, records: list[MatchRecord]):
        self._pools: dict[str, list[MatchRecord]] = {}
        for record in records:
            pool_id = record.pool_id if record.pool_id is not None else UNNAMED_POOL
            self._pools.setdefault(pool_id, []).append(record)
        self._ids = list(self._pools)
        logger.debug(f"Indexed {len(records)} records into {len(self._ids)} pools")

    @property
    def pool_ids(self) -> list[str]:
        """Ordered pool identifiers."""
        return list(self._ids)

    def members(self, pool_id: str) -> list[MatchRecord]:
        """Records of one pool, empty for an unknown identifier."""
        return list(self._pools.get(pool_id, ()))

    def pool_at(self, cursor: int) -> str | None:
        """Identifier selected by a rotation cursor, wrapping around."""
        if not self._ids:
            return None
        return self._ids[cursor % len(self._ids)]

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools


def advance_cursor(cursor: int, pool_count: int) -> int:
    """Next rotation position, modulo the number of pools."""
    if pool_count <= 0:
        return 0
    return (cursor + 1) % pool_count
