"""Grand Final Reset inclusion rule.

The API always returns a placeholder for the bracket-reset game, whether or
not it was played. The reset only happens when the losers-bracket finalist
wins the first grand final, so the placeholder is kept only when the Grand
Final and the Losers Final share the same winner.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from bracketview.core.constants import (
    GRAND_FINAL_LABEL,
    GRAND_FINAL_RESET_LABEL,
    LOSERS_FINAL_LABEL,
    RESET_NAMESPACE,
    SYNTHETIC_ID_PREFIX,
)
from bracketview.core.models import MatchRecord

logger = logging.getLogger(__name__)


def synthetic_match_id(namespace: str, round_number: int, match_index: int = 0) -> str:
    """Build an id with the ``prefix_pool_round_match`` structure.

    Underscores in the namespace are replaced so the round and match index
    stay in the third and fourth segments.
    """
    namespace = str(namespace).replace("_", "-")
    return f"{SYNTHETIC_ID_PREFIX}_{namespace}_{round_number}_{match_index}"


def _find_by_label(records: list[MatchRecord], label: str) -> MatchRecord | None:
    for record in records:
        if record.round_label == label:
            return record
    return None


def reset_was_played(
    grand_final: MatchRecord | None, losers_final: MatchRecord | None
) -> bool:
    """Whether the conditional reset game logically occurred."""
    if grand_final is None or losers_final is None:
        return False
    if grand_final.winner_id is None or losers_final.winner_id is None:
        return False
    return grand_final.winner_id == losers_final.winner_id


def normalize_records(
    records: list[MatchRecord], namespace: str = RESET_NAMESPACE
) -> list[MatchRecord]:
    """Apply the Grand Final Reset rule to a flat record list.

    Args:
        records: Records of one bracket (or one pool).
        namespace: Pool identifier used in the reset record's synthetic id.
            Single-bracket displays use the default namespace.

    Returns:
        A new list. When the reset is retained it is replaced by a copy with
        ``round + 1`` and a synthetic id; otherwise it is dropped. All other
        records are passed through unchanged and in order.
    """
    reset = _find_by_label(records, GRAND_FINAL_RESET_LABEL)
    if reset is None:
        return list(records)

    grand_final = _find_by_label(records, GRAND_FINAL_LABEL)
    losers_final = _find_by_label(records, LOSERS_FINAL_LABEL)

    if not reset_was_played(grand_final, losers_final):
        logger.debug(f"Dropping unplayed Grand Final Reset {reset.id}")
        return [record for record in records if record is not reset]

    new_round = reset.round + 1
    promoted = replace(
        reset,
        round=new_round,
        id=synthetic_match_id(namespace, new_round),
    )
    logger.debug(f"Keeping Grand Final Reset {reset.id} as {promoted.id}")
    return [promoted if record is reset else record for record in records]
