"""Split records into bracket sides and group them by round depth."""

from __future__ import annotations

from dataclasses import dataclass, field

from bracketview.core.models import MatchRecord, Side

RoundGroups = dict[int, list[MatchRecord]]


@dataclass
class Partition:
    """Round-grouped records for both sides of a bracket."""

    winners: RoundGroups = field(default_factory=dict)
    losers: RoundGroups = field(default_factory=dict)

    def side(self, side: Side) -> RoundGroups:
        return self.winners if side is Side.WINNERS else self.losers

    @property
    def winners_count(self) -> int:
        return sum(len(group) for group in self.winners.values())

    @property
    def losers_count(self) -> int:
        return sum(len(group) for group in self.losers.values())


def split_sides(
    records: list[MatchRecord],
) -> tuple[list[MatchRecord], list[MatchRecord]]:
    """Split by the sign of ``round``: ``>= 0`` winners, ``< 0`` losers."""
    winners = [record for record in records if record.round >= 0]
    losers = [record for record in records if record.round < 0]
    return winners, losers


def group_by_depth(records: list[MatchRecord]) -> RoundGroups:
    """Group records by ``abs(round)``, keys in ascending order.

    Records keep their input order inside each group.
    """
    groups: RoundGroups = {}
    for record in records:
        groups.setdefault(record.depth, []).append(record)
    return {depth: groups[depth] for depth in sorted(groups)}


def round_keys(groups: RoundGroups) -> list[int]:
    """Ascending distinct depth keys.

    Gaps in round numbering stay gaps here; the position in this list is
    the dense column index.
    """
    return sorted(groups)


def partition_records(records: list[MatchRecord]) -> Partition:
    """Partition a normalized record list into winners/losers round groups."""
    winners, losers = split_sides(records)
    return Partition(winners=group_by_depth(winners), losers=group_by_depth(losers))
