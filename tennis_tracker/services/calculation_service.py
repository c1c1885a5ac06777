"""
Match statistics calculation service.

Pure functions over match records: set-score parsing, game aggregation and
win percentages (overall, per surface, per season, head-to-head). Nothing is
cached; callers recompute on every request.

Match records may be ORM ``Match`` objects or plain dicts with the same keys.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from tennis_tracker.database.models import MatchStatus
from tennis_tracker.utils.constants import LIST_SEPARATOR


# ============================================================================
# Result Structures
# ============================================================================


@dataclass
class MatchSummary:
    """Sets and games for one match, from player1's side."""

    sets1: int
    sets2: int
    games1: int
    games2: int
    win_percentage: str

    @property
    def winner(self) -> Optional[int]:
        """1 = player1, 2 = player2, None = level on sets (or no score)."""
        if self.sets1 > self.sets2:
            return 1
        if self.sets2 > self.sets1:
            return 2
        return None


@dataclass
class HeadToHead:
    games_won: int
    games_lost: int
    match_count: int
    win_percentage: str


@dataclass
class GroupStats:
    """Completed-match stats for one surface or season."""

    name: str
    match_count: int
    games_won: int
    games_lost: int
    win_percentage: str


@dataclass
class OverallStats:
    completed_matches: int
    upcoming_matches: int
    games_won: int
    games_lost: int
    win_percentage: str
    surfaces: List[GroupStats]
    seasons: List[GroupStats]


# ============================================================================
# Field Access
# ============================================================================


def _field(match: Any, name: str) -> Any:
    if isinstance(match, dict):
        return match.get(name)
    return getattr(match, name, None)


def _status(match: Any) -> str:
    status = _field(match, "status")
    if isinstance(status, MatchStatus):
        return status.value
    return status


def is_completed(match: Any) -> bool:
    return _status(match) == MatchStatus.COMPLETED.value


def is_scheduled(match: Any) -> bool:
    return _status(match) == MatchStatus.SCHEDULED.value


# ============================================================================
# Score Parsing
# ============================================================================


def parse_games(token: str) -> int:
    """
    Parse one set's game count.

    Leading digits are used (so "7(5)" reads as 7); anything without a
    leading integer counts as 0.
    """
    token = token.strip()
    sign = 1
    if token[:1] in ("-", "+"):
        sign = -1 if token[0] == "-" else 1
        token = token[1:]
    digits = ""
    for char in token:
        if char not in "0123456789":
            break
        digits += char
    return sign * int(digits) if digits else 0


def split_score(score: Optional[str]) -> List[int]:
    """Split a delimited score ("6,3") into per-set games. None or "" gives []."""
    if not score:
        return []
    return [parse_games(token) for token in score.split(LIST_SEPARATOR)]


def parse_set_scores(score1: Optional[str], score2: Optional[str]) -> List[Tuple[int, int]]:
    """
    Pair up per-set games for both sides.

    Sides with fewer sets are padded with 0 so no set is dropped.

    Args:
        score1: Player 1 games per set, e.g. "6,3"
        score2: Player 2 games per set, e.g. "4,6"

    Returns:
        List of (games1, games2) tuples, one per set
    """
    games1 = split_score(score1)
    games2 = split_score(score2)
    set_count = max(len(games1), len(games2))
    games1 += [0] * (set_count - len(games1))
    games2 += [0] * (set_count - len(games2))
    return list(zip(games1, games2))


def count_sets(pairs: Iterable[Tuple[int, int]]) -> Tuple[int, int]:
    """Sets won by each side; a level set counts for neither."""
    sets1 = sets2 = 0
    for games1, games2 in pairs:
        if games1 > games2:
            sets1 += 1
        elif games2 > games1:
            sets2 += 1
    return sets1, sets2


def win_percentage(games_for: int, games_against: int) -> str:
    """
    Share of games won, as a whole-number string.

    Returns "0" when no games were played.
    """
    total = games_for + games_against
    if total <= 0:
        return "0"
    percentage = Decimal(games_for) * 100 / Decimal(total)
    return str(percentage.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_match(match: Any) -> MatchSummary:
    """Sets, games and game win percentage for a single match."""
    pairs = parse_set_scores(_field(match, "score1"), _field(match, "score2"))
    sets1, sets2 = count_sets(pairs)
    games1 = sum(g1 for g1, _ in pairs)
    games2 = sum(g2 for _, g2 in pairs)
    return MatchSummary(
        sets1=sets1,
        sets2=sets2,
        games1=games1,
        games2=games2,
        win_percentage=win_percentage(games1, games2),
    )


# ============================================================================
# Aggregation
# ============================================================================


def aggregate_games(matches: Iterable[Any]) -> Tuple[int, int]:
    """
    Total games for and against across all sets of the given matches.

    Each side is summed over its own tokens, so unequal set counts are fine.
    """
    games_for = games_against = 0
    for match in matches:
        games_for += sum(split_score(_field(match, "score1")))
        games_against += sum(split_score(_field(match, "score2")))
    return games_for, games_against


def completed_matches(matches: Iterable[Any]) -> List[Any]:
    return [m for m in matches if is_completed(m)]


def head_to_head(matches: Iterable[Any], opponent: str, surface: str) -> Optional[HeadToHead]:
    """
    Game stats against one opponent on one surface.

    Only completed matches count; names compare case-sensitively.

    Returns:
        HeadToHead, or None if no such completed match exists
    """
    matches_against = [
        m
        for m in completed_matches(matches)
        if _field(m, "player2") == opponent and _field(m, "surface") == surface
    ]
    if not matches_against:
        return None

    games_won, games_lost = aggregate_games(matches_against)
    return HeadToHead(
        games_won=games_won,
        games_lost=games_lost,
        match_count=len(matches_against),
        win_percentage=win_percentage(games_won, games_lost),
    )


def _group_stats(name: str, matches: Sequence[Any]) -> GroupStats:
    games_won, games_lost = aggregate_games(matches)
    return GroupStats(
        name=name,
        match_count=len(matches),
        games_won=games_won,
        games_lost=games_lost,
        win_percentage=win_percentage(games_won, games_lost),
    )


def per_surface_breakdown(matches: Iterable[Any], surfaces: Sequence[str]) -> List[GroupStats]:
    """
    Completed-match stats for each configured surface.

    Sorted by match count, most played first; ties keep the configured order.
    """
    completed = completed_matches(matches)
    breakdown = [
        _group_stats(surface, [m for m in completed if _field(m, "surface") == surface])
        for surface in surfaces
    ]
    return sorted(breakdown, key=lambda s: s.match_count, reverse=True)


def per_season_breakdown(matches: Iterable[Any], seasons: Sequence[str]) -> List[GroupStats]:
    """Completed-match stats per season, in the given order, skipping empty seasons."""
    completed = completed_matches(matches)
    breakdown = []
    for season in seasons:
        season_matches = [m for m in completed if _field(m, "season") == season]
        if season_matches:
            breakdown.append(_group_stats(season, season_matches))
    return breakdown


def overall_stats(
    matches: Sequence[Any], surfaces: Sequence[str], seasons: Sequence[str]
) -> OverallStats:
    """Dashboard totals plus surface and season breakdowns."""
    completed = completed_matches(matches)
    games_won, games_lost = aggregate_games(completed)
    return OverallStats(
        completed_matches=len(completed),
        upcoming_matches=sum(1 for m in matches if is_scheduled(m)),
        games_won=games_won,
        games_lost=games_lost,
        win_percentage=win_percentage(games_won, games_lost),
        surfaces=per_surface_breakdown(completed, surfaces),
        seasons=per_season_breakdown(completed, seasons),
    )
