"""
Build a single round: fill rooms (largest first) with teams that still need
to meet each other, and send everyone left over to the bye list.
"""
import logging
from typing import Dict, List, Optional, Tuple

from .demand import PairDemandTracker
from .models import Match, Room, Round

logger = logging.getLogger(__name__)


def rooms_by_capacity(rooms: List[Room]) -> List[Room]:
    """Rooms in descending capacity order; equal capacities keep input order."""
    return sorted(rooms, key=lambda room: -room.capacity)


def _pair_priority(pair: Tuple[str, str], play_counts: Dict[str, int], ranks: Dict[str, int]):
    first, second = sorted(pair, key=lambda team: ranks[team])
    return (play_counts[first] + play_counts[second], ranks[first], ranks[second])


def _team_priority(team: str, play_counts: Dict[str, int], ranks: Dict[str, int]):
    return (play_counts[team], ranks[team])


def select_seed_pair(tracker: PairDemandTracker, unused: List[str],
                     play_counts: Dict[str, int], ranks: Dict[str, int]) -> Optional[Tuple[str, str]]:
    """Highest-priority pair with outstanding demand whose teams are both unused."""
    available = set(unused)
    candidates = [
        pair for pair in tracker.remaining_pairs()
        if pair[0] in available and pair[1] in available
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda pair: _pair_priority(pair, play_counts, ranks))


def extend_match(match_teams: List[str], capacity: int, tracker: PairDemandTracker,
                 unused: List[str], play_counts: Dict[str, int], ranks: Dict[str, int]) -> List[str]:
    """
    Grow a seeded match one team at a time up to capacity.

    A team qualifies only if every team already in the match still needs to
    meet it, so committing the match never over-satisfies a pair.
    """
    teams = list(match_teams)
    while len(teams) < capacity:
        candidates = [
            team for team in unused
            if team not in teams and all(tracker.needs(member, team) for member in teams)
        ]
        if not candidates:
            break
        teams.append(min(candidates, key=lambda team: _team_priority(team, play_counts, ranks)))
    return teams


def build_round(number: int, teams: List[str], rooms: List[Room], tracker: PairDemandTracker,
                play_counts: Dict[str, int], ranks: Dict[str, int],
                max_teams_per_match: Optional[int] = None) -> Round:
    """
    Produce one round from the current demand state.

    Mutates the tracker (one satisfy() per pair placed together) and
    play_counts (one per team placed). A round without matches is returned
    as-is; detecting a stuck schedule is up to the caller.
    """
    used = set()
    matches = []

    for room in rooms_by_capacity(rooms):
        capacity = room.capacity
        if max_teams_per_match is not None:
            capacity = min(capacity, max_teams_per_match)

        unused = [team for team in teams if team not in used]
        seed = select_seed_pair(tracker, unused, play_counts, ranks)
        if seed is None:
            logger.debug("Round %d: no eligible pair left for %s", number, room.name)
            continue

        first, second = sorted(seed, key=lambda team: ranks[team])
        match_teams = [first, second]
        if capacity > 2:
            match_teams = extend_match(match_teams, capacity, tracker, unused, play_counts, ranks)

        match = Match(room, match_teams)
        for team_a, team_b in match.pairs():
            tracker.satisfy(team_a, team_b)
        for team in match_teams:
            used.add(team)
            play_counts[team] += 1
        matches.append(match)
        logger.debug("Round %d: %s <- %s", number, room.name, ", ".join(match_teams))

    # Matches listed in room input order, not fill order.
    room_order = {room.name: index for index, room in enumerate(rooms)}
    matches.sort(key=lambda match: room_order[match.room.name])

    byes = [team for team in teams if team not in used]
    return Round(number, matches, byes)
