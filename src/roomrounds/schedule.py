"""
Round-robin room schedule generation.

generate_schedule() keeps building rounds until every pair of teams has
shared a room matches_per_team times. Teams that have played less are
preferred when filling rooms, and ties are settled by an injectable,
seedable tie-break so a seed always reproduces the same schedule.
"""
import logging
from typing import List, Optional, Union

from .demand import PairDemandTracker
from .errors import InvalidConfiguration, SchedulingDeadlock
from .models import BYE, Room, Schedule, is_bye_name
from .round_builder import build_round
from .tiebreak import TieBreak, as_tie_break

logger = logging.getLogger(__name__)

# Consecutive empty rounds without progress before giving up.
MAX_STALLED_ROUNDS = 2


def normalize_teams(teams) -> List[str]:
    if teams is None:
        raise InvalidConfiguration("No teams given")
    names = []
    for team in teams:
        name = str(team).strip() if team is not None else ''
        if not name:
            raise InvalidConfiguration("Team names must not be blank")
        names.append(name)
    return names


def normalize_rooms(rooms) -> List[Room]:
    if rooms is None:
        raise InvalidConfiguration("No rooms given")
    return [Room.from_value(room) for room in rooms]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_configuration(teams: List[str], rooms: List[Room], matches_per_team: int,
                           max_teams_per_match: Optional[int] = None):
    """Raise InvalidConfiguration for any input the generator cannot work with."""
    if len(teams) < 2:
        raise InvalidConfiguration(f"Need at least 2 teams, got {len(teams)}")
    duplicates = sorted({team for team in teams if teams.count(team) > 1})
    if duplicates:
        raise InvalidConfiguration(f"Duplicate team names: {', '.join(duplicates)}")

    if not rooms:
        raise InvalidConfiguration("Need at least 1 room")
    room_names = [room.name for room in rooms]
    if any(not name for name in room_names):
        raise InvalidConfiguration("Room names must not be blank")
    if any(is_bye_name(name) for name in room_names):
        raise InvalidConfiguration(f"{BYE!r} is reserved and cannot be used as a room name")
    duplicates = sorted({name for name in room_names if room_names.count(name) > 1})
    if duplicates:
        raise InvalidConfiguration(f"Duplicate room names: {', '.join(duplicates)}")
    for room in rooms:
        if not _is_int(room.capacity) or room.capacity < 2:
            raise InvalidConfiguration(
                f"Room {room.name!r} must hold at least 2 teams, got capacity {room.capacity!r}"
            )

    if not _is_int(matches_per_team) or matches_per_team < 1:
        raise InvalidConfiguration(f"matches_per_team must be a positive integer, got {matches_per_team!r}")
    if max_teams_per_match is not None and (not _is_int(max_teams_per_match) or max_teams_per_match < 2):
        raise InvalidConfiguration(
            f"max_teams_per_match must be an integer of at least 2, got {max_teams_per_match!r}"
        )


def generate_schedule(teams, rooms, matches_per_team: int,
                      tie_break: Optional[Union[TieBreak, int, str]] = None,
                      max_teams_per_match: Optional[int] = None) -> Schedule:
    """
    Build the full schedule.

    Args:
        teams: Team names, all distinct
        rooms: Room objects, {name, capacity} dicts or bare room names (capacity 2)
        matches_per_team: How many times every pair of teams must share a room
        tie_break: TieBreak instance or seed; None keeps the input order
        max_teams_per_match: Optional cap on teams per room regardless of capacity

    Returns:
        Schedule whose rounds satisfy every pair exactly matches_per_team times

    Raises:
        InvalidConfiguration: before any work, for malformed input
        SchedulingDeadlock: if rounds stop making progress
    """
    teams = normalize_teams(teams)
    rooms = normalize_rooms(rooms)
    validate_configuration(teams, rooms, matches_per_team, max_teams_per_match)
    tie_break = as_tie_break(tie_break)

    logger.info(
        "Generating schedule: %d teams, %d rooms, %d meeting(s) per pair, tie-break %r",
        len(teams), len(rooms), matches_per_team, tie_break
    )

    tracker = PairDemandTracker(teams, matches_per_team)
    play_counts = {team: 0 for team in teams}
    schedule = Schedule(teams, rooms, matches_per_team)
    stalled = 0

    while not tracker.is_complete():
        remaining_before = tracker.remaining_count()
        ranks = tie_break.ranks(teams)
        round_ = build_round(len(schedule.rounds) + 1, teams, rooms, tracker, play_counts,
                             ranks, max_teams_per_match)

        if not round_.matches and tracker.remaining_count() == remaining_before:
            stalled += 1
            if stalled >= MAX_STALLED_ROUNDS:
                raise SchedulingDeadlock(
                    f"No progress after {stalled} empty rounds with "
                    f"{remaining_before} pair(s) still to meet"
                )
        else:
            stalled = 0

        schedule.rounds.append(round_)

    logger.info("Schedule complete: %d rounds", len(schedule.rounds))
    return schedule
