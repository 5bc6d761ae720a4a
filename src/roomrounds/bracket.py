"""
Elimination bracket round planning.

The planner only works out how many rounds a bracket needs and which rooms
are busy in each of them. It never places concrete teams: after the first
round, who plays depends on results that are not known yet.

In double elimination:
- Winners bracket: teams that haven't lost yet
- Losers bracket: teams that have lost once
- Grand Final: the last team in each bracket meet once
"""
import logging
import math
from typing import Dict, List

from .errors import InvalidConfiguration, SchedulingDeadlock
from .models import BYE, BracketRound, BracketSlot, Room, is_bye_name
from .round_builder import rooms_by_capacity

logger = logging.getLogger(__name__)

SINGLE_ELIMINATION = "Single Elimination"
DOUBLE_ELIMINATION = "Double Elimination"

_MODE_ALIASES = {
    'single elimination': SINGLE_ELIMINATION,
    'single': SINGLE_ELIMINATION,
    'double elimination': DOUBLE_ELIMINATION,
    'double': DOUBLE_ELIMINATION,
}

FINALS = "Finals"
CONSOLATION = "Consolation"
SEMI_FINAL = "Semi-Final"


def normalize_mode(mode: str) -> str:
    """Map a mode name (long form or settings shorthand) to its canonical name."""
    key = str(mode).strip().lower() if mode is not None else ''
    if key not in _MODE_ALIASES:
        raise InvalidConfiguration(
            f"Unsupported elimination mode {mode!r}; expected "
            f"{SINGLE_ELIMINATION!r} or {DOUBLE_ELIMINATION!r}"
        )
    return _MODE_ALIASES[key]


def max_rounds(team_count: int) -> int:
    """Upper bound on bracket rounds before the plan is considered stuck."""
    return 2 * team_count


def pack_rooms(rooms: List[Room], teams_to_place: int, side=None) -> List[BracketSlot]:
    """
    Fill rooms in the given order until everybody is placed.

    A room takes as many teams as it can hold. Packing stops at the first room
    that would end up with fewer than 2 teams.
    """
    slots = []
    placed = 0
    for room in rooms:
        occupants = min(room.capacity, teams_to_place - placed)
        if occupants < 2:
            break
        slots.append(BracketSlot(room, occupants, side))
        placed += occupants
    return slots


def advancing(slots: List[BracketSlot]) -> int:
    """Teams that come out of the given slots as winners: half of each room, rounded up."""
    return sum(math.ceil(slot.teams_expected / 2) for slot in slots)


def round_labels(total_rounds: int, mode: str) -> List[str]:
    """
    Labels for a plan of total_rounds rounds.

    The last round is the Finals; in double elimination the one before it is
    the Consolation round. A single earlier round is the Semi-Final, several
    earlier rounds are numbered.
    """
    if total_rounds <= 0:
        return []
    tail = [FINALS]
    if mode == DOUBLE_ELIMINATION and total_rounds >= 2:
        tail = [CONSOLATION, FINALS]
    earlier = total_rounds - len(tail)
    if earlier == 1:
        head = [SEMI_FINAL]
    else:
        head = [f"Round-{number}" for number in range(1, earlier + 1)]
    return head + tail


def _plan_single(team_count: int, rooms: List[Room]) -> List[BracketRound]:
    rounds = []
    remaining = team_count
    while remaining > 1:
        if len(rounds) >= max_rounds(team_count):
            raise SchedulingDeadlock(f"Single elimination plan did not converge for {team_count} teams")
        slots = pack_rooms(rooms, remaining)
        rounds.append(BracketRound(len(rounds) + 1, slots, state={'remaining': remaining}))
        # Teams without a room this round are not carried into the next one.
        remaining = advancing(slots)
    return rounds


def _bracket_portion(count: int) -> int:
    """Largest even part of a bracket; an odd team sits out the round."""
    return count if count % 2 == 0 else count - 1


def _plan_double(team_count: int, rooms: List[Room]) -> List[BracketRound]:
    rounds = []
    winners_remaining, losers_remaining = team_count, 0

    while winners_remaining + losers_remaining > 1:
        if len(rounds) >= max_rounds(team_count):
            raise SchedulingDeadlock(f"Double elimination plan did not converge for {team_count} teams")
        state = {'winners_remaining': winners_remaining, 'losers_remaining': losers_remaining}

        if winners_remaining == 1 and losers_remaining == 1:
            slots = pack_rooms(rooms, 2, side='final')
            rounds.append(BracketRound(len(rounds) + 1, slots, state=state))
            break

        winners_this_round = _bracket_portion(winners_remaining)
        losers_this_round = _bracket_portion(losers_remaining)

        winner_slots = pack_rooms(rooms, winners_this_round, side='winners')
        free_rooms = rooms[len(winner_slots):]
        loser_slots = pack_rooms(free_rooms, losers_this_round, side='losers')
        if losers_this_round and not loser_slots:
            logger.debug("Round %d: losers bracket deferred, no room left", len(rounds) + 1)

        winners_placed = sum(slot.teams_expected for slot in winner_slots)
        losers_placed = sum(slot.teams_expected for slot in loser_slots)
        dropped = winners_placed - advancing(winner_slots)
        eliminated = losers_placed - advancing(loser_slots)

        rounds.append(BracketRound(len(rounds) + 1, winner_slots + loser_slots, state=state))
        winners_remaining -= dropped
        losers_remaining += dropped - eliminated

    return rounds


def plan_bracket(team_count: int, rooms, mode: str) -> List[BracketRound]:
    """
    Plan the rounds of an elimination bracket.

    Args:
        team_count: Teams entering the bracket (at least 2)
        rooms: Room objects, {name, capacity} dicts or bare room names
        mode: "Single Elimination" or "Double Elimination" ("single" / "double" also accepted)

    Returns:
        Labelled BracketRounds listing the rooms in use and expected occupants
    """
    mode = normalize_mode(mode)
    if isinstance(team_count, bool) or not isinstance(team_count, int) or team_count < 2:
        raise InvalidConfiguration(f"Need at least 2 teams for a bracket, got {team_count!r}")
    if not rooms:
        raise InvalidConfiguration("Need at least 1 room")
    rooms = [Room.from_value(room) for room in rooms]
    names = [room.name for room in rooms]
    if len(set(names)) != len(names):
        raise InvalidConfiguration("Room names must be unique")
    if any(is_bye_name(name) for name in names):
        raise InvalidConfiguration(f"{BYE!r} is reserved and cannot be used as a room name")
    for room in rooms:
        if isinstance(room.capacity, bool) or not isinstance(room.capacity, int) or room.capacity < 2:
            raise InvalidConfiguration(f"Room {room.name!r} must hold at least 2 teams")

    ordered = rooms_by_capacity(rooms)
    if mode == SINGLE_ELIMINATION:
        rounds = _plan_single(team_count, ordered)
    else:
        rounds = _plan_double(team_count, ordered)

    for bracket_round, label in zip(rounds, round_labels(len(rounds), mode)):
        bracket_round.label = label

    logger.info("%s plan for %d teams: %d rounds", mode, team_count, len(rounds))
    return rounds


def bracket_summary(rounds: List[BracketRound]) -> Dict:
    """Totals for display next to a bracket plan."""
    return {
        'total_rounds': len(rounds),
        'total_slots': sum(len(r.slots) for r in rounds),
        'teams_expected': sum(r.teams_expected for r in rounds),
        'labels': [r.label for r in rounds],
    }
