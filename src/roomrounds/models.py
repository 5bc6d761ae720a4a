from itertools import combinations
from typing import Dict, List, Optional, Tuple

from .errors import InvalidConfiguration

BYE = "Bye"


def is_bye_name(name) -> bool:
    """True for a room name that would clash with the Bye column."""
    return str(name).strip().lower() == BYE.lower()



class Room:
    def __init__(self, name, capacity=2):
        self.name = name
        self.capacity = capacity

    @classmethod
    def from_value(cls, value):
        """Build a Room from a Room, a {name, capacity} dict or a bare name."""
        if isinstance(value, Room):
            return value
        if isinstance(value, dict):
            if 'name' not in value:
                raise InvalidConfiguration(f"Room entry is missing a name: {value!r}")
            capacity = value.get('capacity', 2)
            try:
                capacity = int(capacity)
            except (TypeError, ValueError):
                raise InvalidConfiguration(
                    f"Room {value['name']!r} has a non-integer capacity: {capacity!r}"
                )
            return cls(str(value['name']).strip(), capacity)
        if isinstance(value, str):
            return cls(value.strip())
        raise InvalidConfiguration(f"Unsupported room entry: {value!r}")

    def as_dict(self):
        return {'name': self.name, 'capacity': self.capacity}

    def __eq__(self, other):
        if not isinstance(other, Room):
            return NotImplemented
        return (self.name, self.capacity) == (other.name, other.capacity)

    def __hash__(self):
        return hash((self.name, self.capacity))

    def __repr__(self):
        return f"Room(name={self.name}, capacity={self.capacity})"


class Match:
    def __init__(self, room: Room, teams: List[str]):
        self.room = room
        self.teams = list(teams)

    def pairs(self) -> List[Tuple[str, str]]:
        """Every unordered pair of teams sharing this room."""
        return list(combinations(self.teams, 2))

    def __repr__(self):
        return f"Match(room={self.room.name}, teams={self.teams})"


class Round:
    def __init__(self, number: int, matches: Optional[List[Match]] = None, byes: Optional[List[str]] = None):
        self.number = number
        self.matches = matches if matches else []
        self.byes = byes if byes else []

    def match_for_room(self, room_name: str) -> Optional[Match]:
        for match in self.matches:
            if match.room.name == room_name:
                return match
        return None

    def teams_placed(self) -> List[str]:
        return [team for match in self.matches for team in match.teams]

    def as_dict(self, rooms: List[Room]) -> Dict[str, List[str]]:
        """
        Room name -> list of teams, in room input order, followed by the
        "Bye" pseudo-room. Rooms unused this round map to an empty list.
        """
        result = {}
        for room in rooms:
            match = self.match_for_room(room.name)
            result[room.name] = list(match.teams) if match else []
        result[BYE] = list(self.byes)
        return result

    def __repr__(self):
        return f"Round(number={self.number}, matches={self.matches}, byes={self.byes})"


class Schedule:
    def __init__(self, teams: List[str], rooms: List[Room], matches_per_team: int, rounds: Optional[List[Round]] = None):
        self.teams = list(teams)
        self.rooms = list(rooms)
        self.matches_per_team = matches_per_team
        self.rounds = rounds if rounds else []

    def __len__(self):
        return len(self.rounds)

    def __iter__(self):
        return iter(self.rounds)

    def play_counts(self) -> Dict[str, int]:
        counts = {team: 0 for team in self.teams}
        for round_ in self.rounds:
            for team in round_.teams_placed():
                counts[team] += 1
        return counts

    def bye_counts(self) -> Dict[str, int]:
        counts = {team: 0 for team in self.teams}
        for round_ in self.rounds:
            for team in round_.byes:
                counts[team] += 1
        return counts

    def pair_meetings(self) -> Dict[Tuple[str, str], int]:
        """How many times each unordered pair shared a room, keyed by sorted pair."""
        meetings = {tuple(sorted(pair)): 0 for pair in combinations(self.teams, 2)}
        for round_ in self.rounds:
            for match in round_.matches:
                for pair in match.pairs():
                    meetings[tuple(sorted(pair))] += 1
        return meetings

    def as_dicts(self) -> List[Dict[str, List[str]]]:
        return [round_.as_dict(self.rooms) for round_ in self.rounds]

    def stats(self) -> Dict:
        return {
            'total_rounds': len(self.rounds),
            'total_matches': sum(len(r.matches) for r in self.rounds),
            'play_counts': self.play_counts(),
            'bye_counts': self.bye_counts(),
        }

    def __repr__(self):
        return f"Schedule(teams={len(self.teams)}, rooms={len(self.rooms)}, rounds={len(self.rounds)})"


class BracketSlot:
    def __init__(self, room: Room, teams_expected: int, side: Optional[str] = None):
        self.room = room
        self.teams_expected = teams_expected
        self.side = side  # None for single elimination

    def as_dict(self):
        data = {'room': self.room.name, 'teams_expected': self.teams_expected}
        if self.side:
            data['side'] = self.side
        return data

    def __repr__(self):
        return f"BracketSlot(room={self.room.name}, teams_expected={self.teams_expected}, side={self.side})"


class BracketRound:
    def __init__(self, number: int, slots: List[BracketSlot], label: str = "",
                 state: Optional[Dict[str, int]] = None):
        self.number = number
        self.slots = slots
        self.label = label
        self.state = state if state else {}  # bracket counters entering this round

    @property
    def rooms(self) -> List[Tuple[Room, int]]:
        return [(slot.room, slot.teams_expected) for slot in self.slots]

    @property
    def teams_expected(self) -> int:
        return sum(slot.teams_expected for slot in self.slots)

    def as_dict(self):
        return {
            'number': self.number,
            'label': self.label,
            'rooms': [slot.as_dict() for slot in self.slots],
            'state': dict(self.state),
        }

    def __repr__(self):
        return f"BracketRound(number={self.number}, label={self.label}, slots={self.slots})"
