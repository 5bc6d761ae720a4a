"""
Per-pair meeting demand for round-robin room scheduling.

Every unordered pair of teams starts with the number of times it still has to
share a room. The round builder asks which pairs still need to meet and calls
satisfy() once for every pair it puts in the same room.
"""
from itertools import combinations
from typing import Dict, Iterator, List, Tuple

from .errors import InvalidConfiguration, PairExhausted


def pair_key(team_a: str, team_b: str) -> Tuple[str, str]:
    """Canonical key for an unordered pair: (A, B) and (B, A) map to the same tuple."""
    return (team_a, team_b) if team_a <= team_b else (team_b, team_a)


class PairDemandTracker:
    def __init__(self, teams: List[str], matches_per_team: int):
        if len(teams) < 2:
            raise InvalidConfiguration(f"Need at least 2 teams, got {len(teams)}")
        if matches_per_team < 1:
            raise InvalidConfiguration(f"matches_per_team must be at least 1, got {matches_per_team}")

        self.matches_per_team = matches_per_team
        # Plain dicts keep insertion order, so iteration follows the team input order.
        self._demand: Dict[Tuple[str, str], int] = {}
        for team_a, team_b in combinations(teams, 2):
            self._demand[pair_key(team_a, team_b)] = matches_per_team

    def __repr__(self):
        return f"PairDemandTracker(pairs={len(self._demand)}, remaining={self.remaining_count()})"

    def demand(self, team_a: str, team_b: str) -> int:
        return self._demand[pair_key(team_a, team_b)]

    def needs(self, team_a: str, team_b: str) -> bool:
        """True if the two teams still have to meet at least once more."""
        return self._demand.get(pair_key(team_a, team_b), 0) > 0

    def remaining_pairs(self) -> Iterator[Tuple[str, str]]:
        """Yield pairs with outstanding demand. Each call starts a fresh scan."""
        for key, remaining in self._demand.items():
            if remaining > 0:
                yield key

    def remaining_count(self) -> int:
        return sum(1 for _ in self.remaining_pairs())

    def satisfy(self, team_a: str, team_b: str):
        key = pair_key(team_a, team_b)
        if self._demand.get(key, 0) <= 0:
            raise PairExhausted(*key)
        self._demand[key] -= 1

    def is_complete(self) -> bool:
        return all(remaining == 0 for remaining in self._demand.values())
