"""
Exceptions raised by the round scheduler and bracket planner.
"""


class SchedulingError(Exception):
    """Base class for all scheduling failures."""


class InvalidConfiguration(SchedulingError, ValueError):
    """Inputs are malformed or insufficient (teams, rooms, multiplicity, mode)."""


class SchedulingDeadlock(SchedulingError, RuntimeError):
    """Remaining demand cannot be reduced even though rooms and teams exist."""


class PairExhausted(SchedulingError, AssertionError):
    """A pair was satisfied more often than it was required to meet."""

    def __init__(self, team_a, team_b):
        super().__init__(f"Pair ({team_a}, {team_b}) has no remaining demand")
        self.pair = (team_a, team_b)
