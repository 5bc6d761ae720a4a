"""
Round-robin room scheduling and elimination bracket planning.
"""
from .bracket import DOUBLE_ELIMINATION, SINGLE_ELIMINATION, plan_bracket
from .errors import InvalidConfiguration, PairExhausted, SchedulingDeadlock, SchedulingError
from .models import BracketRound, BracketSlot, Match, Room, Round, Schedule
from .schedule import generate_schedule
from .tiebreak import TieBreak

__all__ = [
    'generate_schedule', 'plan_bracket', 'SINGLE_ELIMINATION', 'DOUBLE_ELIMINATION',
    'Room', 'Match', 'Round', 'Schedule', 'BracketRound', 'BracketSlot', 'TieBreak',
    'SchedulingError', 'InvalidConfiguration', 'SchedulingDeadlock', 'PairExhausted',
]
