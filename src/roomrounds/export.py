"""
Plain-data views of a schedule: a room x round grid for display and flat rows
for CSV export.
"""
import csv
import datetime
import io
from typing import Dict, List, Optional

from .models import BYE, BracketRound, Schedule

ROW_FIELDS = ['Room', 'Start Time', 'Event', 'Date', 'Round', 'Left', 'Center', 'Right']
TEAM_SLOTS = ['Left', 'Center', 'Right']


def _parse_time(time_str: str) -> datetime.datetime:
    time_obj = datetime.datetime.strptime(time_str, '%H:%M').time()
    return datetime.datetime.combine(datetime.date.today(), time_obj)


def schedule_grid(schedule: Schedule) -> List[List[str]]:
    """Header row, then one row per room and a final Bye row; cells list the teams."""
    grid = [['Room'] + [f"Round {round_.number}" for round_ in schedule.rounds]]
    round_dicts = schedule.as_dicts()
    for name in [room.name for room in schedule.rooms] + [BYE]:
        grid.append([name] + [" / ".join(cells[name]) for cells in round_dicts])
    return grid


def format_grid(grid: List[List[str]]) -> str:
    """Render a grid as aligned text columns."""
    if not grid:
        return ''
    widths = [max(len(row[col]) for row in grid) for col in range(len(grid[0]))]
    lines = []
    for row in grid:
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
    return "\n".join(lines)


def _row(room_name: str, start: datetime.datetime, event_name: str, event_date: str,
         label: str, teams: Optional[List[str]] = None) -> Dict[str, str]:
    row = {
        'Room': room_name,
        'Start Time': start.strftime('%H:%M'),
        'Event': event_name,
        'Date': event_date,
        'Round': label,
    }
    teams = teams or []
    for index, slot in enumerate(TEAM_SLOTS):
        row[slot] = teams[index] if index < len(teams) else ''
    return row


def schedule_rows(schedule: Schedule, bracket_rounds: Optional[List[BracketRound]] = None,
                  start_time: str = '09:00', round_minutes: int = 30,
                  event_name: str = '', event_date: str = '') -> List[Dict[str, str]]:
    """
    Rows for export, grouped by room and ordered by time.

    Each room gets one row per round-robin round, with up to three team slots
    filled left to right. Bracket rounds follow the round-robin rounds in time;
    every room gets a row for each of them with empty team slots, since the
    occupants depend on earlier results and some rooms may sit unused.
    """
    bracket_rounds = bracket_rounds or []
    start = _parse_time(start_time)
    step = datetime.timedelta(minutes=round_minutes)

    room_names = [room.name for room in schedule.rooms]
    for bracket_round in bracket_rounds:
        for slot in bracket_round.slots:
            if slot.room.name not in room_names:
                room_names.append(slot.room.name)

    rows = []
    for room_name in room_names:
        slot_time = start
        for round_ in schedule.rounds:
            match = round_.match_for_room(room_name)
            rows.append(_row(room_name, slot_time, event_name, event_date,
                             f"Round {round_.number}", match.teams if match else None))
            slot_time += step
        for bracket_round in bracket_rounds:
            rows.append(_row(room_name, slot_time, event_name, event_date, bracket_round.label))
            slot_time += step
    return rows


def rows_to_csv(rows: List[Dict[str, str]]) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=ROW_FIELDS)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    csv_content = output.getvalue()
    output.close()
    return csv_content
