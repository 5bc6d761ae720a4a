# Entry point of the application for room round scheduling
"""
Generate a round-robin room schedule from a data directory.

Usage:
    python src/main.py
    python src/main.py --data-dir /path/to/data --seed 7
    python src/main.py --bracket double --csv schedule.csv

Exit codes:
    0: Success
    1: Invalid configuration (teams, rooms or settings)
    2: Scheduling failure
"""
import argparse
import logging
import os
import sys

from roomrounds.bracket import bracket_summary, plan_bracket
from roomrounds.config import (
    ROOMS_FILENAME, SETTINGS_FILENAME, TEAMS_FILENAME,
    get_data_dir, load_rooms, load_settings, load_teams
)
from roomrounds.errors import InvalidConfiguration, SchedulingError
from roomrounds.export import format_grid, rows_to_csv, schedule_grid, schedule_rows
from roomrounds.schedule import generate_schedule

logger = logging.getLogger('roomrounds')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate a round-robin room schedule")
    parser.add_argument('--data-dir', default=None,
                        help="Directory with teams.yaml, rooms.csv and settings.yaml")
    parser.add_argument('--seed', default=None,
                        help="Tie-break seed (overrides settings.yaml)")
    parser.add_argument('--matches-per-team', type=int, default=None,
                        help="Times every pair must share a room (overrides settings.yaml)")
    parser.add_argument('--bracket', default=None,
                        help="Also plan an elimination bracket: single or double")
    parser.add_argument('--csv', dest='csv_path', default=None,
                        help="Write the schedule rows to this CSV file")
    parser.add_argument('--verbose', '-v', action='store_true', help="Log every round")
    return parser.parse_args(argv)


def print_bracket(bracket_rounds):
    print("\n--- Bracket Plan ---")
    for bracket_round in bracket_rounds:
        rooms = ", ".join(
            f"{slot.room.name} ({slot.teams_expected}{' ' + slot.side if slot.side else ''})"
            for slot in bracket_round.slots
        )
        print(f"{bracket_round.label}: {rooms}")
    summary = bracket_summary(bracket_rounds)
    print(f"{summary['total_rounds']} rounds, {summary['total_slots']} room slots")


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s'
    )

    data_dir = args.data_dir or get_data_dir()
    teams = load_teams(os.path.join(data_dir, TEAMS_FILENAME))
    try:
        settings = load_settings(os.path.join(data_dir, SETTINGS_FILENAME))
        rooms = load_rooms(os.path.join(data_dir, ROOMS_FILENAME))
    except InvalidConfiguration as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not teams:
        print(f"No teams loaded. Check {os.path.join(data_dir, TEAMS_FILENAME)}", file=sys.stderr)
        return 1
    if not rooms:
        print(f"No rooms loaded. Check {os.path.join(data_dir, ROOMS_FILENAME)}", file=sys.stderr)
        return 1

    seed = args.seed if args.seed is not None else settings['seed']
    if args.matches_per_team is not None:
        matches_per_team = args.matches_per_team
    else:
        matches_per_team = settings['matches_per_team']
    bracket_mode = args.bracket or settings['elimination_mode']

    try:
        schedule = generate_schedule(teams, rooms, matches_per_team, tie_break=seed,
                                     max_teams_per_match=settings['max_teams_per_match'])
        bracket_rounds = plan_bracket(len(teams), rooms, bracket_mode) if bracket_mode else []
    except InvalidConfiguration as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except SchedulingError as e:
        print(f"Error: scheduling failed: {e}", file=sys.stderr)
        return 2

    print("--- Final Schedule ---")
    print(format_grid(schedule_grid(schedule)))
    if bracket_rounds:
        print_bracket(bracket_rounds)

    if args.csv_path:
        rows = schedule_rows(
            schedule, bracket_rounds,
            start_time=settings['start_time'],
            round_minutes=settings['round_minutes'],
            event_name=settings['event_name'],
            event_date=str(settings['event_date'] or '')
        )
        with open(args.csv_path, 'w', encoding='utf-8', newline='') as f:
            f.write(rows_to_csv(rows))
        logger.info("Wrote %d rows to %s", len(rows), args.csv_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
